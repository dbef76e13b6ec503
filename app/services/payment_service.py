"""
Payment intent creation: validate the request, attach a customer when possible,
and hand back the client secret the frontend needs to confirm the payment.
"""
from concurrent.futures import Executor
from typing import List, Optional

import structlog

from app.config import Settings
from app.exceptions import ValidationError
from app.psp.adapter import Customer, PSPAdapter
from app.schemas_pkg.payments import PaymentIntentRequest, PaymentIntentResponse
from app.services.processor_calls import call_processor

logger = structlog.get_logger(__name__)


def validate_payment_request(request: PaymentIntentRequest) -> None:
    """
    Check the fields a payment intent cannot be created without.

    Raises:
        ValidationError: planType, currency or amount is missing/falsy, or
            amount is not a positive number of minor currency units
    """
    required = (
        ("planType", request.plan_type),
        ("currency", request.currency),
        ("amount", request.amount),
    )
    missing: List[str] = [name for name, value in required if not value]
    if missing:
        raise ValidationError(f"Missing: {', '.join(missing)}")

    if request.amount < 0:
        raise ValidationError(
            "amount must be a positive integer in minor currency units",
            error="Invalid amount",
        )


class PaymentService:
    """Orchestrates customer creation and payment intent creation."""

    def __init__(self, adapter: PSPAdapter, settings: Settings, executor: Optional[Executor] = None):
        self.adapter = adapter
        self.settings = settings
        self.timeout = settings.STRIPE_TIMEOUT_SECONDS
        self.executor = executor

    async def create_payment_intent(self, request: PaymentIntentRequest) -> PaymentIntentResponse:
        validate_payment_request(request)

        customer = None
        if request.customer_email:
            customer = await self._create_customer(request)

        intent = await call_processor(
            self.adapter.create_payment_intent,
            amount=request.amount,
            currency=request.currency.lower(),
            customer_id=customer.id if customer else None,
            description=f"{self.settings.PRODUCT_NAME} - {request.plan_type} subscription",
            metadata={
                "planType": request.plan_type,
                "customerEmail": request.customer_email or "guest",
                "source": self.settings.PAYMENT_SOURCE,
            },
            timeout=self.timeout,
            executor=self.executor,
        )

        logger.info(
            "payment_intent_created",
            payment_intent_id=intent.id,
            plan_type=request.plan_type,
            amount=request.amount,
            currency=request.currency.lower(),
            customer_id=customer.id if customer else None,
        )

        return PaymentIntentResponse(
            client_secret=intent.client_secret,
            payment_intent_id=intent.id,
            customer_id=customer.id if customer else None,
        )

    async def _create_customer(self, request: PaymentIntentRequest) -> Optional[Customer]:
        # Best effort: a failed customer record never blocks the payment.
        try:
            return await call_processor(
                self.adapter.create_customer,
                email=request.customer_email,
                name=request.customer_name or self.settings.DEFAULT_CUSTOMER_NAME,
                metadata={
                    "planType": request.plan_type,
                    "source": self.settings.PAYMENT_SOURCE,
                },
                timeout=self.timeout,
                executor=self.executor,
            )
        except Exception as e:
            logger.warning(
                "customer_creation_failed",
                error=str(e),
                error_type=type(e).__name__,
            )
            return None
