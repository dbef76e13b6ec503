from typing import Optional

from fastapi import APIRouter, Body, Depends
import structlog

from ..deps import get_payment_service
from ..exceptions import PaymentBackendError, ValidationError
from ..schemas_pkg.payments import PaymentIntentRequest, PaymentIntentResponse
from ..services.payment_service import PaymentService

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.post("/create-payment-intent", response_model=PaymentIntentResponse)
async def create_payment_intent(
    payload: Optional[PaymentIntentRequest] = Body(None),
    service: PaymentService = Depends(get_payment_service),
):
    """
    Create an unconfirmed payment intent and return its client secret.

    The customer record is best effort; the intent is created even when it fails.
    """
    # An absent or null body is treated as an empty request.
    payload = payload or PaymentIntentRequest()
    logger.info("payment_intent_requested", plan_type=payload.plan_type)
    try:
        return await service.create_payment_intent(payload)
    except ValidationError as e:
        logger.warning("payment_intent_rejected", error=e.message)
        raise
    except Exception as e:
        logger.error(
            "payment_intent_creation_failed",
            error=str(e),
            error_type=type(e).__name__,
        )
        raise PaymentBackendError(str(e), error="Payment intent creation failed") from e
