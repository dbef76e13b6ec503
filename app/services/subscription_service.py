"""Subscription status lookup by customer email."""
from concurrent.futures import Executor
from typing import Optional

import structlog

from app.config import Settings
from app.psp.adapter import PSPAdapter
from app.schemas_pkg.subscriptions import SubscriptionOut, SubscriptionStatusResponse
from app.services.processor_calls import call_processor

logger = structlog.get_logger(__name__)

DEFAULT_PLAN_NAME = "Premium"
ACTIVE_SUBSCRIPTION_LIMIT = 10


class SubscriptionService:

    def __init__(self, adapter: PSPAdapter, settings: Settings, executor: Optional[Executor] = None):
        self.adapter = adapter
        self.timeout = settings.STRIPE_TIMEOUT_SECONDS
        self.executor = executor

    async def get_subscription_status(self, email: str) -> SubscriptionStatusResponse:
        customer = await call_processor(
            self.adapter.find_customer_by_email, email, timeout=self.timeout, executor=self.executor
        )
        if customer is None:
            logger.info("subscription_status_customer_not_found")
            return SubscriptionStatusResponse(has_subscription=False, message="Customer not found")

        subscriptions = await call_processor(
            self.adapter.list_active_subscriptions,
            customer.id,
            limit=ACTIVE_SUBSCRIPTION_LIMIT,
            timeout=self.timeout,
            executor=self.executor,
        )
        if not subscriptions:
            logger.info("subscription_status_none_active", customer_id=customer.id)
            return SubscriptionStatusResponse(
                has_subscription=False, message="No active subscriptions found"
            )

        # First result in the processor's order (most recent first).
        subscription = subscriptions[0]
        logger.info(
            "subscription_status_active",
            customer_id=customer.id,
            subscription_id=subscription.id,
        )
        return SubscriptionStatusResponse(
            has_subscription=True,
            subscription=SubscriptionOut(
                id=subscription.id,
                status=subscription.status,
                current_period_end=subscription.current_period_end,
                plan_name=subscription.plan_nickname or DEFAULT_PLAN_NAME,
            ),
        )
