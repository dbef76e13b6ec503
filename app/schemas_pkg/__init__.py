# app/schemas_pkg/__init__.py

# Payment intent schemas
from .payments import (
    PaymentIntentRequest,
    PaymentIntentResponse,
)

# Subscription status schemas
from .subscriptions import (
    SubscriptionOut,
    SubscriptionStatusResponse,
)

__all__ = [
    # Payments
    "PaymentIntentRequest",
    "PaymentIntentResponse",

    # Subscriptions
    "SubscriptionOut",
    "SubscriptionStatusResponse",
]
