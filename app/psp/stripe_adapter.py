"""Stripe PSP Adapter Implementation."""
from typing import Any, Dict, List, Optional

import stripe

from ..config import Settings
from ..exceptions import (
    CustomerCreationError,
    ProcessorCallError,
    ProcessorNotConfiguredError,
    SignatureVerificationError,
)
from .adapter import Customer, PaymentIntent, PSPAdapter, PSPProvider, Subscription, WebhookEvent


def _get(obj: Any, key: str, default: Any = None) -> Any:
    """Read a key from a StripeObject or plain dict, treating null as missing."""
    if obj is None:
        return default
    try:
        value = obj[key]
    except (KeyError, TypeError, IndexError):
        return default
    return default if value is None else value


class StripeAdapter(PSPAdapter):
    """Stripe payment gateway adapter."""

    provider = PSPProvider.STRIPE

    def __init__(
        self,
        api_key: Optional[str],
        webhook_secret: Optional[str] = None,
        max_network_retries: int = 0,
        timeout: Optional[float] = None,
        **kwargs
    ):
        """Initialize Stripe adapter. `timeout` bounds each HTTP request the SDK makes."""
        super().__init__(api_key, webhook_secret, **kwargs)
        if api_key:
            stripe.api_key = api_key
        stripe.max_network_retries = max_network_retries
        if timeout:
            stripe.default_http_client = stripe.RequestsClient(timeout=timeout)

    @classmethod
    def from_settings(cls, settings: Settings) -> "StripeAdapter":
        return cls(
            api_key=settings.STRIPE_SECRET_KEY,
            webhook_secret=settings.STRIPE_WEBHOOK_SECRET,
            max_network_retries=settings.STRIPE_MAX_NETWORK_RETRIES,
            timeout=settings.STRIPE_TIMEOUT_SECONDS,
        )

    def _require_api_key(self):
        if not self.is_configured:
            raise ProcessorNotConfiguredError("STRIPE_SECRET_KEY is not set")

    def create_customer(
        self,
        email: str,
        name: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Customer:
        """Create Stripe customer."""
        self._require_api_key()
        try:
            customer = stripe.Customer.create(
                email=email,
                name=name,
                metadata=metadata or {},
            )
        except stripe.StripeError as e:
            raise CustomerCreationError(str(e)) from e
        return Customer(id=customer["id"], email=_get(customer, "email", email))

    def create_payment_intent(
        self,
        amount: int,
        currency: str,
        customer_id: Optional[str] = None,
        description: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> PaymentIntent:
        """Create Stripe payment intent, left unconfirmed for the client-side UI."""
        self._require_api_key()
        params: Dict[str, Any] = {
            "amount": amount,
            "currency": currency,
            "description": description,
            "metadata": metadata or {},
            "confirm": False,
            "automatic_payment_methods": {"enabled": True},
        }
        if customer_id:
            params["customer"] = customer_id

        try:
            intent = stripe.PaymentIntent.create(**params)
        except stripe.StripeError as e:
            raise ProcessorCallError(str(e)) from e

        return PaymentIntent(
            id=intent["id"],
            client_secret=intent["client_secret"],
            amount=_get(intent, "amount", amount),
            currency=_get(intent, "currency", currency),
            status=_get(intent, "status", "requires_payment_method"),
            customer_id=customer_id,
        )

    def find_customer_by_email(self, email: str) -> Optional[Customer]:
        """Look up at most one Stripe customer by exact email."""
        self._require_api_key()
        try:
            customers = stripe.Customer.list(email=email, limit=1)
        except stripe.StripeError as e:
            raise ProcessorCallError(str(e)) from e

        data = _get(customers, "data", [])
        if not data:
            return None
        return Customer(id=data[0]["id"], email=_get(data[0], "email", email))

    def list_active_subscriptions(self, customer_id: str, limit: int = 10) -> List[Subscription]:
        """List a customer's active subscriptions in Stripe's default order."""
        self._require_api_key()
        try:
            subscriptions = stripe.Subscription.list(
                customer=customer_id,
                status="active",
                limit=limit,
            )
        except stripe.StripeError as e:
            raise ProcessorCallError(str(e)) from e

        return [self._to_subscription(sub) for sub in _get(subscriptions, "data", [])]

    @staticmethod
    def _to_subscription(sub: Any) -> Subscription:
        items = _get(_get(sub, "items"), "data", [])
        first_item = items[0] if items else None
        price = _get(first_item, "price")
        # Newer API versions report the billing period on the subscription item.
        period_end = _get(sub, "current_period_end", _get(first_item, "current_period_end"))
        return Subscription(
            id=sub["id"],
            status=_get(sub, "status", "active"),
            current_period_end=period_end,
            plan_nickname=_get(price, "nickname"),
        )

    def verify_webhook(self, payload: bytes, signature: Optional[str]) -> WebhookEvent:
        """Verify Stripe webhook signature against the raw request body."""
        if not self.webhook_secret:
            raise SignatureVerificationError("Webhook secret not configured")
        if not signature:
            raise SignatureVerificationError("Missing stripe-signature header")

        try:
            event = stripe.Webhook.construct_event(payload, signature, self.webhook_secret)
        except stripe.SignatureVerificationError as e:
            raise SignatureVerificationError(str(e)) from e
        except ValueError as e:
            raise SignatureVerificationError(f"Invalid payload: {e}") from e

        return WebhookEvent(
            id=_get(event, "id"),
            type=_get(event, "type", ""),
            data=_get(event, "data", {}),
        )
