"""Shared fixtures: an in-memory PSP adapter, test settings and the ASGI app."""
import hashlib
import hmac
import time
from typing import Any, Dict, List, Optional, Tuple

import pytest

from app.config import Settings
from app.main import create_app
from app.psp.adapter import Customer, PaymentIntent, PSPAdapter, Subscription, WebhookEvent

WEBHOOK_SECRET = "whsec_test_secret"


class FakeAdapter(PSPAdapter):
    """Records every call; behaviour is steered through attributes."""

    def __init__(self, api_key: Optional[str] = "sk_test_fake", webhook_secret: Optional[str] = WEBHOOK_SECRET):
        super().__init__(api_key, webhook_secret)
        self.calls: List[Tuple[str, Dict[str, Any]]] = []
        self.customer_error: Optional[Exception] = None
        self.intent_error: Optional[Exception] = None
        self.lookup_error: Optional[Exception] = None
        self.delay = 0.0
        self.customers: Dict[str, Customer] = {}
        self.subscriptions: Dict[str, List[Subscription]] = {}

    def call_names(self) -> List[str]:
        return [name for name, _ in self.calls]

    def create_customer(self, email, name=None, metadata=None):
        self.calls.append(("create_customer", {"email": email, "name": name, "metadata": metadata}))
        if self.customer_error:
            raise self.customer_error
        return Customer(id="cus_test_123", email=email)

    def create_payment_intent(self, amount, currency, customer_id=None, description=None, metadata=None):
        self.calls.append((
            "create_payment_intent",
            {
                "amount": amount,
                "currency": currency,
                "customer_id": customer_id,
                "description": description,
                "metadata": metadata,
            },
        ))
        if self.delay:
            time.sleep(self.delay)
        if self.intent_error:
            raise self.intent_error
        return PaymentIntent(
            id="pi_test_123",
            client_secret="pi_test_123_secret_abc",
            amount=amount,
            currency=currency,
            status="requires_payment_method",
            customer_id=customer_id,
        )

    def find_customer_by_email(self, email):
        self.calls.append(("find_customer_by_email", {"email": email}))
        if self.lookup_error:
            raise self.lookup_error
        return self.customers.get(email)

    def list_active_subscriptions(self, customer_id, limit=10):
        self.calls.append(("list_active_subscriptions", {"customer_id": customer_id, "limit": limit}))
        return self.subscriptions.get(customer_id, [])[:limit]

    def verify_webhook(self, payload, signature):
        self.calls.append(("verify_webhook", {"signature": signature}))
        return WebhookEvent(type="payment_intent.succeeded", data={"object": {"id": "pi_test_123"}})


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        STRIPE_SECRET_KEY="sk_test_fake",
        STRIPE_WEBHOOK_SECRET=WEBHOOK_SECRET,
        ENVIRONMENT="test",
    )


@pytest.fixture
def fake_adapter():
    return FakeAdapter()


@pytest.fixture
def app(settings, fake_adapter):
    return create_app(settings, adapter=fake_adapter)


@pytest.fixture
def sign():
    """Build a stripe-signature header value for a payload."""

    def _sign(payload: bytes, secret: str = WEBHOOK_SECRET, timestamp: Optional[int] = None) -> str:
        timestamp = timestamp or int(time.time())
        signed_payload = f"{timestamp}.".encode() + payload
        signature = hmac.new(secret.encode(), signed_payload, hashlib.sha256).hexdigest()
        return f"t={timestamp},v1={signature}"

    return _sign


@pytest.fixture
def webhook_secret():
    return WEBHOOK_SECRET
