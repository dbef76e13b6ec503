"""Tests for POST /create-payment-intent."""
import asyncio

import pytest
from httpx import ASGITransport, AsyncClient

from app.exceptions import CustomerCreationError, ProcessorCallError, ValidationError
from app.main import create_app
from app.schemas_pkg.payments import PaymentIntentRequest
from app.services.payment_service import validate_payment_request

MISSING_FIELDS = "Missing required fields: planType, currency, amount"


async def _post(app, body, **kwargs):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        return await client.post("/create-payment-intent", json=body, **kwargs)


@pytest.mark.asyncio
async def test_guest_payment_intent(app, fake_adapter):
    response = await _post(app, {"planType": "monthly", "currency": "USD", "amount": 999})

    assert response.status_code == 200
    assert response.json() == {
        "clientSecret": "pi_test_123_secret_abc",
        "paymentIntentId": "pi_test_123",
        "customerId": None,
    }
    assert fake_adapter.call_names() == ["create_payment_intent"]
    _, params = fake_adapter.calls[0]
    assert params["amount"] == 999
    assert params["currency"] == "usd"
    assert params["customer_id"] is None
    assert params["description"] == "French Learning App - monthly subscription"
    assert params["metadata"] == {
        "planType": "monthly",
        "customerEmail": "guest",
        "source": "french-learning-app",
    }


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body",
    [
        {"currency": "usd", "amount": 999},
        {"planType": "monthly", "amount": 999},
        {"planType": "monthly", "currency": "usd"},
        {"planType": "", "currency": "usd", "amount": 999},
        {"planType": "monthly", "currency": "usd", "amount": 0},
        {},
    ],
)
async def test_missing_required_fields_rejected_before_processor_call(app, fake_adapter, body):
    response = await _post(app, body)

    assert response.status_code == 400
    assert response.json()["error"] == MISSING_FIELDS
    assert fake_adapter.calls == []


@pytest.mark.asyncio
async def test_negative_amount_rejected(app, fake_adapter):
    response = await _post(app, {"planType": "monthly", "currency": "usd", "amount": -5})

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid amount"
    assert fake_adapter.calls == []


@pytest.mark.asyncio
@pytest.mark.parametrize("currency", ["USD", "Eur", "gbp"])
async def test_currency_is_lower_cased(app, fake_adapter, currency):
    response = await _post(app, {"planType": "yearly", "currency": currency, "amount": 4999})

    assert response.status_code == 200
    assert fake_adapter.calls[-1][1]["currency"] == currency.lower()


@pytest.mark.asyncio
async def test_customer_created_when_email_given(app, fake_adapter):
    response = await _post(
        app,
        {
            "planType": "monthly",
            "currency": "usd",
            "amount": 999,
            "customerEmail": "marie@example.com",
        },
    )

    assert response.status_code == 200
    assert response.json()["customerId"] == "cus_test_123"
    assert fake_adapter.call_names() == ["create_customer", "create_payment_intent"]

    customer_params = fake_adapter.calls[0][1]
    assert customer_params["email"] == "marie@example.com"
    assert customer_params["name"] == "French Learning Student"
    assert customer_params["metadata"] == {"planType": "monthly", "source": "french-learning-app"}

    intent_params = fake_adapter.calls[1][1]
    assert intent_params["customer_id"] == "cus_test_123"
    assert intent_params["metadata"]["customerEmail"] == "marie@example.com"


@pytest.mark.asyncio
async def test_customer_name_forwarded(app, fake_adapter):
    await _post(
        app,
        {
            "planType": "monthly",
            "currency": "usd",
            "amount": 999,
            "customerEmail": "marie@example.com",
            "customerName": "Marie Curie",
        },
    )

    assert fake_adapter.calls[0][1]["name"] == "Marie Curie"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [CustomerCreationError("Invalid email address"), RuntimeError("connection reset")],
)
async def test_customer_failure_does_not_block_payment(app, fake_adapter, error):
    fake_adapter.customer_error = error

    response = await _post(
        app,
        {"planType": "monthly", "currency": "usd", "amount": 999, "customerEmail": "not-an-email"},
    )

    assert response.status_code == 200
    assert response.json()["customerId"] is None
    assert response.json()["paymentIntentId"] == "pi_test_123"
    assert fake_adapter.calls[-1][1]["customer_id"] is None


@pytest.mark.asyncio
async def test_processor_failure_returns_500(app, fake_adapter):
    fake_adapter.intent_error = ProcessorCallError("Your card was declined.")

    response = await _post(app, {"planType": "monthly", "currency": "usd", "amount": 999})

    assert response.status_code == 500
    assert response.json() == {
        "error": "Payment intent creation failed",
        "message": "Your card was declined.",
    }


@pytest.mark.asyncio
async def test_processor_timeout_returns_500(settings, fake_adapter):
    settings.STRIPE_TIMEOUT_SECONDS = 0.05
    fake_adapter.delay = 0.5
    app = create_app(settings, adapter=fake_adapter)

    response = await _post(app, {"planType": "monthly", "currency": "usd", "amount": 999})

    assert response.status_code == 500
    assert response.json()["error"] == "Payment intent creation failed"
    assert "did not respond" in response.json()["message"]


@pytest.mark.asyncio
async def test_timed_out_calls_do_not_starve_later_calls(settings, fake_adapter):
    settings.STRIPE_TIMEOUT_SECONDS = 0.2
    fake_adapter.delay = 1.0
    app = create_app(settings, adapter=fake_adapter)
    body = {"planType": "monthly", "currency": "usd", "amount": 999}

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        stalled = await asyncio.gather(
            *(client.post("/create-payment-intent", json=body) for _ in range(40))
        )
        fake_adapter.delay = 0
        response = await client.post("/create-payment-intent", json=body)
    app.state.processor_executor.shutdown(wait=False)

    assert all(r.status_code == 500 for r in stalled)
    assert response.status_code == 200
    assert response.json()["paymentIntentId"] == "pi_test_123"


@pytest.mark.asyncio
async def test_missing_body_is_missing_fields(app, fake_adapter):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.post("/create-payment-intent")

    assert response.status_code == 400
    assert response.json() == {
        "error": MISSING_FIELDS,
        "message": "Missing: planType, currency, amount",
    }
    assert fake_adapter.calls == []


@pytest.mark.asyncio
@pytest.mark.parametrize("amount", [True, 9.99, "999"])
async def test_non_integer_amount_rejected(app, fake_adapter, amount):
    response = await _post(app, {"planType": "monthly", "currency": "usd", "amount": amount})

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid request"
    assert fake_adapter.calls == []


@pytest.mark.asyncio
async def test_malformed_json_is_a_client_error(app, fake_adapter):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.post(
            "/create-payment-intent",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid request"
    assert fake_adapter.calls == []


def test_validator_names_missing_fields():
    with pytest.raises(ValidationError) as exc_info:
        validate_payment_request(PaymentIntentRequest(plan_type="monthly"))

    assert exc_info.value.status_code == 400
    assert exc_info.value.message == "Missing: currency, amount"


def test_validator_accepts_complete_request():
    validate_payment_request(PaymentIntentRequest(plan_type="monthly", currency="usd", amount=1))
