from pydantic import BaseModel, Field, StrictInt
from pydantic.alias_generators import to_camel
from typing import Optional


class PaymentIntentRequest(BaseModel):
    # Required fields are checked by the payment service so that missing
    # values produce the documented 400 rather than a schema error.
    plan_type: Optional[str] = None
    currency: Optional[str] = Field(None, description="Three-letter ISO currency code, any casing")
    amount: Optional[StrictInt] = Field(None, description="Amount in smallest currency unit (e.g., cents)")
    customer_email: Optional[str] = None
    customer_name: Optional[str] = None

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
    }


class PaymentIntentResponse(BaseModel):
    client_secret: str
    payment_intent_id: str
    customer_id: Optional[str] = None

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
    }
