from pydantic import BaseModel
from pydantic.alias_generators import to_camel
from typing import Optional


class SubscriptionOut(BaseModel):
    id: str
    status: str
    current_period_end: Optional[int] = None  # epoch seconds
    plan_name: str

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
    }


class SubscriptionStatusResponse(BaseModel):
    has_subscription: bool
    subscription: Optional[SubscriptionOut] = None
    message: Optional[str] = None

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
    }
