"""
Stripe webhook event types and the dispatcher that routes verified events to handlers.

The recognised handlers only log the affected object; they are the hook points
where persistence would go.
"""
from enum import Enum
from typing import Callable, Dict

import structlog

from app.psp.adapter import WebhookEvent

logger = structlog.get_logger(__name__)

WebhookHandler = Callable[[WebhookEvent], None]


class WebhookEventType(str, Enum):
    PAYMENT_INTENT_SUCCEEDED = "payment_intent.succeeded"
    PAYMENT_INTENT_FAILED = "payment_intent.payment_failed"
    INVOICE_PAYMENT_SUCCEEDED = "invoice.payment_succeeded"
    SUBSCRIPTION_DELETED = "customer.subscription.deleted"
    UNHANDLED = "unhandled"

    @classmethod
    def from_tag(cls, tag: str) -> "WebhookEventType":
        """Map a Stripe event type string to a member; unknown tags map to UNHANDLED."""
        try:
            return cls(tag)
        except ValueError:
            return cls.UNHANDLED


def _object_id(event: WebhookEvent) -> str:
    return event.data["object"]["id"]


def handle_payment_succeeded(event: WebhookEvent) -> None:
    logger.info("payment_succeeded", payment_intent_id=_object_id(event))


def handle_payment_failed(event: WebhookEvent) -> None:
    logger.info("payment_failed", payment_intent_id=_object_id(event))


def handle_invoice_payment_succeeded(event: WebhookEvent) -> None:
    logger.info("invoice_payment_succeeded", invoice_id=_object_id(event))


def handle_subscription_deleted(event: WebhookEvent) -> None:
    logger.info("subscription_deleted", subscription_id=_object_id(event))


def handle_unhandled_event(event: WebhookEvent) -> None:
    logger.info("webhook_event_unhandled", event_type=event.type)


DEFAULT_HANDLERS: Dict[WebhookEventType, WebhookHandler] = {
    WebhookEventType.PAYMENT_INTENT_SUCCEEDED: handle_payment_succeeded,
    WebhookEventType.PAYMENT_INTENT_FAILED: handle_payment_failed,
    WebhookEventType.INVOICE_PAYMENT_SUCCEEDED: handle_invoice_payment_succeeded,
    WebhookEventType.SUBSCRIPTION_DELETED: handle_subscription_deleted,
    WebhookEventType.UNHANDLED: handle_unhandled_event,
}


class WebhookDispatcher:
    """Holds exactly one handler per WebhookEventType member."""

    def __init__(self, handlers: Dict[WebhookEventType, WebhookHandler] = None):
        self._handlers = dict(DEFAULT_HANDLERS)
        if handlers:
            self._handlers.update(handlers)

        missing = [member.value for member in WebhookEventType if member not in self._handlers]
        if missing:
            raise ValueError(f"No webhook handler registered for: {', '.join(missing)}")

    def register(self, event_type: WebhookEventType, handler: WebhookHandler) -> None:
        self._handlers[event_type] = handler

    def dispatch(self, event: WebhookEvent) -> WebhookEventType:
        event_type = WebhookEventType.from_tag(event.type)
        self._handlers[event_type](event)
        return event_type
