import structlog

from app.exceptions import SignatureVerificationError, WebhookProcessingError
from app.psp.adapter import PSPAdapter
from app.services.webhook_events import WebhookDispatcher

logger = structlog.get_logger(__name__)


class WebhookService:
    """
    Verify an inbound webhook against its raw body, then dispatch it once.

    Signature failures surface as SignatureVerificationError (400) and nothing is
    dispatched; handler failures surface as WebhookProcessingError (500).
    """

    def __init__(self, adapter: PSPAdapter, dispatcher: WebhookDispatcher):
        self.adapter = adapter
        self.dispatcher = dispatcher

    def handle(self, payload: bytes, signature: str = None) -> dict:
        try:
            event = self.adapter.verify_webhook(payload, signature)
        except SignatureVerificationError as e:
            logger.warning("webhook_signature_verification_failed", error=e.message)
            raise

        logger.info("webhook_signature_verified", event_type=event.type, event_id=event.id)

        try:
            self.dispatcher.dispatch(event)
        except Exception as e:
            logger.error(
                "webhook_processing_failed",
                error=str(e),
                event_type=event.type,
                event_id=event.id,
                error_type=type(e).__name__,
            )
            raise WebhookProcessingError(str(e)) from e

        return {"received": True}
