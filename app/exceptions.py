"""
Error types raised by services and rendered as JSON by the app's exception handlers.

Every failure leaves the API as {"error": <short tag>, "message": <text>}.
"""
from typing import Any, Dict, Optional

from fastapi import status


class PaymentBackendError(Exception):
    """Base error carrying the HTTP status and error tag used in the response body."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error: str = "Internal server error"

    def __init__(self, message: str, *, error: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if error is not None:
            self.error = error
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.error, "message": self.message}


class ValidationError(PaymentBackendError):
    """Inbound request is missing required fields or carries invalid values."""

    status_code = status.HTTP_400_BAD_REQUEST
    error = "Missing required fields: planType, currency, amount"


class ProcessorCallError(PaymentBackendError):
    """Any failure talking to the payment processor (network, auth, rate limit, bad request, timeout)."""

    error = "Payment processor error"


class ProcessorNotConfiguredError(ProcessorCallError):
    error = "Payment processor not configured"


class CustomerCreationError(ProcessorCallError):
    """Customer record could not be created. Callers treat this as non-fatal."""

    error = "Customer creation failed"


class SignatureVerificationError(PaymentBackendError):
    """Webhook payload could not be authenticated."""

    status_code = status.HTTP_400_BAD_REQUEST
    error = "Webhook Error"


class WebhookProcessingError(PaymentBackendError):
    """A verified webhook event failed during dispatch."""

    error = "Webhook processing failed"


class EndpointNotFoundError(PaymentBackendError):
    status_code = status.HTTP_404_NOT_FOUND
    error = "Endpoint not found"

    def __init__(self, method: str, path: str):
        super().__init__(f"{method} {path} not found")
        self.method = method
        self.path = path
