"""
PSP Adapter Base Class and Interface.
Narrow surface the payment, subscription and webhook services need from a payment processor.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class PSPProvider(str, Enum):
    """Supported PSP providers."""
    STRIPE = "stripe"


@dataclass
class Customer:
    id: str
    email: Optional[str] = None


@dataclass
class PaymentIntent:
    id: str
    client_secret: str
    amount: int
    currency: str
    status: str
    customer_id: Optional[str] = None


@dataclass
class Subscription:
    id: str
    status: str
    current_period_end: Optional[int] = None
    plan_nickname: Optional[str] = None


@dataclass
class WebhookEvent:
    type: str
    data: Dict[str, Any] = field(default_factory=dict)
    id: Optional[str] = None


class PSPAdapter(ABC):
    """
    Base adapter for Payment Service Providers.
    All PSP implementations must inherit from this class.
    """

    provider: Optional[PSPProvider] = None

    def __init__(self, api_key: Optional[str], webhook_secret: Optional[str] = None, **kwargs):
        """
        Initialize PSP adapter with credentials.

        Args:
            api_key: Secret API key; None leaves the adapter unconfigured
            webhook_secret: Shared secret for webhook signature verification
            **kwargs: Provider-specific configuration
        """
        self.api_key = api_key
        self.webhook_secret = webhook_secret
        self.config = kwargs

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    @abstractmethod
    def create_customer(
        self,
        email: str,
        name: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Customer:
        """
        Create a customer record.

        Raises:
            CustomerCreationError: If the processor rejects the request
        """

    @abstractmethod
    def create_payment_intent(
        self,
        amount: int,
        currency: str,
        customer_id: Optional[str] = None,
        description: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> PaymentIntent:
        """
        Create an unconfirmed payment intent for the client to confirm.

        Args:
            amount: Amount in smallest currency unit (e.g., cents)
            currency: Lower-case ISO currency code (e.g., "usd")
            customer_id: Processor customer to attach, if any
            description: Human-readable description
            metadata: Additional metadata to attach

        Raises:
            ProcessorCallError: On any processor failure
        """

    @abstractmethod
    def find_customer_by_email(self, email: str) -> Optional[Customer]:
        """Return the first customer whose email matches exactly, or None."""

    @abstractmethod
    def list_active_subscriptions(self, customer_id: str, limit: int = 10) -> List[Subscription]:
        """Return active subscriptions in the processor's default order."""

    @abstractmethod
    def verify_webhook(self, payload: bytes, signature: Optional[str]) -> WebhookEvent:
        """
        Verify and parse webhook payload.

        Args:
            payload: Raw webhook payload bytes, exactly as received
            signature: Webhook signature from headers

        Raises:
            SignatureVerificationError: If the payload cannot be authenticated
        """

    def __repr__(self):
        return f"<{self.__class__.__name__}(provider={getattr(self, 'provider', 'unknown')})>"
