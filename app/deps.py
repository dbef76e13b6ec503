from concurrent.futures import Executor

from fastapi import Depends, Request

from .config import Settings
from .psp.adapter import PSPAdapter
from .services.payment_service import PaymentService
from .services.subscription_service import SubscriptionService
from .services.webhook_events import WebhookDispatcher
from .services.webhook_service import WebhookService


def get_settings(request: Request) -> Settings:
    """Settings built once by the application factory."""
    return request.app.state.settings


def get_psp_adapter(request: Request) -> PSPAdapter:
    return request.app.state.psp_adapter


def get_processor_executor(request: Request) -> Executor:
    return request.app.state.processor_executor


def get_webhook_dispatcher(request: Request) -> WebhookDispatcher:
    return request.app.state.webhook_dispatcher


def get_payment_service(
    adapter: PSPAdapter = Depends(get_psp_adapter),
    settings: Settings = Depends(get_settings),
    executor: Executor = Depends(get_processor_executor),
) -> PaymentService:
    return PaymentService(adapter, settings, executor)


def get_subscription_service(
    adapter: PSPAdapter = Depends(get_psp_adapter),
    settings: Settings = Depends(get_settings),
    executor: Executor = Depends(get_processor_executor),
) -> SubscriptionService:
    return SubscriptionService(adapter, settings, executor)


def get_webhook_service(
    adapter: PSPAdapter = Depends(get_psp_adapter),
    dispatcher: WebhookDispatcher = Depends(get_webhook_dispatcher),
) -> WebhookService:
    return WebhookService(adapter, dispatcher)
