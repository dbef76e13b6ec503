from typing import Optional

from fastapi import APIRouter, Depends, Header, Request
from starlette.concurrency import run_in_threadpool

from ..deps import get_webhook_service
from ..services.webhook_service import WebhookService

router = APIRouter(tags=["webhooks"])


@router.post("/webhook")
async def webhook_stripe(
    request: Request,
    service: WebhookService = Depends(get_webhook_service),
    stripe_signature: Optional[str] = Header(default=None, alias="stripe-signature"),
):
    # Signature is computed over the exact bytes Stripe sent; never re-serialize.
    payload = await request.body()
    # Dispatch runs registered handlers, which may block.
    return await run_in_threadpool(service.handle, payload, stripe_signature)
