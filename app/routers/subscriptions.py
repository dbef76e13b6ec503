from fastapi import APIRouter, Depends
import structlog

from ..deps import get_subscription_service
from ..exceptions import PaymentBackendError
from ..schemas_pkg.subscriptions import SubscriptionStatusResponse
from ..services.subscription_service import SubscriptionService

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.get(
    "/subscription-status/{customer_email}",
    response_model=SubscriptionStatusResponse,
    response_model_exclude_unset=True,
)
async def get_subscription_status(
    customer_email: str,
    service: SubscriptionService = Depends(get_subscription_service),
):
    try:
        return await service.get_subscription_status(customer_email)
    except Exception as e:
        logger.error(
            "subscription_status_check_failed",
            error=str(e),
            error_type=type(e).__name__,
        )
        raise PaymentBackendError(str(e), error="Failed to check subscription status") from e
