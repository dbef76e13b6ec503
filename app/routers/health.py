from fastapi import APIRouter, Depends

from ..config import Settings
from ..deps import get_psp_adapter, get_settings
from ..psp.adapter import PSPAdapter

router = APIRouter()


@router.get("/health")
def health(settings: Settings = Depends(get_settings)):
    return {
        "status": "OK",
        "message": settings.APP_NAME,
        "environment": settings.ENVIRONMENT,
    }


@router.get("/test")
def connectivity_test(
    settings: Settings = Depends(get_settings),
    adapter: PSPAdapter = Depends(get_psp_adapter),
):
    """Report whether the payment processor client has credentials."""
    return {
        "message": "Backend is working!",
        "stripe": "Connected" if adapter.is_configured else "Not connected",
        "environment": settings.ENVIRONMENT,
    }
