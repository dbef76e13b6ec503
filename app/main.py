# app/main.py

from contextlib import asynccontextmanager
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

# ---------------------------------------------
# LOAD ENVIRONMENT VARIABLES
# ---------------------------------------------
load_dotenv()

from app.config import Settings, get_settings
from app.exceptions import EndpointNotFoundError, PaymentBackendError
from app.logging_config import configure_logging, get_logger
from app.middleware import INTERNAL_ERROR_BODY, request_id_middleware
from app.psp.adapter import PSPAdapter
from app.psp.stripe_adapter import StripeAdapter
from app.services.processor_calls import create_processor_executor
from app.services.webhook_events import WebhookDispatcher

# ---------------------------------------------
# IMPORT ROUTERS
# ---------------------------------------------
from app.routers import (
    health,
    payments,
    subscriptions,
    webhooks_stripe,
)

logger = get_logger(__name__)

CORS_METHODS = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]
CORS_HEADERS = ["Content-Type", "Authorization", "stripe-signature"]


def _original_url(request: Request) -> str:
    url = request.url.path
    if request.url.query:
        url = f"{url}?{request.url.query}"
    return url


def register_exception_handlers(app: FastAPI) -> None:

    @app.exception_handler(PaymentBackendError)
    async def payment_backend_error_handler(request: Request, exc: PaymentBackendError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        # Unknown paths and known paths with the wrong method are both "not found".
        if exc.status_code in (404, 405):
            err = EndpointNotFoundError(request.method, _original_url(request))
            return JSONResponse(status_code=err.status_code, content=err.to_dict())
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": "Request failed", "message": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_error_handler(request: Request, exc: RequestValidationError):
        details = "; ".join(
            f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg')}"
            for err in exc.errors()
        )
        return JSONResponse(
            status_code=400,
            content={"error": "Invalid request", "message": details or "Malformed request body"},
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.error("unhandled_exception", error=str(exc), error_type=type(exc).__name__)
        return JSONResponse(
            status_code=500,
            content=INTERNAL_ERROR_BODY,
        )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Release the processor thread pool on shutdown."""
    yield
    app.state.processor_executor.shutdown(wait=False, cancel_futures=True)


def create_app(
    settings: Optional[Settings] = None,
    adapter: Optional[PSPAdapter] = None,
    dispatcher: Optional[WebhookDispatcher] = None,
) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.APP_NAME, settings.ENVIRONMENT, settings.LOG_LEVEL)

    # ---------------------------------------------
    # APP INIT
    # ---------------------------------------------
    app = FastAPI(
        title=settings.APP_NAME,
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.psp_adapter = adapter or StripeAdapter.from_settings(settings)
    app.state.processor_executor = create_processor_executor(settings.PROCESSOR_MAX_WORKERS)
    app.state.webhook_dispatcher = dispatcher or WebhookDispatcher()

    # ---------------------------------------------
    # MIDDLEWARE (last added runs first)
    # ---------------------------------------------
    app.middleware("http")(request_id_middleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=CORS_METHODS,
        allow_headers=CORS_HEADERS,
    )

    register_exception_handlers(app)

    # ---------------------------------------------
    # ROUTERS
    # ---------------------------------------------
    app.include_router(health.router, tags=["Health"])
    app.include_router(payments.router, tags=["Payments"])
    app.include_router(subscriptions.router, tags=["Subscriptions"])
    app.include_router(webhooks_stripe.router)

    return app


app = create_app()
