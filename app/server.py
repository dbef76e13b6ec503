"""Process entrypoint: serve the payment backend with uvicorn."""
import uvicorn

from app.logging_config import get_logger
from app.main import app

logger = get_logger(__name__)


def main():
    settings = app.state.settings
    logger.info(
        "payment_backend_starting",
        port=settings.PORT,
        environment=settings.ENVIRONMENT,
        stripe="Connected" if app.state.psp_adapter.is_configured else "Not connected",
    )
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    main()
