# Standard library imports
from pathlib import Path
from contextlib import asynccontextmanager
import logging

# External package imports
from dotenv import load_dotenv
from fastapi import FastAPI

# Local application imports
from .api.v1 import recognize_router
from .di.container import get_container, reset_container

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup/shutdown events.

    Builds the DI container on startup, so configuration errors and unreadable
    reference images stop the server before it accepts requests, and releases
    the notification connection on shutdown.
    """
    container = get_container()
    logger.info(
        f"Recognizer API ready: {len(container.settings.sample_images)} reference image(s), "
        f"discovery_mode={container.settings.discovery_mode}"
    )

    yield

    await reset_container()
    logger.info("Application shutdown complete")


def create_application() -> FastAPI:
    """
    Create and configure FastAPI application.

    This function sets up the FastAPI application with:
    - Environment variable loading
    - API route registration

    Returns:
        Configured FastAPI application instance
    """
    # Load environment variables from .env file
    env_path = Path(__file__).resolve().parent.parent / ".env"
    load_dotenv(env_path)

    application = FastAPI(
        title="Recognizer API",
        version="1.0.0",
        description="Face recognition decisions for a live video source",
        lifespan=lifespan
    )

    # Register API routers
    application.include_router(recognize_router, prefix="/v1")

    return application


# Create application instance
app = create_application()
