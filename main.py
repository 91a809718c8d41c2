"""
Vision Chat - Backend
FastAPI application serving the recruiting chat page and its streaming bot endpoint
"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from visionchat import __version__
from visionchat.config.settings import get_settings
from visionchat.api.routers import api_router, page_router
from visionchat.middleware.request_logging import RequestLoggingMiddleware
from visionchat.middleware.error_handling import (
    ErrorHandlingMiddleware,
    validation_exception_handler,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan context manager."""
    # Startup
    settings = get_settings()
    logging.info(f"Starting {settings.app_name} ({settings.environment})")

    if not settings.openai_api_key:
        logging.error("Completion API key missing! Check OPENAI_SECRET_KEY; only the scripted opener will work")
    else:
        logging.info(f"Completion API configured with model {settings.openai_model}")

    if not settings.contact_email:
        logging.warning("CONTACT_EMAIL is not set; the page's contact link will be empty")

    yield

    # Shutdown
    logging.info("Shutting down...")


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title=settings.app_name,
        description="Recruiting chat widget with a streaming completion relay",
        version=__version__,
        lifespan=lifespan,
        redirect_slashes=False
    )

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Add custom middleware
    app.add_middleware(ErrorHandlingMiddleware)
    # Enable request logging in both dev and production
    app.add_middleware(RequestLoggingMiddleware)

    # Malformed bot bodies are a 400, not FastAPI's default 422
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    # Include API router
    app.include_router(api_router, prefix="/api")
    app.include_router(page_router)

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=True
    )
