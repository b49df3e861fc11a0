"""FastAPI application factory."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api import api_router
from .middleware.logging import LoggingMiddleware


def create_app(service_instance, config) -> FastAPI:
    """Create and configure FastAPI application.

    Args:
        service_instance: ShortCodeService instance, or None when the
            lifespan builds it at startup
        config: Configuration instance

    Returns:
        Configured FastAPI app
    """
    app = FastAPI(
        title="Short Code Service",
        description="Maps arbitrary values to short base62 codes and back",
        version="1.0.0",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    # Routes reach the service through app state
    app.state.service = service_instance
    app.state.config = config

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_middleware(LoggingMiddleware)

    app.include_router(api_router, tags=["API"])

    return app
