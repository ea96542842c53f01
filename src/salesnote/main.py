"""Main application entrypoint for SalesNote Engine."""

from fastapi import FastAPI

from salesnote.api.middleware import HTTPErrorLoggingMiddleware
from salesnote.api.v1 import routes_health
from salesnote.api.v1.routes_minutes import router as minutes_router
from salesnote.api.v1.routes_recordings import router as recordings_router
from salesnote.api.v1.routes_transcribe import router as transcribe_router
from salesnote.core.config import settings
from salesnote.core.logging import setup_logging


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        FastAPI: Configured FastAPI application instance
    """
    # Initialize logging first
    setup_logging()

    app = FastAPI(
        title=settings.SERVICE_NAME,
        version=settings.SERVICE_VERSION,
    )

    app.add_middleware(HTTPErrorLoggingMiddleware)

    app.include_router(routes_health.router, tags=["health"])
    app.include_router(transcribe_router)
    app.include_router(minutes_router)
    app.include_router(recordings_router)

    return app


# Export app instance for ASGI servers
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8080)
