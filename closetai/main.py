"""Main FastAPI application entry point.

This module serves as the primary entry point for the ClosetAI recommendation
service. It handles all core application setup including:
- FastAPI application initialization and configuration
- Middleware setup for CORS, correlation ids and request logging
- Database initialization
- Route registration and API versioning
- Application startup/shutdown handlers
- Health check endpoint
"""

# Standard library imports
import time
from contextlib import asynccontextmanager

# FastAPI imports
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

# Internal imports
from closetai.core.config import get_settings
from closetai.core.exceptions import AppException
from closetai.core.logging import (
    CorrelationMiddleware,
    RequestLoggingMiddleware,
    get_logger,
    setup_logging,
)
from closetai.core.security import security_middleware
from closetai.database.session import init_db, session_manager
from closetai.api.v1.router import api_router
from closetai.services.weather import close_weather_service, get_weather_service

# Configure logging
logger = get_logger(__name__)
settings = get_settings()

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Handle application startup and shutdown events.
    This context manager ensures proper resource management.
    """
    # Startup
    setup_logging()
    logger.info("Starting up application", environment=settings.ENVIRONMENT.value)
    try:
        await init_db()
        logger.info("Database initialized successfully")

        app.state.weather_service = await get_weather_service()
        logger.info("Services initialized", weather=app.state.weather_service.status)

        yield  # Application runs here

    except Exception as e:
        logger.error("Startup failed", error=e)
        raise

    finally:
        logger.info("Shutting down application")
        if hasattr(app.state, "weather_service"):
            del app.state.weather_service
        await close_weather_service()
        await session_manager.engine.dispose()
        logger.info("Cleanup completed")

def create_application() -> FastAPI:
    """
    Create and configure the FastAPI application instance.
    Handles all application setup including middleware, routes, and error handlers.
    """
    app = FastAPI(
        title=f"{settings.APP_NAME} API",
        description="Wardrobe-based outfit recommendation service",
        version=settings.APP_VERSION,
        lifespan=lifespan,
        docs_url="/api/docs" if not settings.PROD else None,
        redoc_url="/api/redoc" if not settings.PROD else None,
    )

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Add custom middleware
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CorrelationMiddleware)
    app.middleware("http")(security_middleware)

    # Register exception handlers
    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException):
        """Handle custom application exceptions"""
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail}
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Handle request validation errors with clear messages"""
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": jsonable_errors(exc)}
        )

    # Register routers
    app.include_router(
        api_router,
        prefix=settings.API_V1_PREFIX
    )

    # Health check endpoint
    @app.get("/health", tags=["Health"])
    async def health_check():
        """
        Health check endpoint for monitoring systems.
        Checks critical service dependencies.
        """
        database_ok = await session_manager.healthcheck()
        weather = getattr(app.state, "weather_service", None)
        services_status = {
            "database": "connected" if database_ok else "unavailable",
            "weather_service": weather.status if weather else "not_initialized",
        }

        if not database_ok:
            return JSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                content={"status": "unhealthy", "services": services_status}
            )

        return {
            "status": "healthy",
            "timestamp": time.time(),
            "version": app.version,
            "services": services_status,
            "database_metrics": session_manager.get_metrics()
        }

    return app

def jsonable_errors(exc: RequestValidationError) -> list:
    """Validation errors without the non-serializable ``ctx`` payloads."""
    return [
        {key: value for key, value in error.items() if key != "ctx"}
        for error in exc.errors()
    ]

# Create the application instance
app = create_application()

# Only run the server directly in development
if __name__ == "__main__":
    import uvicorn

    # Run the application with hot reload in development
    uvicorn.run(
        "closetai.main:app",
        host="0.0.0.0",
        port=8000,
        reload=not settings.PROD,
        log_level="debug" if not settings.PROD else "info"
    )
