"""
Election Workflow Service - Main FastAPI Application

This is the entry point for the FastAPI application.
It configures middleware, routes, and lifecycle handlers.
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config.settings import settings
from .domain.enums import EventLogBackend
from .api.routes import api_router
from .api.middleware import CorrelationIdMiddleware, register_error_handlers
from .services.election_service import ElectionService, build_election_service
from .utils.logger import setup_logging, get_logger

# Setup logging first
setup_logging()
logger = get_logger(__name__)

VERSION = "1.0.0"


def _uses_mongo() -> bool:
    return EventLogBackend(settings.event_log_backend) == EventLogBackend.MONGO


# =============================================================================
# Application Lifecycle
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.
    
    Startup:
        - Creates MongoDB indexes when events go to MongoDB
    
    Shutdown:
        - Closes database connections
    """
    logger.info(f"Starting {settings.app_name}...")
    
    if _uses_mongo():
        from .repositories.mongo_client import create_indexes
        create_indexes()
        logger.info("MongoDB indexes created")
    
    logger.info(
        "Application started successfully",
        extra={"phase": app.state.election_service.engine.phase.value}
    )
    
    yield
    
    logger.info("Shutting down...")
    if _uses_mongo():
        from .repositories.mongo_client import close_connection
        close_connection()
    logger.info("Application shutdown complete")


# =============================================================================
# Application Factory
# =============================================================================

def create_app(election_service: Optional[ElectionService] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.
    
    Args:
        election_service: Service to serve; a fresh one is wired from
            settings when omitted. Each application owns one election.
    
    Returns:
        Configured FastAPI application instance
    """
    application = FastAPI(
        title=settings.app_name,
        description="Permissioned single-election voting workflow",
        version=VERSION,
        lifespan=lifespan,
        docs_url="/api/docs" if settings.debug else None,
        redoc_url="/api/redoc" if settings.debug else None,
        openapi_url="/api/openapi.json" if settings.debug else None,
    )
    
    application.state.election_service = election_service or build_election_service(settings)
    
    _configure_middleware(application)
    register_error_handlers(application)
    _configure_routes(application)
    
    return application


def _configure_middleware(app: FastAPI) -> None:
    """Configure application middleware."""
    # allow_credentials must be False when allowing all origins
    allow_all = settings.cors_origins.strip() == "*"
    
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if allow_all else settings.cors_origins_list,
        allow_credentials=not allow_all,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Correlation-Id"],
    )
    
    app.add_middleware(CorrelationIdMiddleware)


def _configure_routes(app: FastAPI) -> None:
    """Configure application routes."""
    app.include_router(api_router, prefix="/api/v1")
    
    @app.get("/health", tags=["Health"])
    async def health():
        """
        Health check endpoint.
        
        Reports the election phase and, for MongoDB, event log connectivity.
        """
        engine = app.state.election_service.engine
        result = {
            "status": "healthy",
            "version": VERSION,
            "environment": settings.environment,
            "phase": engine.phase.value,
            "event_log": {"backend": settings.event_log_backend},
        }
        if _uses_mongo():
            from .repositories.mongo_client import health_check
            mongo_health = health_check()
            result["event_log"].update(mongo_health)
            if mongo_health.get("status") != "healthy":
                result["status"] = "degraded"
        return result
    
    @app.get("/", tags=["Health"])
    async def root():
        """Root endpoint with API information."""
        return {
            "name": settings.app_name,
            "version": VERSION,
            "docs": "/api/docs" if settings.debug else None
        }


# =============================================================================
# Application Instance
# =============================================================================

app = create_app()
