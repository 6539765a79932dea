"""
Questboard API - Main Application
"""
import logging
import sys
import traceback
import uuid
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
import uvicorn

from .core.config import settings
from .core.exceptions import QuestboardException
from .core.rate_limit import limiter
from .database import init_db, SessionLocal
from .api.v1 import api_router
from .services.scheduler_service import scheduler_service
from .services.storage_service import storage_service
from .services.task_service import task_service

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[
        logging.StreamHandler(sys.stdout),
    ]
)

logger = logging.getLogger(__name__)


def _reschedule_reminders(db) -> int:
    """Reminder jobs live in memory; restore them for open tasks"""
    scheduled = 0
    for task in task_service.list_tasks(db, "incomplete"):
        if task.has_reminder and scheduler_service.sync_task_reminder(task):
            scheduled += 1
    return scheduled


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    logger.info("Starting Questboard API...")

    try:
        # Initialize database
        init_db()
        logger.info("Database initialized")

        # Seed default categories, achievements and the default actor
        db = SessionLocal()
        try:
            created = storage_service.seed_defaults(db)
            if not any(created.values()):
                logger.info("Defaults already seeded")

            # Start the scheduler service
            scheduler_service.start()
            if settings.REMINDERS_ENABLED:
                logger.info(f"Restored {_reschedule_reminders(db)} task reminders")
        finally:
            db.close()

        logger.info(f"Debug mode: {settings.DEBUG}")
        logger.info(f"API running at: http://{settings.API_HOST}:{settings.API_PORT}")

    except Exception as e:
        logger.error(f"Failed to initialize backend: {e}")
        raise

    yield  # Application runs here

    # Shutdown
    logger.info("Shutting down Questboard API...")
    scheduler_service.shutdown()


# Create FastAPI application
app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Task and goal tracker with points, levels, achievements and leaderboards",
    version="1.0.0",
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
    openapi_url=f"{settings.API_V1_PREFIX}/openapi.json",
    lifespan=lifespan,
    redirect_slashes=False
)

# Initialize rate limiter
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(QuestboardException)
async def questboard_exception_handler(request: Request, exc: QuestboardException):
    """Not-found, validation and external-service errors are terminal for the request."""
    if exc.status_code >= 500:
        logger.error(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message}")
    else:
        logger.info(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "detail": exc.message,
            "type": type(exc).__name__,
        }
    )


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler for unexpected errors."""
    # Generate a unique error ID for tracking
    error_id = str(uuid.uuid4())[:8]

    # Always log the full error on the server
    logger.error(
        f"[ERROR_ID: {error_id}] Unhandled exception on {request.method} {request.url.path}",
        exc_info=True
    )

    if settings.DEBUG:
        # Development: return detailed error for debugging
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "detail": str(exc),
                "error_id": error_id,
                "type": type(exc).__name__,
                "path": str(request.url.path),
                "traceback": traceback.format_exc()
            }
        )
    else:
        # Production: return generic error, hide internal details
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "detail": "An internal server error occurred. Please try again later.",
                "error_id": error_id
            }
        )


# Root endpoint
@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "service": settings.PROJECT_NAME,
        "version": "1.0.0",
        "status": "running",
        "environment": settings.ENVIRONMENT,
        "docs_url": "/docs" if settings.DEBUG else "disabled",
        "features": [
            "Tasks and categories",
            "Points and levels",
            "Achievements",
            "Global, country and region leaderboards",
            "AI goal roadmaps",
            "Task reminders"
        ]
    }


# Health check endpoint
@app.get("/health")
async def health_check():
    """Health check endpoint for monitoring."""
    from questboard.utils.time_utils import to_utc_isoformat, utc_now

    scheduler_running = scheduler_service.scheduler.running if scheduler_service.scheduler else False
    scheduled_jobs = len(scheduler_service.get_scheduled_jobs()) if scheduler_service.scheduler else 0

    return {
        "status": "healthy",
        "timestamp": to_utc_isoformat(utc_now()),
        "service": "questboard-api",
        "version": "1.0.0",
        "services": {
            "database": {
                "status": "configured",
                "backend": "sqlite" if settings.is_sqlite else "postgresql"
            },
            "scheduler": {
                "status": "running" if scheduler_running else "stopped",
                "scheduled_jobs": scheduled_jobs
            }
        }
    }


# Include API router
app.include_router(api_router, prefix=settings.API_V1_PREFIX)


if __name__ == "__main__":
    # Run the application
    uvicorn.run(
        "questboard.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower()
    )
