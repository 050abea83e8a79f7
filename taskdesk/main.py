"""
taskdesk - Main Application Entry Point

FastAPI application hosting the scheduled-task trigger, the dashboard API
and the background scheduler.
"""

import logging
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import settings
from .scheduler.jobs import get_scheduler_manager
from .database import init_database, close_database, get_database
from .utils.background_tasks import drain_background_tasks
from .utils.datetime_utils import get_utc_now, to_iso_utc

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout)
    ]
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup and shutdown."""
    # Startup
    logger.info("Starting taskdesk...")

    try:
        if await init_database():
            logger.info("PostgreSQL database initialized")
        else:
            logger.warning("PostgreSQL not configured or failed to initialize")
    except Exception as e:
        logger.warning(f"PostgreSQL init failed: {e}")

    if settings.enable_scheduler:
        try:
            scheduler = get_scheduler_manager()
            scheduler.start()
            logger.info("Scheduler started")
        except Exception as e:
            logger.warning(f"Scheduler failed: {e}")

    yield

    # Shutdown
    logger.info("Shutting down...")

    try:
        scheduler = get_scheduler_manager()
        scheduler.stop()
    except Exception as e:
        logger.warning(f"Failed to stop scheduler during shutdown: {e}")

    try:
        await drain_background_tasks(timeout=10.0)
    except Exception as e:
        logger.warning(f"Failed to drain background tasks during shutdown: {e}")

    try:
        await close_database()
    except Exception as e:
        logger.warning(f"Failed to close database during shutdown: {e}")

    logger.info("Shutdown complete")


# Create FastAPI app
app = FastAPI(
    title="taskdesk",
    description="Recurring task scheduling for the manager task dashboard",
    version="1.0.0",
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register web routes (scheduled task trigger, dashboard API)
from .web.routes import router as web_router
app.include_router(web_router)


@app.get("/")
async def root():
    """Root endpoint - health check."""
    return {
        "status": "healthy",
        "service": "taskdesk",
        "version": "1.0.0"
    }


@app.get("/health")
async def health_check():
    """Detailed health check endpoint."""
    db_health = {"status": "not_configured"}
    try:
        db = get_database()
        db_health = await db.health_check()
    except Exception as e:
        db_health = {"status": "error", "error": str(e)}

    return {
        "status": "healthy",
        "timestamp": to_iso_utc(get_utc_now()),
        "services": {
            "database": db_health.get("status", "unknown"),
            "notification_webhook": bool(settings.notification_webhook_url),
            "scheduler": settings.enable_scheduler,
        }
    }


@app.get("/api/status")
async def get_status():
    """Get scheduler job status."""
    scheduler = get_scheduler_manager()
    return {
        "scheduler": {
            "jobs": scheduler.get_job_status()
        }
    }


@app.post("/api/trigger-job/{job_id}")
async def trigger_job(job_id: str):
    """Manually trigger a scheduled job."""
    scheduler = get_scheduler_manager()

    if scheduler.trigger_job(job_id):
        return {"ok": True, "message": f"Job {job_id} triggered"}
    else:
        raise HTTPException(status_code=404, detail=f"Job {job_id} not found")


# Error handlers
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error", "detail": str(exc)}
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "taskdesk.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
