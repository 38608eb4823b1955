"""
FastAPI Template Recommendation Service - Main Application
Personalized agent template recommendations from usage, ratings and searches
"""
import logging
import os
from datetime import datetime
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from app.core.config import settings
from app.core.database import AsyncSessionLocal, close_db, init_db
from app.routers import recommendations, templates
from app.services import recommendations_service
from app.services.utils.constants import HTTP_BAD_REQUEST

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
)
logger = logging.getLogger(__name__)

# Scheduler instance
scheduler = AsyncIOScheduler()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager
    Handles startup and shutdown events
    """
    # Startup
    logger.info("🚀 Starting application...")
    logger.info(f"📅 Current time: {datetime.now().isoformat()}")
    
    # Initialize database
    await init_db()
    logger.info("✅ Database initialized")
    
    engine = recommendations_service.create_engine(AsyncSessionLocal)
    app.state.recommendation_engine = engine
    
    # Setup cron job for the daily preference cache clear
    if settings.ENABLE_CRON:
        scheduler.add_job(
            engine.clear_cache,
            trigger=CronTrigger(hour=settings.CACHE_CLEAR_CRON_HOUR, minute=0, timezone=settings.CRON_TIMEZONE),
            id="daily_cache_clear",
            name="Daily preference cache clear",
            replace_existing=True
        )
        scheduler.start()
        logger.info(f"⏰ Cron job scheduled: Daily at {settings.CACHE_CLEAR_CRON_HOUR:02d}:00 {settings.CRON_TIMEZONE}")
    
    yield
    
    # Shutdown
    logger.info("🛑 Shutting down application...")
    if scheduler.running:
        scheduler.shutdown()
        logger.info("⏰ Scheduler stopped")
    await close_db()


# Create FastAPI application
app = FastAPI(
    title="Template Recommendation Service",
    description="API for personalized, explainable agent template recommendations",
    version="1.0.0",
    lifespan=lifespan
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Restrict to known origins in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Root endpoint
@app.get("/")
async def root():
    """Root endpoint - health check"""
    return {
        "message": "Template Recommendation Service API",
        "status": "running",
        "version": "1.0.0",
        "timestamp": datetime.now().isoformat()
    }


# Include routers
app.include_router(recommendations.router, prefix="/recommendations", tags=["recommendations"])
app.include_router(templates.router, prefix="/templates", tags=["templates"])


# Malformed arguments raised by the engine
@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError):
    return JSONResponse(
        status_code=HTTP_BAD_REQUEST,
        content={"message": str(exc)}
    )


if __name__ == "__main__":
    import uvicorn
    
    # SSL configuration
    ssl_keyfile = settings.SSL_KEY_PATH if settings.SSL_ENABLED else None
    ssl_certfile = settings.SSL_CERT_PATH if settings.SSL_ENABLED else None
    
    if settings.SSL_ENABLED and ssl_keyfile and ssl_certfile and os.path.exists(ssl_keyfile) and os.path.exists(ssl_certfile):
        logger.info(f"🔒 Starting HTTPS server on port {settings.PORT}")
        uvicorn.run(
            "main:app",
            host="0.0.0.0",
            port=settings.PORT,
            ssl_keyfile=ssl_keyfile,
            ssl_certfile=ssl_certfile,
            reload=settings.DEBUG
        )
    else:
        if settings.SSL_ENABLED:
            logger.warning(f"⚠️  SSL certificates not found, starting HTTP server on port {settings.PORT}")
        else:
            logger.info(f"🌐 Starting HTTP server on port {settings.PORT}")
        uvicorn.run(
            "main:app",
            host="0.0.0.0",
            port=settings.PORT,
            reload=settings.DEBUG
        )
