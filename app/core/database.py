"""
Database configuration and session management
"""
import logging

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import declarative_base

from app.core.config import settings

logger = logging.getLogger(__name__)


def _engine_options(url: str) -> dict:
    options = {"echo": settings.DEBUG, "pool_pre_ping": True}
    # SQLite URLs (local runs) use SQLAlchemy's default pool
    if not url.startswith("sqlite"):
        options["pool_size"] = settings.DB_POOL_SIZE
        options["max_overflow"] = settings.DB_MAX_OVERFLOW
    return options


# Create async engine
engine = create_async_engine(settings.DATABASE_URL, **_engine_options(settings.DATABASE_URL))

# Create async session factory
# Recommendation collaborators open one session per call from this factory
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False
)

# Base class for models
Base = declarative_base()


async def init_db():
    """
    Initialize database
    Creates the template, preference and usage analytics tables if they don't exist
    """
    async with engine.begin() as conn:
        # Import all models to ensure they're registered
        from app.models import models
        
        await conn.run_sync(Base.metadata.create_all)
        logger.info(f"✅ Database tables created/verified: {', '.join(Base.metadata.tables)}")


async def close_db():
    """Dispose pooled connections on shutdown"""
    await engine.dispose()
    logger.info("Database connections closed")
