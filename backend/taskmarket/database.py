"""Database connection and session management with async SQLAlchemy."""

from typing import Any, AsyncGenerator, Dict
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase

from taskmarket.config import settings


def _engine_options(database_url: str) -> Dict[str, Any]:
    """Pool sizing only applies to server databases; SQLite manages its own pool."""
    options: Dict[str, Any] = {
        "echo": settings.ENVIRONMENT == "development",
        "pool_pre_ping": True,
    }
    if not database_url.startswith("sqlite"):
        options["pool_size"] = 5
        options["max_overflow"] = 10
    return options


# Create async engine
engine = create_async_engine(
    settings.DATABASE_URL,
    **_engine_options(settings.DATABASE_URL),
)

# Create async session factory
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


# Base class for all models
class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency function that yields database sessions.

    Usage in FastAPI routes:
        @router.get("/")
        async def route(db: AsyncSession = Depends(get_db)):
            ...
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def init_models() -> None:
    """Create tables that do not exist yet (development convenience; use Alembic in production)."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
