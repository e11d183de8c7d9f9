"""
Async database engine and session management for the prospect store.

The authorization core never touches the database; only the prospect
visibility routes read through these sessions.
"""
from collections.abc import AsyncGenerator
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import NullPool, StaticPool

from app.core import config


def create_engine_for(url: str) -> AsyncEngine:
    """
    Build an async engine for `url`.

    In-memory SQLite keeps one shared connection so every session sees the
    same tables; file SQLite uses NullPool; other backends keep the default pool.
    """
    kwargs = {"echo": False}
    if url.startswith("sqlite") and ":memory:" in url:
        kwargs["poolclass"] = StaticPool
        kwargs["connect_args"] = {"check_same_thread": False}
    elif url.startswith("sqlite"):
        kwargs["poolclass"] = NullPool
    return create_async_engine(url, **kwargs)


def create_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


engine = create_engine_for(config.SQLALCHEMY_DATABASE_URL)
AsyncSessionLocal = create_session_factory(engine)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency for getting async database sessions.

    Usage in FastAPI routes:
        @router.get("/prospects")
        async def list_prospects(db: AsyncSession = Depends(get_db)):
            result = await db.execute(select(Prospect))
            return result.scalars().all()
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def init_db(bind: AsyncEngine | None = None):
    """
    Create all tables on `bind` (the application engine by default).
    Called on application startup.
    """
    from app.core.database.base import Base

    # Import all models to ensure they're registered with SQLAlchemy
    from app.features.prospects.models import Prospect  # noqa: F401

    async with (bind or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
