from sqlalchemy import create_engine
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool

from app.platform.config import settings


def _pool_options(url: str) -> dict:
    # SQLite connections are not shared between event loops or threads
    if url.startswith("sqlite"):
        return {"poolclass": NullPool}
    return {
        "pool_pre_ping": True,
        "pool_recycle": 1800,
        "pool_size": 20,
        "max_overflow": 30,
        "pool_timeout": 30,
    }


def to_sync_url(url: str) -> str:
    """Convert an async driver URL into its sync counterpart."""
    return url.replace("postgresql+asyncpg://", "postgresql://").replace(
        "sqlite+aiosqlite://", "sqlite://"
    )


engine = create_async_engine(
    settings.DATABASE_URL,
    echo=False,
    future=True,
    **_pool_options(settings.DATABASE_URL),
)
SessionLocal = async_sessionmaker(engine, expire_on_commit=False, autoflush=False, autocommit=False)


async def get_db():
    async with SessionLocal() as session:
        yield session


# Celery tasks run synchronously and share a single sync engine
_sync_engine = None
_sync_session_factory = None


def get_sync_engine():
    global _sync_engine, _sync_session_factory

    if _sync_engine is None:
        db_url = to_sync_url(settings.DATABASE_URL)
        _sync_engine = create_engine(db_url, **_pool_options(db_url))
        _sync_session_factory = sessionmaker(autocommit=False, autoflush=False, bind=_sync_engine)

    return _sync_engine


def get_sync_db():
    """Get a database session for Celery tasks."""
    get_sync_engine()
    return _sync_session_factory()


def create_tables():
    """Create every table on the configured database (local runs and tests)."""
    from app.platform.db.base import Base, import_models

    import_models()
    Base.metadata.create_all(bind=get_sync_engine())
