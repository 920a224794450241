import logging

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import NullPool

from core.config import settings

logger = logging.getLogger(__name__)


def _build_engine(database_url: str) -> AsyncEngine:
    url = make_url(database_url)
    logger.info(f"Connecting to database at {url.render_as_string(hide_password=True)}")

    if url.get_backend_name() == "sqlite":
        # aiosqlite connections are bound to the loop that opened them
        engine = create_async_engine(
            database_url, echo=settings.database_echo, poolclass=NullPool
        )

        @event.listens_for(engine.sync_engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return engine

    return create_async_engine(
        database_url,
        echo=settings.database_echo,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
        pool_pre_ping=True,
    )


db_engine: AsyncEngine = _build_engine(settings.database_url)

# Create async session maker to be used throughout the application
AsyncSessionLocal = async_sessionmaker(
    db_engine, class_=AsyncSession, expire_on_commit=False
)


# Base class for declarative models
class Base(DeclarativeBase):
    pass


def configure_engine(database_url: str) -> AsyncEngine:
    """
    Point the application at a different database.

    Rebinds the shared session factory in place, so modules that imported
    ``AsyncSessionLocal`` pick up the new engine too.
    """
    global db_engine
    db_engine = _build_engine(database_url)
    AsyncSessionLocal.configure(bind=db_engine)
    return db_engine


# Dependency to get DB session
async def get_db():
    async with AsyncSessionLocal() as session:
        yield session


# Function to initialize the database (create tables)
async def init_db():
    # Register all mappers on Base.metadata before create_all
    import database.models  # noqa: F401

    async with db_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


# Function to close database connections
async def close_db():
    """Close database engine and connections."""
    await db_engine.dispose()
