"""
Database connection and session management for SQLAlchemy 2.0.
Configured for async operations with PostgreSQL (asyncpg) or SQLite (aiosqlite).
"""
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    create_async_engine,
    async_sessionmaker,
)
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import StaticPool
from sqlalchemy import event, text
from urllib.parse import urlparse
import logging
import socket

from studio.config import settings

logger = logging.getLogger(__name__)

# Create declarative base for models
Base = declarative_base()

DATABASE_URL = settings.DATABASE_URL or "sqlite+aiosqlite:///:memory:"

_engine_args = {
    "echo": False,  # Set to True for SQL query logging in development
}

if DATABASE_URL.startswith("postgresql"):
    _engine_args.update({
        "pool_size": 10,
        "max_overflow": 20,
        "pool_pre_ping": True,  # Verify connections before using (handles stale connections)
        "pool_recycle": 3600,
        "connect_args": {
            "server_settings": {
                "application_name": "studio-backend"
            }
        }
    })
elif DATABASE_URL.startswith("sqlite"):
    _engine_args["connect_args"] = {"check_same_thread": False}
    if ":memory:" in DATABASE_URL:
        # A single shared connection, otherwise every session sees an empty database
        _engine_args["poolclass"] = StaticPool

engine = create_async_engine(DATABASE_URL, **_engine_args)


if engine.dialect.name == "sqlite":
    @event.listens_for(engine.sync_engine, "connect")
    def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
        """SQLite ignores ON DELETE clauses unless foreign keys are switched on."""
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


# Create async session factory
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


async def get_db() -> AsyncSession:
    """
    FastAPI dependency for database sessions.
    Provides async database session with automatic commit/rollback.

    Usage:
        @app.get("/endpoint")
        async def my_endpoint(db: AsyncSession = Depends(get_db)):
            # Use db session here
            pass
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception as e:
            await session.rollback()
            logger.error(f"Database session error: {str(e)}", exc_info=True)
            raise
        finally:
            await session.close()


def _validate_database_url(url: str) -> tuple[bool, str]:
    """
    Validate database URL and provide diagnostic information.
    Returns (is_valid, diagnostic_message)
    """
    if not url:
        return False, "DATABASE_URL is empty"

    if url.startswith("sqlite"):
        return True, f"SQLite database: {url}"

    try:
        parsed = urlparse(url)

        if not url.startswith(("postgresql://", "postgresql+asyncpg://")):
            return False, (
                "Invalid database URL scheme. Expected postgresql+asyncpg:// or sqlite+aiosqlite://, "
                f"got: {parsed.scheme}"
            )

        hostname = parsed.hostname
        if not hostname:
            return False, "No hostname found in DATABASE_URL"

        try:
            socket.getaddrinfo(hostname, None)
            dns_status = "DNS resolution successful"
        except socket.gaierror as e:
            dns_status = f"DNS resolution failed: {str(e)}. Check network connectivity and hostname."

        return True, f"URL format valid. Hostname: {hostname}, Port: {parsed.port or 5432}, Database: {parsed.path or '/postgres'}. {dns_status}"

    except ValueError as e:
        return False, f"Error parsing DATABASE_URL: {str(e)}"


async def create_tables():
    """Create all tables known to the models metadata (idempotent)."""
    # Models must be registered on Base before create_all
    from studio import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables created")


async def drop_tables():
    """Drop all tables. Used by the test suite."""
    from studio import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


async def init_db():
    """
    Initialize database connection.
    Verifies the connection and optionally creates tables.
    """
    is_valid, diagnostic = _validate_database_url(DATABASE_URL)
    if not is_valid:
        logger.error(f"Invalid DATABASE_URL: {diagnostic}")
        raise ValueError(f"Invalid DATABASE_URL: {diagnostic}")

    logger.info(f"Database URL validation: {diagnostic}")

    try:
        async with engine.begin() as conn:
            await conn.execute(text("SELECT 1"))
            logger.info("Database connection initialized successfully")
    except Exception as e:
        error_msg = str(e)
        if "connection refused" in error_msg.lower() or "timeout" in error_msg.lower():
            logger.error(
                f"Database connection failed - Connection refused/timeout: {error_msg}\n"
                f"Diagnostic: {diagnostic}"
            )
        elif "authentication failed" in error_msg.lower() or "password" in error_msg.lower():
            logger.error(
                f"Database connection failed - Authentication error: {error_msg}\n"
                f"Diagnostic: {diagnostic}"
            )
        else:
            logger.error(
                f"Database connection failed ({type(e).__name__}): {error_msg}\n"
                f"Diagnostic: {diagnostic}"
            )
        raise

    if settings.DB_CREATE_TABLES or not settings.DATABASE_URL:
        await create_tables()


async def close_db():
    """
    Close database connections.
    Can be used for shutdown events.
    """
    await engine.dispose()
    logger.info("Database connections closed")
