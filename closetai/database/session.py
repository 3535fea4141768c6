"""Database session management for the ClosetAI application.

This module handles all aspects of database connection management including:
- Async SQLAlchemy session management
- Connection pooling configuration
- Transaction handling
- Slow query logging and metrics
- Operation tracing

The implementation uses SQLAlchemy 2.0 async patterns. PostgreSQL (asyncpg)
is the production target; SQLite (aiosqlite) is used locally and in tests.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator
from sqlalchemy.ext.asyncio import (
    create_async_engine,
    AsyncSession,
    AsyncEngine,
    async_sessionmaker
)
from sqlalchemy.engine import make_url
from sqlalchemy.pool import StaticPool
from sqlalchemy import event, text
import time
from functools import wraps
from pathlib import Path
from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

from closetai.core.config import get_settings
from closetai.core.logging import get_logger

# Initialize components
logger = get_logger(__name__)
settings = get_settings()
tracer = trace.get_tracer(__name__)

def configure_sqlite(engine: AsyncEngine) -> None:
    """Let SQLAlchemy own transaction boundaries so SAVEPOINT works on SQLite."""
    @event.listens_for(engine.sync_engine, "connect")
    def do_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def do_begin(conn):
        conn.exec_driver_sql("BEGIN")

def create_engine_for_url(url: str, echo: bool = False) -> AsyncEngine:
    """Create an async engine with backend-appropriate pool settings."""
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in url or url.rstrip("/").endswith("sqlite+aiosqlite:"):
            kwargs["poolclass"] = StaticPool
        else:
            database = make_url(url).database
            if database:
                Path(database).parent.mkdir(parents=True, exist_ok=True)
        engine = create_async_engine(url, echo=echo, **kwargs)
        configure_sqlite(engine)
        return engine

    return create_async_engine(
        url,
        echo=echo,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_timeout=settings.DB_POOL_TIMEOUT,
        pool_recycle=settings.DB_POOL_RECYCLE,
        pool_pre_ping=True
    )

class DatabaseMetrics:
    """Track database performance metrics."""

    def __init__(self):
        self.query_count = 0
        self.slow_queries = 0
        self.error_count = 0

        # Configure thresholds
        self.slow_query_threshold = 1.0  # seconds

    def record_query(self, duration: float):
        """Record query execution metrics."""
        self.query_count += 1
        if duration > self.slow_query_threshold:
            self.slow_queries += 1

    def record_error(self):
        """Record database error."""
        self.error_count += 1

class SessionManager:
    """Manage database sessions and connections."""

    def __init__(self, url: str = None):
        """Initialize session manager with configuration."""
        self.engine = create_engine_for_url(url or settings.DATABASE_URL, echo=settings.SQL_ECHO)
        self.session_factory = self._create_session_factory()
        self.metrics = DatabaseMetrics()

        # Set up event listeners
        self._setup_engine_events()

    def _create_session_factory(self) -> async_sessionmaker:
        """Create session factory with proper configuration."""
        return async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False
        )

    def _setup_engine_events(self):
        """Set up SQLAlchemy engine event listeners."""
        @event.listens_for(self.engine.sync_engine, 'before_cursor_execute')
        def before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
            conn.info.setdefault('query_start_time', []).append(time.time())

        @event.listens_for(self.engine.sync_engine, 'after_cursor_execute')
        def after_cursor_execute(conn, cursor, statement, parameters, context, executemany):
            start_time = conn.info['query_start_time'].pop()
            duration = time.time() - start_time
            self.metrics.record_query(duration)

            # Log slow queries
            if duration > self.metrics.slow_query_threshold:
                logger.warning(
                    "Slow query detected",
                    duration=duration,
                    statement=statement
                )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Get database session with automatic cleanup."""
        session: AsyncSession = self.session_factory()
        try:
            yield session
        except Exception as e:
            self.metrics.record_error()
            logger.error("Session error", error=e)
            await session.rollback()
            raise
        finally:
            await session.close()

    @asynccontextmanager
    async def transaction(self) -> AsyncGenerator[AsyncSession, None]:
        """Get database session with transaction management."""
        async with self.session() as session:
            async with session.begin():
                yield session

    def get_metrics(self) -> dict:
        """Get current database metrics."""
        return {
            "query_count": self.metrics.query_count,
            "slow_queries": self.metrics.slow_queries,
            "error_count": self.metrics.error_count
        }

    async def healthcheck(self) -> bool:
        """Perform database health check."""
        try:
            async with self.session() as session:
                await session.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error("Database health check failed", error=e)
            return False

# Create global session manager
session_manager = SessionManager()

async def init_db(manager: SessionManager = None) -> None:
    """Create database tables if they do not exist."""
    from closetai.models.database import Base

    manager = manager or session_manager
    async with manager.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

# Dependency for FastAPI
async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for database sessions."""
    async with session_manager.session() as session:
        yield session

def with_tracing(func):
    """Decorator for database operation tracing."""
    @wraps(func)
    async def wrapper(*args, **kwargs):
        with tracer.start_as_current_span(
            f"db_{func.__name__}",
            kind=trace.SpanKind.CLIENT
        ) as span:
            try:
                result = await func(*args, **kwargs)
                span.set_status(Status(StatusCode.OK))
                return result
            except Exception as e:
                span.set_status(
                    Status(StatusCode.ERROR, str(e))
                )
                raise
    return wrapper
