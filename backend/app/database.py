"""
Samanvi Backend — Database Session Management
===============================================

What:  Async SQLAlchemy engine, session factory, and FastAPI dependency.
Why:   Centralizes all database connection logic in one place.
How:   `Database` owns one async engine with connection pooling and a session
       factory. The application factory constructs exactly one instance and
       stores it on `app.state.database`; the `get_db_session` dependency pulls
       it from there, so no module-level engine exists.
Who:   Constructed by create_app(); used by route handlers via Depends(),
       by the health check, and by the seed script.
When:  Engine is created with the app; sessions are created per-request;
       the engine is disposed in the lifespan shutdown phase.

Connection Pooling Strategy (PostgreSQL):
    pool_size=20:     Persistent connections for normal load
    max_overflow=10:  Temporary connections for traffic spikes (total max = 30)
    pool_pre_ping:    Validates connections before use (catches stale connections)
    pool_recycle=3600: Recycles connections every hour

In-memory SQLite (tests) gets a StaticPool instead, so the database is
shared by every session of one engine. File-backed SQLite keeps a normal
pool: each session has its own connection and SQLite's locking applies.
"""

from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from app.config import Settings


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    All models inherit from this class so they share a single metadata object,
    which Alembic reads for migrations and tests use for create_all().
    """
    pass


class Database:
    """
    Owner of the engine and session factory for one running application.

    Why a class (not module globals):
        The process entry point decides which database the app talks to.
        Tests build an app against in-memory SQLite; production builds one
        against PostgreSQL. Nothing is created as an import side effect.
    """

    def __init__(self, url: str, *, echo: bool = False, **engine_kwargs) -> None:
        if url.startswith("sqlite"):
            engine_kwargs.setdefault("connect_args", {"check_same_thread": False})
            if ":memory:" in url:
                engine_kwargs.setdefault("poolclass", StaticPool)
        self.url = url
        self.engine: AsyncEngine = create_async_engine(url, echo=echo, **engine_kwargs)
        # expire_on_commit=False: response shaping reads attributes after commit
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        """Build the engine with pool sizing from configuration."""
        kwargs = {}
        if not settings.database_url.startswith("sqlite"):
            kwargs.update(
                pool_size=settings.db_pool_size,
                max_overflow=settings.db_max_overflow,
                pool_pre_ping=settings.db_pool_pre_ping,
                pool_recycle=3600,
            )
        return cls(settings.database_url, echo=settings.log_level == "DEBUG", **kwargs)

    async def create_all(self) -> None:
        """Create every mapped table. Used by tests; production uses Alembic."""
        # Import models so they register with Base.metadata
        import app.models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def ping(self) -> None:
        """Run SELECT 1; raises if the database is unreachable."""
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    async def dispose(self) -> None:
        """
        What:  Gracefully closes all connections in the pool.
        When:  Called during application shutdown (lifespan handler).
        """
        await self.engine.dispose()


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Creates a new session from the app's Database
        2. Yields it to the route handler
        3. On success: commits the transaction
        4. On error: rolls back and re-raises for the global error handlers
        5. Always: closes the session (returns connection to pool)

    Repositories flush after every write, so constraint violations surface
    inside the handler and reach the error mapper as domain errors.
    """
    database: Database = request.app.state.database
    async with database.session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
