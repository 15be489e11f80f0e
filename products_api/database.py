"""
Products API - Database Client
==============================

What:  Owns the async SQLAlchemy engine and session factory for one database.
How:   ``Database`` is constructed explicitly by the app factory (or by the data
       CLI), stored on ``app.state.database`` and reached from route handlers
       through the ``get_db_session`` dependency. Nothing here is module-level
       state, so tests can point a fresh app at a throwaway SQLite file.
When:  ``connect()`` runs once in the application lifespan, ``dispose()`` on
       shutdown, ``reset()`` only from the ``--clear`` command.

Connection pooling is left at SQLAlchemy's defaults.
"""

import logging
from typing import AsyncGenerator, Optional

from fastapi import Request
from rich.console import Console
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

logger = logging.getLogger(__name__)

console = Console()

CONNECTION_FAILED_MESSAGE = "There was an error connecting to the database"


class Base(DeclarativeBase):
    """Declarative base shared by every ORM model (one metadata object)."""
    pass


class Database:
    """
    Persistence client: engine, session factory and lifecycle.

    Attributes:
        engine:          AsyncEngine managing the connection pool
        session_factory: Creates one AsyncSession per request
    """

    def __init__(self, url: str, echo: bool = False, engine: Optional[AsyncEngine] = None):
        self.engine = engine or create_async_engine(url, pool_pre_ping=True, echo=echo)
        # expire_on_commit=False: ORM objects stay readable after commit,
        # responses are built from them outside the session
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    async def connect(self) -> bool:
        """
        Verify connectivity and create missing tables.

        Returns True on success. On failure the error is logged and a red
        console message is printed, but nothing is raised: the server keeps
        running and individual requests fail with 500 until the database
        comes back.
        """
        # Registers Product on Base.metadata before create_all
        from products_api.models import product  # noqa: F401

        try:
            async with self.engine.begin() as conn:
                await conn.execute(text("SELECT 1"))
                await conn.run_sync(Base.metadata.create_all)
        except Exception as e:
            logger.error("%s: %s", CONNECTION_FAILED_MESSAGE, e, exc_info=True)
            console.print(f"[bold red]{CONNECTION_FAILED_MESSAGE}[/bold red]")
            return False

        logger.info("Database connected: %s", self.engine.url.render_as_string(hide_password=True))
        console.print("[bold blue]Database successfully connected[/bold blue]")
        return True

    async def reset(self) -> None:
        """
        Drop and recreate every table registered on ``Base.metadata``.

        Destructive: all product rows are lost. Errors propagate to the caller.
        """
        from products_api.models import product  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
            await conn.run_sync(Base.metadata.create_all)
        logger.info("All tables dropped and recreated")

    async def dispose(self) -> None:
        """Close every pooled connection."""
        await self.engine.dispose()


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency yielding one session per request.

    Commits when the handler returns normally, rolls back and re-raises when
    it raises, and always closes the session.

    Example:
        @router.get("/products")
        async def list_products(db: AsyncSession = Depends(get_db_session)):
            ...
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
