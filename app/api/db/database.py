import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import Request
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlmodel import SQLModel

from app.api.core.config import Settings
from app.api.core.exceptions import PersistenceError

logger = logging.getLogger("app")

Base = SQLModel


def get_db_url(database_url: str, access_key: str = "") -> str:
    """
    Build the async SQLAlchemy URL for the datastore.

    Plain ``postgresql://`` / ``postgres://`` URLs are switched to the asyncpg
    driver and ``sqlite://`` to aiosqlite. The access key, when given, is set as
    the connection password.

    Args:
        database_url: Connection endpoint from configuration.
        access_key: Access key from configuration.

    Returns:
        str: URL usable with ``create_async_engine``.
    """
    url = make_url(database_url)

    if url.drivername in ("postgresql", "postgres"):
        url = url.set(drivername="postgresql+asyncpg")
    elif url.drivername == "sqlite":
        url = url.set(drivername="sqlite+aiosqlite")

    if access_key:
        url = url.set(password=access_key)

    return url.render_as_string(hide_password=False)


class Datastore:
    """
    Process-wide handle on the waitlist datastore.

    Built once at startup and handed to request handlers; each request opens
    its own session from the shared factory. When the connection settings are
    missing the handle still exists but every session request raises
    :class:`PersistenceError`.
    """

    def __init__(self, engine: AsyncEngine | None):
        self.engine = engine
        self.session_factory = (
            async_sessionmaker(
                bind=engine,
                class_=AsyncSession,
                expire_on_commit=False,
                autoflush=False,
            )
            if engine is not None
            else None
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Datastore":
        missing = settings.missing_datastore_settings()
        if missing:
            logger.warning(
                f"Datastore settings missing: {', '.join(missing)}. "
                "Signup requests will fail until they are configured."
            )

        if not settings.DATABASE_URL:
            return cls(engine=None)

        engine = create_async_engine(
            get_db_url(settings.DATABASE_URL, settings.DATABASE_KEY),
            echo=settings.DB_ECHO,
            future=True,
        )
        return cls(engine=engine)

    @property
    def is_configured(self) -> bool:
        return self.engine is not None

    async def create_tables(self) -> None:
        """Create the tables registered on ``SQLModel.metadata`` when missing."""
        if self.engine is None:
            logger.warning("Skipping table creation: datastore is not configured")
            return

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        if self.session_factory is None:
            raise PersistenceError("Datastore is not configured")

        async with self.session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    async def dispose(self) -> None:
        if self.engine is not None:
            await self.engine.dispose()


def get_datastore(request: Request) -> Datastore:
    """FastAPI dependency returning the handle created in the lifespan."""
    return request.app.state.datastore
