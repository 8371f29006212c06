import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine

from app.api.core.config import settings
from app.api.db.database import Base, Datastore, get_datastore

# Import all models to ensure they are registered with SQLAlchemy before creating tables
from app.api.modules.waitlist.models.waitlist_model import Waitlist  # noqa: F401
from main import app


@pytest.fixture(autouse=True)
def unconfigured_datastore_settings(monkeypatch):
    """Keep tests independent of any local .env datastore settings."""
    monkeypatch.setattr(settings, "DATABASE_URL", "")
    monkeypatch.setattr(settings, "DATABASE_KEY", "")


@pytest_asyncio.fixture
async def datastore(tmp_path):
    """
    Datastore backed by a throwaway SQLite file.

    A file (not ``sqlite://`` memory) is used so concurrent sessions get
    separate connections that see the same table.
    """
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'waitlist.db'}", echo=False)
    store = Datastore(engine=engine)
    await store.create_tables()

    yield store

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await store.dispose()


@pytest_asyncio.fixture
async def client(datastore):
    """Async HTTP client wired to the app with the test datastore injected."""
    app.dependency_overrides[get_datastore] = lambda: datastore

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as c:
        yield c

    app.dependency_overrides.clear()
