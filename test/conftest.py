import os
import tempfile
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Configure the app before anything imports the cached settings
TEST_DATA_DIR = tempfile.mkdtemp(prefix="foodmenu-test-")
os.environ["ENV_MODE"] = "development"
os.environ["STORAGE_BACKEND"] = "sql"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["DATA_DIRECTORY"] = TEST_DATA_DIR
os.environ["SEED_DEMO_DATA"] = "true"
os.environ["DEFAULT_ADMIN_USERNAME"] = "admin"
os.environ["DEFAULT_ADMIN_PASSWORD"] = "admin"

from foodmenu.core.config import get_settings  # noqa: E402
from foodmenu.seed import seed_defaults  # noqa: E402
from foodmenu.services.notifications import MockNotificationService  # noqa: E402
from foodmenu.storage import JsonStorage, SqlStorage, get_storage, reset_storage  # noqa: E402
from foodmenu.storage.base import BaseStorage  # noqa: E402

get_settings.cache_clear()


class FakeExportTask:
    """Stands in for the Celery task; records what would have been queued."""

    def __init__(self):
        self.calls: list[dict] = []

    def delay(self, payload: dict) -> None:
        self.calls.append(payload)


@pytest.fixture(autouse=True)
def export_task(monkeypatch: pytest.MonkeyPatch) -> FakeExportTask:
    task = FakeExportTask()
    monkeypatch.setattr("foodmenu.services.orders.export_order_to_excel", task)
    return task


@pytest_asyncio.fixture
async def sql_storage() -> AsyncGenerator[SqlStorage, None]:
    storage = SqlStorage("sqlite+aiosqlite:///:memory:")
    await storage.init()
    yield storage
    await storage.close()


@pytest_asyncio.fixture
async def json_storage(tmp_path) -> AsyncGenerator[JsonStorage, None]:
    storage = JsonStorage(tmp_path / "db.json", lock_timeout=5)
    await storage.init()
    yield storage
    await storage.close()


@pytest_asyncio.fixture(params=["sql", "json"])
async def storage(request, tmp_path) -> AsyncGenerator[BaseStorage, None]:
    """Every backend, so behaviour is checked to be identical."""
    if request.param == "sql":
        backend = SqlStorage("sqlite+aiosqlite:///:memory:")
    else:
        backend = JsonStorage(tmp_path / "db.json", lock_timeout=5)
    await backend.init()
    yield backend
    await backend.close()


@pytest_asyncio.fixture
async def seeded_storage(storage: BaseStorage) -> BaseStorage:
    await seed_defaults(storage, demo_data=True)
    return storage


@pytest.fixture
def notifier() -> MockNotificationService:
    return MockNotificationService()


@pytest_asyncio.fixture(name="client")
async def client_fixture(
    seeded_storage: BaseStorage,
    notifier: MockNotificationService,
) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client against the app with storage and notifier overridden."""
    from foodmenu.main import app
    from foodmenu.routers.deps import get_notifier_dep, get_storage_dep

    app.dependency_overrides[get_storage_dep] = lambda: seeded_storage
    app.dependency_overrides[get_notifier_dep] = lambda: notifier

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def admin_headers(client: AsyncClient) -> dict[str, str]:
    response = await client.post("/api/auth/login", json={"username": "admin", "password": "admin"})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest.fixture
def configure_storage(monkeypatch: pytest.MonkeyPatch):
    """Rebuild the cached settings and storage from the given env vars."""

    def configure(**env: str) -> BaseStorage:
        for key, value in env.items():
            monkeypatch.setenv(key, value)
        get_settings.cache_clear()
        reset_storage()
        return get_storage()

    yield configure

    monkeypatch.undo()
    get_settings.cache_clear()
    reset_storage()
