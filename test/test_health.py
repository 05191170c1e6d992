import pytest
import redis
from httpx import ASGITransport, AsyncClient

import foodmenu.main as main
from foodmenu.routers.deps import get_storage_dep


async def test_root(client):
    body = (await client.get("/")).json()

    assert body["health"] == "/health"
    assert body["dashboard"] == "/dashboard"


async def test_health_operational(client, monkeypatch):
    monkeypatch.setattr(main, "_ping_redis", lambda: None)

    body = (await client.get("/health")).json()

    assert body["status"] == "operational"
    assert body["storage"] == "healthy"
    assert body["storage_backend"] in ("sql", "json")
    assert body["redis"] == "healthy"
    assert body["notification_service"] == "healthy"


async def test_health_degraded_without_redis(client, monkeypatch):
    def down():
        raise redis.ConnectionError("Connection refused")

    monkeypatch.setattr(main, "_ping_redis", down)

    response = await client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "degraded"
    assert body["redis"].startswith("unhealthy")
    assert body["storage"] == "healthy"


async def test_dashboard_page(client):
    response = await client.get("/dashboard")

    assert response.status_code == 200
    assert "text/html" in response.headers["content-type"]
    assert "/api/statistics/dashboard" in response.text


@pytest.fixture
def broken_storage():
    def explode():
        raise RuntimeError("database is on fire")

    main.app.dependency_overrides[get_storage_dep] = explode
    yield
    main.app.dependency_overrides.clear()


async def test_unhandled_errors_become_json(broken_storage):
    transport = ASGITransport(app=main.app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/api/restaurants")

    assert response.status_code == 500
    body = response.json()
    assert body["success"] is False
    assert body["error"] == "Internal Server Error"
