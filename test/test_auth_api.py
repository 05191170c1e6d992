from datetime import datetime, timedelta, timezone

from foodmenu.schemas import AdminSession


async def test_login(client):
    response = await client.post("/api/auth/login", json={"username": "admin", "password": "admin"})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert len(body["token"]) > 20
    assert datetime.fromisoformat(body["expires_at"].replace("Z", "+00:00")) > datetime.now(timezone.utc)


async def test_login_wrong_password(client):
    response = await client.post("/api/auth/login", json={"username": "admin", "password": "nope"})

    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid username or password"


async def test_login_wrong_username(client):
    response = await client.post("/api/auth/login", json={"username": "root", "password": "admin"})
    assert response.status_code == 401


async def test_me(client, admin_headers):
    response = await client.get("/api/auth/me", headers=admin_headers)
    assert response.json() == {"username": "admin"}


async def test_logout_revokes_token(client, admin_headers):
    assert (await client.post("/api/auth/logout", headers=admin_headers)).json() == {"success": True}

    response = await client.get("/api/auth/me", headers=admin_headers)
    assert response.status_code == 401


async def test_expired_session_rejected_and_removed(client, seeded_storage):
    now = datetime.now(timezone.utc)
    await seeded_storage.auth.create_session(
        AdminSession(token="stale", username="admin", created_at=now - timedelta(days=1), expires_at=now - timedelta(minutes=1))
    )

    response = await client.get("/api/auth/me", headers={"Authorization": "Bearer stale"})

    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid or expired session"
    assert await seeded_storage.auth.get_session("stale") is None


async def test_login_purges_expired_sessions(client, seeded_storage):
    now = datetime.now(timezone.utc)
    await seeded_storage.auth.create_session(
        AdminSession(token="old", username="admin", created_at=now - timedelta(days=1), expires_at=now - timedelta(hours=1))
    )

    await client.post("/api/auth/login", json={"username": "admin", "password": "admin"})

    assert await seeded_storage.auth.get_session("old") is None


async def test_change_credentials(client, admin_headers):
    response = await client.put(
        "/api/auth/credentials",
        json={"username": "manager", "password": "s3cret!"},
        headers=admin_headers,
    )
    assert response.status_code == 200

    old = await client.post("/api/auth/login", json={"username": "admin", "password": "admin"})
    new = await client.post("/api/auth/login", json={"username": "manager", "password": "s3cret!"})
    assert old.status_code == 401
    assert new.status_code == 200

    # The session that made the change is still valid
    assert (await client.get("/api/auth/me", headers=admin_headers)).status_code == 200


async def test_change_credentials_validation(client, admin_headers):
    response = await client.put(
        "/api/auth/credentials", json={"username": "manager", "password": "abc"}, headers=admin_headers
    )
    assert response.status_code == 422


async def test_change_credentials_requires_admin(client):
    response = await client.put("/api/auth/credentials", json={"username": "x", "password": "long enough"})
    assert response.status_code == 401
