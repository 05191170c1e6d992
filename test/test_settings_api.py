async def test_public_settings(client):
    response = await client.get("/api/settings/public")

    assert response.json() == {
        "site_title": "FOOD MENU",
        "contact_email": "info@foodmenu.com",
        "contact_phone": "+7 (123) 456-78-90",
    }


async def test_public_settings_hide_bot_token(client, admin_headers):
    await client.put("/api/settings", json={"telegram_bot_token": "123:secret"}, headers=admin_headers)

    response = await client.get("/api/settings/public")

    assert "telegram_bot_token" not in response.json()
    assert "123:secret" not in response.text


async def test_read_requires_admin(client):
    assert (await client.get("/api/settings")).status_code == 401
    assert (await client.put("/api/settings", json={"site_title": "x"})).status_code == 401
    assert (await client.post("/api/settings/telegram/test")).status_code == 401


async def test_update_merges(client, admin_headers):
    first = await client.put("/api/settings", json={"site_title": "BURGER TIME"}, headers=admin_headers)
    second = await client.put(
        "/api/settings",
        json={"telegram_bot_enabled": True, "telegram_chat_id": "-100", "site_title": None},
        headers=admin_headers,
    )

    assert first.json()["site_title"] == "BURGER TIME"
    body = second.json()
    assert body["site_title"] == "BURGER TIME"
    assert body["telegram_bot_enabled"] is True
    assert body["telegram_chat_id"] == "-100"
    assert body["contact_email"] == "info@foodmenu.com"

    assert (await client.get("/api/settings", headers=admin_headers)).json() == body


async def test_telegram_test_without_credentials(client, admin_headers, notifier):
    response = await client.post("/api/settings/telegram/test", headers=admin_headers)

    assert response.status_code == 200
    assert response.json()["success"] is False
    assert response.json()["error"]
    assert notifier.sent == []


async def test_telegram_test_sends(client, admin_headers, notifier):
    await client.put(
        "/api/settings",
        json={"telegram_bot_token": "123:abc", "telegram_chat_id": "-100"},
        headers=admin_headers,
    )

    response = await client.post("/api/settings/telegram/test", headers=admin_headers)

    assert response.json() == {"success": True, "error": None}
    assert notifier.sent[0]["chat_id"] == "-100"
