import pytest


class TestRestaurantsApi:

    async def test_list_and_active(self, client, admin_headers):
        await client.put("/api/restaurants/north", json={"is_active": False}, headers=admin_headers)

        everything = (await client.get("/api/restaurants")).json()
        active = (await client.get("/api/restaurants/active")).json()

        assert {r["id"] for r in everything} == {"central", "west", "north"}
        assert {r["id"] for r in active} == {"central", "west"}

    async def test_get(self, client):
        response = await client.get("/api/restaurants/central")

        assert response.status_code == 200
        assert response.json()["name"] == "Food Menu Central"

    async def test_get_unknown(self, client):
        response = await client.get("/api/restaurants/nowhere")

        assert response.status_code == 404
        assert response.json()["detail"] == "Restaurant not found"

    async def test_create_requires_admin(self, client):
        response = await client.post("/api/restaurants", json={"name": "Sneaky"})

        assert response.status_code == 401
        assert response.json()["detail"] == "Not authenticated"

    async def test_bad_token(self, client):
        response = await client.post(
            "/api/restaurants",
            json={"name": "Sneaky"},
            headers={"Authorization": "Bearer not-a-token"},
        )

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid or expired session"

    async def test_create_update_delete(self, client, admin_headers):
        created = await client.post(
            "/api/restaurants",
            json={"id": "south", "name": "Food Menu South", "delivery_time": "25"},
            headers=admin_headers,
        )
        assert created.status_code == 201
        assert created.json()["is_active"] is True

        updated = await client.put(
            "/api/restaurants/south",
            json={"phone": "+7 (495) 000-00-00", "name": None},
            headers=admin_headers,
        )
        assert updated.status_code == 200
        assert updated.json()["name"] == "Food Menu South"
        assert updated.json()["phone"] == "+7 (495) 000-00-00"

        deleted = await client.delete("/api/restaurants/south", headers=admin_headers)
        assert deleted.json() == {"success": True}
        assert (await client.get("/api/restaurants/south")).status_code == 404

    async def test_create_duplicate(self, client, admin_headers):
        response = await client.post(
            "/api/restaurants", json={"id": "central", "name": "Again"}, headers=admin_headers
        )
        assert response.status_code == 409

    async def test_update_and_delete_unknown(self, client, admin_headers):
        assert (await client.put("/api/restaurants/x", json={"name": "X"}, headers=admin_headers)).status_code == 404
        assert (await client.delete("/api/restaurants/x", headers=admin_headers)).status_code == 404


class TestCategoriesApi:

    async def test_list(self, client):
        response = await client.get("/api/categories")
        assert {c["id"] for c in response.json()} >= {"all", "burgers", "dessert"}

    async def test_crud(self, client, admin_headers):
        created = await client.post("/api/categories", json={"id": "salads", "name": "Salads"}, headers=admin_headers)
        assert created.status_code == 201
        assert created.json()["slug"] == "salads"

        await client.put("/api/categories/salads", json={"is_active": False}, headers=admin_headers)
        active = (await client.get("/api/categories/active")).json()
        assert "salads" not in {c["id"] for c in active}

        assert (await client.delete("/api/categories/salads", headers=admin_headers)).status_code == 200
        response = await client.get("/api/categories/salads")
        assert response.status_code == 404
        assert response.json()["detail"] == "Category not found"


class TestProductsApi:

    async def test_menu_of_restaurant(self, client):
        response = await client.get("/api/products/restaurant/west")

        assert {p["id"] for p in response.json()} == {"cheesecake", "burger-deluxe", "cappuccino", "carbonara"}

    async def test_unknown_restaurant_has_empty_menu(self, client):
        response = await client.get("/api/products/restaurant/nowhere")
        assert response.status_code == 200
        assert response.json() == []

    async def test_by_category(self, client):
        response = await client.get("/api/products/category/dessert")
        assert {p["id"] for p in response.json()} == {"cheesecake", "apple-pie"}

    async def test_get(self, client):
        product = (await client.get("/api/products/cheesecake")).json()

        assert product["price"] == 320
        assert product["restaurant_ids"] == ["central", "west"]

    async def test_get_unknown(self, client):
        response = await client.get("/api/products/ghost")
        assert response.status_code == 404
        assert response.json()["detail"] == "Product not found"

    async def test_create_and_move(self, client, admin_headers):
        created = await client.post(
            "/api/products",
            json={"id": "borscht", "name": "BORSCHT", "category": "soup", "price": 350, "restaurant_ids": ["north"]},
            headers=admin_headers,
        )
        assert created.status_code == 201

        await client.put("/api/products/borscht", json={"restaurant_ids": ["central"]}, headers=admin_headers)

        north = {p["id"] for p in (await client.get("/api/products/restaurant/north")).json()}
        central = {p["id"] for p in (await client.get("/api/products/restaurant/central")).json()}
        assert "borscht" not in north
        assert "borscht" in central

    @pytest.mark.parametrize("payload", [{"name": "X"}, {"name": "X", "price": -1}, {"name": "", "price": 1}])
    async def test_create_validation(self, client, admin_headers, payload):
        response = await client.post("/api/products", json=payload, headers=admin_headers)
        assert response.status_code == 422

    async def test_delete(self, client, admin_headers):
        assert (await client.delete("/api/products/latte", headers=admin_headers)).status_code == 200
        assert (await client.get("/api/products/latte")).status_code == 404
