CUSTOMER = {"name": "Maria Sokolova", "phone": "+7 (926) 765-43-21", "pickup_time": 15}


async def _cart_with(client, *lines) -> str:
    cart_id = (await client.post("/api/carts")).json()["id"]
    for product_id, quantity in lines:
        response = await client.post(
            f"/api/carts/{cart_id}/items", json={"product_id": product_id, "quantity": quantity}
        )
        assert response.status_code == 200
    return cart_id


async def test_create_cart(client):
    response = await client.post("/api/carts")

    assert response.status_code == 201
    body = response.json()
    assert body["items"] == []
    assert body["total_price"] == 0
    assert body["total_items"] == 0


async def test_unknown_cart(client):
    response = await client.get("/api/carts/missing")
    assert response.status_code == 404
    assert response.json()["detail"] == "Cart not found"


async def test_add_items_and_totals(client):
    cart_id = await _cart_with(client, ("burger-deluxe", 1), ("cappuccino", 2))

    cart = (await client.get(f"/api/carts/{cart_id}")).json()

    assert cart["restaurant_id"] == "west"
    assert cart["total_price"] == 520 + 2 * 220
    assert cart["total_items"] == 3


async def test_add_from_other_restaurant_conflicts(client):
    cart_id = await _cart_with(client, ("burger-deluxe", 1))

    response = await client.post(f"/api/carts/{cart_id}/items", json={"product_id": "latte"})

    assert response.status_code == 409
    assert response.json()["detail"].startswith("Cart can only contain items from one restaurant")


async def test_add_unknown_product(client):
    cart_id = (await client.post("/api/carts")).json()["id"]
    response = await client.post(f"/api/carts/{cart_id}/items", json={"product_id": "ghost"})
    assert response.status_code == 404


async def test_add_at_wrong_restaurant(client):
    cart_id = (await client.post("/api/carts")).json()["id"]
    response = await client.post(
        f"/api/carts/{cart_id}/items", json={"product_id": "latte", "restaurant_id": "central"}
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Product is not available at this restaurant"


async def test_change_and_remove_lines(client):
    cart_id = await _cart_with(client, ("burger-bbq", 1), ("apple-pie", 1))

    cart = (await client.put(f"/api/carts/{cart_id}/items/apple-pie", json={"quantity": 4})).json()
    assert cart["total_items"] == 5

    cart = (await client.put(f"/api/carts/{cart_id}/items/apple-pie", json={"quantity": 0})).json()
    assert [item["product_id"] for item in cart["items"]] == ["burger-bbq"]

    cart = (await client.delete(f"/api/carts/{cart_id}/items/burger-bbq")).json()
    assert cart["items"] == []
    assert cart["restaurant_id"] is None

    response = await client.delete(f"/api/carts/{cart_id}/items/burger-bbq")
    assert response.status_code == 404
    assert response.json()["detail"] == "Product not found in cart"


async def test_clear(client):
    cart_id = await _cart_with(client, ("burger-bbq", 2))

    cart = (await client.delete(f"/api/carts/{cart_id}")).json()

    assert cart["items"] == []
    assert cart["total_price"] == 0


async def test_checkout(client, export_task):
    cart_id = await _cart_with(client, ("burger-classic", 2), ("cheesecake", 1))

    response = await client.post(f"/api/carts/{cart_id}/checkout", json=CUSTOMER)

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    order = body["order"]
    assert order["restaurant_id"] == "central"
    assert order["total_amount"] == 1220
    assert order["pickup_time"] == 15
    assert order["customer_name"] == "Maria Sokolova"

    assert (await client.get(f"/api/orders/{order['id']}")).status_code == 200
    assert (await client.get(f"/api/carts/{cart_id}")).json()["items"] == []
    assert len(export_task.calls) == 1


async def test_checkout_empty_cart(client):
    cart_id = (await client.post("/api/carts")).json()["id"]

    response = await client.post(f"/api/carts/{cart_id}/checkout", json=CUSTOMER)

    assert response.status_code == 400
    assert response.json()["detail"] == "Cart is empty"


async def test_checkout_requires_phone(client):
    cart_id = await _cart_with(client, ("burger-classic", 1))

    response = await client.post(f"/api/carts/{cart_id}/checkout", json={"name": "Bob", "phone": ""})

    assert response.status_code == 422
