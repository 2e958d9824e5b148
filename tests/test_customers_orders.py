"""
Customers, addresses, orders and dashboard aggregates.
"""
import pytest


@pytest.fixture
def make_customer(client):
    async def _make(user_id="user-1", name="Ada Lovelace", email="ada@example.com", **data):
        response = await client.post(
            "/api/v1/customers",
            json={"user_id": user_id, "name": name, "email": email, **data},
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _make


@pytest.fixture
def make_order(client):
    async def _make(user_id="user-1", total=10.0, payment_status="paid", **data):
        payload = {
            "order_id": data.pop("order_id", f"ORD-{user_id}-{total}"),
            "user_id": user_id,
            "products": [{"product_id": "p1", "name": "Runner", "quantity": 1, "price": total}],
            "subtotal": total,
            "total_amount": total,
            "payment_status": payment_status,
            **data,
        }
        response = await client.post("/api/v1/orders", json=payload)
        assert response.status_code == 201, response.text
        return response.json()

    return _make


async def test_user_id_is_unique(client, make_customer):
    await make_customer("user-1")

    response = await client.post(
        "/api/v1/customers",
        json={"user_id": "user-1", "name": "Other", "email": "other@example.com"},
    )
    assert response.status_code == 409

    second = await make_customer("user-2", email="b@example.com")
    taken = await client.patch(f"/api/v1/customers/{second['id']}", json={"user_id": "user-1"})
    assert taken.status_code == 409


async def test_metrics_agree_between_list_and_detail(client, make_customer, make_order):
    customer = await make_customer("user-1")
    await make_customer("user-2", name="Grace Hopper", email="grace@example.com")
    await make_order("user-1", total=10.0)
    await make_order("user-1", total=15.5, payment_status="pending")
    await make_order("user-2", total=99.0)

    listing = await client.get("/api/v1/customers")
    rows = {row["user_id"]: (row["total_spent"], row["order_count"]) for row in listing.json()}
    assert rows == {"user-1": (25.5, 2), "user-2": (99.0, 1)}

    detail = await client.get(f"/api/v1/customers/{customer['id']}")
    body = detail.json()
    assert (body["customer"]["total_spent"], body["customer"]["order_count"]) == (25.5, 2)
    assert len(body["orders"]) == 2


async def test_customer_without_orders_has_zero_metrics(client, make_customer):
    customer = await make_customer()
    detail = await client.get(f"/api/v1/customers/{customer['id']}")
    assert detail.json()["customer"]["total_spent"] == 0.0
    assert detail.json()["customer"]["order_count"] == 0
    assert detail.json()["orders"] == []


async def test_customer_detail_lists_addresses(client, make_customer):
    customer = await make_customer("user-1")
    await client.post(
        "/api/v1/addresses",
        json={"user_id": "user-1", "street": "1 Main St", "city": "Springfield", "country": "US"},
    )
    await client.post(
        "/api/v1/addresses",
        json={"user_id": "user-2", "street": "2 Side St", "city": "Shelbyville", "country": "US"},
    )

    detail = await client.get(f"/api/v1/customers/{customer['id']}")
    assert [address["street"] for address in detail.json()["addresses"]] == ["1 Main St"]

    filtered = await client.get("/api/v1/addresses", params={"user_id": "user-2"})
    assert [address["city"] for address in filtered.json()] == ["Shelbyville"]


async def test_order_details_are_enriched(client, make_customer, make_order):
    await make_customer("user-1")
    address = await client.post(
        "/api/v1/addresses",
        json={"user_id": "user-1", "street": "1 Main St", "city": "Springfield", "country": "US"},
    )
    order = await make_order("user-1", total=42.0, shipping_address_id=address.json()["id"])

    first = await client.get(f"/api/v1/orders/{order['id']}")
    second = await client.get(f"/api/v1/orders/{order['id']}")

    assert first.status_code == 200
    assert first.json() == second.json()
    body = first.json()
    assert body["order"]["products"][0]["name"] == "Runner"
    assert body["customer"]["user_id"] == "user-1"
    assert body["customer"]["total_spent"] == 42.0
    assert body["address"]["street"] == "1 Main St"


async def test_order_details_after_address_deleted(client, make_customer, make_order):
    await make_customer("user-1")
    address = await client.post(
        "/api/v1/addresses",
        json={"user_id": "user-1", "street": "1 Main St", "city": "Springfield", "country": "US"},
    )
    order = await make_order("user-1", shipping_address_id=address.json()["id"])

    await client.delete(f"/api/v1/addresses/{address.json()['id']}")

    response = await client.get(f"/api/v1/orders/{order['id']}")
    assert response.status_code == 200
    assert response.json()["address"] is None
    assert response.json()["order"]["shipping_address_id"] == address.json()["id"]


async def test_order_without_customer(client, make_order):
    order = await make_order("ghost")
    response = await client.get(f"/api/v1/orders/{order['id']}")
    assert response.json()["customer"] is None


async def test_recent_orders_are_newest_five(client, make_order):
    for day in range(1, 8):
        await make_order(
            "user-1",
            total=float(day),
            order_id=f"ORD-{day}",
            created_at=f"2024-03-0{day}T12:00:00Z",
        )

    response = await client.get("/api/v1/orders/recent")
    assert response.status_code == 200
    assert [order["order_id"] for order in response.json()["orders"]] == [
        "ORD-7",
        "ORD-6",
        "ORD-5",
        "ORD-4",
        "ORD-3",
    ]


async def test_orders_filter_by_payment_status(client, make_order):
    await make_order("user-1", total=5.0, payment_status="paid")
    await make_order("user-1", total=6.0, payment_status="pending")

    response = await client.get("/api/v1/orders", params={"payment_status": "pending"})
    assert [order["total_amount"] for order in response.json()] == [6.0]


async def test_order_update_changes_payment_status(client, make_order):
    order = await make_order("user-1", payment_status="pending")

    response = await client.patch(f"/api/v1/orders/{order['id']}", json={"payment_status": "paid"})

    assert response.status_code == 200
    assert response.json()["payment_status"] == "paid"
    assert response.json()["total_amount"] == order["total_amount"]


async def test_dashboard_stats(client, make_customer, make_order, make_product):
    await make_customer("user-1")
    await make_product("Runner")
    await make_order("user-1", total=30.0, payment_status="paid")
    await make_order("user-1", total=12.5, payment_status="paid")
    await make_order("user-1", total=100.0, payment_status="pending")

    response = await client.get("/api/v1/dashboard/stats")
    assert response.json() == {"products": 1, "orders": 3, "customers": 1, "revenue": 42.5}


async def test_deleting_customer_keeps_orders(client, make_customer, make_order):
    customer = await make_customer("user-1")
    await make_order("user-1")

    response = await client.delete(f"/api/v1/customers/{customer['id']}")
    assert response.status_code == 204

    orders = await client.get("/api/v1/orders", params={"user_id": "user-1"})
    assert len(orders.json()) == 1


async def test_order_update_clears_shipping_address(client, make_customer, make_order):
    await make_customer("user-1")
    address = await client.post(
        "/api/v1/addresses",
        json={"user_id": "user-1", "street": "1 Main St", "city": "Springfield", "country": "US"},
    )
    order = await make_order("user-1", shipping_address_id=address.json()["id"])

    response = await client.patch(
        f"/api/v1/orders/{order['id']}",
        json={"shipping_address_id": None, "payment_status": None},
    )

    assert response.status_code == 200, response.text
    assert response.json()["shipping_address_id"] is None
    assert response.json()["payment_status"] == "paid"
    detail = await client.get(f"/api/v1/orders/{order['id']}")
    assert detail.json()["address"] is None


async def test_address_writes(client):
    created = await client.post(
        "/api/v1/addresses",
        json={"user_id": "user-1", "street": "1 Main St", "city": "Springfield", "country": "US"},
    )
    address_id = created.json()["id"]

    updated = await client.patch(f"/api/v1/addresses/{address_id}", json={"city": "Capital City"})
    assert updated.json()["city"] == "Capital City"

    assert (await client.delete(f"/api/v1/addresses/{address_id}")).status_code == 204
    assert (await client.get(f"/api/v1/addresses/{address_id}")).status_code == 404
