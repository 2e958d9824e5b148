"""
Category form, product counts and the category deletion guard.
"""
from conftest import BUCKET, FAILING_BODY


async def test_create_category_uploads_images(client, s3_client):
    response = await client.post(
        "/api/v1/categories",
        data={"name": "Shoes", "description": "Footwear"},
        files={
            "image_file": ("thumb.png", b"thumb-bytes", "image/png"),
            "hero_image_file": ("hero.jpg", b"hero-bytes", "image/jpeg"),
        },
    )

    assert response.status_code == 201, response.text
    category = response.json()
    assert category["name"] == "Shoes"
    assert category["product_count"] == 0

    prefix = f"https://{BUCKET}.s3.amazonaws.com/"
    thumb_key = category["image"][len(prefix):]
    hero_key = category["hero_image"][len(prefix):]
    assert thumb_key.endswith(".png")
    assert hero_key.endswith(".jpg")
    assert s3_client.objects[thumb_key]["body"] == b"thumb-bytes"
    assert s3_client.objects[hero_key]["body"] == b"hero-bytes"


async def test_create_category_requires_name(client):
    response = await client.post("/api/v1/categories", data={"description": "no name"})
    assert response.status_code == 422


async def test_failed_upload_writes_no_category(client):
    response = await client.post(
        "/api/v1/categories",
        data={"name": "Bags"},
        files={"image_file": ("thumb.png", FAILING_BODY, "image/png")},
    )

    assert response.status_code == 502
    assert response.json()["detail"] == "Failed to upload image"

    listing = await client.get("/api/v1/categories")
    assert listing.json() == []


async def test_update_keeps_image_when_no_file_sent(client, make_category):
    response = await client.post(
        "/api/v1/categories",
        data={"name": "Hats"},
        files={"image_file": ("thumb.png", b"thumb", "image/png")},
    )
    category = response.json()

    updated = await client.put(
        f"/api/v1/categories/{category['id']}",
        data={"description": "Headwear"},
    )

    assert updated.status_code == 200
    body = updated.json()
    assert body["name"] == "Hats"
    assert body["description"] == "Headwear"
    assert body["image"] == category["image"]


async def test_update_missing_category_is_404(client):
    response = await client.put("/api/v1/categories/missing", data={"name": "X"})
    assert response.status_code == 404


async def test_list_reports_live_product_counts(client, make_category, make_product):
    shoes = await make_category("Shoes")
    bags = await make_category("Bags")
    await make_product("Runner", category_id=shoes["id"])
    await make_product("Loafer", category_id=shoes["id"])

    response = await client.get("/api/v1/categories")
    counts = {category["name"]: category["product_count"] for category in response.json()}
    assert counts == {"Bags": 0, "Shoes": 2}

    search = await client.get("/api/v1/categories", params={"q": "sho"})
    assert [category["name"] for category in search.json()] == ["Shoes"]
    assert bags["product_count"] == 0


async def test_delete_refused_while_products_reference_category(
    client, make_category, make_product
):
    shoes = await make_category("Shoes")
    product = await make_product("Runner", category_id=shoes["id"])

    response = await client.delete(f"/api/v1/categories/{shoes['id']}")
    assert response.status_code == 409
    assert response.json()["detail"] == "Cannot delete category: it has 1 products."

    still_there = await client.get(f"/api/v1/categories/{shoes['id']}")
    assert still_there.status_code == 200
    assert still_there.json()["product_count"] == 1

    await client.delete(f"/api/v1/products/{product['id']}")
    response = await client.delete(f"/api/v1/categories/{shoes['id']}")
    assert response.status_code == 204


async def test_delete_cascades_to_subcategories(client, make_category):
    shoes = await make_category("Shoes")
    await client.post("/api/v1/subcategories", json={"name": "Boots", "category_id": shoes["id"]})
    other = await make_category("Bags")
    await client.post("/api/v1/subcategories", json={"name": "Totes", "category_id": other["id"]})

    response = await client.delete(f"/api/v1/categories/{shoes['id']}")
    assert response.status_code == 204

    remaining = await client.get("/api/v1/subcategories")
    assert [sub["name"] for sub in remaining.json()] == ["Totes"]


async def test_delete_missing_category_is_404(client):
    response = await client.delete("/api/v1/categories/missing")
    assert response.status_code == 404
