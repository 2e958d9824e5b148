"""
Product form, subcategories and tags.
"""
from app.models.catalog import Product

from conftest import BUCKET, FAILING_BODY


async def make_subcategory(client, name, category_id):
    response = await client.post(
        "/api/v1/subcategories", json={"name": name, "category_id": category_id}
    )
    assert response.status_code == 201, response.text
    return response.json()


async def make_tag(client, name):
    response = await client.post("/api/v1/tags", json={"name": name})
    assert response.status_code == 201, response.text
    return response.json()


async def test_create_product_with_three_images(client, make_category, s3_client):
    shoes = await make_category("Shoes")
    response = await client.post(
        "/api/v1/products",
        data={
            "name": "Runner",
            "price": "89.5",
            "stock": "4",
            "category_id": shoes["id"],
            "product_details": ["Mesh upper", "Rubber sole"],
        },
        files=[
            ("image_file", ("front.jpg", b"front", "image/jpeg")),
            ("image2_file", ("side.jpg", b"side", "image/jpeg")),
            ("image3_file", ("back.jpg", b"back", "image/jpeg")),
        ],
    )

    assert response.status_code == 201, response.text
    product = response.json()
    assert product["price"] == 89.5
    assert product["product_details"] == ["Mesh upper", "Rubber sole"]

    prefix = f"https://{BUCKET}.s3.amazonaws.com/"
    bodies = [s3_client.objects[product[field][len(prefix):]]["body"] for field in ("image", "image2", "image3")]
    assert bodies == [b"front", b"side", b"back"]


async def test_one_failed_image_writes_no_product(client, s3_client):
    response = await client.post(
        "/api/v1/products",
        data={"name": "Runner", "price": "10", "stock": "1"},
        files=[
            ("image_file", ("front.jpg", b"front", "image/jpeg")),
            ("image2_file", ("side.jpg", FAILING_BODY, "image/jpeg")),
            ("image3_file", ("back.jpg", b"back", "image/jpeg")),
        ],
    )

    assert response.status_code == 502
    assert response.json()["detail"] == "Failed to upload image"
    # The other two uploads finished and stay in storage unreferenced
    assert sorted(entry["body"] for entry in s3_client.objects.values()) == [b"back", b"front"]

    listing = await client.get("/api/v1/products")
    assert listing.json() == []


async def test_create_product_requires_name_price_and_stock(client):
    response = await client.post("/api/v1/products", data={"name": "Runner"})
    assert response.status_code == 400
    assert response.json()["detail"] == "Missing required fields: price, stock"


async def test_unknown_references_rejected_before_upload(client, s3_client):
    response = await client.post(
        "/api/v1/products",
        data={"name": "Runner", "price": "10", "stock": "1", "category_id": "nope"},
        files={"image_file": ("front.jpg", b"front", "image/jpeg")},
    )
    assert response.status_code == 400
    assert s3_client.objects == {}


async def test_subcategory_must_belong_to_category(client, make_category):
    shoes = await make_category("Shoes")
    bags = await make_category("Bags")
    totes = await make_subcategory(client, "Totes", bags["id"])

    response = await client.post(
        "/api/v1/products",
        data={
            "name": "Runner",
            "price": "10",
            "stock": "1",
            "category_id": shoes["id"],
            "subcategory_id": totes["id"],
        },
    )
    assert response.status_code == 400


async def test_changing_category_clears_subcategory(client, make_category, make_product):
    shoes = await make_category("Shoes")
    bags = await make_category("Bags")
    boots = await make_subcategory(client, "Boots", shoes["id"])
    product = await make_product(category_id=shoes["id"], subcategory_id=boots["id"])

    response = await client.put(
        f"/api/v1/products/{product['id']}", data={"category_id": bags["id"]}
    )

    assert response.status_code == 200, response.text
    assert response.json()["category_id"] == bags["id"]
    assert response.json()["subcategory_id"] is None


async def test_partial_update_keeps_other_fields(client, make_product):
    product = await make_product("Runner", price="20", stock="3")

    response = await client.put(f"/api/v1/products/{product['id']}", data={"stock": "9"})

    body = response.json()
    assert body["stock"] == 9
    assert body["price"] == 20
    assert body["name"] == "Runner"


async def test_list_resolves_category_names(client, make_category, make_product):
    shoes = await make_category("Shoes")
    boots = await make_subcategory(client, "Boots", shoes["id"])
    await make_product("Chelsea", category_id=shoes["id"], subcategory_id=boots["id"])
    await make_product("Loose item")

    response = await client.get("/api/v1/products")
    names = {
        product["name"]: (product["category_name"], product["subcategory_name"])
        for product in response.json()
    }
    assert names == {
        "Chelsea": ("Shoes", "Boots"),
        "Loose item": ("Uncategorized", "Uncategorized"),
    }


async def test_form_options(client, make_category):
    shoes = await make_category("Shoes")
    bags = await make_category("Bags")
    await make_subcategory(client, "Boots", shoes["id"])
    await make_subcategory(client, "Totes", bags["id"])
    await make_tag(client, "Sale")

    response = await client.get(
        "/api/v1/products/form-options", params={"category_id": shoes["id"]}
    )

    assert response.status_code == 200
    options = response.json()
    assert [category["name"] for category in options["categories"]] == ["Bags", "Shoes"]
    assert [tag["name"] for tag in options["tags"]] == ["Sale"]
    assert [sub["name"] for sub in options["subcategories"]] == ["Boots"]

    without_category = await client.get("/api/v1/products/form-options")
    assert without_category.json()["subcategories"] == []


async def test_get_missing_product_is_404(client):
    response = await client.get("/api/v1/products/missing")
    assert response.status_code == 404


async def test_subcategory_shows_current_parent_name(client, make_category):
    shoes = await make_category("Shoes")
    boots = await make_subcategory(client, "Boots", shoes["id"])
    assert boots["parent_name"] == "Shoes"

    await client.put(f"/api/v1/categories/{shoes['id']}", data={"name": "Footwear"})

    response = await client.get(f"/api/v1/subcategories/{boots['id']}")
    assert response.json()["parent_name"] == "Footwear"


async def test_subcategory_requires_existing_category(client):
    response = await client.post(
        "/api/v1/subcategories", json={"name": "Boots", "category_id": "missing"}
    )
    assert response.status_code == 400


async def test_deleting_subcategory_clears_products(client, make_category, make_product):
    shoes = await make_category("Shoes")
    boots = await make_subcategory(client, "Boots", shoes["id"])
    product = await make_product(category_id=shoes["id"], subcategory_id=boots["id"])

    response = await client.delete(f"/api/v1/subcategories/{boots['id']}")
    assert response.status_code == 204

    reloaded = await client.get(f"/api/v1/products/{product['id']}")
    assert reloaded.json()["subcategory_id"] is None
    assert reloaded.json()["category_id"] == shoes["id"]


async def test_tag_counts_and_delete(client, make_product):
    sale = await make_tag(client, "Sale")
    new = await make_tag(client, "New")
    first = await make_product("Runner", tag_ids=[sale["id"], new["id"]])
    await make_product("Loafer", tag_ids=[sale["id"]])

    response = await client.get("/api/v1/tags")
    counts = {tag["name"]: tag["product_count"] for tag in response.json()}
    assert counts == {"New": 1, "Sale": 2}

    deleted = await client.delete(f"/api/v1/tags/{sale['id']}")
    assert deleted.status_code == 204

    reloaded = await client.get(f"/api/v1/products/{first['id']}")
    assert reloaded.json()["tag_ids"] == [new["id"]]


async def test_unknown_tag_rejected(client):
    response = await client.post(
        "/api/v1/products",
        data={"name": "Runner", "price": "10", "stock": "1", "tag_ids": ["missing"]},
    )
    assert response.status_code == 400


async def test_malformed_tag_ids_surface_as_upstream_failure(client, app):
    async with app.state.session_maker() as session:
        session.add(Product(name="Broken", price=1.0, stock=1, tag_ids={"not": "a list"}))
        await session.commit()

    response = await client.get("/api/v1/tags")
    assert response.status_code == 502
    assert response.json()["detail"] == "Stored document is malformed"


async def test_subcategory_without_category_rejected(client, make_category, s3_client):
    shoes = await make_category("Shoes")
    boots = await make_subcategory(client, "Boots", shoes["id"])

    response = await client.post(
        "/api/v1/products",
        data={"name": "Runner", "price": "10", "stock": "1", "subcategory_id": boots["id"]},
        files={"image_file": ("front.jpg", b"front", "image/jpeg")},
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "A subcategory requires a category"
    assert s3_client.objects == {}


async def test_moving_subcategory_clears_products(client, make_category, make_product):
    shoes = await make_category("Shoes")
    bags = await make_category("Bags")
    boots = await make_subcategory(client, "Boots", shoes["id"])
    product = await make_product(category_id=shoes["id"], subcategory_id=boots["id"])

    response = await client.patch(
        f"/api/v1/subcategories/{boots['id']}", json={"category_id": bags["id"]}
    )
    assert response.status_code == 200, response.text
    assert response.json()["parent_name"] == "Bags"

    reloaded = await client.get(f"/api/v1/products/{product['id']}")
    assert reloaded.json()["category_id"] == shoes["id"]
    assert reloaded.json()["subcategory_id"] is None


async def test_renaming_subcategory_keeps_products(client, make_category, make_product):
    shoes = await make_category("Shoes")
    boots = await make_subcategory(client, "Boots", shoes["id"])
    product = await make_product(category_id=shoes["id"], subcategory_id=boots["id"])

    await client.patch(
        f"/api/v1/subcategories/{boots['id']}",
        json={"name": "Ankle boots", "category_id": shoes["id"]},
    )

    reloaded = await client.get(f"/api/v1/products/{product['id']}")
    assert reloaded.json()["subcategory_id"] == boots["id"]


async def test_deleting_category_clears_products_of_its_subcategories(
    client, app, make_category
):
    shoes = await make_category("Shoes")
    boots = await make_subcategory(client, "Boots", shoes["id"])
    # Written directly: a product left pointing at the subcategory but not the category
    async with app.state.session_maker() as session:
        stray = Product(name="Stray", price=1.0, stock=1, subcategory_id=boots["id"])
        session.add(stray)
        await session.commit()
        stray_id = stray.id

    response = await client.delete(f"/api/v1/categories/{shoes['id']}")
    assert response.status_code == 204

    reloaded = await client.get(f"/api/v1/products/{stray_id}")
    assert reloaded.json()["subcategory_id"] is None
    listing = await client.get("/api/v1/products")
    assert listing.json()[0]["subcategory_name"] == "Uncategorized"


async def test_malformed_tag_ids_on_tag_detail(client, app):
    tag = await make_tag(client, "Sale")
    async with app.state.session_maker() as session:
        session.add(Product(name="Broken", price=1.0, stock=1, tag_ids="sale"))
        await session.commit()

    response = await client.get(f"/api/v1/tags/{tag['id']}")
    assert response.status_code == 502
    assert response.json()["detail"] == "Stored document is malformed"


async def test_sparse_image_slot(client, s3_client):
    response = await client.post(
        "/api/v1/products",
        data={"name": "Runner", "price": "10", "stock": "1"},
        files={"image2_file": ("side.jpg", b"side", "image/jpeg")},
    )

    assert response.status_code == 201, response.text
    product = response.json()
    assert product["image"] is None
    assert product["image3"] is None
    prefix = f"https://{BUCKET}.s3.amazonaws.com/"
    assert s3_client.objects[product["image2"][len(prefix):]]["body"] == b"side"


async def test_edit_replaces_only_the_sent_slot(client, s3_client):
    created = await client.post(
        "/api/v1/products",
        data={"name": "Runner", "price": "10", "stock": "1"},
        files=[
            ("image_file", ("front.jpg", b"front", "image/jpeg")),
            ("image2_file", ("side.jpg", b"side", "image/jpeg")),
            ("image3_file", ("back.jpg", b"back", "image/jpeg")),
        ],
    )
    original = created.json()

    response = await client.put(
        f"/api/v1/products/{original['id']}",
        files={"image3_file": ("new-back.jpg", b"new back", "image/jpeg")},
    )

    assert response.status_code == 200, response.text
    updated = response.json()
    assert updated["image"] == original["image"]
    assert updated["image2"] == original["image2"]
    assert updated["image3"] != original["image3"]
    prefix = f"https://{BUCKET}.s3.amazonaws.com/"
    assert s3_client.objects[updated["image3"][len(prefix):]]["body"] == b"new back"


async def test_failed_upload_leaves_product_unchanged(client, make_product):
    product = await make_product("Runner", price="20", stock="3")

    response = await client.put(
        f"/api/v1/products/{product['id']}",
        data={"stock": "9"},
        files={"image_file": ("front.jpg", FAILING_BODY, "image/jpeg")},
    )

    assert response.status_code == 502
    assert response.json()["detail"] == "Failed to upload image"
    reloaded = await client.get(f"/api/v1/products/{product['id']}")
    assert reloaded.json()["stock"] == 3
    assert reloaded.json()["image"] is None


async def test_blank_category_clears_category_and_subcategory(client, make_category, make_product):
    shoes = await make_category("Shoes")
    boots = await make_subcategory(client, "Boots", shoes["id"])
    product = await make_product(category_id=shoes["id"], subcategory_id=boots["id"])

    response = await client.put(f"/api/v1/products/{product['id']}", data={"category_id": ""})

    assert response.status_code == 200, response.text
    assert response.json()["category_id"] is None
    assert response.json()["subcategory_id"] is None
    assert response.json()["name"] == product["name"]
