from catalog.db.models import ProductCollection


def test_healthz(client):
    assert client.get("/healthz").json()["status"] == "ok"


def test_unknown_collection_slug_is_404(client):
    response = client.get("/api/collections/non-existent-slug")

    assert response.status_code == 404
    assert response.json() == {"error": "NotFound", "detail": "Collection not found"}


def test_collection_with_products(client, db, make_collection, make_product):
    sale = make_collection("Sale")
    product = make_product("Shirt")
    db.add(ProductCollection(product_id=product.id, collection_id=sale.id))
    db.commit()

    body = client.get("/api/collections/sale").json()

    assert body["collection"]["slug"] == "sale"
    assert [p["id"] for p in body["products"]] == [product.id]
    assert body["products_count"] == 1


def test_static_product_routes_are_not_ids(client, make_product):
    make_product("Shirt", category="Shirts", brand="Acme")

    assert client.get("/api/products/categories").json() == ["Shirts"]
    assert client.get("/api/products/brands").json() == ["Acme"]


def test_product_crud_flow(client):
    response = client.post("/api/products", json={"title": "Red T-Shirt!!", "price": 19.99})
    assert response.status_code == 201
    product = response.json()
    assert product["slug"] == f"red-t-shirt-{product['id']}"

    response = client.put(f"/api/products/{product['id']}", json={"stock": 3})
    assert response.json()["stock"] == 3

    assert client.delete(f"/api/products/{product['id']}").status_code == 204
    response = client.get(f"/api/products/{product['id']}")
    assert response.status_code == 404
    assert response.json()["error"] == "NotFound"


def test_product_listing_uses_camel_case(client, make_product):
    for i in range(3):
        make_product(f"Product {i}", brand="Acme" if i else "Other")

    body = client.get(
        "/api/products", params={"indexFrom": 0, "limit": 2, "brand": ["Acme", "Other"]}
    ).json()

    assert body["total"] == 3
    assert body["totalPages"] == 2
    assert body["hasMore"] is True
    assert body["currentPage"] == 1
    assert len(body["products"]) == 2


def test_validation_errors_are_400(client):
    response = client.post("/api/products", json={"price": 1})
    assert response.status_code == 400
    assert response.json()["error"] == "ValidationError"

    response = client.post("/api/products", json={"title": "x", "price": -1})
    assert response.status_code == 400


def test_duplicate_collection_slug_is_409(client):
    assert client.post("/api/collections", json={"name": "Sale"}).status_code == 201

    response = client.post("/api/collections", json={"name": "Sale"})

    assert response.status_code == 409
    assert response.json()["error"] == "Conflict"


def test_overlong_names_are_400(client):
    response = client.post("/api/collections", json={"name": "n" * 101})
    assert response.status_code == 400
    assert response.json()["error"] == "ValidationError"

    response = client.post("/api/products", json={"title": "t" * 256, "price": 1})
    assert response.status_code == 400


def test_order_for_unknown_user_is_400(client, make_product):
    shirt = make_product("Shirt")
    payload = {
        "user_id": 999,
        "items": [{"product_id": shirt.id, "quantity": 1}],
        "shipping_address": {
            "street": "1 Main St",
            "city": "Pune",
            "state": "MH",
            "zip_code": "411001",
            "country": "IN",
        },
        "payment_method": "razorpay",
    }

    response = client.post("/api/orders", json=payload)

    assert response.status_code == 400
    assert response.json()["error"] == "ValidationError"


def test_collection_listing_parent_filter(client, make_collection):
    root = make_collection("Root")
    make_collection("Child", parent=root)

    roots = client.get("/api/collections", params={"parent_id": "null"}).json()
    children = client.get("/api/collections", params={"parent_id": root.id}).json()
    tree = client.get("/api/collections", params={"flat": "false"}).json()

    assert [c["name"] for c in roots] == ["Root"]
    assert [c["name"] for c in children] == ["Child"]
    assert tree[0]["children"][0]["name"] == "Child"
    assert client.get("/api/collections", params={"parent_id": "abc"}).status_code == 400


def test_batch_endpoint(client, make_collection, make_product):
    root = make_collection("Root")
    child = make_collection("Child", parent=root)
    product = make_product("Shirt")

    response = client.post(
        f"/api/collections/{child.id}/products/batch", json={"productIds": [product.id]}
    )

    assert response.json()["product_ids"] == [product.id]
    roots = client.get("/api/collections/root").json()
    assert roots["products_count"] == 1


def test_mega_menu_and_currency_routes(client, make_collection):
    men = make_collection("Men")

    assert client.post("/api/mega-menu", json={"collection_id": men.id}).status_code == 200
    assert [e["slug"] for e in client.get("/api/mega-menu").json()] == ["men"]

    assert len(client.get("/api/currency").json()) == 3
    response = client.post("/api/currency", json={"currency": "INR", "symbol": "₹", "value": 83})
    assert response.status_code == 201
