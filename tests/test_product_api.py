"""Component tests for the product catalog endpoints."""


NEW_PRODUCT = {
    "id": "p10",
    "category": "books",
    "name": "Clean Architecture",
    "description": "A craftsman's guide",
    "price": 32.5,
    "stockQuantity": 8,
}


def test_create_product(client):
    response = client.post("/api/products", json=NEW_PRODUCT)

    assert response.status_code == 201
    data = response.get_json()["data"]
    assert data == {
        "id": "p10",
        "category": "books",
        "name": "Clean Architecture",
        "description": "A craftsman's guide",
        "price": "32.50",
        "stockQuantity": 8,
    }


def test_create_generates_id_when_missing(client):
    body = {k: v for k, v in NEW_PRODUCT.items() if k != "id"}

    response = client.post("/api/products", json=body)

    assert response.status_code == 201
    assert response.get_json()["data"]["id"]


def test_create_duplicate_is_409(client):
    client.post("/api/products", json=NEW_PRODUCT)

    response = client.post("/api/products", json=NEW_PRODUCT)

    assert response.status_code == 409
    assert response.get_json()["error"]["code"] == "CONFLICT"


def test_create_rejects_negative_price(client):
    response = client.post("/api/products", json={**NEW_PRODUCT, "price": -1})

    assert response.status_code == 400
    fields = [e["field"] for e in response.get_json()["error"]["details"]["field_errors"]]
    assert "price" in fields


def test_create_requires_json_object(client):
    response = client.post("/api/products", data="nope", content_type="text/plain")

    assert response.status_code == 400


def test_list_and_filter_by_category(client):
    all_ids = [p["id"] for p in client.get("/api/products").get_json()["data"]]
    book_ids = [p["id"] for p in client.get("/api/products/category/books").get_json()["data"]]

    assert sorted(all_ids) == ["p1", "p2", "p3"]
    assert book_ids == ["p3"]


def test_get_product(client):
    response = client.get("/api/products/p2")

    assert response.status_code == 200
    assert response.get_json()["data"]["name"] == "Fountain Pen"


def test_get_missing_product_is_404(client):
    response = client.get("/api/products/missing")

    assert response.status_code == 404
    assert response.get_json()["success"] is False


def test_update_product_keeps_path_id(client):
    response = client.put("/api/products/p1", json={**NEW_PRODUCT, "id": "other", "name": "Notebook XL"})

    assert response.status_code == 200
    data = response.get_json()["data"]
    assert data["id"] == "p1"
    assert data["name"] == "Notebook XL"


def test_update_missing_product_is_404(client):
    response = client.put("/api/products/missing", json=NEW_PRODUCT)

    assert response.status_code == 404


def test_delete_product(client):
    assert client.delete("/api/products/p3").status_code == 204
    assert client.get("/api/products/p3").status_code == 404
    assert client.delete("/api/products/p3").status_code == 404


def test_price_change_does_not_reach_existing_cart(client):
    client.post("/api/cart/u1/items?productId=p1&quantity=2")
    client.put("/api/products/p1", json={**NEW_PRODUCT, "price": 99})

    cart = client.get("/api/cart/u1").get_json()["data"]

    assert cart["items"][0]["price"] == "5.00"
    assert cart["totalAmount"] == "10.00"
