from storefront.clients.backend import BackendError

from conftest import product_data


def test_catalog_lists_live_products_newest_first(client):
    response = client.get("/api/catalog/products")
    assert response.status_code == 200
    body = response.json()
    assert [item["id"] for item in body["items"]] == ["p2", "p3", "p1"]
    assert body["total"] == 3
    assert body["has_filters"] is False


def test_catalog_cards_resolve_price_stock_and_image(client):
    items = {item["id"]: item for item in client.get("/api/catalog/products").json()["items"]}

    variable = items["p3"]
    assert variable["price"] == 1400
    assert variable["formatted_price"] == "S/ 1,400.00"
    assert variable["stock"] == 4
    assert variable["stock_status"]["status"] == "low-stock"
    assert variable["can_add_to_cart"] is True

    assert items["p1"]["image"] == "http://backend.test/uploads/products/p1/a.jpg"
    assert items["p2"]["image"] == "/placeholder-product.jpg"


def test_catalog_filters_ignore_malformed_query_values(client):
    response = client.get(
        "/api/catalog/products",
        params={"search": "MESA", "min_price": "abc", "sort_by": "price"},
    )
    body = response.json()
    assert response.status_code == 200
    assert [item["id"] for item in body["items"]] == ["p2"]
    assert body["has_filters"] is True
    assert body["filters"]["priceRange"] == {"min": None, "max": None}
    assert body["filters"]["sortBy"] is None


def test_catalog_price_and_sort_params(client):
    response = client.get(
        "/api/catalog/products",
        params={"min_price": "200", "max_price": "1000", "sort_by": "name", "sort_order": "asc"},
    )
    assert [item["id"] for item in response.json()["items"]] == ["p2", "p1"]


def test_catalog_is_fetched_once(client, fake_backend):
    client.get("/api/catalog/products")
    client.get("/api/catalog/featured")
    fetches = [call for call in fake_backend.calls if call[0] == "list_public_products"]
    assert len(fetches) == 1


def test_featured_and_categories(client):
    featured = client.get("/api/catalog/featured").json()
    assert [item["id"] for item in featured] == ["p2", "p3"]

    categories = client.get("/api/catalog/categories").json()
    assert [(c["name"], c["count"]) for c in categories] == [
        ("Mesas", 1),
        ("Sillas", 1),
        ("Sofás", 1),
    ]


def test_refresh_reloads_catalog(client, fake_backend):
    client.get("/api/catalog/products")
    fake_backend.records.append(product_data(id="p9", slug="nuevo", created_at="2025-01-01T00:00:00Z"))
    body = client.post("/api/catalog/refresh").json()
    assert body["products"] == 4
    assert client.get("/api/catalog/featured").json()[0]["id"] == "p9"


def test_product_detail_lists_only_active_variants(client):
    response = client.get("/api/catalog/products/p3")
    assert response.status_code == 200
    body = response.json()
    assert [v["id"] for v in body["variants"]] == ["v1"]
    assert body["attributes"] == {"Material": "Madera"}


def test_product_detail_by_slug(client):
    response = client.get("/api/catalog/products/slug/silla-eames")
    assert response.status_code == 200
    assert response.json()["images"] == ["http://backend.test/uploads/products/p1/a.jpg"]


def test_hidden_or_unknown_products_are_not_found(client):
    assert client.get("/api/catalog/products/slug/lampara-retirada").status_code == 404
    assert client.get("/api/catalog/products/slug/nope").status_code == 404
    assert client.get("/api/catalog/products/p4").status_code == 404


def test_backend_outage_maps_to_bad_gateway(client, fake_backend):
    fake_backend.fail_with = BackendError("down", status_code=500)
    response = client.get("/api/catalog/products")
    assert response.status_code == 502
    assert response.json()["detail"] == "Error al cargar el catálogo de productos"


def test_cart_flow(client):
    response = client.post("/api/cart/c1/items", json={"product_id": "p1", "quantity": 2})
    assert response.status_code == 200
    client.post("/api/cart/c1/items", json={"product_id": "p1"})
    client.post("/api/cart/c1/items", json={"product_id": "p3", "variant_id": "v1"})

    cart = client.get("/api/cart/c1").json()
    assert [(item["id"], item["quantity"]) for item in cart["items"]] == [
        ("p1", 3),
        ("p3-v1", 1),
    ]
    assert cart["total"] == 3 * 250 + 1400
    assert cart["item_count"] == 4

    cart = client.patch("/api/cart/c1/items/p1", json={"quantity": 0}).json()
    assert cart["items"][0]["quantity"] == 1

    cart = client.delete("/api/cart/c1/items/p3-v1").json()
    assert [item["id"] for item in cart["items"]] == ["p1"]

    assert client.delete("/api/cart/c1").status_code == 204
    assert client.get("/api/cart/c1").json()["items"] == []


def test_cart_rejects_out_of_stock(client, fake_backend):
    fake_backend.records.append(product_data(id="p5", slug="agotado", stock=0))
    response = client.post("/api/cart/c1/items", json={"product_id": "p5"})
    assert response.status_code == 409
    assert response.json()["detail"] == "Agotado"


def test_cart_rejects_unknown_product_and_inactive_variant(client):
    assert client.post("/api/cart/c1/items", json={"product_id": "zzz"}).status_code == 404
    response = client.post("/api/cart/c1/items", json={"product_id": "p3", "variant_id": "v2"})
    assert response.status_code == 404
    assert client.patch("/api/cart/c1/items/nope", json={"quantity": 2}).status_code == 404


def test_cart_survives_redis_outage(client, memory_redis):
    memory_redis.broken = True
    assert client.get("/api/cart/c1").json()["items"] == []
    response = client.post("/api/cart/c1/items", json={"product_id": "p1"})
    assert response.status_code == 200
    assert response.json()["item_count"] == 1


def test_attribute_endpoints(client):
    cocina = client.get("/api/attributes/", params={"category": "cocina"}).json()
    assert [option["id"] for option in cocina] == ["tipo_cocina", "material_cocina"]
    assert client.get("/api/attributes/categories").json()[0] == "muebles"

    folded = client.post(
        "/api/attributes/backend-format",
        json={
            "selected": [{"name": "Color", "value": "Rojo"}],
            "custom": [{"name": "Color", "value": "Azul"}, {"name": "Peso", "value": "3kg"}],
        },
    ).json()
    assert folded == {"Color": "Azul", "Peso": "3kg"}


def test_admin_rows_for_variable_products(client):
    body = client.get("/api/admin/products/rows", params={"type": "variable"}).json()
    assert [row["id"] for row in body["items"]] == ["v1", "v2"]
    assert {row["kind"] for row in body["items"]} == {"variant"}
    assert body["items"][0]["name"] == "Sofá modular - GRIS"
    assert body["has_filters"] is True


def test_admin_rows_normalise_unknown_filters(client):
    body = client.get(
        "/api/admin/products/rows", params={"status": "bogus", "sort": "name_asc"}
    ).json()
    assert [row["id"] for row in body["items"]] == ["p4", "p2", "p1", "p3"]


def test_admin_stats(client):
    stats = client.get("/api/admin/products/stats").json()
    assert stats["total"] == 4
    assert stats["active"] == 3
    assert stats["inactive"] == 1


def test_admin_validate_product(client):
    body = client.post(
        "/api/admin/products/validate", json={"name": "Mesa Roble", "sku": "bad sku"}
    ).json()
    assert body["valid"] is False
    assert body["suggested_slug"] == "mesa-roble"
    assert body["suggested_sku"].startswith("MESA-ROBLE-")


def test_admin_mutations_mark_catalog_stale(client, app, fake_backend):
    client.get("/api/catalog/products")
    assert app.state.catalog_store.loaded is True

    response = client.patch("/api/admin/products/p4/activate")
    assert response.status_code == 200
    assert ("activate_product", "p4") in fake_backend.calls
    assert app.state.catalog_store.loaded is False

    assert client.delete("/api/admin/products/p1").status_code == 204


def test_admin_variant_creation_checks_product_id(client):
    payload = {"product_id": "other", "sku_suffix": "XL", "price": 10}
    assert client.post("/api/admin/products/p3/variants", json=payload).status_code == 400

    payload["product_id"] = "p3"
    response = client.post("/api/admin/products/p3/variants", json=payload)
    assert response.status_code == 201
    assert response.json()["sku_suffix"] == "XL"


def test_admin_backend_not_found_passes_through(client, fake_backend):
    fake_backend.fail_with = BackendError("Producto no encontrado", status_code=404)
    response = client.patch("/api/admin/products/p1/deactivate")
    assert response.status_code == 404


def test_health(client, memory_redis, fake_backend):
    assert client.get("/health/live").json()["status"] == "ok"

    ready = client.get("/health/ready").json()
    assert ready["checks"]["backend"]["status"] == "healthy"
    assert ready["checks"]["redis"]["status"] == "healthy"

    memory_redis.broken = True
    ready = client.get("/health/ready")
    assert ready.status_code == 200
    assert ready.json()["checks"]["redis"]["status"] == "unhealthy"

    fake_backend.fail_with = BackendError("down")
    assert client.get("/health/ready").status_code == 503
