def _category(client, headers, name, type_="PRODUCT"):
    r = client.post("/api/categories", json={"name": name, "type": type_}, headers=headers)
    assert r.status_code == 201, r.text
    return r.json()


def test_create_product_with_categories(client, admin_headers):
    drinks = _category(client, admin_headers, "Drinks")
    r = client.post(
        "/api/products",
        json={"product_name": "Maheu", "category_ids": [drinks["id"]], "additional_images": ["a.png"]},
        headers=admin_headers,
    )
    assert r.status_code == 201
    body = r.json()
    assert [c["name"] for c in body["categories"]] == ["Drinks"]
    assert body["additional_images"] == ["a.png"]
    assert body["total_views"] == 0
    assert body["quick_rating_avg"] is None


def test_unknown_or_mistyped_category(client, admin_headers):
    banking = _category(client, admin_headers, "Banking", "SERVICE")
    r = client.post("/api/products", json={"product_name": "Maheu", "category_ids": [999]}, headers=admin_headers)
    assert r.status_code == 400
    r = client.post("/api/products", json={"product_name": "Maheu", "category_ids": [banking["id"]]}, headers=admin_headers)
    assert r.status_code == 400


def test_mobile_user_cannot_create_items(client, user_headers):
    r = client.post("/api/products", json={"product_name": "Maheu"}, headers=user_headers)
    assert r.status_code == 403


def test_list_search_and_filter(client, admin_headers):
    drinks = _category(client, admin_headers, "Drinks")
    client.post("/api/products", json={"product_name": "Maheu", "category_ids": [drinks["id"]]}, headers=admin_headers)
    client.post("/api/products", json={"product_name": "Sadza Meal", "description": "mealie meal"}, headers=admin_headers)

    r = client.get("/api/products").json()
    assert r["meta"]["total"] == 2
    r = client.get("/api/products", params={"search": "meal"}).json()
    assert [p["product_name"] for p in r["items"]] == ["Sadza Meal"]
    r = client.get("/api/products", params={"categories": "Drinks,Snacks"}).json()
    assert [p["product_name"] for p in r["items"]] == ["Maheu"]
    r = client.get("/api/products", params={"sort_by": "name", "sort_order": "asc"}).json()
    assert [p["product_name"] for p in r["items"]] == ["Maheu", "Sadza Meal"]


def test_update_replaces_categories(client, admin_headers, product):
    drinks = _category(client, admin_headers, "Drinks")
    r = client.put(f"/api/products/{product['id']}", json={"category_ids": [drinks["id"]]}, headers=admin_headers)
    assert r.status_code == 200
    assert len(r.json()["categories"]) == 1
    assert r.json()["last_update"] is not None

    # omitted keeps, empty clears
    r = client.put(f"/api/products/{product['id']}", json={"product_owner": "Delta"}, headers=admin_headers)
    assert len(r.json()["categories"]) == 1
    r = client.put(f"/api/products/{product['id']}", json={"category_ids": []}, headers=admin_headers)
    assert r.json()["categories"] == []


def test_soft_delete_hides_from_list(client, admin_headers, product):
    r = client.delete(f"/api/products/{product['id']}", headers=admin_headers)
    assert r.status_code == 200
    assert client.get("/api/products").json()["meta"]["total"] == 0
    assert client.get("/api/products", params={"is_active": False}).json()["meta"]["total"] == 1
    assert client.get(f"/api/products/{product['id']}").json()["is_active"] is False


def test_view_counter(client, product):
    client.post(f"/api/products/{product['id']}/view")
    r = client.post(f"/api/products/{product['id']}/view")
    assert r.json()["total_views"] == 2


def test_search_orders_rated_items_first(client, admin_headers, user_headers):
    a = client.post("/api/products", json={"product_name": "Chibuku Scud"}, headers=admin_headers).json()
    b = client.post("/api/products", json={"product_name": "Chibuku Super"}, headers=admin_headers).json()
    client.post("/api/quick-ratings", json={"item_type": "PRODUCT", "item_id": b["id"], "rating": 5}, headers=user_headers)

    r = client.get("/api/products/search/chibuku").json()
    assert [p["id"] for p in r] == [b["id"], a["id"]]


def test_count(client, admin_headers, product):
    assert client.get("/api/products/stats/count", headers=admin_headers).json() == {"count": 1}


def test_missing_product(client):
    r = client.get("/api/products/9999")
    assert r.status_code == 404
    assert r.json()["detail"] == "Product not found"


def test_service_verification(client, admin_headers, service_item):
    assert service_item["is_verified"] is False
    r = client.post(f"/api/services/{service_item['id']}/verify", headers=admin_headers)
    assert r.json()["is_verified"] is True
    r = client.post(f"/api/services/{service_item['id']}/unverify", headers=admin_headers)
    assert r.json()["is_verified"] is False


def test_reviews_refuse_inactive_items(client, admin_headers, user_headers, service_item):
    client.delete(f"/api/services/{service_item['id']}", headers=admin_headers)
    r = client.post(
        "/api/reviews",
        json={"item_type": "SERVICE", "item_id": service_item["id"], "sentiment": "ITS_GOOD"},
        headers=user_headers,
    )
    assert r.status_code == 404
