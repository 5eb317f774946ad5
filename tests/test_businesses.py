def _business(client, headers, name="Delta Beverages", email="info@delta.co.zw"):
    r = client.post("/api/businesses", json={"name": name, "business_email": email}, headers=headers)
    assert r.status_code == 201, r.text
    return r.json()


def test_create_and_duplicate_email(client, admin_headers):
    b = _business(client, admin_headers)
    assert b["is_verified"] is False
    assert b["status"] is True
    r = client.post("/api/businesses", json={"name": "Other", "business_email": "info@delta.co.zw"}, headers=admin_headers)
    assert r.status_code == 409


def test_empty_business_is_hard_deleted(client, admin_headers):
    b = _business(client, admin_headers)
    r = client.delete(f"/api/businesses/{b['id']}", headers=admin_headers)
    assert r.json()["hard_deleted"] is True
    assert client.get(f"/api/businesses/{b['id']}").status_code == 404


def test_business_with_items_is_soft_deleted(client, admin_headers):
    b = _business(client, admin_headers)
    client.post("/api/products", json={"product_name": "Chibuku", "business_id": b["id"]}, headers=admin_headers)
    r = client.delete(f"/api/businesses/{b['id']}", headers=admin_headers)
    assert r.json()["hard_deleted"] is False
    body = client.get(f"/api/businesses/{b['id']}").json()
    assert body["status"] is False
    assert body["product_count"] == 1


def test_items_and_analytics(client, admin_headers, user_headers):
    b = _business(client, admin_headers)
    p = client.post("/api/products", json={"product_name": "Chibuku", "business_id": b["id"]}, headers=admin_headers).json()
    client.post("/api/services", json={"service_name": "Delivery", "business_id": b["id"]}, headers=admin_headers)
    client.post(f"/api/products/{p['id']}/view")
    client.post("/api/quick-ratings", json={"item_type": "PRODUCT", "item_id": p["id"], "rating": 4}, headers=user_headers)

    assert client.get(f"/api/businesses/{b['id']}/products").json()["meta"]["total"] == 1
    assert client.get(f"/api/businesses/{b['id']}/services").json()["meta"]["total"] == 1

    a = client.get(f"/api/businesses/{b['id']}/analytics", headers=admin_headers).json()
    assert a["total_items"] == 2
    assert a["total_views"] == 1
    assert a["products"]["avg_rating"] == 4.0


def test_verify_and_stats(client, admin_headers):
    b = _business(client, admin_headers)
    _business(client, admin_headers, "Econet", "hello@econet.co.zw")
    assert client.post(f"/api/businesses/{b['id']}/verify", headers=admin_headers).json()["is_verified"] is True

    stats = client.get("/api/businesses/stats/overview", headers=admin_headers).json()
    assert stats == {"total": 2, "verified": 1, "unverified": 1, "active": 2, "inactive": 0}

    r = client.get("/api/businesses", params={"is_verified": True}).json()
    assert [x["name"] for x in r["items"]] == ["Delta Beverages"]
    r = client.get("/api/businesses", params={"search": "econet"}).json()
    assert r["meta"]["total"] == 1


def test_update(client, admin_headers):
    b = _business(client, admin_headers)
    r = client.put(f"/api/businesses/{b['id']}", json={"location": "Harare"}, headers=admin_headers)
    assert r.json()["location"] == "Harare"
