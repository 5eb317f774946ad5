def _create(client, headers, name, type_="PRODUCT", description=None):
    return client.post(
        "/api/categories",
        json={"name": name, "type": type_, "description": description},
        headers=headers,
    )


def test_create_and_duplicate(client, admin_headers):
    assert _create(client, admin_headers, "Drinks").status_code == 201
    r = _create(client, admin_headers, "Drinks", "SERVICE")
    assert r.status_code == 409
    assert r.json()["detail"] == "Category with this name already exists"


def test_list_filters_and_order(client, admin_headers):
    _create(client, admin_headers, "Snacks")
    _create(client, admin_headers, "Drinks", description="cold and hot")
    _create(client, admin_headers, "Banking", "SERVICE")

    r = client.get("/api/categories").json()
    assert [c["name"] for c in r["items"]] == ["Banking", "Drinks", "Snacks"]
    assert r["meta"]["limit"] == 100

    r = client.get("/api/categories/products").json()
    assert [c["name"] for c in r["items"]] == ["Drinks", "Snacks"]
    r = client.get("/api/categories/services").json()
    assert [c["name"] for c in r["items"]] == ["Banking"]
    r = client.get("/api/categories", params={"search": "cold"}).json()
    assert [c["name"] for c in r["items"]] == ["Drinks"]


def test_update_name_clash(client, admin_headers):
    a = _create(client, admin_headers, "Drinks").json()
    _create(client, admin_headers, "Snacks")
    r = client.put(f"/api/categories/{a['id']}", json={"name": "Snacks"}, headers=admin_headers)
    assert r.status_code == 409
    r = client.put(f"/api/categories/{a['id']}", json={"name": "Beverages"}, headers=admin_headers)
    assert r.json()["name"] == "Beverages"


def test_delete_refused_while_linked(client, admin_headers):
    drinks = _create(client, admin_headers, "Drinks").json()
    p = client.post(
        "/api/products", json={"product_name": "Maheu", "category_ids": [drinks["id"]]}, headers=admin_headers,
    ).json()

    assert client.get(f"/api/categories/{drinks['id']}").json()["product_count"] == 1
    r = client.delete(f"/api/categories/{drinks['id']}", headers=admin_headers)
    assert r.status_code == 400
    assert r.json()["detail"] == "Cannot delete category. It has 1 products and 0 services."

    client.put(f"/api/products/{p['id']}", json={"category_ids": []}, headers=admin_headers)
    assert client.delete(f"/api/categories/{drinks['id']}", headers=admin_headers).status_code == 200
    assert client.get(f"/api/categories/{drinks['id']}").status_code == 404


def test_delete_missing(client, admin_headers):
    assert client.delete("/api/categories/9999", headers=admin_headers).status_code == 404


def test_bulk_create_skips_existing(client, admin_headers):
    _create(client, admin_headers, "Drinks")
    r = client.post(
        "/api/categories/bulk",
        json={"categories": [
            {"name": "Drinks", "type": "PRODUCT"},
            {"name": "Snacks", "type": "PRODUCT"},
            {"name": "Snacks", "type": "PRODUCT"},
            {"name": "Telecoms", "type": "SERVICE"},
        ]},
        headers=admin_headers,
    )
    assert r.status_code == 201
    body = r.json()
    assert sorted(c["name"] for c in body["created"]) == ["Snacks", "Telecoms"]
    assert body["skipped"] == ["Drinks", "Snacks"]


def test_stats_overview(client, admin_headers):
    _create(client, admin_headers, "Drinks")
    _create(client, admin_headers, "Banking", "SERVICE")
    r = client.get("/api/categories/stats/overview", headers=admin_headers).json()
    assert (r["total"], r["product_categories"], r["service_categories"]) == (2, 1, 1)
    assert {c["name"] for c in r["categories"]} == {"Drinks", "Banking"}


def test_mutations_need_admin(client, user_headers):
    assert _create(client, user_headers, "Drinks").status_code == 403
