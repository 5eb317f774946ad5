def _comment(client, headers, item_id, text="Nice", parent_id=None, item_type="PRODUCT"):
    return client.post(
        "/api/comments",
        json={"item_type": item_type, "item_id": item_id, "text": text, "parent_id": parent_id},
        headers=headers,
    )


def test_reply_depth_is_capped(client, product, user_headers):
    root = _comment(client, user_headers, product["id"]).json()
    reply = _comment(client, user_headers, product["id"], parent_id=root["id"]).json()
    nested = _comment(client, user_headers, product["id"], parent_id=reply["id"]).json()
    deeper = _comment(client, user_headers, product["id"], parent_id=nested["id"]).json()

    assert root["depth"] == 0
    assert reply["depth"] == 1
    assert nested["depth"] == 2
    assert deeper["depth"] == 2
    assert root["user_name"] == "Rudo Chirwa"


def test_reply_increments_parent_count(client, product, user_headers):
    root = _comment(client, user_headers, product["id"]).json()
    _comment(client, user_headers, product["id"], parent_id=root["id"])
    _comment(client, user_headers, product["id"], parent_id=root["id"])
    assert client.get(f"/api/comments/{root['id']}").json()["reply_count"] == 2

    replies = client.get(f"/api/comments/{root['id']}/replies").json()
    assert replies["meta"]["total"] == 2


def test_soft_delete_decrements_parent_exactly_once(client, product, user_headers):
    root = _comment(client, user_headers, product["id"]).json()
    reply = _comment(client, user_headers, product["id"], parent_id=root["id"]).json()
    assert client.get(f"/api/comments/{root['id']}").json()["reply_count"] == 1

    assert client.delete(f"/api/comments/{reply['id']}", headers=user_headers).status_code == 200
    assert client.get(f"/api/comments/{root['id']}").json()["reply_count"] == 0

    assert client.delete(f"/api/comments/{reply['id']}", headers=user_headers).status_code == 404
    assert client.get(f"/api/comments/{root['id']}").json()["reply_count"] == 0


def test_parent_must_be_on_same_item(client, product, service_item, user_headers):
    root = _comment(client, user_headers, product["id"]).json()
    r = _comment(client, user_headers, service_item["id"], parent_id=root["id"], item_type="SERVICE")
    assert r.status_code == 400

    r = _comment(client, user_headers, product["id"], parent_id=9999)
    assert r.status_code == 404


def test_comment_analytics(client, product, user_headers):
    root = _comment(client, user_headers, product["id"]).json()
    _comment(client, user_headers, product["id"], parent_id=root["id"])
    analytics = client.get("/api/users/me/analytics", headers=user_headers).json()
    assert analytics["total_comments"] == 2
    assert analytics["product_comments"] == 2
    assert analytics["total_replies"] == 1
    assert analytics["last_comment_at"] is not None


def test_edit_by_author_only(client, product, user_headers, make_user):
    c = _comment(client, user_headers, product["id"]).json()
    other = make_user("chipo@gmail.com")
    assert client.put(f"/api/comments/{c['id']}", json={"text": "hijack"}, headers=other).status_code == 403
    assert client.delete(f"/api/comments/{c['id']}", headers=other).status_code == 403

    r = client.put(f"/api/comments/{c['id']}", json={"text": "Edited"}, headers=user_headers)
    assert r.status_code == 200
    assert r.json()["is_edited"] is True
    assert r.json()["edited_at"] is not None


def test_reaction_toggle_and_switch(client, product, user_headers, make_user):
    c = _comment(client, user_headers, product["id"]).json()
    reactor = make_user("chipo@gmail.com")
    url = f"/api/comments/{c['id']}/react"

    r = client.post(url, json={"reaction_type": "AGREE"}, headers=reactor).json()
    assert (r["action"], r["agree_count"], r["disagree_count"]) == ("created", 1, 0)

    r = client.post(url, json={"reaction_type": "DISAGREE"}, headers=reactor).json()
    assert (r["action"], r["agree_count"], r["disagree_count"]) == ("updated", 0, 1)

    r = client.post(url, json={"reaction_type": "DISAGREE"}, headers=reactor).json()
    assert (r["action"], r["agree_count"], r["disagree_count"]) == ("removed", 0, 0)
    assert r["reaction_type"] is None

    analytics = client.get("/api/users/me/analytics", headers=reactor).json()
    assert analytics["total_agrees"] == 1


def test_remove_reaction(client, product, user_headers):
    c = _comment(client, user_headers, product["id"]).json()
    url = f"/api/comments/{c['id']}/react"
    assert client.delete(url, headers=user_headers).status_code == 404

    client.post(url, json={"reaction_type": "AGREE"}, headers=user_headers)
    mine = client.get(f"/api/comments/{c['id']}/reaction", headers=user_headers).json()
    assert mine["reaction"]["reaction_type"] == "AGREE"

    r = client.delete(url, headers=user_headers)
    assert r.status_code == 200
    assert r.json()["agree_count"] == 0
    assert client.get(f"/api/comments/{c['id']}/reaction", headers=user_headers).json() == {"reaction": None}


def test_item_comments_show_callers_reaction(client, product, user_headers, make_user):
    root = _comment(client, user_headers, product["id"]).json()
    _comment(client, user_headers, product["id"], parent_id=root["id"])
    other = make_user("chipo@gmail.com")
    client.post(f"/api/comments/{root['id']}/react", json={"reaction_type": "DISAGREE"}, headers=other)

    anon = client.get(f"/api/comments/product/{product['id']}").json()
    assert anon["meta"]["total"] == 1
    assert anon["items"][0]["user_reaction"] is None

    mine = client.get(f"/api/comments/product/{product['id']}", headers=other).json()
    assert mine["items"][0]["user_reaction"] == "DISAGREE"


def test_report_comment(client, product, user_headers, admin_headers, make_user):
    c = _comment(client, user_headers, product["id"]).json()
    other = make_user("chipo@gmail.com")
    r = client.post(f"/api/comments/{c['id']}/report", json={"reason": "spam"}, headers=other)
    assert r.status_code == 200
    client.post(f"/api/comments/{c['id']}/report", json={"reason": "abuse"}, headers=other)

    listed = client.get("/api/comments", params={"is_reported": True}, headers=admin_headers).json()
    assert listed["meta"]["total"] == 1
    item = listed["items"][0]
    assert item["report_count"] == 2
    assert item["last_report_reason"] == "abuse"


def test_admin_list_and_count(client, product, service_item, user_headers, admin_headers):
    root = _comment(client, user_headers, product["id"], text="great stuff").json()
    _comment(client, user_headers, product["id"], parent_id=root["id"])
    _comment(client, user_headers, service_item["id"], item_type="SERVICE")

    assert client.get("/api/comments", headers=user_headers).status_code == 403
    r = client.get("/api/comments", params={"search": "great"}, headers=admin_headers).json()
    assert r["meta"]["total"] == 1
    r = client.get("/api/comments", params={"has_replies": True}, headers=admin_headers).json()
    assert [c["id"] for c in r["items"]] == [root["id"]]

    count = client.get("/api/comments/count", params={"item_type": "PRODUCT", "item_id": product["id"]}).json()
    assert count == {"count": 2}


def test_moderator_can_delete_comment(client, product, user_headers, admin_headers):
    c = _comment(client, user_headers, product["id"]).json()
    assert client.delete(f"/api/comments/{c['id']}", headers=admin_headers).status_code == 200
    r = client.get("/api/comments", params={"is_deleted": True}, headers=admin_headers).json()
    assert r["meta"]["total"] == 1
