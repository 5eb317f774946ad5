def _review(client, headers, item_id, sentiment, text=None, item_type="PRODUCT"):
    return client.post(
        "/api/reviews",
        json={"item_type": item_type, "item_id": item_id, "sentiment": sentiment, "text": text},
        headers=headers,
    )


def test_new_review_has_empty_history(client, product, user_headers):
    r = _review(client, user_headers, product["id"], "ITS_GOOD", "Refreshing")
    assert r.status_code == 200
    body = r.json()
    assert body["is_new_review"] is True
    assert body["review_category"] == "positive"
    assert body["stats"]["total_reviews"] == 1
    assert body["stats"]["positive_reviews"] == 1

    r = client.get(f"/api/reviews/{body['review']['id']}")
    assert r.status_code == 200
    assert r.json()["sentiment_history"] == []
    assert r.json()["text"] == "Refreshing"


def test_second_review_updates_in_place_with_history(client, product, user_headers):
    first = _review(client, user_headers, product["id"], "WOULD_RECOMMEND").json()
    second = _review(client, user_headers, product["id"], "ITS_BAD", "Too sweet now").json()

    assert second["is_new_review"] is False
    assert second["review"]["id"] == first["review"]["id"]
    history = second["review"]["sentiment_history"]
    assert len(history) == 1
    assert history[0]["sentiment"] == "WOULD_RECOMMEND"
    assert second["review_category"] == "negative"
    assert second["stats"]["total_reviews"] == 1
    assert second["stats"]["negative_reviews"] == 1
    assert second["stats"]["positive_reviews"] == 0


def test_repost_with_same_sentiment_records_history(client, product, user_headers):
    _review(client, user_headers, product["id"], "ITS_GOOD", "ok")
    r = _review(client, user_headers, product["id"], "ITS_GOOD", "still ok")
    review = r.json()["review"]
    assert [h["sentiment"] for h in review["sentiment_history"]] == ["ITS_GOOD"]
    assert review["text"] == "still ok"


def test_put_with_same_sentiment_keeps_history(client, product, user_headers):
    review = _review(client, user_headers, product["id"], "ITS_GOOD").json()["review"]
    r = client.put(f"/api/reviews/{review['id']}", json={"sentiment": "ITS_GOOD", "text": "edited"}, headers=user_headers)
    assert r.status_code == 200
    assert r.json()["sentiment_history"] == []
    assert r.json()["text"] == "edited"


def test_review_counts_in_user_analytics_once(client, product, user_headers):
    _review(client, user_headers, product["id"], "ITS_GOOD")
    _review(client, user_headers, product["id"], "DONT_MIND_IT")
    analytics = client.get("/api/users/me/analytics", headers=user_headers).json()
    assert analytics["total_reviews"] == 1
    assert analytics["product_reviews"] == 1
    assert analytics["service_reviews"] == 0
    assert analytics["last_review_at"] is not None


def test_review_unknown_item(client, user_headers):
    r = _review(client, user_headers, 404, "ITS_GOOD")
    assert r.status_code == 404


def test_review_requires_auth(client, product):
    r = client.post("/api/reviews", json={"item_type": "PRODUCT", "item_id": product["id"], "sentiment": "ITS_GOOD"})
    assert r.status_code == 401


def test_update_review_by_owner_only(client, product, user_headers, make_user):
    review = _review(client, user_headers, product["id"], "ITS_GOOD").json()["review"]
    other = make_user("chipo@gmail.com")

    r = client.put(f"/api/reviews/{review['id']}", json={"sentiment": "ITS_BAD"}, headers=other)
    assert r.status_code == 403

    r = client.put(f"/api/reviews/{review['id']}", json={"sentiment": "DONT_MIND_IT"}, headers=user_headers)
    assert r.status_code == 200
    assert r.json()["sentiment"] == "DONT_MIND_IT"
    assert [h["sentiment"] for h in r.json()["sentiment_history"]] == ["ITS_GOOD"]


def test_delete_review_refreshes_stats_and_revives(client, product, user_headers):
    review = _review(client, user_headers, product["id"], "ITS_GOOD").json()["review"]
    r = client.delete(f"/api/reviews/{review['id']}", headers=user_headers)
    assert r.status_code == 200
    assert client.get(f"/api/reviews/{review['id']}").status_code == 404
    assert client.get(f"/api/products/{product['id']}").json()["total_reviews"] == 0

    again = _review(client, user_headers, product["id"], "ITS_GOOD").json()
    assert again["review"]["id"] == review["id"]
    assert again["stats"]["total_reviews"] == 1


def test_admin_can_delete_any_review(client, product, user_headers, admin_headers):
    review = _review(client, user_headers, product["id"], "ITS_BAD").json()["review"]
    assert client.delete(f"/api/reviews/{review['id']}", headers=admin_headers).status_code == 200


def test_check_and_stats(client, product, user_headers, make_user):
    r = client.get("/api/reviews/check", params={"item_type": "PRODUCT", "item_id": product["id"]}, headers=user_headers)
    assert r.json() == {"has_reviewed": False, "review": None}

    _review(client, user_headers, product["id"], "WOULD_RECOMMEND")
    _review(client, make_user("chipo@gmail.com"), product["id"], "ITS_BAD")

    r = client.get("/api/reviews/check", params={"item_type": "PRODUCT", "item_id": product["id"]}, headers=user_headers)
    assert r.json()["has_reviewed"] is True

    stats = client.get("/api/reviews/stats", params={"item_type": "PRODUCT", "item_id": product["id"]}).json()
    assert stats["total"] == 2
    assert stats["distribution"]["WOULD_RECOMMEND"] == 1
    assert stats["distribution"]["ITS_GOOD"] == 0
    assert (stats["positive"], stats["neutral"], stats["negative"]) == (1, 0, 1)


def test_listing_reviews(client, product, service_item, user_headers):
    _review(client, user_headers, product["id"], "ITS_GOOD")
    _review(client, user_headers, service_item["id"], "ITS_BAD", item_type="SERVICE")

    r = client.get(f"/api/reviews/product/{product['id']}")
    assert r.json()["meta"]["total"] == 1
    r = client.get(f"/api/reviews/service/{service_item['id']}")
    assert r.json()["items"][0]["sentiment"] == "ITS_BAD"
    r = client.get("/api/reviews/user/me", headers=user_headers)
    assert r.json()["meta"]["total"] == 2
    r = client.get("/api/reviews", params={"sentiment": "ITS_BAD"})
    assert r.json()["meta"]["total"] == 1
    assert r.json()["items"][0]["user"]["full_name"] == "Rudo Chirwa"
