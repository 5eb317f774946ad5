from datetime import timedelta

import pytest
from fastapi import HTTPException
from sqlalchemy import update

from tuchonga.common.utils import utc_now
from tuchonga.features.quick_ratings import service
from tuchonga.features.quick_ratings.schemas import QuickRatingCreate
from tuchonga.models import ItemType, QuickRating, User


def _rate(client, headers, item_id, rating, item_type="PRODUCT"):
    return client.post(
        "/api/quick-ratings",
        json={"item_type": item_type, "item_id": item_id, "rating": rating},
        headers=headers,
    )


def _age_ratings(db, hours, minutes=0):
    db.query(QuickRating).update(
        {QuickRating.last_updated: utc_now() - timedelta(hours=hours, minutes=minutes)}
    )
    db.commit()


def test_first_rating(client, product, user_headers):
    r = _rate(client, user_headers, product["id"], 4)
    assert r.status_code == 200
    body = r.json()
    assert body["is_new_rating"] is True
    assert body["message"] == "Rating submitted successfully."
    assert body["rating"]["rating"] == 4
    assert body["stats"]["total"] == 1

    item = client.get(f"/api/products/{product['id']}").json()
    assert item["quick_rating_total"] == 1
    assert item["quick_rating_4"] == 1
    assert item["quick_rating_avg"] == 4.0


def test_update_within_cooldown_is_rejected(client, product, user_headers):
    _rate(client, user_headers, product["id"], 4)
    r = _rate(client, user_headers, product["id"], 2)
    assert r.status_code == 429
    assert r.json()["detail"].startswith(
        "You can only update your rating once every 24 hours. Time remaining: 24 hours"
    )


def test_cooldown_message_rounds_up(client, db, product, user_headers):
    _rate(client, user_headers, product["id"], 4)
    _age_ratings(db, hours=20, minutes=30)

    r = _rate(client, user_headers, product["id"], 2)
    assert r.status_code == 429
    assert r.json()["detail"] == (
        "You can only update your rating once every 24 hours. "
        "Time remaining: 4 hours (210 minutes)"
    )


def test_cooldown_message_singular_hour(client, db, product, user_headers):
    _rate(client, user_headers, product["id"], 4)
    _age_ratings(db, hours=23, minutes=30)

    r = _rate(client, user_headers, product["id"], 2)
    assert r.status_code == 429
    assert r.json()["detail"] == (
        "You can only update your rating once every 24 hours. "
        "Time remaining: 1 hour (30 minutes)"
    )


def test_stale_cooldown_check_is_rejected_by_guarded_update(client, db, product, user_headers):
    _rate(client, user_headers, product["id"], 5)
    _age_ratings(db, hours=25)

    user = db.query(User).filter(User.email == "rudo@gmail.com").one()
    stale = service.find_user_rating(db, user.id, ItemType.PRODUCT, product["id"])
    # a concurrent request moves last_updated after this session loaded the row
    db.connection().execute(
        update(QuickRating.__table__)
        .where(QuickRating.__table__.c.id == stale.id)
        .values(last_updated=utc_now(), rating=3)
    )

    payload = QuickRatingCreate(item_type=ItemType.PRODUCT, item_id=product["id"], rating=1)
    with pytest.raises(HTTPException) as exc:
        service.submit_rating(db, user, payload)
    assert exc.value.status_code == 429
    assert exc.value.detail.startswith(
        "You can only update your rating once every 24 hours. Time remaining: 24 hours"
    )
    db.expire_all()
    assert db.get(QuickRating, stale.id).rating == 5


def test_update_after_cooldown(client, db, product, user_headers):
    _rate(client, user_headers, product["id"], 5)
    _age_ratings(db, hours=25)

    r = _rate(client, user_headers, product["id"], 1)
    assert r.status_code == 200
    body = r.json()
    assert body["is_new_rating"] is False
    assert body["message"].startswith("Rating updated successfully.")
    assert body["stats"]["distribution"] == {"1": 1, "2": 0, "3": 0, "4": 0, "5": 0}

    # the window restarts from the accepted update
    assert _rate(client, user_headers, product["id"], 3).status_code == 429


def test_rating_out_of_range(client, product, user_headers):
    assert _rate(client, user_headers, product["id"], 0).status_code == 422
    assert _rate(client, user_headers, product["id"], 6).status_code == 422


def test_item_stats(client, product, user_headers, make_user):
    _rate(client, user_headers, product["id"], 5)
    _rate(client, make_user("chipo@gmail.com"), product["id"], 4)
    _rate(client, make_user("tatenda@gmail.com"), product["id"], 4)

    stats = client.get(f"/api/quick-ratings/product/{product['id']}").json()
    assert stats["total"] == 3
    assert stats["average"] == 4.33
    assert stats["distribution"]["4"] == 2


def test_empty_stats(client, service_item):
    stats = client.get(f"/api/quick-ratings/service/{service_item['id']}").json()
    assert stats == {"total": 0, "average": 0.0, "distribution": {"1": 0, "2": 0, "3": 0, "4": 0, "5": 0}}


def test_user_rating_and_can_update(client, db, service_item, user_headers):
    url = f"/api/quick-ratings/user/SERVICE/{service_item['id']}"
    assert client.get(url, headers=user_headers).json() == {
        "rating": None, "can_update": True, "hours_until_update": 0,
    }

    _rate(client, user_headers, service_item["id"], 3, item_type="SERVICE")
    body = client.get(url, headers=user_headers).json()
    assert body["rating"]["rating"] == 3
    assert body["can_update"] is False
    assert body["hours_until_update"] == 24

    _age_ratings(db, hours=30)
    body = client.get(url, headers=user_headers).json()
    assert body["can_update"] is True
    assert body["hours_until_update"] == 0


def test_my_ratings(client, product, service_item, user_headers):
    _rate(client, user_headers, product["id"], 3)
    _rate(client, user_headers, service_item["id"], 5, item_type="SERVICE")
    r = client.get("/api/quick-ratings/user/me/all", headers=user_headers).json()
    assert r["meta"]["total"] == 2
    r = client.get("/api/quick-ratings/user/me/all", params={"item_type": "SERVICE"}, headers=user_headers).json()
    assert r["meta"]["total"] == 1


def test_delete_rating(client, product, user_headers, make_user, admin_headers):
    rating = _rate(client, user_headers, product["id"], 2).json()["rating"]
    other = make_user("chipo@gmail.com")
    assert client.delete(f"/api/quick-ratings/{rating['id']}", headers=other).status_code == 403

    assert client.delete(f"/api/quick-ratings/{rating['id']}", headers=user_headers).status_code == 200
    item = client.get(f"/api/products/{product['id']}").json()
    assert item["quick_rating_total"] == 0
    assert item["quick_rating_avg"] is None

    # rating again after deletion starts fresh
    assert _rate(client, user_headers, product["id"], 5).json()["is_new_rating"] is True


def test_admin_listing(client, product, user_headers, admin_headers):
    _rate(client, user_headers, product["id"], 5)
    assert client.get("/api/quick-ratings", headers=user_headers).status_code == 403

    r = client.get("/api/quick-ratings", params={"rating": 5}, headers=admin_headers).json()
    assert r["meta"]["total"] == 1
    assert r["items"][0]["user"]["full_name"] == "Rudo Chirwa"

    r = client.get(f"/api/quick-ratings/product/{product['id']}/users", headers=admin_headers).json()
    assert r["meta"]["total"] == 1
