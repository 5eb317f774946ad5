from tests.conftest import USER_PASSWORD


def test_register_login_and_me(client, user_headers):
    r = client.get("/api/auth/me", headers=user_headers)
    assert r.status_code == 200
    body = r.json()
    assert body["email"] == "rudo@gmail.com"
    assert body["role"] == "user"
    assert body["has_completed_profile"] is False


def test_login_sets_refresh_cookie(client, make_user):
    make_user("tino@gmail.com")
    r = client.post("/api/auth/login", data={"username": "tino@gmail.com", "password": USER_PASSWORD})
    assert r.status_code == 200
    assert r.json()["refresh_token"]
    assert "refresh_token" in r.cookies


def test_register_duplicate_email(client, make_user):
    make_user("tino@gmail.com")
    r = client.post("/api/auth/register", json={"email": "tino@gmail.com", "password": USER_PASSWORD})
    assert r.status_code == 409


def test_wrong_password_then_lockout(client, make_user):
    make_user("tino@gmail.com")
    for _ in range(5):
        r = client.post("/api/auth/login", data={"username": "tino@gmail.com", "password": "wrongpass1"})
        assert r.status_code == 401

    # locked even with the right password
    r = client.post("/api/auth/login", data={"username": "tino@gmail.com", "password": USER_PASSWORD})
    assert r.status_code == 403
    assert "locked" in r.json()["detail"]


def test_unknown_email(client):
    r = client.post("/api/auth/login", data={"username": "ghost@gmail.com", "password": "whatever1"})
    assert r.status_code == 401


def test_me_requires_token(client):
    assert client.get("/api/auth/me").status_code == 401


def test_logout_blacklists_access_token(client, user_headers):
    r = client.post("/api/auth/logout", headers=user_headers)
    assert r.status_code == 200
    assert client.get("/api/auth/me", headers=user_headers).status_code == 401


def test_refresh_rotates_and_rejects_reuse(client, make_user):
    make_user("tino@gmail.com")
    r = client.post("/api/auth/login", data={"username": "tino@gmail.com", "password": USER_PASSWORD})
    old_refresh = r.json()["refresh_token"]

    r = client.post("/api/auth/refresh", json={"refresh_token": old_refresh})
    assert r.status_code == 200
    pair = r.json()
    assert pair["refresh_token"] != old_refresh
    headers = {"Authorization": f"Bearer {pair['access_token']}"}
    assert client.get("/api/auth/me", headers=headers).status_code == 200

    r = client.post("/api/auth/refresh", json={"refresh_token": old_refresh})
    assert r.status_code == 401


def test_refresh_rejects_access_token(client, make_user):
    headers = make_user("tino@gmail.com")
    access = headers["Authorization"].split()[1]
    r = client.post("/api/auth/refresh", json={"refresh_token": access})
    assert r.status_code == 401


def test_deactivated_user_cannot_login(client, admin_headers, make_user):
    headers = make_user("tino@gmail.com")
    user_id = client.get("/api/auth/me", headers=headers).json()["id"]
    r = client.post(f"/api/users/{user_id}/deactivate", headers=admin_headers)
    assert r.status_code == 200

    r = client.post("/api/auth/login", data={"username": "tino@gmail.com", "password": USER_PASSWORD})
    assert r.status_code == 403
    assert client.get("/api/auth/me", headers=headers).status_code == 403
