from articlehub.auth import ARTICLES_INDEX

from conftest import JSON


def test_login_form(client):
    assert client.get("/login").status_code == 200


def test_login_sets_session_and_redirects(client, make_user):
    uid = make_user(permissions=[ARTICLES_INDEX], password="right-pass")
    resp = client.post("/login", data={"email": "USER1@example.com", "password": "right-pass"})
    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/admin/articles")
    with client.session_transaction() as s:
        assert s["user_id"] == uid
    assert client.get("/admin/articles").status_code == 200


def test_login_honours_local_next_only(client, make_user):
    make_user(password="right-pass")
    resp = client.post("/login?next=/admin/articles/create", data={"email": "user1@example.com", "password": "right-pass"})
    assert resp.headers["Location"].endswith("/admin/articles/create")
    resp = client.post("/login?next=//evil.example", data={"email": "user1@example.com", "password": "right-pass"})
    assert resp.headers["Location"].endswith("/admin/articles")


def test_bad_credentials(client, make_user):
    make_user(password="right-pass")
    resp = client.post("/login", data={"email": "user1@example.com", "password": "wrong"}, headers=JSON)
    assert resp.status_code == 422
    assert "email" in resp.get_json()["errors"]
    resp = client.post("/login", data={"email": "user1@example.com", "password": "wrong"})
    assert resp.status_code == 422
    assert b"These credentials do not match our records." in resp.data


def test_logout_clears_session(client, make_user):
    make_user(password="right-pass")
    client.post("/login", data={"email": "user1@example.com", "password": "right-pass"})
    resp = client.post("/logout")
    assert resp.status_code == 302
    assert client.get("/admin/articles", headers=JSON).status_code == 403
