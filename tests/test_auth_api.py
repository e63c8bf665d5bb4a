"""Tests covering login, logout, session resolution and account creation."""

from __future__ import annotations

import bcrypt

from rauta.core.config import settings
from rauta.core.security import SessionIssuer, verify_password
from rauta.models.user import User


def test_login_sets_session_cookie(client, make_user):
    """Valid credentials return the user summary and a session cookie."""

    user = make_user("a@b.com", "secret1", name="Alice")

    response = client.post("/auth/login", json={"email": "a@b.com", "password": "secret1"})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["user"] == {"id": user.id, "email": "a@b.com", "name": "Alice"}
    set_cookie = response.headers["set-cookie"]
    assert set_cookie.startswith(f"{settings.session_cookie_name}=")
    assert "HttpOnly" in set_cookie
    assert "Path=/" in set_cookie


def test_login_cookie_identifies_the_user(client, make_user):
    make_user("a@b.com", "secret1")
    client.post("/auth/login", json={"email": "a@b.com", "password": "secret1"})

    me = client.get("/auth/me")

    assert me.status_code == 200
    assert me.json()["email"] == "a@b.com"
    assert me.json()["role"] == "user"


def test_login_email_is_case_insensitive(client, make_user):
    make_user("a@b.com", "secret1")

    response = client.post("/auth/login", json={"email": "A@B.com", "password": "secret1"})

    assert response.status_code == 200


def test_wrong_password_is_unauthorized(client, make_user):
    make_user("a@b.com", "secret1")

    response = client.post("/auth/login", json={"email": "a@b.com", "password": "wrong1"})

    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid email or password"
    assert "set-cookie" not in response.headers


def test_unknown_email_gets_the_same_message(client):
    response = client.post("/auth/login", json={"email": "nobody@b.com", "password": "secret1"})

    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid email or password"


def test_passwordless_account_cannot_log_in(client, db_session, make_user):
    user = make_user("ext@b.com", "secret1")
    user.password_hash = None
    db_session.commit()

    response = client.post("/auth/login", json={"email": "ext@b.com", "password": "secret1"})

    assert response.status_code == 401


def test_login_accepts_legacy_bcrypt_hash(client, db_session, make_user):
    """Accounts carried over with a bcrypt hash log in and are rehashed."""

    user = make_user("a@b.com", "secret1")
    user_id = user.id
    user.password_hash = bcrypt.hashpw(b"secret1", bcrypt.gensalt(rounds=4)).decode("ascii")
    db_session.commit()

    wrong = client.post("/auth/login", json={"email": "a@b.com", "password": "wrong1"})
    response = client.post("/auth/login", json={"email": "a@b.com", "password": "secret1"})

    assert wrong.status_code == 401
    assert response.status_code == 200
    assert response.json()["success"] is True
    assert settings.session_cookie_name in response.headers["set-cookie"]
    db_session.expire_all()
    assert db_session.get(User, user_id).password_hash.startswith("$pbkdf2-sha256$")


def test_login_body_is_validated(client):
    short = client.post("/auth/login", json={"email": "a@b.com", "password": "12345"})
    bad_email = client.post("/auth/login", json={"email": "not-an-email", "password": "secret1"})

    assert short.status_code == 422
    assert bad_email.status_code == 422


def test_me_is_null_without_session(client):
    response = client.get("/auth/me")

    assert response.status_code == 200
    assert response.json() is None


def test_logout_clears_cookie(client, make_user):
    make_user("a@b.com", "secret1")
    client.post("/auth/login", json={"email": "a@b.com", "password": "secret1"})

    response = client.post("/auth/logout")

    assert response.status_code == 200
    assert response.json() == {"success": True}
    assert f'{settings.session_cookie_name}=""' in response.headers["set-cookie"]
    assert client.get("/auth/me").json() is None


def test_protected_endpoint_without_cookie_is_forbidden(client):
    response = client.get("/two-factor/status")

    assert response.status_code == 403


def test_cookie_signed_with_other_secret_is_forbidden(client, regular_user):
    forged = SessionIssuer("not-the-server-secret-000000000000").issue(regular_user.id, regular_user.email)
    client.cookies.set(settings.session_cookie_name, forged)

    assert client.get("/two-factor/status").status_code == 403


def test_session_for_deleted_user_is_forbidden(client, db_session, regular_user, login_as):
    login_as(regular_user)
    db_session.delete(regular_user)
    db_session.commit()

    assert client.get("/two-factor/status").status_code == 403


def test_admin_creates_user(client, db_session, admin, login_as):
    login_as(admin)

    response = client.post(
        "/auth/users",
        json={"email": "New@Example.com", "password": "newpw1", "name": "New", "role": "user"},
    )

    assert response.status_code == 201
    body = response.json()
    assert body["email"] == "new@example.com"
    assert body["role"] == "user"
    assert body["login_method"] == "email"
    assert "password_hash" not in body
    stored = db_session.query(User).filter(User.id == body["id"]).one()
    assert verify_password("newpw1", stored.password_hash)


def test_create_user_with_taken_email_conflicts(client, admin, regular_user, login_as):
    login_as(admin)

    response = client.post(
        "/auth/users",
        json={"email": regular_user.email, "password": "newpw1", "name": "Dup"},
    )

    assert response.status_code == 409


def test_non_admin_cannot_create_user(client, db_session, regular_user, login_as):
    login_as(regular_user)

    response = client.post(
        "/auth/users",
        json={"email": "x@example.com", "password": "newpw1", "name": "X", "role": "admin"},
    )

    assert response.status_code == 403
    assert db_session.query(User).filter(User.email == "x@example.com").first() is None


def test_admin_updates_password(client, db_session, admin, regular_user, login_as):
    login_as(admin)

    response = client.put(f"/auth/users/{regular_user.id}/password", json={"password": "changed1"})

    assert response.status_code == 200
    assert response.json() == {"success": True}
    db_session.expire_all()
    assert verify_password("changed1", db_session.get(User, regular_user.id).password_hash)


def test_update_password_for_unknown_user(client, admin, login_as):
    login_as(admin)

    response = client.put("/auth/users/user_missing/password", json={"password": "changed1"})

    assert response.status_code == 404


def test_non_admin_cannot_update_password(client, admin, regular_user, login_as):
    login_as(regular_user)

    response = client.put(f"/auth/users/{admin.id}/password", json={"password": "hijack1"})

    assert response.status_code == 403
