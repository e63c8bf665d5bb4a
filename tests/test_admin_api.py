"""Tests covering admin user management and the audit trail."""

from __future__ import annotations

import pytest

from rauta.models.user import User


def test_admin_lists_users(client, admin, regular_user, login_as):
    login_as(admin)

    response = client.get("/admin/users")

    assert response.status_code == 200
    emails = {row["email"] for row in response.json()["users"]}
    assert emails == {"admin@example.com", "user@example.com"}
    assert all("password_hash" not in row for row in response.json()["users"])


def test_non_admin_cannot_change_role(client, db_session, regular_user, login_as):
    """A user cannot promote themselves; the stored role is what counts."""

    login_as(regular_user)

    response = client.put(f"/admin/users/{regular_user.id}/role", json={"role": "admin"})

    assert response.status_code == 403
    assert response.json()["detail"] == "Admin access required"
    db_session.expire_all()
    assert db_session.get(User, regular_user.id).role == "user"


def test_admin_promotes_user(client, admin, regular_user, login_as):
    login_as(admin)

    response = client.put(f"/admin/users/{regular_user.id}/role", json={"role": "admin"})

    assert response.status_code == 200
    assert response.json()["role"] == "admin"
    rows = {row["id"]: row for row in client.get("/admin/users").json()["users"]}
    assert rows[regular_user.id]["role"] == "admin"


def test_promoted_user_gains_admin_access(client, admin, regular_user, login_as):
    login_as(admin)
    client.put(f"/admin/users/{regular_user.id}/role", json={"role": "admin"})

    login_as(regular_user)

    assert client.get("/admin/users").status_code == 200


def test_admin_cannot_change_own_role(client, admin, login_as):
    login_as(admin)

    response = client.put(f"/admin/users/{admin.id}/role", json={"role": "user"})

    assert response.status_code == 400


def test_invalid_role_is_rejected(client, admin, regular_user, login_as):
    login_as(admin)

    response = client.put(f"/admin/users/{regular_user.id}/role", json={"role": "owner"})

    assert response.status_code == 422


def test_change_role_of_unknown_user(client, admin, login_as):
    login_as(admin)

    response = client.put("/admin/users/user_missing/role", json={"role": "admin"})

    assert response.status_code == 404


def test_admin_deletes_user(client, db_session, admin, regular_user, login_as):
    user_id = regular_user.id
    login_as(admin)

    response = client.delete(f"/admin/users/{user_id}")

    assert response.status_code == 200
    assert response.json() == {"success": True}
    db_session.expire_all()
    assert db_session.get(User, user_id) is None


def test_admin_cannot_delete_self(client, admin, login_as):
    login_as(admin)

    assert client.delete(f"/admin/users/{admin.id}").status_code == 400


@pytest.mark.parametrize(
    "method, path",
    [
        ("get", "/admin/users"),
        ("delete", "/admin/users/user_x"),
        ("get", "/admin/audit-logs"),
    ],
)
def test_admin_endpoints_reject_regular_user(client, regular_user, login_as, method, path):
    login_as(regular_user)

    assert getattr(client, method)(path).status_code == 403


def test_audit_log_records_role_change(client, admin, regular_user, login_as):
    login_as(admin)
    client.put(f"/admin/users/{regular_user.id}/role", json={"role": "admin"})

    response = client.get("/admin/audit-logs", params={"action": "change_role"})

    assert response.status_code == 200
    logs = response.json()["logs"]
    assert len(logs) == 1
    assert logs[0]["actor_email"] == "admin@example.com"
    assert logs[0]["target_email"] == "user@example.com"
    assert logs[0]["detail"] == "new_role=admin"


def test_login_is_audited(client, admin):
    client.post("/auth/login", json={"email": "admin@example.com", "password": "adminpw1"})

    logs = client.get("/admin/audit-logs", params={"action": "user_login"}).json()["logs"]

    assert [log["target_email"] for log in logs] == ["admin@example.com"]
