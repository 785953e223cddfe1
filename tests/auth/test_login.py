"""
Tests for form login, role-based landing redirects, access control and logout.
"""
import asyncio
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.exc import OperationalError

from hms.config import settings
from hms.auth.models import LoginSession
from hms.auth.service import authenticate_user
from hms.auth.exceptions import InvalidCredentialsException


@pytest.mark.parametrize("role,landing", [
    ("ADMIN", "/admin/dashboard"),
    ("DOCTOR", "/doctor/dashboard"),
    ("PATIENT", "/patient/dashboard"),
    ("STAFF", "/staff/dashboard"),
    ("PHARMACY", "/pharmacy/dashboard"),
])
def test_login_redirects_to_role_landing_path(make_user, login, role, landing):
    make_user(f"{role.lower()}@example.com", role=role)

    response = login(f"{role.lower()}@example.com")

    assert response.status_code == 302
    assert response.headers["location"] == landing


def test_login_with_unmapped_role_redirects_to_landing_page(make_user, login):
    make_user("legacy@example.com", role="JANITOR")

    response = login("legacy@example.com")

    assert response.status_code == 302
    assert response.headers["location"] == "/"


def test_login_accepts_username_field(client, make_user):
    make_user("doc@example.com", role="DOCTOR")

    response = client.post(
        "/perform_login",
        data={"username": "doc@example.com", "password": "Password123!"},
        follow_redirects=False,
    )

    assert response.status_code == 302
    assert response.headers["location"] == "/doctor/dashboard"


def test_login_then_follow_redirect_serves_dashboard(client, make_user):
    make_user("pat@example.com", role="PATIENT")

    response = client.post("/perform_login", data={"email": "pat@example.com", "password": "Password123!"})

    assert response.status_code == 200
    assert "Patient Dashboard" in response.text


@pytest.mark.parametrize("email,password", [
    ("nobody@example.com", "Password123!"),
    ("pat@example.com", "wrong-password"),
    ("PAT@example.com", "Password123!"),
])
def test_login_failure_is_uniform_401_without_session(client, make_user, login, email, password):
    make_user("pat@example.com", role="PATIENT")

    response = login(email, password)

    assert response.status_code == 401
    assert response.json() == {"success": False, "message": "Invalid credentials"}
    assert "set-cookie" not in response.headers
    assert not client.cookies

    # Still anonymous
    assert client.get("/patient/dashboard").status_code == 401


def test_authenticate_user_raises_same_error_for_unknown_email_and_wrong_password(db, make_user):
    make_user("pat@example.com")

    with pytest.raises(InvalidCredentialsException) as unknown:
        asyncio.run(authenticate_user(db, "ghost@example.com", "Password123!"))
    with pytest.raises(InvalidCredentialsException) as wrong:
        asyncio.run(authenticate_user(db, "pat@example.com", "nope"))

    assert unknown.value.status_code == wrong.value.status_code == 401
    assert unknown.value.detail == wrong.value.detail


def test_role_scoped_path_rejects_other_roles(client, make_user, login):
    make_user("pat@example.com", role="PATIENT")
    login("pat@example.com")

    response = client.get("/admin/dashboard")

    assert response.status_code == 403
    assert response.json() == {"success": False, "message": "Access denied"}


def test_role_scoped_path_allows_matching_role(client, make_user, login):
    make_user("admin@example.com", role="ADMIN")
    login("admin@example.com")

    response = client.get("/admin/dashboard")

    assert response.status_code == 200
    assert "Admin Dashboard" in response.text


def test_role_scoped_path_requires_session(client):
    response = client.get("/staff/dashboard")

    assert response.status_code == 401
    assert response.json() == {"success": False, "message": "Authentication required"}


def test_unmapped_role_scoped_path_is_not_found(client, make_user, login):
    make_user("admin@example.com", role="ADMIN")
    login("admin@example.com")

    response = client.get("/admin/reports")

    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "Page not found"}


def test_logout_ends_session(client, make_user, login):
    make_user("staff@example.com", role="STAFF")
    login("staff@example.com")
    assert client.get("/staff/dashboard").status_code == 200

    response = client.get("/logout", follow_redirects=False)

    assert response.status_code == 302
    assert response.headers["location"] == "/"
    for path in ("/staff/dashboard", "/admin/dashboard", "/pharmacy/dashboard"):
        assert client.get(path).status_code == 401


def test_logout_without_session_redirects(client):
    response = client.get("/logout", follow_redirects=False)

    assert response.status_code == 302
    assert response.headers["location"] == "/"


def test_login_replaces_previous_session(client, make_user, login):
    make_user("admin@example.com", role="ADMIN")
    make_user("pharm@example.com", role="PHARMACY")

    login("admin@example.com")
    login("pharm@example.com")

    assert client.get("/pharmacy/dashboard").status_code == 200
    assert client.get("/admin/dashboard").status_code == 403


def _session_cookie_header(client):
    return {"Cookie": f"{settings.session_cookie}={client.cookies.get(settings.session_cookie)}"}


def test_login_records_session_and_logout_removes_it(client, db, make_user, login):
    user = make_user("staff@example.com", role="STAFF")

    login("staff@example.com")
    assert db.query(LoginSession).filter(LoginSession.user_id == user.id).count() == 1

    client.get("/logout", follow_redirects=False)
    assert db.query(LoginSession).filter(LoginSession.user_id == user.id).count() == 0


def test_cookie_copied_before_logout_is_rejected_after_it(client, make_user, login):
    make_user("staff@example.com", role="STAFF")
    login("staff@example.com")
    saved_cookie = _session_cookie_header(client)
    assert client.get("/staff/dashboard", headers=saved_cookie).status_code == 200

    client.get("/logout", follow_redirects=False)
    client.cookies.clear()

    response = client.get("/staff/dashboard", headers=saved_cookie)

    assert response.status_code == 401
    assert response.json() == {"success": False, "message": "Authentication required"}


def test_logout_leaves_other_logins_of_same_user_alone(client, make_user, login):
    make_user("staff@example.com", role="STAFF")
    login("staff@example.com")
    first_login = _session_cookie_header(client)
    client.cookies.clear()
    login("staff@example.com")

    client.get("/logout", follow_redirects=False)
    client.cookies.clear()

    assert client.get("/staff/dashboard", headers=first_login).status_code == 200


def test_login_drops_expired_rows_of_same_user(client, db, make_user, login):
    user = make_user("staff@example.com", role="STAFF")
    stale = datetime.now(timezone.utc).replace(tzinfo=None) - timedelta(seconds=settings.session_max_age + 60)
    db.add(LoginSession(token="stale-token", user_id=user.id, created_at=stale))
    db.commit()

    login("staff@example.com")

    tokens = [row.token for row in db.query(LoginSession).filter(LoginSession.user_id == user.id)]
    assert len(tokens) == 1
    assert "stale-token" not in tokens


def test_login_fails_cleanly_when_session_cannot_be_recorded(client, db, make_user, login, monkeypatch):
    make_user("staff@example.com", role="STAFF")

    def broken_commit():
        raise OperationalError("INSERT INTO login_sessions", {}, Exception("database is down"))

    monkeypatch.setattr(db, "commit", broken_commit)

    response = login("staff@example.com")

    assert response.status_code == 500
    assert response.json() == {"success": False, "message": "Login failed"}
    assert not client.cookies


def test_login_rejects_password_sharing_only_the_first_72_bytes(make_user, login):
    make_user("long@example.com", password="p" * 72, role="STAFF")

    assert login("long@example.com", "p" * 72 + "suffix").status_code == 401
    assert login("long@example.com", "p" * 72).status_code == 302
