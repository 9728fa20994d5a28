"""
Name: Login / Logout HTTP Tests

Responsibilities:
  - Login sets an httpOnly session cookie and returns {success, message}
  - Failed logins return the same 401 body regardless of cause
  - Logout destroys the session and redirects to /login
  - Expired or revoked sessions redirect pages back to /login
"""

import pytest

from backoffice.domain.entities import ActivityAction, UserRole, UserStatus

pytestmark = pytest.mark.unit


@pytest.fixture
def bob(credentials):
    return credentials.create("Bob", "bob@x.io", "pw1", UserRole.USER)


def test_root_redirects_to_login_without_session(client):
    response = client.get("/")

    assert response.status_code == 303
    assert response.headers["location"] == "/login"


def test_login_page_renders(client):
    response = client.get("/login")

    assert response.status_code == 200
    assert "text/html" in response.headers["content-type"]
    assert 'id="login-form"' in response.text


def test_login_success_sets_cookie(client, bob, activity_log):
    response = client.post("/login", json={"email": "BOB@x.io", "password": "pw1"})

    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Login successful"}
    cookie = response.headers["set-cookie"].lower()
    assert cookie.startswith("sessionid=")
    assert "httponly" in cookie
    assert "samesite=lax" in cookie
    assert "path=/" in cookie

    [entry] = activity_log.all()
    assert entry.action == ActivityAction.LOGIN
    assert entry.ip_address == "testclient"


@pytest.mark.parametrize(
    "payload",
    [
        {"email": "bob@x.io", "password": "wrong"},
        {"email": "ghost@x.io", "password": "pw1"},
        {},
    ],
)
def test_login_failures_share_one_response(client, bob, payload):
    response = client.post("/login", json=payload)

    assert response.status_code == 401
    body = response.json()
    assert body["success"] is False
    assert body["message"] == "Invalid credentials"
    assert body["code"] == "INVALID_CREDENTIALS"
    assert "set-cookie" not in response.headers


def test_inactive_account_login_rejected(client, credentials, bob):
    credentials.update(bob.id, bob.name, bob.email, bob.role, UserStatus.INACTIVE)

    response = client.post("/login", json={"email": "bob@x.io", "password": "pw1"})

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid credentials"


def test_login_page_redirects_when_already_logged_in(client, bob, login_as):
    login_as("bob@x.io", "pw1")

    response = client.get("/login")

    assert response.status_code == 303
    assert response.headers["location"] == "/dashboard"
    assert client.get("/").headers["location"] == "/dashboard"


def test_logout_ends_session(client, bob, login_as, activity_log):
    login_as("bob@x.io", "pw1")
    token = client.cookies.get("sessionId")

    response = client.get("/logout")

    assert response.status_code == 303
    assert response.headers["location"] == "/login"
    assert "sessionid=" in response.headers["set-cookie"].lower()

    # Aun re-enviando el token viejo, la sesión ya no existe.
    client.cookies.set("sessionId", token)
    assert client.get("/dashboard").status_code == 303
    assert [e.action for e in activity_log.all()] == [
        ActivityAction.LOGIN,
        ActivityAction.LOGOUT,
    ]


def test_logout_without_session_still_redirects(client, activity_log):
    response = client.get("/logout")

    assert response.status_code == 303
    assert response.headers["location"] == "/login"
    assert activity_log.all() == []


def test_session_expires_after_24_hours(client, bob, login_as, clock):
    login_as("bob@x.io", "pw1")
    assert client.get("/dashboard").status_code == 200

    clock.advance(hours=24)

    response = client.get("/dashboard")
    assert response.status_code == 303
    assert response.headers["location"] == "/login"


def test_forged_cookie_is_rejected(client):
    client.cookies.set("sessionId", "forged-token")

    response = client.get("/dashboard")

    assert response.status_code == 303


def test_deactivated_user_loses_session(client, credentials, bob, login_as):
    login_as("bob@x.io", "pw1")

    credentials.update(bob.id, bob.name, bob.email, bob.role, UserStatus.INACTIVE)

    assert client.get("/dashboard").status_code == 303


def test_login_body_must_be_json_object(client):
    response = client.post(
        "/login", content="email=a", headers={"content-type": "text/plain"}
    )

    assert response.status_code == 422
    assert response.json()["code"] == "VALIDATION_ERROR"


@pytest.fixture
def session_role_trusted(app):
    from backoffice.crosscutting.config import get_settings

    settings = get_settings().model_copy(update={"session_recheck_user": False})
    app.dependency_overrides[get_settings] = lambda: settings
    return settings


def test_deactivated_user_loses_session_with_stored_role_trusted(
    client, credentials, login_as, session_role_trusted
):
    admin = credentials.create("Root", "root@x.io", "root-pw", UserRole.ADMIN)
    login_as("root@x.io", "root-pw")

    credentials.update(admin.id, admin.name, admin.email, admin.role, UserStatus.INACTIVE)

    assert client.get("/dashboard").status_code == 303
    response = client.post(
        "/users/create",
        json={"name": "X", "email": "x@x.io", "password": "pw", "role": "admin"},
    )
    assert response.status_code == 401
    assert credentials.count() == 1


def test_deleted_user_loses_session_with_stored_role_trusted(
    client, credentials, bob, login_as, session_role_trusted
):
    login_as("bob@x.io", "pw1")

    credentials.delete(bob.id)

    assert client.get("/dashboard").status_code == 303


def test_stored_role_is_kept_when_trusted(
    client, credentials, login_as, session_role_trusted
):
    admin = credentials.create("Root", "root@x.io", "root-pw", UserRole.ADMIN)
    login_as("root@x.io", "root-pw")

    credentials.update(admin.id, admin.name, admin.email, UserRole.USER, UserStatus.ACTIVE)

    assert client.get("/users").status_code == 200
