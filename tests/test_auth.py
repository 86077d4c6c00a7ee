from fastapi.testclient import TestClient

from campus_dashboard.app import app
from campus_dashboard.core.security import create_access_token, create_calendar_token

from .conftest import PASSWORD, login


def test_protected_route_requires_authentication(client):
    response = client.get("/api/sessions")
    assert response.status_code == 401
    assert response.json() == {"error": "Unauthorized"}


def test_health_and_root_are_public(client):
    assert client.get("/api/health").json() == {"status": "ok"}
    assert client.get("/").json()["health"] == "/api/health"


def test_login_sets_session_and_updates_last_login(client, student, db):
    response = client.post(
        "/api/auth/login", json={"email": student.email.upper(), "password": PASSWORD}
    )
    assert response.status_code == 200
    assert response.json()["email"] == student.email
    assert "passwordHash" not in response.json()

    me = client.get("/api/current-user")
    assert me.status_code == 200
    assert me.json()["id"] == student.id

    db.expire_all()
    assert student.last_logged_in is not None


def test_login_missing_fields_returns_400(client):
    response = client.post("/api/auth/login", json={"email": "someone@example.com"})
    assert response.status_code == 400


def test_login_wrong_password_returns_401(client, student):
    response = client.post(
        "/api/auth/login", json={"email": student.email, "password": "wrong-password"}
    )
    assert response.status_code == 401
    assert "error" in response.json()


def test_logout_clears_session(student_client):
    assert student_client.post("/api/auth/logout").json() == {"success": True}
    assert student_client.get("/api/current-user").status_code == 401


def test_bearer_token_grants_access(client, student):
    response = client.post(
        "/api/auth/token", json={"email": student.email, "password": PASSWORD}
    )
    assert response.status_code == 200
    body = response.json()
    assert body["user"] == {"id": str(student.id), "email": student.email, "name": student.name}

    with TestClient(app) as mobile:
        me = mobile.get(
            "/api/current-user", headers={"Authorization": f"Bearer {body['token']}"}
        )
    assert me.status_code == 200
    assert me.json()["email"] == student.email


def test_invalid_bearer_token_is_rejected(client):
    response = client.get("/api/current-user", headers={"Authorization": "Bearer nope"})
    assert response.status_code == 401


def test_calendar_token_is_not_an_access_token(client, student):
    token = create_calendar_token(student.id)
    response = client.get("/api/current-user", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


def test_change_password(student_client, student):
    response = student_client.post(
        "/api/change-password",
        json={"currentPassword": PASSWORD, "newPassword": "newpass1"},
    )
    assert response.status_code == 200

    with TestClient(app) as other:
        login(other, student, password="newpass1")


def test_change_password_validation(student_client):
    too_short = student_client.post(
        "/api/change-password", json={"currentPassword": PASSWORD, "newPassword": "abc"}
    )
    assert too_short.status_code == 400

    missing = student_client.post("/api/change-password", json={"newPassword": "abcdef"})
    assert missing.status_code == 400

    wrong = student_client.post(
        "/api/change-password",
        json={"currentPassword": "not-it", "newPassword": "abcdefg"},
    )
    assert wrong.status_code == 403


def test_change_password_without_existing_password(make_user):
    user = make_user(password=None)
    # Users without a password cannot log in, so use a Bearer token
    token = create_access_token(user.id, user.email)
    with TestClient(app) as c:
        response = c.post(
            "/api/change-password",
            json={"currentPassword": "whatever", "newPassword": "abcdefg"},
            headers={"Authorization": f"Bearer {token}"},
        )
    assert response.status_code == 404


def test_bearer_scheme_is_case_insensitive(client, student):
    token = create_access_token(student.id, student.email)
    response = client.get("/api/current-user", headers={"Authorization": f"bearer {token}"})
    assert response.status_code == 200


def test_non_bearer_authorization_is_ignored(client, student):
    token = create_access_token(student.id, student.email)
    response = client.get("/api/current-user", headers={"Authorization": f"Basic {token}"})
    assert response.status_code == 401
