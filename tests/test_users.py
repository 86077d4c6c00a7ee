from fastapi.testclient import TestClient

from campus_dashboard.app import app

from .conftest import login


def test_list_users_filters(student_client, make_user):
    make_user(name="Berta Brunner", program="DI")
    make_user(name="Carl Czerny", program="DTI", email="carl@fhwien.ac.at")
    make_user(name="Dora Dozentin", role="professor", program=None)

    everyone = student_client.get("/api/users").json()
    assert len(everyone) == 4

    di_only = student_client.get("/api/users", params={"program": "DI"}).json()
    assert [u["name"] for u in di_only] == ["Berta Brunner"]

    all_programs = student_client.get("/api/users", params={"program": "all"}).json()
    assert len(all_programs) == 4

    by_search = student_client.get("/api/users", params={"search": "FHWIEN"}).json()
    assert [u["name"] for u in by_search] == ["Carl Czerny"]

    professors = student_client.get("/api/users", params={"role": "professor"}).json()
    assert [u["name"] for u in professors] == ["Dora Dozentin"]


def test_list_users_rejects_unknown_program(student_client):
    assert student_client.get("/api/users", params={"program": "XYZ"}).status_code == 400


def test_user_payload_hides_password(student_client, student):
    body = student_client.get(f"/api/users/{student.id}").json()
    assert body["email"] == student.email
    assert "passwordHash" not in body
    assert "password_hash" not in body


def test_admin_creates_user_with_default_initials(admin_client):
    response = admin_client.post(
        "/api/users",
        json={"name": "maria huber", "email": "Maria.Huber@Example.com", "program": "DTI"},
    )
    assert response.status_code == 201
    body = response.json()
    assert body["initials"] == "MA"
    assert body["email"] == "maria.huber@example.com"
    assert body["role"] == "student"


def test_admin_create_user_with_password_can_log_in(admin_client):
    admin_client.post(
        "/api/users",
        json={"name": "Lena", "email": "lena@example.com", "program": "DI", "password": "lenapass"},
    )
    with TestClient(app) as c:
        response = c.post("/api/auth/login", json={"email": "lena@example.com", "password": "lenapass"})
    assert response.status_code == 200


def test_create_duplicate_email_returns_409(admin_client, student):
    response = admin_client.post(
        "/api/users",
        json={"name": "Copy", "email": student.email.upper(), "program": "DTI"},
    )
    assert response.status_code == 409


def test_non_admin_cannot_manage_users(student_client, professor_client, student):
    payload = {"name": "Nope", "email": "nope@example.com", "program": "DTI"}
    assert student_client.post("/api/users", json=payload).status_code == 403
    assert professor_client.post("/api/users", json=payload).status_code == 403
    assert professor_client.delete(f"/api/users/{student.id}").status_code == 403


def test_admin_updates_user(admin_client, student, make_user):
    other = make_user()
    response = admin_client.put(
        f"/api/users/{student.id}", json={"program": "DI", "initials": "as"}
    )
    assert response.status_code == 200
    assert response.json()["program"] == "DI"
    assert response.json()["initials"] == "AS"
    assert response.json()["name"] == student.name

    clash = admin_client.put(f"/api/users/{student.id}", json={"email": other.email})
    assert clash.status_code == 409


def test_admin_cannot_delete_self(admin_client, admin):
    response = admin_client.delete(f"/api/users/{admin.id}")
    assert response.status_code == 400


def test_admin_deletes_user(admin_client, make_user):
    victim = make_user()
    assert admin_client.delete(f"/api/users/{victim.id}").json() == {"success": True}
    assert admin_client.get(f"/api/users/{victim.id}").status_code == 404


def test_deleted_user_session_is_rejected(admin_client, make_user):
    victim = make_user()
    with TestClient(app) as c:
        login(c, victim)
        admin_client.delete(f"/api/users/{victim.id}")
        assert c.get("/api/current-user").status_code == 401
