from campus_dashboard import config


def file_report(client, **overrides):
    payload = {"type": "bug_report", "title": "Login broken", "description": "Nothing happens"}
    payload.update(overrides)
    return client.post("/api/reports", json=payload)


def test_create_report_trims_fields(student_client, student):
    response = file_report(student_client, title="  Dark mode  ", description=" please ", type="feature_request")
    assert response.status_code == 201
    body = response.json()
    assert body["title"] == "Dark mode"
    assert body["description"] == "please"
    assert body["status"] == "open"
    assert body["userId"] == student.id
    assert body["user"]["id"] == student.id


def test_create_report_validation(student_client):
    missing = file_report(student_client, title="   ")
    assert missing.status_code == 400
    assert missing.json() == {"error": "Missing required fields"}

    bad_type = file_report(student_client, type="complaint")
    assert bad_type.status_code == 400
    assert bad_type.json() == {
        "error": "Invalid type. Must be one of: feature_request, bug_report"
    }


def test_only_admins_list_reports(student_client):
    assert student_client.get("/api/reports").status_code == 403


def test_admin_lists_newest_first_with_filters(student_client, admin_client, student, admin):
    first = file_report(student_client, title="First").json()
    second = file_report(student_client, title="Second", type="feature_request").json()
    third = file_report(admin_client, title="Third").json()

    ids = [r["id"] for r in admin_client.get("/api/reports").json()]
    assert ids == [third["id"], second["id"], first["id"]]

    bugs = admin_client.get("/api/reports", params={"type": "bug_report"}).json()
    assert [r["id"] for r in bugs] == [third["id"], first["id"]]

    by_user = admin_client.get("/api/reports", params={"userId": student.id}).json()
    assert [r["id"] for r in by_user] == [second["id"], first["id"]]

    admin_client.patch(f"/api/reports/{first['id']}", json={"status": "resolved"})
    resolved = admin_client.get("/api/reports", params={"status": "resolved"}).json()
    assert [r["id"] for r in resolved] == [first["id"]]


def test_update_status(student_client, admin_client):
    report = file_report(student_client).json()

    response = admin_client.patch(f"/api/reports/{report['id']}", json={"status": "in_progress"})
    assert response.status_code == 200
    assert response.json()["status"] == "in_progress"

    missing = admin_client.patch(f"/api/reports/{report['id']}", json={})
    assert missing.json() == {"error": "Status is required"}

    invalid = admin_client.patch(f"/api/reports/{report['id']}", json={"status": "done"})
    assert invalid.status_code == 400
    assert invalid.json()["error"].startswith("Invalid status. Must be one of:")

    assert student_client.patch(
        f"/api/reports/{report['id']}", json={"status": "closed"}
    ).status_code == 403


def test_update_missing_report_returns_404(admin_client):
    assert admin_client.patch("/api/reports/123", json={"status": "closed"}).status_code == 404


def test_delete_is_restricted_to_maintainer(student_client, admin_client, admin, monkeypatch):
    report = file_report(student_client).json()

    # Being an admin is not enough
    assert admin_client.delete(f"/api/reports/{report['id']}").status_code == 403

    monkeypatch.setattr(config, "REPORT_DELETE_USER_ID", admin.id)
    assert admin_client.delete(f"/api/reports/{report['id']}").json() == {"success": True}
    assert admin_client.get("/api/reports").json() == []


def test_non_integer_report_id_returns_400(admin_client):
    response = admin_client.patch("/api/reports/abc", json={"status": "closed"})
    assert response.status_code == 400
    assert set(response.json()) == {"error"}
