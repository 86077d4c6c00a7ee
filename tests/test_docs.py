def test_openapi_requires_login(client):
    assert client.get("/api/openapi.json").status_code == 401


def test_openapi_is_admin_only(student_client, professor_client):
    assert student_client.get("/api/openapi.json").status_code == 403
    assert professor_client.get("/api-docs").status_code == 403


def test_admin_gets_schema_with_bearer_auth(admin_client):
    response = admin_client.get("/api/openapi.json")
    assert response.status_code == 200
    schema = response.json()
    bearer = schema["components"]["securitySchemes"]["BearerAuth"]
    assert bearer["scheme"] == "bearer"
    assert bearer["bearerFormat"] == "JWT"
    assert {"BearerAuth": []} in schema["paths"]["/api/sessions"]["get"]["security"]
    assert "/api/sessions" in schema["paths"]
    assert "/api/calendar/feed.ics" in schema["paths"]


def test_admin_gets_swagger_ui(admin_client):
    response = admin_client.get("/api-docs")
    assert response.status_code == 200
    assert "swagger" in response.text.lower()


def test_builtin_docs_are_disabled(admin_client):
    assert admin_client.get("/docs").status_code == 404
