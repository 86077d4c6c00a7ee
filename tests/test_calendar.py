from fastapi.testclient import TestClient
from icalendar import Calendar

from campus_dashboard.app import app
from campus_dashboard.core.security import create_access_token

from .conftest import login


def add_session(client, course_id, **overrides):
    payload = {
        "courseId": course_id,
        "title": "Data Science VO",
        "date": "2030-10-03",
        "time": "09:00",
        "endTime": "12:15",
        "location": "A101",
        "objectives": ["Regression", "Clustering"],
    }
    payload.update(overrides)
    response = client.post("/api/sessions", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


def feed_token(client):
    response = client.get("/api/calendar/token")
    assert response.status_code == 200
    return response.json()["token"]


def test_token_requires_login(client):
    assert client.get("/api/calendar/token").status_code == 401


def test_feed_without_credentials_is_plain_text_401(client):
    response = client.get("/api/calendar/feed.ics")
    assert response.status_code == 401
    assert response.text == "Unauthorized - Please provide a valid token or be logged in"

    bad = client.get("/api/calendar/feed.ics", params={"token": "garbage"})
    assert bad.status_code == 401


def test_access_token_is_not_a_feed_token(client, student):
    token = create_access_token(student.id, student.email)
    assert client.get("/api/calendar/feed.ics", params={"token": token}).status_code == 401


def test_feed_with_token(professor_client, student_client, course, professor):
    add_session(professor_client, course.id, lecturerId=professor.id)
    token = feed_token(student_client)

    with TestClient(app) as calendar_app:
        response = calendar_app.get("/api/calendar/feed.ics", params={"token": token})

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/calendar")
    assert response.headers["content-disposition"].startswith("inline")
    assert response.headers["x-content-type-options"] == "nosniff"
    assert "max-age=" in response.headers["cache-control"]
    assert response.headers["etag"].endswith('-1"')

    body = response.text
    assert "BEGIN:VCALENDAR" in body
    assert "X-WR-TIMEZONE:Europe/Vienna" in body
    assert "BEGIN:VTIMEZONE" in body
    assert "DTSTART;TZID=Europe/Vienna:20301003T090000" in body
    events = Calendar.from_ical(response.content).walk("VEVENT")
    assert len(events) == 1
    event = events[0]
    assert str(event["summary"]) == "Data Science VO"
    assert str(event["uid"]).startswith("fhwien-session-")
    assert str(event["location"]) == "A101"
    description = str(event["description"])
    assert f"Dozent: {professor.name}" in description
    assert "Anwesenheit: Pflicht" in description
    assert "Regression" in description


def test_feed_with_session_cookie(student_client):
    response = student_client.get("/api/calendar/feed.ics")
    assert response.status_code == 200
    assert "BEGIN:VEVENT" not in response.text
    # No events: validators fall back to the epoch
    assert response.headers["etag"] == '"0-0"'
    assert response.headers["last-modified"] == "Thu, 01 Jan 1970 00:00:00 GMT"


def test_feed_only_contains_own_program(professor_client, student_client, make_course):
    dti = make_course("ds", "Data Science", ["DTI"])
    di = make_course("dg", "Data Governance", ["DI"])
    add_session(professor_client, dti.id, title="For DTI")
    add_session(professor_client, di.id, title="For DI")

    body = student_client.get("/api/calendar/feed.ics").text
    assert "SUMMARY:For DTI" in body
    assert "SUMMARY:For DI" not in body


def test_lecturer_sees_own_sessions(professor_client, course, professor):
    add_session(professor_client, course.id, lecturerId=professor.id, title="My lecture")
    add_session(professor_client, course.id, title="Someone else")

    body = professor_client.get("/api/calendar/feed.ics").text
    assert "SUMMARY:My lecture" in body
    assert "SUMMARY:Someone else" not in body


def test_feed_is_stable_and_conditional(professor_client, student_client, course):
    add_session(professor_client, course.id)

    first = student_client.get("/api/calendar/feed.ics")
    second = student_client.get("/api/calendar/feed.ics")
    assert first.content == second.content
    assert first.headers["etag"] == second.headers["etag"]

    not_modified = student_client.get(
        "/api/calendar/feed.ics", headers={"If-None-Match": first.headers["etag"]}
    )
    assert not_modified.status_code == 304
    assert not_modified.headers["etag"] == first.headers["etag"]

    since = student_client.get(
        "/api/calendar/feed.ics", headers={"If-Modified-Since": first.headers["last-modified"]}
    )
    assert since.status_code == 304

    stale = student_client.get("/api/calendar/feed.ics", headers={"If-None-Match": '"1-1"'})
    assert stale.status_code == 200


def test_booking_changes_the_feed(professor_client, student_client, course):
    add_session(professor_client, course.id)
    slot = professor_client.post(
        "/api/coaching-slots",
        json={"courseId": course.id, "date": "2030-10-04", "time": "14:00", "endTime": "14:30"},
    ).json()

    before = student_client.get("/api/calendar/feed.ics")
    assert "Coaching" not in before.text

    student_client.post(f"/api/coaching-slots/{slot['id']}/book")
    after = student_client.get("/api/calendar/feed.ics")
    assert after.headers["etag"] != before.headers["etag"]
    assert after.headers["etag"].endswith('-2"')
    assert "SUMMARY:Data Science Coaching" in after.text
    assert "LOCATION:Online" in after.text
    assert "-coaching-" in after.text


def test_weak_etag_matches(professor_client, student_client, course):
    add_session(professor_client, course.id)
    etag = student_client.get("/api/calendar/feed.ics").headers["etag"]

    response = student_client.get("/api/calendar/feed.ics", headers={"If-None-Match": f"W/{etag}"})
    assert response.status_code == 304

    listed = student_client.get(
        "/api/calendar/feed.ics", headers={"If-None-Match": f'"other", W/{etag}'}
    )
    assert listed.status_code == 304


def test_renaming_the_lecturer_changes_the_etag(
    admin_client, professor_client, student_client, course, professor
):
    add_session(professor_client, course.id, lecturerId=professor.id)
    before = student_client.get("/api/calendar/feed.ics")

    renamed = admin_client.put(f"/api/users/{professor.id}", json={"name": "Paula Professor"})
    assert renamed.status_code == 200

    after = student_client.get(
        "/api/calendar/feed.ics", headers={"If-None-Match": before.headers["etag"]}
    )
    assert after.status_code == 200
    assert after.headers["etag"] != before.headers["etag"]
    description = str(Calendar.from_ical(after.content).walk("VEVENT")[0]["description"])
    assert "Dozent: Paula Professor" in description


def test_lecturer_login_keeps_the_etag(professor_client, student_client, course, professor):
    add_session(professor_client, course.id, lecturerId=professor.id)
    before = student_client.get("/api/calendar/feed.ics")

    with TestClient(app) as other:
        login(other, professor)

    after = student_client.get("/api/calendar/feed.ics")
    assert after.headers["etag"] == before.headers["etag"]
    assert after.content == before.content
