from fastapi.testclient import TestClient

from campus_dashboard.app import app

from .conftest import login


def create_slot(client, course_id, **overrides):
    payload = {
        "courseId": course_id,
        "date": "2030-10-03",
        "time": "10:00",
        "endTime": "10:30",
    }
    payload.update(overrides)
    response = client.post("/api/coaching-slots", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


def test_create_slot_defaults_to_one_participant(professor_client, course):
    slot = create_slot(professor_client, course.id)
    assert slot["maxParticipants"] == 1
    assert slot["participants"] == []
    assert slot["isFull"] is False
    assert slot["duration"] == "30m"


def test_create_slot_with_initial_participants(professor_client, course, student):
    slot = create_slot(
        professor_client,
        course.id,
        maxParticipants=2,
        participants=[{"id": student.id}],
        description="Bring your draft",
    )
    assert [p["id"] for p in slot["participants"]] == [student.id]
    assert slot["description"] == "Bring your draft"


def test_create_slot_rejects_negative_capacity(professor_client, course):
    response = professor_client.post(
        "/api/coaching-slots",
        json={"courseId": course.id, "date": "2030-10-03", "time": "10:00", "endTime": "10:30", "maxParticipants": -1},
    )
    assert response.status_code == 400


def test_students_cannot_create_slots(student_client, course):
    response = student_client.post(
        "/api/coaching-slots",
        json={"courseId": course.id, "date": "2030-10-03", "time": "10:00", "endTime": "10:30"},
    )
    assert response.status_code == 403


def test_book_slot(professor_client, student_client, course, student):
    slot = create_slot(professor_client, course.id)
    response = student_client.post(f"/api/coaching-slots/{slot['id']}/book")
    assert response.status_code == 200
    body = response.json()
    assert [p["id"] for p in body["participants"]] == [student.id]
    assert body["isFull"] is True


def test_booking_a_full_slot_returns_400(professor_client, student_client, course, make_user):
    slot = create_slot(professor_client, course.id, maxParticipants=1)
    assert student_client.post(f"/api/coaching-slots/{slot['id']}/book").status_code == 200

    other = make_user()
    with TestClient(app) as other_client:
        login(other_client, other)
        response = other_client.post(f"/api/coaching-slots/{slot['id']}/book")
    assert response.status_code == 400
    assert response.json() == {"error": "Slot is full"}


def test_booking_twice_returns_400(professor_client, student_client, course):
    slot = create_slot(professor_client, course.id, maxParticipants=3)
    assert student_client.post(f"/api/coaching-slots/{slot['id']}/book").status_code == 200
    response = student_client.post(f"/api/coaching-slots/{slot['id']}/book")
    assert response.status_code == 400
    assert response.json() == {"error": "Already booked"}


def test_zero_capacity_means_unlimited(professor_client, course, make_user):
    slot = create_slot(professor_client, course.id, maxParticipants=0)
    for _ in range(3):
        with TestClient(app) as c:
            login(c, make_user())
            assert c.post(f"/api/coaching-slots/{slot['id']}/book").status_code == 200

    body = professor_client.get(f"/api/coaching-slots/{slot['id']}").json()
    assert len(body["participants"]) == 3
    assert body["isFull"] is False


def test_booking_missing_slot_returns_404(student_client):
    response = student_client.post("/api/coaching-slots/999/book")
    assert response.status_code == 404
    assert response.json() == {"error": "Coaching slot not found"}


def test_cancel_is_idempotent(professor_client, student_client, course):
    slot = create_slot(professor_client, course.id)
    student_client.post(f"/api/coaching-slots/{slot['id']}/book")

    first = student_client.post(f"/api/coaching-slots/{slot['id']}/cancel")
    assert first.status_code == 200
    assert first.json()["participants"] == []

    second = student_client.post(f"/api/coaching-slots/{slot['id']}/cancel")
    assert second.status_code == 200
    assert second.json()["participants"] == []


def test_list_mine_and_by_course(professor_client, student_client, make_course):
    ds = make_course("ds", "Data Science", ["DTI"])
    hti = make_course("hti", "Human-Technology Interaction", ["DTI"])
    booked = create_slot(professor_client, ds.id, time="09:00", endTime="09:30")
    create_slot(professor_client, hti.id, time="08:00", endTime="08:30")
    student_client.post(f"/api/coaching-slots/{booked['id']}/book")

    all_slots = student_client.get("/api/coaching-slots").json()
    assert [s["time"] for s in all_slots] == ["08:00", "09:00"]

    mine = student_client.get("/api/coaching-slots", params={"mine": "true"}).json()
    assert [s["id"] for s in mine] == [booked["id"]]

    by_course = student_client.get("/api/coaching-slots", params={"courseId": hti.id}).json()
    assert [s["courseId"] for s in by_course] == [hti.id]


def test_slots_grouped_by_day(professor_client, course):
    create_slot(professor_client, course.id, date="2030-10-04", time="09:00", endTime="09:30")
    create_slot(professor_client, course.id, date="2030-10-03", time="10:00", endTime="10:30")
    create_slot(professor_client, course.id, date="2030-10-03", time="10:00", endTime="10:30")
    create_slot(professor_client, course.id, date="2030-10-03", time="08:00", endTime="08:45")

    days = professor_client.get("/api/coaching-slots/by-day").json()
    assert [d["dayKey"] for d in days] == ["2030-10-03", "2030-10-04"]
    assert days[0]["dayLabel"] == "Donnerstag, 3. Oktober"
    first_day_groups = days[0]["timeGroups"]
    assert [g["timeKey"] for g in first_day_groups] == ["08:00", "10:00"]
    assert first_day_groups[0]["timeLabel"] == "08:00 - 08:45"
    assert len(first_day_groups[1]["slots"]) == 2


def test_update_slot_cannot_drop_capacity_below_participants(professor_client, course, make_user):
    users = [make_user(), make_user()]
    slot = create_slot(
        professor_client,
        course.id,
        maxParticipants=2,
        participants=[{"id": u.id} for u in users],
    )
    response = professor_client.put(f"/api/coaching-slots/{slot['id']}", json={"maxParticipants": 1})
    assert response.status_code == 400

    response = professor_client.put(
        f"/api/coaching-slots/{slot['id']}", json={"maxParticipants": 0, "time": "11:00", "endTime": "12:00"}
    )
    assert response.status_code == 200
    assert response.json()["maxParticipants"] == 0
    assert response.json()["duration"] == "1h"


def test_delete_slot(professor_client, course):
    slot = create_slot(professor_client, course.id)
    assert professor_client.delete(f"/api/coaching-slots/{slot['id']}").json() == {"success": True}
    assert professor_client.get(f"/api/coaching-slots/{slot['id']}").status_code == 404
