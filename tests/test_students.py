"""HTTP tests for the student blueprint."""

from sqlalchemy.exc import OperationalError

from classes import progress_manager
from models.section_progress import SectionProgress


def test_endpoints_require_login(client):
    assert client.get("/api/student/courses").status_code == 401
    assert client.post("/api/student/sections/1/complete").status_code == 401


def test_course_listing_marks_enrolment(client, make_user, make_course, auth_headers):
    user = make_user()
    active = make_course([1])["course"]
    make_course([1], status=0)
    headers = auth_headers(user)

    response = client.post(f"/api/student/courses/{active.id}/enrol", headers=headers)
    assert response.status_code == 201

    response = client.get("/api/student/courses", headers=headers)
    courses = response.get_json()["courses"]
    assert [c["id"] for c in courses] == [active.id]
    assert courses[0]["enrolled"] is True


def test_enrol_twice_returns_conflict(client, make_user, make_course, auth_headers):
    user = make_user()
    course = make_course([1])["course"]
    headers = auth_headers(user)

    client.post(f"/api/student/courses/{course.id}/enrol", headers=headers)
    response = client.post(f"/api/student/courses/{course.id}/enrol", headers=headers)

    assert response.status_code == 409
    assert response.get_json()["error"] == "already_enrolled"


def test_complete_course_over_http(client, make_user, make_course, auth_headers):
    user = make_user()
    structure = make_course([2])
    course = structure["course"]
    s1, s2 = structure["sections"][0]
    headers = auth_headers(user)
    client.post(f"/api/student/courses/{course.id}/enrol", headers=headers)

    response = client.post(f"/api/student/sections/{s1.id}/complete", headers=headers)
    assert response.status_code == 201
    assert response.get_json()["course_completed"] is False

    response = client.post(f"/api/student/sections/{s2.id}/complete", headers=headers)
    body = response.get_json()
    assert body["course_completed"] is True
    assert body["points_awarded"] == 100
    assert body["progress"]["awarded"] is True

    response = client.get(f"/api/student/courses/{course.id}/progress", headers=headers)
    progress = response.get_json()["progress"]
    assert progress["completion_status"] == "Completed"
    assert progress["completion_percentage"] == 100

    response = client.get("/api/student/sections/completed", headers=headers)
    assert sorted(response.get_json()["completed_sections"]) == sorted([s1.id, s2.id])

    response = client.get("/api/student/scoreboard", headers=headers)
    data = response.get_json()["data"]
    assert data[0]["user"]["id"] == user.id
    assert data[0]["score"] == 100


def test_complete_errors_map_to_status_codes(client, make_user, make_course, auth_headers):
    user = make_user()
    structure = make_course([2], empty_sections=[(0, 1)])
    s1, empty = structure["sections"][0]
    headers = auth_headers(user)

    response = client.post(f"/api/student/sections/{s1.id}/complete", headers=headers)
    assert response.status_code == 403
    assert response.get_json()["error"] == "not_enrolled"

    client.post(f"/api/student/courses/{structure['course'].id}/enrol", headers=headers)
    client.post(f"/api/student/sections/{s1.id}/complete", headers=headers)

    response = client.post(f"/api/student/sections/{s1.id}/complete", headers=headers)
    assert response.status_code == 409
    assert response.get_json()["error"] == "already_completed"

    response = client.post(f"/api/student/sections/{empty.id}/complete", headers=headers)
    assert response.status_code == 422
    assert response.get_json()["error"] == "empty_section"

    response = client.post("/api/student/sections/9999/complete", headers=headers)
    assert response.status_code == 404


def test_undo_completion(client, make_user, make_course, auth_headers):
    user = make_user()
    structure = make_course([1])
    section = structure["sections"][0][0]
    headers = auth_headers(user)
    client.post(f"/api/student/courses/{structure['course'].id}/enrol", headers=headers)
    client.post(f"/api/student/sections/{section.id}/complete", headers=headers)

    response = client.delete(f"/api/student/sections/{section.id}/complete", headers=headers)
    body = response.get_json()

    assert response.status_code == 200
    assert body["progress"]["pending_sections"] == 1
    assert body["progress"]["awarded"] is True


def test_section_materials_only_for_enrolled(client, make_user, make_course, auth_headers):
    user = make_user()
    structure = make_course([1])
    section = structure["sections"][0][0]
    headers = auth_headers(user)

    assert client.get(f"/api/student/sections/{section.id}/materials", headers=headers).status_code == 403

    client.post(f"/api/student/courses/{structure['course'].id}/enrol", headers=headers)
    response = client.get(f"/api/student/sections/{section.id}/materials", headers=headers)
    body = response.get_json()

    assert response.status_code == 200
    assert body["completed"] is False
    assert [m["title"] for m in body["materials"]] == ["Reading"]


def test_my_progress_lists_enrolments(client, make_user, make_course, auth_headers):
    user = make_user()
    first = make_course([1])["course"]
    second = make_course([2])["course"]
    headers = auth_headers(user)
    client.post(f"/api/student/courses/{first.id}/enrol", headers=headers)
    client.post(f"/api/student/courses/{second.id}/enrol", headers=headers)

    response = client.get("/api/student/progress", headers=headers)
    rows = response.get_json()["progress"]

    assert {row["course"]["id"] for row in rows} == {first.id, second.id}
    assert all(row["completion_status"] == "Started" for row in rows)


def test_database_failure_returns_500_and_logs_request_context(client, make_user, make_course, auth_headers, monkeypatch, caplog):
    user = make_user()
    structure = make_course([1])
    section = structure["sections"][0][0]
    headers = auth_headers(user)
    client.post(f"/api/student/courses/{structure['course'].id}/enrol", headers=headers)

    def broken_add_score(user_id, points):
        raise OperationalError("UPDATE scoreboards", {}, Exception("database is locked"))

    monkeypatch.setattr(progress_manager, "add_score", broken_add_score)

    response = client.post(f"/api/student/sections/{section.id}/complete", headers=headers)

    assert response.status_code == 500
    assert response.get_json()["error"] == "internal_error"
    assert f"/api/student/sections/{section.id}/complete" in caplog.text
    assert f"user_id={user.id}" in caplog.text
    assert SectionProgress.find(user.id, section.id) is None
