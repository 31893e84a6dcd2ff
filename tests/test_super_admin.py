"""HTTP tests for the admin blueprint."""

import pytest

from models import db
from models.courses import Course
from models.course_modules import CourseModule
from models.course_sections import CourseSection
from classes.enrolment_manager import EnrolmentManager
from classes.progress_manager import ProgressManager


@pytest.fixture
def admin(make_user):
    return make_user(first_name="Root", last_name="Admin", role="admin")


def test_admin_routes_reject_regular_users(client, make_user, auth_headers):
    user = make_user()
    response = client.get("/api/admin/courses", headers=auth_headers(user))
    assert response.status_code == 403


def test_course_module_section_material_lifecycle(client, admin, auth_headers):
    headers = auth_headers(admin)

    response = client.post("/api/admin/courses", json={"title": "Flask", "description": "Web", "status": 1}, headers=headers)
    assert response.status_code == 201
    course_id = response.get_json()["course"]["id"]

    response = client.post("/api/admin/modules", json={"title": "M1", "description": "d", "course_id": course_id}, headers=headers)
    assert response.status_code == 201
    module_id = response.get_json()["module"]["id"]

    response = client.post("/api/admin/sections", json={"title": "S1", "description": "d", "module_id": module_id}, headers=headers)
    assert response.status_code == 201
    section_id = response.get_json()["section"]["id"]

    response = client.post(
        f"/api/admin/sections/{section_id}/materials",
        json={"title": "Intro video", "type": "video", "material_url": "https://cdn.example.com/v.mp4", "duration": 120},
        headers=headers
    )
    assert response.status_code == 201
    material = response.get_json()["material"]
    assert material["sort_order"] == 1
    assert material["created_by"] == "Root Admin"

    course = db.session.get(Course, course_id)
    assert course.nr_of_files == 1
    assert course.duration == 120
    assert db.session.get(CourseModule, module_id).duration == 120

    response = client.put(
        f"/api/admin/materials/{material['id']}",
        json={"title": "Intro video", "duration": 60},
        headers=headers
    )
    assert response.status_code == 200
    db.session.expire_all()
    assert db.session.get(CourseSection, section_id).duration == 60
    assert db.session.get(Course, course_id).duration == 60

    response = client.get(f"/api/admin/sections/{section_id}/materials", headers=headers)
    body = response.get_json()
    assert body["course"]["id"] == course_id
    assert [m["title"] for m in body["materials"]] == ["Intro video"]

    response = client.delete(f"/api/admin/materials/{material['id']}", headers=headers)
    assert response.status_code == 200
    db.session.expire_all()
    course = db.session.get(Course, course_id)
    assert course.nr_of_files == 0
    assert course.duration == 0


def test_delete_section_subtracts_totals_with_floor(client, admin, auth_headers, make_course):
    structure = make_course([2])
    section = structure["sections"][0][0]
    module = structure["modules"][0]
    section.duration = 300
    section.nr_of_files = 2
    module.duration = 100
    module.nr_of_files = 5
    db.session.commit()

    response = client.delete(f"/api/admin/sections/{section.id}", headers=auth_headers(admin))

    assert response.status_code == 200
    db.session.expire_all()
    module = db.session.get(CourseModule, module.id)
    assert module.duration == 0
    assert module.nr_of_files == 3
    assert db.session.get(CourseSection, section.id) is None


def test_listing_validates_pagination(client, admin, auth_headers):
    response = client.get("/api/admin/courses?per_page=1", headers=auth_headers(admin))
    assert response.status_code == 422
    assert "per_page" in response.get_json()["errors"]

    response = client.get("/api/admin/modules?course_id=999", headers=auth_headers(admin))
    assert response.status_code == 422


def test_course_search_and_pagination(client, admin, auth_headers):
    headers = auth_headers(admin)
    for title in ("Algebra", "Biology", "Chemistry", "Algorithms", "Art", "Astronomy"):
        client.post("/api/admin/courses", json={"title": title, "description": "x"}, headers=headers)

    response = client.get("/api/admin/courses?searchTerm=Al&per_page=5", headers=headers)
    courses = response.get_json()["courses"]
    assert courses["total"] == 2
    assert {c["title"] for c in courses["data"]} == {"Algebra", "Algorithms"}

    response = client.get("/api/admin/courses?per_page=5&page=2", headers=headers)
    courses = response.get_json()["courses"]
    assert courses["last_page"] == 2
    assert len(courses["data"]) == 1

    response = client.get("/api/admin/courses?searchTerm=Root", headers=headers)
    assert response.get_json()["courses"]["total"] == 6


def test_change_course_status(client, admin, auth_headers, make_course):
    course = make_course([1], status=0)["course"]

    response = client.post("/api/admin/courses/change-status", json={"course_id": course.id, "status": 1}, headers=auth_headers(admin))

    assert response.status_code == 200
    assert response.get_json()["course"]["status"] == "Active"


def test_user_management(client, admin, auth_headers, make_user):
    user = make_user(first_name="Lena", email="lena@example.com")
    headers = auth_headers(admin)

    response = client.get("/api/admin/users?searchTerm=lena", headers=headers)
    assert [u["email"] for u in response.get_json()["users"]["data"]] == ["lena@example.com"]

    response = client.post("/api/admin/users/change-role", json={"user_id": user.id, "role": "user"}, headers=headers)
    assert response.status_code == 400

    response = client.post("/api/admin/users/change-role", json={"user_id": user.id, "role": "admin"}, headers=headers)
    assert response.get_json()["user"]["role"] == "admin"

    response = client.post("/api/admin/users/change-status", json={"user_id": user.id, "acc_status": 0}, headers=headers)
    assert response.get_json()["user"]["acc_status"] == 0

    response = client.post("/api/admin/users/change-status", json={"user_id": admin.id, "acc_status": 0}, headers=headers)
    assert response.status_code == 400


def test_user_course_progress_report(client, admin, auth_headers, make_user, make_course):
    student = make_user(first_name="Ivo")
    inactive_student = make_user(first_name="Old", acc_status=0)
    structure = make_course([2])
    course = structure["course"]
    EnrolmentManager.enrol_user(student.id, course.id)
    EnrolmentManager.enrol_user(inactive_student.id, course.id)
    ProgressManager.mark_section_done(student.id, structure["sections"][0][0].id)
    headers = auth_headers(admin)

    response = client.get("/api/admin/user-course-progress", headers=headers)
    body = response.get_json()
    assert body["progress_message"] == ""
    assert len(body["data"]) == 1
    row = body["data"][0]
    assert row["user"]["first_name"] == "Ivo"
    assert row["course"]["id"] == course.id
    # 1 of 2 sections and 0 of 1 module
    assert row["completion_percentage"] == 33.33
    assert row["completion_status"] == "Started"

    other = make_course([1])["course"]
    response = client.get(f"/api/admin/user-course-progress?course_id={other.id}", headers=headers)
    assert response.get_json()["progress_message"] == "No users enrolled in this course."

    response = client.get(f"/api/admin/user-course-progress?user_id={student.id}&course_id={other.id}", headers=headers)
    assert response.get_json()["progress_message"] == "This user is not enrolled in this course."

    response = client.get(f"/api/admin/user-course-progress?user_id={inactive_student.id}", headers=headers)
    assert response.status_code == 404


def test_deleting_course_removes_progress(client, admin, auth_headers, make_user, make_course):
    student = make_user()
    structure = make_course([1])
    course_id = structure["course"].id
    EnrolmentManager.enrol_user(student.id, course_id)

    response = client.delete(f"/api/admin/courses/{course_id}", headers=auth_headers(admin))

    assert response.status_code == 200
    assert not EnrolmentManager.is_enrolled(student.id, course_id)
