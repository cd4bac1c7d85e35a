import pytest

from academics.models import CourseRegistration, Department, Faculty
from academics.services import registrations
from portal.models import AuditLog
from users.exports import csv_line, escape_csv_value
from users.models import CustomUser as User, StudentProfile

pytestmark = pytest.mark.django_db


def profile_payload(faculty, department, **overrides):
    payload = {
        "matric_no": "csc/2024/100",
        "year_of_entry": 2024,
        "faculty_id": faculty.id,
        "department_id": department.id,
        "level": 100,
    }
    payload.update(overrides)
    return payload


def test_create_profile_promotes_user_to_student(make_user, client_for, faculty, department):
    user = make_user("fresh@uniben.edu")

    response = client_for(user).post("/students/profile", profile_payload(faculty, department))

    assert response.status_code == 201
    assert response.json()["matric_no"] == "CSC/2024/100"
    user.refresh_from_db()
    assert user.role == "student"
    assert AuditLog.objects.filter(action_type="profile_created", user=user).exists()


def test_create_profile_validation(make_user, client_for, student, faculty, department):
    api = client_for(make_user("fresh@uniben.edu"))

    response = api.post("/students/profile", profile_payload(faculty, department, level=700))
    assert response.status_code == 400
    assert response.json()["detail"] == "level must be one of 100, 200, 300, 400, 500, 600"

    response = api.post("/students/profile", profile_payload(faculty, department, matric_no="csc/2024/001"))
    assert response.status_code == 400
    assert response.json()["detail"] == "Matriculation number already in use"

    arts = Faculty.objects.create(name="Faculty of Arts", code="ART")
    response = api.post("/students/profile", profile_payload(arts, department))
    assert response.status_code == 400
    assert response.json()["detail"] == "Department does not belong to the supplied faculty"

    response = client_for(student).post("/students/profile", profile_payload(faculty, department, matric_no="X1"))
    assert response.status_code == 400
    assert response.json()["detail"] == "Profile already exists"


def test_admin_lists_students_with_filters(admin_api, make_student, faculty):
    make_student(email="zed@uniben.edu", matric_no="CSC/1", full_name="Zed Ade")
    make_student(email="amy@uniben.edu", matric_no="CSC/2", full_name="amy Bello")

    response = admin_api.get("/admin/students")
    assert response.status_code == 200
    assert [row["user"]["full_name"] for row in response.json()] == ["amy Bello", "Zed Ade"]
    assert response.json()[0]["faculty"]["code"] == "SCI"

    response = admin_api.get("/admin/students", {"name": "zed"})
    assert [row["student_profile"]["matric_no"] for row in response.json()] == ["CSC/1"]

    response = admin_api.get("/admin/students", {"faculty_id": "0"})
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid faculty_id"


def test_promote_and_demote(admin_api, make_user):
    user = make_user("promote@uniben.edu")

    response = admin_api.post(f"/admin/users/{user.id}/promote", {"role": "lecturer"})
    assert response.status_code == 200
    assert response.json() == {"id": user.id, "role": "lecturer"}

    response = admin_api.post(f"/admin/users/{user.id}/demote", {"role": "wizard"})
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid role supplied"

    response = admin_api.post(f"/admin/users/{user.id}/demote", {})
    assert response.status_code == 400
    assert response.json()["detail"] == "role is required"

    response = admin_api.post("/admin/users/999/promote", {"role": "admin"})
    assert response.status_code == 404

    assert User.objects.get(id=user.id).role == "lecturer"


def test_escape_csv_value():
    assert escape_csv_value("Arts, Humanities") == '"Arts, Humanities"'
    assert escape_csv_value('The "Best"') == '"The ""Best"""'
    assert escape_csv_value("two\nlines") == '"two\nlines"'
    assert escape_csv_value(None) == ""
    assert escape_csv_value(3) == "3"
    assert csv_line(["a", None, "b,c"]) == 'a,,"b,c"\r\n'


def test_export_students_csv(admin_api, student, make_student, registration_with_items):
    make_student(email="ben@uniben.edu", matric_no="CSC/2024/002", full_name="Ben Eze")
    faculty = Faculty.objects.create(name="Arts, Humanities", code="ART")
    department = Department.objects.create(name="History", code="HIS", faculty=faculty)
    StudentProfile.objects.filter(user=student).update(faculty=faculty, department=department)

    response = admin_api.get("/admin/students/export")

    assert response.status_code == 200
    assert response["Content-Type"] == "text/csv"
    assert 'filename="students.csv"' in response["Content-Disposition"]
    lines = response.content.decode().split("\r\n")
    assert lines[0] == "Matric No,Full Name,Faculty,Department,Academic Year,Total Courses"
    assert lines[1] == 'CSC/2024/001,Ada Obi,"Arts, Humanities",History,2024/2025,1'
    assert lines[2] == "CSC/2024/002,Ben Eze,Faculty of Science,Computer Science,-,0"


@pytest.fixture
def registration_with_items(student, academic_year, make_course, approved_payment):
    registration = CourseRegistration.objects.create(student=student, academic_year=academic_year)
    kept = registrations.add_item(student, registration.id, make_course(code="C100").id)
    dropped = registrations.add_item(student, registration.id, make_course(code="C102").id)
    registrations.remove_item(student, dropped["id"])
    return registration, kept
