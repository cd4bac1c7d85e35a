import pytest
from django.db.models import QuerySet

from academics.models import AcademicYear, CourseRegistration, CourseRegistrationItem
from academics.services import registrations
from portal.exceptions import RequestError
from portal.models import AuditLog

pytestmark = pytest.mark.django_db

FEES_MESSAGE = (
    "Please pay your school fees for this academic year and wait for admin "
    "approval before registering courses."
)


@pytest.fixture
def registration(student, academic_year):
    return CourseRegistration.objects.create(student=student, academic_year=academic_year)


def test_create_registration_requires_approved_fee(student_api, student, academic_year, make_payment):
    make_payment(student, status="pending")

    response = student_api.post("/registrations", {"academic_year_id": academic_year.id})

    assert response.status_code == 400
    assert response.json()["detail"] == FEES_MESSAGE
    assert not CourseRegistration.objects.exists()


def test_create_registration(student_api, student, academic_year, approved_payment):
    response = student_api.post("/registrations", {"academic_year_id": academic_year.id})

    assert response.status_code == 201
    body = response.json()
    assert body["student_id"] == student.id
    assert body["submitted"] is False
    assert body["submitted_at"] is None
    assert body["items"] == []
    assert AuditLog.objects.filter(action_type="registration_created").count() == 1


def test_second_registration_for_same_year_is_refused(student_api, academic_year, approved_payment):
    student_api.post("/registrations", {"academic_year_id": academic_year.id})

    response = student_api.post("/registrations", {"academic_year_id": academic_year.id})

    assert response.status_code == 400
    assert response.json()["detail"] == "Registration already exists for this academic year"
    assert CourseRegistration.objects.count() == 1


def test_create_registration_validates_year(student_api):
    response = student_api.post("/registrations", {"academic_year_id": "abc"})
    assert response.status_code == 400
    assert response.json()["detail"] == "academic_year_id must be a positive integer"

    response = student_api.post("/registrations", {"academic_year_id": 999})
    assert response.status_code == 404
    assert response.json()["detail"] == "Academic year not found"


@pytest.mark.parametrize("status", ["pending", "declined", None])
def test_add_item_needs_approved_payment(student, registration, course, make_payment, status):
    if status:
        make_payment(student, status=status)

    with pytest.raises(RequestError) as excinfo:
        registrations.add_item(student, registration.id, course.id)

    assert excinfo.value.status == 400
    assert excinfo.value.message == FEES_MESSAGE


def test_add_item_snapshots_course(student_api, registration, course, approved_payment):
    response = student_api.post(f"/registrations/{registration.id}/items", {"course_id": course.id})

    assert response.status_code == 201
    body = response.json()
    assert body["course_code_snapshot"] == "C100"
    assert body["course_name_snapshot"] == "Intro to Computing"
    assert body["status"] == "active"
    assert body["removed_at"] is None

    response = student_api.post(f"/registrations/{registration.id}/items", {"course_id": course.id})
    assert response.status_code == 400
    assert response.json()["detail"] == "Course already added"


def test_add_item_rejects_other_level(student, registration, make_course, approved_payment):
    course = make_course(code="C200", level=200)

    with pytest.raises(RequestError) as excinfo:
        registrations.add_item(student, registration.id, course.id)

    assert excinfo.value.message == "Selected course does not match the student's level"


def test_add_item_rejects_inactive_or_missing_course(student, registration, make_course, approved_payment):
    inactive = make_course(code="C101", is_active=False)

    for course_id in (inactive.id, 9999):
        with pytest.raises(RequestError) as excinfo:
            registrations.add_item(student, registration.id, course_id)
        assert excinfo.value.status == 404
        assert excinfo.value.message == "Course not available"


def test_other_student_cannot_touch_registration(make_student, client_for, registration, course, approved_payment):
    other = make_student(email="other@uniben.edu", matric_no="CSC/2024/002")
    api = client_for(other)

    response = api.post(f"/registrations/{registration.id}/items", {"course_id": course.id})
    assert response.status_code == 403
    assert response.json()["detail"] == "Not allowed to modify this registration"

    response = api.get(f"/registrations/{registration.id}")
    assert response.status_code == 403
    assert response.json()["detail"] == "Not allowed to view this registration"

    response = api.post(f"/registrations/{registration.id}/submit")
    assert response.status_code == 403
    assert response.json()["detail"] == "Not allowed to submit this registration"


def test_admin_can_add_item_for_student(admin_user, registration, course, approved_payment):
    item = registrations.add_item(admin_user, registration.id, course.id)

    assert item["registration_id"] == registration.id


def test_remove_item_is_soft_and_idempotent(student_api, student, registration, course, approved_payment):
    item = registrations.add_item(student, registration.id, course.id)

    response = student_api.delete(f"/registrations/items/{item['id']}")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "removed"
    assert body["removed_at"] is not None

    stored = CourseRegistrationItem.objects.get(id=item["id"])
    first_removed_at = stored.removed_at

    response = student_api.delete(f"/registrations/items/{item['id']}")
    assert response.status_code == 200
    stored.refresh_from_db()
    assert stored.removed_at == first_removed_at

    # the course can be added again once removed
    again = registrations.add_item(student, registration.id, course.id)
    assert again["id"] != item["id"]


def test_remove_missing_item(student_api):
    response = student_api.delete("/registrations/items/999")

    assert response.status_code == 404
    assert response.json()["detail"] == "Item not found"


def test_submit_and_unsubmit(student_api, registration, approved_payment):
    response = student_api.post(f"/registrations/{registration.id}/submit", {})
    assert response.status_code == 200
    assert response.json()["submitted"] is True
    assert response.json()["submitted_at"] is not None

    response = student_api.post(f"/registrations/{registration.id}/submit", {"submitted": False})
    assert response.status_code == 200
    assert response.json()["submitted"] is False
    assert response.json()["submitted_at"] is None


def test_submit_rechecks_fee(student, registration, approved_payment):
    approved_payment.status = "declined"
    approved_payment.save()

    with pytest.raises(RequestError) as excinfo:
        registrations.submit_registration(student, registration.id)

    assert excinfo.value.message == FEES_MESSAGE


def test_list_registrations_includes_removed_items(student_api, student, registration, make_course, approved_payment):
    first = registrations.add_item(student, registration.id, make_course(code="C100").id)
    registrations.add_item(student, registration.id, make_course(code="C102").id)
    registrations.remove_item(student, first["id"])

    response = student_api.get("/registrations")

    assert response.status_code == 200
    [body] = response.json()
    assert [item["status"] for item in body["items"]] == ["removed", "active"]


def test_submitted_registrations_counts_active_items(admin_api, student, registration, make_course, approved_payment):
    first = registrations.add_item(student, registration.id, make_course(code="C100").id)
    registrations.add_item(student, registration.id, make_course(code="C102").id)
    registrations.remove_item(student, first["id"])
    registrations.submit_registration(student, registration.id)

    response = admin_api.get("/admin/registrations/submitted")

    assert response.status_code == 200
    [row] = response.json()
    assert row["registration_id"] == registration.id
    assert row["course_count"] == 1
    assert row["matric_no"] == "CSC/2024/001"
    assert row["academic_year_name"] == "2024/2025"


def test_submitted_registrations_filters_by_year(admin_api, student, registration, approved_payment):
    registrations.submit_registration(student, registration.id)
    other_year = AcademicYear.objects.create(name="2025/2026")

    response = admin_api.get("/admin/registrations/submitted", {"academic_year_id": other_year.id})
    assert response.json() == []

    response = admin_api.get("/admin/registrations/submitted", {"academic_year_id": "x"})
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid academic_year_id"


def test_submitted_registrations_is_admin_only(student_api):
    response = student_api.get("/admin/registrations/submitted")

    assert response.status_code == 403
    assert response.json()["detail"] == "Insufficient permissions"


def test_registration_pdf(student_api, student, registration, course, approved_payment):
    registrations.add_item(student, registration.id, course.id)

    response = student_api.get(f"/registrations/{registration.id}/pdf")

    assert response.status_code == 200
    assert response["Content-Type"] == "application/pdf"
    assert f"registration-{registration.id}.pdf" in response["Content-Disposition"]
    assert response.content.startswith(b"%PDF")


def test_non_numeric_registration_id_is_not_found(student_api):
    response = student_api.get("/registrations/abc")

    assert response.status_code == 404


def test_concurrent_duplicate_registration_maps_to_duplicate_error(student, registration, approved_payment, monkeypatch):
    # the existence check misses the row another request just inserted
    original_exists = QuerySet.exists
    missed = []

    def exists(self):
        if self.model is CourseRegistration and not missed:
            missed.append(True)
            return False
        return original_exists(self)

    monkeypatch.setattr(QuerySet, "exists", exists)

    with pytest.raises(RequestError) as excinfo:
        registrations.create_registration(student, registration.academic_year_id)

    assert missed
    assert excinfo.value.status == 400
    assert excinfo.value.message == "Registration already exists for this academic year"
    assert CourseRegistration.objects.count() == 1
