import json
from decimal import Decimal

import pytest
from django.test import Client

from academics.models import AcademicYear, Course, Department, Faculty
from finance.models import SchoolFeePayment, SchoolFeePolicy
from users.models import CustomUser as User, StudentProfile
from users.tokens import create_access_token


@pytest.fixture(autouse=True)
def fast_hasher(settings):
    settings.PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]


class ApiClient:
    """Django test client that speaks JSON and can carry a bearer token."""

    def __init__(self, user=None, token=None):
        self.client = Client()
        if user is not None and token is None:
            token = create_access_token(user.id)
        self.token = token

    def _extra(self):
        if self.token:
            return {"HTTP_AUTHORIZATION": f"Bearer {self.token}"}
        return {}

    def get(self, path, data=None):
        return self.client.get(path, data or {}, **self._extra())

    def post(self, path, payload=None):
        body = json.dumps(payload if payload is not None else {})
        return self.client.post(path, body, content_type="application/json", **self._extra())

    def put(self, path, payload=None):
        body = json.dumps(payload if payload is not None else {})
        return self.client.put(path, body, content_type="application/json", **self._extra())

    def delete(self, path):
        return self.client.delete(path, **self._extra())


@pytest.fixture
def make_user(db):
    def _make(email, role="user", password="Password123", full_name=None, **extra):
        return User.objects.create_user(
            email=email,
            password=password,
            full_name=full_name or email.split("@")[0].title(),
            role=role,
            **extra,
        )
    return _make


@pytest.fixture
def admin_user(make_user):
    return make_user("admin@uniben.edu", role="admin", full_name="Portal Administrator")


@pytest.fixture
def lecturer(make_user):
    return make_user("lecturer@uniben.edu", role="lecturer", full_name="Demo Lecturer")


@pytest.fixture
def faculty(db):
    return Faculty.objects.create(name="Faculty of Science", code="SCI")


@pytest.fixture
def department(faculty):
    return Department.objects.create(name="Computer Science", code="CSC", faculty=faculty)


@pytest.fixture
def academic_year(db):
    return AcademicYear.objects.create(name="2024/2025", is_current=True)


@pytest.fixture
def policy(academic_year, admin_user):
    return SchoolFeePolicy.objects.create(
        academic_year=academic_year,
        amount=Decimal("150000.00"),
        created_by=admin_user,
        updated_by=admin_user,
    )


@pytest.fixture
def make_student(make_user, faculty, department):
    def _make(email="ada@uniben.edu", matric_no="CSC/2024/001", level=100, full_name="Ada Obi"):
        user = make_user(email, role="student", full_name=full_name)
        StudentProfile.objects.create(
            user=user,
            matric_no=matric_no,
            year_of_entry=2024,
            faculty=faculty,
            department=department,
            level=level,
        )
        return user
    return _make


@pytest.fixture
def student(make_student):
    return make_student()


@pytest.fixture
def make_course(faculty, department, lecturer):
    def _make(code="C100", name="Intro to Computing", level=100, **extra):
        return Course.objects.create(
            course_code=code,
            course_name=name,
            level=level,
            faculty=faculty,
            department=department,
            created_by=lecturer,
            **extra,
        )
    return _make


@pytest.fixture
def course(make_course):
    return make_course()


@pytest.fixture
def make_payment(policy):
    def _make(student, status="pending", academic_year=None):
        return SchoolFeePayment.objects.create(
            student=student,
            academic_year=academic_year or policy.academic_year,
            amount=policy.amount,
            status=status,
            payment_reference="REF-TEST",
        )
    return _make


@pytest.fixture
def approved_payment(make_payment, student):
    return make_payment(student, status="approved")


@pytest.fixture
def anon_api():
    return ApiClient()


@pytest.fixture
def admin_api(admin_user):
    return ApiClient(admin_user)


@pytest.fixture
def lecturer_api(lecturer):
    return ApiClient(lecturer)


@pytest.fixture
def student_api(student):
    return ApiClient(student)


@pytest.fixture
def client_for():
    return ApiClient
