import json

import pytest
from django.core.management import call_command
from django.test import Client

from academics.models import AcademicYear, Department, Faculty
from academics.services import faculties
from portal.apps import create_default_admin
from portal.utils import parse_int
from users.models import CustomUser as User
from users.tokens import create_access_token

pytestmark = pytest.mark.django_db


def test_health(anon_api):
    response = anon_api.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_unknown_route_answers_json(anon_api):
    response = anon_api.get("/nowhere")

    assert response.status_code == 404
    assert response.json() == {"detail": "Resource not found"}


def test_unexpected_error_is_hidden(anon_api, monkeypatch):
    def explode():
        raise RuntimeError("database on fire")

    monkeypatch.setattr(faculties, "list_faculties", explode)

    response = anon_api.get("/faculties")

    assert response.status_code == 500
    assert response.json() == {"detail": "Internal server error"}


def test_invalid_json_body(admin_api):
    response = admin_api.client.post(
        "/faculties", "{not json", content_type="application/json", **admin_api._extra()
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Request body must be valid JSON"

    response = admin_api.post("/faculties", ["a", "list"])
    assert response.status_code == 400
    assert response.json()["detail"] == "Request body must be a JSON object"


def test_wrong_method_is_refused(anon_api):
    response = anon_api.client.get("/auth/login")

    assert response.status_code == 405


def test_bootstrap_admin_created_on_empty_database(monkeypatch):
    monkeypatch.setenv("DJANGO_SUPERUSER_EMAIL", "Root@Uniben.edu")
    monkeypatch.setenv("DJANGO_SUPERUSER_PASSWORD", "RootPass123!")

    create_default_admin(sender=None)

    admin = User.objects.get()
    assert admin.email == "root@uniben.edu"
    assert admin.role == "admin"
    assert admin.is_superuser

    # only ever bootstraps an empty table
    monkeypatch.setenv("DJANGO_SUPERUSER_EMAIL", "second@uniben.edu")
    create_default_admin(sender=None)
    assert User.objects.count() == 1


def test_bootstrap_admin_needs_credentials(monkeypatch):
    monkeypatch.delenv("DJANGO_SUPERUSER_EMAIL", raising=False)
    monkeypatch.delenv("DJANGO_SUPERUSER_PASSWORD", raising=False)

    create_default_admin(sender=None)

    assert not User.objects.exists()


def test_seed_portal_is_repeatable(anon_api):
    call_command("seed_portal")
    call_command("seed_portal")

    assert Faculty.objects.get().code == "SCI"
    assert Department.objects.get().faculty.code == "SCI"
    assert AcademicYear.objects.get(is_current=True).name == "2024/2025"
    assert set(User.objects.values_list("email", "role")) == {
        ("admin@uniben.edu", "admin"),
        ("lecturer@uniben.edu", "lecturer"),
    }

    response = anon_api.post("/auth/login", {"email": "admin@uniben.edu", "password": "AdminPass123!"})
    assert response.status_code == 200


def test_json_endpoints_work_with_csrf_checks_enforced(make_user, admin_user, student, academic_year, approved_payment):
    client = Client(enforce_csrf_checks=True)

    def post(path, payload, user=None):
        extra = {}
        if user is not None:
            extra["HTTP_AUTHORIZATION"] = f"Bearer {create_access_token(user.id)}"
        return client.post(path, json.dumps(payload), content_type="application/json", **extra)

    make_user("login@uniben.edu")
    response = post("/auth/login", {"email": "login@uniben.edu", "password": "Password123"})
    assert response.status_code == 200

    response = post("/registrations", {"academic_year_id": academic_year.id}, user=student)
    assert response.status_code == 201

    response = post("/faculties", {"name": "Faculty of Arts", "code": "ART"}, user=admin_user)
    assert response.status_code == 201


@pytest.mark.parametrize("value, expected", [
    (7, 7),
    (" 7 ", 7),
    ("-3", -3),
    ("+4", 4),
    ("1.0", 1),
    (2.0, 2),
    ("1_000", None),
    ("1.5", None),
    (1.5, None),
    ("abc", None),
    ("", None),
    (None, None),
    (True, None),
])
def test_parse_int(value, expected):
    assert parse_int(value) == expected


def test_whole_number_string_id_is_accepted(student_api, academic_year, approved_payment):
    response = student_api.post("/registrations", {"academic_year_id": f"{academic_year.id}.0"})

    assert response.status_code == 201
    assert response.json()["academic_year_id"] == academic_year.id
