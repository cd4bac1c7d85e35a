from django.db.models import ProtectedError
from django.db.models.functions import Lower

from academics.models import Department, Faculty
from portal.exceptions import RequestError
from portal.utils import parse_positive_int


def _text(value):
    return value.strip() if isinstance(value, str) else None


def _code(value):
    value = _text(value)
    return value.upper() if value else value


# -------------------------------
# FACULTIES
# -------------------------------

def get_faculty(faculty_id):
    faculty = Faculty.objects.filter(id=faculty_id).first()
    if faculty is None:
        raise RequestError(404, "Faculty not found")
    return faculty


def list_faculties():
    return list(Faculty.objects.order_by(Lower("name")))


def create_faculty(payload):
    name = _text(payload.get("name"))
    code = _code(payload.get("code"))
    if not name or not code:
        raise RequestError(400, "name and code are required")

    if Faculty.objects.filter(code=code).exists():
        raise RequestError(400, "Faculty code already exists")
    if Faculty.objects.filter(name=name).exists():
        raise RequestError(400, "Faculty name already exists")

    return Faculty.objects.create(name=name, code=code)


def update_faculty(faculty_id, payload):
    faculty = get_faculty(faculty_id)
    changed = []

    if payload.get("name") is not None:
        name = _text(payload["name"])
        if not name:
            raise RequestError(400, "name cannot be empty")
        if Faculty.objects.filter(name=name).exclude(id=faculty.id).exists():
            raise RequestError(400, "Faculty name already exists")
        faculty.name = name
        changed.append("name")

    if payload.get("code") is not None:
        code = _code(payload["code"])
        if not code:
            raise RequestError(400, "code cannot be empty")
        if Faculty.objects.filter(code=code).exclude(id=faculty.id).exists():
            raise RequestError(400, "Faculty code already exists")
        faculty.code = code
        changed.append("code")

    if changed:
        faculty.save(update_fields=changed)
    return faculty


def delete_faculty(faculty_id):
    faculty = get_faculty(faculty_id)
    try:
        faculty.delete()
    except ProtectedError:
        raise RequestError(400, "Faculty still has courses or students attached")


# -------------------------------
# DEPARTMENTS
# -------------------------------

def get_department(department_id):
    department = Department.objects.filter(id=department_id).first()
    if department is None:
        raise RequestError(404, "Department not found")
    return department


def list_departments(faculty_id=None):
    departments = Department.objects.all()
    if faculty_id:
        departments = departments.filter(faculty_id=faculty_id)
    return list(departments.order_by(Lower("name")))


def create_department(payload):
    name = _text(payload.get("name"))
    code = _code(payload.get("code"))
    if not name or not code or not payload.get("faculty_id"):
        raise RequestError(400, "name, code and faculty_id are required")

    faculty = get_faculty(parse_positive_int(payload["faculty_id"], "faculty_id must be a positive integer"))

    if Department.objects.filter(code=code).exists():
        raise RequestError(400, "Department code already exists")
    if Department.objects.filter(name=name).exists():
        raise RequestError(400, "Department name already exists")

    return Department.objects.create(name=name, code=code, faculty=faculty)


def update_department(department_id, payload):
    department = get_department(department_id)
    changed = []

    if payload.get("name") is not None:
        name = _text(payload["name"])
        if not name:
            raise RequestError(400, "name cannot be empty")
        if Department.objects.filter(name=name).exclude(id=department.id).exists():
            raise RequestError(400, "Department name already exists")
        department.name = name
        changed.append("name")

    if payload.get("code") is not None:
        code = _code(payload["code"])
        if not code:
            raise RequestError(400, "code cannot be empty")
        if Department.objects.filter(code=code).exclude(id=department.id).exists():
            raise RequestError(400, "Department code already exists")
        department.code = code
        changed.append("code")

    if payload.get("faculty_id") is not None:
        faculty_id = parse_positive_int(payload["faculty_id"], "faculty_id must be a positive integer")
        department.faculty = get_faculty(faculty_id)
        changed.append("faculty")

    if changed:
        department.save(update_fields=changed)
    return department


def delete_department(department_id):
    department = get_department(department_id)
    try:
        department.delete()
    except ProtectedError:
        raise RequestError(400, "Department still has courses or students attached")
