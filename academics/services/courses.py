import logging

from django.db.models.functions import Lower

from academics.models import LEVELS, Course, Department, Faculty
from portal.exceptions import RequestError
from portal.utils import clean_text, falsy, is_blank, parse_int, parse_positive_int, truthy
from users.models import StudentProfile

logger = logging.getLogger(__name__)

LEVELS_MESSAGE = "level must be one of 100, 200, 300, 400, 500, 600"


def get_course(course_id):
    course = Course.objects.filter(id=course_id).first()
    if course is None:
        raise RequestError(404, "Course not found")
    return course


def ensure_faculty_and_department(faculty_id, department_id):
    faculty = Faculty.objects.filter(id=faculty_id).first()
    if faculty is None:
        raise RequestError(404, "Faculty not found")
    department = Department.objects.filter(id=department_id).first()
    if department is None:
        raise RequestError(404, "Department not found")
    if department.faculty_id != faculty.id:
        raise RequestError(400, "Department does not belong to faculty")
    return faculty, department


def _level(value, message=LEVELS_MESSAGE):
    level = parse_int(value)
    if level not in LEVELS:
        raise RequestError(400, message)
    return level


def create_course(creator, payload):
    code = clean_text(payload.get("course_code"))
    name = clean_text(payload.get("course_name"))
    if not code or not name:
        raise RequestError(400, "course_code and course_name are required")
    code = code.upper()

    level = _level(payload.get("level"))

    faculty_id = parse_int(payload.get("faculty_id"))
    department_id = parse_int(payload.get("department_id"))
    if not faculty_id or faculty_id <= 0 or not department_id or department_id <= 0:
        raise RequestError(400, "faculty_id and department_id must be positive integers")

    if Course.objects.filter(course_code=code).exists():
        raise RequestError(400, "Course code already exists")

    faculty, department = ensure_faculty_and_department(faculty_id, department_id)

    course = Course.objects.create(
        course_code=code,
        course_name=name,
        level=level,
        faculty=faculty,
        department=department,
        created_by=creator if getattr(creator, "pk", None) else None,
        is_active=payload.get("is_active") is not False,
    )
    logger.info("Course %s created by user %s", course.course_code, getattr(creator, "pk", None))
    return course


def update_course(course_id, actor, payload):
    if actor is None or actor.role not in ("admin", "lecturer"):
        raise RequestError(403, "Insufficient permissions")

    course = get_course(course_id)
    if actor.role == "lecturer" and course.created_by_id != actor.id:
        raise RequestError(403, "Lecturers can only modify their courses")

    changed = []

    if "course_name" in payload:
        name = clean_text(payload["course_name"])
        if not name:
            raise RequestError(400, "course_name cannot be empty")
        course.course_name = name
        changed.append("course_name")

    if "level" in payload:
        course.level = _level(payload["level"])
        changed.append("level")

    faculty_id = course.faculty_id
    department_id = course.department_id
    if "faculty_id" in payload:
        faculty_id = parse_positive_int(payload["faculty_id"], "faculty_id must be a positive integer")
    if "department_id" in payload:
        department_id = parse_positive_int(payload["department_id"], "department_id must be a positive integer")

    if "is_active" in payload:
        course.is_active = bool(payload["is_active"])
        changed.append("is_active")

    if faculty_id != course.faculty_id or department_id != course.department_id:
        faculty, department = ensure_faculty_and_department(faculty_id, department_id)
        course.faculty = faculty
        course.department = department
        changed.extend(["faculty", "department"])

    if changed:
        course.save(update_fields=changed + ["updated_at"])
    return course


def delete_course(course_id, actor):
    if actor is None or actor.role not in ("admin", "lecturer"):
        raise RequestError(403, "Cannot delete this course")

    course = get_course(course_id)
    if actor.role == "lecturer" and course.created_by_id != actor.id:
        raise RequestError(403, "Cannot delete this course")

    course.delete()
    logger.info("Course %s deleted by user %s", course_id, actor.id)


def list_courses(current_user, filters=None):
    """
    Courses visible to ``current_user``, ordered by code.

    Students only see active courses of their own faculty at their profile
    level (``level`` may pick another level); asking for another faculty is
    refused. Everyone else sees active courses unless ``include_inactive`` or
    an explicit ``is_active`` filter says otherwise.
    """
    filters = filters or {}
    courses = Course.objects.all()

    if current_user is not None and current_user.role == "student":
        profile = StudentProfile.objects.filter(user_id=current_user.id).first()
        if profile is None or profile.level is None:
            return []

        level = profile.level
        if not is_blank(filters.get("level")):
            level = _level(filters["level"], "Invalid course level filter supplied")
        if level not in LEVELS:
            raise RequestError(400, "Student profile has an unsupported level value")

        courses = courses.filter(faculty_id=profile.faculty_id, level=level, is_active=True)

        if not is_blank(filters.get("department_id")):
            department_id = parse_positive_int(filters["department_id"], "department_id must be a positive integer")
            courses = courses.filter(department_id=department_id)

        if not is_blank(filters.get("faculty_id")):
            faculty_id = parse_positive_int(filters["faculty_id"], "faculty_id must be a positive integer")
            if faculty_id != profile.faculty_id:
                raise RequestError(403, "Students can only view courses from their faculty")
    else:
        is_active = filters.get("is_active")
        if truthy(is_active):
            courses = courses.filter(is_active=True)
        elif falsy(is_active):
            courses = courses.filter(is_active=False)
        elif not truthy(filters.get("include_inactive")):
            courses = courses.filter(is_active=True)

        if not is_blank(filters.get("faculty_id")):
            faculty_id = parse_positive_int(filters["faculty_id"], "faculty_id must be a positive integer")
            courses = courses.filter(faculty_id=faculty_id)

        if not is_blank(filters.get("department_id")):
            department_id = parse_positive_int(filters["department_id"], "department_id must be a positive integer")
            courses = courses.filter(department_id=department_id)

        if not is_blank(filters.get("level")):
            courses = courses.filter(level=_level(filters["level"], "Invalid course level filter supplied"))

    return list(courses.order_by(Lower("course_code")))
