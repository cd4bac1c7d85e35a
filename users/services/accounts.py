import logging

from django.db import transaction
from django.db.models import Count, Q
from django.db.models.functions import Lower

from academics.models import LEVELS, CourseRegistration, Department, Faculty
from portal.exceptions import RequestError
from portal.utils import clean_text, log_event, parse_int, parse_positive_int
from users.mappers import map_student_profile, map_user
from academics.mappers import map_department, map_faculty
from users.models import CustomUser as User, StudentProfile

logger = logging.getLogger(__name__)

ALLOWED_ROLES = {"user", "student", "lecturer", "admin"}
LEVELS_MESSAGE = "level must be one of 100, 200, 300, 400, 500, 600"


def get_user(user_id):
    user = User.objects.filter(id=user_id).first()
    if user is None:
        raise RequestError(404, "User not found")
    return user


def get_user_with_profile(user_id):
    user = get_user(user_id)
    profile = StudentProfile.objects.filter(user=user).first()
    data = map_user(user)
    data["student_profile"] = map_student_profile(profile)
    return data


def update_role(user_id, role, actor=None):
    if role not in ALLOWED_ROLES:
        raise RequestError(400, "Invalid role supplied")

    user = get_user(user_id)
    previous = user.role
    user.role = role
    user.save(update_fields=["role"])

    logger.info("Role of user %s changed from %s to %s", user.id, previous, role)
    log_event(actor, "role_changed", user_id=user.id, previous=previous, role=role)
    return user


def create_student_profile(user, payload):
    """
    Create the caller's student profile and make them a student.

    The profile insert and the role change commit together; afterwards
    ``user.role == "student"``.
    """
    matric_no = clean_text(payload.get("matric_no"))
    if not matric_no:
        raise RequestError(400, "matric_no is required")

    year_of_entry = parse_int(payload.get("year_of_entry"))
    if year_of_entry is None:
        raise RequestError(400, "year_of_entry must be an integer")

    faculty_id = parse_positive_int(payload.get("faculty_id"), "faculty_id must be a positive integer")
    department_id = parse_positive_int(payload.get("department_id"), "department_id must be a positive integer")

    level = parse_int(payload.get("level"))
    if level not in LEVELS:
        raise RequestError(400, LEVELS_MESSAGE)

    if StudentProfile.objects.filter(user=user).exists():
        raise RequestError(400, "Profile already exists")

    if StudentProfile.objects.filter(matric_no__iexact=matric_no).exists():
        raise RequestError(400, "Matriculation number already in use")

    faculty = Faculty.objects.filter(id=faculty_id).first()
    if faculty is None:
        raise RequestError(404, "Faculty not found")
    department = Department.objects.filter(id=department_id).first()
    if department is None:
        raise RequestError(404, "Department not found")
    if department.faculty_id != faculty.id:
        raise RequestError(400, "Department does not belong to the supplied faculty")

    with transaction.atomic():
        profile = StudentProfile.objects.create(
            user=user,
            matric_no=matric_no.upper(),
            year_of_entry=year_of_entry,
            faculty=faculty,
            department=department,
            level=level,
        )
        User.objects.filter(id=user.id).update(role="student")
        user.role = "student"

    logger.info("Student profile %s created for user %s", profile.matric_no, user.id)
    log_event(user, "profile_created", profile_id=profile.id, matric_no=profile.matric_no)
    return profile


def list_students(filters=None):
    filters = filters or {}

    profiles = StudentProfile.objects.select_related("user", "faculty", "department")

    if filters.get("name"):
        profiles = profiles.filter(user__full_name__icontains=filters["name"])
    if filters.get("matric_no"):
        profiles = profiles.filter(matric_no__icontains=filters["matric_no"])
    if filters.get("faculty_id"):
        profiles = profiles.filter(faculty_id=filters["faculty_id"])
    if filters.get("department_id"):
        profiles = profiles.filter(department_id=filters["department_id"])

    return [
        {
            "student_profile": map_student_profile(profile),
            "user": map_user(profile.user),
            "faculty": map_faculty(profile.faculty),
            "department": map_department(profile.department),
        }
        for profile in profiles.order_by(Lower("user__full_name"))
    ]


def export_students_rows():
    """
    One row per student for the CSV export.

    The academic year and course count come from the student's most recent
    registration; students without one get ``-`` and 0.
    """
    rows = []

    profiles = (
        StudentProfile.objects
        .select_related("user", "faculty", "department")
        .order_by(Lower("user__full_name"))
    )

    for profile in profiles:
        registration = (
            CourseRegistration.objects
            .filter(student_id=profile.user_id)
            .select_related("academic_year")
            .annotate(
                total_courses=Count(
                    "items",
                    filter=Q(items__status="active", items__removed_at__isnull=True),
                )
            )
            .order_by("-created_at", "-id")
            .first()
        )

        rows.append({
            "matric_no": profile.matric_no,
            "full_name": profile.user.full_name,
            "faculty": profile.faculty.name,
            "department": profile.department.name,
            "academic_year": registration.academic_year.name if registration else "-",
            "total_courses": registration.total_courses if registration else 0,
        })

    return rows
