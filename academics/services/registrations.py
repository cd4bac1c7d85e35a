import logging

from django.db import IntegrityError, transaction
from django.db.models import Count, F, Q
from django.utils import timezone

from academics.mappers import map_registration, map_registration_item
from academics.models import AcademicYear, Course, CourseRegistration, CourseRegistrationItem
from finance.models import SchoolFeePayment
from portal.exceptions import RequestError
from portal.utils import log_event, parse_positive_int
from users.models import StudentProfile

logger = logging.getLogger(__name__)

FEES_NOT_APPROVED = (
    "Please pay your school fees for this academic year and wait for admin "
    "approval before registering courses."
)
DUPLICATE_REGISTRATION = "Registration already exists for this academic year"


def ensure_approved_school_fees(student_id, academic_year_id):
    """Refuse unless the student holds an approved payment for the year."""
    approved = SchoolFeePayment.objects.filter(
        student_id=student_id,
        academic_year_id=academic_year_id,
        status="approved",
    ).exists()
    if not approved:
        raise RequestError(400, FEES_NOT_APPROVED)


def _load_registration(registration_id):
    registration = CourseRegistration.objects.filter(id=registration_id).first()
    if registration is None:
        raise RequestError(404, "Registration not found")
    return registration


def _ensure_owner(actor, registration, message):
    if registration.student_id != actor.id and actor.role != "admin":
        raise RequestError(403, message)


def registration_with_items(registration):
    return map_registration(registration, registration.items.all())


def create_registration(student, academic_year_id):
    academic_year_id = parse_positive_int(academic_year_id, "academic_year_id must be a positive integer")

    academic_year = AcademicYear.objects.filter(id=academic_year_id).first()
    if academic_year is None:
        raise RequestError(404, "Academic year not found")

    if CourseRegistration.objects.filter(student_id=student.id, academic_year=academic_year).exists():
        raise RequestError(400, DUPLICATE_REGISTRATION)

    ensure_approved_school_fees(student.id, academic_year.id)

    try:
        with transaction.atomic():
            registration = CourseRegistration.objects.create(
                student_id=student.id,
                academic_year=academic_year,
            )
    except IntegrityError:
        raise RequestError(400, DUPLICATE_REGISTRATION)

    logger.info("Registration %s created for student %s (%s)", registration.id, student.id, academic_year.name)
    log_event(student, "registration_created", registration_id=registration.id, academic_year_id=academic_year.id)
    return registration_with_items(registration)


def add_item(actor, registration_id, course_id):
    registration = _load_registration(registration_id)
    _ensure_owner(actor, registration, "Not allowed to modify this registration")

    ensure_approved_school_fees(registration.student_id, registration.academic_year_id)

    course_id = parse_positive_int(course_id, "course_id must be a positive integer")
    course = Course.objects.filter(id=course_id, is_active=True).first()
    if course is None:
        raise RequestError(404, "Course not available")

    profile = StudentProfile.objects.filter(user_id=registration.student_id).first()
    if profile is None:
        raise RequestError(400, "Student profile must be completed before registering courses")
    if profile.level is None:
        raise RequestError(400, "Student level information is missing")
    if profile.level != course.level:
        raise RequestError(400, "Selected course does not match the student's level")

    already_added = registration.items.filter(course=course, status="active").exists()
    if already_added:
        raise RequestError(400, "Course already added")

    item = CourseRegistrationItem.objects.create(
        registration=registration,
        course=course,
        course_code_snapshot=course.course_code,
        course_name_snapshot=course.course_name,
    )
    logger.info("Course %s added to registration %s", course.course_code, registration.id)
    return map_registration_item(item)


def remove_item(actor, item_id):
    """
    Soft-delete a registration item.

    Removing an item that is already removed succeeds and keeps the first
    ``removed_at``.
    """
    item = CourseRegistrationItem.objects.filter(id=item_id).first()
    if item is None:
        raise RequestError(404, "Item not found")

    registration = _load_registration(item.registration_id)
    _ensure_owner(actor, registration, "Not allowed to modify this registration")

    if item.status != "removed":
        item.status = "removed"
        item.removed_at = timezone.now()
        item.save(update_fields=["status", "removed_at"])
        logger.info("Item %s removed from registration %s", item.id, registration.id)

    return map_registration_item(item)


def submit_registration(actor, registration_id, submitted=True):
    registration = _load_registration(registration_id)
    _ensure_owner(actor, registration, "Not allowed to submit this registration")

    ensure_approved_school_fees(registration.student_id, registration.academic_year_id)

    registration.submitted = bool(submitted)
    registration.submitted_at = timezone.now() if submitted else None
    registration.save(update_fields=["submitted", "submitted_at"])

    logger.info("Registration %s submitted=%s", registration.id, registration.submitted)
    if registration.submitted:
        log_event(actor, "registration_submitted", registration_id=registration.id)
    return registration_with_items(registration)


def get_registration(actor, registration_id):
    registration = _load_registration(registration_id)
    _ensure_owner(actor, registration, "Not allowed to view this registration")
    return registration


def list_registrations_for_student(student):
    registrations = (
        CourseRegistration.objects
        .filter(student_id=student.id)
        .prefetch_related("items")
        .order_by("created_at", "id")
    )
    return [registration_with_items(registration) for registration in registrations]


def list_submitted_registrations(academic_year_id=None):
    registrations = CourseRegistration.objects.filter(submitted=True, submitted_at__isnull=False)
    if academic_year_id is not None:
        registrations = registrations.filter(academic_year_id=academic_year_id)

    rows = (
        registrations
        .values(
            "academic_year_id",
            "submitted_at",
            "student_id",
            registration_id=F("id"),
            academic_year_name=F("academic_year__name"),
            student_full_name=F("student__full_name"),
            student_email=F("student__email"),
            matric_no=F("student__student_profile__matric_no"),
            level=F("student__student_profile__level"),
        )
        .annotate(course_count=Count("items", filter=Q(items__status="active")))
        .order_by("-submitted_at", "student__full_name")
    )

    return [
        {
            "registration_id": row["registration_id"],
            "academic_year_id": row["academic_year_id"],
            "academic_year_name": row["academic_year_name"],
            "submitted_at": row["submitted_at"],
            "student_id": row["student_id"],
            "student_full_name": row["student_full_name"],
            "student_email": row["student_email"],
            "matric_no": row["matric_no"],
            "level": row["level"],
            "course_count": row["course_count"] or 0,
        }
        for row in rows
    ]
