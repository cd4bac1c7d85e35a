import logging

from django.db import transaction

from academics.models import AcademicYear
from portal.exceptions import RequestError
from portal.utils import clean_text

logger = logging.getLogger(__name__)


def get_academic_year(academic_year_id):
    academic_year = AcademicYear.objects.filter(id=academic_year_id).first()
    if academic_year is None:
        raise RequestError(404, "Academic year not found")
    return academic_year


def list_academic_years():
    return list(AcademicYear.objects.order_by("-created_at", "-id"))


def create_academic_year(user, payload):
    if user is None or user.role != "admin":
        raise RequestError(403, "Only administrators can manage academic years")

    name = clean_text(payload.get("name", payload.get("label")))
    if not name:
        raise RequestError(400, "Academic year name is required")

    is_current = bool(payload.get("is_current", payload.get("isCurrent")))

    if AcademicYear.objects.filter(name=name).exists():
        raise RequestError(400, "An academic year with this name already exists")

    with transaction.atomic():
        academic_year = AcademicYear.objects.create(name=name, is_current=is_current)
        if is_current:
            AcademicYear.objects.exclude(id=academic_year.id).update(is_current=False)

    logger.info("Academic year %s created (current=%s)", academic_year.name, is_current)
    return academic_year
