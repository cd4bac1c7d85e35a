import logging
from decimal import Decimal, InvalidOperation

from django.db import IntegrityError, transaction
from django.utils import timezone
from django.utils.crypto import get_random_string

from academics.models import AcademicYear
from finance.models import SchoolFeePayment, SchoolFeePolicy
from portal.exceptions import RequestError
from portal.utils import clean_text, log_event, parse_positive_int
from users.models import StudentProfile

logger = logging.getLogger(__name__)

PAYMENT_STATUSES = {"pending", "approved", "declined"}
DUPLICATE_PAYMENT = "A payment already exists for this academic year"
REFERENCE_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"


def _payments():
    return SchoolFeePayment.objects.select_related(
        "academic_year", "student", "approved_by", "declined_by"
    )


def _parse_amount(value):
    if value is None or isinstance(value, bool):
        raise RequestError(400, "amount must be a positive number")
    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation:
        raise RequestError(400, "amount must be a positive number")
    if not amount.is_finite() or amount <= 0:
        raise RequestError(400, "amount must be a positive number")
    return amount.quantize(Decimal("0.01"))


def generate_reference():
    stamp = timezone.now().strftime("%Y%m%d%H%M%S")
    return f"SFP-{stamp}-{get_random_string(10, REFERENCE_ALPHABET)}"


# -------------------------------
# POLICIES
# -------------------------------

def list_policies():
    return list(
        SchoolFeePolicy.objects
        .select_related("academic_year")
        .order_by("-academic_year__name")
    )


def upsert_policy(admin, academic_year_id, amount):
    """Set the fee for an academic year, creating the policy if needed."""
    if admin is None or admin.role != "admin":
        raise RequestError(403, "Only administrators can manage school fee policies")

    academic_year_id = parse_positive_int(academic_year_id, "academic_year_id must be a positive integer")
    amount = _parse_amount(amount)

    academic_year = AcademicYear.objects.filter(id=academic_year_id).first()
    if academic_year is None:
        raise RequestError(404, "Academic year not found")

    policy = SchoolFeePolicy.objects.filter(academic_year=academic_year).first()
    if policy is None:
        policy = SchoolFeePolicy.objects.create(
            academic_year=academic_year,
            amount=amount,
            created_by=admin,
            updated_by=admin,
        )
    else:
        policy.amount = amount
        policy.updated_by = admin
        policy.save(update_fields=["amount", "updated_by", "updated_at"])

    logger.info("School fee for %s set to %s by user %s", academic_year.name, amount, admin.id)
    log_event(admin, "policy_upserted", academic_year_id=academic_year.id, amount=str(amount))
    return policy


# -------------------------------
# PAYMENTS
# -------------------------------

def get_payment(payment_id):
    payment = _payments().filter(id=payment_id).first()
    if payment is None:
        raise RequestError(404, "Payment not found")
    return payment


def list_payments(actor, status=None, academic_year_id=None, student_id=None):
    """
    Students see their own payments; admins see all of them and may filter.
    """
    payments = _payments()

    if actor.role == "student":
        payments = payments.filter(student_id=actor.id)
    elif actor.role == "admin":
        if status:
            status = str(status).lower()
            if status not in PAYMENT_STATUSES:
                raise RequestError(400, "Invalid status filter supplied")
            payments = payments.filter(status=status)
        if academic_year_id:
            academic_year_id = parse_positive_int(
                academic_year_id, "academic_year_id filter must be a positive integer"
            )
            payments = payments.filter(academic_year_id=academic_year_id)
        if student_id:
            student_id = parse_positive_int(student_id, "student_id filter must be a positive integer")
            payments = payments.filter(student_id=student_id)
    else:
        raise RequestError(403, "Insufficient permissions to view payments")

    return list(payments.order_by("-created_at", "-id"))


def create_payment(student, academic_year_id, reference=None, notes=None):
    """
    Record a fee payment for the student's academic year.

    The amount always comes from the year's policy. A declined payment is
    reset to pending; any other existing payment is a duplicate.
    """
    if student.role != "student":
        raise RequestError(403, "Only students can create school fee payments")

    if not StudentProfile.objects.filter(user_id=student.id).exists():
        raise RequestError(400, "Complete your student profile before paying fees")

    academic_year_id = parse_positive_int(academic_year_id, "academic_year_id must be a positive integer")

    policy = SchoolFeePolicy.objects.filter(academic_year_id=academic_year_id).first()
    if policy is None:
        raise RequestError(404, "School fee amount has not been set for this academic year")

    reference = clean_text(reference) or generate_reference()
    notes = clean_text(notes)

    existing = SchoolFeePayment.objects.filter(student_id=student.id, academic_year_id=academic_year_id).first()

    if existing is not None:
        if existing.status != "declined":
            raise RequestError(400, DUPLICATE_PAYMENT)

        existing.amount = policy.amount
        existing.status = "pending"
        existing.payment_reference = reference
        existing.notes = notes
        existing.approved_by = None
        existing.approved_at = None
        existing.declined_by = None
        existing.declined_at = None
        existing.declined_reason = None
        existing.save()
        logger.info("Declined payment %s resubmitted by student %s", existing.id, student.id)
        log_event(student, "payment_created", payment_id=existing.id, resubmitted=True)
        return get_payment(existing.id)

    try:
        with transaction.atomic():
            payment = SchoolFeePayment.objects.create(
                student_id=student.id,
                academic_year_id=academic_year_id,
                amount=policy.amount,
                payment_reference=reference,
                notes=notes,
            )
    except IntegrityError:
        raise RequestError(400, DUPLICATE_PAYMENT)

    logger.info("Payment %s created by student %s", payment.id, student.id)
    log_event(student, "payment_created", payment_id=payment.id, reference=reference)
    return get_payment(payment.id)


def approve_payment(admin, payment_id):
    if admin.role != "admin":
        raise RequestError(403, "Only administrators can approve payments")

    payment = get_payment(payment_id)
    if payment.status == "approved":
        raise RequestError(400, "Payment is already approved")
    if payment.status == "declined":
        raise RequestError(400, "Declined payments cannot be approved. Ask the student to resubmit.")

    payment.status = "approved"
    payment.approved_by = admin
    payment.approved_at = timezone.now()
    payment.declined_by = None
    payment.declined_at = None
    payment.declined_reason = None
    payment.save()

    logger.info("Payment %s approved by user %s", payment.id, admin.id)
    log_event(admin, "payment_approved", payment_id=payment.id)
    return payment


def decline_payment(admin, payment_id, reason):
    if admin.role != "admin":
        raise RequestError(403, "Only administrators can decline payments")

    payment = get_payment(payment_id)
    if payment.status == "declined":
        raise RequestError(400, "Payment is already declined")
    if payment.status == "approved":
        raise RequestError(400, "Approved payments cannot be declined")

    reason = clean_text(reason)
    if not reason:
        raise RequestError(400, "Provide a reason when declining a payment")

    payment.status = "declined"
    payment.declined_by = admin
    payment.declined_at = timezone.now()
    payment.declined_reason = reason
    payment.approved_by = None
    payment.approved_at = None
    payment.save()

    logger.info("Payment %s declined by user %s", payment.id, admin.id)
    log_event(admin, "payment_declined", payment_id=payment.id, reason=reason)
    return payment
