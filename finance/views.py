from django.http import JsonResponse
from django.views.decorators.http import require_http_methods, require_POST

from finance.mappers import map_payment, map_policy
from finance.services import school_fees
from portal.decorators import role_required, token_required
from portal.utils import read_json


# -------------------------------
# FEE POLICIES
# -------------------------------

@require_http_methods(["GET", "POST"])
@token_required
def policies(request):
    if request.method == "POST":
        return save_policy(request)
    items = school_fees.list_policies()
    return JsonResponse({"items": [map_policy(policy) for policy in items]})


@role_required("admin")
def save_policy(request):
    payload = read_json(request)
    policy = school_fees.upsert_policy(
        request.user,
        payload.get("academic_year_id", payload.get("academicYearId")),
        payload.get("amount"),
    )
    return JsonResponse(map_policy(policy), status=201)


# -------------------------------
# PAYMENTS
# -------------------------------

@require_http_methods(["GET", "POST"])
@token_required
def payments(request):
    if request.method == "POST":
        return create_payment(request)

    items = school_fees.list_payments(
        request.user,
        status=request.GET.get("status"),
        academic_year_id=request.GET.get("academic_year_id"),
        student_id=request.GET.get("student_id"),
    )
    return JsonResponse({"items": [map_payment(payment) for payment in items]})


@role_required("student")
def create_payment(request):
    payload = read_json(request)
    payment = school_fees.create_payment(
        request.user,
        payload.get("academic_year_id", payload.get("academicYearId")),
        reference=payload.get("payment_reference", payload.get("reference")),
        notes=payload.get("notes"),
    )
    return JsonResponse(map_payment(payment), status=201)


@require_POST
@token_required
@role_required("admin")
def approve_payment(request, payment_id):
    payment = school_fees.approve_payment(request.user, payment_id)
    return JsonResponse(map_payment(payment))


@require_POST
@token_required
@role_required("admin")
def decline_payment(request, payment_id):
    payload = read_json(request)
    reason = payload.get("reason", payload.get("decline_reason"))
    payment = school_fees.decline_payment(request.user, payment_id, reason)
    return JsonResponse(map_payment(payment))
