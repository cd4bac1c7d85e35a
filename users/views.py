from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_POST

from portal.decorators import role_required, token_required
from portal.exceptions import RequestError
from portal.utils import is_blank, parse_positive_int, read_json
from users.exports import students_csv_response
from users.mappers import map_student_profile
from users.services import accounts, auth


# -------------------------------
# AUTH
# -------------------------------

@csrf_exempt
@require_POST
def signup(request):
    user = auth.signup_user(read_json(request))
    return JsonResponse(accounts.get_user_with_profile(user.id), status=201)


@csrf_exempt
@require_POST
def login(request):
    user = auth.authenticate_user(read_json(request))
    return JsonResponse(auth.generate_token_pair(user))


@csrf_exempt
@require_POST
def refresh(request):
    payload = read_json(request)
    user = auth.user_from_refresh_token(payload.get("refresh_token"))
    return JsonResponse(auth.generate_token_pair(user))


# -------------------------------
# CURRENT USER
# -------------------------------

@require_GET
@token_required
def me(request):
    return JsonResponse(accounts.get_user_with_profile(request.user.id))


@require_POST
@token_required
def student_profile(request):
    profile = accounts.create_student_profile(request.user, read_json(request))
    return JsonResponse(map_student_profile(profile), status=201)


# -------------------------------
# ADMIN VIEWS
# -------------------------------

@require_GET
@token_required
@role_required("admin")
def admin_students(request):
    filters = {}
    if request.GET.get("name"):
        filters["name"] = request.GET["name"]
    if request.GET.get("matric_no"):
        filters["matric_no"] = request.GET["matric_no"]
    if "faculty_id" in request.GET:
        filters["faculty_id"] = parse_positive_int(request.GET["faculty_id"], "Invalid faculty_id")
    if "department_id" in request.GET:
        filters["department_id"] = parse_positive_int(request.GET["department_id"], "Invalid department_id")

    return JsonResponse(accounts.list_students(filters), safe=False)


@require_GET
@token_required
@role_required("admin")
def export_students_csv(request):
    return students_csv_response(accounts.export_students_rows())


@require_POST
@token_required
@role_required("admin")
def change_user_role(request, user_id):
    role = read_json(request).get("role")
    if is_blank(role):
        raise RequestError(400, "role is required")

    user = accounts.update_role(user_id, role, actor=request.user)
    return JsonResponse({"id": user.id, "role": user.role})
