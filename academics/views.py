from django.http import HttpResponse, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_http_methods, require_POST

from academics.documents import registration_pdf
from academics.mappers import map_academic_year, map_course, map_department, map_faculty
from academics.services import academic_years, courses, faculties, registrations
from portal.decorators import role_required, token_required
from portal.utils import parse_positive_int, read_json


# -------------------------------
# FACULTIES & DEPARTMENTS
# -------------------------------

@csrf_exempt
@require_http_methods(["GET", "POST"])
def faculty_list(request):
    if request.method == "POST":
        return create_faculty(request)
    return JsonResponse([map_faculty(f) for f in faculties.list_faculties()], safe=False)


@token_required
@role_required("admin")
def create_faculty(request):
    faculty = faculties.create_faculty(read_json(request))
    return JsonResponse(map_faculty(faculty), status=201)


@csrf_exempt
@require_http_methods(["GET", "PUT", "DELETE"])
def faculty_detail(request, faculty_id):
    if request.method == "GET":
        return JsonResponse(map_faculty(faculties.get_faculty(faculty_id)))
    return change_faculty(request, faculty_id)


@token_required
@role_required("admin")
def change_faculty(request, faculty_id):
    if request.method == "DELETE":
        faculties.delete_faculty(faculty_id)
        return HttpResponse(status=204)
    faculty = faculties.update_faculty(faculty_id, read_json(request))
    return JsonResponse(map_faculty(faculty))


@csrf_exempt
@require_http_methods(["GET", "POST"])
def department_list(request):
    if request.method == "POST":
        return create_department(request)

    faculty_id = None
    if "faculty_id" in request.GET:
        faculty_id = parse_positive_int(request.GET["faculty_id"], "Invalid faculty_id")
    departments = faculties.list_departments(faculty_id)
    return JsonResponse([map_department(d) for d in departments], safe=False)


@token_required
@role_required("admin")
def create_department(request):
    department = faculties.create_department(read_json(request))
    return JsonResponse(map_department(department), status=201)


@csrf_exempt
@require_http_methods(["GET", "PUT", "DELETE"])
def department_detail(request, department_id):
    if request.method == "GET":
        return JsonResponse(map_department(faculties.get_department(department_id)))
    return change_department(request, department_id)


@token_required
@role_required("admin")
def change_department(request, department_id):
    if request.method == "DELETE":
        faculties.delete_department(department_id)
        return HttpResponse(status=204)
    department = faculties.update_department(department_id, read_json(request))
    return JsonResponse(map_department(department))


# -------------------------------
# COURSES
# -------------------------------

@require_http_methods(["GET", "POST"])
@token_required
def course_list(request):
    if request.method == "POST":
        return create_course(request)

    filters = {
        "faculty_id": request.GET.get("faculty_id"),
        "department_id": request.GET.get("department_id"),
        "level": request.GET.get("level"),
        "include_inactive": request.GET.get("include_inactive"),
        "is_active": request.GET.get("is_active"),
    }
    items = courses.list_courses(request.user, filters)
    return JsonResponse({"items": [map_course(course) for course in items]})


@role_required("lecturer", "admin")
def create_course(request):
    course = courses.create_course(request.user, read_json(request))
    return JsonResponse(map_course(course), status=201)


@require_http_methods(["GET", "PUT", "DELETE"])
@token_required
def course_detail(request, course_id):
    if request.method == "GET":
        return JsonResponse(map_course(courses.get_course(course_id)))
    return change_course(request, course_id)


@role_required("lecturer", "admin")
def change_course(request, course_id):
    if request.method == "DELETE":
        courses.delete_course(course_id, request.user)
        return HttpResponse(status=204)
    course = courses.update_course(course_id, request.user, read_json(request))
    return JsonResponse(map_course(course))


# -------------------------------
# ACADEMIC YEARS
# -------------------------------

@require_http_methods(["GET", "POST"])
@token_required
def academic_year_list(request):
    if request.method == "POST":
        return create_academic_year(request)
    items = academic_years.list_academic_years()
    return JsonResponse({"items": [map_academic_year(year) for year in items]})


@role_required("admin")
def create_academic_year(request):
    academic_year = academic_years.create_academic_year(request.user, read_json(request))
    return JsonResponse(map_academic_year(academic_year), status=201)


# -------------------------------
# REGISTRATIONS
# -------------------------------

@require_http_methods(["GET", "POST"])
@token_required
def registration_list(request):
    if request.method == "POST":
        payload = read_json(request)
        registration = registrations.create_registration(request.user, payload.get("academic_year_id"))
        return JsonResponse(registration, status=201)

    return JsonResponse(registrations.list_registrations_for_student(request.user), safe=False)


@require_GET
@token_required
def registration_detail(request, registration_id):
    registration = registrations.get_registration(request.user, registration_id)
    return JsonResponse(registrations.registration_with_items(registration))


@require_GET
@token_required
def registration_download(request, registration_id):
    registration = registrations.get_registration(request.user, registration_id)
    return registration_pdf(registration)


@require_POST
@token_required
def registration_add_item(request, registration_id):
    payload = read_json(request)
    item = registrations.add_item(request.user, registration_id, payload.get("course_id"))
    return JsonResponse(item, status=201)


@require_http_methods(["DELETE"])
@token_required
def registration_remove_item(request, item_id):
    return JsonResponse(registrations.remove_item(request.user, item_id))


@require_POST
@token_required
def registration_submit(request, registration_id):
    payload = read_json(request)
    submitted = payload.get("submitted") is not False
    return JsonResponse(registrations.submit_registration(request.user, registration_id, submitted))


@require_GET
@token_required
@role_required("admin")
def submitted_registrations(request):
    academic_year_id = None
    if request.GET.get("academic_year_id"):
        academic_year_id = parse_positive_int(request.GET["academic_year_id"], "Invalid academic_year_id")
    return JsonResponse(registrations.list_submitted_registrations(academic_year_id), safe=False)
