from django.urls import path
from . import views

urlpatterns = [
    path("faculties", views.faculty_list, name="faculty_list"),
    path("faculties/<int:faculty_id>", views.faculty_detail, name="faculty_detail"),
    path("departments", views.department_list, name="department_list"),
    path("departments/<int:department_id>", views.department_detail, name="department_detail"),

    path("courses", views.course_list, name="course_list"),
    path("courses/<int:course_id>", views.course_detail, name="course_detail"),

    path("academic-years", views.academic_year_list, name="academic_year_list"),

    path("registrations", views.registration_list, name="registration_list"),
    path("registrations/items/<int:item_id>", views.registration_remove_item, name="registration_remove_item"),
    path("registrations/<int:registration_id>", views.registration_detail, name="registration_detail"),
    path("registrations/<int:registration_id>/pdf", views.registration_download, name="registration_pdf"),
    path("registrations/<int:registration_id>/items", views.registration_add_item, name="registration_add_item"),
    path("registrations/<int:registration_id>/submit", views.registration_submit, name="registration_submit"),

    path("admin/registrations/submitted", views.submitted_registrations, name="submitted_registrations"),
]
