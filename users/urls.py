from django.urls import path
from . import views

urlpatterns = [
    path("auth/signup", views.signup, name="signup"),
    path("auth/login", views.login, name="login"),
    path("auth/refresh", views.refresh, name="token_refresh"),

    path("users/me", views.me, name="users_me"),
    path("students/profile", views.student_profile, name="student_profile"),

    path("admin/students", views.admin_students, name="admin_students"),
    path("admin/students/export", views.export_students_csv, name="export_students_csv"),
    path("admin/users/<int:user_id>/promote", views.change_user_role, name="promote_user"),
    path("admin/users/<int:user_id>/demote", views.change_user_role, name="demote_user"),
]
