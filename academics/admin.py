from django.contrib import admin
from .models import Faculty, Department, AcademicYear, Course
from .models import CourseRegistration, CourseRegistrationItem


@admin.register(Faculty)
class FacultyAdmin(admin.ModelAdmin):
    list_display = ("name", "code", "created_at")
    search_fields = ("name", "code")
    ordering = ("name",)


@admin.register(Department)
class DepartmentAdmin(admin.ModelAdmin):
    list_display = ("name", "code", "faculty", "created_at")
    search_fields = ("name", "code", "faculty__name")
    list_filter = ("faculty",)
    ordering = ("name",)


@admin.register(AcademicYear)
class AcademicYearAdmin(admin.ModelAdmin):
    list_display = ("name", "is_current", "created_at")
    search_fields = ("name",)
    list_filter = ("is_current",)
    ordering = ("-name",)


@admin.register(Course)
class CourseAdmin(admin.ModelAdmin):
    list_display = ("course_code", "course_name", "level", "faculty", "department", "is_active")
    search_fields = ("course_code", "course_name", "department__name")
    list_filter = ("level", "faculty", "is_active")
    ordering = ("course_code",)


class CourseRegistrationItemInline(admin.TabularInline):
    model = CourseRegistrationItem
    extra = 0
    readonly_fields = ("course_code_snapshot", "course_name_snapshot", "removed_at", "created_at")


@admin.register(CourseRegistration)
class CourseRegistrationAdmin(admin.ModelAdmin):
    inlines = [CourseRegistrationItemInline]
    list_display = ("student", "academic_year", "submitted", "submitted_at", "created_at")
    search_fields = ("student__email", "student__full_name")
    list_filter = ("academic_year", "submitted")
