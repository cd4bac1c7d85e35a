from django.db import models
from django.conf import settings


User = settings.AUTH_USER_MODEL

LEVELS = (100, 200, 300, 400, 500, 600)
LEVEL_CHOICES = [(level, f"Level {level}") for level in LEVELS]


class Faculty(models.Model):
    name = models.CharField(max_length=150, unique=True)
    code = models.CharField(max_length=20, unique=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name_plural = "Faculties"

    def __str__(self):
        return f"{self.name} ({self.code})"


class Department(models.Model):
    name = models.CharField(max_length=150, unique=True)
    code = models.CharField(max_length=20, unique=True)

    faculty = models.ForeignKey(
        Faculty,
        on_delete=models.CASCADE,
        related_name='departments'
    )

    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return self.name


class AcademicYear(models.Model):
    name = models.CharField(
        max_length=16,
        unique=True,
        help_text="Format: 2024/2025"
    )
    # at most one row is current
    is_current = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return self.name


class Course(models.Model):
    course_code = models.CharField(max_length=20, unique=True)
    course_name = models.CharField(max_length=200)
    level = models.PositiveSmallIntegerField(choices=LEVEL_CHOICES, db_index=True)

    faculty = models.ForeignKey(
        Faculty,
        on_delete=models.PROTECT,
        related_name='courses'
    )
    department = models.ForeignKey(
        Department,
        on_delete=models.PROTECT,
        related_name='courses'
    )

    created_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        limit_choices_to={'role__in': ['lecturer', 'admin']},
        related_name='courses_created'
    )

    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.course_code} - {self.course_name}"


class CourseRegistration(models.Model):
    student = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name="course_registrations"
    )

    academic_year = models.ForeignKey(
        AcademicYear,
        on_delete=models.PROTECT,
        related_name="registrations"
    )

    submitted = models.BooleanField(default=False)
    submitted_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = ("student", "academic_year")

    def __str__(self):
        return f"{self.student} - {self.academic_year}"


class CourseRegistrationItem(models.Model):
    STATUS_CHOICES = [
        ("active", "Active"),
        ("removed", "Removed"),
    ]

    registration = models.ForeignKey(
        CourseRegistration,
        on_delete=models.CASCADE,
        related_name="items"
    )

    # kept after the course is deleted; the snapshots still describe it
    course = models.ForeignKey(
        Course,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="registration_items"
    )

    course_code_snapshot = models.CharField(max_length=20)
    course_name_snapshot = models.CharField(max_length=200)

    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default="active")
    removed_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at", "id"]

    def __str__(self):
        return f"{self.course_code_snapshot} ({self.status})"
