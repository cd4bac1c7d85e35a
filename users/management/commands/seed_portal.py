from django.core.management.base import BaseCommand
from django.db import transaction

from academics.models import AcademicYear, Department, Faculty
from users.models import CustomUser as User

SAMPLE_USERS = [
    {
        "email": "admin@uniben.edu",
        "full_name": "Portal Administrator",
        "password": "AdminPass123!",
        "role": "admin",
    },
    {
        "email": "lecturer@uniben.edu",
        "full_name": "Demo Lecturer",
        "password": "LectPass123!",
        "role": "lecturer",
    },
]


def upsert_user(email, full_name, password, role):
    user = User.objects.filter(email__iexact=email).first()
    if user is None:
        user = User(email=email.lower())
    user.full_name = full_name
    user.role = role
    user.is_active = True
    user.is_staff = role == "admin"
    user.set_password(password)
    user.save()
    return user


class Command(BaseCommand):
    help = "Load a sample faculty, department, current academic year, admin and lecturer."

    @transaction.atomic
    def handle(self, *args, **options):
        faculty, _ = Faculty.objects.get_or_create(
            code="SCI",
            defaults={"name": "Faculty of Science"},
        )
        department, _ = Department.objects.get_or_create(
            code="CSC",
            defaults={"name": "Computer Science", "faculty": faculty},
        )

        academic_year, created = AcademicYear.objects.get_or_create(
            name="2024/2025",
            defaults={"is_current": True},
        )
        if created:
            AcademicYear.objects.exclude(id=academic_year.id).update(is_current=False)

        users = [upsert_user(**data) for data in SAMPLE_USERS]

        self.stdout.write(self.style.SUCCESS("Seed completed successfully."))
        for data, user in zip(SAMPLE_USERS, users):
            self.stdout.write(f"{data['role'].title()} -> email: {user.email} / password: {data['password']} (id {user.id})")
        self.stdout.write(f"Sample faculty: {faculty.name} ({faculty.code})")
        self.stdout.write(f"Sample department: {department.name} ({department.code})")
        self.stdout.write(f"Current academic year: {academic_year.name}")
