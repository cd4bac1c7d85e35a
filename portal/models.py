# portal/models.py
# Shared records that do not belong to a single domain app.
# Domain tables live in their apps:
# - users: CustomUser, StudentProfile
# - academics: Faculty, Department, AcademicYear, Course, registrations
# - finance: fee policies and payments

from django.db import models
from django.conf import settings


class AuditLog(models.Model):
    ACTION_CHOICES = [
        ("profile_created", "Student profile created"),
        ("role_changed", "Role changed"),
        ("registration_created", "Registration created"),
        ("registration_submitted", "Registration submitted"),
        ("payment_created", "Payment created"),
        ("payment_approved", "Payment approved"),
        ("payment_declined", "Payment declined"),
        ("policy_upserted", "Fee policy saved"),
    ]

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True, blank=True,
        related_name="audit_logs"
    )

    action_type = models.CharField(max_length=50, choices=ACTION_CHOICES)

    action_data = models.JSONField(default=dict, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return f"[{self.action_type}] user={self.user_id}"
