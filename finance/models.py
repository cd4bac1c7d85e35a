from django.db import models
from django.conf import settings
from academics.models import AcademicYear


class SchoolFeePolicy(models.Model):
    academic_year = models.OneToOneField(
        AcademicYear,
        on_delete=models.PROTECT,
        related_name="fee_policy"
    )

    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        help_text="School fee payable for the academic year"
    )

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="fee_policies_created"
    )

    updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="fee_policies_updated"
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name_plural = "School fee policies"

    def __str__(self):
        return f"{self.academic_year} - {self.amount}"


class SchoolFeePayment(models.Model):
    STATUS_CHOICES = [
        ("pending", "Pending"),
        ("approved", "Approved"),
        ("declined", "Declined"),
    ]

    student = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="fee_payments",
        limit_choices_to={'role': 'student'}
    )

    academic_year = models.ForeignKey(
        AcademicYear,
        on_delete=models.PROTECT,
        related_name="fee_payments"
    )

    # copied from the policy, never from the client
    amount = models.DecimalField(max_digits=12, decimal_places=2)

    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default="pending", db_index=True)

    payment_reference = models.CharField(max_length=100, null=True, blank=True)
    notes = models.TextField(null=True, blank=True)

    approved_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="fee_payments_approved"
    )
    approved_at = models.DateTimeField(null=True, blank=True)

    declined_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="fee_payments_declined"
    )
    declined_at = models.DateTimeField(null=True, blank=True)
    declined_reason = models.TextField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        unique_together = ("student", "academic_year")

    def __str__(self):
        return f"{self.student} - {self.academic_year} ({self.status})"
