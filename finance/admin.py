# finance/admin.py
from django.contrib import admin
from finance.models import SchoolFeePolicy, SchoolFeePayment


@admin.register(SchoolFeePolicy)
class SchoolFeePolicyAdmin(admin.ModelAdmin):
    list_display = ("academic_year", "amount", "updated_by", "updated_at")
    ordering = ("-academic_year__name",)


@admin.register(SchoolFeePayment)
class SchoolFeePaymentAdmin(admin.ModelAdmin):
    list_display = ("student", "academic_year", "amount", "status", "payment_reference", "created_at")
    search_fields = ("student__email", "student__full_name", "payment_reference")
    list_filter = ("status", "academic_year")
    readonly_fields = ("approved_by", "approved_at", "declined_by", "declined_at")
