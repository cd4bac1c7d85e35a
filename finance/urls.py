from django.urls import path
from . import views

urlpatterns = [
    path("school-fees/policies", views.policies, name="fee_policies"),
    path("school-fees/payments", views.payments, name="fee_payments"),
    path("school-fees/payments/<int:payment_id>/approve", views.approve_payment, name="approve_payment"),
    path("school-fees/payments/<int:payment_id>/decline", views.decline_payment, name="decline_payment"),
]
