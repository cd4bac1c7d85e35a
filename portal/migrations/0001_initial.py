import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="AuditLog",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "action_type",
                    models.CharField(
                        choices=[
                            ("profile_created", "Student profile created"),
                            ("role_changed", "Role changed"),
                            ("registration_created", "Registration created"),
                            ("registration_submitted", "Registration submitted"),
                            ("payment_created", "Payment created"),
                            ("payment_approved", "Payment approved"),
                            ("payment_declined", "Payment declined"),
                            ("policy_upserted", "Fee policy saved"),
                        ],
                        max_length=50,
                    ),
                ),
                ("action_data", models.JSONField(blank=True, default=dict)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "user",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="audit_logs",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
            },
        ),
    ]
