from django.apps import AppConfig
from django.contrib.auth import get_user_model
from django.db.models.signals import post_migrate
import logging
import os

logger = logging.getLogger(__name__)


class PortalConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'portal'

    def ready(self):
        post_migrate.connect(create_default_admin, sender=self)


def create_default_admin(sender, **kwargs):
    User = get_user_model()

    # only bootstraps an empty database
    if User.objects.exists():
        return

    email = os.environ.get("DJANGO_SUPERUSER_EMAIL")
    password = os.environ.get("DJANGO_SUPERUSER_PASSWORD")
    full_name = os.environ.get("DJANGO_SUPERUSER_FULL_NAME", "Portal Administrator")

    if not all([email, password]):
        return

    User.objects.create_superuser(
        email=email,
        password=password,
        full_name=full_name
    )
    logger.info("Created bootstrap admin %s", email)
