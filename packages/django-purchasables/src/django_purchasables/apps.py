"""Django Purchasables app configuration."""

from django.apps import AppConfig


class DjangoPurchasablesConfig(AppConfig):
    """Configuration for django-purchasables app."""

    name = "django_purchasables"
    verbose_name = "Purchasables"
    default_auto_field = "django.db.models.BigAutoField"
