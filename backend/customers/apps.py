"""Customers app configuration."""

from django.apps import AppConfig


class CustomersConfig(AppConfig):
    """Customers, student groups, students and import batches."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "customers"
    verbose_name = "Customers"
