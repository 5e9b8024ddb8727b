"""Invoicing app configuration."""

from django.apps import AppConfig


class InvoicingConfig(AppConfig):
    """Invoices, products, lessons, company settings and the invoice archive."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "invoicing"
    verbose_name = "Invoicing"
