"""
Celery application configuration.

This is the main Celery app for the LifeHub backend.
It runs scheduled jobs such as the monthly invoice generation.

Usage:
    # Start worker
    celery -A lifehub_backend worker -l INFO

    # Start beat scheduler (for periodic tasks)
    celery -A lifehub_backend beat -l INFO

    # Start both (development only)
    celery -A lifehub_backend worker -B -l INFO
"""
import os

from celery import Celery
from celery.schedules import crontab

# Set default Django settings
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "lifehub_backend.settings")

# Create Celery app
app = Celery("lifehub_backend")

# Load config from Django settings
app.config_from_object("django.conf:settings", namespace="CELERY")

# Auto-discover tasks from all installed apps
app.autodiscover_tasks()

# Static schedule; django_celery_beat syncs these entries into its tables.
app.conf.beat_schedule = {
    "generate-monthly-invoices": {
        "task": "invoicing.tasks.run_monthly_invoice_generation",
        "schedule": crontab(minute=0, hour=1, day_of_month=1),
    },
}


@app.task(bind=True, ignore_result=True)
def debug_task(self):
    """Debug task for testing Celery connectivity."""
    print(f"Request: {self.request!r}")
