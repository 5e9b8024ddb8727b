"""
Celery tasks for invoicing.

Tasks:
- run_monthly_invoice_generation: Draft invoices from last month's lessons
  for every workspace

Usage:
    # Scheduled by Celery beat on the 1st of each month (see lifehub_backend/celery.py)
    from invoicing.tasks import run_monthly_invoice_generation
    run_monthly_invoice_generation.delay()

    # Re-run a specific month
    run_monthly_invoice_generation.delay(year=2025, month=1)
"""
import logging
from typing import Optional

from celery import shared_task
from django.utils import timezone

logger = logging.getLogger(__name__)


def previous_month(today) -> tuple[int, int]:
    if today.month == 1:
        return today.year - 1, 12
    return today.year, today.month - 1


@shared_task(
    bind=True,
    max_retries=3,
    default_retry_delay=300,
)
def run_monthly_invoice_generation(
    self,
    year: Optional[int] = None,
    month: Optional[int] = None,
) -> dict:
    """
    Generate draft invoices for all workspaces.

    Each workspace is processed as its owner. A failing workspace is logged
    and does not stop the others.

    Args:
        year: Year to bill, defaults to the previous month's year
        month: Month to bill (1-12), defaults to the previous month

    Returns:
        Dict with the billed period and invoice ids per workspace
    """
    from accounts.authz import actor_for
    from accounts.models import Workspace
    from invoicing.commands import generate_monthly_invoices
    from ops.logging_config import clear_log_context

    if year is None or month is None:
        year, month = previous_month(timezone.localdate())

    logger.info(f"Generating monthly invoices for {year}-{month:02d}")

    results = {}
    failed = []
    for workspace in Workspace.objects.select_related("owner").order_by("pk"):
        try:
            result = generate_monthly_invoices(actor_for(workspace.owner, workspace), year, month)
        except Exception as e:
            logger.exception(f"Invoice generation failed for workspace {workspace.pk}: {e}")
            failed.append(workspace.pk)
            continue

        if not result.success:
            logger.warning(f"Invoice generation skipped workspace {workspace.pk}: {result.error}")
            failed.append(workspace.pk)
            continue

        if result.data:
            results[workspace.pk] = result.data

    clear_log_context()
    total = sum(len(ids) for ids in results.values())
    logger.info(f"Monthly invoice generation for {year}-{month:02d} created {total} invoices")

    return {
        "year": year,
        "month": month,
        "invoices": results,
        "total": total,
        "failed_workspaces": failed,
    }
