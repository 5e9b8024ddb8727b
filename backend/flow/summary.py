# flow/summary.py
from decimal import Decimal

from flow.models import Task

ZERO = Decimal("0")


def time_allocation_summary(workspace) -> dict:
    """Planned hours per period and time spent, summed over all tasks."""
    summary = {
        "total_daily_allocation": ZERO,
        "total_weekly_allocation": ZERO,
        "total_monthly_allocation": ZERO,
        "total_yearly_allocation": ZERO,
        "total_time_spent": ZERO,
        "tasks_with_allocation": 0,
        "completed_tasks": 0,
        "total_tasks": 0,
    }

    for task in Task.objects.filter(workspace=workspace):
        summary["total_tasks"] += 1
        summary["total_daily_allocation"] += task.daily_allocation or ZERO
        summary["total_weekly_allocation"] += task.weekly_allocation or ZERO
        summary["total_monthly_allocation"] += task.monthly_allocation or ZERO
        summary["total_yearly_allocation"] += task.yearly_allocation or ZERO
        summary["total_time_spent"] += task.time_spent or ZERO
        if task.has_allocation:
            summary["tasks_with_allocation"] += 1
        if task.status == Task.Status.COMPLETED:
            summary["completed_tasks"] += 1

    return summary
