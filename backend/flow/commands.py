# flow/commands.py
"""
Command layer for flow: tasks, ideas and daily time allocations.

Completing a recurring task spawns its next occurrence in the same
transaction (see _spawn_next_occurrence).
"""

import logging
from decimal import ROUND_HALF_UP, Decimal

from django.db import transaction
from django.utils import timezone

from accounts.authz import ActorContext, Capability, require
from accounts.commands import CommandResult
from accounts.models import PermissionModule
from flow.models import Idea, Task, TimeAllocation, TimeLog
from flow.recurrence import next_due_date

logger = logging.getLogger(__name__)

MODULE = PermissionModule.FLOW

TASK_FIELDS = (
    "title", "description", "status", "priority", "due_date", "tags", "position",
    "estimated_hours", "daily_allocation", "weekly_allocation", "monthly_allocation",
    "yearly_allocation", "time_spent", "is_recurring", "recurrence_type",
    "recurrence_interval", "recurrence_end_date", "recurrence_count",
)
IDEA_FIELDS = ("title", "description", "rich_description", "category", "tags", "priority", "status")

# Copied onto the next occurrence of a recurring task.
CARRIED_FIELDS = (
    "user", "idea", "title", "description", "priority", "tags", "position",
    "estimated_hours", "daily_allocation", "weekly_allocation", "monthly_allocation",
    "yearly_allocation", "is_recurring", "recurrence_type", "recurrence_interval",
    "recurrence_end_date",
)


def _idea_in_workspace(actor: ActorContext, idea_id):
    if idea_id is None:
        return None, True
    idea = Idea.objects.filter(pk=idea_id, workspace=actor.workspace).first()
    return idea, idea is not None


# =============================================================================
# Tasks
# =============================================================================

@transaction.atomic
def create_task(actor: ActorContext, idea_id: int = None, **data) -> CommandResult:
    require(actor, MODULE, Capability.ADD)

    idea, found = _idea_in_workspace(actor, idea_id)
    if not found:
        return CommandResult.missing("Idea")

    fields = {k: v for k, v in data.items() if k in TASK_FIELDS}
    task = Task.objects.create(workspace=actor.workspace, user=actor.user, idea=idea, **fields)
    return CommandResult.ok(task)


@transaction.atomic
def update_task(actor: ActorContext, task_id: int, **changes) -> CommandResult:
    """Patch task fields. Status changes go through update_task_status."""
    require(actor, MODULE, Capability.ADD)

    try:
        task = Task.objects.select_for_update().get(pk=task_id, workspace=actor.workspace)
    except Task.DoesNotExist:
        return CommandResult.missing("Task")

    if "idea_id" in changes:
        idea, found = _idea_in_workspace(actor, changes.pop("idea_id"))
        if not found:
            return CommandResult.missing("Idea")
        task.idea = idea

    for field, value in changes.items():
        if field in TASK_FIELDS and field != "status":
            setattr(task, field, value)
    task.save()
    return CommandResult.ok(task)


def _spawn_next_occurrence(task: Task):
    """
    Create the next occurrence of a just-completed recurring task.

    Returns None when the series ends: the next due date would fall after
    recurrence_end_date, or this was the last counted occurrence (the task
    then stops recurring).
    """
    if not task.recurrence_type:
        return None

    current = task.due_date or timezone.localdate()
    due = next_due_date(current, task.recurrence_type, task.recurrence_interval)
    if due is None:
        return None

    if task.recurrence_end_date and due > task.recurrence_end_date:
        return None

    if task.recurrence_count is not None and task.recurrence_count <= 1:
        task.is_recurring = False
        task.save(update_fields=["is_recurring", "updated_at"])
        return None

    occurrence = Task(
        workspace=task.workspace,
        status=Task.Status.TODO,
        due_date=due,
        parent_task_id=task.parent_task_id or task.pk,
        recurrence_count=task.recurrence_count - 1 if task.recurrence_count else None,
        **{field: getattr(task, field) for field in CARRIED_FIELDS},
    )
    occurrence.save()
    logger.info(f"Spawned task {occurrence.pk} due {due} from recurring task {task.pk}")
    return occurrence


@transaction.atomic
def update_task_status(actor: ActorContext, task_id: int, status: str) -> CommandResult:
    """
    Move a task to a new status.

    Returns {"task", "next_task"}; next_task is the spawned occurrence when
    a recurring task was completed, else None.
    """
    require(actor, MODULE, Capability.ADD)

    if status not in Task.Status.values:
        return CommandResult.fail(f"Invalid status: {status}")

    try:
        task = Task.objects.select_for_update().get(pk=task_id, workspace=actor.workspace)
    except Task.DoesNotExist:
        return CommandResult.missing("Task")

    was_completed = task.status == Task.Status.COMPLETED
    task.status = status
    task.save(update_fields=["status", "updated_at"])

    next_task = None
    if status == Task.Status.COMPLETED and not was_completed and task.is_recurring:
        next_task = _spawn_next_occurrence(task)

    return CommandResult.ok({"task": task, "next_task": next_task})


@transaction.atomic
def delete_task(actor: ActorContext, task_id: int) -> CommandResult:
    require(actor, MODULE, Capability.DELETE)

    deleted, _ = Task.objects.filter(pk=task_id, workspace=actor.workspace).delete()
    if not deleted:
        return CommandResult.missing("Task")
    return CommandResult.ok()


@transaction.atomic
def reorder_tasks(actor: ActorContext, updates: list[dict]) -> CommandResult:
    """
    Apply board moves in bulk: each update carries ``task_id`` and an
    optional ``status`` and/or ``position``. Tasks outside the workspace
    are skipped.
    """
    require(actor, MODULE, Capability.ADD)

    task_ids = [update["task_id"] for update in updates]
    tasks = Task.objects.select_for_update().filter(workspace=actor.workspace).in_bulk(task_ids)

    updated = 0
    for update in updates:
        task = tasks.get(update["task_id"])
        if task is None:
            continue

        fields = ["updated_at"]
        if update.get("status") is not None:
            task.status = update["status"]
            fields.append("status")
        if update.get("position") is not None:
            task.position = update["position"]
            fields.append("position")
        task.save(update_fields=fields)
        updated += 1

    skipped = len(updates) - updated
    if skipped:
        logger.warning(f"Reorder in workspace {actor.workspace.pk} skipped {skipped} unknown tasks")
    return CommandResult.ok({"updated": updated, "skipped": skipped})


@transaction.atomic
def archive_task(actor: ActorContext, task_id: int, is_archived: bool = True) -> CommandResult:
    require(actor, MODULE, Capability.ADD)

    try:
        task = Task.objects.select_for_update().get(pk=task_id, workspace=actor.workspace)
    except Task.DoesNotExist:
        return CommandResult.missing("Task")

    task.is_archived = is_archived
    task.save(update_fields=["is_archived", "updated_at"])
    return CommandResult.ok(task)


# =============================================================================
# Ideas
# =============================================================================

@transaction.atomic
def create_idea(actor: ActorContext, **data) -> CommandResult:
    require(actor, MODULE, Capability.ADD)

    fields = {k: v for k, v in data.items() if k in IDEA_FIELDS}
    idea = Idea.objects.create(workspace=actor.workspace, user=actor.user, **fields)
    return CommandResult.ok(idea)


@transaction.atomic
def update_idea(actor: ActorContext, idea_id: int, **changes) -> CommandResult:
    require(actor, MODULE, Capability.ADD)

    try:
        idea = Idea.objects.select_for_update().get(pk=idea_id, workspace=actor.workspace)
    except Idea.DoesNotExist:
        return CommandResult.missing("Idea")

    for field, value in changes.items():
        if field in IDEA_FIELDS:
            setattr(idea, field, value)
    idea.save()
    return CommandResult.ok(idea)


@transaction.atomic
def update_idea_status(actor: ActorContext, idea_id: int, status: str) -> CommandResult:
    require(actor, MODULE, Capability.ADD)

    if status not in Idea.Status.values:
        return CommandResult.fail(f"Invalid status: {status}")
    return update_idea(actor, idea_id, status=status)


@transaction.atomic
def delete_idea(actor: ActorContext, idea_id: int) -> CommandResult:
    """Delete an idea. Its tasks stay, with the idea link cleared."""
    require(actor, MODULE, Capability.DELETE)

    try:
        idea = Idea.objects.select_for_update().get(pk=idea_id, workspace=actor.workspace)
    except Idea.DoesNotExist:
        return CommandResult.missing("Idea")

    unlinked = Task.objects.filter(idea=idea).update(idea=None)
    idea.delete()

    logger.info(f"Deleted idea {idea_id}, unlinked {unlinked} tasks")
    return CommandResult.ok({"tasks_unlinked": unlinked})


# =============================================================================
# Time allocation
# =============================================================================

@transaction.atomic
def create_time_allocation(
    actor: ActorContext,
    date,
    allocated_minutes: int,
    task_name: str = "",
    task_id: int = None,
) -> CommandResult:
    """Plan minutes for a day. A linked task supplies the name when none is given."""
    require(actor, MODULE, Capability.ADD)

    task = None
    if task_id is not None:
        task = Task.objects.filter(pk=task_id, workspace=actor.workspace).first()
        if task is None:
            return CommandResult.missing("Task")
        task_name = task_name or task.title

    if not task_name:
        return CommandResult.fail("A time allocation needs a task name or a task.")

    allocation = TimeAllocation.objects.create(
        workspace=actor.workspace,
        user=actor.user,
        task=task,
        task_name=task_name,
        date=date,
        allocated_minutes=allocated_minutes,
    )
    return CommandResult.ok(allocation)


@transaction.atomic
def delete_time_allocation(actor: ActorContext, allocation_id: int) -> CommandResult:
    require(actor, MODULE, Capability.DELETE)

    deleted, _ = TimeAllocation.objects.filter(pk=allocation_id, workspace=actor.workspace).delete()
    if not deleted:
        return CommandResult.missing("Time allocation")
    return CommandResult.ok()


@transaction.atomic
def log_time(
    actor: ActorContext,
    session_start,
    session_end,
    elapsed_seconds: int,
    allocation_id: int = None,
) -> CommandResult:
    """
    Record a work session.

    Elapsed time may be shorter than the session (pauses) but never longer.
    Sessions against an allocation linked to a task add to the task's
    ``time_spent`` in hours.
    """
    require(actor, MODULE, Capability.ADD)

    if session_end < session_start:
        return CommandResult.fail("Session end must not be before its start.")
    if elapsed_seconds > (session_end - session_start).total_seconds():
        return CommandResult.fail("Elapsed time exceeds the session length.")

    allocation = None
    if allocation_id is not None:
        allocation = TimeAllocation.objects.select_related("task").filter(
            pk=allocation_id, workspace=actor.workspace
        ).first()
        if allocation is None:
            return CommandResult.missing("Time allocation")

    entry = TimeLog.objects.create(
        workspace=actor.workspace,
        user=actor.user,
        allocation=allocation,
        session_start=session_start,
        session_end=session_end,
        elapsed_seconds=elapsed_seconds,
    )

    if allocation is not None and allocation.task_id:
        task = Task.objects.select_for_update().get(pk=allocation.task_id)
        hours = (Decimal(elapsed_seconds) / 3600).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
        task.time_spent += hours
        task.save(update_fields=["time_spent", "updated_at"])
        logger.info(f"Logged {hours}h on task {task.pk}")

    return CommandResult.ok(entry)
