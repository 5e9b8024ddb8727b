# budget/commands.py
"""
Command layer for the budget: monthly income, recurring outgoings and
per-month overrides of an outgoing's amount.
"""

import logging

from django.db import transaction

from accounts.authz import ActorContext, Capability, require
from accounts.commands import CommandResult
from accounts.models import PermissionModule
from budget.models import BudgetIncome, BudgetMonthlyOutgoing, BudgetOutgoing

logger = logging.getLogger(__name__)

MODULE = PermissionModule.BUDGET

OUTGOING_FIELDS = ("name", "category", "amount", "is_fixed", "notes")


@transaction.atomic
def set_budget_income(actor: ActorContext, year: int, month: int, amount, notes: str = "") -> CommandResult:
    """Create or replace the income of a month."""
    require(actor, MODULE, Capability.ADD)

    income, _ = BudgetIncome.objects.update_or_create(
        workspace=actor.workspace,
        year=year,
        month=month,
        defaults={"amount": amount, "notes": notes, "user": actor.user},
    )
    return CommandResult.ok(income)


@transaction.atomic
def create_budget_outgoing(actor: ActorContext, **data) -> CommandResult:
    require(actor, MODULE, Capability.ADD)

    fields = {k: v for k, v in data.items() if k in OUTGOING_FIELDS}
    outgoing = BudgetOutgoing.objects.create(workspace=actor.workspace, user=actor.user, **fields)
    return CommandResult.ok(outgoing)


@transaction.atomic
def update_budget_outgoing(actor: ActorContext, outgoing_id: int, **changes) -> CommandResult:
    require(actor, MODULE, Capability.ADD)

    try:
        outgoing = BudgetOutgoing.objects.select_for_update().get(pk=outgoing_id, workspace=actor.workspace)
    except BudgetOutgoing.DoesNotExist:
        return CommandResult.missing("Outgoing")

    for field, value in changes.items():
        if field in OUTGOING_FIELDS:
            setattr(outgoing, field, value)
    outgoing.save()
    return CommandResult.ok(outgoing)


@transaction.atomic
def delete_budget_outgoing(actor: ActorContext, outgoing_id: int) -> CommandResult:
    """Delete an outgoing together with its monthly overrides."""
    require(actor, MODULE, Capability.DELETE)

    try:
        outgoing = BudgetOutgoing.objects.select_for_update().get(pk=outgoing_id, workspace=actor.workspace)
    except BudgetOutgoing.DoesNotExist:
        return CommandResult.missing("Outgoing")

    overrides, _ = BudgetMonthlyOutgoing.objects.filter(outgoing=outgoing).delete()
    outgoing.delete()
    logger.info(f"Deleted budget outgoing {outgoing_id} with {overrides} monthly overrides")
    return CommandResult.ok({"overrides_deleted": overrides})


@transaction.atomic
def set_budget_monthly_outgoing(
    actor: ActorContext,
    outgoing_id: int,
    year: int,
    month: int,
    amount,
) -> CommandResult:
    """Override an outgoing's amount for one month (upsert)."""
    require(actor, MODULE, Capability.ADD)

    try:
        outgoing = BudgetOutgoing.objects.get(pk=outgoing_id, workspace=actor.workspace)
    except BudgetOutgoing.DoesNotExist:
        return CommandResult.missing("Outgoing")

    override, _ = BudgetMonthlyOutgoing.objects.update_or_create(
        outgoing=outgoing,
        year=year,
        month=month,
        defaults={"workspace": actor.workspace, "amount": amount},
    )
    return CommandResult.ok(override)


@transaction.atomic
def delete_budget_monthly_outgoing(actor: ActorContext, outgoing_id: int, year: int, month: int) -> CommandResult:
    """Drop a monthly override so the default amount applies again."""
    require(actor, MODULE, Capability.DELETE)

    deleted, _ = BudgetMonthlyOutgoing.objects.filter(
        workspace=actor.workspace, outgoing_id=outgoing_id, year=year, month=month,
    ).delete()
    if not deleted:
        return CommandResult.missing("Monthly override")
    return CommandResult.ok()
