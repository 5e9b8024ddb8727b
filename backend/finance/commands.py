# finance/commands.py
"""
Command layer for simple finance: assets, liabilities, monthly valuations,
liquidity balances and recurring subscriptions.

Deleting an asset or liability removes its balances and valuations in the
same transaction.
"""

import logging

from django.db import transaction
from django.db.models import Max

from accounts.authz import ActorContext, Capability, require
from accounts.commands import CommandResult
from accounts.models import PermissionModule
from finance.models import (
    BANK_ACCOUNT,
    LiquidityBalance,
    MonthlyValuation,
    SimpleAsset,
    SimpleLiability,
    Subscription,
)

logger = logging.getLogger(__name__)

MODULE = PermissionModule.FINANCE

ASSET_FIELDS = ("name", "type", "current_value", "purchase_value", "purchase_date")
LIABILITY_FIELDS = ("name", "type", "current_balance", "original_amount", "interest_rate", "monthly_payment")
SUBSCRIPTION_FIELDS = (
    "name", "cost", "yearly_amount", "billing_cycle", "next_billing_date", "is_active",
    "type", "is_necessary", "classification", "category", "subcategory",
)


# =============================================================================
# Assets
# =============================================================================

@transaction.atomic
def create_asset(actor: ActorContext, **data) -> CommandResult:
    """New assets are appended at the end of the sort order."""
    require(actor, MODULE, Capability.ADD)

    last = SimpleAsset.objects.filter(workspace=actor.workspace).aggregate(last=Max("sort_order"))["last"]
    fields = {k: v for k, v in data.items() if k in ASSET_FIELDS}
    asset = SimpleAsset.objects.create(
        workspace=actor.workspace,
        sort_order=0 if last is None else last + 1,
        **fields,
    )
    return CommandResult.ok(asset)


@transaction.atomic
def update_asset(actor: ActorContext, asset_id: int, **changes) -> CommandResult:
    require(actor, MODULE, Capability.ADD)

    try:
        asset = SimpleAsset.objects.select_for_update().get(pk=asset_id, workspace=actor.workspace)
    except SimpleAsset.DoesNotExist:
        return CommandResult.missing("Asset")

    for field, value in changes.items():
        if field in ASSET_FIELDS:
            setattr(asset, field, value)
    asset.save()
    return CommandResult.ok(asset)


@transaction.atomic
def delete_asset(actor: ActorContext, asset_id: int) -> CommandResult:
    require(actor, MODULE, Capability.DELETE)

    try:
        asset = SimpleAsset.objects.select_for_update().get(pk=asset_id, workspace=actor.workspace)
    except SimpleAsset.DoesNotExist:
        return CommandResult.missing("Asset")

    balances, _ = LiquidityBalance.objects.filter(asset=asset).delete()
    valuations, _ = MonthlyValuation.objects.filter(
        workspace=actor.workspace, item_type=MonthlyValuation.ItemType.ASSET, item_id=asset.pk,
    ).delete()
    asset.delete()

    logger.info(f"Deleted asset {asset_id} with {balances} balances and {valuations} valuations")
    return CommandResult.ok({"balances_deleted": balances, "valuations_deleted": valuations})


@transaction.atomic
def reorder_asset(actor: ActorContext, asset_id: int, direction: str) -> CommandResult:
    """
    Move a bank account one place up or down among the workspace's bank
    accounts by swapping sort orders with its neighbour. Moving past either
    end is a no-op.
    """
    require(actor, MODULE, Capability.ADD)

    if direction not in ("up", "down"):
        return CommandResult.fail('Direction must be "up" or "down".')

    accounts = list(
        SimpleAsset.objects.select_for_update()
        .filter(workspace=actor.workspace, type=BANK_ACCOUNT)
        .order_by("sort_order", "id")
    )
    index = next((i for i, asset in enumerate(accounts) if asset.pk == asset_id), None)
    if index is None:
        return CommandResult.missing("Bank account")

    neighbour_index = index - 1 if direction == "up" else index + 1
    if not 0 <= neighbour_index < len(accounts):
        return CommandResult.ok(accounts[index])

    current, neighbour = accounts[index], accounts[neighbour_index]
    current_order, neighbour_order = current.sort_order, neighbour.sort_order
    if current_order == neighbour_order:
        # Legacy rows share an order; fall back to list positions.
        current_order, neighbour_order = index, neighbour_index

    current.sort_order, neighbour.sort_order = neighbour_order, current_order
    current.save(update_fields=["sort_order", "updated_at"])
    neighbour.save(update_fields=["sort_order", "updated_at"])
    return CommandResult.ok(current)


# =============================================================================
# Liabilities
# =============================================================================

@transaction.atomic
def create_liability(actor: ActorContext, **data) -> CommandResult:
    require(actor, MODULE, Capability.ADD)

    fields = {k: v for k, v in data.items() if k in LIABILITY_FIELDS}
    liability = SimpleLiability.objects.create(workspace=actor.workspace, **fields)
    return CommandResult.ok(liability)


@transaction.atomic
def update_liability(actor: ActorContext, liability_id: int, **changes) -> CommandResult:
    require(actor, MODULE, Capability.ADD)

    try:
        liability = SimpleLiability.objects.select_for_update().get(pk=liability_id, workspace=actor.workspace)
    except SimpleLiability.DoesNotExist:
        return CommandResult.missing("Liability")

    for field, value in changes.items():
        if field in LIABILITY_FIELDS:
            setattr(liability, field, value)
    liability.save()
    return CommandResult.ok(liability)


@transaction.atomic
def delete_liability(actor: ActorContext, liability_id: int) -> CommandResult:
    require(actor, MODULE, Capability.DELETE)

    try:
        liability = SimpleLiability.objects.select_for_update().get(pk=liability_id, workspace=actor.workspace)
    except SimpleLiability.DoesNotExist:
        return CommandResult.missing("Liability")

    balances, _ = LiquidityBalance.objects.filter(liability=liability).delete()
    valuations, _ = MonthlyValuation.objects.filter(
        workspace=actor.workspace, item_type=MonthlyValuation.ItemType.LIABILITY, item_id=liability.pk,
    ).delete()
    liability.delete()

    logger.info(f"Deleted liability {liability_id} with {balances} balances and {valuations} valuations")
    return CommandResult.ok({"balances_deleted": balances, "valuations_deleted": valuations})


# =============================================================================
# Valuations
# =============================================================================

def _item_exists(actor: ActorContext, item_type: str, item_id: int) -> bool:
    model = SimpleAsset if item_type == MonthlyValuation.ItemType.ASSET else SimpleLiability
    return model.objects.filter(pk=item_id, workspace=actor.workspace).exists()


@transaction.atomic
def create_monthly_valuation(
    actor: ActorContext,
    item_type: str,
    item_id: int,
    year: int,
    month: int,
    value,
    notes: str = "",
) -> CommandResult:
    require(actor, MODULE, Capability.ADD)

    if not _item_exists(actor, item_type, item_id):
        return CommandResult.missing(MonthlyValuation.ItemType(item_type).label)

    valuation = MonthlyValuation.objects.create(
        workspace=actor.workspace,
        item_type=item_type,
        item_id=item_id,
        year=year,
        month=month,
        value=value,
        notes=notes,
    )
    return CommandResult.ok(valuation)


# =============================================================================
# Liquidity balances
# =============================================================================

@transaction.atomic
def record_monthly_balance(
    actor: ActorContext,
    month: str,
    balance,
    asset_id: int = None,
    liability_id: int = None,
    notes: str = "",
) -> CommandResult:
    """Create or replace the balance of one account for a "YYYY-MM" month."""
    require(actor, MODULE, Capability.ADD)

    if (asset_id is None) == (liability_id is None):
        return CommandResult.fail("Give exactly one of asset_id or liability_id.")

    if asset_id is not None:
        account = SimpleAsset.objects.filter(pk=asset_id, workspace=actor.workspace).first()
        if account is None:
            return CommandResult.missing("Asset")
        lookup = {"asset": account}
    else:
        account = SimpleLiability.objects.filter(pk=liability_id, workspace=actor.workspace).first()
        if account is None:
            return CommandResult.missing("Liability")
        lookup = {"liability": account}

    record, _ = LiquidityBalance.objects.update_or_create(
        month=month,
        **lookup,
        defaults={
            "workspace": actor.workspace,
            "balance": balance,
            "notes": notes,
            "created_by": actor.user,
        },
    )
    return CommandResult.ok(record)


@transaction.atomic
def delete_monthly_balance(actor: ActorContext, balance_id: int) -> CommandResult:
    require(actor, MODULE, Capability.DELETE)

    deleted, _ = LiquidityBalance.objects.filter(pk=balance_id, workspace=actor.workspace).delete()
    if not deleted:
        return CommandResult.missing("Balance")
    return CommandResult.ok()


@transaction.atomic
def reset_liquidity_history(actor: ActorContext) -> CommandResult:
    """Delete every recorded balance of the workspace."""
    require(actor, MODULE, Capability.DELETE)

    deleted, _ = LiquidityBalance.objects.filter(workspace=actor.workspace).delete()
    logger.warning(f"Reset liquidity history of workspace {actor.workspace.pk}: {deleted} balances deleted")
    return CommandResult.ok({"deleted": deleted})


# =============================================================================
# Subscriptions
# =============================================================================

@transaction.atomic
def create_subscription(actor: ActorContext, **data) -> CommandResult:
    require(actor, MODULE, Capability.ADD)

    fields = {k: v for k, v in data.items() if k in SUBSCRIPTION_FIELDS}
    subscription = Subscription.objects.create(workspace=actor.workspace, **fields)
    return CommandResult.ok(subscription)


@transaction.atomic
def update_subscription(actor: ActorContext, subscription_id: int, **changes) -> CommandResult:
    require(actor, MODULE, Capability.ADD)

    try:
        subscription = Subscription.objects.select_for_update().get(pk=subscription_id, workspace=actor.workspace)
    except Subscription.DoesNotExist:
        return CommandResult.missing("Subscription")

    for field, value in changes.items():
        if field in SUBSCRIPTION_FIELDS:
            setattr(subscription, field, value)
    subscription.save()
    return CommandResult.ok(subscription)


@transaction.atomic
def delete_subscription(actor: ActorContext, subscription_id: int) -> CommandResult:
    require(actor, MODULE, Capability.DELETE)

    deleted, _ = Subscription.objects.filter(pk=subscription_id, workspace=actor.workspace).delete()
    if not deleted:
        return CommandResult.missing("Subscription")
    return CommandResult.ok()
