# finance/calculations.py
"""
Liquidity, net worth, progress and recurring cost figures.

All values are recomputed from stored rows on every read. Liability
balances always count negatively, whatever sign they were recorded with.
"""
from collections import defaultdict
from decimal import ROUND_HALF_UP, Decimal

from django.db.models import Sum
from django.utils import timezone

from finance.models import LiquidityBalance, MonthlyValuation, SimpleAsset, SimpleLiability, Subscription

ZERO = Decimal("0")
CENT = Decimal("0.01")


def signed_balance(balance: LiquidityBalance) -> Decimal:
    return -abs(balance.balance) if balance.is_liability else balance.balance


def liquidity_for_month(workspace, month: str) -> dict:
    """
    sum(asset balances) - sum(|liability balances|) for a "YYYY-MM" month.

    Accounts without a balance for the month contribute nothing.
    """
    assets = ZERO
    liabilities = ZERO
    count = 0
    for balance in LiquidityBalance.objects.filter(workspace=workspace, month=month):
        count += 1
        if balance.is_liability:
            liabilities += abs(balance.balance)
        else:
            assets += balance.balance

    return {
        "month": month,
        "total_assets": assets,
        "total_liabilities": liabilities,
        "total_liquidity": assets - liabilities,
        "account_count": count,
    }


def liquidity_history(workspace) -> list[dict]:
    """Total liquidity per recorded month, oldest first."""
    totals = defaultdict(lambda: ZERO)
    for balance in LiquidityBalance.objects.filter(workspace=workspace):
        totals[balance.month] += signed_balance(balance)

    return [
        {"month": month, "total_liquidity": totals[month]}
        for month in sorted(totals)
    ]


def net_worth(workspace) -> dict:
    assets = SimpleAsset.objects.filter(workspace=workspace)
    liabilities = SimpleLiability.objects.filter(workspace=workspace)

    total_assets = assets.aggregate(total=Sum("current_value"))["total"] or ZERO
    total_liabilities = liabilities.aggregate(total=Sum("current_balance"))["total"] or ZERO
    return {
        "total_assets": total_assets,
        "total_liabilities": total_liabilities,
        "net_worth": total_assets - total_liabilities,
        "asset_count": assets.count(),
        "liability_count": liabilities.count(),
    }


def _valuation_total(workspace, year: int, month: int):
    total = ZERO
    count = 0
    for valuation in MonthlyValuation.objects.filter(workspace=workspace, year=year, month=month):
        count += 1
        if valuation.item_type == MonthlyValuation.ItemType.LIABILITY:
            total -= abs(valuation.value)
        else:
            total += valuation.value
    return total, count


def progress(workspace, today=None) -> dict:
    """Valuation total of the current month against the previous month."""
    today = today or timezone.localdate()
    current_year, current_month = today.year, today.month
    if current_month == 1:
        previous_year, previous_month = current_year - 1, 12
    else:
        previous_year, previous_month = current_year, current_month - 1

    current_total, count = _valuation_total(workspace, current_year, current_month)
    previous_total, _ = _valuation_total(workspace, previous_year, previous_month)

    change = current_total - previous_total
    change_percent = (change / previous_total * 100) if previous_total > 0 else ZERO
    return {
        "current_month": f"{current_year}-{current_month:02d}",
        "previous_month": f"{previous_year}-{previous_month:02d}",
        "current_total": current_total,
        "previous_total": previous_total,
        "change": change,
        "change_percent": round(change_percent, 2),
        "valuation_count": count,
    }


def monthly_cost(subscription: Subscription) -> Decimal:
    if subscription.billing_cycle == Subscription.BillingCycle.MONTHLY:
        return subscription.cost
    return subscription.cost / 12


def yearly_cost(subscription: Subscription) -> Decimal:
    if subscription.yearly_amount is not None:
        return subscription.yearly_amount
    if subscription.billing_cycle == Subscription.BillingCycle.YEARLY:
        return subscription.cost
    return subscription.cost * 12


def subscription_totals(workspace) -> dict:
    """
    Monthly and yearly cost of active subscriptions.

    Potential savings are the same sums over subscriptions flagged as not
    necessary. Sums are rounded to cents after adding up.
    """
    active = list(Subscription.objects.filter(workspace=workspace, is_active=True))
    optional = [subscription for subscription in active if not subscription.is_necessary]

    def total(rows, cost):
        return sum((cost(row) for row in rows), ZERO).quantize(CENT, rounding=ROUND_HALF_UP)

    return {
        "monthly_total": total(active, monthly_cost),
        "yearly_total": total(active, yearly_cost),
        "potential_monthly_savings": total(optional, monthly_cost),
        "potential_yearly_savings": total(optional, yearly_cost),
        "active_count": len(active),
        "optional_count": len(optional),
    }
