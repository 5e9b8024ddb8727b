# budget/calculations.py
"""
Budget aggregation.

Nothing here is stored: every figure is recomputed from BudgetIncome,
BudgetOutgoing and BudgetMonthlyOutgoing rows on each read. A monthly
override replaces an outgoing's default amount for that month only.
"""
from collections import defaultdict
from decimal import Decimal
from typing import Optional

from django.utils import timezone

from budget.models import BudgetIncome, BudgetMonthlyOutgoing, BudgetOutgoing

ZERO = Decimal("0")


def override_map(workspace, year: int, month: Optional[int] = None) -> dict:
    """
    {outgoing_id: amount} for one month, or {month: {outgoing_id: amount}}
    for a whole year when ``month`` is None.
    """
    overrides = BudgetMonthlyOutgoing.objects.filter(workspace=workspace, year=year)
    if month is not None:
        return dict(overrides.filter(month=month).values_list("outgoing_id", "amount"))

    by_month = defaultdict(dict)
    for outgoing_id, override_month, amount in overrides.values_list("outgoing_id", "month", "amount"):
        by_month[override_month][outgoing_id] = amount
    return by_month


def effective_amount(outgoing: BudgetOutgoing, overrides: dict) -> Decimal:
    return overrides.get(outgoing.pk, outgoing.amount)


def income_for(workspace, year: int, month: int) -> Decimal:
    income = BudgetIncome.objects.filter(workspace=workspace, year=year, month=month).first()
    return income.amount if income else ZERO


def effective_outgoings(workspace, year: int, month: int) -> list[dict]:
    """Outgoings with the amount that applies in the given month."""
    overrides = override_map(workspace, year, month)
    return [
        {
            "id": outgoing.pk,
            "name": outgoing.name,
            "category": outgoing.category,
            "is_fixed": outgoing.is_fixed,
            "notes": outgoing.notes,
            "amount": effective_amount(outgoing, overrides),
            "default_amount": outgoing.amount,
            "is_monthly_override": outgoing.pk in overrides,
        }
        for outgoing in BudgetOutgoing.objects.filter(workspace=workspace)
    ]


def budget_summary(workspace, year: int, month: int) -> dict:
    outgoings = effective_outgoings(workspace, year, month)
    income = income_for(workspace, year, month)

    by_category = defaultdict(lambda: ZERO)
    for outgoing in outgoings:
        by_category[outgoing["category"]] += outgoing["amount"]

    total_outgoings = sum((o["amount"] for o in outgoings), ZERO)
    surplus = income - total_outgoings
    return {
        "year": year,
        "month": month,
        "income": income,
        "outgoings": total_outgoings,
        "surplus": surplus,
        "is_healthy": surplus >= 0,
        "outgoings_count": len(outgoings),
        "outgoings_by_category": dict(by_category),
    }


def yearly_budget(workspace, year: int) -> dict:
    incomes = dict(
        BudgetIncome.objects.filter(workspace=workspace, year=year).values_list("month", "amount")
    )
    outgoings = list(BudgetOutgoing.objects.filter(workspace=workspace))
    overrides = override_map(workspace, year)

    months = []
    yearly_income = ZERO
    yearly_outgoings = ZERO
    for month in range(1, 13):
        income = incomes.get(month, ZERO)
        month_overrides = overrides.get(month, {})
        total = sum((effective_amount(o, month_overrides) for o in outgoings), ZERO)
        months.append({
            "month": month,
            "income": income,
            "outgoings": total,
            "surplus": income - total,
        })
        yearly_income += income
        yearly_outgoings += total

    return {
        "year": year,
        "months": months,
        "yearly_total": {
            "income": yearly_income,
            "outgoings": yearly_outgoings,
            "surplus": yearly_income - yearly_outgoings,
            "is_healthy": yearly_income >= yearly_outgoings,
        },
    }


def months_back(today, count: int) -> list[tuple[int, int]]:
    """The ``count`` months ending with today's month, oldest first."""
    periods = []
    year, month = today.year, today.month
    for _ in range(count):
        periods.append((year, month))
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    return list(reversed(periods))


def budget_history(workspace, count: int, today=None) -> list[dict]:
    today = today or timezone.localdate()
    outgoings = list(BudgetOutgoing.objects.filter(workspace=workspace))

    history = []
    for year, month in months_back(today, count):
        overrides = override_map(workspace, year, month)
        income = income_for(workspace, year, month)
        total = sum((effective_amount(o, overrides) for o in outgoings), ZERO)
        history.append({
            "year": year,
            "month": month,
            "income": income,
            "outgoings": total,
            "surplus": income - total,
        })
    return history
