# tests/test_budget.py
"""Tests for the budget module: overrides, summaries and history."""

from datetime import date
from decimal import Decimal

import pytest
from django.core.exceptions import PermissionDenied

from budget.calculations import budget_history, budget_summary, effective_outgoings, months_back, yearly_budget
from budget.commands import (
    create_budget_outgoing,
    delete_budget_monthly_outgoing,
    delete_budget_outgoing,
    set_budget_income,
    set_budget_monthly_outgoing,
)
from budget.models import BudgetIncome, BudgetMonthlyOutgoing


@pytest.fixture
def rent(actor):
    return create_budget_outgoing(actor, name="Rent", category="Housing", amount=Decimal("800")).data


@pytest.fixture
def phone(actor):
    return create_budget_outgoing(actor, name="Phone", category="Utilities", amount=Decimal("30")).data


@pytest.mark.django_db
class TestIncome:

    def test_income_is_upserted(self, actor, workspace):
        set_budget_income(actor, 2025, 3, Decimal("2000"))
        set_budget_income(actor, 2025, 3, Decimal("2500"), notes="Raise")

        income = BudgetIncome.objects.get(workspace=workspace, year=2025, month=3)
        assert income.amount == Decimal("2500")
        assert income.notes == "Raise"

    def test_viewer_cannot_set_income(self, viewer_actor):
        with pytest.raises(PermissionDenied):
            set_budget_income(viewer_actor, 2025, 3, Decimal("1"))


@pytest.mark.django_db
class TestOverrides:

    def test_override_applies_to_its_month_only(self, actor, workspace, rent, phone):
        set_budget_monthly_outgoing(actor, rent.pk, 2025, 3, Decimal("850"))

        march = {o["name"]: o for o in effective_outgoings(workspace, 2025, 3)}
        april = {o["name"]: o for o in effective_outgoings(workspace, 2025, 4)}

        assert march["Rent"]["amount"] == Decimal("850")
        assert march["Rent"]["default_amount"] == Decimal("800")
        assert march["Rent"]["is_monthly_override"] is True
        assert march["Phone"]["is_monthly_override"] is False
        assert april["Rent"]["amount"] == Decimal("800")

    def test_override_is_upserted(self, actor, rent):
        set_budget_monthly_outgoing(actor, rent.pk, 2025, 3, Decimal("850"))
        set_budget_monthly_outgoing(actor, rent.pk, 2025, 3, Decimal("900"))

        assert BudgetMonthlyOutgoing.objects.get(outgoing=rent).amount == Decimal("900")

    def test_override_of_other_workspace_outgoing_is_missing(self, other_actor, rent):
        result = set_budget_monthly_outgoing(other_actor, rent.pk, 2025, 3, Decimal("1"))
        assert result.not_found

    def test_deleting_override_restores_default(self, actor, workspace, rent):
        set_budget_monthly_outgoing(actor, rent.pk, 2025, 3, Decimal("850"))

        result = delete_budget_monthly_outgoing(actor, rent.pk, 2025, 3)

        assert result.success
        assert effective_outgoings(workspace, 2025, 3)[0]["amount"] == Decimal("800")
        assert delete_budget_monthly_outgoing(actor, rent.pk, 2025, 3).not_found

    def test_deleting_outgoing_removes_overrides(self, actor, rent):
        set_budget_monthly_outgoing(actor, rent.pk, 2025, 3, Decimal("850"))
        set_budget_monthly_outgoing(actor, rent.pk, 2025, 4, Decimal("850"))

        result = delete_budget_outgoing(actor, rent.pk)

        assert result.data == {"overrides_deleted": 2}
        assert not BudgetMonthlyOutgoing.objects.exists()


@pytest.mark.django_db
class TestAggregates:

    def test_summary(self, actor, workspace, rent, phone):
        set_budget_income(actor, 2025, 3, Decimal("1000"))
        set_budget_monthly_outgoing(actor, phone.pk, 2025, 3, Decimal("50"))

        summary = budget_summary(workspace, 2025, 3)

        assert summary["income"] == Decimal("1000")
        assert summary["outgoings"] == Decimal("850")
        assert summary["surplus"] == Decimal("150")
        assert summary["is_healthy"] is True
        assert summary["outgoings_by_category"] == {"Housing": Decimal("800"), "Utilities": Decimal("50")}

    def test_summary_without_income_is_unhealthy(self, workspace, rent):
        summary = budget_summary(workspace, 2025, 3)

        assert summary["income"] == Decimal("0")
        assert summary["surplus"] == Decimal("-800")
        assert summary["is_healthy"] is False

    def test_yearly_budget(self, actor, workspace, rent):
        set_budget_income(actor, 2025, 1, Decimal("1000"))
        set_budget_monthly_outgoing(actor, rent.pk, 2025, 2, Decimal("0"))

        yearly = yearly_budget(workspace, 2025)

        assert len(yearly["months"]) == 12
        assert yearly["months"][0]["surplus"] == Decimal("200")
        assert yearly["months"][1]["outgoings"] == Decimal("0")
        assert yearly["yearly_total"]["income"] == Decimal("1000")
        assert yearly["yearly_total"]["outgoings"] == Decimal("800") * 11
        assert yearly["yearly_total"]["is_healthy"] is False

    def test_months_back_crosses_year(self):
        assert months_back(date(2025, 2, 10), 3) == [(2024, 12), (2025, 1), (2025, 2)]

    def test_history_oldest_first(self, actor, workspace, rent):
        set_budget_income(actor, 2025, 1, Decimal("900"))

        history = budget_history(workspace, 3, today=date(2025, 2, 10))

        assert [(h["year"], h["month"]) for h in history] == [(2024, 12), (2025, 1), (2025, 2)]
        assert history[1]["surplus"] == Decimal("100")

    def test_workspaces_are_isolated(self, actor, other_workspace, rent):
        set_budget_income(actor, 2025, 3, Decimal("1000"))

        summary = budget_summary(other_workspace, 2025, 3)

        assert summary["income"] == Decimal("0")
        assert summary["outgoings_count"] == 0


@pytest.mark.django_db
class TestBudgetAPI:

    def test_income_roundtrip(self, owner_client, ws_url):
        put = owner_client.put(ws_url("budget/income/"), {"year": 2025, "month": 3, "amount": "2000.00"}, format="json")
        get = owner_client.get(ws_url("budget/income/"), {"year": 2025, "month": 3})

        assert put.status_code == 200
        assert get.data["amount"] == "2000.00"

    def test_missing_income_is_null(self, owner_client, ws_url):
        response = owner_client.get(ws_url("budget/income/"), {"year": 2025, "month": 3})

        assert response.status_code == 200
        assert response.data is None

    def test_summary_requires_period(self, owner_client, ws_url):
        response = owner_client.get(ws_url("budget/summary/"))
        assert response.status_code == 400

    def test_history_default_length(self, owner_client, ws_url):
        response = owner_client.get(ws_url("budget/history/"))

        assert response.status_code == 200
        assert len(response.data) == 6

    def test_delete_unknown_override_is_404(self, owner_client, ws_url, rent):
        response = owner_client.delete(ws_url(f"budget/overrides/{rent.pk}/2025/3/"))
        assert response.status_code == 404
