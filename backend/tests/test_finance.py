# tests/test_finance.py
"""
Tests for simple finance.

Tests cover:
- Liquidity per month and history (liabilities always negative)
- Balance recording rules
- Bank account reordering
- Cascading deletes
- Net worth and month-over-month progress
- Subscription totals and potential savings
"""

from datetime import date
from decimal import Decimal

import pytest

from finance.calculations import liquidity_for_month, liquidity_history, net_worth, progress, subscription_totals
from finance.commands import (
    create_asset,
    create_liability,
    create_monthly_valuation,
    create_subscription,
    delete_asset,
    delete_monthly_balance,
    delete_subscription,
    record_monthly_balance,
    reorder_asset,
    reset_liquidity_history,
    update_subscription,
)
from finance.models import BANK_ACCOUNT, LiquidityBalance, MonthlyValuation, SimpleAsset, Subscription


@pytest.fixture
def checking(actor):
    return create_asset(actor, name="Checking", type=BANK_ACCOUNT, current_value=Decimal("1000")).data


@pytest.fixture
def savings(actor):
    return create_asset(actor, name="Savings", type=BANK_ACCOUNT, current_value=Decimal("5000")).data


@pytest.fixture
def credit_card(actor):
    return create_liability(actor, name="Credit card", type="credit_card", current_balance=Decimal("300")).data


@pytest.mark.django_db
class TestLiquidity:

    def test_liabilities_count_negative_whatever_the_sign(self, actor, workspace, checking, savings, credit_card):
        record_monthly_balance(actor, "2025-03", Decimal("1000"), asset_id=checking.pk)
        record_monthly_balance(actor, "2025-03", Decimal("500"), asset_id=savings.pk)
        record_monthly_balance(actor, "2025-03", Decimal("-200"), liability_id=credit_card.pk)

        liquidity = liquidity_for_month(workspace, "2025-03")

        assert liquidity == {
            "month": "2025-03",
            "total_assets": Decimal("1500"),
            "total_liabilities": Decimal("200"),
            "total_liquidity": Decimal("1300"),
            "account_count": 3,
        }

    def test_month_without_balances(self, workspace):
        liquidity = liquidity_for_month(workspace, "2025-03")

        assert liquidity["total_liquidity"] == Decimal("0")
        assert liquidity["account_count"] == 0

    def test_history_sorted_by_month(self, actor, workspace, checking, credit_card):
        record_monthly_balance(actor, "2025-03", Decimal("300"), asset_id=checking.pk)
        record_monthly_balance(actor, "2024-12", Decimal("100"), asset_id=checking.pk)
        record_monthly_balance(actor, "2024-12", Decimal("50"), liability_id=credit_card.pk)

        history = liquidity_history(workspace)

        assert history == [
            {"month": "2024-12", "total_liquidity": Decimal("50")},
            {"month": "2025-03", "total_liquidity": Decimal("300")},
        ]

    def test_reset_only_touches_own_workspace(self, actor, other_actor, checking):
        other_account = create_asset(other_actor, name="Other", type=BANK_ACCOUNT, current_value=Decimal("1")).data
        record_monthly_balance(actor, "2025-03", Decimal("1"), asset_id=checking.pk)
        record_monthly_balance(other_actor, "2025-03", Decimal("1"), asset_id=other_account.pk)

        result = reset_liquidity_history(actor)

        assert result.data == {"deleted": 1}
        assert LiquidityBalance.objects.count() == 1


@pytest.mark.django_db
class TestBalances:

    def test_record_replaces_existing_month(self, actor, checking):
        record_monthly_balance(actor, "2025-03", Decimal("100"), asset_id=checking.pk)
        record_monthly_balance(actor, "2025-03", Decimal("250"), asset_id=checking.pk, notes="corrected")

        balance = LiquidityBalance.objects.get(asset=checking)
        assert balance.balance == Decimal("250")
        assert balance.notes == "corrected"

    @pytest.mark.parametrize("use_asset,use_liability", [(True, True), (False, False)])
    def test_exactly_one_account(self, actor, checking, credit_card, use_asset, use_liability):
        result = record_monthly_balance(
            actor,
            "2025-03",
            Decimal("1"),
            asset_id=checking.pk if use_asset else None,
            liability_id=credit_card.pk if use_liability else None,
        )

        assert not result.success
        assert result.error == "Give exactly one of asset_id or liability_id."

    def test_foreign_account_is_missing(self, other_actor, checking):
        result = record_monthly_balance(other_actor, "2025-03", Decimal("1"), asset_id=checking.pk)
        assert result.not_found

    def test_delete_single_balance(self, actor, checking):
        balance = record_monthly_balance(actor, "2025-03", Decimal("1"), asset_id=checking.pk).data

        assert delete_monthly_balance(actor, balance.pk).success
        assert delete_monthly_balance(actor, balance.pk).not_found


@pytest.mark.django_db
class TestAssets:

    def test_new_assets_append_to_sort_order(self, checking, savings):
        assert (checking.sort_order, savings.sort_order) == (0, 1)

    def test_move_down_swaps_neighbours(self, actor, checking, savings):
        result = reorder_asset(actor, checking.pk, "down")

        assert result.success
        checking.refresh_from_db()
        savings.refresh_from_db()
        assert (checking.sort_order, savings.sort_order) == (1, 0)

    def test_move_past_edge_is_noop(self, actor, checking, savings):
        assert reorder_asset(actor, checking.pk, "up").success
        assert reorder_asset(actor, savings.pk, "down").success

        checking.refresh_from_db()
        assert checking.sort_order == 0

    def test_equal_sort_orders_use_positions(self, actor, checking, savings):
        SimpleAsset.objects.filter(pk__in=[checking.pk, savings.pk]).update(sort_order=0)

        reorder_asset(actor, savings.pk, "up")

        ordered = list(SimpleAsset.objects.filter(type=BANK_ACCOUNT).order_by("sort_order", "id"))
        assert [a.name for a in ordered] == ["Savings", "Checking"]

    def test_non_bank_asset_cannot_be_reordered(self, actor):
        car = create_asset(actor, name="Car", type="vehicle", current_value=Decimal("9000")).data

        assert reorder_asset(actor, car.pk, "up").not_found

    def test_invalid_direction(self, actor, checking):
        assert not reorder_asset(actor, checking.pk, "sideways").success

    def test_delete_cascades_balances_and_valuations(self, actor, checking):
        record_monthly_balance(actor, "2025-03", Decimal("1"), asset_id=checking.pk)
        create_monthly_valuation(actor, MonthlyValuation.ItemType.ASSET, checking.pk, 2025, 3, Decimal("1"))

        result = delete_asset(actor, checking.pk)

        assert result.data == {"balances_deleted": 1, "valuations_deleted": 1}
        assert not MonthlyValuation.objects.exists()

    def test_valuation_for_unknown_item(self, actor):
        result = create_monthly_valuation(actor, MonthlyValuation.ItemType.LIABILITY, 999, 2025, 3, Decimal("1"))
        assert result.not_found


@pytest.mark.django_db
class TestNetWorthAndProgress:

    def test_net_worth(self, workspace, checking, savings, credit_card):
        figures = net_worth(workspace)

        assert figures["total_assets"] == Decimal("6000")
        assert figures["total_liabilities"] == Decimal("300")
        assert figures["net_worth"] == Decimal("5700")
        assert (figures["asset_count"], figures["liability_count"]) == (2, 1)

    def test_progress_against_previous_month(self, actor, workspace, checking, credit_card):
        create_monthly_valuation(actor, "asset", checking.pk, 2024, 12, Decimal("1000"))
        create_monthly_valuation(actor, "asset", checking.pk, 2025, 1, Decimal("1300"))
        create_monthly_valuation(actor, "liability", credit_card.pk, 2025, 1, Decimal("100"))

        result = progress(workspace, today=date(2025, 1, 20))

        assert result["current_month"] == "2025-01"
        assert result["previous_month"] == "2024-12"
        assert result["current_total"] == Decimal("1200")
        assert result["change"] == Decimal("200")
        assert result["change_percent"] == Decimal("20.00")
        assert result["valuation_count"] == 2

    def test_progress_without_previous_total(self, workspace):
        result = progress(workspace, today=date(2025, 5, 1))
        assert result["change_percent"] == Decimal("0")


SUBSCRIPTION_RENEWAL = date(2025, 4, 1)


@pytest.mark.django_db
class TestSubscriptions:

    @pytest.fixture
    def subscriptions(self, actor):
        def add(name, cost, cycle=Subscription.BillingCycle.MONTHLY, **extra):
            return create_subscription(
                actor, name=name, cost=Decimal(cost), billing_cycle=cycle,
                next_billing_date=SUBSCRIPTION_RENEWAL, **extra,
            ).data

        return [
            add("Editor", "10.00"),
            add("Hosting", "120.00", Subscription.BillingCycle.YEARLY),
            add("Music", "9.99", is_necessary=False),
            add("Insurance", "50.00", yearly_amount=Decimal("550.00"), type=Subscription.Type.INSURANCE),
            add("Old tool", "99.00", is_active=False),
        ]

    def test_totals_cover_active_only(self, workspace, subscriptions):
        totals = subscription_totals(workspace)

        assert totals["monthly_total"] == Decimal("79.99")
        assert totals["yearly_total"] == Decimal("909.88")
        assert totals["active_count"] == 4

    def test_savings_from_optional_subscriptions(self, workspace, subscriptions):
        totals = subscription_totals(workspace)

        assert totals["potential_monthly_savings"] == Decimal("9.99")
        assert totals["potential_yearly_savings"] == Decimal("119.88")
        assert totals["optional_count"] == 1

    def test_empty_workspace_is_zero(self, workspace):
        totals = subscription_totals(workspace)

        assert totals["monthly_total"] == Decimal("0.00")
        assert totals["active_count"] == 0

    def test_deactivating_drops_from_totals(self, actor, workspace, subscriptions):
        update_subscription(actor, subscriptions[0].pk, is_active=False)

        assert subscription_totals(workspace)["monthly_total"] == Decimal("69.99")

    def test_other_workspace_cannot_delete(self, other_actor, subscriptions):
        result = delete_subscription(other_actor, subscriptions[0].pk)

        assert result.not_found
        assert Subscription.objects.filter(pk=subscriptions[0].pk).exists()


@pytest.mark.django_db
class TestFinanceAPI:

    def test_record_balance_requires_one_account(self, owner_client, ws_url):
        response = owner_client.put(ws_url("finance/balances/"), {"month": "2025-03", "balance": "1"}, format="json")
        assert response.status_code == 400

    def test_bad_month_key_rejected(self, owner_client, ws_url):
        response = owner_client.get(ws_url("finance/liquidity/"), {"month": "2025-13"})
        assert response.status_code == 400

    def test_reorder_returns_full_list(self, owner_client, ws_url, checking, savings):
        response = owner_client.post(
            ws_url(f"finance/assets/{savings.pk}/reorder/"), {"direction": "up"}, format="json",
        )

        assert response.status_code == 200
        assert [a["name"] for a in response.data] == ["Savings", "Checking"]

    def test_viewer_cannot_reset_history(self, member_client, ws_url, viewer_actor):
        response = member_client.delete(ws_url("finance/balances/"))
        assert response.status_code == 403

    def test_liquidity_endpoint(self, owner_client, ws_url, actor, checking):
        record_monthly_balance(actor, "2025-03", Decimal("42"), asset_id=checking.pk)

        response = owner_client.get(ws_url("finance/liquidity/"), {"month": "2025-03"})

        assert response.status_code == 200
        assert response.data["account_count"] == 1

    def test_subscription_endpoints(self, owner_client, ws_url):
        response = owner_client.post(ws_url("finance/subscriptions/"), {
            "name": "Editor", "cost": "12.00", "billing_cycle": "monthly", "next_billing_date": "2025-04-01",
            "classification": "business", "category": "software",
        }, format="json")
        assert response.status_code == 201

        response = owner_client.get(ws_url("finance/subscriptions/"), {"classification": "business"})
        assert [s["name"] for s in response.data] == ["Editor"]

        response = owner_client.get(ws_url("finance/subscriptions/totals/"))
        assert response.status_code == 200
        assert response.data["active_count"] == 1
        assert response.data["monthly_total"] == Decimal("12.00")

    def test_negative_cost_rejected(self, owner_client, ws_url):
        response = owner_client.post(ws_url("finance/subscriptions/"), {
            "name": "Refund", "cost": "-1.00", "next_billing_date": "2025-04-01",
        }, format="json")
        assert response.status_code == 400
