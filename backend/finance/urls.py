# finance/urls.py
"""
URL configuration for simple finance API (mounted under /api/workspaces/<id>/finance/).

Endpoints:
- /assets/ - Assets, ordered; bank accounts can be moved up or down
- /liabilities/ - Liabilities
- /valuations/ - Monthly valuations of assets and liabilities
- /balances/ - Monthly liquidity balances per account
- /liquidity/, /liquidity/history/, /net-worth/, /progress/ - Computed figures
- /subscriptions/ - Recurring costs, with monthly and yearly totals
"""

from django.urls import path

from .views import (
    AssetListCreateView,
    AssetDetailView,
    AssetReorderView,
    LiabilityListCreateView,
    LiabilityDetailView,
    ValuationListCreateView,
    BalanceListRecordView,
    BalanceDetailView,
    LiquidityView,
    LiquidityHistoryView,
    NetWorthView,
    ProgressView,
    SubscriptionListCreateView,
    SubscriptionDetailView,
    SubscriptionTotalsView,
)

app_name = "finance"

urlpatterns = [
    path("assets/", AssetListCreateView.as_view(), name="asset-list-create"),
    path("assets/<int:pk>/", AssetDetailView.as_view(), name="asset-detail"),
    path("assets/<int:pk>/reorder/", AssetReorderView.as_view(), name="asset-reorder"),
    path("liabilities/", LiabilityListCreateView.as_view(), name="liability-list-create"),
    path("liabilities/<int:pk>/", LiabilityDetailView.as_view(), name="liability-detail"),
    path("valuations/", ValuationListCreateView.as_view(), name="valuation-list-create"),
    path("balances/", BalanceListRecordView.as_view(), name="balance-list-record"),
    path("balances/<int:pk>/", BalanceDetailView.as_view(), name="balance-detail"),
    path("liquidity/", LiquidityView.as_view(), name="liquidity"),
    path("liquidity/history/", LiquidityHistoryView.as_view(), name="liquidity-history"),
    path("net-worth/", NetWorthView.as_view(), name="net-worth"),
    path("progress/", ProgressView.as_view(), name="progress"),
    path("subscriptions/", SubscriptionListCreateView.as_view(), name="subscription-list-create"),
    path("subscriptions/totals/", SubscriptionTotalsView.as_view(), name="subscription-totals"),
    path("subscriptions/<int:pk>/", SubscriptionDetailView.as_view(), name="subscription-detail"),
]
