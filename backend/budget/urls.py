# budget/urls.py
"""
URL configuration for budget API (mounted under /api/workspaces/<id>/budget/).

Endpoints:
- /income/ - Monthly income
- /outgoings/ - Recurring outgoings and their effective amounts per month
- /overrides/ - Per-month overrides of an outgoing's amount
- /summary/, /yearly/, /history/ - Computed budget figures
"""

from django.urls import path

from .views import (
    BudgetIncomeView,
    BudgetOutgoingListCreateView,
    BudgetOutgoingDetailView,
    EffectiveOutgoingsView,
    MonthlyOverrideListSetView,
    MonthlyOverrideDeleteView,
    BudgetSummaryView,
    YearlyBudgetView,
    BudgetHistoryView,
)

app_name = "budget"

urlpatterns = [
    path("income/", BudgetIncomeView.as_view(), name="income"),
    path("outgoings/", BudgetOutgoingListCreateView.as_view(), name="outgoing-list-create"),
    path("outgoings/effective/", EffectiveOutgoingsView.as_view(), name="outgoing-effective"),
    path("outgoings/<int:pk>/", BudgetOutgoingDetailView.as_view(), name="outgoing-detail"),
    path("overrides/", MonthlyOverrideListSetView.as_view(), name="override-list-set"),
    path(
        "overrides/<int:outgoing_id>/<int:year>/<int:month>/",
        MonthlyOverrideDeleteView.as_view(),
        name="override-delete",
    ),
    path("summary/", BudgetSummaryView.as_view(), name="summary"),
    path("yearly/", YearlyBudgetView.as_view(), name="yearly"),
    path("history/", BudgetHistoryView.as_view(), name="history"),
]
