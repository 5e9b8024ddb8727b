# dashboard/urls.py
"""
URL configuration for dashboard API (mounted under /api/workspaces/<id>/dashboard/).

Endpoints:
- /layout/ - Get, save or reset the user's widget layout
- /layouts/ - Layouts the user has stored in the workspace
"""

from django.urls import path

from .views import DashboardLayoutView, DashboardLayoutListView

app_name = "dashboard"

urlpatterns = [
    path("layout/", DashboardLayoutView.as_view(), name="layout"),
    path("layouts/", DashboardLayoutListView.as_view(), name="layout-list"),
]
