# customers/urls.py
"""
URL configuration for customers API (mounted under /api/workspaces/<id>/customers/).

Endpoints:
- / - Customer list/create
- /<id>/ - Customer detail (delete cascades to students and groups)
- /groups/, /students/ - Student groups and students
- /imports/ - CSV/XLSX imports and rollback
"""

from django.urls import path

from .views import (
    # Customer views
    CustomerListCreateView,
    CustomerDetailView,
    CustomerToggleActiveView,
    CustomerBatchCreateView,
    CustomerDeactivateAllView,
    CustomerDeleteAllView,
    # Group views
    StudentGroupListCreateView,
    StudentGroupDetailView,
    # Student views
    StudentListCreateView,
    StudentDetailView,
    # Import views
    CustomerImportListCreateView,
    CustomerImportDetailView,
    CustomerImportRollbackView,
)

app_name = "customers"

urlpatterns = [
    # ==========================================================================
    # Customers
    # ==========================================================================
    path("", CustomerListCreateView.as_view(), name="customer-list-create"),
    path("batch/", CustomerBatchCreateView.as_view(), name="customer-batch"),
    path("deactivate-all/", CustomerDeactivateAllView.as_view(), name="customer-deactivate-all"),
    path("delete-all/", CustomerDeleteAllView.as_view(), name="customer-delete-all"),
    path("<int:pk>/", CustomerDetailView.as_view(), name="customer-detail"),
    path("<int:pk>/toggle-active/", CustomerToggleActiveView.as_view(), name="customer-toggle-active"),

    # ==========================================================================
    # Student Groups
    # ==========================================================================
    path("groups/", StudentGroupListCreateView.as_view(), name="group-list-create"),
    path("groups/<int:pk>/", StudentGroupDetailView.as_view(), name="group-detail"),

    # ==========================================================================
    # Students
    # ==========================================================================
    path("students/", StudentListCreateView.as_view(), name="student-list-create"),
    path("students/<int:pk>/", StudentDetailView.as_view(), name="student-detail"),

    # ==========================================================================
    # Imports
    # ==========================================================================
    path("imports/", CustomerImportListCreateView.as_view(), name="import-list-create"),
    path("imports/<str:batch_id>/", CustomerImportDetailView.as_view(), name="import-detail"),
    path("imports/<str:batch_id>/rollback/", CustomerImportRollbackView.as_view(), name="import-rollback"),
]
