# invoicing/urls.py
"""
URL configuration for invoicing API (mounted under /api/workspaces/<id>/invoicing/).

Endpoints:
- /settings/ - Company settings, logo upload, next invoice number preview
- /products/ - Product catalogue
- /invoices/ - Invoices, status changes, audit log, archive, exports
- /archive/ - Archived invoices
- /lessons/ - Billable lessons, status changes, reassignment, bulk delete
- /attendance-reports/ - Attendance and student progress per lesson
"""

from django.urls import path

from .views import (
    # Settings views
    CompanySettingsView,
    CompanyLogoView,
    NextInvoiceNumberView,
    # Product views
    ProductListCreateView,
    ProductDetailView,
    # Invoice views
    InvoiceListCreateView,
    OpenInvoiceListView,
    DraftInvoiceListView,
    InvoiceDetailView,
    InvoiceStatusView,
    InvoiceAuditLogView,
    InvoiceArchiveView,
    ArchivedInvoiceListView,
    InvoiceGapsView,
    DatevExportView,
    InvoiceExcelExportView,
    MonthlyInvoiceGenerationView,
    # Lesson views
    LessonListCreateView,
    LessonDetailView,
    LessonStatusView,
    LessonReassignView,
    LessonBulkDeleteView,
    # Attendance report views
    AttendanceReportListCreateView,
    AttendanceReportDetailView,
)

app_name = "invoicing"

urlpatterns = [
    # ==========================================================================
    # Company Settings
    # ==========================================================================
    path("settings/", CompanySettingsView.as_view(), name="settings"),
    path("settings/logo/", CompanyLogoView.as_view(), name="settings-logo"),
    path("settings/next-number/", NextInvoiceNumberView.as_view(), name="settings-next-number"),

    # ==========================================================================
    # Products
    # ==========================================================================
    path("products/", ProductListCreateView.as_view(), name="product-list-create"),
    path("products/<int:pk>/", ProductDetailView.as_view(), name="product-detail"),

    # ==========================================================================
    # Invoices
    # ==========================================================================
    path("invoices/", InvoiceListCreateView.as_view(), name="invoice-list-create"),
    path("invoices/open/", OpenInvoiceListView.as_view(), name="invoice-open"),
    path("invoices/drafts/", DraftInvoiceListView.as_view(), name="invoice-drafts"),
    path("invoices/gaps/", InvoiceGapsView.as_view(), name="invoice-gaps"),
    path("invoices/generate-monthly/", MonthlyInvoiceGenerationView.as_view(), name="invoice-generate-monthly"),
    path("invoices/export/datev/", DatevExportView.as_view(), name="invoice-export-datev"),
    path("invoices/export/xlsx/", InvoiceExcelExportView.as_view(), name="invoice-export-xlsx"),
    path("invoices/<int:pk>/", InvoiceDetailView.as_view(), name="invoice-detail"),
    path("invoices/<int:pk>/status/", InvoiceStatusView.as_view(), name="invoice-status"),
    path("invoices/<int:pk>/audit-log/", InvoiceAuditLogView.as_view(), name="invoice-audit-log"),
    path("invoices/<int:pk>/archive/", InvoiceArchiveView.as_view(), name="invoice-archive"),

    # ==========================================================================
    # Archive
    # ==========================================================================
    path("archive/", ArchivedInvoiceListView.as_view(), name="archive-list"),

    # ==========================================================================
    # Lessons
    # ==========================================================================
    path("lessons/", LessonListCreateView.as_view(), name="lesson-list-create"),
    path("lessons/bulk-delete/", LessonBulkDeleteView.as_view(), name="lesson-bulk-delete"),
    path("lessons/<int:pk>/", LessonDetailView.as_view(), name="lesson-detail"),
    path("lessons/<int:pk>/status/", LessonStatusView.as_view(), name="lesson-status"),
    path("lessons/<int:pk>/reassign/", LessonReassignView.as_view(), name="lesson-reassign"),

    # ==========================================================================
    # Attendance reports
    # ==========================================================================
    path("attendance-reports/", AttendanceReportListCreateView.as_view(), name="attendance-report-list-create"),
    path("attendance-reports/<int:pk>/", AttendanceReportDetailView.as_view(), name="attendance-report-detail"),
]
