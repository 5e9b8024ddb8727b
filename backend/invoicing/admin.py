from django.contrib import admin

from .models import (
    ArchivedInvoice,
    AttendanceReport,
    CompanySettings,
    Invoice,
    InvoiceAuditLog,
    InvoiceItem,
    Lesson,
    Product,
    StudentProgress,
)


@admin.register(CompanySettings)
class CompanySettingsAdmin(admin.ModelAdmin):
    list_display = ("company_name", "workspace", "invoice_prefix", "next_invoice_number")


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ("name", "workspace", "unit", "unit_price", "tax_rate", "is_active")
    list_filter = ("is_active",)
    search_fields = ("name",)


class InvoiceItemInline(admin.TabularInline):
    model = InvoiceItem
    extra = 0


@admin.register(Invoice)
class InvoiceAdmin(admin.ModelAdmin):
    list_display = ("invoice_number", "workspace", "customer_name", "date", "status", "total")
    list_filter = ("status",)
    search_fields = ("invoice_number", "customer_name")
    inlines = [InvoiceItemInline]


@admin.register(InvoiceAuditLog)
class InvoiceAuditLogAdmin(admin.ModelAdmin):
    list_display = ("invoice_number", "action", "user", "timestamp")
    readonly_fields = ("workspace", "invoice", "invoice_number", "user", "action", "details", "timestamp")

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False


@admin.register(ArchivedInvoice)
class ArchivedInvoiceAdmin(admin.ModelAdmin):
    list_display = ("invoice_number", "workspace", "archived_at", "retention_until")


@admin.register(Lesson)
class LessonAdmin(admin.ModelAdmin):
    list_display = ("title", "customer", "teacher", "start", "status", "is_billable", "invoice")
    list_filter = ("status", "lesson_type", "is_billable")


class StudentProgressInline(admin.TabularInline):
    model = StudentProgress
    extra = 0


@admin.register(AttendanceReport)
class AttendanceReportAdmin(admin.ModelAdmin):
    list_display = ("lesson", "customer", "group", "report_date", "created_by")
    inlines = [StudentProgressInline]
