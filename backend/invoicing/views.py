# invoicing/views.py
"""
Thin views that delegate to the commands layer.

Views handle: HTTP parsing, actor resolution, response formatting.
Commands handle: permission checks, numbering, totals, audit trail.
"""

from django.shortcuts import get_object_or_404
from django.utils import timezone
from rest_framework import status
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.authz import Capability, resolve_actor, require
from accounts.models import PermissionModule
from accounts.responses import failure_response
from .commands import (
    # Settings commands
    save_company_settings,
    upload_company_logo,
    # Product commands
    create_product,
    update_product,
    delete_product,
    # Invoice commands
    create_invoice,
    update_invoice,
    update_invoice_status,
    delete_invoice,
    archive_invoice,
    generate_monthly_invoices,
    # Lesson commands
    create_lesson,
    update_lesson,
    delete_lesson,
    delete_lessons,
    reassign_lesson,
    update_lesson_status,
    month_bounds,
    # Attendance report commands
    create_attendance_report,
    update_attendance_report,
    delete_attendance_report,
)
from .exports import (
    ExportFormat,
    create_export_response,
    export_datev_csv,
    export_invoices_to_excel,
)
from .models import (
    ArchivedInvoice,
    AttendanceReport,
    CompanySettings,
    Invoice,
    InvoiceAuditLog,
    Lesson,
    Product,
)
from .numbering import detect_invoice_gaps
from .serializers import (
    CompanySettingsSerializer,
    CompanySettingsWriteSerializer,
    LogoUploadSerializer,
    ProductSerializer,
    ProductWriteSerializer,
    InvoiceListSerializer,
    InvoiceDetailSerializer,
    InvoiceCreateSerializer,
    InvoiceWriteSerializer,
    InvoiceStatusSerializer,
    InvoiceQuerySerializer,
    InvoiceExportSerializer,
    MonthlyGenerationSerializer,
    ArchiveUploadSerializer,
    ArchivedInvoiceSerializer,
    InvoiceAuditLogSerializer,
    LessonSerializer,
    LessonCreateSerializer,
    LessonUpdateSerializer,
    LessonQuerySerializer,
    LessonStatusSerializer,
    LessonReassignSerializer,
    LessonBulkDeleteSerializer,
    AttendanceReportSerializer,
    AttendanceReportCreateSerializer,
    AttendanceReportUpdateSerializer,
    AttendanceReportQuerySerializer,
)

MODULE = PermissionModule.INVOICING
SETTINGS_MODULE = PermissionModule.SETTINGS

DASHBOARD_LIST_SIZE = 5


def _invoices(actor):
    return Invoice.objects.filter(workspace=actor.workspace).select_related("customer")


def _query(serializer_class, request):
    serializer = serializer_class(data=request.query_params)
    serializer.is_valid(raise_exception=True)
    return serializer.validated_data


# =============================================================================
# Company Settings Views
# =============================================================================

class CompanySettingsView(APIView):
    """
    GET /settings/ -> company settings (null until first saved)
    PATCH /settings/ -> create or update settings
    """
    permission_classes = [IsAuthenticated]

    def get(self, request, workspace_id):
        actor = resolve_actor(request, workspace_id)
        require(actor, SETTINGS_MODULE, Capability.VIEW)

        company = CompanySettings.objects.filter(workspace=actor.workspace).first()
        if company is None:
            return Response(None)
        return Response(CompanySettingsSerializer(company).data)

    def patch(self, request, workspace_id):
        actor = resolve_actor(request, workspace_id)

        input_serializer = CompanySettingsWriteSerializer(data=request.data, partial=True)
        input_serializer.is_valid(raise_exception=True)

        result = save_company_settings(actor, **input_serializer.validated_data)
        if not result.success:
            return failure_response(result)

        return Response(CompanySettingsSerializer(result.data).data)

    put = patch


class CompanyLogoView(APIView):
    permission_classes = [IsAuthenticated]
    parser_classes = [MultiPartParser, FormParser]

    def post(self, request, workspace_id):
        actor = resolve_actor(request, workspace_id)

        input_serializer = LogoUploadSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)

        result = upload_company_logo(actor, input_serializer.validated_data["logo"])
        if not result.success:
            return failure_response(result)

        return Response(CompanySettingsSerializer(result.data).data)


class NextInvoiceNumberView(APIView):
    """GET /settings/next-number/ -> {prefix, number, formatted} or null"""
    permission_classes = [IsAuthenticated]

    def get(self, request, workspace_id):
        actor = resolve_actor(request, workspace_id)
        require(actor, SETTINGS_MODULE, Capability.VIEW)

        company = CompanySettings.objects.filter(workspace=actor.workspace).first()
        if company is None:
            return Response(None)

        return Response({
            "prefix": company.invoice_prefix,
            "number": company.next_invoice_number,
            "formatted": f"{company.invoice_prefix}{company.next_invoice_number}",
        })


# =============================================================================
# Product Views
# =============================================================================

class ProductListCreateView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, workspace_id):
        actor = resolve_actor(request, workspace_id)
        require(actor, MODULE, Capability.VIEW)

        products = Product.objects.filter(workspace=actor.workspace)
        if request.query_params.get("active") == "true":
            products = products.filter(is_active=True)
        return Response(ProductSerializer(products, many=True).data)

    def post(self, request, workspace_id):
        actor = resolve_actor(request, workspace_id)

        input_serializer = ProductWriteSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)

        result = create_product(actor, **input_serializer.validated_data)
        if not result.success:
            return failure_response(result)

        return Response(ProductSerializer(result.data).data, status=status.HTTP_201_CREATED)


class ProductDetailView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, workspace_id, pk):
        actor = resolve_actor(request, workspace_id)
        require(actor, MODULE, Capability.VIEW)

        product = get_object_or_404(Product, pk=pk, workspace=actor.workspace)
        return Response(ProductSerializer(product).data)

    def patch(self, request, workspace_id, pk):
        actor = resolve_actor(request, workspace_id)

        input_serializer = ProductWriteSerializer(data=request.data, partial=True)
        input_serializer.is_valid(raise_exception=True)

        result = update_product(actor, pk, **input_serializer.validated_data)
        if not result.success:
            return failure_response(result)

        return Response(ProductSerializer(result.data).data)

    def delete(self, request, workspace_id, pk):
        actor = resolve_actor(request, workspace_id)

        result = delete_product(actor, pk)
        if not result.success:
            return failure_response(result)

        return Response(status=status.HTTP_204_NO_CONTENT)


# =============================================================================
# Invoice Views
# =============================================================================

class InvoiceListCreateView(APIView):
    """
    GET /invoices/ -> all invoices, newest first (?status=)
    POST /invoices/ -> create invoice with items
    """
    permission_classes = [IsAuthenticated]

    def get(self, request, workspace_id):
        actor = resolve_actor(request, workspace_id)
        require(actor, MODULE, Capability.VIEW)

        invoices = _invoices(actor)
        query = _query(InvoiceQuerySerializer, request)
        if query.get("status"):
            invoices = invoices.filter(status=query["status"])

        return Response(InvoiceListSerializer(invoices, many=True).data)

    def post(self, request, workspace_id):
        actor = resolve_actor(request, workspace_id)

        input_serializer = InvoiceCreateSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)

        result = create_invoice(actor, **input_serializer.validated_data)
        if not result.success:
            return failure_response(result)

        return Response(InvoiceDetailSerializer(result.data).data, status=status.HTTP_201_CREATED)


class OpenInvoiceListView(APIView):
    """GET /invoices/open/ -> the newest sent (unpaid) invoices"""
    permission_classes = [IsAuthenticated]

    def get(self, request, workspace_id):
        actor = resolve_actor(request, workspace_id)
        require(actor, MODULE, Capability.VIEW)

        invoices = _invoices(actor).filter(status=Invoice.Status.SENT)[:DASHBOARD_LIST_SIZE]
        return Response(InvoiceListSerializer(invoices, many=True).data)


class DraftInvoiceListView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, workspace_id):
        actor = resolve_actor(request, workspace_id)
        require(actor, MODULE, Capability.VIEW)

        invoices = _invoices(actor).filter(status=Invoice.Status.DRAFT)[:DASHBOARD_LIST_SIZE]
        return Response(InvoiceListSerializer(invoices, many=True).data)


class InvoiceDetailView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, workspace_id, pk):
        actor = resolve_actor(request, workspace_id)
        require(actor, MODULE, Capability.VIEW)

        invoice = get_object_or_404(
            _invoices(actor).prefetch_related("items"), pk=pk,
        )
        return Response(InvoiceDetailSerializer(invoice).data)

    def put(self, request, workspace_id, pk):
        actor = resolve_actor(request, workspace_id)

        input_serializer = InvoiceWriteSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)

        result = update_invoice(actor, pk, **input_serializer.validated_data)
        if not result.success:
            return failure_response(result)

        return Response(InvoiceDetailSerializer(result.data).data)

    def delete(self, request, workspace_id, pk):
        actor = resolve_actor(request, workspace_id)

        result = delete_invoice(actor, pk)
        if not result.success:
            return failure_response(result)

        return Response(status=status.HTTP_204_NO_CONTENT)


class InvoiceStatusView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request, workspace_id, pk):
        actor = resolve_actor(request, workspace_id)

        input_serializer = InvoiceStatusSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)

        result = update_invoice_status(actor, pk, input_serializer.validated_data["status"])
        if not result.success:
            return failure_response(result)

        return Response(InvoiceListSerializer(result.data).data)


class InvoiceAuditLogView(APIView):
    """GET /invoices/<pk>/audit-log/ -> audit entries, newest first"""
    permission_classes = [IsAuthenticated]

    def get(self, request, workspace_id, pk):
        actor = resolve_actor(request, workspace_id)
        require(actor, MODULE, Capability.VIEW)

        invoice = get_object_or_404(Invoice, pk=pk, workspace=actor.workspace)
        logs = InvoiceAuditLog.objects.filter(invoice=invoice).select_related("user")
        return Response(InvoiceAuditLogSerializer(logs, many=True).data)


class InvoiceArchiveView(APIView):
    """
    GET /invoices/<pk>/archive/ -> archive record ({"archived": false} if none)
    POST /invoices/<pk>/archive/ -> store the PDF and archive the invoice
    """
    permission_classes = [IsAuthenticated]
    parser_classes = [MultiPartParser, FormParser]

    def get(self, request, workspace_id, pk):
        actor = resolve_actor(request, workspace_id)
        require(actor, MODULE, Capability.VIEW)

        invoice = get_object_or_404(Invoice, pk=pk, workspace=actor.workspace)
        archive = ArchivedInvoice.objects.filter(invoice=invoice).select_related("invoice", "archived_by").first()
        if archive is None:
            return Response({"archived": False})

        data = ArchivedInvoiceSerializer(archive).data
        data["archived"] = True
        return Response(data)

    def post(self, request, workspace_id, pk):
        actor = resolve_actor(request, workspace_id)

        input_serializer = ArchiveUploadSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)

        result = archive_invoice(actor, pk, input_serializer.validated_data["pdf"])
        if not result.success:
            return failure_response(result)

        return Response(ArchivedInvoiceSerializer(result.data).data, status=status.HTTP_201_CREATED)


class ArchivedInvoiceListView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, workspace_id):
        actor = resolve_actor(request, workspace_id)
        require(actor, MODULE, Capability.VIEW)

        archives = ArchivedInvoice.objects.filter(
            workspace=actor.workspace,
        ).select_related("invoice", "archived_by")
        return Response(ArchivedInvoiceSerializer(archives, many=True).data)


class InvoiceGapsView(APIView):
    """GET /invoices/gaps/ -> [{"from": n, "to": m}, ...]"""
    permission_classes = [IsAuthenticated]

    def get(self, request, workspace_id):
        actor = resolve_actor(request, workspace_id)
        require(actor, MODULE, Capability.VIEW)

        numbers = Invoice.objects.filter(workspace=actor.workspace).values_list("invoice_number", flat=True)
        return Response(detect_invoice_gaps(numbers))


class DatevExportView(APIView):
    """POST /invoices/export/datev/ {"invoice_ids": [...]} -> ISO-8859-1 CSV download"""
    permission_classes = [IsAuthenticated]

    def post(self, request, workspace_id):
        actor = resolve_actor(request, workspace_id)
        require(actor, MODULE, Capability.VIEW)

        input_serializer = InvoiceExportSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)

        invoices = Invoice.objects.filter(
            workspace=actor.workspace,
            pk__in=input_serializer.validated_data["invoice_ids"],
        ).order_by("date", "invoice_number")

        return create_export_response(
            export_datev_csv(invoices),
            format=ExportFormat.DATEV,
            filename=f"datev_export_{timezone.localdate():%Y%m%d}",
        )


class InvoiceExcelExportView(APIView):
    """GET /invoices/export/xlsx/ -> invoice list as Excel (?status=)"""
    permission_classes = [IsAuthenticated]

    def get(self, request, workspace_id):
        actor = resolve_actor(request, workspace_id)
        require(actor, MODULE, Capability.VIEW)

        invoices = _invoices(actor).order_by("date", "invoice_number")
        query = _query(InvoiceQuerySerializer, request)
        if query.get("status"):
            invoices = invoices.filter(status=query["status"])

        return create_export_response(
            export_invoices_to_excel(invoices, title=f"Invoices - {actor.workspace.name}"),
            format=ExportFormat.EXCEL,
            filename=f"invoices_{timezone.localdate():%Y%m%d}",
        )


class MonthlyInvoiceGenerationView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request, workspace_id):
        actor = resolve_actor(request, workspace_id)

        input_serializer = MonthlyGenerationSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)

        result = generate_monthly_invoices(actor, **input_serializer.validated_data)
        if not result.success:
            return failure_response(result)

        return Response({"invoice_ids": result.data, "count": len(result.data)}, status=status.HTTP_201_CREATED)


# =============================================================================
# Lesson Views
# =============================================================================

class LessonListCreateView(APIView):
    """
    GET /lessons/ -> lessons (?year=&month=, ?customer=<id>, ?status=, ?uninvoiced=true)
    POST /lessons/ -> create lesson
    """
    permission_classes = [IsAuthenticated]

    def get(self, request, workspace_id):
        actor = resolve_actor(request, workspace_id)
        require(actor, MODULE, Capability.VIEW)

        query = _query(LessonQuerySerializer, request)
        lessons = Lesson.objects.filter(workspace=actor.workspace).select_related(
            "customer", "invoice", "teacher", "attendance_report",
        )

        if "year" in query:
            start, end = month_bounds(query["year"], query["month"])
            lessons = lessons.filter(start__gte=start, start__lt=end)
        if "customer" in query:
            lessons = lessons.filter(customer_id=query["customer"])
        if query.get("status"):
            lessons = lessons.filter(status=query["status"])
        if query.get("uninvoiced"):
            lessons = lessons.filter(invoice__isnull=True)

        return Response(LessonSerializer(lessons, many=True).data)

    def post(self, request, workspace_id):
        actor = resolve_actor(request, workspace_id)

        input_serializer = LessonCreateSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)

        result = create_lesson(actor, **input_serializer.validated_data)
        if not result.success:
            return failure_response(result)

        return Response(LessonSerializer(result.data).data, status=status.HTTP_201_CREATED)


class LessonDetailView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, workspace_id, pk):
        actor = resolve_actor(request, workspace_id)
        require(actor, MODULE, Capability.VIEW)

        lesson = get_object_or_404(Lesson, pk=pk, workspace=actor.workspace)
        return Response(LessonSerializer(lesson).data)

    def patch(self, request, workspace_id, pk):
        actor = resolve_actor(request, workspace_id)

        input_serializer = LessonUpdateSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)

        result = update_lesson(actor, pk, **input_serializer.validated_data)
        if not result.success:
            return failure_response(result)

        return Response(LessonSerializer(result.data).data)

    def delete(self, request, workspace_id, pk):
        actor = resolve_actor(request, workspace_id)

        result = delete_lesson(actor, pk)
        if not result.success:
            return failure_response(result)

        return Response(status=status.HTTP_204_NO_CONTENT)


class LessonStatusView(APIView):
    """POST /lessons/<pk>/status/ {"status", "cancellation_reason"} -> lesson"""
    permission_classes = [IsAuthenticated]

    def post(self, request, workspace_id, pk):
        actor = resolve_actor(request, workspace_id)

        input_serializer = LessonStatusSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)

        result = update_lesson_status(actor, pk, **input_serializer.validated_data)
        if not result.success:
            return failure_response(result)

        return Response(LessonSerializer(result.data).data)


class LessonReassignView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request, workspace_id, pk):
        actor = resolve_actor(request, workspace_id)

        input_serializer = LessonReassignSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)

        result = reassign_lesson(actor, pk, input_serializer.validated_data["teacher_id"])
        if not result.success:
            return failure_response(result)

        return Response(LessonSerializer(result.data).data)


class LessonBulkDeleteView(APIView):
    """POST /lessons/bulk-delete/ {"lesson_ids": [...]} -> {"deleted": [...], "skipped": [...]}"""
    permission_classes = [IsAuthenticated]

    def post(self, request, workspace_id):
        actor = resolve_actor(request, workspace_id)

        input_serializer = LessonBulkDeleteSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)

        result = delete_lessons(actor, input_serializer.validated_data["lesson_ids"])
        if not result.success:
            return failure_response(result)

        return Response(result.data)


# =============================================================================
# Attendance Report Views
# =============================================================================

def _reports(actor):
    return AttendanceReport.objects.filter(workspace=actor.workspace).select_related(
        "lesson"
    ).prefetch_related("students_present", "students_absent", "progress__student")


class AttendanceReportListCreateView(APIView):
    """
    GET /attendance-reports/ -> reports, newest first
        (?lesson=<id>, ?customer=<id>, ?group=<id>, ?date_from=&date_to=)
    POST /attendance-reports/ -> file the report of a lesson
    """
    permission_classes = [IsAuthenticated]

    def get(self, request, workspace_id):
        actor = resolve_actor(request, workspace_id)
        require(actor, MODULE, Capability.VIEW)

        query = _query(AttendanceReportQuerySerializer, request)
        reports = _reports(actor)

        if "lesson" in query:
            reports = reports.filter(lesson_id=query["lesson"])
        if "customer" in query:
            reports = reports.filter(customer_id=query["customer"])
        if "group" in query:
            reports = reports.filter(group_id=query["group"])
        if "date_from" in query:
            reports = reports.filter(report_date__date__gte=query["date_from"])
        if "date_to" in query:
            reports = reports.filter(report_date__date__lte=query["date_to"])

        return Response(AttendanceReportSerializer(reports, many=True).data)

    def post(self, request, workspace_id):
        actor = resolve_actor(request, workspace_id)

        input_serializer = AttendanceReportCreateSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)

        result = create_attendance_report(actor, **input_serializer.validated_data)
        if not result.success:
            return failure_response(result)

        return Response(AttendanceReportSerializer(result.data).data, status=status.HTTP_201_CREATED)


class AttendanceReportDetailView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, workspace_id, pk):
        actor = resolve_actor(request, workspace_id)
        require(actor, MODULE, Capability.VIEW)

        report = get_object_or_404(_reports(actor), pk=pk)
        return Response(AttendanceReportSerializer(report).data)

    def patch(self, request, workspace_id, pk):
        actor = resolve_actor(request, workspace_id)

        input_serializer = AttendanceReportUpdateSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)

        result = update_attendance_report(actor, pk, **input_serializer.validated_data)
        if not result.success:
            return failure_response(result)

        return Response(AttendanceReportSerializer(result.data).data)

    def delete(self, request, workspace_id, pk):
        actor = resolve_actor(request, workspace_id)

        result = delete_attendance_report(actor, pk)
        if not result.success:
            return failure_response(result)

        return Response(status=status.HTTP_204_NO_CONTENT)
