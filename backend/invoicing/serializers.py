from django.core.files.storage import default_storage
from rest_framework import serializers

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


def storage_url(name):
    return default_storage.url(name) if name else None


# =============================================================================
# Company settings
# =============================================================================

class CompanySettingsSerializer(serializers.ModelSerializer):
    logo_url = serializers.SerializerMethodField()

    class Meta:
        model = CompanySettings
        exclude = ("workspace",)

    def get_logo_url(self, obj):
        return storage_url(obj.logo)


class CompanySettingsWriteSerializer(serializers.ModelSerializer):
    class Meta:
        model = CompanySettings
        exclude = ("id", "workspace", "logo", "created_at", "updated_at")


class LogoUploadSerializer(serializers.Serializer):
    logo = serializers.FileField()


# =============================================================================
# Products
# =============================================================================

class ProductSerializer(serializers.ModelSerializer):
    class Meta:
        model = Product
        exclude = ("workspace",)


class ProductWriteSerializer(serializers.ModelSerializer):
    class Meta:
        model = Product
        exclude = ("id", "workspace", "created_at", "updated_at")


# =============================================================================
# Invoices
# =============================================================================

class InvoiceItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = InvoiceItem
        exclude = ("invoice",)


class InvoiceItemInputSerializer(serializers.Serializer):
    product_id = serializers.IntegerField(required=False, allow_null=True, default=None)
    description = serializers.CharField(max_length=500)
    quantity = serializers.DecimalField(max_digits=10, decimal_places=2)
    unit = serializers.CharField(max_length=30, required=False, allow_blank=True, default="")
    unit_price = serializers.DecimalField(max_digits=10, decimal_places=2)
    tax_rate = serializers.DecimalField(max_digits=5, decimal_places=2, min_value=0, default=0)
    service_date = serializers.DateField(required=False, allow_null=True, default=None)
    start_time = serializers.CharField(max_length=5, required=False, allow_blank=True, default="")
    end_time = serializers.CharField(max_length=5, required=False, allow_blank=True, default="")


class InvoiceListSerializer(serializers.ModelSerializer):
    customer_number = serializers.CharField(source="customer.customer_number", read_only=True, default=None)
    is_overdue = serializers.BooleanField(read_only=True)

    class Meta:
        model = Invoice
        fields = (
            "id", "invoice_number", "customer", "customer_name", "customer_number",
            "date", "due_date", "status", "subtotal", "tax_total", "total",
            "is_overdue", "sent_at", "paid_at", "created_at",
        )


class InvoiceDetailSerializer(InvoiceListSerializer):
    items = InvoiceItemSerializer(many=True, read_only=True)
    customer_details = serializers.SerializerMethodField()

    class Meta(InvoiceListSerializer.Meta):
        fields = InvoiceListSerializer.Meta.fields + (
            "notes", "payment_terms", "items", "customer_details", "updated_at",
        )

    def get_customer_details(self, obj):
        from customers.serializers import CustomerSerializer

        if obj.customer is None:
            return None
        return CustomerSerializer(obj.customer).data


class InvoiceWriteSerializer(serializers.Serializer):
    customer_id = serializers.IntegerField()
    date = serializers.DateField()
    due_date = serializers.DateField()
    items = InvoiceItemInputSerializer(many=True)
    notes = serializers.CharField(required=False, allow_blank=True, default="")
    payment_terms = serializers.CharField(max_length=100, required=False, allow_blank=True, default="")


class InvoiceCreateSerializer(InvoiceWriteSerializer):
    status = serializers.ChoiceField(choices=Invoice.Status.choices, default=Invoice.Status.DRAFT)
    manual_invoice_number = serializers.CharField(
        max_length=50, required=False, allow_blank=True, allow_null=True, default=None,
    )


class InvoiceStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Invoice.Status.choices)


class InvoiceQuerySerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Invoice.Status.choices, required=False, allow_blank=True)


class InvoiceExportSerializer(serializers.Serializer):
    invoice_ids = serializers.ListField(child=serializers.IntegerField(), allow_empty=False)


class MonthlyGenerationSerializer(serializers.Serializer):
    year = serializers.IntegerField(min_value=2000, max_value=2100)
    month = serializers.IntegerField(min_value=1, max_value=12)


# =============================================================================
# Archive & audit
# =============================================================================

class ArchiveUploadSerializer(serializers.Serializer):
    pdf = serializers.FileField()


class ArchivedInvoiceSerializer(serializers.ModelSerializer):
    pdf_url = serializers.SerializerMethodField()
    customer_name = serializers.CharField(source="invoice.customer_name", read_only=True)
    total = serializers.DecimalField(source="invoice.total", max_digits=12, decimal_places=2, read_only=True)
    archived_by_email = serializers.EmailField(source="archived_by.email", read_only=True, default=None)

    class Meta:
        model = ArchivedInvoice
        fields = (
            "id", "invoice", "invoice_number", "customer_name", "total",
            "pdf", "pdf_url", "archived_at", "archived_by_email", "retention_until",
        )

    def get_pdf_url(self, obj):
        return storage_url(obj.pdf)


class InvoiceAuditLogSerializer(serializers.ModelSerializer):
    user_name = serializers.SerializerMethodField()
    user_email = serializers.EmailField(source="user.email", read_only=True, default="")

    class Meta:
        model = InvoiceAuditLog
        fields = ("id", "invoice", "invoice_number", "action", "details", "user_name", "user_email", "timestamp")

    def get_user_name(self, obj):
        if obj.user is None:
            return "Unknown"
        return obj.user.name or "Unknown"


# =============================================================================
# Lessons
# =============================================================================

class LessonSerializer(serializers.ModelSerializer):
    customer_name = serializers.CharField(source="customer.name", read_only=True)
    teacher_name = serializers.CharField(source="teacher.display_name", read_only=True, default=None)
    has_attendance_report = serializers.SerializerMethodField()
    invoice_number = serializers.CharField(source="invoice.invoice_number", read_only=True, default=None)

    class Meta:
        model = Lesson
        fields = (
            "id", "customer", "customer_name", "group", "student", "teacher", "teacher_name",
            "title", "lesson_type", "start", "end", "rate", "is_billable", "notes",
            "status", "cancelled_at", "cancelled_by", "cancellation_reason", "has_attendance_report",
            "invoice", "invoice_number", "created_at", "updated_at",
        )

    def get_has_attendance_report(self, obj):
        return hasattr(obj, "attendance_report")


class LessonCreateSerializer(serializers.Serializer):
    customer_id = serializers.IntegerField()
    group_id = serializers.IntegerField(required=False, allow_null=True, default=None)
    student_id = serializers.IntegerField(required=False, allow_null=True, default=None)
    teacher_id = serializers.IntegerField(required=False, allow_null=True, default=None)
    title = serializers.CharField(max_length=255)
    lesson_type = serializers.ChoiceField(choices=Lesson.LessonType.choices, default=Lesson.LessonType.IN_PERSON)
    start = serializers.DateTimeField()
    end = serializers.DateTimeField()
    rate = serializers.DecimalField(max_digits=10, decimal_places=2, required=False, allow_null=True, default=None)
    is_billable = serializers.BooleanField(default=True)
    notes = serializers.CharField(required=False, allow_blank=True, default="")


class LessonUpdateSerializer(serializers.Serializer):
    customer_id = serializers.IntegerField(required=False)
    group_id = serializers.IntegerField(required=False, allow_null=True)
    student_id = serializers.IntegerField(required=False, allow_null=True)
    teacher_id = serializers.IntegerField(required=False, allow_null=True)
    title = serializers.CharField(max_length=255, required=False)
    lesson_type = serializers.ChoiceField(choices=Lesson.LessonType.choices, required=False)
    start = serializers.DateTimeField(required=False)
    end = serializers.DateTimeField(required=False)
    rate = serializers.DecimalField(max_digits=10, decimal_places=2, required=False, allow_null=True)
    is_billable = serializers.BooleanField(required=False)
    notes = serializers.CharField(required=False, allow_blank=True)


class LessonQuerySerializer(serializers.Serializer):
    year = serializers.IntegerField(min_value=2000, max_value=2100, required=False)
    month = serializers.IntegerField(min_value=1, max_value=12, required=False)
    customer = serializers.IntegerField(required=False)
    status = serializers.ChoiceField(choices=Lesson.Status.choices, required=False, allow_blank=True)
    uninvoiced = serializers.BooleanField(required=False, default=False)

    def validate(self, attrs):
        if ("year" in attrs) != ("month" in attrs):
            raise serializers.ValidationError("year and month must be given together.")
        return attrs


class LessonStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Lesson.Status.choices)
    cancellation_reason = serializers.CharField(required=False, allow_blank=True, default="")


class LessonReassignSerializer(serializers.Serializer):
    teacher_id = serializers.IntegerField()


class LessonBulkDeleteSerializer(serializers.Serializer):
    lesson_ids = serializers.ListField(child=serializers.IntegerField(), allow_empty=False)


# =============================================================================
# Attendance reports
# =============================================================================

class StudentProgressSerializer(serializers.ModelSerializer):
    student_name = serializers.SerializerMethodField()

    class Meta:
        model = StudentProgress
        fields = ("id", "student", "student_name", "progress_notes", "skill_level")

    def get_student_name(self, obj):
        return f"{obj.student.first_name} {obj.student.last_name}".strip()


class AttendanceReportSerializer(serializers.ModelSerializer):
    lesson_title = serializers.CharField(source="lesson.title", read_only=True)
    lesson_start = serializers.DateTimeField(source="lesson.start", read_only=True)
    progress = StudentProgressSerializer(many=True, read_only=True)

    class Meta:
        model = AttendanceReport
        fields = (
            "id", "lesson", "lesson_title", "lesson_start", "customer", "group",
            "students_present", "students_absent", "general_notes", "progress",
            "report_date", "created_by", "created_at", "updated_at",
        )


class StudentProgressInputSerializer(serializers.Serializer):
    student_id = serializers.IntegerField()
    progress_notes = serializers.CharField()
    skill_level = serializers.ChoiceField(
        choices=StudentProgress.SkillLevel.choices, required=False, allow_blank=True, default="",
    )


class AttendanceReportCreateSerializer(serializers.Serializer):
    lesson_id = serializers.IntegerField()
    students_present = serializers.ListField(child=serializers.IntegerField(), required=False, default=list)
    students_absent = serializers.ListField(child=serializers.IntegerField(), required=False, default=list)
    general_notes = serializers.CharField(required=False, allow_blank=True, default="")
    student_progress = StudentProgressInputSerializer(many=True, required=False, default=list)


class AttendanceReportUpdateSerializer(serializers.Serializer):
    students_present = serializers.ListField(child=serializers.IntegerField(), required=False)
    students_absent = serializers.ListField(child=serializers.IntegerField(), required=False)
    general_notes = serializers.CharField(required=False, allow_blank=True)
    student_progress = StudentProgressInputSerializer(many=True, required=False)


class AttendanceReportQuerySerializer(serializers.Serializer):
    lesson = serializers.IntegerField(required=False)
    customer = serializers.IntegerField(required=False)
    group = serializers.IntegerField(required=False)
    date_from = serializers.DateField(required=False)
    date_to = serializers.DateField(required=False)
