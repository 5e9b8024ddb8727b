from decimal import Decimal

from django.conf import settings
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from accounts.models import Workspace, WorkspaceScopedModel


class CompanySettings(models.Model):
    """
    Letterhead, bank details and invoicing defaults of a workspace.

    There is at most one row per workspace. ``next_invoice_number`` is the
    sequential counter used for automatic invoice numbers.
    """

    workspace = models.OneToOneField(Workspace, on_delete=models.CASCADE, related_name="company_settings")

    company_name = models.CharField(max_length=255, default="My Company")
    owner_name = models.CharField(max_length=255, blank=True)
    address_line1 = models.CharField(max_length=255, blank=True)
    address_line2 = models.CharField(max_length=255, blank=True)
    zip_code = models.CharField(max_length=20, blank=True)
    city = models.CharField(max_length=150, blank=True)
    country = models.CharField(max_length=150, default="Germany")
    tax_number = models.CharField(max_length=50, blank=True)
    vat_id = models.CharField(max_length=50, blank=True)
    phone1 = models.CharField(max_length=50, blank=True)
    phone2 = models.CharField(max_length=50, blank=True)
    email = models.CharField(max_length=254, blank=True)
    website = models.CharField(max_length=255, blank=True)

    bank_name = models.CharField(max_length=255, blank=True)
    iban = models.CharField(max_length=34, blank=True)
    bic = models.CharField(max_length=11, blank=True)

    invoice_prefix = models.CharField(max_length=20, blank=True)
    next_invoice_number = models.PositiveIntegerField(default=1000)
    default_payment_terms_days = models.PositiveIntegerField(default=14)
    default_tax_rate = models.DecimalField(max_digits=5, decimal_places=2, default=Decimal("19"))
    default_hourly_rate = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    tax_exemption_enabled = models.BooleanField(default=False)
    tax_exemption_legal_basis = models.CharField(max_length=255, blank=True)
    payment_instruction_template = models.TextField(blank=True)
    email_subject_template = models.CharField(max_length=255, blank=True)
    email_body_template = models.TextField(blank=True)

    # Storage name inside default_storage.
    logo = models.CharField(max_length=255, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name_plural = _("Company settings")

    def __str__(self):
        return f"{self.company_name} ({self.workspace_id})"


class Product(WorkspaceScopedModel):
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    unit = models.CharField(max_length=30, default="Hour")
    unit_price = models.DecimalField(max_digits=10, decimal_places=2)
    tax_rate = models.DecimalField(max_digits=5, decimal_places=2, default=Decimal("19"))
    is_active = models.BooleanField(default=True)

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return self.name


class Invoice(WorkspaceScopedModel):
    class Status(models.TextChoices):
        DRAFT = "draft", _("Draft")
        SENT = "sent", _("Sent")
        PAID = "paid", _("Paid")
        CANCELLED = "cancelled", _("Cancelled")
        ARCHIVED = "archived", _("Archived")

    # Invoices outlive their customer (retention), hence SET_NULL + name snapshot.
    customer = models.ForeignKey(
        "customers.Customer",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="invoices",
    )
    customer_name = models.CharField(max_length=255, blank=True)
    invoice_number = models.CharField(max_length=50)
    date = models.DateField()
    due_date = models.DateField()
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.DRAFT)

    subtotal = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0"))
    tax_total = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0"))
    total = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0"))

    notes = models.TextField(blank=True)
    payment_terms = models.CharField(max_length=100, blank=True)
    sent_at = models.DateTimeField(null=True, blank=True)
    paid_at = models.DateTimeField(null=True, blank=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )

    class Meta:
        ordering = ["-date", "-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["workspace", "invoice_number"],
                name="uniq_invoice_number_per_workspace",
            ),
        ]

    def __str__(self):
        return self.invoice_number

    @property
    def is_overdue(self) -> bool:
        return self.status == self.Status.SENT and self.due_date < timezone.localdate()


class InvoiceItem(models.Model):
    invoice = models.ForeignKey(Invoice, on_delete=models.CASCADE, related_name="items")
    product = models.ForeignKey(Product, on_delete=models.SET_NULL, null=True, blank=True, related_name="+")
    position = models.PositiveIntegerField(default=0)
    description = models.CharField(max_length=500)
    quantity = models.DecimalField(max_digits=10, decimal_places=2)
    unit = models.CharField(max_length=30, blank=True)
    unit_price = models.DecimalField(max_digits=10, decimal_places=2)
    tax_rate = models.DecimalField(max_digits=5, decimal_places=2, default=Decimal("0"))
    total = models.DecimalField(max_digits=12, decimal_places=2)
    service_date = models.DateField(null=True, blank=True)
    start_time = models.CharField(max_length=5, blank=True)
    end_time = models.CharField(max_length=5, blank=True)

    class Meta:
        ordering = ["position", "id"]

    def __str__(self):
        return self.description


class InvoiceAuditLog(models.Model):
    """Append-only trail of what happened to an invoice."""

    workspace = models.ForeignKey(Workspace, on_delete=models.CASCADE, related_name="invoice_audit_logs")
    invoice = models.ForeignKey(
        Invoice,
        on_delete=models.SET_NULL,
        null=True,
        related_name="audit_logs",
    )
    invoice_number = models.CharField(max_length=50)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        related_name="+",
    )
    action = models.CharField(max_length=50)
    details = models.TextField(blank=True)
    timestamp = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-timestamp", "-id"]

    def __str__(self):
        return f"{self.invoice_number}: {self.action}"


class ArchivedInvoice(models.Model):
    workspace = models.ForeignKey(Workspace, on_delete=models.CASCADE, related_name="archived_invoices")
    invoice = models.OneToOneField(Invoice, on_delete=models.CASCADE, related_name="archive")
    invoice_number = models.CharField(max_length=50)
    # Storage name inside default_storage.
    pdf = models.CharField(max_length=255)
    archived_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        related_name="+",
    )
    archived_at = models.DateTimeField(auto_now_add=True)
    retention_until = models.DateTimeField()

    class Meta:
        ordering = ["-archived_at"]

    def __str__(self):
        return self.invoice_number


class Lesson(WorkspaceScopedModel):
    """A billable teaching session; consumed by monthly invoice generation."""

    class LessonType(models.TextChoices):
        IN_PERSON = "in_person", _("In person")
        ONLINE = "online", _("Online")

    class Status(models.TextChoices):
        SCHEDULED = "scheduled", _("Scheduled")
        ATTENDED = "attended", _("Attended")
        CANCELLED_ON_TIME = "cancelled_on_time", _("Cancelled on time")
        CANCELLED_LATE = "cancelled_late", _("Cancelled late")
        MISSED = "missed", _("Missed")

    customer = models.ForeignKey("customers.Customer", on_delete=models.CASCADE, related_name="lessons")
    group = models.ForeignKey(
        "customers.StudentGroup",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="lessons",
    )
    student = models.ForeignKey(
        "customers.Student",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="lessons",
    )
    teacher = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="taught_lessons",
    )
    title = models.CharField(max_length=255)
    lesson_type = models.CharField(max_length=20, choices=LessonType.choices, default=LessonType.IN_PERSON)
    start = models.DateTimeField()
    end = models.DateTimeField()
    # Fixed price per lesson; when empty the hourly rate applies.
    rate = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    is_billable = models.BooleanField(default=True)
    notes = models.TextField(blank=True)

    status = models.CharField(max_length=20, choices=Status.choices, default=Status.SCHEDULED)
    cancelled_at = models.DateTimeField(null=True, blank=True)
    cancelled_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    cancellation_reason = models.TextField(blank=True)

    invoice = models.ForeignKey(
        Invoice,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="lessons",
    )

    class Meta:
        ordering = ["start"]

    def __str__(self):
        return f"{self.title} ({self.start:%Y-%m-%d})"


class AttendanceReport(WorkspaceScopedModel):
    """Who came to a lesson, with optional per-student progress notes."""

    lesson = models.OneToOneField(Lesson, on_delete=models.CASCADE, related_name="attendance_report")
    customer = models.ForeignKey("customers.Customer", on_delete=models.CASCADE, related_name="attendance_reports")
    group = models.ForeignKey(
        "customers.StudentGroup",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="attendance_reports",
    )
    students_present = models.ManyToManyField("customers.Student", blank=True, related_name="+")
    students_absent = models.ManyToManyField("customers.Student", blank=True, related_name="+")
    general_notes = models.TextField(blank=True)
    report_date = models.DateTimeField(default=timezone.now)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        related_name="+",
    )

    class Meta:
        ordering = ["-report_date", "-id"]

    def __str__(self):
        return f"Attendance {self.lesson_id}"


class StudentProgress(models.Model):
    class SkillLevel(models.TextChoices):
        BEGINNER = "beginner", _("Beginner")
        INTERMEDIATE = "intermediate", _("Intermediate")
        ADVANCED = "advanced", _("Advanced")
        PROFICIENT = "proficient", _("Proficient")

    report = models.ForeignKey(AttendanceReport, on_delete=models.CASCADE, related_name="progress")
    student = models.ForeignKey("customers.Student", on_delete=models.CASCADE, related_name="progress_notes")
    progress_notes = models.TextField()
    skill_level = models.CharField(max_length=20, choices=SkillLevel.choices, blank=True)

    class Meta:
        ordering = ["id"]
        constraints = [
            models.UniqueConstraint(fields=["report", "student"], name="uniq_progress_per_report_student"),
        ]

    def __str__(self):
        return f"{self.student_id}: {self.skill_level or '-'}"
