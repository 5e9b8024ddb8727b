# invoicing/commands.py
"""
Command layer for invoicing.

Covers company settings, products, invoices (numbering, totals, status,
GoBD archive, audit trail), lessons with their status and attendance
reports, and monthly invoice generation.

Pattern:
1. Validate permissions (require)
2. Load the target row scoped to the actor's workspace
3. Apply business rules (draft-only edits, unique numbers)
4. Write an audit entry for invoice changes
5. Return CommandResult
"""

import logging
import os
from datetime import datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal

from django.conf import settings as django_settings
from django.contrib.auth import get_user_model
from django.core.files.storage import default_storage
from django.db import transaction
from django.utils import timezone

from accounts.authz import ActorContext, Capability, require
from accounts.commands import CommandResult
from accounts.models import PermissionModule, WorkspacePermission
from customers.models import Customer, Student, StudentGroup
from invoicing.models import (
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
from invoicing.numbering import (
    allocate_invoice_number,
    register_manual_number,
)

logger = logging.getLogger(__name__)

MODULE = PermissionModule.INVOICING
SETTINGS_MODULE = PermissionModule.SETTINGS

CENT = Decimal("0.01")
DEFAULT_TAX_RATE = Decimal("19")
DEFAULT_PAYMENT_TERMS_DAYS = 14

COMPANY_SETTINGS_FIELDS = (
    "company_name", "owner_name", "address_line1", "address_line2",
    "zip_code", "city", "country", "tax_number", "vat_id",
    "phone1", "phone2", "email", "website",
    "bank_name", "iban", "bic",
    "invoice_prefix", "next_invoice_number",
    "default_payment_terms_days", "default_tax_rate", "default_hourly_rate",
    "tax_exemption_enabled", "tax_exemption_legal_basis",
    "payment_instruction_template", "email_subject_template", "email_body_template",
)

PRODUCT_FIELDS = ("name", "description", "unit", "unit_price", "tax_rate", "is_active")


def money(value) -> Decimal:
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def calculate_totals(items: list[dict]) -> dict:
    """
    Line total = quantity x unit price; line tax = line total x rate / 100.

    Returns:
        {"subtotal", "tax_total", "total"} rounded to cents
    """
    subtotal = Decimal("0")
    tax_total = Decimal("0")
    for item in items:
        line_total = Decimal(item["quantity"]) * Decimal(item["unit_price"])
        subtotal += line_total
        tax_total += line_total * Decimal(item.get("tax_rate") or 0) / 100

    subtotal = money(subtotal)
    tax_total = money(tax_total)
    return {"subtotal": subtotal, "tax_total": tax_total, "total": subtotal + tax_total}


def _audit(actor: ActorContext, invoice: Invoice, action: str, details: str = "") -> InvoiceAuditLog:
    return InvoiceAuditLog.objects.create(
        workspace=actor.workspace,
        invoice=invoice,
        invoice_number=invoice.invoice_number,
        user=actor.user,
        action=action,
        details=details,
    )


def _create_items(actor: ActorContext, invoice: Invoice, items: list[dict]) -> None:
    product_ids = {item["product_id"] for item in items if item.get("product_id")}
    products = Product.objects.filter(workspace=actor.workspace, pk__in=product_ids).in_bulk()

    InvoiceItem.objects.bulk_create([
        InvoiceItem(
            invoice=invoice,
            product=products.get(item.get("product_id")),
            position=position,
            description=item["description"],
            quantity=item["quantity"],
            unit=item.get("unit", ""),
            unit_price=item["unit_price"],
            tax_rate=item.get("tax_rate") or 0,
            total=money(Decimal(item["quantity"]) * Decimal(item["unit_price"])),
            service_date=item.get("service_date"),
            start_time=item.get("start_time", ""),
            end_time=item.get("end_time", ""),
        )
        for position, item in enumerate(items)
    ])


def _customer_in_workspace(actor: ActorContext, customer_id: int):
    return Customer.objects.filter(pk=customer_id, workspace=actor.workspace).first()


# =============================================================================
# Company settings
# =============================================================================

@transaction.atomic
def save_company_settings(actor: ActorContext, **changes) -> CommandResult:
    """
    Create or update the workspace's company settings.

    Settings are shared by everyone in the workspace, hence EDIT_SHARED.
    Fields not given keep their current (or default) values.
    """
    require(actor, SETTINGS_MODULE, Capability.EDIT_SHARED)

    company, created = CompanySettings.objects.select_for_update().get_or_create(
        workspace=actor.workspace,
        defaults={"next_invoice_number": django_settings.DEFAULT_INVOICE_START_NUMBER},
    )
    for field, value in changes.items():
        if field in COMPANY_SETTINGS_FIELDS:
            setattr(company, field, value)
    company.save()

    if created:
        logger.info(f"Created company settings for workspace {actor.workspace.pk}")
    return CommandResult.ok(company)


@transaction.atomic
def upload_company_logo(actor: ActorContext, logo_file) -> CommandResult:
    """Store a new logo through default_storage; the previous file is removed."""
    require(actor, SETTINGS_MODULE, Capability.EDIT_SHARED)

    company, _ = CompanySettings.objects.select_for_update().get_or_create(
        workspace=actor.workspace,
        defaults={"next_invoice_number": django_settings.DEFAULT_INVOICE_START_NUMBER},
    )

    extension = os.path.splitext(logo_file.name or "")[1].lower() or ".png"
    stored_name = default_storage.save(f"logos/workspace-{actor.workspace.pk}{extension}", logo_file)

    previous = company.logo
    company.logo = stored_name
    company.save(update_fields=["logo", "updated_at"])

    if previous and previous != stored_name:
        transaction.on_commit(lambda: default_storage.delete(previous))

    return CommandResult.ok(company)


# =============================================================================
# Products
# =============================================================================

@transaction.atomic
def create_product(actor: ActorContext, **data) -> CommandResult:
    require(actor, MODULE, Capability.ADD)

    fields = {k: v for k, v in data.items() if k in PRODUCT_FIELDS}
    product = Product.objects.create(workspace=actor.workspace, **fields)
    return CommandResult.ok(product)


@transaction.atomic
def update_product(actor: ActorContext, product_id: int, **changes) -> CommandResult:
    require(actor, MODULE, Capability.ADD)

    try:
        product = Product.objects.select_for_update().get(pk=product_id, workspace=actor.workspace)
    except Product.DoesNotExist:
        return CommandResult.missing("Product")

    for field, value in changes.items():
        if field in PRODUCT_FIELDS:
            setattr(product, field, value)
    product.save()
    return CommandResult.ok(product)


@transaction.atomic
def delete_product(actor: ActorContext, product_id: int) -> CommandResult:
    """Existing invoice items keep their copied description and price."""
    require(actor, MODULE, Capability.DELETE)

    deleted, _ = Product.objects.filter(pk=product_id, workspace=actor.workspace).delete()
    if not deleted:
        return CommandResult.missing("Product")
    return CommandResult.ok()


# =============================================================================
# Invoices
# =============================================================================

@transaction.atomic
def create_invoice(
    actor: ActorContext,
    customer_id: int,
    date,
    due_date,
    items: list,
    notes: str = "",
    payment_terms: str = "",
    status: str = Invoice.Status.DRAFT,
    manual_invoice_number: str = None,
) -> CommandResult:
    """
    Create an invoice with its items.

    Without ``manual_invoice_number`` the number is allocated as
    ``YY/MM/<counter>`` from the invoice date. A manual number must be
    unique in the workspace and may advance the counter.
    """
    require(actor, MODULE, Capability.ADD)

    customer = _customer_in_workspace(actor, customer_id)
    if customer is None:
        return CommandResult.missing("Customer")

    if manual_invoice_number:
        manual_invoice_number = manual_invoice_number.strip()
        if Invoice.objects.filter(workspace=actor.workspace, invoice_number=manual_invoice_number).exists():
            return CommandResult.fail(f"Invoice number {manual_invoice_number} already exists")
        register_manual_number(actor.workspace, manual_invoice_number)
        invoice_number = manual_invoice_number
    else:
        invoice_number = allocate_invoice_number(actor.workspace, date)

    invoice = Invoice.objects.create(
        workspace=actor.workspace,
        customer=customer,
        customer_name=customer.name,
        invoice_number=invoice_number,
        date=date,
        due_date=due_date,
        status=status,
        notes=notes,
        payment_terms=payment_terms,
        created_by=actor.user,
        **calculate_totals(items),
    )
    _create_items(actor, invoice, items)
    _audit(actor, invoice, "created")

    logger.info(f"Created invoice {invoice_number} in workspace {actor.workspace.pk}")
    return CommandResult.ok(invoice)


@transaction.atomic
def update_invoice(
    actor: ActorContext,
    invoice_id: int,
    customer_id: int,
    date,
    due_date,
    items: list,
    notes: str = "",
    payment_terms: str = "",
) -> CommandResult:
    """Replace header fields and items of a draft invoice."""
    require(actor, MODULE, Capability.ADD)

    try:
        invoice = Invoice.objects.select_for_update().get(pk=invoice_id, workspace=actor.workspace)
    except Invoice.DoesNotExist:
        return CommandResult.missing("Invoice")

    if invoice.status != Invoice.Status.DRAFT:
        return CommandResult.fail(
            "Cannot edit non-draft invoices. Create a credit note or new invoice instead."
        )

    customer = _customer_in_workspace(actor, customer_id)
    if customer is None:
        return CommandResult.missing("Customer")

    invoice.customer = customer
    invoice.customer_name = customer.name
    invoice.date = date
    invoice.due_date = due_date
    invoice.notes = notes
    invoice.payment_terms = payment_terms
    for field, value in calculate_totals(items).items():
        setattr(invoice, field, value)
    invoice.save()

    invoice.items.all().delete()
    _create_items(actor, invoice, items)
    _audit(actor, invoice, "updated")
    return CommandResult.ok(invoice)


@transaction.atomic
def update_invoice_status(actor: ActorContext, invoice_id: int, status: str) -> CommandResult:
    """sent_at and paid_at are stamped on the first transition only."""
    require(actor, MODULE, Capability.ADD)

    try:
        invoice = Invoice.objects.select_for_update().get(pk=invoice_id, workspace=actor.workspace)
    except Invoice.DoesNotExist:
        return CommandResult.missing("Invoice")

    now = timezone.now()
    invoice.status = status
    if status == Invoice.Status.SENT and invoice.sent_at is None:
        invoice.sent_at = now
    if status == Invoice.Status.PAID and invoice.paid_at is None:
        invoice.paid_at = now
    invoice.save(update_fields=["status", "sent_at", "paid_at", "updated_at"])

    _audit(actor, invoice, f"status_change_to_{status}")
    return CommandResult.ok(invoice)


@transaction.atomic
def delete_invoice(actor: ActorContext, invoice_id: int) -> CommandResult:
    """Delete a draft invoice with its items; its lessons become billable again."""
    require(actor, MODULE, Capability.DELETE)

    try:
        invoice = Invoice.objects.select_for_update().get(pk=invoice_id, workspace=actor.workspace)
    except Invoice.DoesNotExist:
        return CommandResult.missing("Invoice")

    if invoice.status != Invoice.Status.DRAFT:
        return CommandResult.fail("Only draft invoices can be deleted. Cancel sent invoices instead.")

    unlinked = Lesson.objects.filter(invoice=invoice).update(invoice=None, updated_at=timezone.now())
    items, _ = invoice.items.all().delete()
    number = invoice.invoice_number
    invoice.delete()

    logger.info(f"Deleted draft invoice {number}: {items} items, {unlinked} lessons unlinked")
    return CommandResult.ok({"items": items, "lessons_unlinked": unlinked})


@transaction.atomic
def archive_invoice(actor: ActorContext, invoice_id: int, pdf_file) -> CommandResult:
    """
    Archive an invoice for the statutory retention period.

    The PDF is written to default_storage and the invoice becomes
    ``archived``. An invoice can be archived once.
    """
    require(actor, MODULE, Capability.ADD)

    try:
        invoice = Invoice.objects.select_for_update().get(pk=invoice_id, workspace=actor.workspace)
    except Invoice.DoesNotExist:
        return CommandResult.missing("Invoice")

    if ArchivedInvoice.objects.filter(invoice=invoice).exists():
        return CommandResult.fail("Invoice is already archived")

    safe_number = invoice.invoice_number.replace("/", "-")
    stored_name = default_storage.save(
        f"invoices/workspace-{actor.workspace.pk}/{safe_number}.pdf", pdf_file
    )

    now = timezone.now()
    archive = ArchivedInvoice.objects.create(
        workspace=actor.workspace,
        invoice=invoice,
        invoice_number=invoice.invoice_number,
        pdf=stored_name,
        archived_by=actor.user,
        retention_until=now + timedelta(days=365 * django_settings.INVOICE_RETENTION_YEARS),
    )

    invoice.status = Invoice.Status.ARCHIVED
    invoice.save(update_fields=["status", "updated_at"])
    _audit(actor, invoice, "archived", details=f"PDF stored as {stored_name}")

    logger.info(f"Archived invoice {invoice.invoice_number} until {archive.retention_until:%Y-%m-%d}")
    return CommandResult.ok(archive)


# =============================================================================
# Lessons
# =============================================================================

def _lesson_relations(actor: ActorContext, customer, group_id=None, student_id=None):
    """Resolve optional group/student; both must belong to the customer."""
    group = student = None
    if group_id is not None:
        group = StudentGroup.objects.filter(pk=group_id, workspace=actor.workspace).first()
        if group is None:
            return None, None, CommandResult.missing("Group")
        if group.customer_id != customer.pk:
            return None, None, CommandResult.fail("Group belongs to a different customer.")
    if student_id is not None:
        student = Student.objects.filter(pk=student_id, workspace=actor.workspace).first()
        if student is None:
            return None, None, CommandResult.missing("Student")
        if student.customer_id != customer.pk:
            return None, None, CommandResult.fail("Student belongs to a different customer.")
    return group, student, None


def _workspace_teacher(actor: ActorContext, user_id: int):
    """A teacher is the workspace owner or a user holding a grant in the workspace."""
    user = get_user_model().objects.filter(pk=user_id).first()
    if user is None:
        return None, CommandResult.missing("Teacher")
    if user.pk != actor.workspace.owner_id and not WorkspacePermission.objects.filter(
        workspace=actor.workspace, user=user
    ).exists():
        return None, CommandResult.fail("Teacher is not a member of this workspace.")
    return user, None


@transaction.atomic
def create_lesson(
    actor: ActorContext,
    customer_id: int,
    title: str,
    start,
    end,
    rate=None,
    is_billable: bool = True,
    notes: str = "",
    group_id: int = None,
    student_id: int = None,
    lesson_type: str = Lesson.LessonType.IN_PERSON,
    teacher_id: int = None,
) -> CommandResult:
    require(actor, MODULE, Capability.ADD)

    if end <= start:
        return CommandResult.fail("Lesson end must be after its start.")

    customer = _customer_in_workspace(actor, customer_id)
    if customer is None:
        return CommandResult.missing("Customer")

    group, student, error = _lesson_relations(actor, customer, group_id, student_id)
    if error:
        return error

    teacher = None
    if teacher_id is not None:
        teacher, error = _workspace_teacher(actor, teacher_id)
        if error:
            return error

    lesson = Lesson.objects.create(
        workspace=actor.workspace,
        customer=customer,
        group=group,
        student=student,
        teacher=teacher,
        title=title,
        lesson_type=lesson_type,
        start=start,
        end=end,
        rate=rate,
        is_billable=is_billable,
        notes=notes,
    )
    return CommandResult.ok(lesson)


@transaction.atomic
def update_lesson(actor: ActorContext, lesson_id: int, **changes) -> CommandResult:
    require(actor, MODULE, Capability.ADD)

    try:
        lesson = Lesson.objects.select_for_update().select_related("customer").get(
            pk=lesson_id, workspace=actor.workspace
        )
    except Lesson.DoesNotExist:
        return CommandResult.missing("Lesson")

    if "customer_id" in changes and changes["customer_id"] != lesson.customer_id:
        customer = _customer_in_workspace(actor, changes["customer_id"])
        if customer is None:
            return CommandResult.missing("Customer")
        lesson.customer = customer
        lesson.group = None
        lesson.student = None

    if "group_id" in changes or "student_id" in changes:
        group, student, error = _lesson_relations(
            actor,
            lesson.customer,
            changes.get("group_id", lesson.group_id),
            changes.get("student_id", lesson.student_id),
        )
        if error:
            return error
        lesson.group = group
        lesson.student = student

    if "teacher_id" in changes:
        lesson.teacher = None
        if changes["teacher_id"] is not None:
            teacher, error = _workspace_teacher(actor, changes["teacher_id"])
            if error:
                return error
            lesson.teacher = teacher

    for field in ("title", "lesson_type", "start", "end", "rate", "is_billable", "notes"):
        if field in changes:
            setattr(lesson, field, changes[field])

    if lesson.end <= lesson.start:
        return CommandResult.fail("Lesson end must be after its start.")

    lesson.save()
    return CommandResult.ok(lesson)


@transaction.atomic
def delete_lesson(actor: ActorContext, lesson_id: int) -> CommandResult:
    require(actor, MODULE, Capability.DELETE)

    deleted, _ = Lesson.objects.filter(pk=lesson_id, workspace=actor.workspace).delete()
    if not deleted:
        return CommandResult.missing("Lesson")
    return CommandResult.ok()


@transaction.atomic
def delete_lessons(actor: ActorContext, lesson_ids: list[int]) -> CommandResult:
    """Delete several lessons at once. Ids outside the workspace are skipped."""
    require(actor, MODULE, Capability.DELETE)

    lessons = Lesson.objects.filter(workspace=actor.workspace, pk__in=lesson_ids)
    found = set(lessons.values_list("pk", flat=True))
    lessons.delete()

    skipped = [pk for pk in lesson_ids if pk not in found]
    logger.info(f"Deleted {len(found)} lessons in workspace {actor.workspace.pk}, skipped {len(skipped)}")
    return CommandResult.ok({"deleted": sorted(found), "skipped": skipped})


@transaction.atomic
def reassign_lesson(actor: ActorContext, lesson_id: int, teacher_id: int) -> CommandResult:
    from invoicing.email_service import send_reassignment_email

    require(actor, MODULE, Capability.ADD)

    try:
        lesson = Lesson.objects.select_for_update().select_related("customer").get(
            pk=lesson_id, workspace=actor.workspace
        )
    except Lesson.DoesNotExist:
        return CommandResult.missing("Lesson")

    teacher, error = _workspace_teacher(actor, teacher_id)
    if error:
        return error

    lesson.teacher = teacher
    lesson.save(update_fields=["teacher", "updated_at"])
    transaction.on_commit(lambda: send_reassignment_email(lesson))
    logger.info(f"Lesson {lesson.pk} reassigned to user {teacher.pk}")
    return CommandResult.ok(lesson)


# =============================================================================
# Lesson status and cancellation policy
# =============================================================================

ONLINE_CANCELLATION_WINDOW = timedelta(hours=24)
IN_PERSON_CANCELLATION_WINDOW = timedelta(hours=48)

CANCELLED_STATUSES = (Lesson.Status.CANCELLED_ON_TIME, Lesson.Status.CANCELLED_LATE)
SETTABLE_STATUSES = (
    Lesson.Status.ATTENDED,
    Lesson.Status.CANCELLED_ON_TIME,
    Lesson.Status.CANCELLED_LATE,
    Lesson.Status.MISSED,
)


def cancellation_window(lesson: Lesson) -> timedelta:
    if lesson.lesson_type == Lesson.LessonType.ONLINE:
        return ONLINE_CANCELLATION_WINDOW
    return IN_PERSON_CANCELLATION_WINDOW


@transaction.atomic
def update_lesson_status(
    actor: ActorContext,
    lesson_id: int,
    status: str,
    cancellation_reason: str = "",
    now=None,
) -> CommandResult:
    """
    Record what happened to a lesson and derive whether it is billed.

    Attended and missed lessons are billable. Cancellations follow the
    cancellation window (24h online, 48h in person): inside it a lesson can
    only be cancelled late, which is billed; outside it only on time, which
    is not. Actors with shared edit rights on invoicing pick either
    cancellation status freely. Invoiced lessons are locked.
    """
    from invoicing.email_service import send_cancellation_email

    require(actor, MODULE, Capability.ADD)

    if status not in SETTABLE_STATUSES:
        return CommandResult.fail("Unsupported lesson status.")

    try:
        lesson = Lesson.objects.select_for_update().select_related("student").get(
            pk=lesson_id, workspace=actor.workspace
        )
    except Lesson.DoesNotExist:
        return CommandResult.missing("Lesson")

    if lesson.invoice_id:
        return CommandResult.fail("Invoiced lessons cannot change status.")

    now = now or timezone.now()

    if status not in CANCELLED_STATUSES:
        billable = True
    elif actor.can(MODULE, Capability.EDIT_SHARED):
        billable = status == Lesson.Status.CANCELLED_LATE
    else:
        inside_window = lesson.start - now < cancellation_window(lesson)
        if inside_window and status == Lesson.Status.CANCELLED_ON_TIME:
            return CommandResult.fail(
                "Too late to cancel without penalty. Please contact admin or mark as Cancelled Late."
            )
        if not inside_window and status == Lesson.Status.CANCELLED_LATE:
            return CommandResult.fail(
                "The lesson can still be cancelled without penalty. Mark it as Cancelled on time."
            )
        billable = status == Lesson.Status.CANCELLED_LATE

    lesson.status = status
    lesson.is_billable = billable
    if status == Lesson.Status.ATTENDED:
        lesson.cancelled_at = None
        lesson.cancelled_by = None
        lesson.cancellation_reason = ""
    else:
        lesson.cancelled_at = now
        lesson.cancelled_by = actor.user
        lesson.cancellation_reason = cancellation_reason
    lesson.save()

    if status in CANCELLED_STATUSES:
        transaction.on_commit(lambda: send_cancellation_email(lesson))

    logger.info(f"Lesson {lesson.pk} marked {status} (billable={billable}) by user {actor.user.pk}")
    return CommandResult.ok(lesson)


# =============================================================================
# Attendance reports
# =============================================================================

def _attendance_students(actor: ActorContext, customer, present_ids, absent_ids, progress):
    """Resolve report students; every one must be a student of the customer."""
    present_ids, absent_ids = list(dict.fromkeys(present_ids)), list(dict.fromkeys(absent_ids))
    if set(present_ids) & set(absent_ids):
        return None, None, CommandResult.fail("A student cannot be both present and absent.")

    progress_ids = [entry["student_id"] for entry in progress]
    if len(set(progress_ids)) != len(progress_ids):
        return None, None, CommandResult.fail("Only one progress note per student is allowed.")

    wanted = set(present_ids) | set(absent_ids) | set(progress_ids)
    students = {
        student.pk: student
        for student in Student.objects.filter(pk__in=wanted, workspace=actor.workspace, customer=customer)
    }
    if len(students) != len(wanted):
        return None, None, CommandResult.fail("Students must belong to the lesson's customer.")

    return [students[pk] for pk in present_ids], [students[pk] for pk in absent_ids], None


def _replace_progress(report: AttendanceReport, progress) -> None:
    report.progress.all().delete()
    StudentProgress.objects.bulk_create(
        StudentProgress(
            report=report,
            student_id=entry["student_id"],
            progress_notes=entry["progress_notes"],
            skill_level=entry.get("skill_level", ""),
        )
        for entry in progress
    )


@transaction.atomic
def create_attendance_report(
    actor: ActorContext,
    lesson_id: int,
    students_present=(),
    students_absent=(),
    general_notes: str = "",
    student_progress=(),
) -> CommandResult:
    """File the attendance report of a lesson. A lesson has at most one."""
    require(actor, MODULE, Capability.ADD)

    try:
        lesson = Lesson.objects.select_for_update().select_related("customer").get(
            pk=lesson_id, workspace=actor.workspace
        )
    except Lesson.DoesNotExist:
        return CommandResult.missing("Lesson")

    if AttendanceReport.objects.filter(lesson=lesson).exists():
        return CommandResult.fail("This lesson already has an attendance report.")

    present, absent, error = _attendance_students(
        actor, lesson.customer, students_present, students_absent, student_progress
    )
    if error:
        return error

    report = AttendanceReport.objects.create(
        workspace=actor.workspace,
        lesson=lesson,
        customer=lesson.customer,
        group=lesson.group,
        general_notes=general_notes,
        created_by=actor.user,
    )
    report.students_present.set(present)
    report.students_absent.set(absent)
    _replace_progress(report, student_progress)

    logger.info(f"Attendance report {report.pk} filed for lesson {lesson.pk}")
    return CommandResult.ok(report)


@transaction.atomic
def update_attendance_report(actor: ActorContext, report_id: int, **changes) -> CommandResult:
    require(actor, MODULE, Capability.ADD)

    try:
        report = AttendanceReport.objects.select_for_update().select_related("customer").get(
            pk=report_id, workspace=actor.workspace
        )
    except AttendanceReport.DoesNotExist:
        return CommandResult.missing("Attendance report")

    present_ids = changes.get("students_present")
    if present_ids is None:
        present_ids = list(report.students_present.values_list("pk", flat=True))
    absent_ids = changes.get("students_absent")
    if absent_ids is None:
        absent_ids = list(report.students_absent.values_list("pk", flat=True))
    progress = changes.get("student_progress")

    present, absent, error = _attendance_students(
        actor, report.customer, present_ids, absent_ids, progress or []
    )
    if error:
        return error

    if "general_notes" in changes:
        report.general_notes = changes["general_notes"]
    report.save()
    report.students_present.set(present)
    report.students_absent.set(absent)
    if progress is not None:
        _replace_progress(report, progress)

    return CommandResult.ok(report)


@transaction.atomic
def delete_attendance_report(actor: ActorContext, report_id: int) -> CommandResult:
    require(actor, MODULE, Capability.DELETE)

    deleted, _ = AttendanceReport.objects.filter(pk=report_id, workspace=actor.workspace).delete()
    if not deleted:
        return CommandResult.missing("Attendance report")
    return CommandResult.ok()


# =============================================================================
# Monthly generation
# =============================================================================

def month_bounds(year: int, month: int):
    """Aware [start, end) datetimes of a calendar month in the current timezone."""
    start = timezone.make_aware(datetime(year, month, 1))
    if month == 12:
        end = timezone.make_aware(datetime(year + 1, 1, 1))
    else:
        end = timezone.make_aware(datetime(year, month + 1, 1))
    return start, end


def lesson_item(lesson: Lesson, hourly_rate: Decimal, tax_rate: Decimal) -> dict:
    """
    Invoice line for a lesson.

    A fixed lesson rate bills 1 x rate per "Lesson"; otherwise the duration
    in hours (two decimals) is billed at the hourly rate.
    """
    start = timezone.localtime(lesson.start)
    end = timezone.localtime(lesson.end)

    if lesson.rate:
        quantity, unit, unit_price = Decimal("1"), "Lesson", money(lesson.rate)
    else:
        hours = Decimal(str((lesson.end - lesson.start).total_seconds())) / 3600
        quantity, unit, unit_price = money(hours), "Hour", money(hourly_rate or 0)

    return {
        "description": lesson.title or "Lesson",
        "quantity": quantity,
        "unit": unit,
        "unit_price": unit_price,
        "tax_rate": tax_rate,
        "service_date": start.date(),
        "start_time": f"{start:%H:%M}",
        "end_time": f"{end:%H:%M}",
    }


@transaction.atomic
def generate_monthly_invoices(actor: ActorContext, year: int, month: int) -> CommandResult:
    """
    Turn each customer's billable, not yet invoiced lessons of a month into
    one draft invoice and link the lessons to it.

    Returns:
        CommandResult with the list of created invoice ids
    """
    require(actor, MODULE, Capability.ADD)

    if not 1 <= month <= 12:
        return CommandResult.fail("Month must be between 1 and 12.")

    start, end = month_bounds(year, month)
    today = timezone.localdate()
    created_ids = []

    customers = Customer.objects.filter(
        workspace=actor.workspace,
        lessons__is_billable=True,
        lessons__invoice__isnull=True,
        lessons__start__gte=start,
        lessons__start__lt=end,
    ).distinct().order_by("name", "pk")

    for customer in customers:
        lessons = list(Lesson.objects.select_for_update().filter(
            workspace=actor.workspace,
            customer=customer,
            is_billable=True,
            invoice__isnull=True,
            start__gte=start,
            start__lt=end,
        ).order_by("start"))
        if not lessons:
            continue

        invoice_number = allocate_invoice_number(actor.workspace, today)
        company = CompanySettings.objects.get(workspace=actor.workspace)

        tax_rate = Decimal("0") if customer.is_vat_exempt else (company.default_tax_rate or DEFAULT_TAX_RATE)
        terms = (
            customer.payment_terms_days
            or company.default_payment_terms_days
            or DEFAULT_PAYMENT_TERMS_DAYS
        )
        hourly_rate = customer.default_hourly_rate or company.default_hourly_rate or Decimal("0")

        items = [lesson_item(lesson, hourly_rate, tax_rate) for lesson in lessons]
        invoice = Invoice.objects.create(
            workspace=actor.workspace,
            customer=customer,
            customer_name=customer.name,
            invoice_number=invoice_number,
            date=today,
            due_date=today + timedelta(days=terms),
            status=Invoice.Status.DRAFT,
            payment_terms=f"{terms} Days",
            created_by=actor.user,
            **calculate_totals(items),
        )
        _create_items(actor, invoice, items)
        Lesson.objects.filter(pk__in=[lesson.pk for lesson in lessons]).update(
            invoice=invoice, updated_at=timezone.now()
        )
        _audit(actor, invoice, "created", details=f"Generated from {len(lessons)} lessons")
        created_ids.append(invoice.pk)

    logger.info(
        f"Generated {len(created_ids)} invoices for {year}-{month:02d} "
        f"in workspace {actor.workspace.pk}"
    )
    return CommandResult.ok(created_ids)
