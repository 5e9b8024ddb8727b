# customers/commands.py
"""
Command layer for customers, student groups, students and imports.

Pattern:
1. Validate permissions (require)
2. Load the target row scoped to the actor's workspace
3. Perform the operation (cascades inside the same transaction)
4. Return CommandResult
"""

import logging
import time

from django.db import transaction
from django.utils import timezone

from accounts.authz import ActorContext, Capability, require
from accounts.commands import CommandResult
from accounts.models import PermissionModule
from customers.importers import ImportFormatError, display_name, map_row, parse_customer_file
from customers.models import Customer, CustomerImport, Student, StudentGroup

logger = logging.getLogger(__name__)

MODULE = PermissionModule.CUSTOMERS

DELETE_ALL_CONFIRMATION = "DELETE_ALL_CUSTOMERS"

CUSTOMER_FIELDS = (
    "name", "customer_number", "company_name", "salutation", "title",
    "first_name", "last_name", "contact_person", "supplement1", "supplement2",
    "street", "zip_code", "city", "state", "country",
    "po_box", "po_box_zip_code", "po_box_city", "po_box_state", "po_box_country",
    "email", "phone1", "phone2", "vat_id", "tax_number",
    "payment_terms_days", "default_hourly_rate", "is_vat_exempt", "notes",
    "is_active",
)


def _customer_kwargs(data: dict) -> dict:
    return {k: v for k, v in data.items() if k in CUSTOMER_FIELDS}


def cascade_delete_customers(customer_ids) -> dict:
    """
    Delete customers together with their students and groups.

    Must run inside the caller's transaction. Students go first so no
    student ever points at a deleted group.
    """
    customer_ids = list(customer_ids)
    students = Student.objects.filter(customer_id__in=customer_ids)
    groups = StudentGroup.objects.filter(customer_id__in=customer_ids)
    customers = Customer.objects.filter(pk__in=customer_ids)

    counts = {
        "students": students.count(),
        "groups": groups.count(),
        "customers": customers.count(),
    }
    students.delete()
    groups.delete()
    customers.delete()
    return counts


# =============================================================================
# Customers
# =============================================================================

@transaction.atomic
def create_customer(actor: ActorContext, **data) -> CommandResult:
    require(actor, MODULE, Capability.ADD)

    fields = _customer_kwargs(data)
    if not (fields.get("name") or "").strip():
        fields["name"] = display_name(fields)

    customer = Customer.objects.create(workspace=actor.workspace, **fields)
    return CommandResult.ok(customer)


@transaction.atomic
def batch_create_customers(actor: ActorContext, customers: list) -> CommandResult:
    """Create many customers at once; batch-created customers start inactive."""
    require(actor, MODULE, Capability.ADD)

    created = []
    for data in customers:
        fields = _customer_kwargs(data)
        fields["is_active"] = False
        if not (fields.get("name") or "").strip():
            fields["name"] = display_name(fields)
        created.append(Customer(workspace=actor.workspace, **fields))

    Customer.objects.bulk_create(created)
    logger.info(f"Batch-created {len(created)} customers in workspace {actor.workspace.pk}")
    return CommandResult.ok(created)


@transaction.atomic
def update_customer(actor: ActorContext, customer_id: int, **changes) -> CommandResult:
    require(actor, MODULE, Capability.ADD)

    try:
        customer = Customer.objects.select_for_update().get(pk=customer_id, workspace=actor.workspace)
    except Customer.DoesNotExist:
        return CommandResult.missing("Customer")

    for field, value in _customer_kwargs(changes).items():
        setattr(customer, field, value)
    if not customer.name.strip():
        customer.name = display_name(customer.__dict__)
    customer.save()
    return CommandResult.ok(customer)


@transaction.atomic
def toggle_customer_active(actor: ActorContext, customer_id: int) -> CommandResult:
    require(actor, MODULE, Capability.ADD)

    try:
        customer = Customer.objects.select_for_update().get(pk=customer_id, workspace=actor.workspace)
    except Customer.DoesNotExist:
        return CommandResult.missing("Customer")

    customer.is_active = not customer.is_active
    customer.save(update_fields=["is_active", "updated_at"])
    return CommandResult.ok(customer)


@transaction.atomic
def deactivate_all_customers(actor: ActorContext) -> CommandResult:
    require(actor, MODULE, Capability.ADD)

    count = Customer.objects.filter(
        workspace=actor.workspace, is_active=True,
    ).update(is_active=False, updated_at=timezone.now())
    logger.info(f"Deactivated {count} customers in workspace {actor.workspace.pk}")
    return CommandResult.ok({"count": count})


@transaction.atomic
def delete_customer(actor: ActorContext, customer_id: int) -> CommandResult:
    """Delete a customer and, in the same transaction, its students and groups."""
    require(actor, MODULE, Capability.DELETE)

    try:
        customer = Customer.objects.select_for_update().get(pk=customer_id, workspace=actor.workspace)
    except Customer.DoesNotExist:
        return CommandResult.missing("Customer")

    counts = cascade_delete_customers([customer.pk])
    logger.info(
        f"Deleted customer {customer_id} with {counts['students']} students "
        f"and {counts['groups']} groups"
    )
    return CommandResult.ok(counts)


@transaction.atomic
def delete_all_customers(actor: ActorContext, confirm: str) -> CommandResult:
    """
    Remove every customer of the workspace (with students and groups).

    Owner only; ``confirm`` must equal DELETE_ALL_CUSTOMERS.
    """
    require(actor, MODULE, Capability.DELETE)
    if not actor.is_owner:
        return CommandResult.fail("Only the workspace owner can delete all customers.")
    if confirm != DELETE_ALL_CONFIRMATION:
        return CommandResult.fail(f'Confirmation text must be "{DELETE_ALL_CONFIRMATION}".')

    ids = Customer.objects.filter(workspace=actor.workspace).values_list("pk", flat=True)
    counts = cascade_delete_customers(ids)
    logger.warning(f"Deleted all {counts['customers']} customers in workspace {actor.workspace.pk}")
    return CommandResult.ok(counts)


# =============================================================================
# Student groups
# =============================================================================

@transaction.atomic
def create_group(actor: ActorContext, customer_id: int, name: str, notes: str = "") -> CommandResult:
    require(actor, MODULE, Capability.ADD)

    try:
        customer = Customer.objects.get(pk=customer_id, workspace=actor.workspace)
    except Customer.DoesNotExist:
        return CommandResult.missing("Customer")

    group = StudentGroup.objects.create(
        workspace=actor.workspace,
        customer=customer,
        name=name,
        notes=notes,
    )
    return CommandResult.ok(group)


@transaction.atomic
def update_group(actor: ActorContext, group_id: int, **changes) -> CommandResult:
    require(actor, MODULE, Capability.ADD)

    try:
        group = StudentGroup.objects.select_for_update().get(pk=group_id, workspace=actor.workspace)
    except StudentGroup.DoesNotExist:
        return CommandResult.missing("Group")

    for field in ("name", "notes", "is_active"):
        if field in changes:
            setattr(group, field, changes[field])
    group.save()
    return CommandResult.ok(group)


@transaction.atomic
def delete_group(actor: ActorContext, group_id: int) -> CommandResult:
    """Delete a group; its students stay with the customer, ungrouped."""
    require(actor, MODULE, Capability.DELETE)

    try:
        group = StudentGroup.objects.select_for_update().get(pk=group_id, workspace=actor.workspace)
    except StudentGroup.DoesNotExist:
        return CommandResult.missing("Group")

    cleared = Student.objects.filter(group=group).update(group=None, updated_at=timezone.now())
    group.delete()
    return CommandResult.ok({"students_cleared": cleared})


# =============================================================================
# Students
# =============================================================================

def _group_in_workspace(actor, group_id, customer=None):
    if group_id is None:
        return None, None
    try:
        group = StudentGroup.objects.get(pk=group_id, workspace=actor.workspace)
    except StudentGroup.DoesNotExist:
        return None, CommandResult.missing("Group")
    if customer is not None and group.customer_id != customer.pk:
        return None, CommandResult.fail("Group belongs to a different customer.")
    return group, None


@transaction.atomic
def create_student(
    actor: ActorContext,
    customer_id: int,
    first_name: str,
    last_name: str,
    email: str = "",
    phone: str = "",
    notes: str = "",
    group_id: int = None,
) -> CommandResult:
    require(actor, MODULE, Capability.ADD)

    try:
        customer = Customer.objects.get(pk=customer_id, workspace=actor.workspace)
    except Customer.DoesNotExist:
        return CommandResult.missing("Customer")

    group, error = _group_in_workspace(actor, group_id, customer)
    if error:
        return error

    student = Student.objects.create(
        workspace=actor.workspace,
        customer=customer,
        group=group,
        first_name=first_name,
        last_name=last_name,
        email=email,
        phone=phone,
        notes=notes,
    )
    return CommandResult.ok(student)


@transaction.atomic
def update_student(actor: ActorContext, student_id: int, **changes) -> CommandResult:
    require(actor, MODULE, Capability.ADD)

    try:
        student = Student.objects.select_for_update().select_related("customer").get(
            pk=student_id, workspace=actor.workspace
        )
    except Student.DoesNotExist:
        return CommandResult.missing("Student")

    if "group_id" in changes:
        group, error = _group_in_workspace(actor, changes["group_id"], student.customer)
        if error:
            return error
        student.group = group

    for field in ("first_name", "last_name", "email", "phone", "notes", "is_active"):
        if field in changes:
            setattr(student, field, changes[field])
    student.save()
    return CommandResult.ok(student)


@transaction.atomic
def delete_student(actor: ActorContext, student_id: int) -> CommandResult:
    require(actor, MODULE, Capability.DELETE)

    deleted, _ = Student.objects.filter(pk=student_id, workspace=actor.workspace).delete()
    if not deleted:
        return CommandResult.missing("Student")
    return CommandResult.ok()


# =============================================================================
# Imports
# =============================================================================

def _new_batch_id() -> str:
    batch_id = f"import-{int(time.time() * 1000)}"
    suffix = 1
    candidate = batch_id
    while CustomerImport.objects.filter(batch_id=candidate).exists():
        suffix += 1
        candidate = f"{batch_id}-{suffix}"
    return candidate


@transaction.atomic
def import_customers(
    actor: ActorContext,
    file_name: str,
    content: bytes,
    mapping: dict = None,
) -> CommandResult:
    """
    Import customers from an uploaded CSV or XLSX file.

    Every imported customer is tagged with a fresh batch id so the whole
    import can later be rolled back with rollback_import_batch().

    Returns:
        CommandResult with {"batch_id", "imported_count"}
    """
    require(actor, MODULE, Capability.ADD)

    try:
        rows = parse_customer_file(file_name, content)
    except ImportFormatError as e:
        return CommandResult.fail(str(e))

    if not rows:
        return CommandResult.fail("The file contains no customer rows.")

    batch_id = _new_batch_id()
    customers = []
    for raw in rows:
        fields = _customer_kwargs(map_row(raw, mapping))
        customers.append(Customer(workspace=actor.workspace, import_batch_id=batch_id, **fields))
    Customer.objects.bulk_create(customers)

    batch = CustomerImport.objects.create(
        workspace=actor.workspace,
        batch_id=batch_id,
        file_name=file_name or "import.csv",
        customer_count=len(customers),
        imported_by=actor.user,
    )
    logger.info(f"Imported {len(customers)} customers as {batch_id} into workspace {actor.workspace.pk}")
    return CommandResult.ok({"batch_id": batch.batch_id, "imported_count": batch.customer_count})


@transaction.atomic
def rollback_import_batch(actor: ActorContext, batch_id: str) -> CommandResult:
    """
    Undo an import: delete the batch's customers with their students and
    groups, then mark the batch rolled back. A batch rolls back only once.

    Returns:
        CommandResult with {"deleted_count", "batch_id"}
    """
    require(actor, MODULE, Capability.DELETE)

    try:
        batch = CustomerImport.objects.select_for_update().get(
            batch_id=batch_id, workspace=actor.workspace
        )
    except CustomerImport.DoesNotExist:
        return CommandResult.missing("Import batch")

    if batch.status == CustomerImport.Status.ROLLED_BACK:
        return CommandResult.fail("This import has already been rolled back")

    ids = Customer.objects.filter(
        workspace=actor.workspace, import_batch_id=batch_id,
    ).values_list("pk", flat=True)
    counts = cascade_delete_customers(ids)

    batch.status = CustomerImport.Status.ROLLED_BACK
    batch.rolled_back_at = timezone.now()
    batch.rolled_back_by = actor.user
    batch.save(update_fields=["status", "rolled_back_at", "rolled_back_by", "updated_at"])

    logger.info(f"Rolled back {batch_id}: {counts['customers']} customers deleted")
    return CommandResult.ok({"deleted_count": counts["customers"], "batch_id": batch_id})
