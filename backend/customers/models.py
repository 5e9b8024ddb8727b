from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _

from accounts.models import WorkspaceScopedModel


class Customer(WorkspaceScopedModel):
    """
    Billing party. Address fields follow the German address book layout
    (Anrede, Titel, Zusatz, Postfach) most imports come from.
    """

    name = models.CharField(max_length=255)
    customer_number = models.CharField(max_length=50, blank=True)

    company_name = models.CharField(max_length=255, blank=True)
    salutation = models.CharField(max_length=50, blank=True)
    title = models.CharField(max_length=50, blank=True)
    first_name = models.CharField(max_length=150, blank=True)
    last_name = models.CharField(max_length=150, blank=True)
    contact_person = models.CharField(max_length=255, blank=True)
    supplement1 = models.CharField(max_length=255, blank=True)
    supplement2 = models.CharField(max_length=255, blank=True)

    street = models.CharField(max_length=255, blank=True)
    zip_code = models.CharField(max_length=20, blank=True)
    city = models.CharField(max_length=150, blank=True)
    state = models.CharField(max_length=150, blank=True)
    country = models.CharField(max_length=150, blank=True)

    po_box = models.CharField(max_length=50, blank=True)
    po_box_zip_code = models.CharField(max_length=20, blank=True)
    po_box_city = models.CharField(max_length=150, blank=True)
    po_box_state = models.CharField(max_length=150, blank=True)
    po_box_country = models.CharField(max_length=150, blank=True)

    email = models.CharField(max_length=254, blank=True)
    phone1 = models.CharField(max_length=50, blank=True)
    phone2 = models.CharField(max_length=50, blank=True)

    vat_id = models.CharField(max_length=50, blank=True)
    tax_number = models.CharField(max_length=50, blank=True)
    payment_terms_days = models.PositiveIntegerField(default=14)
    default_hourly_rate = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    is_vat_exempt = models.BooleanField(default=False)
    notes = models.TextField(blank=True)

    is_active = models.BooleanField(default=False)
    import_batch_id = models.CharField(max_length=64, blank=True, db_index=True)

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return self.name


class StudentGroup(WorkspaceScopedModel):
    customer = models.ForeignKey(Customer, on_delete=models.CASCADE, related_name="groups")
    name = models.CharField(max_length=255)
    notes = models.TextField(blank=True)
    is_active = models.BooleanField(default=True)

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return self.name


class Student(WorkspaceScopedModel):
    customer = models.ForeignKey(Customer, on_delete=models.CASCADE, related_name="students")
    group = models.ForeignKey(
        StudentGroup,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="students",
    )
    first_name = models.CharField(max_length=150)
    last_name = models.CharField(max_length=150)
    email = models.CharField(max_length=254, blank=True)
    phone = models.CharField(max_length=50, blank=True)
    notes = models.TextField(blank=True)
    is_active = models.BooleanField(default=True)

    class Meta:
        ordering = ["last_name", "first_name"]

    def __str__(self):
        return f"{self.first_name} {self.last_name}"


class CustomerImport(WorkspaceScopedModel):
    """One bulk import; reversible as a unit until rolled back."""

    class Status(models.TextChoices):
        COMPLETED = "completed", _("Completed")
        ROLLED_BACK = "rolled_back", _("Rolled back")

    batch_id = models.CharField(max_length=64, unique=True)
    file_name = models.CharField(max_length=255)
    customer_count = models.PositiveIntegerField(default=0)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.COMPLETED)
    imported_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        related_name="+",
    )
    rolled_back_at = models.DateTimeField(null=True, blank=True)
    rolled_back_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return self.batch_id
