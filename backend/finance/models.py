from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator, RegexValidator
from django.db import models
from django.db.models import Q
from django.utils.translation import gettext_lazy as _

from accounts.models import WorkspaceScopedModel

BANK_ACCOUNT = "bank_account"

month_key_validator = RegexValidator(r"^\d{4}-(0[1-9]|1[0-2])$", "Month must look like YYYY-MM.")


class SimpleAsset(WorkspaceScopedModel):
    """
    Something of value: a bank account, a depot, a car.

    ``type`` is free text; assets of type ``bank_account`` take part in
    liquidity tracking and can be reordered among themselves.
    """

    name = models.CharField(max_length=255)
    type = models.CharField(max_length=50)
    current_value = models.DecimalField(max_digits=14, decimal_places=2)
    purchase_value = models.DecimalField(max_digits=14, decimal_places=2, null=True, blank=True)
    purchase_date = models.DateField(null=True, blank=True)
    sort_order = models.IntegerField(default=0)

    class Meta:
        ordering = ["sort_order", "id"]

    def __str__(self):
        return self.name


class SimpleLiability(WorkspaceScopedModel):
    name = models.CharField(max_length=255)
    type = models.CharField(max_length=50)
    current_balance = models.DecimalField(max_digits=14, decimal_places=2)
    original_amount = models.DecimalField(max_digits=14, decimal_places=2, null=True, blank=True)
    interest_rate = models.DecimalField(max_digits=6, decimal_places=3, null=True, blank=True)
    monthly_payment = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)

    class Meta:
        ordering = ["name"]
        verbose_name_plural = _("Simple liabilities")

    def __str__(self):
        return self.name


class MonthlyValuation(WorkspaceScopedModel):
    """Value of an asset or liability as recorded for a month."""

    class ItemType(models.TextChoices):
        ASSET = "asset", _("Asset")
        LIABILITY = "liability", _("Liability")

    item_type = models.CharField(max_length=20, choices=ItemType.choices)
    item_id = models.PositiveBigIntegerField()
    year = models.PositiveIntegerField()
    month = models.PositiveSmallIntegerField(validators=[MinValueValidator(1), MaxValueValidator(12)])
    value = models.DecimalField(max_digits=14, decimal_places=2)
    notes = models.TextField(blank=True)

    class Meta:
        ordering = ["-year", "-month", "-id"]
        indexes = [
            models.Index(fields=["workspace", "item_type", "item_id"], name="valuation_item_idx"),
        ]

    def __str__(self):
        return f"{self.item_type} {self.item_id} {self.year}-{self.month:02d}"


class LiquidityBalance(WorkspaceScopedModel):
    """
    Balance of one account at the end of a month ("YYYY-MM").

    Exactly one of ``asset`` / ``liability`` is set; at most one balance per
    account and month.
    """

    asset = models.ForeignKey(
        SimpleAsset,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="balances",
    )
    liability = models.ForeignKey(
        SimpleLiability,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="balances",
    )
    month = models.CharField(max_length=7, validators=[month_key_validator])
    balance = models.DecimalField(max_digits=14, decimal_places=2)
    notes = models.TextField(blank=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        related_name="+",
    )

    class Meta:
        ordering = ["month", "id"]
        constraints = [
            models.UniqueConstraint(
                fields=["asset", "month"],
                condition=Q(asset__isnull=False),
                name="uniq_asset_balance_month",
            ),
            models.UniqueConstraint(
                fields=["liability", "month"],
                condition=Q(liability__isnull=False),
                name="uniq_liability_balance_month",
            ),
        ]
        indexes = [
            models.Index(fields=["workspace", "month"], name="liquidity_month_idx"),
        ]

    def __str__(self):
        return f"{self.account} {self.month}: {self.balance}"

    @property
    def account(self):
        return self.asset if self.asset_id else self.liability

    @property
    def is_liability(self) -> bool:
        return self.liability_id is not None


class Subscription(WorkspaceScopedModel):
    """
    A recurring cost: software subscription, rent, insurance, loan rate.

    ``cost`` is charged once per ``billing_cycle``. ``yearly_amount``, when
    set, is the exact amount per year and wins over ``cost`` in yearly totals.
    """

    class BillingCycle(models.TextChoices):
        MONTHLY = "monthly", _("Monthly")
        YEARLY = "yearly", _("Yearly")

    class Type(models.TextChoices):
        SUBSCRIPTION = "subscription", _("Subscription")
        BILL = "bill", _("Bill")
        RENT = "rent", _("Rent")
        UTILITY = "utility", _("Utility")
        INSURANCE = "insurance", _("Insurance")
        LOAN = "loan", _("Loan")
        OTHER = "other", _("Other")

    class Classification(models.TextChoices):
        BUSINESS = "business", _("Business")
        PRIVATE = "private", _("Private")

    class Category(models.TextChoices):
        AI = "ai", _("AI")
        SOFTWARE = "software", _("Software")
        MARKETING = "marketing", _("Marketing")
        PRODUCTIVITY = "productivity", _("Productivity")
        DESIGN = "design", _("Design")
        COMMUNICATION = "communication", _("Communication")
        DEVELOPMENT = "development", _("Development")
        ANALYTICS = "analytics", _("Analytics")
        SECURITY = "security", _("Security")
        OTHER = "other", _("Other")

    name = models.CharField(max_length=255)
    cost = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(0)])
    yearly_amount = models.DecimalField(
        max_digits=12, decimal_places=2, null=True, blank=True, validators=[MinValueValidator(0)],
    )
    billing_cycle = models.CharField(max_length=10, choices=BillingCycle.choices, default=BillingCycle.MONTHLY)
    next_billing_date = models.DateField()
    is_active = models.BooleanField(default=True)
    type = models.CharField(max_length=20, choices=Type.choices, default=Type.SUBSCRIPTION)
    is_necessary = models.BooleanField(default=True)
    classification = models.CharField(max_length=10, choices=Classification.choices, blank=True)
    category = models.CharField(max_length=20, choices=Category.choices, blank=True)
    subcategory = models.CharField(max_length=100, blank=True)

    class Meta:
        ordering = ["next_billing_date", "name"]

    def __str__(self):
        return self.name
