from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from accounts.models import WorkspaceScopedModel

MONTH_VALIDATORS = [MinValueValidator(1), MaxValueValidator(12)]


class BudgetIncome(WorkspaceScopedModel):
    """Net income planned for one month; one row per (workspace, year, month)."""

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        related_name="+",
    )
    year = models.PositiveIntegerField()
    month = models.PositiveSmallIntegerField(validators=MONTH_VALIDATORS)
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    notes = models.TextField(blank=True)

    class Meta:
        ordering = ["-year", "-month"]
        constraints = [
            models.UniqueConstraint(
                fields=["workspace", "year", "month"],
                name="uniq_budget_income_period",
            ),
        ]

    def __str__(self):
        return f"{self.year}-{self.month:02d}: {self.amount}"


class BudgetOutgoing(WorkspaceScopedModel):
    """A recurring monthly expense with its default amount."""

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        related_name="+",
    )
    name = models.CharField(max_length=255)
    category = models.CharField(max_length=100)
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    is_fixed = models.BooleanField(default=True)
    notes = models.TextField(blank=True)

    class Meta:
        ordering = ["category", "name"]

    def __str__(self):
        return self.name


class BudgetMonthlyOutgoing(WorkspaceScopedModel):
    """Overrides an outgoing's default amount for a single month."""

    outgoing = models.ForeignKey(BudgetOutgoing, on_delete=models.CASCADE, related_name="overrides")
    year = models.PositiveIntegerField()
    month = models.PositiveSmallIntegerField(validators=MONTH_VALIDATORS)
    amount = models.DecimalField(max_digits=12, decimal_places=2)

    class Meta:
        ordering = ["year", "month"]
        constraints = [
            models.UniqueConstraint(
                fields=["outgoing", "year", "month"],
                name="uniq_budget_override_period",
            ),
        ]

    def __str__(self):
        return f"{self.outgoing_id} {self.year}-{self.month:02d}: {self.amount}"
