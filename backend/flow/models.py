from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _

from accounts.models import WorkspaceScopedModel


class Priority(models.TextChoices):
    LOW = "low", _("Low")
    MEDIUM = "medium", _("Medium")
    HIGH = "high", _("High")


class Idea(WorkspaceScopedModel):
    class Status(models.TextChoices):
        NEW = "new", _("New")
        REVIEWING = "reviewing", _("Reviewing")
        CONVERTED = "converted", _("Converted")
        ARCHIVED = "archived", _("Archived")

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        related_name="+",
    )
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    rich_description = models.TextField(blank=True)
    category = models.CharField(max_length=100, blank=True)
    tags = models.JSONField(default=list, blank=True)
    priority = models.CharField(max_length=10, choices=Priority.choices, blank=True)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.NEW)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return self.title


class Task(WorkspaceScopedModel):
    """
    A to-do item on the flow board.

    Recurring tasks spawn their next occurrence when completed; every
    spawned occurrence points at the first task of the series through
    ``parent_task``.
    """

    class Status(models.TextChoices):
        TODO = "todo", _("To do")
        IN_PROGRESS = "in_progress", _("In progress")
        COMPLETED = "completed", _("Completed")

    class RecurrenceType(models.TextChoices):
        DAILY = "daily", _("Daily")
        WEEKLY = "weekly", _("Weekly")
        MONTHLY = "monthly", _("Monthly")
        YEARLY = "yearly", _("Yearly")

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        related_name="+",
    )
    idea = models.ForeignKey(
        Idea,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="tasks",
    )
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.TODO)
    priority = models.CharField(max_length=10, choices=Priority.choices, default=Priority.MEDIUM)
    due_date = models.DateField(null=True, blank=True)
    tags = models.JSONField(default=list, blank=True)
    position = models.IntegerField(default=0)
    is_archived = models.BooleanField(default=False)

    # Time allocation, in hours per period
    estimated_hours = models.DecimalField(max_digits=8, decimal_places=2, null=True, blank=True)
    daily_allocation = models.DecimalField(max_digits=8, decimal_places=2, null=True, blank=True)
    weekly_allocation = models.DecimalField(max_digits=8, decimal_places=2, null=True, blank=True)
    monthly_allocation = models.DecimalField(max_digits=8, decimal_places=2, null=True, blank=True)
    yearly_allocation = models.DecimalField(max_digits=8, decimal_places=2, null=True, blank=True)
    time_spent = models.DecimalField(max_digits=10, decimal_places=2, default=0)

    is_recurring = models.BooleanField(default=False)
    recurrence_type = models.CharField(max_length=10, choices=RecurrenceType.choices, blank=True)
    recurrence_interval = models.PositiveIntegerField(default=1)
    recurrence_end_date = models.DateField(null=True, blank=True)
    recurrence_count = models.PositiveIntegerField(null=True, blank=True)
    parent_task = models.ForeignKey(
        "self",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="occurrences",
    )

    class Meta:
        ordering = ["position", "created_at"]
        indexes = [
            models.Index(fields=["workspace", "status"], name="task_status_idx"),
        ]

    def __str__(self):
        return self.title

    @property
    def has_allocation(self) -> bool:
        return any((
            self.daily_allocation,
            self.weekly_allocation,
            self.monthly_allocation,
            self.yearly_allocation,
        ))


class TimeAllocation(WorkspaceScopedModel):
    """Minutes planned for a piece of work on one day."""

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        related_name="+",
    )
    task = models.ForeignKey(
        Task,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="time_allocations",
    )
    task_name = models.CharField(max_length=255)
    date = models.DateField()
    allocated_minutes = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    # ISO week of ``date``
    week_number = models.PositiveSmallIntegerField()

    class Meta:
        ordering = ["date", "id"]
        indexes = [
            models.Index(fields=["workspace", "date"], name="allocation_date_idx"),
        ]

    def __str__(self):
        return f"{self.task_name} {self.date}"

    def save(self, *args, **kwargs):
        self.week_number = self.date.isocalendar()[1]
        super().save(*args, **kwargs)


class TimeLog(WorkspaceScopedModel):
    """A timed work session, optionally against an allocation."""

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        related_name="+",
    )
    allocation = models.ForeignKey(
        TimeAllocation,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="logs",
    )
    session_start = models.DateTimeField()
    session_end = models.DateTimeField()
    elapsed_seconds = models.PositiveIntegerField()

    class Meta:
        ordering = ["-session_start"]

    def __str__(self):
        return f"{self.session_start:%Y-%m-%d %H:%M} ({self.elapsed_seconds}s)"
