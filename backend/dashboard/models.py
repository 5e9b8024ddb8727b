from django.conf import settings
from django.db import models

from accounts.models import WorkspaceScopedModel

DEFAULT_LAYOUT_NAME = "default"


class DashboardLayout(WorkspaceScopedModel):
    """
    A named widget grid of one user in one workspace.

    ``layout`` is a list of widget placements: ``i`` (widget key), ``x``,
    ``y``, ``w``, ``h`` and optional size limits and drag/resize flags.
    """

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="dashboard_layouts",
    )
    layout_name = models.CharField(max_length=100, default=DEFAULT_LAYOUT_NAME)
    layout = models.JSONField(default=list)
    is_active = models.BooleanField(default=True)

    class Meta:
        ordering = ["layout_name"]
        constraints = [
            models.UniqueConstraint(
                fields=["workspace", "user", "layout_name"],
                name="uniq_dashboard_layout_name",
            ),
        ]

    def __str__(self):
        return f"{self.user} / {self.layout_name}"
