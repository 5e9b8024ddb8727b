# dashboard/commands.py
"""
Dashboard layout commands.

Layouts belong to (workspace, user, layout_name); a user without a stored
layout sees the built-in default.
"""

import logging

from django.db import transaction

from accounts.authz import ActorContext, Capability, require
from accounts.commands import CommandResult
from accounts.models import PermissionModule
from dashboard.layouts import default_layout
from dashboard.models import DEFAULT_LAYOUT_NAME, DashboardLayout

logger = logging.getLogger(__name__)

MODULE = PermissionModule.DASHBOARD


def get_dashboard_layout(actor: ActorContext, layout_name: str = DEFAULT_LAYOUT_NAME) -> list[dict]:
    require(actor, MODULE, Capability.VIEW)

    stored = DashboardLayout.objects.filter(
        workspace=actor.workspace, user=actor.user, layout_name=layout_name,
    ).first()
    return stored.layout if stored else default_layout()


@transaction.atomic
def save_dashboard_layout(
    actor: ActorContext,
    layout: list[dict],
    layout_name: str = DEFAULT_LAYOUT_NAME,
) -> CommandResult:
    require(actor, MODULE, Capability.ADD)

    record, _ = DashboardLayout.objects.update_or_create(
        workspace=actor.workspace,
        user=actor.user,
        layout_name=layout_name,
        defaults={"layout": layout, "is_active": True},
    )
    return CommandResult.ok(record)


@transaction.atomic
def reset_dashboard_layout(actor: ActorContext, layout_name: str = DEFAULT_LAYOUT_NAME) -> CommandResult:
    """Forget the stored layout and hand back the default one."""
    require(actor, MODULE, Capability.ADD)

    deleted, _ = DashboardLayout.objects.filter(
        workspace=actor.workspace, user=actor.user, layout_name=layout_name,
    ).delete()
    if deleted:
        logger.info(f"Reset dashboard layout '{layout_name}' of user {actor.user.pk}")
    return CommandResult.ok(default_layout())


def list_user_layouts(actor: ActorContext):
    require(actor, MODULE, Capability.VIEW)

    return DashboardLayout.objects.filter(workspace=actor.workspace, user=actor.user)
