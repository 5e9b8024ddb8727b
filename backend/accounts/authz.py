# accounts/authz.py
"""
Authorization utilities for LifeHub.

Provides:
- ActorContext: Immutable context for the current request
- resolve_actor: Extract actor context from request + workspace id
- require: Check a module capability and raise if not granted

Permissions are checked:
1. Workspace owner: implicit allow
2. Everyone else: the (workspace, user) grant must cover the module
   (or be the ALL wildcard) and carry the capability flag.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from django.conf import settings
from django.core.exceptions import PermissionDenied
from rest_framework.exceptions import NotAuthenticated, NotFound

from accounts.models import (
    AuthorizedEmail,
    PermissionModule,
    Workspace,
    WorkspacePermission,
)
from ops.logging_config import bind_log_context


class Capability(str, Enum):
    VIEW = "view"
    ADD = "add"
    DELETE = "delete"
    EDIT_SHARED = "edit_shared"

    @property
    def flag(self) -> str:
        """Name of the boolean field on WorkspacePermission."""
        return f"can_{self.value}"


def is_email_authorized(email: str) -> bool:
    """Static allow-list from settings united with the AuthorizedEmail table."""
    if not email:
        return False
    normalized = email.strip().lower()
    if normalized in settings.ALLOWED_EMAILS:
        return True
    return AuthorizedEmail.objects.filter(email__iexact=normalized).exists()


@dataclass(frozen=True)
class ActorContext:
    """
    Immutable context for the current actor (user + workspace).

    Passed to every command so the command can decide what the actor may do
    inside the workspace.

    Attributes:
        user: The authenticated user
        workspace: The target workspace (tenant)
        grant: The user's permission row, None for owners without one
    """
    user: object  # User model
    workspace: Workspace
    grant: Optional[WorkspacePermission] = None

    @property
    def is_owner(self) -> bool:
        return self.workspace.owner_id == self.user.pk

    def can(self, module: str, capability: Capability) -> bool:
        if self.is_owner:
            return True
        if self.grant is None or not self.grant.covers(module):
            return False
        return bool(getattr(self.grant, Capability(capability).flag))


def actor_for(user, workspace: Workspace) -> ActorContext:
    """Build a context outside a request (tasks, management commands)."""
    grant = WorkspacePermission.objects.filter(workspace=workspace, user=user).first()
    bind_log_context(workspace.pk, user.pk)
    return ActorContext(user=user, workspace=workspace, grant=grant)


def resolve_actor(request, workspace_id) -> ActorContext:
    """
    Extract ActorContext from the current request.

    Grants are loaded fresh from the database on every request so that
    revocations take effect immediately.

    Raises:
        NotAuthenticated: If no identity is attached to the request
        PermissionDenied: Email not allow-listed, or no access to the workspace
        NotFound: If the workspace does not exist
    """
    user = getattr(request, "user", None)

    if not user or not user.is_authenticated:
        raise NotAuthenticated("Authentication required.")

    if not user.is_admin and not is_email_authorized(user.email):
        raise PermissionDenied("Your email address is not authorized.")

    try:
        workspace = Workspace.objects.get(pk=workspace_id)
    except Workspace.DoesNotExist:
        raise NotFound("Workspace not found.")

    grant = WorkspacePermission.objects.filter(workspace=workspace, user=user).first()
    if workspace.owner_id != user.pk and grant is None:
        raise PermissionDenied("You do not have access to this workspace.")

    bind_log_context(workspace.pk, user.pk)
    return ActorContext(user=user, workspace=workspace, grant=grant)


def require(actor: ActorContext, module: str, capability: Capability) -> None:
    """
    Require that the actor holds a capability on a module.

    Example:
        require(actor, PermissionModule.CUSTOMERS, Capability.DELETE)
        # If we get here, permission is granted
    """
    if not actor.can(module, capability):
        raise PermissionDenied(
            f"Permission denied: {PermissionModule(module).value}.{Capability(capability).value}"
        )


def require_owner(actor: ActorContext) -> None:
    if not actor.is_owner:
        raise PermissionDenied("Only the workspace owner can do this.")


def require_admin(user) -> None:
    if not getattr(user, "is_admin", False):
        raise PermissionDenied("Administrator access required.")
