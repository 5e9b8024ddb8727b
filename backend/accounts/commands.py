# accounts/commands.py
"""
Command layer for accounts/authorization operations.

ALL security-critical mutations MUST go through these commands:
- User provisioning and workspace creation
- Permission grants/revocations
- Allow-list management
- Workspace invitations

This ensures:
1. Consistent validation
2. Single point of enforcement
"""

import logging
from datetime import timedelta

from django.conf import settings
from django.contrib.auth import get_user_model
from django.db import transaction
from django.utils import timezone

from accounts.authz import (
    ActorContext,
    is_email_authorized,
    require_admin,
    require_owner,
)
from accounts.models import (
    AuthorizedEmail,
    PermissionModule,
    Workspace,
    WorkspaceInvitation,
    WorkspacePermission,
)

logger = logging.getLogger(__name__)

User = get_user_model()


class CommandResult:
    def __init__(self, success: bool, data=None, error: str = None, not_found: bool = False):
        self.success = success
        self.data = data
        self.error = error
        self.not_found = not_found

    @classmethod
    def ok(cls, data=None):
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: str, not_found: bool = False):
        return cls(success=False, error=error, not_found=not_found)

    @classmethod
    def missing(cls, entity: str):
        return cls.fail(f"{entity} not found.", not_found=True)


def _grant_full_access(workspace, user) -> WorkspacePermission:
    grant, _ = WorkspacePermission.objects.update_or_create(
        workspace=workspace,
        user=user,
        defaults={
            "module": PermissionModule.ALL,
            "can_view": True,
            "can_add": True,
            "can_delete": True,
            "can_edit_shared": True,
        },
    )
    return grant


# =============================================================================
# Provisioning
# =============================================================================

@transaction.atomic
def provision_user_workspace(email: str, name: str = "", password: str = None) -> CommandResult:
    """
    First-login provisioning.

    Creates the user if missing, then a default workspace named
    "<name>'s Workspace" with an owner grant. Calling it again for a user
    that already owns a workspace returns that workspace.

    Returns:
        CommandResult with {"user", "workspace", "created"}
    """
    email = User.objects.normalize_email(email).lower()
    user = User.objects.filter(email__iexact=email).first()
    if user is None:
        user = User.objects.create_user(email=email, password=password, name=name)
        logger.info(f"Provisioned user {email}")

    workspace = Workspace.objects.filter(owner=user).order_by("created_at").first()
    if workspace is not None:
        return CommandResult.ok({"user": user, "workspace": workspace, "created": False})

    workspace = Workspace.objects.create(
        name=f"{user.display_name}'s Workspace",
        owner=user,
    )
    _grant_full_access(workspace, user)
    logger.info(f"Created default workspace {workspace.pk} for {email}")

    return CommandResult.ok({"user": user, "workspace": workspace, "created": True})


@transaction.atomic
def register_user(email: str, password: str, name: str = "") -> CommandResult:
    """Self-service registration for allow-listed emails."""
    if not is_email_authorized(email):
        return CommandResult.fail("This email address is not authorized to register.")
    if User.objects.filter(email__iexact=email).exists():
        return CommandResult.fail("A user with this email already exists.")

    return provision_user_workspace(email=email, name=name, password=password)


@transaction.atomic
def create_workspace(user, name: str) -> CommandResult:
    name = (name or "").strip()
    if not name:
        return CommandResult.fail("Workspace name is required.")

    workspace = Workspace.objects.create(name=name, owner=user)
    _grant_full_access(workspace, user)
    logger.info(f"User {user.email} created workspace {workspace.pk}")
    return CommandResult.ok(workspace)


@transaction.atomic
def rename_workspace(actor: ActorContext, name: str) -> CommandResult:
    require_owner(actor)

    name = (name or "").strip()
    if not name:
        return CommandResult.fail("Workspace name is required.")

    workspace = Workspace.objects.select_for_update().get(pk=actor.workspace.pk)
    workspace.name = name
    workspace.save(update_fields=["name", "updated_at"])
    return CommandResult.ok(workspace)


# =============================================================================
# Permission grants
# =============================================================================

@transaction.atomic
def grant_permission(
    actor: ActorContext,
    user_id: int,
    module: str = PermissionModule.ALL,
    can_view: bool = True,
    can_add: bool = False,
    can_delete: bool = False,
    can_edit_shared: bool = False,
) -> CommandResult:
    """
    Grant or update a user's capabilities in the actor's workspace.

    There is at most one grant per (workspace, user); granting again
    replaces the existing flags.
    """
    require_owner(actor)

    try:
        target = User.objects.get(pk=user_id)
    except User.DoesNotExist:
        return CommandResult.missing("User")

    if target.pk == actor.workspace.owner_id:
        return CommandResult.fail("The workspace owner always has full access.")

    grant, created = WorkspacePermission.objects.update_or_create(
        workspace=actor.workspace,
        user=target,
        defaults={
            "module": module,
            "can_view": can_view,
            "can_add": can_add,
            "can_delete": can_delete,
            "can_edit_shared": can_edit_shared,
        },
    )
    logger.info(
        f"{'Granted' if created else 'Updated'} {module} access for user {target.pk} "
        f"in workspace {actor.workspace.pk}"
    )
    return CommandResult.ok(grant)


@transaction.atomic
def revoke_permission(actor: ActorContext, user_id: int) -> CommandResult:
    require_owner(actor)

    if user_id == actor.workspace.owner_id:
        return CommandResult.fail("The workspace owner's access cannot be revoked.")

    deleted, _ = WorkspacePermission.objects.filter(
        workspace=actor.workspace,
        user_id=user_id,
    ).delete()
    if not deleted:
        return CommandResult.missing("Permission")

    logger.info(f"Revoked access for user {user_id} in workspace {actor.workspace.pk}")
    return CommandResult.ok()


# =============================================================================
# Allow-list (admin only)
# =============================================================================

@transaction.atomic
def add_authorized_email(user, email: str, notes: str = "") -> CommandResult:
    require_admin(user)

    normalized = email.strip().lower()
    if AuthorizedEmail.objects.filter(email__iexact=normalized).exists():
        return CommandResult.fail("Email already authorized")

    entry = AuthorizedEmail.objects.create(email=normalized, added_by=user, notes=notes)
    logger.info(f"{user.email} authorized {normalized}")
    return CommandResult.ok(entry)


@transaction.atomic
def remove_authorized_email(user, entry_id: int) -> CommandResult:
    require_admin(user)

    try:
        entry = AuthorizedEmail.objects.get(pk=entry_id)
    except AuthorizedEmail.DoesNotExist:
        return CommandResult.missing("Authorized email")

    entry.delete()
    logger.info(f"{user.email} removed {entry.email} from the allow-list")
    return CommandResult.ok()


# =============================================================================
# Invitations
# =============================================================================

@transaction.atomic
def invite_user(actor: ActorContext, email: str, role: str = WorkspaceInvitation.Role.USER) -> CommandResult:
    """
    Invite an email address into the actor's workspace.

    The invitation expires after INVITATION_EXPIRY_DAYS. An email is sent,
    but a delivery failure does not roll back the invitation.
    """
    from accounts.email_service import send_invitation_email

    require_owner(actor)

    email = email.strip().lower()
    if email == actor.user.email.lower():
        return CommandResult.fail("You cannot invite yourself.")

    if WorkspacePermission.objects.filter(workspace=actor.workspace, user__email__iexact=email).exists():
        return CommandResult.fail("This user already has access to the workspace.")

    if WorkspaceInvitation.objects.filter(
        workspace=actor.workspace,
        email=email,
        status=WorkspaceInvitation.Status.PENDING,
        expires_at__gt=timezone.now(),
    ).exists():
        return CommandResult.fail("An invitation for this email is already pending.")

    invitation = WorkspaceInvitation.objects.create(
        workspace=actor.workspace,
        email=email,
        role=role,
        invited_by=actor.user,
        expires_at=timezone.now() + timedelta(days=settings.INVITATION_EXPIRY_DAYS),
    )
    # Invitees must be able to log in to accept.
    AuthorizedEmail.objects.get_or_create(
        email=email,
        defaults={"added_by": actor.user, "notes": f"Invited to workspace {actor.workspace.pk}"},
    )

    transaction.on_commit(lambda: send_invitation_email(invitation))
    logger.info(f"Invited {email} to workspace {actor.workspace.pk} as {role}")
    return CommandResult.ok(invitation)


@transaction.atomic
def accept_invitation(user, invitation_id: int) -> CommandResult:
    """
    Accept a pending invitation addressed to the user's email.

    Creates (or replaces) the user's grant: all modules, view always,
    add/delete/edit_shared only for the admin role.
    """
    try:
        invitation = WorkspaceInvitation.objects.select_for_update().select_related(
            "workspace"
        ).get(pk=invitation_id)
    except WorkspaceInvitation.DoesNotExist:
        return CommandResult.missing("Invitation")

    if invitation.email.lower() != user.email.lower():
        return CommandResult.fail("This invitation was sent to a different email address.")
    if invitation.status != WorkspaceInvitation.Status.PENDING:
        return CommandResult.fail(f"Invitation is {invitation.status}.")
    if invitation.is_expired:
        return CommandResult.fail("Invitation has expired.")

    is_admin = invitation.role == WorkspaceInvitation.Role.ADMIN
    grant, _ = WorkspacePermission.objects.update_or_create(
        workspace=invitation.workspace,
        user=user,
        defaults={
            "module": PermissionModule.ALL,
            "can_view": True,
            "can_add": is_admin,
            "can_delete": is_admin,
            "can_edit_shared": is_admin,
        },
    )

    invitation.status = WorkspaceInvitation.Status.ACCEPTED
    invitation.accepted_at = timezone.now()
    invitation.save(update_fields=["status", "accepted_at"])

    logger.info(f"{user.email} joined workspace {invitation.workspace_id}")
    return CommandResult.ok({"invitation": invitation, "grant": grant})


@transaction.atomic
def revoke_invitation(actor: ActorContext, invitation_id: int) -> CommandResult:
    require_owner(actor)

    try:
        invitation = WorkspaceInvitation.objects.select_for_update().get(
            pk=invitation_id, workspace=actor.workspace
        )
    except WorkspaceInvitation.DoesNotExist:
        return CommandResult.missing("Invitation")

    if invitation.status != WorkspaceInvitation.Status.PENDING:
        return CommandResult.fail("Only pending invitations can be revoked.")

    invitation.status = WorkspaceInvitation.Status.REVOKED
    invitation.save(update_fields=["status"])
    return CommandResult.ok(invitation)
