# tests/test_accounts.py
"""
Tests for the accounts module.

Tests cover:
- Capability resolution (owner, module grants, ALL wildcard)
- resolve_actor tenant boundary
- Grants, allow-list and invitations
- Login / registration gated by the allow-list
"""

from datetime import timedelta

import pytest
from django.contrib.auth import get_user_model
from django.core import mail
from django.core.management import CommandError, call_command
from django.core.exceptions import PermissionDenied
from django.utils import timezone

from accounts.authz import Capability, is_email_authorized, require
from accounts.commands import (
    accept_invitation,
    add_authorized_email,
    create_workspace,
    grant_permission,
    invite_user,
    provision_user_workspace,
    remove_authorized_email,
    revoke_invitation,
    revoke_permission,
)
from accounts.models import AuthorizedEmail, PermissionModule, Workspace, WorkspaceInvitation, WorkspacePermission


User = get_user_model()


# =============================================================================
# Capability checks
# =============================================================================

@pytest.mark.django_db
class TestCapabilities:

    def test_owner_has_every_capability(self, actor):
        for module in PermissionModule.values:
            for capability in Capability:
                assert actor.can(module, capability) is True

    def test_view_only_grant_rejects_mutations(self, viewer_actor):
        assert viewer_actor.can(PermissionModule.CUSTOMERS, Capability.VIEW) is True
        with pytest.raises(PermissionDenied):
            require(viewer_actor, PermissionModule.CUSTOMERS, Capability.ADD)
        with pytest.raises(PermissionDenied):
            require(viewer_actor, PermissionModule.CUSTOMERS, Capability.DELETE)

    def test_module_grant_covers_only_its_module(self, make_member_actor):
        member_actor = make_member_actor(module=PermissionModule.BUDGET, add=True)

        assert member_actor.can(PermissionModule.BUDGET, Capability.ADD) is True
        assert member_actor.can(PermissionModule.INVOICING, Capability.VIEW) is False

    def test_all_wildcard_covers_every_module(self, make_member_actor):
        member_actor = make_member_actor(module=PermissionModule.ALL, add=True)

        assert member_actor.can(PermissionModule.FOOD, Capability.ADD) is True
        assert member_actor.can(PermissionModule.FOOD, Capability.DELETE) is False


@pytest.mark.django_db
class TestResolveActor:

    def test_workspace_of_someone_else_is_forbidden(self, outsider_client, workspace):
        response = outsider_client.get(f"/api/workspaces/{workspace.pk}/")
        assert response.status_code == 403

    def test_unknown_workspace_is_404(self, owner_client):
        response = owner_client.get("/api/workspaces/999999/")
        assert response.status_code == 404

    def test_anonymous_is_401(self, api_client, workspace):
        response = api_client.get(f"/api/workspaces/{workspace.pk}/")
        assert response.status_code == 401

    def test_removed_from_allow_list_is_forbidden(self, owner_client, owner, workspace, settings):
        settings.ALLOWED_EMAILS = []
        AuthorizedEmail.objects.filter(email=owner.email).delete()

        response = owner_client.get(f"/api/workspaces/{workspace.pk}/")
        assert response.status_code == 403

    def test_shared_member_sees_grant(self, member_client, member, workspace):
        WorkspacePermission.objects.create(workspace=workspace, user=member, can_view=True)

        response = member_client.get(f"/api/workspaces/{workspace.pk}/")

        assert response.status_code == 200
        assert response.data["is_owner"] is False
        assert response.data["permission"]["can_view"] is True


# =============================================================================
# Provisioning & grants
# =============================================================================

@pytest.mark.django_db
class TestProvisioning:

    def test_provision_creates_user_workspace_and_owner_grant(self):
        result = provision_user_workspace("new@test.com", "New Person")

        assert result.success
        assert result.data["created"] is True
        workspace = result.data["workspace"]
        assert workspace.name == "New Person's Workspace"
        grant = WorkspacePermission.objects.get(workspace=workspace, user=result.data["user"])
        assert grant.module == PermissionModule.ALL
        assert grant.can_delete is True

    def test_provision_is_idempotent(self):
        first = provision_user_workspace("new@test.com", "New Person")
        second = provision_user_workspace("new@test.com", "New Person")

        assert second.data["created"] is False
        assert second.data["workspace"].pk == first.data["workspace"].pk
        assert Workspace.objects.filter(owner=first.data["user"]).count() == 1

    def test_create_workspace_requires_name(self, owner):
        result = create_workspace(owner, "   ")
        assert not result.success

    def test_seed_admin_command(self):
        call_command("seed_admin", "Admin@Test.com", password="longpassword", name="Admin")
        call_command("seed_admin", "admin@test.com", password="longpassword")

        admin = User.objects.get(email="admin@test.com")
        assert admin.is_superuser
        assert AuthorizedEmail.objects.filter(email="admin@test.com").count() == 1
        assert Workspace.objects.filter(owner=admin).count() == 1

    def test_seed_admin_refuses_non_staff(self, owner):
        with pytest.raises(CommandError):
            call_command("seed_admin", owner.email, password="longpassword")


@pytest.mark.django_db
class TestGrants:

    def test_grant_upserts_single_row(self, actor, member):
        grant_permission(actor, member.pk, module=PermissionModule.FLOW, can_add=True)
        grant_permission(actor, member.pk, module=PermissionModule.FOOD, can_delete=True)

        grants = WorkspacePermission.objects.filter(workspace=actor.workspace, user=member)
        assert grants.count() == 1
        assert grants.get().module == PermissionModule.FOOD

    def test_only_owner_can_grant(self, viewer_actor, outsider):
        with pytest.raises(PermissionDenied):
            grant_permission(viewer_actor, outsider.pk)

    def test_owner_grant_cannot_be_revoked(self, actor, owner):
        result = revoke_permission(actor, owner.pk)
        assert not result.success

    def test_revoke_removes_access(self, actor, member):
        grant_permission(actor, member.pk)

        result = revoke_permission(actor, member.pk)

        assert result.success
        assert not WorkspacePermission.objects.filter(workspace=actor.workspace, user=member).exists()


# =============================================================================
# Allow-list
# =============================================================================

@pytest.mark.django_db
class TestAllowList:

    def test_admin_adds_and_removes_email(self, admin_user):
        result = add_authorized_email(admin_user, " Someone@Test.com ")

        assert result.success
        assert is_email_authorized("someone@test.com")

        remove_authorized_email(admin_user, result.data.pk)
        assert not is_email_authorized("someone@test.com")

    def test_duplicate_email_rejected(self, admin_user):
        add_authorized_email(admin_user, "someone@test.com")

        result = add_authorized_email(admin_user, "SOMEONE@test.com")

        assert not result.success
        assert result.error == "Email already authorized"

    def test_non_admin_cannot_manage(self, owner):
        with pytest.raises(PermissionDenied):
            add_authorized_email(owner, "someone@test.com")

    def test_static_allow_list_from_settings(self, db, settings):
        settings.ALLOWED_EMAILS = ["static@test.com"]
        assert is_email_authorized("Static@Test.com")
        assert not is_email_authorized("")


# =============================================================================
# Invitations
# =============================================================================

@pytest.mark.django_db(transaction=True)
class TestInvitations:

    def test_invite_sends_email_and_allow_lists(self, actor):
        result = invite_user(actor, "invitee@test.com")

        assert result.success
        assert is_email_authorized("invitee@test.com")
        assert len(mail.outbox) == 1
        assert "invitee@test.com" in mail.outbox[0].to

    def test_accept_creates_view_only_grant_for_user_role(self, actor):
        invitation = invite_user(actor, "invitee@test.com").data
        invitee = User.objects.create_user(email="invitee@test.com", password="testpass123")

        result = accept_invitation(invitee, invitation.pk)

        assert result.success
        grant = result.data["grant"]
        assert grant.module == PermissionModule.ALL
        assert grant.can_view is True
        assert grant.can_add is False

    def test_accept_admin_role_grants_write_access(self, actor):
        invitation = invite_user(actor, "invitee@test.com", role=WorkspaceInvitation.Role.ADMIN).data
        invitee = User.objects.create_user(email="invitee@test.com", password="testpass123")

        grant = accept_invitation(invitee, invitation.pk).data["grant"]

        assert grant.can_add and grant.can_delete and grant.can_edit_shared

    def test_accept_with_other_email_fails(self, actor, member):
        invitation = invite_user(actor, "invitee@test.com").data

        result = accept_invitation(member, invitation.pk)

        assert not result.success

    def test_expired_invitation_cannot_be_accepted(self, actor):
        invitation = invite_user(actor, "invitee@test.com").data
        WorkspaceInvitation.objects.filter(pk=invitation.pk).update(
            expires_at=timezone.now() - timedelta(minutes=1)
        )
        invitee = User.objects.create_user(email="invitee@test.com", password="testpass123")

        result = accept_invitation(invitee, invitation.pk)

        assert not result.success
        assert result.error == "Invitation has expired."

    def test_revoked_invitation_cannot_be_accepted(self, actor):
        invitation = invite_user(actor, "invitee@test.com").data
        revoke_invitation(actor, invitation.pk)
        invitee = User.objects.create_user(email="invitee@test.com", password="testpass123")

        result = accept_invitation(invitee, invitation.pk)

        assert not result.success


# =============================================================================
# Auth endpoints
# =============================================================================

@pytest.mark.django_db
class TestAuthEndpoints:

    def test_login_returns_token_pair(self, api_client, owner):
        response = api_client.post(
            "/api/auth/login/",
            {"email": "owner@test.com", "password": "testpass123"},
            format="json",
        )

        assert response.status_code == 200
        assert "access" in response.data
        assert "refresh" in response.data

    def test_login_rejects_unlisted_email(self, api_client, db, settings):
        settings.ALLOWED_EMAILS = []
        User.objects.create_user(email="stranger@test.com", password="testpass123")

        response = api_client.post(
            "/api/auth/login/",
            {"email": "stranger@test.com", "password": "testpass123"},
            format="json",
        )

        assert response.status_code == 403

    def test_register_requires_allow_list(self, api_client, db, settings):
        settings.ALLOWED_EMAILS = []

        response = api_client.post(
            "/api/auth/register/",
            {"email": "new@test.com", "password": "longpassword"},
            format="json",
        )

        assert response.status_code == 400

    def test_register_provisions_workspace(self, api_client, db, settings):
        settings.ALLOWED_EMAILS = ["new@test.com"]

        response = api_client.post(
            "/api/auth/register/",
            {"email": "new@test.com", "password": "longpassword", "name": "New"},
            format="json",
        )

        assert response.status_code == 201
        assert Workspace.objects.filter(owner__email="new@test.com").count() == 1

    def test_me_provisions_default_workspace(self, owner_client, owner):
        response = owner_client.get("/api/auth/me/")

        assert response.status_code == 200
        assert len(response.data["owned_workspaces"]) == 1
