# tests/conftest.py
"""
Pytest fixtures for LifeHub tests.

Two workspaces with different owners give every test a tenant boundary to
check against. Shared users get explicit WorkspacePermission grants.
"""

import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from accounts.authz import ActorContext, actor_for
from accounts.models import AuthorizedEmail, PermissionModule, Workspace, WorkspacePermission


User = get_user_model()


def _authorized_user(email, name, **extra):
    AuthorizedEmail.objects.get_or_create(email=email)
    return User.objects.create_user(email=email, password="testpass123", name=name, **extra)


def grant(workspace, user, module=PermissionModule.ALL, view=True, add=False, delete=False, edit_shared=False):
    return WorkspacePermission.objects.create(
        workspace=workspace,
        user=user,
        module=module,
        can_view=view,
        can_add=add,
        can_delete=delete,
        can_edit_shared=edit_shared,
    )


# =============================================================================
# Users & Workspaces
# =============================================================================

@pytest.fixture
def owner(db):
    return _authorized_user("owner@test.com", "Test Owner")


@pytest.fixture
def member(db):
    """A user the owner shares the workspace with."""
    return _authorized_user("member@test.com", "Test Member")


@pytest.fixture
def outsider(db):
    return _authorized_user("outsider@test.com", "Test Outsider")


@pytest.fixture
def admin_user(db):
    return User.objects.create_user(
        email="admin@test.com",
        password="testpass123",
        name="Test Admin",
        is_staff=True,
    )


@pytest.fixture
def workspace(db, owner):
    workspace = Workspace.objects.create(name="Test Workspace", owner=owner)
    grant(workspace, owner, add=True, delete=True, edit_shared=True)
    return workspace


@pytest.fixture
def other_workspace(db, outsider):
    """Second tenant for isolation tests."""
    workspace = Workspace.objects.create(name="Other Workspace", owner=outsider)
    grant(workspace, outsider, add=True, delete=True, edit_shared=True)
    return workspace


# =============================================================================
# Actor Context Fixtures
# =============================================================================

@pytest.fixture
def actor(owner, workspace):
    """ActorContext of the workspace owner."""
    return actor_for(owner, workspace)


@pytest.fixture
def other_actor(outsider, other_workspace):
    return actor_for(outsider, other_workspace)


@pytest.fixture
def viewer_actor(member, workspace):
    """Member with view-only access to every module."""
    permission = grant(workspace, member)
    return ActorContext(user=member, workspace=workspace, grant=permission)


@pytest.fixture
def make_member_actor(member, workspace):
    """Build an ActorContext for the member with a specific grant."""
    def _make(module=PermissionModule.ALL, **flags):
        WorkspacePermission.objects.filter(workspace=workspace, user=member).delete()
        permission = grant(workspace, member, module=module, **flags)
        return ActorContext(user=member, workspace=workspace, grant=permission)
    return _make


# =============================================================================
# API Clients
# =============================================================================

@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def owner_client(owner):
    client = APIClient()
    client.force_authenticate(user=owner)
    return client


@pytest.fixture
def member_client(member):
    client = APIClient()
    client.force_authenticate(user=member)
    return client


@pytest.fixture
def outsider_client(outsider):
    client = APIClient()
    client.force_authenticate(user=outsider)
    return client


@pytest.fixture
def ws_url(workspace):
    """Build /api/workspaces/<id>/... URLs for the test workspace."""
    def _url(path):
        return f"/api/workspaces/{workspace.pk}/{path.lstrip('/')}"
    return _url
