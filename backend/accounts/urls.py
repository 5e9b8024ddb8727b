# accounts/urls.py
"""
URL configuration for accounts/auth API.

Endpoints:
- /auth/ - Authentication (login, register, refresh, logout, me)
- /workspaces/ - Workspaces owned by or shared with the caller
- /workspaces/<id>/members/ - Permission grants (owner only)
- /workspaces/<id>/invitations/ - Invitations (owner only)
- /invitations/ - Invitations addressed to the caller
- /admin/authorized-emails/ - Login allow-list (admin only)
"""

from django.urls import path

from .views import (
    # Auth
    RegisterView,
    LoginView,
    LifeHubTokenRefreshView,
    LogoutView,
    MeView,
    # Workspaces
    WorkspaceListCreateView,
    WorkspaceDetailView,
    WorkspaceMemberListView,
    WorkspaceMemberDetailView,
    # Invitations
    InvitationListCreateView,
    InvitationRevokeView,
    MyInvitationListView,
    InvitationAcceptView,
    # Allow-list
    AuthorizedEmailListCreateView,
    AuthorizedEmailDetailView,
)

app_name = "accounts"

urlpatterns = [
    # ==========================================================================
    # Authentication
    # ==========================================================================
    path("auth/register/", RegisterView.as_view(), name="register"),
    path("auth/login/", LoginView.as_view(), name="login"),
    path("auth/refresh/", LifeHubTokenRefreshView.as_view(), name="token-refresh"),
    path("auth/logout/", LogoutView.as_view(), name="logout"),
    path("auth/me/", MeView.as_view(), name="me"),

    # ==========================================================================
    # Workspaces
    # ==========================================================================
    path("workspaces/", WorkspaceListCreateView.as_view(), name="workspace-list"),
    path("workspaces/<int:workspace_id>/", WorkspaceDetailView.as_view(), name="workspace-detail"),
    path("workspaces/<int:workspace_id>/members/", WorkspaceMemberListView.as_view(), name="workspace-members"),
    path(
        "workspaces/<int:workspace_id>/members/<int:user_id>/",
        WorkspaceMemberDetailView.as_view(),
        name="workspace-member-detail",
    ),

    # ==========================================================================
    # Invitations
    # ==========================================================================
    path(
        "workspaces/<int:workspace_id>/invitations/",
        InvitationListCreateView.as_view(),
        name="workspace-invitations",
    ),
    path(
        "workspaces/<int:workspace_id>/invitations/<int:invitation_id>/revoke/",
        InvitationRevokeView.as_view(),
        name="invitation-revoke",
    ),
    path("invitations/", MyInvitationListView.as_view(), name="my-invitations"),
    path("invitations/<int:invitation_id>/accept/", InvitationAcceptView.as_view(), name="invitation-accept"),

    # ==========================================================================
    # Allow-list
    # ==========================================================================
    path("admin/authorized-emails/", AuthorizedEmailListCreateView.as_view(), name="authorized-email-list"),
    path("admin/authorized-emails/<int:pk>/", AuthorizedEmailDetailView.as_view(), name="authorized-email-detail"),
]
