# accounts/views.py
"""
Auth, workspace and sharing endpoints.

Thin views: parse input, resolve the actor, call a command and format the
response.
"""

from rest_framework import generics, permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.views import TokenRefreshView

from .authz import require_admin, require_owner, resolve_actor
from .commands import (
    accept_invitation,
    add_authorized_email,
    create_workspace,
    grant_permission,
    invite_user,
    provision_user_workspace,
    register_user,
    remove_authorized_email,
    rename_workspace,
    revoke_invitation,
    revoke_permission,
)
from .models import AuthorizedEmail, Workspace, WorkspaceInvitation, WorkspacePermission
from .responses import failure_response
from .serializers import (
    AuthorizedEmailCreateSerializer,
    AuthorizedEmailSerializer,
    EmailTokenObtainPairSerializer,
    GrantPermissionSerializer,
    InvitationCreateSerializer,
    InvitationSerializer,
    ProfileSerializer,
    RegistrationSerializer,
    WorkspaceCreateSerializer,
    WorkspacePermissionSerializer,
    WorkspaceSerializer,
    tokens_for,
)
from .throttles import InvitationThrottle, LoginThrottle, RegistrationThrottle


# =============================================================================
# Authentication
# =============================================================================

class RegisterView(generics.GenericAPIView):
    serializer_class = RegistrationSerializer
    permission_classes = [permissions.AllowAny]
    throttle_classes = [RegistrationThrottle]

    def post(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = register_user(**serializer.validated_data)
        if not result.success:
            return failure_response(result)

        return Response(tokens_for(result.data["user"]), status=status.HTTP_201_CREATED)


class LoginView(generics.GenericAPIView):
    serializer_class = EmailTokenObtainPairSerializer
    permission_classes = [permissions.AllowAny]
    throttle_classes = [LoginThrottle]

    def post(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        return Response(serializer.validated_data, status=status.HTTP_200_OK)


class LifeHubTokenRefreshView(TokenRefreshView):
    permission_classes = [permissions.AllowAny]


class LogoutView(APIView):
    permission_classes = [permissions.AllowAny]

    def post(self, request, *args, **kwargs):
        refresh_token = request.data.get("refresh")
        if not refresh_token:
            return Response({"detail": "Refresh token required"}, status=status.HTTP_400_BAD_REQUEST)
        try:
            token = RefreshToken(refresh_token)
            token.blacklist()
        except TokenError:
            return Response({"detail": "Invalid token"}, status=status.HTTP_400_BAD_REQUEST)
        return Response(status=status.HTTP_204_NO_CONTENT)


class MeView(APIView):
    """
    GET /api/auth/me/ -> profile with owned and shared workspaces.

    Users without a workspace of their own get a default one on first call.
    """
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, *args, **kwargs):
        if not Workspace.objects.filter(owner=request.user).exists():
            provision_user_workspace(request.user.email, request.user.name)
        profile = ProfileSerializer.from_user(request.user)
        return Response(profile.data)


# =============================================================================
# Workspaces
# =============================================================================

class WorkspaceListCreateView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        return Response(ProfileSerializer.from_user(request.user).data)

    def post(self, request):
        serializer = WorkspaceCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = create_workspace(request.user, serializer.validated_data["name"])
        if not result.success:
            return failure_response(result)

        return Response(WorkspaceSerializer(result.data).data, status=status.HTTP_201_CREATED)


class WorkspaceDetailView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, workspace_id):
        actor = resolve_actor(request, workspace_id)
        data = WorkspaceSerializer(actor.workspace).data
        data["is_owner"] = actor.is_owner
        data["permission"] = (
            WorkspacePermissionSerializer(actor.grant).data if actor.grant else None
        )
        return Response(data)

    def patch(self, request, workspace_id):
        actor = resolve_actor(request, workspace_id)
        serializer = WorkspaceCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = rename_workspace(actor, serializer.validated_data["name"])
        if not result.success:
            return failure_response(result)
        return Response(WorkspaceSerializer(result.data).data)


# =============================================================================
# Members & Permissions
# =============================================================================

class WorkspaceMemberListView(APIView):
    """
    GET /api/workspaces/<id>/members/ -> grants in the workspace (owner only)
    POST /api/workspaces/<id>/members/ -> grant or update a user's access
    """
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, workspace_id):
        actor = resolve_actor(request, workspace_id)
        require_owner(actor)

        grants = WorkspacePermission.objects.filter(
            workspace=actor.workspace,
        ).select_related("user").order_by("created_at")
        return Response(WorkspacePermissionSerializer(grants, many=True).data)

    def post(self, request, workspace_id):
        actor = resolve_actor(request, workspace_id)
        serializer = GrantPermissionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = grant_permission(actor, **serializer.validated_data)
        if not result.success:
            return failure_response(result)
        return Response(WorkspacePermissionSerializer(result.data).data, status=status.HTTP_201_CREATED)


class WorkspaceMemberDetailView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def delete(self, request, workspace_id, user_id):
        actor = resolve_actor(request, workspace_id)

        result = revoke_permission(actor, user_id)
        if not result.success:
            return failure_response(result)
        return Response(status=status.HTTP_204_NO_CONTENT)


# =============================================================================
# Invitations
# =============================================================================

class InvitationListCreateView(APIView):
    permission_classes = [permissions.IsAuthenticated]
    throttle_classes = [InvitationThrottle]

    def get(self, request, workspace_id):
        actor = resolve_actor(request, workspace_id)
        require_owner(actor)

        invitations = WorkspaceInvitation.objects.filter(
            workspace=actor.workspace,
        ).select_related("workspace", "invited_by")
        return Response(InvitationSerializer(invitations, many=True).data)

    def post(self, request, workspace_id):
        actor = resolve_actor(request, workspace_id)
        serializer = InvitationCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = invite_user(actor, **serializer.validated_data)
        if not result.success:
            return failure_response(result)
        return Response(InvitationSerializer(result.data).data, status=status.HTTP_201_CREATED)


class InvitationRevokeView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, workspace_id, invitation_id):
        actor = resolve_actor(request, workspace_id)

        result = revoke_invitation(actor, invitation_id)
        if not result.success:
            return failure_response(result)
        return Response(InvitationSerializer(result.data).data)


class MyInvitationListView(APIView):
    """GET /api/invitations/ -> pending invitations addressed to the caller."""
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        invitations = WorkspaceInvitation.objects.filter(
            email__iexact=request.user.email,
            status=WorkspaceInvitation.Status.PENDING,
        ).select_related("workspace", "invited_by")
        return Response(InvitationSerializer(invitations, many=True).data)


class InvitationAcceptView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, invitation_id):
        result = accept_invitation(request.user, invitation_id)
        if not result.success:
            return failure_response(result)
        return Response(InvitationSerializer(result.data["invitation"]).data)


# =============================================================================
# Allow-list administration
# =============================================================================

class AuthorizedEmailListCreateView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        require_admin(request.user)
        entries = AuthorizedEmail.objects.select_related("added_by")
        return Response(AuthorizedEmailSerializer(entries, many=True).data)

    def post(self, request):
        serializer = AuthorizedEmailCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = add_authorized_email(request.user, **serializer.validated_data)
        if not result.success:
            return failure_response(result)
        return Response(AuthorizedEmailSerializer(result.data).data, status=status.HTTP_201_CREATED)


class AuthorizedEmailDetailView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def delete(self, request, pk):
        result = remove_authorized_email(request.user, pk)
        if not result.success:
            return failure_response(result)
        return Response(status=status.HTTP_204_NO_CONTENT)
