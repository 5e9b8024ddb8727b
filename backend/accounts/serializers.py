from django.contrib.auth import authenticate
from rest_framework import serializers
from rest_framework.exceptions import AuthenticationFailed, PermissionDenied
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer
from rest_framework_simplejwt.tokens import RefreshToken

from .authz import is_email_authorized
from .models import (
    AuthorizedEmail,
    PermissionModule,
    User,
    Workspace,
    WorkspaceInvitation,
    WorkspacePermission,
)


def tokens_for(user) -> dict:
    refresh = RefreshToken.for_user(user)
    return {"access": str(refresh.access_token), "refresh": str(refresh)}


class UserSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ("id", "email", "name", "is_staff")


class WorkspaceSerializer(serializers.ModelSerializer):
    owner_email = serializers.EmailField(source="owner.email", read_only=True)

    class Meta:
        model = Workspace
        fields = ("id", "name", "owner", "owner_email", "created_at", "updated_at")
        read_only_fields = fields


class WorkspaceCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=200)


class WorkspacePermissionSerializer(serializers.ModelSerializer):
    user = UserSerializer(read_only=True)

    class Meta:
        model = WorkspacePermission
        fields = (
            "id", "user", "module",
            "can_view", "can_add", "can_delete", "can_edit_shared",
            "created_at", "updated_at",
        )


class GrantPermissionSerializer(serializers.Serializer):
    user_id = serializers.IntegerField()
    module = serializers.ChoiceField(choices=PermissionModule.choices, default=PermissionModule.ALL)
    can_view = serializers.BooleanField(default=True)
    can_add = serializers.BooleanField(default=False)
    can_delete = serializers.BooleanField(default=False)
    can_edit_shared = serializers.BooleanField(default=False)


class AuthorizedEmailSerializer(serializers.ModelSerializer):
    added_by_email = serializers.EmailField(source="added_by.email", read_only=True, default=None)

    class Meta:
        model = AuthorizedEmail
        fields = ("id", "email", "notes", "added_by_email", "created_at")


class AuthorizedEmailCreateSerializer(serializers.Serializer):
    email = serializers.EmailField()
    notes = serializers.CharField(required=False, allow_blank=True, default="")


class InvitationSerializer(serializers.ModelSerializer):
    workspace_name = serializers.CharField(source="workspace.name", read_only=True)
    invited_by_email = serializers.EmailField(source="invited_by.email", read_only=True)
    is_expired = serializers.BooleanField(read_only=True)

    class Meta:
        model = WorkspaceInvitation
        fields = (
            "id", "workspace", "workspace_name", "email", "role", "status",
            "invited_by_email", "expires_at", "accepted_at", "created_at", "is_expired",
        )


class InvitationCreateSerializer(serializers.Serializer):
    email = serializers.EmailField()
    role = serializers.ChoiceField(
        choices=WorkspaceInvitation.Role.choices,
        default=WorkspaceInvitation.Role.USER,
    )


class RegistrationSerializer(serializers.Serializer):
    email = serializers.EmailField()
    name = serializers.CharField(max_length=150, required=False, allow_blank=True, default="")
    password = serializers.CharField(min_length=8, write_only=True)


class EmailTokenObtainPairSerializer(TokenObtainPairSerializer):
    username_field = User.EMAIL_FIELD

    def validate(self, attrs):
        authenticate_kwargs = {
            self.username_field: attrs.get("email"),
            "password": attrs.get("password"),
        }
        user = authenticate(request=self.context.get("request"), **authenticate_kwargs)
        if not user:
            raise AuthenticationFailed("Invalid credentials")
        if not user.is_admin and not is_email_authorized(user.email):
            raise PermissionDenied("Your email address is not authorized.")
        return tokens_for(user)


class ProfileSerializer(serializers.Serializer):
    user = UserSerializer()
    owned_workspaces = WorkspaceSerializer(many=True)
    shared_workspaces = WorkspaceSerializer(many=True)

    @classmethod
    def from_user(cls, user: User):
        owned = Workspace.objects.filter(owner=user).select_related("owner")
        shared = Workspace.objects.filter(
            permissions__user=user,
        ).exclude(owner=user).select_related("owner").distinct()
        return cls(instance={
            "user": user,
            "owned_workspaces": owned,
            "shared_workspaces": shared,
        })
