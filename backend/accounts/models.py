from django.conf import settings
from django.contrib.auth.models import AbstractUser, BaseUserManager
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class UserManager(BaseUserManager):
    use_in_migrations = True

    def _create_user(self, email, password, **extra_fields):
        if not email:
            raise ValueError("The given email must be set")
        email = self.normalize_email(email)
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_user(self, email, password=None, **extra_fields):
        extra_fields.setdefault("is_staff", False)
        extra_fields.setdefault("is_superuser", False)
        return self._create_user(email, password, **extra_fields)

    def create_superuser(self, email, password, **extra_fields):
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)

        if extra_fields.get("is_staff") is not True:
            raise ValueError("Superuser must have is_staff=True.")
        if extra_fields.get("is_superuser") is not True:
            raise ValueError("Superuser must have is_superuser=True.")

        return self._create_user(email, password, **extra_fields)


class User(AbstractUser):
    username = None
    email = models.EmailField("email address", unique=True)
    name = models.CharField(max_length=150, blank=True)

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = ["name"]

    objects = UserManager()

    def __str__(self):
        return self.email

    @property
    def is_admin(self) -> bool:
        """Platform administrators manage the allow-list."""
        return self.is_staff or self.is_superuser

    @property
    def display_name(self) -> str:
        return self.name or self.email.split("@")[0]


class PermissionModule(models.TextChoices):
    """Feature areas capability flags are scoped to. ALL is the wildcard."""

    ALL = "all", _("All modules")
    INVOICING = "invoicing", _("Invoicing")
    CUSTOMERS = "customers", _("Customers")
    BUDGET = "budget", _("Budget")
    FINANCE = "finance", _("Finance")
    FLOW = "flow", _("Flow")
    FOOD = "food", _("Food")
    DASHBOARD = "dashboard", _("Dashboard")
    SETTINGS = "settings", _("Settings")


class Workspace(models.Model):
    """Tenant root. Every domain row belongs to exactly one workspace."""

    name = models.CharField(max_length=200)
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="owned_workspaces",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["created_at"]

    def __str__(self):
        return self.name


class WorkspacePermission(models.Model):
    """Grant of capability flags on one module (or ALL) to a user."""

    workspace = models.ForeignKey(Workspace, on_delete=models.CASCADE, related_name="permissions")
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="workspace_permissions",
    )
    module = models.CharField(
        max_length=20,
        choices=PermissionModule.choices,
        default=PermissionModule.ALL,
    )
    can_view = models.BooleanField(default=True)
    can_add = models.BooleanField(default=False)
    can_delete = models.BooleanField(default=False)
    can_edit_shared = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["workspace", "user"],
                name="uniq_workspace_permission_user",
            ),
        ]

    def __str__(self):
        return f"{self.user_id}@{self.workspace_id}:{self.module}"

    def covers(self, module: str) -> bool:
        return self.module == PermissionModule.ALL or self.module == module


class AuthorizedEmail(models.Model):
    """Dynamic part of the login allow-list."""

    email = models.EmailField(unique=True)
    added_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["email"]

    def save(self, *args, **kwargs):
        self.email = self.email.strip().lower()
        super().save(*args, **kwargs)

    def __str__(self):
        return self.email


class WorkspaceInvitation(models.Model):
    class Role(models.TextChoices):
        USER = "user", _("User")
        ADMIN = "admin", _("Admin")

    class Status(models.TextChoices):
        PENDING = "pending", _("Pending")
        ACCEPTED = "accepted", _("Accepted")
        REVOKED = "revoked", _("Revoked")

    workspace = models.ForeignKey(Workspace, on_delete=models.CASCADE, related_name="invitations")
    email = models.EmailField()
    role = models.CharField(max_length=10, choices=Role.choices, default=Role.USER)
    status = models.CharField(max_length=10, choices=Status.choices, default=Status.PENDING)
    invited_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="sent_invitations",
    )
    expires_at = models.DateTimeField()
    accepted_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["email", "status"], name="invitation_email_status_idx"),
        ]

    def __str__(self):
        return f"{self.email} -> {self.workspace_id} ({self.status})"

    @property
    def is_expired(self) -> bool:
        return self.expires_at <= timezone.now()


class WorkspaceScopedModel(models.Model):
    """
    Abstract base for domain rows.

    Carries the tenant foreign key and the create/update timestamps every
    entity in the system shares.
    """

    workspace = models.ForeignKey(
        Workspace,
        on_delete=models.CASCADE,
        related_name="%(app_label)s_%(class)s_set",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True
