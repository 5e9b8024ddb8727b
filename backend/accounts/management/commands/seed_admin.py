# accounts/management/commands/seed_admin.py

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError

from accounts.commands import provision_user_workspace
from accounts.models import AuthorizedEmail

User = get_user_model()


class Command(BaseCommand):
    help = "Create the initial administrator, allow-list their email and provision a workspace"

    def add_arguments(self, parser):
        parser.add_argument("email")
        parser.add_argument("--password", required=True)
        parser.add_argument("--name", default="")

    def handle(self, *args, **options):
        email = options["email"].strip().lower()

        user = User.objects.filter(email__iexact=email).first()
        if user is None:
            user = User.objects.create_superuser(
                email=email,
                password=options["password"],
                name=options["name"],
            )
            self.stdout.write(f"Created admin {email}")
        elif not user.is_staff:
            raise CommandError(f"{email} exists but is not staff.")

        AuthorizedEmail.objects.get_or_create(email=email, defaults={"added_by": user, "notes": "seed_admin"})

        result = provision_user_workspace(email, options["name"])
        workspace = result.data["workspace"]

        self.stdout.write(self.style.SUCCESS(f"Done! Workspace {workspace.pk} ({workspace.name})."))
