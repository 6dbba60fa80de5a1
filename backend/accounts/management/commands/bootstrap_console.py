from __future__ import annotations

from django.core.management.base import BaseCommand

from accounts.models import Role, User
from menus.defaults import install_defaults


class Command(BaseCommand):
    help = "Install the default menus, roles and permissions and create the admin user if not present."

    def add_arguments(self, parser):
        parser.add_argument("--username", default="admin")
        parser.add_argument("--password", default="admin123")

    def handle(self, *args, **options):
        counts = install_defaults()
        self.stdout.write(
            self.style.SUCCESS(
                f"Installed {counts['menus']} menus, {counts['permissions']} permissions and {counts['roles']} roles."
            )
        )

        username = options["username"]
        password = options["password"]
        user, created = User.objects.get_or_create(
            username=username,
            defaults={
                "full_name": "System Admin",
                "is_staff": True,
                "is_superuser": True,
                "is_active": True,
            },
        )
        user.roles.add(*Role.objects.filter(code="admin"))

        if created:
            user.set_password(password)
            user.save()
            self.stdout.write(self.style.SUCCESS(f"Created default admin user: {username} / {password}"))
            return

        self.stdout.write(self.style.WARNING("Admin user already exists. Skipped."))
