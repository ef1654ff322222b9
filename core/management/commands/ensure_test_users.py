# core/management/commands/ensure_test_users.py
from django.core.management.base import BaseCommand

from core.models import User
from core.seed import DEFAULT_ACCOUNTS


class Command(BaseCommand):
    help = "Ensure the staff accounts exist with their default passwords (idempotent)."

    def handle(self, *args, **opts):
        for username, password, role, user_type, department in DEFAULT_ACCOUNTS:
            u, created = User.objects.get_or_create(
                username=username,
                defaults={"role": role, "user_type": user_type, "department": department, "is_active": True},
            )
            # reset password, role and active flag on every run
            u.set_password(password)
            u.role = role
            u.user_type = user_type
            u.department = department
            u.is_active = True
            u.save()
            self.stdout.write(self.style.SUCCESS(f"ok: {username} ({role}){' created' if created else ''}"))
        self.stdout.write(self.style.SUCCESS("All staff accounts ensured."))
