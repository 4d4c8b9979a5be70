from __future__ import annotations

"""
Apply migrations and seed the administrator, manager and sample contacts.

Passwords come from `--admin-password` / `--manager-password`, falling back to
the `SEED_ADMIN_PW` / `SEED_MANAGER_PW` settings (environment). Both must be
set; the accounts are otherwise unusable.

Usage
-----
    python manage.py seed_contacts
    python manage.py seed_contacts --skip-migrate --admin-password ... --manager-password ...
"""

from django.conf import settings
from django.core.management import call_command
from django.core.management.base import BaseCommand, CommandError, CommandParser

from contacts.seed import ADMIN_EMAIL, MANAGER_EMAIL, initialize


class Command(BaseCommand):
    help = "Apply migrations, then seed role holders and sample contacts (idempotent)."

    def add_arguments(self, parser: CommandParser) -> None:
        parser.add_argument(
            "--skip-migrate",
            action="store_true",
            default=False,
            help="Do not run `migrate` before seeding.",
        )
        parser.add_argument("--admin-password", default=None, help="Overrides SEED_ADMIN_PW.")
        parser.add_argument("--manager-password", default=None, help="Overrides SEED_MANAGER_PW.")

    def handle(self, *args, **options):
        admin_pw = options["admin_password"] or getattr(settings, "SEED_ADMIN_PW", "")
        manager_pw = options["manager_password"] or getattr(settings, "SEED_MANAGER_PW", "")
        missing = [name for name, value in (("SEED_ADMIN_PW", admin_pw), ("SEED_MANAGER_PW", manager_pw)) if not value]
        if missing:
            raise CommandError(f"Seed passwords not configured: {', '.join(missing)}.")

        if not options["skip_migrate"]:
            call_command("migrate", interactive=False, verbosity=options["verbosity"])

        result = initialize(admin_password=admin_pw, manager_password=manager_pw)
        self.stdout.write(self.style.SUCCESS(f"Users ready: {ADMIN_EMAIL}, {MANAGER_EMAIL}"))
        self.stdout.write(self.style.SUCCESS(f"Sample contacts created: {result.contacts_created}"))
