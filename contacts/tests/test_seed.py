"""Tests for `seed_contacts` / `contacts.seed.initialize`."""

from __future__ import annotations

from io import StringIO

from django.contrib.auth import get_user_model
from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import TestCase, override_settings

from accounts.roles import ADMINISTRATOR, MANAGER
from contacts.models import Contact, ContactStatus
from contacts.seed import ADMIN_EMAIL, MANAGER_EMAIL, SAMPLE_CONTACTS, initialize

User = get_user_model()


class SeedInitializeTests(TestCase):
    def test_creates_role_holders_and_contacts(self):
        result = initialize(admin_password="Adm1n!pass", manager_password="Mgr!pass99")

        admin = User.objects.get(username=ADMIN_EMAIL)
        manager = User.objects.get(username=MANAGER_EMAIL)
        self.assertEqual(result.admin_id, admin.pk)
        self.assertTrue(admin.email_confirmed)
        self.assertTrue(admin.check_password("Adm1n!pass"))
        self.assertEqual(admin.role_claims, frozenset({ADMINISTRATOR}))
        self.assertEqual(manager.role_claims, frozenset({MANAGER}))

        self.assertEqual(result.contacts_created, len(SAMPLE_CONTACTS))
        self.assertEqual(Contact.objects.filter(owner=admin).count(), len(SAMPLE_CONTACTS))
        self.assertTrue(Contact.objects.filter(status=ContactStatus.APPROVED).exists())

    def test_idempotent(self):
        initialize(admin_password="Adm1n!pass", manager_password="Mgr!pass99")
        result = initialize(admin_password="New!pass123", manager_password="Mgr!pass99")

        self.assertEqual(result.contacts_created, 0)
        self.assertEqual(Contact.objects.count(), len(SAMPLE_CONTACTS))
        self.assertEqual(User.objects.filter(username=ADMIN_EMAIL).count(), 1)
        self.assertTrue(User.objects.get(username=ADMIN_EMAIL).check_password("New!pass123"))


class SeedCommandTests(TestCase):
    @override_settings(SEED_ADMIN_PW="", SEED_MANAGER_PW="")
    def test_missing_passwords(self):
        with self.assertRaises(CommandError):
            call_command("seed_contacts", "--skip-migrate", stdout=StringIO())

    @override_settings(SEED_ADMIN_PW="Adm1n!pass", SEED_MANAGER_PW="Mgr!pass99")
    def test_command_seeds_from_settings(self):
        out = StringIO()
        call_command("seed_contacts", "--skip-migrate", stdout=out)
        self.assertIn("Sample contacts created: 5", out.getvalue())
        self.assertTrue(User.objects.filter(username=MANAGER_EMAIL).exists())
