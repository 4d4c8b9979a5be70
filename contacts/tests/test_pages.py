"""
Server-rendered contact page tests.

What these tests verify
-----------------------
- Fallback policy: anonymous requests to contact pages redirect to login.
- Login page refuses accounts whose email is not confirmed.
- Non-owner, non-admin, non-manager delete -> 403 and the row survives.
- Owner create/edit/delete round trip, including the edit review rule.
- Manager approves from the detail page; the owner cannot.
"""

from __future__ import annotations

from django.contrib.auth import get_user_model
from django.contrib.auth.models import Group
from django.test import TestCase
from django.urls import reverse

from accounts.roles import ADMINISTRATOR, MANAGER
from contacts.models import Contact, ContactStatus

User = get_user_model()


def make_user(username: str, *roles: str, confirmed: bool = True):
    user = User.objects.create_user(username=username, password="pass12345", email_confirmed=confirmed)
    for role in roles:
        group, _ = Group.objects.get_or_create(name=role)
        user.groups.add(group)
    return user


class AnonymousAccessTests(TestCase):
    def setUp(self):
        self.owner = make_user("alice")
        self.contact = Contact.objects.create(owner=self.owner, name="Debra Garcia")

    def test_contact_page_redirects_to_login(self):
        url = reverse("contact-detail", kwargs={"pk": self.contact.pk})
        resp = self.client.get(url)
        self.assertRedirects(resp, f"{reverse('login')}?next={url}", fetch_redirect_response=False)

    def test_list_redirects_to_login(self):
        resp = self.client.get(reverse("contact-list"))
        self.assertEqual(resp.status_code, 302)
        self.assertTrue(resp.url.startswith(reverse("login")))

    def test_login_page_is_public(self):
        self.assertEqual(self.client.get(reverse("login")).status_code, 200)

    def test_health_is_public(self):
        self.assertEqual(self.client.get("/health/").status_code, 200)


class LoginPageTests(TestCase):
    def test_unconfirmed_account_cannot_sign_in(self):
        make_user("carol", confirmed=False)
        resp = self.client.post(reverse("login"), {"username": "carol", "password": "pass12345"})
        self.assertEqual(resp.status_code, 200)
        self.assertFalse(resp.wsgi_request.user.is_authenticated)
        self.assertContains(resp, "Confirm your email address")

    def test_confirmed_account_signs_in(self):
        make_user("dave")
        resp = self.client.post(reverse("login"), {"username": "dave", "password": "pass12345"})
        self.assertRedirects(resp, reverse("contact-list"), fetch_redirect_response=False)


class ContactPageAuthorizationTests(TestCase):
    def setUp(self):
        self.alice = make_user("alice")
        self.bob = make_user("bob")
        self.admin = make_user("admin", ADMINISTRATOR)
        self.manager = make_user("manager", MANAGER)
        self.contact = Contact.objects.create(
            owner=self.alice, name="Debra Garcia", status=ContactStatus.APPROVED
        )
        self.pending = Contact.objects.create(owner=self.alice, name="Jon Orton")

    def test_non_owner_delete_forbidden(self):
        self.client.force_login(self.bob)
        url = reverse("contact-delete", kwargs={"pk": self.contact.pk})
        self.assertEqual(self.client.get(url).status_code, 403)
        self.assertEqual(self.client.post(url).status_code, 403)
        self.assertTrue(Contact.objects.filter(pk=self.contact.pk).exists())

    def test_manager_delete_forbidden(self):
        self.client.force_login(self.manager)
        resp = self.client.post(reverse("contact-delete", kwargs={"pk": self.contact.pk}))
        self.assertEqual(resp.status_code, 403)

    def test_admin_delete_allowed(self):
        self.client.force_login(self.admin)
        resp = self.client.post(reverse("contact-delete", kwargs={"pk": self.pending.pk}))
        self.assertRedirects(resp, reverse("contact-list"), fetch_redirect_response=False)
        self.assertFalse(Contact.objects.filter(pk=self.pending.pk).exists())

    def test_pending_detail_forbidden_to_others(self):
        self.client.force_login(self.bob)
        resp = self.client.get(reverse("contact-detail", kwargs={"pk": self.pending.pk}))
        self.assertEqual(resp.status_code, 403)

    def test_list_scoped_for_plain_user(self):
        self.client.force_login(self.bob)
        resp = self.client.get(reverse("contact-list"))
        self.assertContains(resp, "Debra Garcia")
        self.assertNotContains(resp, "Jon Orton")

    def test_manager_approves_from_detail(self):
        self.client.force_login(self.manager)
        url = reverse("contact-detail", kwargs={"pk": self.pending.pk})
        page = self.client.get(url)
        self.assertEqual(page.status_code, 200)
        self.assertTrue(page.context["can_approve"])
        self.assertFalse(page.context["can_delete"])

        resp = self.client.post(url, {"action": "approve"})
        self.assertRedirects(resp, url, fetch_redirect_response=False)
        self.pending.refresh_from_db()
        self.assertEqual(self.pending.status, ContactStatus.APPROVED)

    def test_owner_cannot_approve_from_detail(self):
        self.client.force_login(self.alice)
        url = reverse("contact-detail", kwargs={"pk": self.pending.pk})
        self.assertEqual(self.client.post(url, {"action": "approve"}).status_code, 403)
        self.pending.refresh_from_db()
        self.assertEqual(self.pending.status, ContactStatus.SUBMITTED)


class OwnerPageFlowTests(TestCase):
    def setUp(self):
        self.alice = make_user("alice")
        self.client.force_login(self.alice)

    def test_create_edit_delete(self):
        resp = self.client.post(
            reverse("contact-create"),
            {"name": "Yuhong Li", "address": "", "city": "Redmond", "state": "WA", "zip": "10999", "email": ""},
        )
        contact = Contact.objects.get(name="Yuhong Li")
        self.assertRedirects(
            resp, reverse("contact-detail", kwargs={"pk": contact.pk}), fetch_redirect_response=False
        )
        self.assertEqual(contact.owner_id, self.alice.pk)
        self.assertEqual(contact.status, ContactStatus.SUBMITTED)

        # An approved contact re-enters review when its owner edits it.
        Contact.objects.filter(pk=contact.pk).update(status=ContactStatus.APPROVED)
        resp = self.client.post(
            reverse("contact-update", kwargs={"pk": contact.pk}),
            {"name": "Yuhong Li", "address": "", "city": "Seattle", "state": "WA", "zip": "10999", "email": ""},
        )
        self.assertEqual(resp.status_code, 302)
        contact.refresh_from_db()
        self.assertEqual(contact.city, "Seattle")
        self.assertEqual(contact.status, ContactStatus.SUBMITTED)

        resp = self.client.post(reverse("contact-delete", kwargs={"pk": contact.pk}))
        self.assertRedirects(resp, reverse("contact-list"), fetch_redirect_response=False)
        self.assertFalse(Contact.objects.filter(pk=contact.pk).exists())
