from __future__ import annotations

import re
from unittest.mock import patch

from django.contrib.auth import get_user_model
from django.contrib.auth.models import Group
from django.core import mail
from django.core.cache import cache
from django.test import TestCase, override_settings
from rest_framework.test import APIClient
from rest_framework.throttling import ScopedRateThrottle

from accounts.roles import MANAGER

User = get_user_model()


class AuthApiTests(TestCase):
    def setUp(self) -> None:
        cache.clear()
        self.user = User.objects.create_user(
            username="alice", password="pass12345", email="a@example.com", email_confirmed=True
        )
        # Enforce CSRF checks in tests to mirror real behavior
        self.client = APIClient(enforce_csrf_checks=True)

    def _prime_csrf(self, client=None):
        client = client or self.client
        r = client.get("/api/auth/csrf/")
        self.assertEqual(r.status_code, 204)
        self.assertIn("csrftoken", client.cookies)
        token = r.headers.get("X-CSRFToken")
        self.assertTrue(token)
        # attach header for subsequent unsafe requests
        client.credentials(HTTP_X_CSRFTOKEN=token)

    def test_csrf_sets_cookie_and_header(self):
        self._prime_csrf()

    def test_login_invalid_returns_400(self):
        self._prime_csrf()
        r = self.client.post("/api/auth/login/", {"username": "alice", "password": "wrong"})
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.json().get("code"), "invalid_credentials")

    def test_login_unconfirmed_returns_400(self):
        User.objects.create_user(username="carol", password="pass12345", email="c@example.com")
        self._prime_csrf()
        r = self.client.post("/api/auth/login/", {"username": "carol", "password": "pass12345"})
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.json().get("code"), "email_unconfirmed")
        self.assertEqual(self.client.get("/api/auth/me/").status_code, 403)

    @override_settings(ACCOUNTS_REQUIRE_CONFIRMED_EMAIL=False)
    def test_login_unconfirmed_allowed_when_not_required(self):
        User.objects.create_user(username="carol", password="pass12345", email="c@example.com")
        self._prime_csrf()
        r = self.client.post("/api/auth/login/", {"username": "carol", "password": "pass12345"})
        self.assertEqual(r.status_code, 200)

    def test_login_success_me_logout_flow(self):
        self.user.groups.add(Group.objects.get_or_create(name=MANAGER)[0])
        self._prime_csrf()
        r = self.client.post("/api/auth/login/", {"username": "alice", "password": "pass12345"})
        self.assertEqual(r.status_code, 200)
        data = r.json()
        self.assertEqual(data["username"], "alice")
        self.assertEqual(data["roles"], [MANAGER])

        r_me = self.client.get("/api/auth/me/")
        self.assertEqual(r_me.status_code, 200)
        self.assertEqual(r_me.json()["username"], "alice")

        # Login rotates the CSRF token; prime again before the next unsafe request.
        self._prime_csrf()
        r_logout = self.client.post("/api/auth/logout/")
        self.assertEqual(r_logout.status_code, 204)

        r_me_after = self.client.get("/api/auth/me/")
        self.assertEqual(r_me_after.status_code, 403)

    def test_me_unauthenticated_403(self):
        r = self.client.get("/api/auth/me/")
        self.assertEqual(r.status_code, 403)

    def test_login_throttled_429(self):
        # ScopedRateThrottle reads its rates once at import; lower auth-login on the class.
        rates = {**ScopedRateThrottle.THROTTLE_RATES, "auth-login": "2/min"}
        with patch.object(ScopedRateThrottle, "THROTTLE_RATES", rates):
            client = APIClient(enforce_csrf_checks=True)
            self._prime_csrf(client)

            # two invalid attempts allowed
            for _ in range(2):
                self.assertEqual(
                    client.post("/api/auth/login/", {"username": "alice", "password": "bad"}).status_code,
                    400,
                )
            # third should be throttled
            r3 = client.post("/api/auth/login/", {"username": "alice", "password": "bad"})
            self.assertEqual(r3.status_code, 429)


class RegistrationTests(TestCase):
    payload = {
        "username": "erin",
        "email": "erin@example.com",
        "password1": "Str0ng!Passw0rd",
        "password2": "Str0ng!Passw0rd",
    }

    def setUp(self) -> None:
        cache.clear()
        self.client = APIClient()

    @override_settings(ENABLE_REGISTRATION=False)
    def test_registration_disabled(self):
        r = self.client.post("/api/auth/register/", self.payload, format="json")
        self.assertEqual(r.status_code, 403)
        self.assertEqual(r.json()["code"], "registration_disabled")
        self.assertFalse(User.objects.filter(username="erin").exists())

    @override_settings(ENABLE_REGISTRATION=True)
    def test_password_mismatch(self):
        r = self.client.post(
            "/api/auth/register/", {**self.payload, "password2": "Other!Passw0rd"}, format="json"
        )
        self.assertEqual(r.status_code, 400)
        self.assertIn("password2", r.json())

    @override_settings(ENABLE_REGISTRATION=True, ACCOUNTS_REQUIRE_CONFIRMED_EMAIL=True)
    def test_register_then_confirm_email(self):
        r = self.client.post("/api/auth/register/", self.payload, format="json")
        self.assertEqual(r.status_code, 201, r.content)
        self.assertEqual(r.json()["roles"], [])
        # Not signed in until the email is confirmed.
        self.assertEqual(self.client.get("/api/auth/me/").status_code, 403)

        self.assertEqual(len(mail.outbox), 1)
        body = mail.outbox[0].body
        uid = re.search(r"^UID: (\S+)$", body, re.M).group(1)
        token = re.search(r"^TOKEN: (\S+)$", body, re.M).group(1)

        r = self.client.post("/api/auth/confirm-email/", {"uid": uid, "token": token}, format="json")
        self.assertEqual(r.status_code, 204)
        self.assertTrue(User.objects.get(username="erin").email_confirmed)

        # Tokens are single use: the confirmed flag is part of the hash.
        r = self.client.post("/api/auth/confirm-email/", {"uid": uid, "token": token}, format="json")
        self.assertEqual(r.status_code, 400)

        r = self.client.post(
            "/api/auth/login/", {"username": "erin", "password": "Str0ng!Passw0rd"}, format="json"
        )
        self.assertEqual(r.status_code, 200)

    @override_settings(ENABLE_REGISTRATION=True)
    def test_confirm_email_bad_token(self):
        r = self.client.post("/api/auth/confirm-email/", {"uid": "MQ", "token": "nope"}, format="json")
        self.assertEqual(r.status_code, 400)

    @override_settings(ENABLE_REGISTRATION=True)
    def test_confirmations_do_not_spend_registration_budget(self):
        rates = {**ScopedRateThrottle.THROTTLE_RATES, "auth-register": "1/min", "auth-confirm": "5/min"}
        with patch.object(ScopedRateThrottle, "THROTTLE_RATES", rates):
            r = self.client.post("/api/auth/register/", self.payload, format="json")
            self.assertEqual(r.status_code, 201)
            for _ in range(3):
                r = self.client.post(
                    "/api/auth/confirm-email/", {"uid": "MQ", "token": "nope"}, format="json"
                )
                self.assertEqual(r.status_code, 400)

            r = self.client.post(
                "/api/auth/register/", {**self.payload, "username": "frank", "email": "f@example.com"},
                format="json",
            )
            self.assertEqual(r.status_code, 429)
