"""
Session auth API for browser and script clients.

Flow: `GET csrf/` primes the cookie, then unsafe requests echo the token in
`X-CSRFToken`. Everything here is reachable without signing in except `me/`.
"""

from __future__ import annotations

import logging

from django.conf import settings
from django.contrib.auth import login, logout
from django.middleware.csrf import get_token
from django.utils.translation import gettext_lazy as _
from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import permissions, status
from rest_framework.exceptions import PermissionDenied
from rest_framework.response import Response
from rest_framework.throttling import ScopedRateThrottle
from rest_framework.views import APIView

from .emails import send_confirmation_email
from .forms import email_confirmation_required
from .serializers import (
    AccountSerializer,
    EmailConfirmationSerializer,
    LoginRejected,
    LoginSerializer,
    RegistrationSerializer,
)

logger = logging.getLogger(__name__)

THROTTLED = OpenApiResponse(description="Too many attempts (throttled)")


class RegistrationDisabled(PermissionDenied):
    default_detail = _("Registration is disabled.")
    default_code = "registration_disabled"

    def __init__(self):
        super().__init__()
        self.detail = {"detail": self.detail, "code": self.default_code}


class PublicAPIView(APIView):
    permission_classes = [permissions.AllowAny]


class CsrfView(PublicAPIView):
    """Set the CSRF cookie and mirror the token in `X-CSRFToken` (204)."""

    @extend_schema(operation_id="auth_csrf", summary="Prime CSRF cookie",
                   responses={204: OpenApiResponse(description="CSRF cookie set")})
    def get(self, request, *args, **kwargs):
        response = Response(status=status.HTTP_204_NO_CONTENT)
        response["X-CSRFToken"] = get_token(request)
        return response


class LoginView(PublicAPIView):
    """Start a session; unconfirmed accounts are refused while confirmation is required."""
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "auth-login"

    @extend_schema(
        operation_id="auth_login",
        summary="Log in (session-based)",
        request=LoginSerializer,
        responses={
            200: AccountSerializer,
            400: OpenApiResponse(description='{"detail": "...", "code": "invalid_credentials" | "email_unconfirmed"}'),
            429: THROTTLED,
        },
    )
    def post(self, request, *args, **kwargs):
        serializer = LoginSerializer(data=request.data, context={"request": request})
        if not serializer.is_valid():
            raise LoginRejected()
        user = serializer.validated_data["user"]
        login(request, user)
        return Response(AccountSerializer(user).data)


class LogoutView(PublicAPIView):
    @extend_schema(operation_id="auth_logout", summary="Log out",
                   responses={204: OpenApiResponse(description="Logged out")})
    def post(self, request, *args, **kwargs):
        logout(request)
        return Response(status=status.HTTP_204_NO_CONTENT)


class MeView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    @extend_schema(operation_id="auth_me", summary="Current user",
                   responses={200: AccountSerializer, 403: OpenApiResponse(description="Not authenticated")})
    def get(self, request, *args, **kwargs):
        return Response(AccountSerializer(request.user).data)


class RegisterView(PublicAPIView):
    """
    Create an account (only while `ENABLE_REGISTRATION` is on).

    A confirmation email goes out either way; the new user is signed in right
    away only when `ACCOUNTS_REQUIRE_CONFIRMED_EMAIL` is off.
    """
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "auth-register"

    @extend_schema(
        operation_id="auth_register",
        summary="Register a new account",
        request=RegistrationSerializer,
        responses={
            201: AccountSerializer,
            400: OpenApiResponse(description="Validation error"),
            403: OpenApiResponse(description="Registration disabled"),
            429: THROTTLED,
        },
    )
    def post(self, request, *args, **kwargs):
        if not getattr(settings, "ENABLE_REGISTRATION", False):
            raise RegistrationDisabled()

        serializer = RegistrationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        logger.info("registered user_id=%s", user.pk)

        send_confirmation_email(user)
        if not email_confirmation_required(user):
            login(request, user)
        return Response(AccountSerializer(user).data, status=status.HTTP_201_CREATED)


class ConfirmEmailView(PublicAPIView):
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "auth-confirm"

    @extend_schema(
        operation_id="auth_confirm_email",
        summary="Confirm account email",
        request=EmailConfirmationSerializer,
        responses={
            204: OpenApiResponse(description="Email confirmed"),
            400: OpenApiResponse(description="Invalid or expired token"),
        },
    )
    def post(self, request, *args, **kwargs):
        serializer = EmailConfirmationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.validated_data["user"]
        user.email_confirmed = True
        user.save(update_fields=["email_confirmed"])
        logger.info("email confirmed user_id=%s", user.pk)
        return Response(status=status.HTTP_204_NO_CONTENT)
