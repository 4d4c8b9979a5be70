"""Outgoing account emails."""

from __future__ import annotations

import logging

from django.conf import settings
from django.core.mail import send_mail
from django.utils.encoding import force_bytes
from django.utils.http import urlsafe_base64_encode

from .tokens import email_confirmation_token

logger = logging.getLogger(__name__)


def send_confirmation_email(user) -> None:
    """
    Email the confirmation UID/TOKEN pair to `user.email`.

    The body carries `UID:` and `TOKEN:` lines; clients post both to
    `/api/auth/confirm-email/`.
    """
    uid = urlsafe_base64_encode(force_bytes(user.pk))
    token = email_confirmation_token.make_token(user)
    body = (
        f"Hello {user.get_username()},\n\n"
        "Confirm your Contact Manager account with the values below.\n\n"
        f"UID: {uid}\n"
        f"TOKEN: {token}\n"
    )
    send_mail(
        subject="Confirm your email",
        message=body,
        from_email=getattr(settings, "DEFAULT_FROM_EMAIL", None),
        recipient_list=[user.email],
    )
    logger.info("confirmation email sent to user_id=%s", user.pk)
