"""Forms for the server-rendered login page."""

from django import forms
from django.conf import settings
from django.contrib.auth.forms import AuthenticationForm
from django.utils.translation import gettext_lazy as _


def email_confirmation_required(user) -> bool:
    """True when login must be refused because the user's email is unconfirmed."""
    if not getattr(settings, "ACCOUNTS_REQUIRE_CONFIRMED_EMAIL", True):
        return False
    return not getattr(user, "email_confirmed", False)


class ConfirmedAccountAuthenticationForm(AuthenticationForm):
    """`AuthenticationForm` that also refuses accounts with unconfirmed email."""

    error_messages = {
        **AuthenticationForm.error_messages,
        "email_unconfirmed": _("Confirm your email address before signing in."),
    }

    def confirm_login_allowed(self, user):
        super().confirm_login_allowed(user)
        if email_confirmation_required(user):
            raise forms.ValidationError(
                self.error_messages["email_unconfirmed"],
                code="email_unconfirmed",
            )
