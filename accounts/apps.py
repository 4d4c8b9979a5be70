"""Django AppConfig for the accounts app.

Houses the custom user model (`accounts.User`), role names, email
confirmation and the session-auth API views.
"""

from django.apps import AppConfig


class AccountsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "accounts"
