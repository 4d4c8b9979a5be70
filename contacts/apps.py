"""AppConfig for the `contacts` domain app (model, handlers, API and pages)."""

from django.apps import AppConfig


class ContactsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "contacts"
