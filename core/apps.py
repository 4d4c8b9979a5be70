"""AppConfig for the `core` app.

Shared infrastructure used across the project: the authorization evaluator,
middleware (fallback login policy, request-id logging), logging helpers and
the owned-model base class.
"""

from django.apps import AppConfig


class CoreConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "core"

    def ready(self) -> None:
        # Connects the setting_changed receiver that resets cached handlers.
        from . import authorization  # noqa: F401
