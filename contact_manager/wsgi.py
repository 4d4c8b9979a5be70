"""WSGI entrypoint for Contact Manager."""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "contact_manager.settings.dev")

application = get_wsgi_application()
