"""
Base Django settings for Contact Manager.

Layout
------
- Split settings: `base.py` (shared), `dev.py` (developer overrides), `prod.py` (hardened).
- `environ` is used to source configuration; a local `.env` is optional in dev.

Authentication & authorization
------------------------------
- Fallback policy: `core.middleware.FallbackAuthenticationMiddleware` redirects
  anonymous page requests to `LOGIN_URL`; the API answers 403 through DRF's
  `IsAuthenticated` default.
- Operation checks on contacts go through `core.authorization` and the handlers
  listed in `AUTHORIZATION_HANDLERS` (OR-combined, no veto).
- Accounts must confirm their email before signing in
  (`ACCOUNTS_REQUIRE_CONFIRMED_EMAIL`).

API stack
---------
- Django 5.x + DRF + django-filter + drf-spectacular.
- SessionAuthentication with CSRF (kept enabled).

Observability
-------------
- `core.middleware.RequestIDLogMiddleware` logs one structured line per request;
  authorization decisions are logged on `contact_manager.authz`.
"""

from pathlib import Path
import environ

# ---------------------------------------------------------------------
# Paths & Env
# ---------------------------------------------------------------------
BASE_DIR = Path(__file__).resolve().parent.parent.parent
env = environ.Env(DEBUG=(bool, False))
env_file = BASE_DIR / ".env"
if env_file.exists():
    environ.Env.read_env(str(env_file))

# ---------------------------------------------------------------------
# Core
# ---------------------------------------------------------------------
SECRET_KEY = env("SECRET_KEY", default="dev-insecure-change-me")
DEBUG = env.bool("DEBUG", False)

ALLOWED_HOSTS = env.list("ALLOWED_HOSTS", default=["127.0.0.1", "localhost", "testserver"])
CSRF_TRUSTED_ORIGINS = env.list(
    "CSRF_TRUSTED_ORIGINS",
    default=["http://127.0.0.1:8000", "http://localhost:8000"],
)

# ---------------------------------------------------------------------
# Applications
# ---------------------------------------------------------------------
INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",

    # Third-party
    "rest_framework",
    "django_filters",
    "drf_spectacular",

    # Local apps
    "accounts",
    "core",
    "contacts",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    # Fallback policy: pages require an authenticated user
    "core.middleware.FallbackAuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
    # Observability: request-id + structured request log (one line per request)
    "core.middleware.RequestIDLogMiddleware",
]

ROOT_URLCONF = "contact_manager.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [BASE_DIR / "templates"],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

WSGI_APPLICATION = "contact_manager.wsgi.application"

# ---------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------
DATABASES = {
    "default": env.db(
        "DATABASE_URL",
        default=f"sqlite:///{BASE_DIR / 'db.sqlite3'}",
    )
}

# ---------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------
AUTH_USER_MODEL = "accounts.User"

AUTH_PASSWORD_VALIDATORS = [
    {"NAME": "django.contrib.auth.password_validation.UserAttributeSimilarityValidator"},
    {"NAME": "django.contrib.auth.password_validation.MinimumLengthValidator"},
    {"NAME": "django.contrib.auth.password_validation.CommonPasswordValidator"},
    {"NAME": "django.contrib.auth.password_validation.NumericPasswordValidator"},
]

LOGIN_URL = "login"
LOGIN_REDIRECT_URL = "contact-list"
LOGOUT_REDIRECT_URL = "login"

# Paths skipped by the fallback login redirect; admin has its own login page.
# DRF views opt out on their own (`login_required = False`) and answer 403.
AUTH_FALLBACK_EXEMPT_PREFIXES = env.list(
    "AUTH_FALLBACK_EXEMPT_PREFIXES",
    default=["/admin/", "/static/"],
)

ACCOUNTS_REQUIRE_CONFIRMED_EMAIL = env.bool("ACCOUNTS_REQUIRE_CONFIRMED_EMAIL", True)
ENABLE_REGISTRATION = env.bool("ENABLE_REGISTRATION", False)
DEFAULT_FROM_EMAIL = env("DEFAULT_FROM_EMAIL", default="no-reply@contact-manager.local")

# Operation handlers for `core.authorization`. Lifetime "singleton" shares one
# instance per process; "request" builds one per HTTP request.
AUTHORIZATION_HANDLERS = [
    {"class": "contacts.authorization.ContactIsOwnerAuthorizationHandler", "lifetime": "request"},
    {"class": "contacts.authorization.ContactAdministratorsAuthorizationHandler", "lifetime": "singleton"},
    {"class": "contacts.authorization.ContactManagerAuthorizationHandler", "lifetime": "singleton"},
]

# Seed accounts (python manage.py seed_contacts)
SEED_ADMIN_PW = env("SEED_ADMIN_PW", default="")
SEED_MANAGER_PW = env("SEED_MANAGER_PW", default="")

# ---------------------------------------------------------------------
# Internationalization
# ---------------------------------------------------------------------
LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

# ---------------------------------------------------------------------
# Static
# ---------------------------------------------------------------------
STATIC_URL = "static/"
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# ---------------------------------------------------------------------
# DRF & API Schema
# ---------------------------------------------------------------------
REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": [
        "rest_framework.authentication.SessionAuthentication",
    ],
    "DEFAULT_PERMISSION_CLASSES": [
        "rest_framework.permissions.IsAuthenticated",
    ],
    "DEFAULT_FILTER_BACKENDS": [
        "django_filters.rest_framework.DjangoFilterBackend",
        "rest_framework.filters.OrderingFilter",
        "rest_framework.filters.SearchFilter",
    ],
    "DEFAULT_PAGINATION_CLASS": "rest_framework.pagination.PageNumberPagination",
    "PAGE_SIZE": 25,
    "DEFAULT_SCHEMA_CLASS": "drf_spectacular.openapi.AutoSchema",
    "DEFAULT_THROTTLE_CLASSES": [
        "rest_framework.throttling.AnonRateThrottle",
        "rest_framework.throttling.UserRateThrottle",
    ],
    "DEFAULT_THROTTLE_RATES": {
        "user": env("DRF_THROTTLE_RATE_USER", default="200/min"),
        "anon": env("DRF_THROTTLE_RATE_ANON", default="50/min"),
        "auth-login": env("DRF_THROTTLE_RATE_AUTH_LOGIN", default="10/min"),
        "auth-register": env("DRF_THROTTLE_RATE_AUTH_REGISTER", default="5/min"),
        "auth-confirm": env("DRF_THROTTLE_RATE_AUTH_CONFIRM", default="10/min"),
    },
}

SPECTACULAR_SETTINGS = {
    "TITLE": "Contact Manager API",
    "DESCRIPTION": "Contacts with owner, administrator and manager authorization.",
    "VERSION": "0.1.0",
    "SERVERS": [
        {"url": "http://127.0.0.1:8000", "description": "Local Dev"},
        {"url": "/", "description": "Current"},
    ],
    "SWAGGER_UI_SETTINGS": {"persistAuthorization": True},
    "ENUM_NAME_OVERRIDES": {
        "ContactStatusEnum": "contacts.models.ContactStatus",
    },
}

# When True, PUT/PATCH/DELETE and review actions require `If-Match` (428 if missing).
ENFORCE_IF_MATCH = env.bool("ENFORCE_IF_MATCH", False)

# ---------------------------------------------------------------------
# Security defaults (safe baseline; prod hardening in prod.py)
# ---------------------------------------------------------------------
SESSION_COOKIE_SAMESITE = "Lax"
CSRF_COOKIE_SAMESITE = "Lax"
X_FRAME_OPTIONS = "DENY"

# ---------------------------------------------------------------------
# Logging (observability)
# ---------------------------------------------------------------------
# The RequestIDFilter injects `request_id` even for logs outside HTTP contexts.
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "filters": {
        "request_id": {"()": "core.logging.RequestIDFilter"},
    },
    "formatters": {
        "request": {
            "format": "level=%(levelname)s logger=%(name)s request_id=%(request_id)s "
                      "method=%(method)s path=%(path)s status=%(status)s user_id=%(user_id)s "
                      "duration_ms=%(duration_ms)s message=%(message)s"
        },
        "authz": {
            "format": "level=%(levelname)s logger=%(name)s request_id=%(request_id)s "
                      "operation=%(operation)s decision=%(decision)s handler=%(handler)s "
                      "user_id=%(user_id)s resource=%(resource)s"
        },
        "simple": {
            "format": "level=%(levelname)s logger=%(name)s request_id=%(request_id)s message=%(message)s"
        },
    },
    "handlers": {
        "request_console": {
            "class": "logging.StreamHandler",
            "filters": ["request_id"],
            "formatter": "request",
        },
        "authz_console": {
            "class": "logging.StreamHandler",
            "filters": ["request_id"],
            "formatter": "authz",
        },
        "console": {
            "class": "logging.StreamHandler",
            "filters": ["request_id"],
            "formatter": "simple",
        },
    },
    "loggers": {
        "contact_manager.request": {
            "handlers": ["request_console"],
            "level": "INFO",
            "propagate": False,
        },
        "contact_manager.authz": {
            "handlers": ["authz_console"],
            "level": env("AUTHZ_LOG_LEVEL", default="INFO"),
            "propagate": False,
        },
        "contacts": {"handlers": ["console"], "level": "INFO", "propagate": False},
        "accounts": {"handlers": ["console"], "level": "INFO", "propagate": False},
        "core": {"handlers": ["console"], "level": "INFO", "propagate": False},
    },
}
