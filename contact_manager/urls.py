"""
Project URL configuration.

Surfaces
--------
- `/` redirects to the contact list.
- `/contacts/...` server-rendered contact pages (login required).
- `/accounts/login/`, `/accounts/logout/` page login/logout.
- `/api/` JSON API: contacts router + session auth endpoints.
- `/api/schema/`, `/api/docs/`, `/api/redoc/` OpenAPI schema & UIs.
- `/health/` readiness probe (no auth).
- `/admin/` Django admin (back-office only).
"""

from __future__ import annotations

from django.contrib import admin
from django.contrib.auth import views as auth_views
from django.urls import include, path
from django.views.generic import RedirectView
from rest_framework.routers import DefaultRouter

from drf_spectacular.views import (
    SpectacularAPIView,
    SpectacularSwaggerView,
    SpectacularRedocView,
)

from accounts.forms import ConfirmedAccountAuthenticationForm
from accounts.views import (
    ConfirmEmailView,
    CsrfView,
    LoginView,
    LogoutView,
    MeView,
    RegisterView,
)
from contacts.api import ContactViewSet
from contacts.views import (
    ContactCreateView,
    ContactDeleteView,
    ContactDetailView,
    ContactListView,
    ContactUpdateView,
)
from core.views import health

router = DefaultRouter()
router.register(r"contacts", ContactViewSet, basename="contact-api")

urlpatterns = [
    path("admin/", admin.site.urls),
    path("health/", health, name="health"),

    # OpenAPI / Docs
    path("api/schema/", SpectacularAPIView.as_view(), name="schema"),
    path("api/docs/", SpectacularSwaggerView.as_view(url_name="schema"), name="swagger-ui"),
    path("api/redoc/", SpectacularRedocView.as_view(url_name="schema"), name="redoc"),

    # Auth API
    path("api/auth/csrf/", CsrfView.as_view(), name="auth-csrf"),
    path("api/auth/login/", LoginView.as_view(), name="auth-login"),
    path("api/auth/logout/", LogoutView.as_view(), name="auth-logout"),
    path("api/auth/me/", MeView.as_view(), name="auth-me"),
    path("api/auth/register/", RegisterView.as_view(), name="auth-register"),
    path("api/auth/confirm-email/", ConfirmEmailView.as_view(), name="auth-confirm-email"),

    # Router-driven API
    path("api/", include(router.urls)),

    # Pages
    path(
        "accounts/login/",
        auth_views.LoginView.as_view(authentication_form=ConfirmedAccountAuthenticationForm),
        name="login",
    ),
    path("accounts/logout/", auth_views.LogoutView.as_view(), name="logout"),
    path("", RedirectView.as_view(pattern_name="contact-list", permanent=False), name="home"),
    path("contacts/", ContactListView.as_view(), name="contact-list"),
    path("contacts/create/", ContactCreateView.as_view(), name="contact-create"),
    path("contacts/<int:pk>/", ContactDetailView.as_view(), name="contact-detail"),
    path("contacts/<int:pk>/edit/", ContactUpdateView.as_view(), name="contact-update"),
    path("contacts/<int:pk>/delete/", ContactDeleteView.as_view(), name="contact-delete"),
]
