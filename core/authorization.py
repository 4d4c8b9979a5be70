"""
Operation-based authorization over model resources.

Overview
--------
- `OperationRequirement` names an operation ("Create", "Read", "Approve", ...).
- `AuthorizationHandler` implements one rule. For each pending requirement it
  either calls `context.succeed(requirement)` (grant) or does nothing (abstain).
- `AuthorizationService` runs every registered handler for a (user, resource,
  requirement) triple. The decision succeeds when at least one handler granted;
  there is no veto, so a grant can never be overridden by another handler.

Registration
------------
Handlers are listed in `settings.AUTHORIZATION_HANDLERS`:

    AUTHORIZATION_HANDLERS = [
        {"class": "contacts.authorization.ContactIsOwnerAuthorizationHandler", "lifetime": "request"},
        {"class": "contacts.authorization.ContactAdministratorsAuthorizationHandler", "lifetime": "singleton"},
    ]

- `singleton`: built once per process and shared by all requests/threads.
- `request`: built once per `AuthorizationService`, i.e. once per HTTP request
  when obtained through `get_authorization_service(request)`.

Handlers must not keep per-request state on `self`; everything they need comes
from the `AuthorizationContext`.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Iterable, Optional

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from django.core.signals import setting_changed
from django.dispatch import receiver
from django.utils.module_loading import import_string

logger = logging.getLogger("contact_manager.authz")

SINGLETON = "singleton"
REQUEST = "request"
LIFETIMES = (SINGLETON, REQUEST)


@dataclass(frozen=True)
class OperationRequirement:
    """A named operation a user wants to perform on a resource."""
    name: str

    def __str__(self) -> str:
        return self.name


def get_role_claims(user) -> frozenset[str]:
    """
    Role claims carried by `user` (empty for anonymous users).

    Prefers the user's own `role_claims` attribute (cached per instance on
    `accounts.User`) and falls back to group names for other user classes.
    """
    if user is None or not getattr(user, "is_authenticated", False):
        return frozenset()
    claims = getattr(user, "role_claims", None)
    if claims is None:
        claims = user.groups.values_list("name", flat=True)
    return frozenset(claims)


class AuthorizationContext:
    """
    State for a single authorization decision.

    Handlers read `user`, `resource` and `pending_requirements`, and call
    `succeed()` to grant. The context records which handler granted what.
    """

    def __init__(self, user, resource: Any, requirements: Iterable[OperationRequirement]) -> None:
        self.user = user
        self.resource = resource
        self.requirements = tuple(requirements)
        self.current_handler: Optional[AuthorizationHandler] = None
        self._grants: dict[OperationRequirement, list[str]] = {}

    @property
    def pending_requirements(self) -> tuple[OperationRequirement, ...]:
        return tuple(r for r in self.requirements if r not in self._grants)

    @property
    def has_succeeded(self) -> bool:
        return bool(self.requirements) and all(r in self._grants for r in self.requirements)

    @property
    def granted_by(self) -> tuple[str, ...]:
        names: list[str] = []
        for handlers in self._grants.values():
            names.extend(h for h in handlers if h not in names)
        return tuple(names)

    def succeed(self, requirement: OperationRequirement) -> None:
        """Mark `requirement` as granted by the currently running handler."""
        if requirement not in self.requirements:
            return
        name = type(self.current_handler).__name__ if self.current_handler else "-"
        self._grants.setdefault(requirement, []).append(name)

    def has_role(self, role: str) -> bool:
        return role in get_role_claims(self.user)


class AuthorizationHandler:
    """
    Base class for a single authorization rule.

    Subclasses implement `handle_requirement()`; it is called once for each
    requirement of the decision that is an instance of `requirement_type`,
    including ones another handler already granted.
    """

    requirement_type: type = OperationRequirement

    def handle(self, context: AuthorizationContext) -> None:
        for requirement in context.requirements:
            if isinstance(requirement, self.requirement_type):
                self.handle_requirement(context, requirement, context.resource)

    def handle_requirement(self, context: AuthorizationContext, requirement, resource) -> None:
        raise NotImplementedError


@dataclass(frozen=True)
class AuthorizationResult:
    """Outcome of `AuthorizationService.authorize()`; truthy when granted."""
    succeeded: bool
    requirement: OperationRequirement
    granted_by: tuple[str, ...] = ()

    def __bool__(self) -> bool:
        return self.succeeded


# ---------------------------------------------------------------------
# Handler registry
# ---------------------------------------------------------------------
_singletons: dict[str, AuthorizationHandler] = {}
_singletons_lock = threading.Lock()


def _handler_specs() -> list[tuple[str, str]]:
    """Read and validate `settings.AUTHORIZATION_HANDLERS`."""
    specs = []
    for entry in getattr(settings, "AUTHORIZATION_HANDLERS", []):
        if isinstance(entry, str):
            path, lifetime = entry, SINGLETON
        else:
            path = entry.get("class")
            lifetime = entry.get("lifetime", SINGLETON)
        if not path:
            raise ImproperlyConfigured("AUTHORIZATION_HANDLERS entries need a 'class' path.")
        if lifetime not in LIFETIMES:
            raise ImproperlyConfigured(
                f"Unknown authorization handler lifetime {lifetime!r} for {path}; "
                f"expected one of {', '.join(LIFETIMES)}."
            )
        specs.append((path, lifetime))
    return specs


def _build(path: str) -> AuthorizationHandler:
    try:
        handler_cls = import_string(path)
    except ImportError as exc:
        raise ImproperlyConfigured(f"Cannot import authorization handler {path!r}: {exc}") from exc
    return handler_cls()


def _singleton(path: str) -> AuthorizationHandler:
    handler = _singletons.get(path)
    if handler is None:
        with _singletons_lock:
            handler = _singletons.get(path)
            if handler is None:
                handler = _singletons[path] = _build(path)
    return handler


def reset_handler_cache() -> None:
    """Forget cached singleton handlers (next lookup rebuilds them)."""
    with _singletons_lock:
        _singletons.clear()


@receiver(setting_changed, dispatch_uid="authz_reset_handler_cache")
def _on_setting_changed(sender, setting, **kwargs):
    if setting == "AUTHORIZATION_HANDLERS":
        reset_handler_cache()


def build_handlers() -> list[AuthorizationHandler]:
    """Instantiate the configured handlers honoring each one's lifetime."""
    return [
        _singleton(path) if lifetime == SINGLETON else _build(path)
        for path, lifetime in _handler_specs()
    ]


# ---------------------------------------------------------------------
# Evaluator
# ---------------------------------------------------------------------
class AuthorizationService:
    """
    Policy evaluator: grants when any handler succeeds for the requirement.

    All handlers run even after a grant so every granting rule is reported in
    `AuthorizationResult.granted_by` and in the decision log line.
    """

    def __init__(self, handlers: Optional[Iterable[AuthorizationHandler]] = None) -> None:
        self.handlers = list(handlers) if handlers is not None else build_handlers()

    def authorize(self, user, resource: Any, requirement: OperationRequirement) -> AuthorizationResult:
        context = AuthorizationContext(user, resource, [requirement])
        for handler in self.handlers:
            context.current_handler = handler
            handler.handle(context)
        context.current_handler = None

        result = AuthorizationResult(
            succeeded=context.has_succeeded,
            requirement=requirement,
            granted_by=context.granted_by,
        )
        self._log(user, resource, result)
        return result

    @staticmethod
    def _log(user, resource, result: AuthorizationResult) -> None:
        user_id = getattr(user, "id", None) if getattr(user, "is_authenticated", False) else None
        extra = {
            "operation": result.requirement.name,
            "resource": repr(resource),
            "user_id": user_id,
            "decision": "grant" if result.succeeded else "deny",
            "handler": ",".join(result.granted_by) or "-",
        }
        if result.succeeded:
            logger.debug("authorization", extra=extra)
        else:
            logger.info("authorization", extra=extra)


def get_authorization_service(request) -> AuthorizationService:
    """Return the evaluator bound to this HTTP request (created on first use)."""
    # DRF wraps the Django request; cache on the underlying HttpRequest so the
    # page layer and the API layer share one service per request.
    http_request = getattr(request, "_request", request)
    service = getattr(http_request, "_authorization_service", None)
    if service is None:
        service = AuthorizationService()
        http_request._authorization_service = service
    return service


def authorize(request, resource: Any, requirement: OperationRequirement) -> AuthorizationResult:
    """Shortcut: evaluate `requirement` on `resource` for `request.user`."""
    return get_authorization_service(request).authorize(request.user, resource, requirement)
