# Re-exports for router imports like:
#   from contacts.api import ContactViewSet

from .viewsets import ContactViewSet

__all__ = ["ContactViewSet"]
