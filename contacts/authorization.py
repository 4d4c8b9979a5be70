"""
Authorization handlers for `Contact` resources.

Three independent rules, combined by `core.authorization.AuthorizationService`
with logical OR (no handler can veto another's grant):

- `ContactIsOwnerAuthorizationHandler`: the owner may Create/Read/Update/Delete
  their own contact. Registered per request.
- `ContactAdministratorsAuthorizationHandler`: users with the "Administrator"
  role may perform any operation. Singleton.
- `ContactManagerAuthorizationHandler`: users with the "Manager" role may
  Approve/Reject. Singleton.

Each handler either calls `context.succeed(requirement)` or returns without a
decision; none of them raise.
"""

from __future__ import annotations

from accounts.roles import ADMINISTRATOR, MANAGER
from core.authorization import AuthorizationHandler, OperationRequirement

from .models import Contact, ContactStatus


class ContactOperations:
    CREATE = OperationRequirement("Create")
    READ = OperationRequirement("Read")
    UPDATE = OperationRequirement("Update")
    DELETE = OperationRequirement("Delete")
    APPROVE = OperationRequirement("Approve")
    REJECT = OperationRequirement("Reject")


OWNER_OPERATIONS = frozenset({
    ContactOperations.CREATE,
    ContactOperations.READ,
    ContactOperations.UPDATE,
    ContactOperations.DELETE,
})
REVIEW_OPERATIONS = frozenset({ContactOperations.APPROVE, ContactOperations.REJECT})


class ContactIsOwnerAuthorizationHandler(AuthorizationHandler):
    def handle_requirement(self, context, requirement, resource):
        if not isinstance(resource, Contact) or requirement not in OWNER_OPERATIONS:
            return
        if resource.is_owned_by(context.user):
            context.succeed(requirement)


class ContactAdministratorsAuthorizationHandler(AuthorizationHandler):
    def handle_requirement(self, context, requirement, resource):
        if context.has_role(ADMINISTRATOR):
            context.succeed(requirement)


class ContactManagerAuthorizationHandler(AuthorizationHandler):
    def handle_requirement(self, context, requirement, resource):
        if requirement not in REVIEW_OPERATIONS:
            return
        if context.has_role(MANAGER):
            context.succeed(requirement)


def read_requirements(contact: Contact) -> tuple[OperationRequirement, ...]:
    """
    Requirements that grant viewing `contact` (any one suffices).

    Approved contacts are readable by every authenticated user. A contact still
    under review is readable by whoever may read it or may approve it.
    """
    if contact.status == ContactStatus.APPROVED:
        return ()
    return (ContactOperations.READ, ContactOperations.APPROVE)


STATUS_FOR_OPERATION = {
    ContactOperations.APPROVE: ContactStatus.APPROVED,
    ContactOperations.REJECT: ContactStatus.REJECTED,
}
