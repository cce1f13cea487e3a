"""
Role-based authorization.

Access is decided from the caller's role and the requested operation only;
no resource ownership is consulted, so any customer may read or retitle any
ticket by id.
"""

import enum
from typing import Mapping

from helpdesk.models.user import Role
from helpdesk.utils.exceptions import AuthorizationError
from helpdesk.utils.logging_config import logger


class Operation(str, enum.Enum):
    REGISTER_USER = "registerUser"
    LOGIN = "login"
    LIST_USERS = "listUsers"
    GET_USER = "getUser"
    DELETE_USER = "deleteUser"
    DELETE_ALL_USERS = "deleteAllUsers"
    LIST_TICKETS = "listTickets"
    GET_TICKET = "getTicket"
    CREATE_TICKET = "createTicket"
    UPDATE_TICKET_TITLE = "updateTicketTitle"
    DELETE_TICKET = "deleteTicket"
    DELETE_ALL_TICKETS = "deleteAllTickets"
    ASSIGN_TICKET = "assignTicket"
    LIST_ASSIGNED_TICKETS = "listAssignedTickets"
    UPDATE_TICKET_STATUS = "updateTicketStatus"


_ALL_ROLES = frozenset(Role)
_STAFF = frozenset({Role.SUPPORT_AGENT, Role.ADMIN})
_ADMIN_ONLY = frozenset({Role.ADMIN})

# Operations reachable without a bearer token. They never go through
# authorize(), so their role sets stay empty.
PUBLIC_OPERATIONS = frozenset({Operation.REGISTER_USER, Operation.LOGIN})

PERMISSIONS: Mapping[Operation, frozenset[Role]] = {
    Operation.REGISTER_USER: frozenset(),
    Operation.LOGIN: frozenset(),
    Operation.LIST_USERS: _STAFF,
    Operation.GET_USER: _STAFF,
    Operation.DELETE_USER: _ADMIN_ONLY,
    Operation.DELETE_ALL_USERS: _ADMIN_ONLY,
    Operation.LIST_TICKETS: _STAFF,
    Operation.GET_TICKET: _ALL_ROLES,
    Operation.CREATE_TICKET: frozenset({Role.CUSTOMER, Role.ADMIN}),
    Operation.UPDATE_TICKET_TITLE: _ALL_ROLES,
    Operation.DELETE_TICKET: _ADMIN_ONLY,
    Operation.DELETE_ALL_TICKETS: _ADMIN_ONLY,
    Operation.ASSIGN_TICKET: _STAFF,
    Operation.LIST_ASSIGNED_TICKETS: _ALL_ROLES,
    Operation.UPDATE_TICKET_STATUS: _ADMIN_ONLY,
}

_unmapped = set(Operation) - set(PERMISSIONS)
if _unmapped:
    raise RuntimeError(
        f"Operations without a permission entry: {sorted(op.value for op in _unmapped)}"
    )


def authorize(role: Role, operation: Operation) -> bool:
    """Return True when ``role`` may perform ``operation``."""
    return role in PERMISSIONS[operation]


def ensure_authorized(role: Role, operation: Operation) -> None:
    """
    Raise AuthorizationError unless ``role`` may perform ``operation``.

    Args:
        role: The authenticated caller's role.
        operation: The operation being requested.

    Raises:
        AuthorizationError: If the role is not allowed.
    """
    if not authorize(role, operation):
        logger.warning(f"Denied {operation.value} for role {role.value}")
        raise AuthorizationError()
