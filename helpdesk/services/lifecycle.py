"""Ticket status rules."""

from abc import ABC, abstractmethod

from helpdesk.models.ticket import TicketStatus
from helpdesk.utils.exceptions import ValidationError

INITIAL_STATUS = TicketStatus.OPEN

# Forward-only moves accepted by the strict policy.
ALLOWED_TRANSITIONS: dict[TicketStatus, frozenset[TicketStatus]] = {
    TicketStatus.OPEN: frozenset({TicketStatus.IN_PROGRESS, TicketStatus.CLOSED}),
    TicketStatus.IN_PROGRESS: frozenset({TicketStatus.CLOSED}),
    TicketStatus.CLOSED: frozenset(),
}


class StatusPolicy(ABC):
    """Single hook every status write goes through."""

    name: str

    @abstractmethod
    def validate(self, current: str, requested: str) -> str:
        """Return the value to persist, or raise ValidationError."""


class PermissiveStatusPolicy(StatusPolicy):
    """Writes whatever was requested, unchecked."""

    name = "permissive"

    def validate(self, current: str, requested: str) -> str:
        return requested


class StrictStatusPolicy(StatusPolicy):
    """Only enumerated statuses, moving forward along open -> in_progress -> closed."""

    name = "strict"

    def validate(self, current: str, requested: str) -> str:
        try:
            target = TicketStatus(requested)
        except ValueError:
            allowed = ", ".join(s.value for s in TicketStatus)
            raise ValidationError(
                f"Invalid status '{requested}'. Expected one of: {allowed}"
            ) from None

        if current == target.value:
            return target.value

        try:
            source = TicketStatus(current)
        except ValueError:
            # A legacy value outside the enum can only be corrected, never kept.
            return target.value

        if target not in ALLOWED_TRANSITIONS[source]:
            raise ValidationError(
                f"Cannot move ticket from '{source.value}' to '{target.value}'"
            )
        return target.value


_POLICIES: dict[str, type[StatusPolicy]] = {
    PermissiveStatusPolicy.name: PermissiveStatusPolicy,
    StrictStatusPolicy.name: StrictStatusPolicy,
}


def get_status_policy(name: str) -> StatusPolicy:
    try:
        return _POLICIES[name]()
    except KeyError:
        raise ValueError(f"Unknown ticket status policy: {name}") from None
