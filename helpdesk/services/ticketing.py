"""
Ticketing operations.

Every operation authorizes the caller before it touches the store, so a
denied request never reaches the database.
"""

from datetime import datetime, timezone
from typing import Any, Sequence

from helpdesk.models.ticket import Ticket, TicketAssignment
from helpdesk.models.user import User
from helpdesk.schemas.auth import Identity
from helpdesk.services.authorization import Operation, ensure_authorized
from helpdesk.services.lifecycle import INITIAL_STATUS, StatusPolicy
from helpdesk.services.notifications import Notifier
from helpdesk.services.store import TicketStore
from helpdesk.utils.exceptions import (
    InvalidCredentialsError,
    NotFoundError,
    StoreError,
)
from helpdesk.utils.jwt_manager import create_access_token
from helpdesk.utils.logging_config import logger
from helpdesk.utils.security import hash_password, verify_password


def _now() -> datetime:
    return datetime.now(timezone.utc)


class TicketingService:
    def __init__(
        self, store: TicketStore, notifier: Notifier, status_policy: StatusPolicy
    ):
        self.store = store
        self.notifier = notifier
        self.status_policy = status_policy

    # Identity

    async def register_user(
        self, username: str, password: str, role: str, email: str
    ) -> str:
        """
        Creates a user and returns a bearer token for it.

        The caller chooses the role, including admin. Open registration of
        privileged roles is a known weakness kept for compatibility.
        """
        user = await self.store.add_user(
            username=username,
            password_hash=hash_password(password),
            email=email,
            role=role,
        )
        logger.info(f"Registered user {user.id} with role {user.role}")
        return create_access_token(user)

    async def login(self, email: str, password: str) -> str:
        user = await self.store.get_user_by_email(email)
        if user is None or not verify_password(password, user.password_hash):
            raise InvalidCredentialsError(
                "Invalid email or password", status_code=401
            )
        return create_access_token(user)

    # Users

    async def list_users(self, identity: Identity) -> Sequence[User]:
        ensure_authorized(identity.role, Operation.LIST_USERS)
        return await self.store.list_users()

    async def get_user(self, identity: Identity, user_id: int) -> User:
        ensure_authorized(identity.role, Operation.GET_USER)
        user = await self.store.get_user(user_id)
        if user is None:
            raise NotFoundError("User of this id does not exist")
        return user

    async def delete_user(self, identity: Identity, user_id: int) -> None:
        ensure_authorized(identity.role, Operation.DELETE_USER)
        if not await self.store.delete_user(user_id):
            logger.info(f"Delete of absent user {user_id} ignored")

    async def delete_all_users(self, identity: Identity) -> None:
        ensure_authorized(identity.role, Operation.DELETE_ALL_USERS)
        try:
            deleted = await self.store.delete_all_users()
            logger.info(f"Deleted all users ({deleted} rows)")
        except StoreError:
            logger.exception("Deleting all users failed; reporting success anyway")

    # Tickets

    async def list_tickets(self, identity: Identity) -> Sequence[Ticket]:
        ensure_authorized(identity.role, Operation.LIST_TICKETS)
        return await self.store.list_tickets()

    async def get_ticket(self, identity: Identity, ticket_id: int) -> Ticket:
        ensure_authorized(identity.role, Operation.GET_TICKET)
        return await self._require_ticket(ticket_id)

    async def create_ticket(
        self, identity: Identity, ticket_id: int, title: str
    ) -> Ticket:
        ensure_authorized(identity.role, Operation.CREATE_TICKET)
        ticket = await self.store.add_ticket(
            ticket_id=ticket_id,
            title=title,
            status=INITIAL_STATUS.value,
            created_at=_now(),
        )
        logger.info(f"Ticket {ticket.id} created by user {identity.user_id}")
        return ticket

    async def update_ticket_title(
        self, identity: Identity, ticket_id: int, title: str
    ) -> Ticket:
        ensure_authorized(identity.role, Operation.UPDATE_TICKET_TITLE)
        ticket = await self.store.update_ticket_title(ticket_id, title)
        if ticket is None:
            raise NotFoundError("Ticket of this id does not exist")
        return ticket

    async def update_ticket_status(
        self, identity: Identity, ticket_id: int, status: str
    ) -> Ticket:
        ensure_authorized(identity.role, Operation.UPDATE_TICKET_STATUS)
        ticket = await self._require_ticket(ticket_id)
        new_status = self.status_policy.validate(ticket.status, status)
        updated = await self.store.update_ticket_status(ticket_id, new_status)
        if updated is None:
            raise NotFoundError("Ticket of this id does not exist")
        logger.info(f"Ticket {ticket_id} status set to '{new_status}'")
        return updated

    async def delete_ticket(self, identity: Identity, ticket_id: int) -> None:
        ensure_authorized(identity.role, Operation.DELETE_TICKET)
        if not await self.store.delete_ticket(ticket_id):
            logger.info(f"Delete of absent ticket {ticket_id} ignored")

    async def delete_all_tickets(self, identity: Identity) -> None:
        ensure_authorized(identity.role, Operation.DELETE_ALL_TICKETS)
        try:
            deleted = await self.store.delete_all_tickets()
            logger.info(f"Deleted all tickets ({deleted} rows)")
        except StoreError:
            logger.exception("Deleting all tickets failed; reporting success anyway")

    # Assignments

    async def assign_ticket(
        self, identity: Identity, user_id: int, ticket_id: int
    ) -> TicketAssignment:
        """
        Records an assignment and notifies the assignee.

        The assignee must exist before anything is written. Once the row is
        committed, a failing notification is only logged.
        """
        ensure_authorized(identity.role, Operation.ASSIGN_TICKET)
        assignee = await self.store.get_user(user_id)
        if assignee is None:
            raise NotFoundError("User of this id does not exist")
        await self._require_ticket(ticket_id)

        assignment = await self.store.add_assignment(
            ticket_id=ticket_id, user_id=user_id, assigned_at=_now()
        )
        logger.info(
            f"Ticket {ticket_id} assigned to user {user_id} by user {identity.user_id}"
        )

        try:
            await self.notifier.ticket_assigned(assignee.email, ticket_id)
        except Exception:
            logger.exception(f"Could not dispatch assignment email for ticket {ticket_id}")
        return assignment

    async def list_assigned_tickets(
        self, identity: Identity
    ) -> Sequence[dict[str, Any]]:
        ensure_authorized(identity.role, Operation.LIST_ASSIGNED_TICKETS)
        return await self.store.list_assigned_tickets()

    async def _require_ticket(self, ticket_id: int) -> Ticket:
        ticket = await self.store.get_ticket(ticket_id)
        if ticket is None:
            raise NotFoundError("Ticket of this id does not exist")
        return ticket
