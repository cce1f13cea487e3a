"""
Persistence interface for users, tickets and assignments.

Every mutating call commits on its own; callers never get a transaction
spanning several calls.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Sequence

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from helpdesk.models.ticket import Ticket, TicketAssignment
from helpdesk.models.user import User
from helpdesk.utils.exceptions import StoreError
from helpdesk.utils.logging_config import logger


class TicketStore(ABC):
    """Query/execute capability over users, tickets and assignments."""

    # Users
    @abstractmethod
    async def add_user(
        self, username: str, password_hash: str, email: str, role: str
    ) -> User: ...

    @abstractmethod
    async def get_user(self, user_id: int) -> User | None: ...

    @abstractmethod
    async def get_user_by_email(self, email: str) -> User | None: ...

    @abstractmethod
    async def list_users(self) -> Sequence[User]: ...

    @abstractmethod
    async def delete_user(self, user_id: int) -> bool: ...

    @abstractmethod
    async def delete_all_users(self) -> int: ...

    # Tickets
    @abstractmethod
    async def add_ticket(
        self, ticket_id: int, title: str, status: str, created_at: datetime
    ) -> Ticket: ...

    @abstractmethod
    async def get_ticket(self, ticket_id: int) -> Ticket | None: ...

    @abstractmethod
    async def list_tickets(self) -> Sequence[Ticket]: ...

    @abstractmethod
    async def update_ticket_title(self, ticket_id: int, title: str) -> Ticket | None: ...

    @abstractmethod
    async def update_ticket_status(
        self, ticket_id: int, status: str
    ) -> Ticket | None: ...

    @abstractmethod
    async def delete_ticket(self, ticket_id: int) -> bool: ...

    @abstractmethod
    async def delete_all_tickets(self) -> int: ...

    # Assignments
    @abstractmethod
    async def add_assignment(
        self, ticket_id: int, user_id: int, assigned_at: datetime
    ) -> TicketAssignment: ...

    @abstractmethod
    async def list_assigned_tickets(self) -> Sequence[dict[str, Any]]: ...


class SqlTicketStore(TicketStore):
    """TicketStore backed by a SQLAlchemy AsyncSession."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _fail(self, action: str, error: SQLAlchemyError) -> StoreError:
        logger.error(f"Store failure while {action}: {error}", exc_info=True)
        await self.session.rollback()
        return StoreError()

    async def _add(self, instance, action: str):
        self.session.add(instance)
        try:
            await self.session.commit()
            await self.session.refresh(instance)
        except SQLAlchemyError as e:
            raise await self._fail(action, e) from e
        return instance

    async def _scalars(self, statement, action: str) -> Sequence:
        try:
            result = await self.session.execute(statement)
        except SQLAlchemyError as e:
            raise await self._fail(action, e) from e
        return result.scalars().all()

    async def _get(self, model, ident: int, action: str):
        try:
            return await self.session.get(model, ident)
        except SQLAlchemyError as e:
            raise await self._fail(action, e) from e

    async def _delete(self, statement, action: str) -> int:
        try:
            result = await self.session.execute(statement)
            await self.session.commit()
        except SQLAlchemyError as e:
            raise await self._fail(action, e) from e
        return result.rowcount or 0

    async def _update(self, model, ident: int, action: str, **values):
        instance = await self._get(model, ident, action)
        if instance is None:
            return None
        for key, value in values.items():
            setattr(instance, key, value)
        try:
            await self.session.commit()
        except SQLAlchemyError as e:
            raise await self._fail(action, e) from e
        return instance

    async def add_user(
        self, username: str, password_hash: str, email: str, role: str
    ) -> User:
        user = User(
            username=username, password_hash=password_hash, email=email, role=role
        )
        return await self._add(user, "inserting user")

    async def get_user(self, user_id: int) -> User | None:
        return await self._get(User, user_id, f"loading user {user_id}")

    async def get_user_by_email(self, email: str) -> User | None:
        users = await self._scalars(
            select(User).where(User.email == email), "loading user by email"
        )
        return users[0] if users else None

    async def list_users(self) -> Sequence[User]:
        return await self._scalars(select(User).order_by(User.id), "listing users")

    async def delete_user(self, user_id: int) -> bool:
        deleted = await self._delete(
            delete(User).where(User.id == user_id), f"deleting user {user_id}"
        )
        return deleted > 0

    async def delete_all_users(self) -> int:
        return await self._delete(delete(User), "deleting all users")

    async def add_ticket(
        self, ticket_id: int, title: str, status: str, created_at: datetime
    ) -> Ticket:
        ticket = Ticket(id=ticket_id, title=title, status=status, created_at=created_at)
        return await self._add(ticket, f"inserting ticket {ticket_id}")

    async def get_ticket(self, ticket_id: int) -> Ticket | None:
        return await self._get(Ticket, ticket_id, f"loading ticket {ticket_id}")

    async def list_tickets(self) -> Sequence[Ticket]:
        return await self._scalars(
            select(Ticket).order_by(Ticket.id), "listing tickets"
        )

    async def update_ticket_title(self, ticket_id: int, title: str) -> Ticket | None:
        return await self._update(
            Ticket, ticket_id, f"updating title of ticket {ticket_id}", title=title
        )

    async def update_ticket_status(self, ticket_id: int, status: str) -> Ticket | None:
        return await self._update(
            Ticket, ticket_id, f"updating status of ticket {ticket_id}", status=status
        )

    async def delete_ticket(self, ticket_id: int) -> bool:
        deleted = await self._delete(
            delete(Ticket).where(Ticket.id == ticket_id),
            f"deleting ticket {ticket_id}",
        )
        return deleted > 0

    async def delete_all_tickets(self) -> int:
        return await self._delete(delete(Ticket), "deleting all tickets")

    async def add_assignment(
        self, ticket_id: int, user_id: int, assigned_at: datetime
    ) -> TicketAssignment:
        assignment = TicketAssignment(
            ticket_id=ticket_id, user_id=user_id, assigned_at=assigned_at
        )
        return await self._add(
            assignment, f"assigning ticket {ticket_id} to user {user_id}"
        )

    async def list_assigned_tickets(self) -> Sequence[dict[str, Any]]:
        statement = (
            select(
                Ticket.id.label("ticket_id"),
                Ticket.title,
                Ticket.status,
                TicketAssignment.id.label("assignment_id"),
                TicketAssignment.assigned_at,
                User.username.label("assigned_to"),
                User.id.label("user_id"),
            )
            .join(TicketAssignment, TicketAssignment.ticket_id == Ticket.id)
            .join(User, User.id == TicketAssignment.user_id)
            .order_by(TicketAssignment.id)
        )
        try:
            result = await self.session.execute(statement)
        except SQLAlchemyError as e:
            raise await self._fail("listing assigned tickets", e) from e
        return [dict(row) for row in result.mappings().all()]
