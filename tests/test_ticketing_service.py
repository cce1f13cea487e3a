from unittest.mock import AsyncMock

import pytest
from sqlalchemy import func, select

from helpdesk.models import Role, Ticket, TicketAssignment, User
from helpdesk.services.lifecycle import PermissiveStatusPolicy, StrictStatusPolicy
from helpdesk.services.notifications import Notifier
from helpdesk.services.store import TicketStore
from helpdesk.services.ticketing import TicketingService
from helpdesk.utils.exceptions import (
    AuthorizationError,
    InvalidCredentialsError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from helpdesk.utils.jwt_manager import decode_access_token


class FailingNotifier(Notifier):
    def __init__(self):
        self.attempts = 0

    async def ticket_assigned(self, email: str, ticket_id: int) -> None:
        self.attempts += 1
        raise ConnectionError("broker unreachable")


async def _add_user(db_session, user_id: int, role: Role = Role.SUPPORT_AGENT) -> User:
    user = User(
        id=user_id,
        username=f"user{user_id}",
        email=f"user{user_id}@example.com",
        role=role.value,
        password_hash="hash",
    )
    db_session.add(user)
    await db_session.commit()
    return user


async def _count(db_session, model) -> int:
    return await db_session.scalar(select(func.count()).select_from(model))


@pytest.mark.asyncio
async def test_register_admin_without_authentication(service):
    # Open registration lets anyone become admin; this pins the current behavior.
    token = await service.register_user(
        username="mallory", password="pw", role="admin", email="mallory@example.com"
    )
    identity = decode_access_token(token)
    assert identity.role is Role.ADMIN
    assert identity.username == "mallory"


@pytest.mark.asyncio
async def test_register_stores_a_hash_and_login_verifies_it(service, store):
    await service.register_user(
        username="dana", password="s3cret", role="customer", email="dana@example.com"
    )
    user = await store.get_user_by_email("dana@example.com")
    assert user.password_hash != "s3cret"

    token = await service.login("dana@example.com", "s3cret")
    assert decode_access_token(token).user_id == user.id

    with pytest.raises(InvalidCredentialsError) as excinfo:
        await service.login("dana@example.com", "nope")
    assert excinfo.value.status_code == 401


@pytest.mark.asyncio
async def test_duplicate_email_is_a_store_error(service):
    await service.register_user("a", "pw", "customer", "same@example.com")
    with pytest.raises(StoreError):
        await service.register_user("b", "pw", "customer", "same@example.com")


@pytest.mark.asyncio
async def test_create_ticket_starts_open_and_can_be_read_back(service, make_identity):
    customer = make_identity(Role.CUSTOMER)
    created = await service.create_ticket(customer, 42, "printer jam")

    assert created.id == 42
    assert created.title == "printer jam"
    assert created.status == "open"
    assert created.created_at is not None

    fetched = await service.get_ticket(customer, 42)
    assert (fetched.id, fetched.title, fetched.status, fetched.created_at) == (
        42,
        "printer jam",
        "open",
        created.created_at,
    )


@pytest.mark.asyncio
async def test_get_missing_ticket_is_not_found(service, make_identity):
    with pytest.raises(NotFoundError):
        await service.get_ticket(make_identity(Role.ADMIN), 404)


@pytest.mark.asyncio
async def test_title_update_leaves_status_alone(service, make_identity):
    admin = make_identity(Role.ADMIN)
    await service.create_ticket(admin, 42, "printer jam")
    await service.update_ticket_status(admin, 42, "in_progress")

    updated = await service.update_ticket_title(
        make_identity(Role.CUSTOMER), 42, "printer on fire"
    )
    assert updated.title == "printer on fire"
    assert updated.status == "in_progress"


@pytest.mark.asyncio
async def test_assign_inserts_one_row_and_notifies_once(
    service, db_session, notifier, make_identity
):
    await _add_user(db_session, 7)
    agent = make_identity(Role.SUPPORT_AGENT, user_id=3)
    await service.create_ticket(make_identity(Role.ADMIN), 42, "printer jam")

    assignment = await service.assign_ticket(agent, user_id=7, ticket_id=42)

    assert (assignment.ticket_id, assignment.user_id) == (42, 7)
    assert await _count(db_session, TicketAssignment) == 1
    assert notifier.calls == [("user7@example.com", 42)]


@pytest.mark.asyncio
async def test_assign_to_missing_user_writes_and_notifies_nothing(
    service, db_session, notifier, make_identity
):
    await service.create_ticket(make_identity(Role.ADMIN), 42, "printer jam")

    with pytest.raises(NotFoundError):
        await service.assign_ticket(make_identity(Role.ADMIN), user_id=7, ticket_id=42)

    assert await _count(db_session, TicketAssignment) == 0
    assert notifier.calls == []


@pytest.mark.asyncio
async def test_assign_missing_ticket_is_not_found(
    service, db_session, notifier, make_identity
):
    await _add_user(db_session, 7)
    with pytest.raises(NotFoundError):
        await service.assign_ticket(make_identity(Role.ADMIN), user_id=7, ticket_id=42)
    assert notifier.calls == []


@pytest.mark.asyncio
async def test_notification_failure_keeps_the_assignment(
    store, db_session, make_identity
):
    failing = FailingNotifier()
    service = TicketingService(store, failing, PermissiveStatusPolicy())
    await _add_user(db_session, 7)
    await service.create_ticket(make_identity(Role.ADMIN), 42, "printer jam")

    assignment = await service.assign_ticket(
        make_identity(Role.ADMIN), user_id=7, ticket_id=42
    )

    assert assignment.id is not None
    assert failing.attempts == 1
    assert await _count(db_session, TicketAssignment) == 1


@pytest.mark.asyncio
async def test_assignments_are_history_not_a_single_owner(
    service, db_session, make_identity
):
    admin = make_identity(Role.ADMIN)
    await _add_user(db_session, 7)
    await _add_user(db_session, 8)
    await service.create_ticket(admin, 42, "printer jam")

    await service.assign_ticket(admin, user_id=7, ticket_id=42)
    await service.assign_ticket(admin, user_id=8, ticket_id=42)

    rows = await service.list_assigned_tickets(make_identity(Role.CUSTOMER))
    assert [(r["ticket_id"], r["user_id"], r["assigned_to"]) for r in rows] == [
        (42, 7, "user7"),
        (42, 8, "user8"),
    ]


@pytest.mark.asyncio
async def test_deleting_ticket_cascades_to_assignments(
    service, db_session, make_identity
):
    admin = make_identity(Role.ADMIN)
    await _add_user(db_session, 7)
    await service.create_ticket(admin, 42, "printer jam")
    await service.create_ticket(admin, 43, "no wifi")
    await service.assign_ticket(admin, user_id=7, ticket_id=42)
    await service.assign_ticket(admin, user_id=7, ticket_id=43)

    await service.delete_ticket(admin, 42)

    rows = await service.list_assigned_tickets(admin)
    assert [r["ticket_id"] for r in rows] == [43]
    with pytest.raises(NotFoundError):
        await service.get_ticket(admin, 42)


@pytest.mark.asyncio
async def test_deleting_user_cascades_to_assignments(
    service, db_session, make_identity
):
    admin = make_identity(Role.ADMIN)
    await _add_user(db_session, 7)
    await service.create_ticket(admin, 42, "printer jam")
    await service.assign_ticket(admin, user_id=7, ticket_id=42)

    await service.delete_user(admin, 7)

    assert await service.list_assigned_tickets(admin) == []
    assert len(await service.list_tickets(admin)) == 1


@pytest.mark.asyncio
async def test_delete_all_is_idempotent(service, db_session, make_identity):
    admin = make_identity(Role.ADMIN)
    await _add_user(db_session, 7)
    await service.create_ticket(admin, 42, "printer jam")
    await service.assign_ticket(admin, user_id=7, ticket_id=42)

    for _ in range(2):
        await service.delete_all_tickets(admin)
        await service.delete_all_users(admin)

    assert await service.list_tickets(admin) == []
    assert await service.list_users(admin) == []
    assert await _count(db_session, TicketAssignment) == 0


@pytest.mark.asyncio
async def test_delete_all_hides_store_failures(make_identity, notifier):
    store = AsyncMock(spec=TicketStore)
    store.delete_all_tickets.side_effect = StoreError()
    store.delete_all_users.side_effect = StoreError()
    service = TicketingService(store, notifier, PermissiveStatusPolicy())

    await service.delete_all_tickets(make_identity(Role.ADMIN))
    await service.delete_all_users(make_identity(Role.ADMIN))

    store.delete_all_tickets.assert_awaited_once()
    store.delete_all_users.assert_awaited_once()


@pytest.mark.asyncio
async def test_denied_role_never_reaches_the_store(make_identity, notifier):
    store = AsyncMock(spec=TicketStore)
    service = TicketingService(store, notifier, PermissiveStatusPolicy())
    customer = make_identity(Role.CUSTOMER)

    with pytest.raises(AuthorizationError):
        await service.assign_ticket(customer, user_id=7, ticket_id=42)
    with pytest.raises(AuthorizationError):
        await service.list_users(customer)
    with pytest.raises(AuthorizationError):
        await service.create_ticket(make_identity(Role.SUPPORT_AGENT), 1, "x")

    assert store.mock_calls == []
    assert notifier.calls == []


@pytest.mark.asyncio
async def test_permissive_policy_writes_unknown_status_verbatim(make_identity, notifier):
    # No value check happens before the store under the default policy.
    store = AsyncMock(spec=TicketStore)
    store.get_ticket.return_value = Ticket(id=42, title="printer jam", status="open")
    store.update_ticket_status.return_value = Ticket(
        id=42, title="printer jam", status="bogus_status"
    )
    service = TicketingService(store, notifier, PermissiveStatusPolicy())

    updated = await service.update_ticket_status(
        make_identity(Role.ADMIN), 42, "bogus_status"
    )

    store.update_ticket_status.assert_awaited_once_with(42, "bogus_status")
    assert updated.status == "bogus_status"


@pytest.mark.asyncio
async def test_strict_policy_rejects_unknown_status_without_writing(
    make_identity, notifier
):
    store = AsyncMock(spec=TicketStore)
    store.get_ticket.return_value = Ticket(id=42, title="printer jam", status="open")
    service = TicketingService(store, notifier, StrictStatusPolicy())

    with pytest.raises(ValidationError):
        await service.update_ticket_status(make_identity(Role.ADMIN), 42, "bogus_status")

    store.update_ticket_status.assert_not_awaited()


@pytest.mark.asyncio
async def test_schema_check_constraint_rejects_unknown_status(service, make_identity):
    admin = make_identity(Role.ADMIN)
    await service.create_ticket(admin, 42, "printer jam")

    with pytest.raises(StoreError):
        await service.update_ticket_status(admin, 42, "bogus_status")

    assert (await service.get_ticket(admin, 42)).status == "open"


@pytest.mark.asyncio
async def test_update_status_of_missing_ticket_is_not_found(service, make_identity):
    with pytest.raises(NotFoundError):
        await service.update_ticket_status(make_identity(Role.ADMIN), 42, "closed")
