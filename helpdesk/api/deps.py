"""Dependencies for API endpoints."""

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from helpdesk.config.db import get_db_session
from helpdesk.schemas.auth import Identity
from helpdesk.services.lifecycle import get_status_policy
from helpdesk.services.notifications import CeleryNotifier, Notifier
from helpdesk.services.store import SqlTicketStore, TicketStore
from helpdesk.services.ticketing import TicketingService
from helpdesk.settings import settings
from helpdesk.utils.exceptions import MissingCredentialsError
from helpdesk.utils.jwt_manager import decode_access_token

# auto_error is off so a missing token gets its own error, distinct from a bad one.
optional_oauth2 = HTTPBearer(scheme_name="Bearer", auto_error=False)


async def get_current_identity(
    token: HTTPAuthorizationCredentials | None = Depends(optional_oauth2),
) -> Identity:
    """
    Dependency to get the caller's identity from the bearer token.
    """
    if token is None or not token.credentials:
        raise MissingCredentialsError()
    return decode_access_token(token.credentials)


def get_store(db: AsyncSession = Depends(get_db_session)) -> TicketStore:
    return SqlTicketStore(db)


def get_notifier() -> Notifier:
    return CeleryNotifier()


def get_ticketing_service(
    store: TicketStore = Depends(get_store),
    notifier: Notifier = Depends(get_notifier),
) -> TicketingService:
    return TicketingService(
        store=store,
        notifier=notifier,
        status_policy=get_status_policy(settings.TICKET_STATUS_POLICY),
    )
