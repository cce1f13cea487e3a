"""Unauthenticated endpoints: registration and login."""

from fastapi import APIRouter, Depends

from helpdesk.api.deps import get_ticketing_service
from helpdesk.schemas.auth import LoginRequest, RegisterRequest, TokenResponse
from helpdesk.services.ticketing import TicketingService

router = APIRouter()


@router.post(
    "/register",
    response_model=TokenResponse,
    summary="Register a new user",
    description="Creates a user with the requested role and returns a bearer token. "
    "No authentication is required and any role may be requested.",
)
async def register(
    payload: RegisterRequest,
    service: TicketingService = Depends(get_ticketing_service),
) -> TokenResponse:
    token = await service.register_user(
        username=payload.username,
        password=payload.password,
        role=payload.role.value,
        email=payload.email,
    )
    return TokenResponse(access_token=token)


@router.post("/login", response_model=TokenResponse, summary="Exchange credentials for a token")
async def login(
    payload: LoginRequest,
    service: TicketingService = Depends(get_ticketing_service),
) -> TokenResponse:
    token = await service.login(email=payload.email, password=payload.password)
    return TokenResponse(access_token=token)
