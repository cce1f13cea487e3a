from typing import List

from fastapi import APIRouter, Depends, Path

from helpdesk.api.deps import get_current_identity, get_ticketing_service
from helpdesk.models.base import MAX_ID
from helpdesk.schemas.auth import Identity
from helpdesk.schemas.user import MessageResponse, UserResponse
from helpdesk.services.ticketing import TicketingService

router = APIRouter()


@router.get("", response_model=List[UserResponse], summary="Get all users")
async def list_users(
    identity: Identity = Depends(get_current_identity),
    service: TicketingService = Depends(get_ticketing_service),
):
    return await service.list_users(identity)


# Declared before /{user_id} so "deleteAll" is not parsed as an id.
@router.delete("/deleteAll", response_model=MessageResponse, summary="Delete all users")
async def delete_all_users(
    identity: Identity = Depends(get_current_identity),
    service: TicketingService = Depends(get_ticketing_service),
) -> MessageResponse:
    await service.delete_all_users(identity)
    return MessageResponse(message="All Users deleted successfully")


@router.get("/{user_id}", response_model=UserResponse, summary="Get a specific user by ID")
async def get_user(
    user_id: int = Path(..., le=MAX_ID),
    identity: Identity = Depends(get_current_identity),
    service: TicketingService = Depends(get_ticketing_service),
):
    return await service.get_user(identity, user_id)


@router.delete("/{user_id}", response_model=MessageResponse, summary="Delete a specific user by ID")
async def delete_user(
    user_id: int = Path(..., le=MAX_ID),
    identity: Identity = Depends(get_current_identity),
    service: TicketingService = Depends(get_ticketing_service),
) -> MessageResponse:
    await service.delete_user(identity, user_id)
    return MessageResponse(message="Deleted successfully")
