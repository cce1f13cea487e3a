"""API endpoints for tickets and assignments."""

from typing import List

from fastapi import APIRouter, Depends, Path, status

from helpdesk.api.deps import get_current_identity, get_ticketing_service
from helpdesk.models.base import MAX_ID
from helpdesk.schemas.auth import Identity
from helpdesk.schemas.ticket import (
    AssignedTicketResponse,
    AssignTicketRequest,
    TicketCreate,
    TicketResponse,
    TicketStatusUpdate,
    TicketTitleUpdate,
)
from helpdesk.schemas.user import MessageResponse
from helpdesk.services.ticketing import TicketingService

router = APIRouter()
assigned_router = APIRouter()


@router.get("", response_model=List[TicketResponse], summary="Get all tickets")
async def list_tickets(
    identity: Identity = Depends(get_current_identity),
    service: TicketingService = Depends(get_ticketing_service),
):
    return await service.list_tickets(identity)


@router.post(
    "",
    response_model=TicketResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new ticket",
    description="Creates a ticket with the caller-supplied id. New tickets are always open.",
)
async def create_ticket(
    payload: TicketCreate,
    identity: Identity = Depends(get_current_identity),
    service: TicketingService = Depends(get_ticketing_service),
):
    return await service.create_ticket(identity, payload.id, payload.title)


@router.post(
    "/assign",
    response_model=MessageResponse,
    summary="Assign a ticket to a particular user",
    description="Records the assignment and e-mails the assignee in the background.",
)
async def assign_ticket(
    payload: AssignTicketRequest,
    identity: Identity = Depends(get_current_identity),
    service: TicketingService = Depends(get_ticketing_service),
) -> MessageResponse:
    await service.assign_ticket(identity, payload.user_id, payload.ticket_id)
    return MessageResponse(message="Assignment Successful")


@router.delete("/deleteAll", response_model=MessageResponse, summary="Delete all tickets")
async def delete_all_tickets(
    identity: Identity = Depends(get_current_identity),
    service: TicketingService = Depends(get_ticketing_service),
) -> MessageResponse:
    await service.delete_all_tickets(identity)
    return MessageResponse(message="All tickets deleted successfully")


@router.patch(
    "/status/{ticket_id}",
    response_model=TicketResponse,
    summary="Update status of a ticket",
)
async def update_ticket_status(
    payload: TicketStatusUpdate,
    ticket_id: int = Path(..., le=MAX_ID),
    identity: Identity = Depends(get_current_identity),
    service: TicketingService = Depends(get_ticketing_service),
):
    return await service.update_ticket_status(identity, ticket_id, payload.status)


@router.get("/{ticket_id}", response_model=TicketResponse, summary="Get a specific ticket by ID")
async def get_ticket(
    ticket_id: int = Path(..., le=MAX_ID),
    identity: Identity = Depends(get_current_identity),
    service: TicketingService = Depends(get_ticketing_service),
):
    return await service.get_ticket(identity, ticket_id)


@router.patch("/{ticket_id}", response_model=TicketResponse, summary="Update a ticket's title")
async def update_ticket_title(
    payload: TicketTitleUpdate,
    ticket_id: int = Path(..., le=MAX_ID),
    identity: Identity = Depends(get_current_identity),
    service: TicketingService = Depends(get_ticketing_service),
):
    return await service.update_ticket_title(identity, ticket_id, payload.title)


@router.delete("/{ticket_id}", response_model=MessageResponse, summary="Delete a specific ticket by ID")
async def delete_ticket(
    ticket_id: int = Path(..., le=MAX_ID),
    identity: Identity = Depends(get_current_identity),
    service: TicketingService = Depends(get_ticketing_service),
) -> MessageResponse:
    await service.delete_ticket(identity, ticket_id)
    return MessageResponse(message="Deleted successfully")


@assigned_router.get(
    "/assignedTickets",
    response_model=List[AssignedTicketResponse],
    summary="Get all assigned tickets",
)
async def list_assigned_tickets(
    identity: Identity = Depends(get_current_identity),
    service: TicketingService = Depends(get_ticketing_service),
):
    return await service.list_assigned_tickets(identity)
