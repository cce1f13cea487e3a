"""Pydantic schemas for tickets and assignments."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from helpdesk.models.base import MAX_ID


class TicketCreate(BaseModel):
    id: int = Field(..., gt=0, le=MAX_ID, description="Caller-chosen ticket identifier.")
    title: str = Field(..., min_length=1, max_length=255)


class TicketTitleUpdate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)


class TicketStatusUpdate(BaseModel):
    # Free text: the configured status policy decides what is acceptable.
    status: str = Field(..., min_length=1, max_length=50)


class TicketResponse(BaseModel):
    id: int
    title: str
    status: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AssignTicketRequest(BaseModel):
    user_id: int = Field(..., alias="userId", le=MAX_ID)
    ticket_id: int = Field(..., alias="ticketId", le=MAX_ID)

    model_config = ConfigDict(populate_by_name=True)


class AssignmentResponse(BaseModel):
    id: int
    ticket_id: int
    user_id: int
    assigned_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AssignedTicketResponse(BaseModel):
    """One row of the ticket / assignment / user join."""

    ticket_id: int
    title: str
    status: str
    assignment_id: int
    assigned_at: datetime
    assigned_to: str = Field(..., description="Username of the assignee.")
    user_id: int

    model_config = ConfigDict(from_attributes=True)
