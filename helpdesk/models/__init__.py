"""Exports all models for easy access."""

from .base import Base
from .ticket import Ticket, TicketAssignment, TicketStatus
from .user import Role, User

__all__ = [
    "Base",
    "Role",
    "User",
    "Ticket",
    "TicketAssignment",
    "TicketStatus",
]
