"""
Ticket notifications.

The request path only publishes a Celery task; the worker sends the e-mail.
Delivery is best-effort: failures are logged and never retried.
"""

import asyncio
import smtplib
from abc import ABC, abstractmethod

from helpdesk.services.mailer import send_email
from helpdesk.utils.logging_config import logger
from helpdesk.worker import celery_app

ASSIGNMENT_SUBJECT = "Ticket Assigned"


def assignment_message(ticket_id: int) -> str:
    return f"Ticket ID {ticket_id} has been assigned to you."


@celery_app.task(name="send_ticket_assigned_email")
def send_ticket_assigned_email(email: str, ticket_id: int) -> bool:
    """
    Celery task that e-mails the assignee of a ticket.

    Returns:
        bool: True if the message was handed to the SMTP server.
    """
    try:
        send_email(email, ASSIGNMENT_SUBJECT, assignment_message(ticket_id))
    except (smtplib.SMTPException, OSError) as e:
        logger.error(
            f"Error sending assignment email for ticket {ticket_id} to {email}: {e}"
        )
        return False
    return True


# Publishes still in flight. The loop keeps only weak references to tasks.
_pending_publishes: set[asyncio.Task] = set()


async def _publish_assignment(email: str, ticket_id: int) -> None:
    try:
        # Publishing talks to the broker synchronously, keep it off the event loop.
        result = await asyncio.to_thread(
            send_ticket_assigned_email.delay, email, ticket_id
        )
    except Exception:
        logger.exception(f"Could not queue assignment email for ticket {ticket_id}")
        return
    logger.info(f"Queued assignment email for ticket {ticket_id} (task {result.id})")


async def wait_for_pending_notifications() -> None:
    """Wait until every scheduled publish has finished or failed."""
    if _pending_publishes:
        await asyncio.gather(*list(_pending_publishes), return_exceptions=True)


class Notifier(ABC):
    @abstractmethod
    async def ticket_assigned(self, email: str, ticket_id: int) -> None:
        """Queue a notification; must not wait for delivery."""


class CeleryNotifier(Notifier):
    async def ticket_assigned(self, email: str, ticket_id: int) -> None:
        # Returns before the broker is contacted; a dead broker never stalls the caller.
        task = asyncio.create_task(_publish_assignment(email, ticket_id))
        _pending_publishes.add(task)
        task.add_done_callback(_pending_publishes.discard)
