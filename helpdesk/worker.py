"""Celery worker configuration."""

from celery import Celery

from helpdesk.settings import settings

celery_app = Celery(
    "worker",
    broker=str(settings.REDIS_URL),
    include=["helpdesk.services.notifications"],
)


celery_app.conf.update(
    task_ignore_result=True,
    # Dispatch is fire-and-forget: fail fast and let the caller log it.
    task_publish_retry=False,
    broker_connection_timeout=2,
    broker_transport_options={"max_retries": 0},
)
