# tasks.py
from typing import Optional

from celery import current_task

from celery_app import celery_app
from logging_config import get_logger

logger = get_logger("influencer_manager", component="worker")


@celery_app.task(name="tasks.deliver_notification")
def deliver_notification(username: str, message: str, queued_at: Optional[str] = None) -> dict:
    """
    Out-of-process delivery for a notification drained from the in-app queue.
    There is no email/push provider behind it yet: delivery means a structured
    log line the operator can ship anywhere.
    """
    task_id = getattr(current_task.request, "id", None)

    if not username:
        logger.warning("notification_skipped_no_recipient", extra={"task_id": task_id})
        return {"delivered": False, "reason": "missing username"}

    logger.info(
        "notification_delivered",
        extra={
            "task_id": task_id,
            "username": username,
            "notification": message,
            "queued_at": queued_at,
        },
    )
    return {"delivered": True, "username": username}
