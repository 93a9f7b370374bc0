# celery_app.py
from celery import Celery

from config import CELERY_BROKER_URL, CELERY_RESULT_BACKEND

celery_app = Celery(
    "influencer_manager",
    broker=CELERY_BROKER_URL,
    backend=CELERY_RESULT_BACKEND,
    include=["tasks"],
)

celery_app.conf.timezone = "UTC"
celery_app.conf.task_track_started = True
# Notifications are fire-and-forget; nobody reads the results back
celery_app.conf.task_ignore_result = True
