# ecobazaar/celery_worker.py
from celery import Celery

from ecobazaar.utils.settings import (
    CELERY_BROKER_URL,
    CELERY_RESULT_BACKEND,
    CHECKOUT_AUTO_RESUME,
    CHECKOUT_STALL_SECONDS,
)

celery_app = Celery(
    "ecobazaar",
    broker=CELERY_BROKER_URL,
    backend=CELERY_RESULT_BACKEND,
)

# tasks must be imported explicitly for Celery to register them
celery_app.conf.imports = (
    "ecobazaar.tasks.resume",
    "ecobazaar.services.notification_service",
)

# resuming checkouts is an operator decision, off unless CHECKOUT_AUTO_RESUME is set
if CHECKOUT_AUTO_RESUME:
    celery_app.conf.beat_schedule = {
        "resume-stalled-checkouts": {
            "task": "ecobazaar.tasks.resume.resume_stalled_checkouts_task",
            "schedule": float(CHECKOUT_STALL_SECONDS),
        },
    }

celery_app.conf.timezone = "UTC"
