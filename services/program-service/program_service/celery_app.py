"""Celery application for program-service."""

from __future__ import annotations

from celery import Celery

from .config import settings

PROGRAM_TASK_QUEUE = settings.CELERY_PROGRAM_QUEUE

celery_app = Celery(
    "program_service",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_RESULT_BACKEND,
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_default_queue=PROGRAM_TASK_QUEUE,
    task_track_started=True,
    worker_prefetch_multiplier=1,
    task_acks_late=True,
    task_time_limit=settings.CELERY_TASK_TIME_LIMIT,
)

celery_app.autodiscover_tasks(["program_service.tasks"], related_name="program_tasks")
