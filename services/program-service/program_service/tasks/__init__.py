"""Celery tasks package for program-service.

Importing the task modules registers their ``@shared_task`` functions when
``celery_app.autodiscover_tasks`` loads ``program_service.tasks``.
"""

from . import program_tasks as _program_tasks  # noqa: F401
