"""Celery workers module - imports all task modules for autodiscovery."""

from app.features.verification.workers import periodic_tasks  # noqa: F401
