"""The Celery app is imported here so shared tasks bind to it."""

from tikiti.celery import celery_app

__all__ = ["celery_app"]
