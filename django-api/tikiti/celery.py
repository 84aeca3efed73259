"""Celery application for background work such as ticket confirmation emails.

Tasks are discovered from the `tasks.py` module of every installed app.
"""

import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "tikiti.settings")

celery_app = Celery("tikiti")

# Celery settings live in Django settings under the "CELERY_" prefix
celery_app.config_from_object("django.conf:settings", namespace="CELERY")
celery_app.autodiscover_tasks()
