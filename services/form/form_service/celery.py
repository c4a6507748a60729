"""Celery application for the form microservice."""
from __future__ import annotations

import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "form_service.settings")

app = Celery("form_service")
app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()
