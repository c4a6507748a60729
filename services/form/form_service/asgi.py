"""ASGI entry point; serves the same URLconf as :mod:`form_service.wsgi`."""
import os

from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "form_service.settings")

application = get_asgi_application()
