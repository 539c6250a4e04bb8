"""ASGI entry point for the fee portal."""
import os

from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "fee_portal.settings")

application = get_asgi_application()
