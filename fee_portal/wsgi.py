"""WSGI entry point for the fee portal."""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "fee_portal.settings")

application = get_wsgi_application()
