"""
WSGI config for gangroster project.

It exposes the WSGI callable as a module-level variable named ``application``.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "gangroster.settings")

# Initialize OpenTelemetry tracing before Django loads
import gangroster.tracing  # noqa: F401, E402

application = get_wsgi_application()
