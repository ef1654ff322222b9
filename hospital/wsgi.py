"""
WSGI config for the hospital backend.

Exposes the WSGI callable as a module-level variable named ``application``
for gunicorn/uwsgi.  WebSocket updates are only served through
``hospital.asgi``.
"""
import os

from django.core.wsgi import get_wsgi_application  # type: ignore

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'hospital.settings')

application = get_wsgi_application()
