"""
ASGI entrypoint: Django for HTTP, Channels for the ``ws/updates/`` change feed.
"""
import os

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "hospital.settings")

import django  # noqa: E402
django.setup()  # noqa: E402

from django.core.asgi import get_asgi_application  # noqa: E402
from channels.routing import ProtocolTypeRouter, URLRouter  # noqa: E402
from django.urls import path  # noqa: E402

from core.realtime.consumers import UpdatesConsumer  # noqa: E402

application = ProtocolTypeRouter({
    "http": get_asgi_application(),
    # inventory/ledger/patient change notifications; no per-connection auth
    "websocket": URLRouter([
        path("ws/updates/", UpdatesConsumer.as_asgi()),
    ]),
})
