"""
Change notifications for connected WebSocket clients.

Events are handed to the store's ``on_commit`` hook, so a client that
refetches on receipt always sees the committed state.
"""
from __future__ import annotations

import logging

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.utils import timezone

from .consumers import UpdatesConsumer

logger = logging.getLogger(__name__)

INVENTORY_CHANGED = "inventory.changed"
LEDGER_CHANGED = "ledger.changed"
PATIENTS_CHANGED = "patients.changed"


def _send(event: str, data: dict) -> None:
    channel_layer = get_channel_layer()
    if channel_layer is None:
        return
    message = {"type": "broadcast.update", "event": event, "ts": timezone.now().isoformat(), **data}
    try:
        async_to_sync(channel_layer.group_send)(UpdatesConsumer.GROUP, message)
    except Exception:
        # notifications are best effort
        logger.exception("Could not broadcast %s", event)


def broadcast(store, event: str, **data) -> None:
    """Send ``event`` to the ``updates`` group after ``store`` commits.

    ``data`` must hold plain JSON values (str/int/list) so any channel layer
    can serialise it.
    """
    store.on_commit(lambda: _send(event, data))
