import logging

from core import errors
from core.domain import CATEGORIES
from core.realtime.events import INVENTORY_CHANGED, broadcast

logger = logging.getLogger(__name__)


def list_items(store, category: str = '', q: str = ''):
    """Catalog snapshot, optionally narrowed to one category and/or a name substring."""
    items = store.list_items()
    category = (category or '').strip().lower()
    if category:
        if category not in CATEGORIES:
            raise errors.ValidationError(f"Unknown category '{category}'")
        items = [i for i in items if i.category == category]
    needle = (q or '').strip().lower()
    if needle:
        items = [i for i in items if needle in i.name.lower()]
    return items


def add_item(store, name, stock, price, category=None):
    item = store.add_item(name, stock, price, category)
    logger.info("Added %s to inventory (stock %s @ %s)", item.name, item.stock, item.price)
    broadcast(store, INVENTORY_CHANGED, names=[item.name])
    return item


def restock(store, name, quantity):
    item = store.restock(name, quantity)
    logger.info("Restocked %s by %s (stock now %s)", item.name, quantity, item.stock)
    broadcast(store, INVENTORY_CHANGED, names=[item.name])
    return item
