"""
Store selection.

The backend serves either from the database (``DatabaseStore``) or from
process-local data (``MemoryStore``).  The choice is made once, when the
middleware stack loads, and never changes for the life of the process.
"""
from __future__ import annotations

import logging
from typing import Optional

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from django.db import DatabaseError

from .base import Store
from .database import DatabaseStore
from .memory import MemoryStore

logger = logging.getLogger(__name__)

__all__ = ['Store', 'DatabaseStore', 'MemoryStore', 'select_store']


def select_store(choice: Optional[str] = None) -> Store:
    """Return the store configured by ``HOSPITAL_STORE`` (or ``choice``).

    ``auto`` probes the default database and falls back to memory when the
    probe fails for any database reason.
    """
    choice = (choice or settings.HOSPITAL_STORE).lower()
    if choice == 'memory':
        return MemoryStore()
    if choice == 'database':
        return DatabaseStore()
    try:
        DatabaseStore.probe()
    except (DatabaseError, ImproperlyConfigured) as exc:
        logger.warning("Database unreachable (%s); switching to in-memory mode", exc)
        return MemoryStore()
    return DatabaseStore()
