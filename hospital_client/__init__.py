"""Python client for the hospital backend API.

``HospitalClient`` finds a live backend through a shared ``BackendResolver``
and falls back to an ``OfflineCache`` for inventory and patient reads when
no backend answers.
"""
from .api import HospitalClient, Snapshot
from .errors import ApiError, BackendUnavailable
from .offline import OfflineCache
from .resolver import BackendResolver, default_resolver

__all__ = [
    'ApiError',
    'BackendResolver',
    'BackendUnavailable',
    'HospitalClient',
    'OfflineCache',
    'Snapshot',
    'default_resolver',
]
