"""
Backend discovery.

One resolver is shared by every consumer in the process.  It probes the
candidate base URLs in order with ``GET /api/health`` and remembers the
first live one for ``ttl`` seconds; callers ``invalidate()`` it when a
request to the cached URL fails.
"""
from __future__ import annotations

import logging
import os
import threading
import time
from typing import Optional, Sequence

import requests

from .errors import BackendUnavailable

logger = logging.getLogger(__name__)

DEFAULT_URLS = 'http://127.0.0.1:8000'
HEALTHY_STATUS = 'Server is healthy'


def candidates_from_env() -> list[str]:
    raw = os.getenv('HOSPITAL_API_URLS', DEFAULT_URLS)
    return [u.strip().rstrip('/') for u in raw.split(',') if u.strip()]


class BackendResolver:
    def __init__(self, candidates: Optional[Sequence[str]] = None, ttl: float = 30.0, timeout: float = 3.0,
                 session: Optional[requests.Session] = None, clock=time.monotonic):
        self.candidates = [c.rstrip('/') for c in (candidates or candidates_from_env())]
        if not self.candidates:
            raise ValueError('BackendResolver needs at least one candidate URL')
        self.ttl = ttl
        self.timeout = timeout
        self.session = session or requests.Session()
        self._clock = clock
        self._lock = threading.Lock()
        self._url: Optional[str] = None
        self._mode: Optional[str] = None
        self._expires = 0.0

    @property
    def mode(self) -> Optional[str]:
        """Store mode reported by the resolved backend (``database`` / ``in-memory``)."""
        return self._mode

    def resolve(self) -> str:
        """Return a live base URL or raise ``BackendUnavailable``."""
        with self._lock:
            if self._url and self._clock() < self._expires:
                return self._url
            for url in self.candidates:
                try:
                    r = self.session.get(f'{url}/api/health', timeout=self.timeout)
                except requests.RequestException as exc:
                    logger.debug("Backend %s unreachable: %s", url, exc)
                    continue
                if r.status_code != 200:
                    logger.debug("Backend %s answered %s", url, r.status_code)
                    continue
                try:
                    health = r.json()
                except ValueError:
                    health = None
                # another service may own the port
                if not isinstance(health, dict) or health.get('status') != HEALTHY_STATUS:
                    logger.debug("Backend %s is not a hospital backend", url)
                    continue
                self._url = url
                self._mode = health.get('mode')
                self._expires = self._clock() + self.ttl
                logger.info("Using backend %s (%s)", url, self._mode or 'unknown mode')
                return url
            self._url = None
            raise BackendUnavailable(f"No backend reachable among {', '.join(self.candidates)}")

    def invalidate(self) -> None:
        with self._lock:
            self._url = None
            self._expires = 0.0


_default: Optional[BackendResolver] = None
_default_lock = threading.Lock()


def default_resolver() -> BackendResolver:
    """The process-wide resolver built from ``HOSPITAL_API_URLS``."""
    global _default
    with _default_lock:
        if _default is None:
            _default = BackendResolver()
        return _default
