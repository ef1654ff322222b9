"""
HTTP client for the hospital backend.

Reads always go to the server first.  A successful read is merged into the
offline cache and returned unchanged; only when no backend is reachable, or
the backend fails with a 5xx, do ``inventory()`` and ``patients()`` answer
from the cache, flagged with ``offline=True``.  Writes are never queued: they raise when offline.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

import requests

from .errors import ApiError, BackendUnavailable
from .offline import OfflineCache
from .resolver import BackendResolver, default_resolver

logger = logging.getLogger(__name__)


@dataclass
class Snapshot:
    data: Any
    offline: bool = False


class HospitalClient:
    def __init__(self, resolver: Optional[BackendResolver] = None, cache: Optional[OfflineCache] = None,
                 session: Optional[requests.Session] = None, timeout: float = 5.0):
        self.resolver = resolver or default_resolver()
        self.cache = cache if cache is not None else OfflineCache()
        self.session = session or self.resolver.session
        self.timeout = timeout

    @property
    def mode(self) -> Optional[str]:
        return self.resolver.mode

    def _request(self, method: str, path: str, **kwargs) -> Any:
        base = self.resolver.resolve()
        try:
            r = self.session.request(method, f'{base}{path}', timeout=self.timeout, **kwargs)
        except (requests.ConnectionError, requests.Timeout) as exc:
            # the cached backend went away; the next call re-probes
            self.resolver.invalidate()
            raise BackendUnavailable(str(exc)) from exc
        try:
            payload = r.json()
        except ValueError:
            payload = None
        if r.status_code >= 400:
            if isinstance(payload, dict):
                raise ApiError(r.status_code, payload.get('error') or r.reason, payload.get('code', ''))
            raise ApiError(r.status_code, r.reason or 'Request failed')
        return payload

    # -- auth ---------------------------------------------------------------

    def login(self, username: str, password: str) -> dict:
        """Return the account on success; raises ``ApiError`` (401) on bad credentials."""
        return self._request('POST', '/api/auth/login', json={'username': username, 'password': password})['user']

    # -- reads with offline fallback -----------------------------------------

    def _read(self, path: str, params: dict) -> Any:
        """GET ``path``; ``None`` when the answer must come from the offline cache."""
        try:
            return self._request('GET', path, params=params)
        except BackendUnavailable:
            logger.warning("Backend unreachable, serving %s from the offline cache", path)
        except ApiError as exc:
            if exc.status < 500:
                raise
            logger.warning("Backend failed on %s (%s), serving from the offline cache", path, exc)
        return None

    def inventory(self, category: str = '', q: str = '') -> Snapshot:
        params = {k: v for k, v in (('category', category), ('q', q)) if v}
        items = self._read('/api/inventory', params)
        if items is None:
            cached = self.cache.all('inventory')
            if category:
                cached = [i for i in cached if i.get('category') == category]
            if q:
                cached = [i for i in cached if q.lower() in i.get('name', '').lower()]
            return Snapshot(cached, offline=True)
        self.cache.merge('inventory', items, key='name')
        return Snapshot(items)

    def patients(self, q: str = '', status: str = 'all') -> Snapshot:
        found = self._read('/api/patients', {'q': q, 'status': status})
        if found is None:
            return Snapshot(self._cached_patients(q, status), offline=True)
        self.cache.merge('patients', found)
        return Snapshot(found)

    def _cached_patients(self, q: str, status: str) -> list[dict]:
        result = []
        needle = (q or '').lower()
        for p in self.cache.all('patients'):
            if status != 'all' and (p.get('status') or '').lower() != status:
                continue
            if needle and not any(needle in str(p.get(f) or '').lower() for f in ('name', 'id', 'diagnosis')):
                continue
            result.append(p)
        return result

    # -- server only --------------------------------------------------------

    def dashboard(self, admin: bool = True) -> dict:
        return self._request('GET', '/api/dashboard' if admin else '/api/user-dashboard')

    def process_sale(self, product_name: str, quantity: int) -> dict:
        result = self._request('POST', '/api/sales', json={'productName': product_name, 'quantity': quantity})
        self.cache.merge('inventory', result.get('inventory') or [], key='name')
        return result

    def generate_bill(self, patient_id: str, items: list[dict], payment_method: str = 'Cash') -> dict:
        result = self._request('POST', '/api/billing', json={
            'patientId': patient_id, 'items': items, 'paymentMethod': payment_method,
        })
        if result.get('patient'):
            self.cache.merge('patients', [result['patient']])
        return result
