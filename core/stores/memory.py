"""
Process-local store used when no database is reachable at start-up.

All state lives in plain dicts/lists guarded by one re-entrant lock; every
read-check-write runs while holding it.  ``atomic()`` keeps the lock for the
whole block and replays an undo log if the block raises, which gives the
sale workflow the same all-or-nothing behaviour as a database transaction.
"""
from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass, replace
from datetime import date
from typing import Callable, Iterator, Optional

from django.contrib.auth.hashers import check_password, make_password
from django.utils import timezone

from core import errors
from core.domain import (
    STATUS_DISCHARGED, Account, InventoryItem, LedgerEntry, LedgerFilter, Patient, money,
)
from core.seed import DEFAULT_ACCOUNTS, FALLBACK_INVENTORY, FALLBACK_PATIENTS

from .base import Store, next_patient_id

logger = logging.getLogger(__name__)


@dataclass
class _AccountRecord:
    account: Account
    password: str  # Django password hash


class MemoryStore(Store):
    mode = 'in-memory'

    def __init__(self, *, seed: bool = True) -> None:
        self._lock = threading.RLock()
        self._items: dict[str, InventoryItem] = {}
        self._patients: dict[str, Patient] = {}
        self._entries: list[LedgerEntry] = []
        self._accounts: dict[str, _AccountRecord] = {}
        self._undo: Optional[list[Callable[[], None]]] = None
        self._after_commit: list[Callable[[], None]] = []
        if seed:
            self._seed()

    def _seed(self) -> None:
        for row in FALLBACK_INVENTORY:
            self._items[row['name']] = InventoryItem(
                name=row['name'], stock=row['stock'], price=money(row['price']), category=row['category'],
            )
        today = timezone.localdate()
        now = timezone.now()
        for row in FALLBACK_PATIENTS:
            self._patients[row['id']] = Patient(admission_date=today, updated_at=now, **row)
        for username, password, role, user_type, department in DEFAULT_ACCOUNTS:
            self.create_account(username, password, role=role, user_type=user_type, department=department)

    def create_account(self, username: str, password: str, **fields) -> Account:
        account = Account(username=username, **fields)
        with self._lock:
            self._accounts[username] = _AccountRecord(account=account, password=make_password(password))
        return replace(account)

    # -- transactions -----------------------------------------------------

    @contextmanager
    def atomic(self) -> Iterator[None]:
        with self._lock:
            if self._undo is not None:
                # nested block joins the outer one
                yield
                return
            self._undo = []
            self._after_commit = []
            try:
                yield
            except BaseException:
                for action in reversed(self._undo):
                    action()
                raise
            else:
                callbacks = self._after_commit
            finally:
                self._undo = None
                self._after_commit = []
        for func in callbacks:
            func()

    def on_commit(self, func: Callable[[], None]) -> None:
        with self._lock:
            if self._undo is not None:
                self._after_commit.append(func)
                return
        func()

    def _on_rollback(self, action: Callable[[], None]) -> None:
        if self._undo is not None:
            self._undo.append(action)

    # -- catalog ----------------------------------------------------------

    def list_items(self) -> list[InventoryItem]:
        with self._lock:
            return [replace(i) for i in self._items.values()]

    def get_item(self, name: str) -> InventoryItem:
        with self._lock:
            return replace(self._require_item(name))

    def _require_item(self, name: str) -> InventoryItem:
        item = self._items.get(name)
        if item is None:
            raise errors.NotFound('Item not found in inventory')
        return item

    def _insert_item(self, item: InventoryItem) -> InventoryItem:
        with self._lock:
            if item.name in self._items:
                raise errors.DuplicateItem()
            self._items[item.name] = replace(item)
            self._on_rollback(lambda: self._items.pop(item.name, None))
            return replace(item)

    def _restock(self, name: str, quantity: int) -> InventoryItem:
        with self._lock:
            item = self._require_item(name)
            item.stock += quantity
            self._on_rollback(lambda: self._adjust(name, -quantity))
            return replace(item)

    def _decrement(self, name: str, quantity: int) -> InventoryItem:
        with self._lock:
            item = self._require_item(name)
            if item.stock < quantity:
                raise errors.InsufficientStock()
            item.stock -= quantity
            self._on_rollback(lambda: self._adjust(name, quantity))
            return replace(item)

    def _adjust(self, name: str, delta: int) -> None:
        self._items[name].stock += delta

    # -- ledger -----------------------------------------------------------

    def _insert_entry(self, entry: LedgerEntry) -> LedgerEntry:
        with self._lock:
            self._entries.append(entry)
            self._on_rollback(lambda: self._entries.remove(entry))
            return entry

    def query(self, flt: Optional[LedgerFilter] = None) -> list[LedgerEntry]:
        with self._lock:
            entries = list(self._entries)
        if flt is not None:
            entries = [e for e in entries if flt.matches(e)]
        # stable: equal dates keep insertion order
        return sorted(entries, key=lambda e: e.date)

    # -- patients ---------------------------------------------------------

    def list_patients(self) -> list[Patient]:
        with self._lock:
            return [replace(p) for p in self._patients.values()]

    def get_patient(self, patient_id: str) -> Patient:
        with self._lock:
            return replace(self._require_patient(patient_id))

    def _require_patient(self, patient_id: str) -> Patient:
        patient = self._patients.get(patient_id)
        if patient is None:
            raise errors.NotFound('Patient not found')
        return patient

    def add_patient(self, patient: Patient) -> Patient:
        with self._lock:
            patient = replace(
                patient,
                id=next_patient_id(self._patients),
                admission_date=patient.admission_date or timezone.localdate(),
                updated_at=timezone.now(),
            )
            self._patients[patient.id] = patient
            self._on_rollback(lambda: self._patients.pop(patient.id, None))
            return replace(patient)

    def _update_patient(self, patient_id: str, changes: dict) -> Patient:
        with self._lock:
            current = self._require_patient(patient_id)
            updated = replace(current, updated_at=timezone.now(), **changes)
            self._patients[patient_id] = updated
            self._on_rollback(lambda: self._patients.__setitem__(patient_id, current))
            return replace(updated)

    def discharge_patient(self, patient_id: str, on: date) -> Patient:
        with self._lock:
            current = self._require_patient(patient_id)
            updated = replace(current, status=STATUS_DISCHARGED, discharge_date=on, updated_at=timezone.now())
            self._patients[patient_id] = updated
            self._on_rollback(lambda: self._patients.__setitem__(patient_id, current))
            return replace(updated)

    # -- accounts ---------------------------------------------------------

    def authenticate(self, username: str, password: str) -> Account:
        with self._lock:
            record = self._accounts.get(username)
            encoded = record.password if record else None
        if encoded is None:
            # same hashing cost as a real check
            make_password(password)
            raise errors.InvalidCredentials()
        if not check_password(password, encoded):
            raise errors.InvalidCredentials()
        now = timezone.now()
        with self._lock:
            account = record.account
            account.login_count += 1
            account.last_login = now
            account.login_history.append(now.isoformat())
            return replace(account, login_history=list(account.login_history))
