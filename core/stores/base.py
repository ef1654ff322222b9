"""
The ``Store`` capability shared by the database and in-memory adapters.

Input validation lives here so both adapters reject the same requests with
the same errors; subclasses only implement the storage primitives (the
underscore methods) and ``atomic()``.
"""
from __future__ import annotations

import abc
import re
from dataclasses import replace
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, ContextManager, Iterable, Optional

from django.utils import timezone

from core import errors
from core.domain import (
    CATEGORIES, KIND_BILL, KIND_SALE, Account, InventoryItem, LedgerEntry,
    LedgerFilter, Patient, money, new_entry_id,
)

PATIENT_ID_RE = re.compile(r'^P(\d+)$')
FIRST_PATIENT_NUMBER = 1001

# fields a caller may change with update_patient()
PATIENT_FIELDS = ('name', 'age', 'gender', 'contact', 'address', 'diagnosis', 'doctor', 'department')

# PositiveIntegerField range; larger counts overflow the database column
MAX_QUANTITY = 2147483647


def check_quantity(value: Any) -> int:
    """Return ``value`` as a positive int or raise ``InvalidQuantity``."""
    if isinstance(value, bool):
        raise errors.InvalidQuantity()
    if isinstance(value, str):
        value = value.strip()
        if not value.isdigit():
            raise errors.InvalidQuantity()
    if isinstance(value, float) and not value.is_integer():
        raise errors.InvalidQuantity()
    try:
        quantity = int(value)
    except (TypeError, ValueError):
        raise errors.InvalidQuantity()
    if quantity <= 0 or quantity > MAX_QUANTITY:
        raise errors.InvalidQuantity()
    return quantity


def check_price(value: Any) -> Decimal:
    try:
        price = money(value)
    except (InvalidOperation, TypeError, ValueError):
        raise errors.ValidationError('Price must be a number')
    if not price.is_finite() or price <= 0:
        raise errors.ValidationError('Price must be greater than zero')
    return price


def check_stock(value: Any) -> int:
    if isinstance(value, bool):
        raise errors.ValidationError('Stock must be a non-negative integer')
    try:
        stock = int(str(value).strip())
    except (TypeError, ValueError):
        raise errors.ValidationError('Stock must be a non-negative integer')
    if stock < 0 or stock > MAX_QUANTITY:
        raise errors.ValidationError('Stock must be a non-negative integer')
    return stock


def next_patient_id(existing: Iterable[str]) -> str:
    numbers = [int(m.group(1)) for m in map(PATIENT_ID_RE.match, existing) if m]
    return f"P{max(numbers, default=FIRST_PATIENT_NUMBER - 1) + 1}"


class Store(abc.ABC):
    """Catalog, patients, ledger and accounts behind one interface."""

    #: reported by /api/health so clients can show an offline indicator
    mode: str = ''

    # -- catalog ----------------------------------------------------------

    @abc.abstractmethod
    def list_items(self) -> list[InventoryItem]:
        """All items in insertion order."""

    @abc.abstractmethod
    def get_item(self, name: str) -> InventoryItem:
        """Return the item or raise ``NotFound``."""

    def add_item(self, name: str, stock: Any, price: Any, category: Optional[str] = None) -> InventoryItem:
        name = (name or '').strip()
        if not name:
            raise errors.ValidationError('Item name is required')
        category = (category or 'other').strip().lower()
        if category not in CATEGORIES:
            raise errors.ValidationError(f"Unknown category '{category}'")
        item = InventoryItem(name=name, stock=check_stock(stock), price=check_price(price), category=category)
        return self._insert_item(item)

    def restock(self, name: str, quantity: Any) -> InventoryItem:
        quantity = check_quantity(quantity)
        if self.get_item(name).stock + quantity > MAX_QUANTITY:
            raise errors.InvalidQuantity()
        return self._restock(name, quantity)

    def decrement(self, name: str, quantity: Any) -> InventoryItem:
        """Take ``quantity`` units out of stock in one indivisible step.

        Raises ``NotFound``, ``InvalidQuantity`` or ``InsufficientStock``;
        on failure the stock is left unchanged.
        """
        return self._decrement(name, check_quantity(quantity))

    @abc.abstractmethod
    def _insert_item(self, item: InventoryItem) -> InventoryItem: ...

    @abc.abstractmethod
    def _restock(self, name: str, quantity: int) -> InventoryItem: ...

    @abc.abstractmethod
    def _decrement(self, name: str, quantity: int) -> InventoryItem: ...

    # -- ledger -----------------------------------------------------------

    def append(self, entry: LedgerEntry) -> LedgerEntry:
        """Store a new ledger entry, filling in ``id`` and ``date``."""
        if not entry.items:
            raise errors.ValidationError('A ledger entry needs at least one line item')
        if entry.kind == KIND_SALE and not entry.product:
            raise errors.ValidationError('A sale must reference a product')
        if entry.kind == KIND_BILL and not entry.patient_id:
            raise errors.ValidationError('A bill must reference a patient')
        if entry.kind not in (KIND_SALE, KIND_BILL):
            raise errors.ValidationError(f"Unknown ledger entry kind '{entry.kind}'")
        entry = replace(
            entry,
            id=entry.id or new_entry_id(entry.kind),
            date=entry.date or timezone.now(),
        )
        return self._insert_entry(entry)

    @abc.abstractmethod
    def _insert_entry(self, entry: LedgerEntry) -> LedgerEntry: ...

    @abc.abstractmethod
    def query(self, flt: Optional[LedgerFilter] = None) -> list[LedgerEntry]:
        """Matching entries, oldest first."""

    # -- patients ---------------------------------------------------------

    @abc.abstractmethod
    def list_patients(self) -> list[Patient]: ...

    @abc.abstractmethod
    def get_patient(self, patient_id: str) -> Patient:
        """Return the patient or raise ``NotFound``."""

    @abc.abstractmethod
    def add_patient(self, patient: Patient) -> Patient:
        """Store ``patient`` under the next free ``P`` id (``patient.id`` is ignored)."""

    def update_patient(self, patient_id: str, **changes: Any) -> Patient:
        unknown = set(changes) - set(PATIENT_FIELDS)
        if unknown:
            raise errors.ValidationError(f"Cannot update {', '.join(sorted(unknown))}")
        return self._update_patient(patient_id, changes)

    @abc.abstractmethod
    def _update_patient(self, patient_id: str, changes: dict) -> Patient: ...

    @abc.abstractmethod
    def discharge_patient(self, patient_id: str, on: date) -> Patient: ...

    # -- accounts ---------------------------------------------------------

    @abc.abstractmethod
    def authenticate(self, username: str, password: str) -> Account:
        """Verify the password and record the login.

        Raises ``InvalidCredentials`` without saying which field was wrong.
        """

    # -- transactions -----------------------------------------------------

    @abc.abstractmethod
    def atomic(self) -> ContextManager[None]:
        """Everything inside the block commits together or not at all."""

    @abc.abstractmethod
    def on_commit(self, func: Callable[[], None]) -> None:
        """Run ``func`` once the enclosing ``atomic()`` block commits (now if none)."""
