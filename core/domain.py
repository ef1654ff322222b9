"""
Plain value types shared by both store adapters.

The database and in-memory stores hand these dataclasses to the services
and views, so nothing above the store layer depends on which backend was
selected at start-up.
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional

STATUS_ADMITTED = 'Admitted'
STATUS_DISCHARGED = 'Discharged'

KIND_SALE = 'sale'
KIND_BILL = 'bill'

CATEGORIES = ('medication', 'equipment', 'disposable', 'emergency', 'surgical', 'other')
PAYMENT_METHODS = ('Cash', 'Credit Card', 'Debit Card', 'Insurance')


def money(value: Any) -> Decimal:
    """Coerce ints/floats/strings to a two-place Decimal."""
    return Decimal(str(value)).quantize(Decimal('0.01'))


def new_entry_id(kind: str) -> str:
    prefix = 'S' if kind == KIND_SALE else 'B'
    return f"{prefix}{uuid.uuid4().hex[:10].upper()}"


@dataclass
class InventoryItem:
    name: str
    stock: int
    price: Decimal
    category: str = 'other'

    @property
    def value(self) -> Decimal:
        return self.price * self.stock

    def as_json(self) -> dict:
        return {
            'name': self.name,
            'stock': self.stock,
            'price': self.price,
            'category': self.category,
        }


@dataclass
class Patient:
    id: str
    name: str
    age: int
    gender: str = ''
    contact: str = ''
    address: str = ''
    diagnosis: str = ''
    admission_date: Optional[date] = None
    discharge_date: Optional[date] = None
    status: str = STATUS_ADMITTED
    doctor: str = 'Unassigned'
    department: str = ''
    updated_at: Optional[datetime] = None

    def as_json(self) -> dict:
        return {
            'id': self.id,
            'name': self.name,
            'age': self.age,
            'gender': self.gender,
            'contact': self.contact,
            'address': self.address,
            'diagnosis': self.diagnosis,
            'admissionDate': self.admission_date.isoformat() if self.admission_date else None,
            'dischargeDate': self.discharge_date.isoformat() if self.discharge_date else None,
            'status': self.status,
            'doctor': self.doctor,
            'department': self.department,
            'updatedAt': self.updated_at.isoformat() if self.updated_at else None,
        }


@dataclass(frozen=True)
class LineItem:
    service: str
    unit_price: Decimal
    quantity: int
    category: str = ''

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity

    def as_json(self) -> dict:
        return {
            'service': self.service,
            'category': self.category,
            'unitPrice': self.unit_price,
            'quantity': self.quantity,
            'lineTotal': self.line_total,
        }

    @classmethod
    def from_json(cls, data: dict) -> 'LineItem':
        return cls(
            service=data['service'],
            unit_price=money(data['unitPrice']),
            quantity=int(data['quantity']),
            category=data.get('category') or '',
        )


@dataclass(frozen=True)
class LedgerEntry:
    """A completed sale (``kind='sale'``) or patient bill (``kind='bill'``).

    Entries are created once and never modified; ``id`` and ``date`` are
    filled in by :meth:`Store.append` when missing.
    """
    kind: str
    items: tuple[LineItem, ...]
    total: Decimal
    id: Optional[str] = None
    date: Optional[datetime] = None
    product: Optional[str] = None
    quantity: int = 0
    price: Optional[Decimal] = None
    patient_id: Optional[str] = None
    patient_name: Optional[str] = None
    status: str = 'Paid'
    payment_method: str = 'Cash'

    def as_json(self) -> dict:
        data = {
            'id': self.id,
            'kind': self.kind,
            'date': self.date.isoformat() if self.date else None,
            'items': [i.as_json() for i in self.items],
            'total': self.total,
            'status': self.status,
            'paymentMethod': self.payment_method,
        }
        if self.kind == KIND_SALE:
            data.update({'product': self.product, 'quantity': self.quantity, 'price': self.price})
        else:
            data.update({'patientId': self.patient_id, 'patientName': self.patient_name})
        return data


@dataclass(frozen=True)
class LedgerFilter:
    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None
    search: str = ''
    kind: Optional[str] = None

    def matches(self, entry: LedgerEntry) -> bool:
        if self.kind and entry.kind != self.kind:
            return False
        if self.date_from and entry.date < self.date_from:
            return False
        if self.date_to and entry.date > self.date_to:
            return False
        if self.search:
            needle = self.search.lower()
            haystack = (entry.id, entry.patient_id, entry.patient_name, entry.product)
            if not any(needle in (h or '').lower() for h in haystack):
                return False
        return True


@dataclass
class Account:
    username: str
    role: str
    user_type: str = ''
    department: str = ''
    is_active: bool = True
    login_count: int = 0
    last_login: Optional[datetime] = None
    login_history: list[str] = field(default_factory=list)

    def as_json(self) -> dict:
        # never carries the password hash
        return {
            'username': self.username,
            'role': self.role,
            'userType': self.user_type,
            'department': self.department,
            'isActive': self.is_active,
            'loginCount': self.login_count,
            'lastLogin': self.last_login.isoformat() if self.last_login else None,
            'loginHistory': list(self.login_history),
        }
