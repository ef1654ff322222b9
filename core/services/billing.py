"""
Sale and billing workflow.

``process_sale`` and ``generate_bill`` each run as one ``store.atomic()``
unit.  A sale never leaves stock decremented without its ledger entry, and
a discharge bill changes the patient only after the bill has been appended.
"""
from __future__ import annotations

import logging
from decimal import InvalidOperation
from typing import Iterable, Optional

from django.conf import settings
from django.utils import timezone

from core import errors
from core.domain import KIND_BILL, KIND_SALE, PAYMENT_METHODS, LedgerEntry, LineItem, money
from core.realtime.events import INVENTORY_CHANGED, LEDGER_CHANGED, PATIENTS_CHANGED, broadcast
from core.seed import MEDICAL_SERVICES
from core.stores.base import check_quantity

logger = logging.getLogger(__name__)


def list_services() -> list[dict]:
    return [{'name': s['name'], 'price': money(s['price']), 'category': s['category']} for s in MEDICAL_SERVICES]


def find_service(name: str) -> Optional[dict]:
    needle = (name or '').strip().lower()
    for service in MEDICAL_SERVICES:
        if service['name'].lower() == needle:
            return service
    return None


def is_discharge_item(service_name: str, keywords: Optional[Iterable[str]] = None) -> bool:
    """True when ``service_name`` names a discharge-class service."""
    if keywords is None:
        keywords = settings.HOSPITAL_DISCHARGE_KEYWORDS
    name = (service_name or '').lower()
    return any(k.lower() in name for k in keywords if k)


def process_sale(store, product_name: str, quantity):
    """Sell ``quantity`` units of ``product_name``.

    Returns ``(sale, inventory)`` where ``inventory`` is the catalog snapshot
    taken after the sale committed.
    """
    quantity = check_quantity(quantity)
    with store.atomic():
        item = store.get_item(product_name)
        if item.stock < quantity:
            raise errors.InsufficientStock()
        item = store.decrement(item.name, quantity)
        total = item.price * quantity
        sale = store.append(LedgerEntry(
            kind=KIND_SALE,
            product=item.name,
            quantity=quantity,
            price=item.price,
            total=total,
            items=(LineItem(service=item.name, unit_price=item.price, quantity=quantity, category=item.category),),
        ))
    logger.info("Sale %s: %s x %s = %s (stock now %s)", sale.id, item.name, quantity, total, item.stock)
    broadcast(store, INVENTORY_CHANGED, names=[item.name])
    broadcast(store, LEDGER_CHANGED, ids=[sale.id])
    return sale, store.list_items()


def _line_item(raw: dict) -> LineItem:
    name = (raw.get('service') or raw.get('name') or '').strip()
    if not name:
        raise errors.ValidationError('Every line item needs a service name')
    quantity = check_quantity(raw.get('quantity', 1))
    service = find_service(name)
    unit_price = raw.get('unitPrice', raw.get('price'))
    if unit_price in (None, ''):
        if service is None:
            raise errors.ValidationError(f"Unknown service '{name}'")
        unit_price = service['price']
    try:
        unit_price = money(unit_price)
    except (InvalidOperation, TypeError, ValueError):
        raise errors.ValidationError(f"Invalid price for '{name}'")
    if not unit_price.is_finite() or unit_price < 0:
        raise errors.ValidationError(f"Invalid price for '{name}'")
    category = raw.get('category') or (service['category'] if service else 'Other')
    return LineItem(service=service['name'] if service else name, unit_price=unit_price,
                    quantity=quantity, category=category)


def generate_bill(store, patient_id: str, items: list, payment_method: str = 'Cash'):
    """Bill ``patient_id`` for ``items`` and discharge them if any item is discharge-class.

    Returns ``(bill, patient)``; ``patient`` reflects the discharge when one
    happened.
    """
    if not items:
        raise errors.ValidationError('A bill needs at least one line item')
    if payment_method not in PAYMENT_METHODS:
        raise errors.ValidationError(f"Unknown payment method '{payment_method}'")
    lines = tuple(_line_item(raw) for raw in items)
    total = sum((line.line_total for line in lines), money(0))
    discharge = any(is_discharge_item(line.service) for line in lines)

    with store.atomic():
        patient = store.get_patient(patient_id)
        bill = store.append(LedgerEntry(
            kind=KIND_BILL,
            patient_id=patient.id,
            patient_name=patient.name,
            items=lines,
            total=total,
            payment_method=payment_method,
        ))
        # ledger first: a bill may exist for a still-admitted patient, never the reverse
        if discharge:
            patient = store.discharge_patient(patient.id, timezone.localdate(bill.date))

    logger.info("Bill %s for %s: %s line(s), total %s", bill.id, patient.id, len(lines), total)
    broadcast(store, LEDGER_CHANGED, ids=[bill.id])
    if discharge:
        logger.info("Patient %s discharged by bill %s", patient.id, bill.id)
        broadcast(store, PATIENTS_CHANGED, ids=[patient.id])
    return bill, patient
