"""
Store adapter backed by the Django ORM.

Stock changes are single conditional ``UPDATE`` statements so concurrent
sales can never drive stock below zero, and login bookkeeping runs on a
row locked with ``select_for_update``.
"""
from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import Optional

from django.contrib.auth import get_user_model
from django.db import IntegrityError, connections, transaction
from django.db.models import F, Q
from django.utils import timezone

from core import errors
from core import models
from core.domain import (
    STATUS_DISCHARGED, Account, InventoryItem, LedgerEntry, LedgerFilter, LineItem, Patient,
)

from .base import PATIENT_FIELDS, Store, next_patient_id

logger = logging.getLogger(__name__)

User = get_user_model()


def _item(m: models.InventoryItem) -> InventoryItem:
    return InventoryItem(name=m.name, stock=m.stock, price=Decimal(m.price), category=m.category)


def _patient(m: models.Patient) -> Patient:
    return Patient(
        id=m.id, name=m.name, age=m.age, gender=m.gender, contact=m.contact, address=m.address,
        diagnosis=m.diagnosis, admission_date=m.admission_date, discharge_date=m.discharge_date,
        status=m.status, doctor=m.doctor, department=m.department, updated_at=m.updated_at,
    )


def _entry(m: models.LedgerEntry) -> LedgerEntry:
    return LedgerEntry(
        id=m.id, kind=m.kind, date=m.date, total=Decimal(m.total),
        items=tuple(LineItem.from_json(i) for i in m.items),
        product=m.product, quantity=m.quantity,
        price=Decimal(m.price) if m.price is not None else None,
        patient_id=m.patient_id, patient_name=m.patient_name,
        status=m.status, payment_method=m.payment_method,
    )


def _account(u) -> Account:
    return Account(
        username=u.username, role=u.role, user_type=u.user_type, department=u.department,
        is_active=u.is_active, login_count=u.login_count, last_login=u.last_login,
        login_history=list(u.login_history or []),
    )


class DatabaseStore(Store):
    mode = 'database'

    @staticmethod
    def probe(alias: str = 'default') -> None:
        """Raise ``DatabaseError`` unless the database is reachable and migrated."""
        connections[alias].ensure_connection()
        models.InventoryItem.objects.using(alias).exists()

    def atomic(self):
        return transaction.atomic()

    def on_commit(self, func) -> None:
        transaction.on_commit(func)

    # -- catalog ----------------------------------------------------------

    def list_items(self) -> list[InventoryItem]:
        return [_item(m) for m in models.InventoryItem.objects.all()]

    def get_item(self, name: str) -> InventoryItem:
        m = models.InventoryItem.objects.filter(name=name).first()
        if m is None:
            raise errors.NotFound('Item not found in inventory')
        return _item(m)

    def _insert_item(self, item: InventoryItem) -> InventoryItem:
        if models.InventoryItem.objects.filter(name=item.name).exists():
            raise errors.DuplicateItem()
        try:
            with transaction.atomic():
                m = models.InventoryItem.objects.create(
                    name=item.name, stock=item.stock, price=item.price, category=item.category,
                )
        except IntegrityError:
            # lost a race against another add of the same name
            raise errors.DuplicateItem()
        return _item(m)

    def _restock(self, name: str, quantity: int) -> InventoryItem:
        updated = models.InventoryItem.objects.filter(name=name).update(
            stock=F('stock') + quantity, updated_at=timezone.now(),
        )
        if not updated:
            raise errors.NotFound('Item not found in inventory')
        return self.get_item(name)

    def _decrement(self, name: str, quantity: int) -> InventoryItem:
        updated = models.InventoryItem.objects.filter(name=name, stock__gte=quantity).update(
            stock=F('stock') - quantity, updated_at=timezone.now(),
        )
        if not updated:
            if models.InventoryItem.objects.filter(name=name).exists():
                raise errors.InsufficientStock()
            raise errors.NotFound('Item not found in inventory')
        return self.get_item(name)

    # -- ledger -----------------------------------------------------------

    def _insert_entry(self, entry: LedgerEntry) -> LedgerEntry:
        models.LedgerEntry.objects.create(
            id=entry.id,
            kind=entry.kind,
            date=entry.date,
            product=entry.product,
            quantity=entry.quantity,
            price=entry.price,
            patient_id=entry.patient_id,
            patient_name=entry.patient_name,
            items=[
                {
                    'service': i.service,
                    'category': i.category,
                    'unitPrice': str(i.unit_price),
                    'quantity': i.quantity,
                }
                for i in entry.items
            ],
            total=entry.total,
            status=entry.status,
            payment_method=entry.payment_method,
        )
        return entry

    def query(self, flt: Optional[LedgerFilter] = None) -> list[LedgerEntry]:
        qs = models.LedgerEntry.objects.all()
        if flt is not None:
            if flt.kind:
                qs = qs.filter(kind=flt.kind)
            if flt.date_from:
                qs = qs.filter(date__gte=flt.date_from)
            if flt.date_to:
                qs = qs.filter(date__lte=flt.date_to)
            if flt.search:
                qs = qs.filter(
                    Q(id__icontains=flt.search)
                    | Q(patient_id__icontains=flt.search)
                    | Q(patient_name__icontains=flt.search)
                    | Q(product__icontains=flt.search)
                )
        return [_entry(m) for m in qs.order_by('date', 'id')]

    # -- patients ---------------------------------------------------------

    def list_patients(self) -> list[Patient]:
        return [_patient(m) for m in models.Patient.objects.all()]

    def get_patient(self, patient_id: str) -> Patient:
        m = models.Patient.objects.filter(id=patient_id).first()
        if m is None:
            raise errors.NotFound('Patient not found')
        return _patient(m)

    def add_patient(self, patient: Patient) -> Patient:
        fields = {f: getattr(patient, f) for f in PATIENT_FIELDS}
        for _ in range(3):
            new_id = next_patient_id(models.Patient.objects.values_list('id', flat=True))
            try:
                with transaction.atomic():
                    m = models.Patient.objects.create(
                        id=new_id,
                        admission_date=patient.admission_date or timezone.localdate(),
                        status=patient.status,
                        **fields,
                    )
            except IntegrityError:
                logger.info("Patient id %s taken concurrently, retrying", new_id)
                continue
            return _patient(m)
        raise RuntimeError('Could not allocate a patient id')

    def _update_patient(self, patient_id: str, changes: dict) -> Patient:
        m = models.Patient.objects.filter(id=patient_id).first()
        if m is None:
            raise errors.NotFound('Patient not found')
        for field, value in changes.items():
            setattr(m, field, value)
        m.save()
        return _patient(m)

    def discharge_patient(self, patient_id: str, on: date) -> Patient:
        updated = models.Patient.objects.filter(id=patient_id).update(
            status=STATUS_DISCHARGED, discharge_date=on, updated_at=timezone.now(),
        )
        if not updated:
            raise errors.NotFound('Patient not found')
        return self.get_patient(patient_id)

    # -- accounts ---------------------------------------------------------

    def authenticate(self, username: str, password: str) -> Account:
        with transaction.atomic():
            user = User.objects.select_for_update().filter(username=username).first()
            if user is None:
                # same hashing cost as a real check
                User().set_password(password)
                raise errors.InvalidCredentials()
            if not user.check_password(password):
                raise errors.InvalidCredentials()
            now = timezone.now()
            user.login_count += 1
            user.last_login = now
            user.login_history = [*(user.login_history or []), now.isoformat()]
            user.save(update_fields=['login_count', 'last_login', 'login_history'])
            return _account(user)
