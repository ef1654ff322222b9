"""
Database models for the hospital backend.

These models back the ``DatabaseStore``: staff accounts, the inventory
catalog, patient records and the append-only billing ledger.  Field names
follow Django conventions; the JSON shapes the front-end expects are
produced by the value types in :mod:`core.domain`.
"""
from __future__ import annotations

from django.contrib.auth.models import AbstractUser
from django.db import models
from django.utils import timezone

from .errors import ImmutableEntryError


class User(AbstractUser):
    """Staff account with a UI role and login bookkeeping.

    ``role`` gates navigation in the front-end ('admin' sees the admin
    dashboard and reports, 'user' the user dashboard).  ``is_active`` and
    ``last_login`` come from :class:`AbstractUser`; ``is_active`` is stored
    but not consulted when logging in.
    """
    ROLE_CHOICES = [
        ('admin', 'Administrator'),
        ('user', 'User'),
    ]
    USER_TYPE_CHOICES = [
        ('doctor', 'Doctor'),
        ('nurse', 'Nurse'),
        ('receptionist', 'Receptionist'),
    ]
    role = models.CharField(max_length=10, choices=ROLE_CHOICES, default='user')
    user_type = models.CharField(max_length=20, choices=USER_TYPE_CHOICES, blank=True)
    department = models.CharField(max_length=100, blank=True)
    login_count = models.PositiveIntegerField(default=0)
    # ISO-8601 timestamps, oldest first
    login_history = models.JSONField(default=list, blank=True)

    def __str__(self) -> str:
        return f"{self.username} ({self.role})"


class InventoryItem(models.Model):
    """A catalog entry; the name is the business key."""
    CATEGORY_CHOICES = [
        ('medication', 'Medication'),
        ('equipment', 'Equipment'),
        ('disposable', 'Disposable'),
        ('emergency', 'Emergency'),
        ('surgical', 'Surgical'),
        ('other', 'Other'),
    ]
    name = models.CharField(max_length=255, unique=True)
    stock = models.PositiveIntegerField(default=0)
    price = models.DecimalField(max_digits=12, decimal_places=2)
    category = models.CharField(max_length=20, choices=CATEGORY_CHOICES, default='other', db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['id']
        constraints = [
            models.CheckConstraint(condition=models.Q(stock__gte=0), name='inventory_stock_non_negative'),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.stock})"


class Patient(models.Model):
    STATUS_CHOICES = [
        ('Admitted', 'Admitted'),
        ('Discharged', 'Discharged'),
    ]
    id = models.CharField(max_length=20, primary_key=True, help_text="e.g. 'P1001'")
    name = models.CharField(max_length=255)
    age = models.PositiveSmallIntegerField()
    gender = models.CharField(max_length=20, blank=True)
    contact = models.CharField(max_length=50, blank=True)
    address = models.CharField(max_length=255, blank=True)
    diagnosis = models.CharField(max_length=255, blank=True)
    admission_date = models.DateField(default=timezone.localdate)
    discharge_date = models.DateField(null=True, blank=True)
    # patient lists filter on status
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='Admitted', db_index=True)
    doctor = models.CharField(max_length=100, default='Unassigned')
    department = models.CharField(max_length=100, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['created_at', 'id']

    def __str__(self) -> str:
        return f"{self.id} {self.name} ({self.status})"


class LedgerEntry(models.Model):
    """A completed product sale or patient bill.

    Rows are written once.  ``save()`` on an existing row and ``delete()``
    raise :class:`~core.errors.ImmutableEntryError`; corrections are made
    by appending a new entry.
    """
    KIND_CHOICES = [
        ('sale', 'Sale'),
        ('bill', 'Bill'),
    ]
    id = models.CharField(max_length=20, primary_key=True)
    kind = models.CharField(max_length=10, choices=KIND_CHOICES, db_index=True)
    date = models.DateTimeField(default=timezone.now, db_index=True)
    product = models.CharField(max_length=255, blank=True, null=True, db_index=True)
    quantity = models.PositiveIntegerField(default=0)
    price = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    patient_id = models.CharField(max_length=20, blank=True, null=True, db_index=True)
    patient_name = models.CharField(max_length=255, blank=True, null=True)
    # [{"service", "category", "unitPrice", "quantity"}]; amounts as strings
    items = models.JSONField(default=list)
    total = models.DecimalField(max_digits=14, decimal_places=2)
    status = models.CharField(max_length=20, default='Paid')
    payment_method = models.CharField(max_length=20, default='Cash')

    class Meta:
        ordering = ['date', 'id']
        indexes = [
            models.Index(fields=['kind', 'date'], name='ledger_kind_date_idx'),
        ]

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ImmutableEntryError(f"Ledger entry {self.pk} is immutable; append a new entry instead.")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ImmutableEntryError(f"Ledger entry {self.pk} cannot be deleted.")

    def __str__(self) -> str:
        return f"{self.id} {self.kind} {self.total} @ {self.date:%F %T}"
