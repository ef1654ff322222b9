"""
Management command to seed an empty database with the initial catalog,
patients and staff accounts.
"""
from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from core.models import InventoryItem, Patient, User
from core.seed import DEFAULT_ACCOUNTS, FALLBACK_INVENTORY, FALLBACK_PATIENTS


class Command(BaseCommand):
    help = 'Seed inventory, patients and staff accounts (only tables that are empty)'

    def add_arguments(self, parser):
        parser.add_argument('--force', action='store_true', help='seed even when rows already exist (skips duplicates)')

    @transaction.atomic
    def handle(self, *args, **options):
        force = options['force']
        self.create_inventory(force)
        self.create_patients(force)
        self.create_accounts(force)
        self.stdout.write(self.style.SUCCESS('Seed data ready.'))

    def create_inventory(self, force):
        if InventoryItem.objects.exists() and not force:
            self.stdout.write('Inventory already populated, skipping')
            return
        created = 0
        for row in FALLBACK_INVENTORY:
            _, was_created = InventoryItem.objects.get_or_create(name=row['name'], defaults={
                'stock': row['stock'], 'price': row['price'], 'category': row['category'],
            })
            created += was_created
        self.stdout.write(f'Inventory items created: {created}')

    def create_patients(self, force):
        if Patient.objects.exists() and not force:
            self.stdout.write('Patients already populated, skipping')
            return
        created = 0
        today = timezone.localdate()
        for row in FALLBACK_PATIENTS:
            data = dict(row)
            pid = data.pop('id')
            _, was_created = Patient.objects.get_or_create(id=pid, defaults={**data, 'admission_date': today})
            created += was_created
        self.stdout.write(f'Patients created: {created}')

    def create_accounts(self, force):
        if User.objects.exists() and not force:
            self.stdout.write('Accounts already present, skipping')
            return
        for username, password, role, user_type, department in DEFAULT_ACCOUNTS:
            if User.objects.filter(username=username).exists():
                continue
            User.objects.create_user(
                username=username, password=password, role=role, user_type=user_type, department=department,
                is_staff=(role == 'admin'),
            )
            self.stdout.write(f'  account {username} ({role})')
