"""
Django admin registrations for the core models.

Ledger entries are shown read-only: the ledger is append-only and the
model refuses updates and deletes.
"""

from django.contrib import admin

from .models import InventoryItem, LedgerEntry, Patient, User


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ('username', 'role', 'user_type', 'department', 'is_active', 'login_count', 'last_login')
    list_filter = ('role', 'user_type', 'is_active')
    search_fields = ('username', 'department')
    exclude = ('password',)
    readonly_fields = ('login_count', 'last_login', 'login_history')


@admin.register(InventoryItem)
class InventoryItemAdmin(admin.ModelAdmin):
    list_display = ('name', 'category', 'stock', 'price', 'updated_at')
    list_filter = ('category',)
    search_fields = ('name',)


@admin.register(Patient)
class PatientAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'age', 'status', 'doctor', 'department', 'admission_date', 'discharge_date')
    list_filter = ('status', 'department')
    search_fields = ('id', 'name', 'diagnosis')


@admin.register(LedgerEntry)
class LedgerEntryAdmin(admin.ModelAdmin):
    list_display = ('id', 'kind', 'date', 'product', 'patient_id', 'total', 'payment_method')
    list_filter = ('kind', 'payment_method')
    search_fields = ('id', 'product', 'patient_id', 'patient_name')

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
