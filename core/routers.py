"""
URL mappings for the hospital backend API.

Paths carry no trailing slash, matching what the front-end requests.
"""
from django.urls import include, path

from .views import billing, dashboard, health, inventory, patients, reports, sales
from .views.auth import login_view

urlpatterns = [
    path('metrics', include('django_prometheus.urls')),
    path('healthz', health.healthz),
    path('api/health', health.api_health),
    # Authentication
    path('api/auth/login', login_view),
    # Dashboards
    path('api/dashboard', dashboard.admin_dashboard),
    path('api/user-dashboard', dashboard.user_dashboard),
    # Inventory
    path('api/inventory', inventory.list_inventory),
    path('api/inventory/stats', inventory.inventory_stats),
    path('api/inventory/add', inventory.add_item),
    path('api/inventory/restock', inventory.restock_item),
    # Sales and billing
    path('api/sales', sales.create_sale),
    path('api/services', billing.services),
    path('api/billing', billing.create_bill),
    path('api/billing/history', billing.billing_history),
    # Reports
    path('api/reports/sales', reports.sales_report),
    path('api/reports/summary', reports.revenue_summary),
    # Patients
    path('api/patients', patients.patients),
    path('api/patients/<str:patient_id>', patients.patient_detail),
    path('api/patients/<str:patient_id>/discharge', patients.discharge),
]
