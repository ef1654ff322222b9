"""
Integration tests for the hospital backend API.

These tests exercise the HTTP surface end to end: inventory, sales,
billing with discharge, patients, dashboards and reports, against the
database store and against the in-memory store.
"""
from io import StringIO

from django.core.management import call_command
from django.test import override_settings
from rest_framework import status
from rest_framework.test import APIClient, APITestCase

from core.models import InventoryItem, LedgerEntry, Patient


@override_settings(HOSPITAL_STORE='database')
class HospitalAPITests(APITestCase):
    def setUp(self) -> None:
        call_command('populate_data', stdout=StringIO())

    def test_health_reports_mode(self):
        r = self.client.get('/api/health')
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json(), {'status': 'Server is healthy', 'mode': 'database'})
        r = self.client.get('/healthz')
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json(), {'ok': True, 'mode': 'database', 'db': True})

    def test_inventory_list_and_filters(self):
        r = self.client.get('/api/inventory')
        self.assertEqual(r.status_code, 200)
        self.assertEqual(len(r.json()), 13)
        self.assertEqual(r.json()[1], {'name': 'Syringes (10ml)', 'stock': 120, 'price': 5.0, 'category': 'disposable'})

        r = self.client.get('/api/inventory', {'category': 'emergency'})
        self.assertEqual([i['name'] for i in r.json()], ['Defibrillator', 'Ventilators'])
        r = self.client.get('/api/inventory', {'q': 'surgical'})
        self.assertEqual([i['name'] for i in r.json()], ['Surgical Bandages', 'Surgical Masks'])
        r = self.client.get('/api/inventory', {'category': 'snacks'})
        self.assertEqual(r.status_code, 400)

    def test_inventory_stats(self):
        r = self.client.get('/api/inventory/stats')
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json()['totalItems'], 13)
        self.assertEqual(r.json()['lowStockCount'], 1)
        self.assertEqual(r.json()['outOfStockCount'], 0)

    def test_add_item(self):
        r = self.client.post('/api/inventory/add', {'name': 'Thermometers', 'stock': 20, 'price': 8.5}, format='json')
        self.assertEqual(r.status_code, status.HTTP_201_CREATED)
        self.assertEqual(r.json()['message'], 'Item added to inventory')
        self.assertEqual(r.json()['item']['name'], 'Thermometers')
        self.assertTrue(InventoryItem.objects.filter(name='Thermometers', stock=20).exists())

    def test_add_item_missing_fields_and_duplicate(self):
        r = self.client.post('/api/inventory/add', {'name': 'Thermometers'}, format='json')
        self.assertEqual(r.status_code, 400)
        self.assertFalse(r.json()['success'])
        self.assertEqual(r.json()['error'], 'Name, stock and price are required')
        r = self.client.post('/api/inventory/add', [], format='json')
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.json()['error'], 'Name, stock and price are required')

        r = self.client.post('/api/inventory/add', {'name': 'Antibiotics', 'stock': 1, 'price': 1}, format='json')
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.json()['error'], 'Item already exists in inventory')
        self.assertEqual(InventoryItem.objects.get(name='Antibiotics').stock, 85)

    def test_restock(self):
        r = self.client.post('/api/inventory/restock', {'name': 'Defibrillator', 'quantity': 2}, format='json')
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json()['message'], 'Item restocked successfully')
        self.assertEqual(r.json()['item']['stock'], 5)

        r = self.client.post('/api/inventory/restock', {'name': 'Defibrillator', 'quantity': 0}, format='json')
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.json()['code'], 'invalid_quantity')
        r = self.client.post('/api/inventory/restock', {'name': 'Nothing', 'quantity': 2}, format='json')
        self.assertEqual(r.status_code, 404)
        r = self.client.post('/api/inventory/restock', {'name': 'Defibrillator', 'quantity': 10 ** 19}, format='json')
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.json()['code'], 'invalid_quantity')
        self.assertEqual(InventoryItem.objects.get(name='Defibrillator').stock, 5)

    def test_sale_flow(self):
        r = self.client.post('/api/sales', {'productName': 'Syringes (10ml)', 'quantity': 10}, format='json')
        self.assertEqual(r.status_code, 200)
        body = r.json()
        self.assertEqual(body['message'], 'Sale processed successfully')
        self.assertEqual(body['sale']['total'], 50.0)
        self.assertEqual(next(i for i in body['inventory'] if i['name'] == 'Syringes (10ml)')['stock'], 110)
        self.assertEqual(LedgerEntry.objects.count(), 1)

        r = self.client.post('/api/sales', {'productName': 'Syringes (10ml)', 'quantity': 200}, format='json')
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.json()['error'], 'Insufficient stock')
        r = self.client.post('/api/sales', {'productName': 'Nothing', 'quantity': 1}, format='json')
        self.assertEqual(r.status_code, 404)
        r = self.client.post('/api/sales', {'productName': 'Antibiotics', 'quantity': -1}, format='json')
        self.assertEqual(r.status_code, 400)
        self.assertEqual(LedgerEntry.objects.count(), 1)

    def test_register_and_discharge_through_bill(self):
        r = self.client.post('/api/patients', {
            'name': 'Ana <b>Lima</b>', 'age': 40, 'contact': '555-0100', 'diagnosis': 'Pneumonia',
        }, format='json')
        self.assertEqual(r.status_code, 201)
        patient = r.json()['patient']
        self.assertEqual(patient['id'], 'P1006')
        self.assertEqual(patient['name'], 'Ana Lima')
        self.assertEqual(patient['status'], 'Admitted')

        r = self.client.post('/api/billing', {
            'patientId': 'P1006',
            'items': [{'service': 'Room Charges - General (per day)', 'quantity': 3},
                      {'service': 'Discharge Processing'}],
            'paymentMethod': 'Credit Card',
        }, format='json')
        self.assertEqual(r.status_code, 201)
        bill = r.json()['bill']
        self.assertEqual(bill['total'], 700.0)
        self.assertEqual(bill['patientId'], 'P1006')
        self.assertEqual(r.json()['patient']['status'], 'Discharged')
        stored = Patient.objects.get(id='P1006')
        self.assertEqual(stored.status, 'Discharged')
        self.assertEqual(stored.discharge_date.isoformat(), r.json()['patient']['dischargeDate'])

    def test_bill_validation(self):
        r = self.client.post('/api/billing', {'patientId': 'P1001', 'items': []}, format='json')
        self.assertEqual(r.status_code, 400)
        r = self.client.post('/api/billing', {'patientId': 'P9999', 'items': [{'service': 'ECG'}]}, format='json')
        self.assertEqual(r.status_code, 404)
        r = self.client.post('/api/billing', {'patientId': 'P1001', 'items': [{'service': 'ECG'}],
                                              'paymentMethod': 'Barter'}, format='json')
        self.assertEqual(r.status_code, 400)
        self.assertEqual(LedgerEntry.objects.count(), 0)

    def test_patients_search_update_discharge(self):
        r = self.client.get('/api/patients', {'q': 'cardio'})
        self.assertEqual(r.json(), [])
        r = self.client.get('/api/patients', {'q': 'heart'})
        self.assertEqual([p['id'] for p in r.json()], ['P1005'])

        r = self.client.patch('/api/patients/P1005', {'doctor': 'Dr. Chen'}, format='json')
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json()['patient']['doctor'], 'Dr. Chen')

        r = self.client.post('/api/patients/P1005/discharge', {'dischargeDate': '2024-03-01'}, format='json')
        self.assertEqual(r.json()['patient']['dischargeDate'], '2024-03-01')
        r = self.client.get('/api/patients', {'status': 'discharged'})
        self.assertEqual([p['id'] for p in r.json()], ['P1005'])
        r = self.client.get('/api/patients/P9999')
        self.assertEqual(r.status_code, 404)

    def test_billing_history_and_services(self):
        self.client.post('/api/billing', {'patientId': 'P1002', 'items': [{'service': 'ECG'}]}, format='json')
        self.client.post('/api/sales', {'productName': 'Antibiotics', 'quantity': 1}, format='json')

        r = self.client.get('/api/billing/history', {'q': 'emma', 'period': 'today'})
        self.assertEqual(len(r.json()), 1)
        self.assertEqual(r.json()[0]['patientName'], 'Emma Johnson')
        r = self.client.get('/api/billing/history')
        self.assertEqual([e['kind'] for e in r.json()], ['sale', 'bill'])
        r = self.client.get('/api/billing/history', {'from': '2000-01-01', 'to': '2000-01-31'})
        self.assertEqual(r.json(), [])

        r = self.client.get('/api/services')
        names = [s['name'] for s in r.json()]
        self.assertIn('Discharge Processing', names)

    def test_dashboards_and_reports(self):
        self.client.post('/api/sales', {'productName': 'Medical Gloves', 'quantity': 3}, format='json')
        self.client.post('/api/billing', {'patientId': 'P1001', 'items': [{'service': 'Consultation'}]},
                         format='json')

        r = self.client.get('/api/dashboard')
        self.assertEqual(r.status_code, 200)
        body = r.json()
        for key in ('totalSales', 'inventoryValue', 'lowStockItems', 'bestSellers',
                    'leastInStock', 'mostInStock', 'recentSales'):
            self.assertIn(key, body)
        self.assertEqual(body['totalSales'], 80.0)
        self.assertEqual(body['bestSellers'], [{'name': 'Medical Gloves', 'soldQuantity': 3}])

        r = self.client.get('/api/user-dashboard', {'threshold': 10})
        self.assertEqual(r.json()['bestSeller'], {'name': 'Medical Gloves', 'quantity': 3})
        self.assertEqual(len(r.json()['lowStockItems']), 3)

        r = self.client.get('/api/reports/sales')
        self.assertEqual(r.json()['totalRevenue'], 80.0)
        self.assertEqual({row['product'] for row in r.json()['salesData']}, {'Medical Gloves', 'Consultation'})

        r = self.client.get('/api/reports/summary')
        self.assertEqual(r.json()['billCount'], 1)
        self.assertEqual(r.json()['saleCount'], 1)


@override_settings(HOSPITAL_STORE='memory')
class InMemoryModeTests(APITestCase):
    """The fallback store serves the same API from seeded process-local data."""

    def test_health_reports_in_memory_mode(self):
        r = self.client.get('/api/health')
        self.assertEqual(r.json()['mode'], 'in-memory')
        r = self.client.get('/healthz')
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json()['mode'], 'in-memory')

    def test_sale_and_login_without_database_rows(self):
        client = APIClient()
        r = client.post('/api/sales', {'productName': 'Syringes (10ml)', 'quantity': 10}, format='json')
        self.assertEqual(r.status_code, 200)
        r = client.get('/api/inventory')
        self.assertEqual(next(i for i in r.json() if i['name'] == 'Syringes (10ml)')['stock'], 110)
        self.assertEqual(LedgerEntry.objects.count(), 0)

        r = client.post('/api/auth/login', {'username': 'doctor', 'password': 'doctor123'}, format='json')
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json()['user']['loginCount'], 1)

    def test_discharge_bill(self):
        client = APIClient()
        r = client.post('/api/billing', {'patientId': 'P1004', 'items': [{'service': 'Final Review', 'unitPrice': 30}]},
                        format='json')
        self.assertEqual(r.status_code, 201)
        r = client.get('/api/patients/P1004')
        self.assertEqual(r.json()['status'], 'Discharged')
