"""
Initial data used to seed an empty database and the in-memory store.
"""
from __future__ import annotations

FALLBACK_INVENTORY = [
    {'name': 'Surgical Bandages', 'stock': 75, 'price': 15, 'category': 'surgical'},
    {'name': 'Syringes (10ml)', 'stock': 120, 'price': 5, 'category': 'disposable'},
    {'name': 'IV Fluids (1L)', 'stock': 40, 'price': 25, 'category': 'medication'},
    {'name': 'Medical Gloves', 'stock': 300, 'price': 10, 'category': 'disposable'},
    {'name': 'Surgical Masks', 'stock': 250, 'price': 12, 'category': 'surgical'},
    {'name': 'Sterile Gauze', 'stock': 180, 'price': 8, 'category': 'surgical'},
    {'name': 'Defibrillator', 'stock': 3, 'price': 2500, 'category': 'emergency'},
    {'name': 'Patient Monitors', 'stock': 8, 'price': 1200, 'category': 'equipment'},
    {'name': 'Ventilators', 'stock': 5, 'price': 5000, 'category': 'emergency'},
    {'name': 'Wheelchairs', 'stock': 12, 'price': 350, 'category': 'equipment'},
    {'name': 'Ibuprofen (200mg)', 'stock': 120, 'price': 15, 'category': 'medication'},
    {'name': 'Antibiotics', 'stock': 85, 'price': 45, 'category': 'medication'},
    {'name': 'Blood Pressure Cuffs', 'stock': 25, 'price': 70, 'category': 'equipment'},
]

FALLBACK_PATIENTS = [
    {'id': 'P1001', 'name': 'John Smith', 'age': 45, 'gender': 'male', 'diagnosis': 'Hypertension',
     'contact': '555-123-4567', 'address': '123 Main St', 'doctor': 'Dr. Smith', 'department': 'Cardiology'},
    {'id': 'P1002', 'name': 'Emma Johnson', 'age': 35, 'gender': 'female', 'diagnosis': 'Diabetes Type 2',
     'contact': '555-234-5678', 'address': '456 Oak Ave', 'doctor': 'Dr. Garcia', 'department': 'Endocrinology'},
    {'id': 'P1003', 'name': 'Robert Davis', 'age': 60, 'gender': 'male', 'diagnosis': 'Arthritis',
     'contact': '555-345-6789', 'address': '789 Pine Rd', 'doctor': 'Dr. Lopez', 'department': 'Orthopedics'},
    {'id': 'P1004', 'name': 'Sarah Wilson', 'age': 28, 'gender': 'female', 'diagnosis': 'Bronchitis',
     'contact': '555-456-7890', 'address': '101 Cedar Ln', 'doctor': 'Dr. Patel', 'department': 'Pulmonology'},
    {'id': 'P1005', 'name': 'Michael Brown', 'age': 52, 'gender': 'male', 'diagnosis': 'Heart Disease',
     'contact': '555-567-8901', 'address': '202 Elm St', 'doctor': 'Dr. Wilson', 'department': 'Cardiology'},
]

# (username, default password, role, user_type, department)
DEFAULT_ACCOUNTS = [
    ('admin', 'admin123', 'admin', 'doctor', 'administration'),
    ('doctor', 'doctor123', 'user', 'doctor', 'cardiology'),
    ('nurse', 'nurse123', 'user', 'nurse', 'general'),
    ('receptionist', 'reception123', 'user', 'receptionist', 'frontdesk'),
]

MEDICAL_SERVICES = [
    {'name': 'Consultation', 'price': 50, 'category': 'General'},
    {'name': 'Blood Test', 'price': 75, 'category': 'Laboratory'},
    {'name': 'X-Ray Scan', 'price': 120, 'category': 'Radiology'},
    {'name': 'MRI Scan', 'price': 450, 'category': 'Radiology'},
    {'name': 'ECG', 'price': 90, 'category': 'Cardiology'},
    {'name': 'Surgery - Minor', 'price': 1200, 'category': 'Surgical'},
    {'name': 'Surgery - Major', 'price': 5000, 'category': 'Surgical'},
    {'name': 'Room Charges - General (per day)', 'price': 200, 'category': 'Accommodation'},
    {'name': 'Room Charges - Private (per day)', 'price': 500, 'category': 'Accommodation'},
    {'name': 'Room Charges - ICU (per day)', 'price': 1000, 'category': 'Accommodation'},
    {'name': 'Medication', 'price': 45, 'category': 'Pharmacy'},
    {'name': 'Discharge Processing', 'price': 100, 'category': 'Administration'},
]
