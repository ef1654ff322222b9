import logging

import bleach
from django.utils import timezone

from core import errors
from core.domain import STATUS_ADMITTED, STATUS_DISCHARGED, Patient
from core.realtime.events import PATIENTS_CHANGED, broadcast

logger = logging.getLogger(__name__)

STATUS_FILTERS = {
    'all': None,
    'admitted': STATUS_ADMITTED,
    'discharged': STATUS_DISCHARGED,
}


def clean_text(value) -> str:
    return bleach.clean(str(value or '').strip(), tags=[], strip=True)


def register_patient(store, *, name, age, contact, diagnosis, gender='', address='',
                     department='', doctor=''):
    """Admit a new patient under the next free ``P`` id."""
    patient = store.add_patient(Patient(
        id='',
        name=clean_text(name),
        age=age,
        gender=clean_text(gender),
        contact=clean_text(contact),
        address=clean_text(address),
        diagnosis=clean_text(diagnosis),
        department=clean_text(department),
        doctor=clean_text(doctor) or 'Unassigned',
        admission_date=timezone.localdate(),
        status=STATUS_ADMITTED,
    ))
    logger.info("Registered patient %s", patient.id)
    broadcast(store, PATIENTS_CHANGED, ids=[patient.id])
    return patient


def search_patients(store, q: str = '', status: str = 'all'):
    status = (status or 'all').lower()
    if status not in STATUS_FILTERS:
        raise errors.ValidationError(f"Unknown status filter '{status}'")
    wanted = STATUS_FILTERS[status]
    needle = (q or '').strip().lower()
    result = []
    for p in store.list_patients():
        if wanted and p.status != wanted:
            continue
        if needle and not any(needle in (v or '').lower() for v in (p.name, p.id, p.diagnosis)):
            continue
        result.append(p)
    return result


def update_patient(store, patient_id: str, changes: dict):
    cleaned = {k: (v if k == 'age' else clean_text(v)) for k, v in changes.items()}
    patient = store.update_patient(patient_id, **cleaned)
    logger.info("Updated patient %s (%s)", patient_id, ', '.join(sorted(cleaned)))
    broadcast(store, PATIENTS_CHANGED, ids=[patient.id])
    return patient


def discharge_patient(store, patient_id: str, on=None):
    patient = store.discharge_patient(patient_id, on or timezone.localdate())
    logger.info("Patient %s discharged", patient.id)
    broadcast(store, PATIENTS_CHANGED, ids=[patient.id])
    return patient
