"""
Patient registration and records.

Patients are admitted on registration and move to ``Discharged`` either
explicitly or through a discharge-class bill.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from core.serializers.patient import (
    DischargeSerializer, PatientCreateSerializer, PatientListQuerySerializer, PatientUpdateSerializer,
)
from core.services import patients as svc


@api_view(['GET', 'POST'])
def patients(request):
    if request.method == 'POST':
        s = PatientCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        patient = svc.register_patient(request.store, **s.validated_data)
        return Response({'message': 'Patient registered successfully', 'patient': patient.as_json()},
                        status=status.HTTP_201_CREATED)
    q = PatientListQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    found = svc.search_patients(request.store, q.validated_data['q'], q.validated_data['status'])
    return Response([p.as_json() for p in found])


@api_view(['GET', 'PUT', 'PATCH'])
def patient_detail(request, patient_id):
    if request.method == 'GET':
        return Response(request.store.get_patient(patient_id).as_json())
    s = PatientUpdateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    patient = svc.update_patient(request.store, patient_id, s.validated_data)
    return Response({'message': 'Patient updated successfully', 'patient': patient.as_json()})


@api_view(['POST'])
def discharge(request, patient_id):
    s = DischargeSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    patient = svc.discharge_patient(request.store, patient_id, s.validated_data.get('dischargeDate'))
    return Response({'message': 'Patient discharged', 'patient': patient.as_json()})
