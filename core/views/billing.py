"""
Patient billing endpoints.

Bills are append-only: there is no update or delete route.  A bill with a
discharge-class line item also discharges the patient.
"""
from __future__ import annotations

from datetime import datetime, time, timedelta

from django.utils import timezone
from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from core.domain import LedgerFilter
from core.serializers.billing import BillSerializer, HistoryQuerySerializer
from core.services.billing import generate_bill, list_services

PERIOD_DAYS = {'week': 7, 'month': 30}


def _start_of(day):
    return timezone.make_aware(datetime.combine(day, time.min))


def history_filter(vd) -> LedgerFilter:
    """Build the ledger filter for ``/api/billing/history`` query parameters."""
    date_from = date_to = None
    period = vd.get('period') or 'all'
    if period == 'today':
        date_from = _start_of(timezone.localdate())
    elif period in PERIOD_DAYS:
        date_from = timezone.now() - timedelta(days=PERIOD_DAYS[period])
    if vd.get('dateFrom'):
        date_from = _start_of(vd['dateFrom'])
    if vd.get('dateTo'):
        # inclusive of the whole ``to`` day
        date_to = _start_of(vd['dateTo'] + timedelta(days=1)) - timedelta(microseconds=1)
    return LedgerFilter(date_from=date_from, date_to=date_to, search=vd.get('q') or '', kind=vd.get('kind'))


@api_view(['GET'])
def services(request):
    return Response(list_services())


@api_view(['POST'])
def create_bill(request):
    s = BillSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    bill, patient = generate_bill(request.store, vd['patientId'], vd['items'], vd['paymentMethod'])
    return Response(
        {'message': 'Bill generated successfully', 'bill': bill.as_json(), 'patient': patient.as_json()},
        status=status.HTTP_201_CREATED,
    )


@api_view(['GET'])
def billing_history(request):
    q = HistoryQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    entries = request.store.query(history_filter(q.validated_data))
    return Response([e.as_json() for e in reversed(entries)])
