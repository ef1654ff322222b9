"""
Dashboard endpoints.

``/api/dashboard`` is the administrator overview (recent revenue, stock
valuation, best sellers, stock extrema, latest sales); ``/api/user-dashboard``
is the lighter staff view.  Both accept ``?threshold=`` to override the
low-stock threshold.
"""
from __future__ import annotations

from rest_framework.decorators import api_view
from rest_framework.response import Response

from core.serializers.inventory import InventoryQuerySerializer
from core.services import reports


def _threshold(request):
    q = InventoryQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    return q.validated_data.get('threshold')


@api_view(['GET'])
def admin_dashboard(request):
    return Response(reports.dashboard(request.store, _threshold(request)))


@api_view(['GET'])
def user_dashboard(request):
    return Response(reports.user_dashboard(request.store, _threshold(request)))
