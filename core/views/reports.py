from rest_framework.decorators import api_view
from rest_framework.response import Response

from core.serializers.billing import HistoryQuerySerializer
from core.services import reports

from .billing import history_filter


@api_view(['GET'])
def sales_report(request):
    """Revenue per product/service; accepts the same period/from/to parameters as billing history."""
    q = HistoryQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    flt = history_filter(q.validated_data)
    return Response(reports.sales_report(request.store, flt.date_from, flt.date_to))


@api_view(['GET'])
def revenue_summary(request):
    return Response(reports.revenue_summary(request.store))
