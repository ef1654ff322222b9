from rest_framework.decorators import api_view
from rest_framework.response import Response

from core.serializers.billing import SaleSerializer
from core.services.billing import process_sale


@api_view(['POST'])
def create_sale(request):
    """Sell from stock; the response carries the sale and the catalog after it."""
    s = SaleSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    sale, items = process_sale(request.store, s.validated_data['productName'], s.validated_data['quantity'])
    return Response({
        'message': 'Sale processed successfully',
        'inventory': [i.as_json() for i in items],
        'sale': sale.as_json(),
    })
