from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from core.serializers.inventory import InventoryAddSerializer, InventoryQuerySerializer, RestockSerializer
from core.services import inventory, reports


@api_view(['GET'])
def list_inventory(request):
    q = InventoryQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    items = inventory.list_items(request.store, q.validated_data.get('category'), q.validated_data.get('q'))
    return Response([i.as_json() for i in items])


@api_view(['GET'])
def inventory_stats(request):
    q = InventoryQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    return Response(reports.inventory_stats(request.store.list_items(), q.validated_data.get('threshold')))


@api_view(['POST'])
def add_item(request):
    s = InventoryAddSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    item = inventory.add_item(request.store, vd['name'], vd['stock'], vd['price'], vd.get('category'))
    return Response({'message': 'Item added to inventory', 'item': item.as_json()}, status=status.HTTP_201_CREATED)


@api_view(['POST'])
def restock_item(request):
    s = RestockSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    item = inventory.restock(request.store, s.validated_data['name'], s.validated_data['quantity'])
    return Response({'message': 'Item restocked successfully', 'item': item.as_json()})
