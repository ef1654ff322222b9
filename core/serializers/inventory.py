from collections.abc import Mapping

from rest_framework import serializers
from rest_framework.settings import api_settings

from core.domain import CATEGORIES

ADD_REQUIRED_MESSAGE = 'Name, stock and price are required'


class InventoryAddSerializer(serializers.Serializer):
    """Presence check only; value rules live in the store so both backends agree."""
    name = serializers.CharField()
    stock = serializers.JSONField()
    price = serializers.JSONField()
    category = serializers.CharField(required=False, allow_blank=True, default='')

    def to_internal_value(self, data):
        if not isinstance(data, Mapping) or any(data.get(f) in (None, '') for f in ('name', 'stock', 'price')):
            raise serializers.ValidationError({api_settings.NON_FIELD_ERRORS_KEY: [ADD_REQUIRED_MESSAGE]})
        return super().to_internal_value(data)


class RestockSerializer(serializers.Serializer):
    name = serializers.CharField()
    quantity = serializers.JSONField()


class InventoryQuerySerializer(serializers.Serializer):
    category = serializers.ChoiceField(choices=list(CATEGORIES), required=False, allow_blank=True)
    q = serializers.CharField(required=False, allow_blank=True, default='')
    threshold = serializers.IntegerField(required=False, min_value=1)
