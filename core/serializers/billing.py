from rest_framework import serializers

from core.domain import PAYMENT_METHODS


class SaleSerializer(serializers.Serializer):
    productName = serializers.CharField()
    quantity = serializers.JSONField()


class LineItemSerializer(serializers.Serializer):
    service = serializers.CharField()
    quantity = serializers.JSONField(required=False, default=1)
    unitPrice = serializers.JSONField(required=False)
    category = serializers.CharField(required=False, allow_blank=True)


class BillSerializer(serializers.Serializer):
    patientId = serializers.CharField()
    items = LineItemSerializer(many=True, allow_empty=False)
    paymentMethod = serializers.ChoiceField(choices=list(PAYMENT_METHODS), required=False, default='Cash')


class HistoryQuerySerializer(serializers.Serializer):
    q = serializers.CharField(required=False, allow_blank=True, default='')
    period = serializers.ChoiceField(choices=['today', 'week', 'month', 'all'], required=False, default='all')
    kind = serializers.ChoiceField(choices=['sale', 'bill'], required=False)
    # explicit bounds win over ``period``
    dateFrom = serializers.DateField(required=False)
    dateTo = serializers.DateField(required=False)

    def to_internal_value(self, data):
        data = data.copy()
        for src, dst in (('from', 'dateFrom'), ('to', 'dateTo')):
            if src in data and dst not in data:
                data[dst] = data[src]
        return super().to_internal_value(data)
