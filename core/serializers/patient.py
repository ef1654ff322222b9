import bleach
from rest_framework import serializers


class PatientCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=120)
    age = serializers.IntegerField(min_value=1, max_value=120)
    contact = serializers.CharField(max_length=64)
    diagnosis = serializers.CharField(max_length=255)
    gender = serializers.CharField(required=False, allow_blank=True, max_length=16, default='')
    address = serializers.CharField(required=False, allow_blank=True, max_length=255, default='')
    department = serializers.CharField(required=False, allow_blank=True, max_length=64, default='')
    doctor = serializers.CharField(required=False, allow_blank=True, max_length=120, default='')

    def validate_name(self, v):
        v = bleach.clean((v or '').strip(), tags=[], strip=True)
        if len(v) < 2:
            raise serializers.ValidationError('Name must be at least 2 characters')
        return v


class PatientUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(required=False, max_length=120)
    age = serializers.IntegerField(required=False, min_value=1, max_value=120)
    contact = serializers.CharField(required=False, max_length=64)
    diagnosis = serializers.CharField(required=False, max_length=255)
    gender = serializers.CharField(required=False, allow_blank=True, max_length=16)
    address = serializers.CharField(required=False, allow_blank=True, max_length=255)
    department = serializers.CharField(required=False, allow_blank=True, max_length=64)
    doctor = serializers.CharField(required=False, allow_blank=True, max_length=120)

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError('Nothing to update')
        return attrs


class PatientListQuerySerializer(serializers.Serializer):
    q = serializers.CharField(required=False, allow_blank=True, default='')
    status = serializers.ChoiceField(choices=['all', 'admitted', 'discharged'], required=False, default='all')


class DischargeSerializer(serializers.Serializer):
    dischargeDate = serializers.DateField(required=False)
