# bases/api/serializers.py

from rest_framework import serializers

from bases.models import Base


class BaseSerializer(serializers.ModelSerializer):
    class Meta:
        model = Base
        fields = [
            "id",
            "name",
            "code",
            "location",
            "description",
            "currency",
            "status",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class BaseCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100)
    code = serializers.CharField(max_length=50, required=False, allow_blank=True)
    currency = serializers.CharField(max_length=3, required=False, allow_blank=True)
    location = serializers.CharField(max_length=255, required=False, allow_blank=True)
    description = serializers.CharField(required=False, allow_blank=True)
