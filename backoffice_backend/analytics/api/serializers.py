# analytics/api/serializers.py

from rest_framework import serializers

from analytics.models import ExchangeRate


class ExchangeRateSerializer(serializers.ModelSerializer):
    class Meta:
        model = ExchangeRate
        fields = ("id", "currency", "rate_to_cny", "updated_at")
        read_only_fields = fields
