# suppliers/api/serializers.py

from rest_framework import serializers

from suppliers.models import Supplier


class SupplierSerializer(serializers.ModelSerializer):
    class Meta:
        model = Supplier
        fields = [
            "id",
            "name",
            "contact_person",
            "phone",
            "email",
            "address",
            "settlement_type",
            "settlement_day",
            "is_active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class SupplierWriteSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=191)
    contact_person = serializers.CharField(max_length=100, required=False, allow_blank=True)
    phone = serializers.CharField(max_length=50, required=False, allow_blank=True)
    email = serializers.EmailField(required=False, allow_blank=True)
    address = serializers.CharField(required=False, allow_blank=True)
    settlement_type = serializers.ChoiceField(
        choices=[c for c, _ in Supplier.SETTLEMENT_TYPES],
        required=False,
        allow_blank=True,
    )
    settlement_day = serializers.IntegerField(
        min_value=1, max_value=31, required=False, allow_null=True
    )
    is_active = serializers.BooleanField(required=False)
