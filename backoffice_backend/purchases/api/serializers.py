# purchases/api/serializers.py

from rest_framework import serializers

from purchases.models import PurchaseEntry, PurchaseEntryItem


class PurchaseItemInputSerializer(serializers.Serializer):
    product_id = serializers.UUIDField(required=False, allow_null=True)
    product_name = serializers.CharField(required=False, allow_blank=True, max_length=191)
    unit = serializers.CharField(required=False, allow_blank=True, max_length=32)
    quantity = serializers.DecimalField(max_digits=18, decimal_places=4)
    unit_price = serializers.DecimalField(
        max_digits=15, decimal_places=2, required=False, allow_null=True
    )
    amount = serializers.DecimalField(
        max_digits=15, decimal_places=2, required=False, allow_null=True
    )

    def validate(self, attrs):
        if not attrs.get("product_id") and not (attrs.get("product_name") or "").strip():
            raise serializers.ValidationError("product_id or product_name is required")
        return attrs


class PurchaseWriteSerializer(serializers.Serializer):
    """Body of purchase create / update (update replaces every item)."""

    supplier_id = serializers.UUIDField()
    base_id = serializers.UUIDField()
    purchase_date = serializers.DateField(input_formats=["%Y-%m-%d"])
    total_amount = serializers.DecimalField(
        max_digits=15, decimal_places=2, required=False, allow_null=True
    )
    currency = serializers.CharField(required=False, allow_blank=True, max_length=3)
    order_number = serializers.CharField(required=False, allow_blank=True, max_length=64)
    receiver = serializers.CharField(required=False, allow_blank=True, max_length=100)
    notes = serializers.CharField(required=False, allow_blank=True)
    items = PurchaseItemInputSerializer(many=True, allow_empty=False)


class BatchDeleteSerializer(serializers.Serializer):
    ids = serializers.ListField(child=serializers.UUIDField(), allow_empty=False, max_length=500)


class PurchaseEntryItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = PurchaseEntryItem
        fields = (
            "id",
            "product_id",
            "product_name",
            "unit",
            "quantity",
            "unit_price",
            "amount",
            "quantity_base",
        )


class PurchaseEntrySerializer(serializers.ModelSerializer):
    supplier_id = serializers.UUIDField(read_only=True)
    supplier_name = serializers.CharField(source="supplier.name", read_only=True)
    base_id = serializers.UUIDField(read_only=True)
    base_name = serializers.CharField(source="base.name", read_only=True)
    items = PurchaseEntryItemSerializer(many=True, read_only=True)

    class Meta:
        model = PurchaseEntry
        fields = (
            "id",
            "supplier_id",
            "supplier_name",
            "base_id",
            "base_name",
            "order_number",
            "purchase_date",
            "total_amount",
            "currency",
            "receiver",
            "notes",
            "creator_name",
            "created_at",
            "updated_at",
            "items",
        )
        read_only_fields = fields
