# payables/api/serializers.py

from rest_framework import serializers

from payables.models import PayableLink, PayableRecord, PaymentRecord
from purchases.api.serializers import PurchaseEntrySerializer


class PayableRecordSerializer(serializers.ModelSerializer):
    supplier_id = serializers.UUIDField(read_only=True, allow_null=True)
    supplier_name = serializers.CharField(source="supplier.name", read_only=True, default="")
    base_id = serializers.UUIDField(read_only=True)
    base_name = serializers.CharField(source="base.name", read_only=True)
    purchase_entry_id = serializers.UUIDField(read_only=True, allow_null=True)

    class Meta:
        model = PayableRecord
        fields = (
            "id",
            "purchase_entry_id",
            "supplier_id",
            "supplier_name",
            "base_id",
            "base_name",
            "settlement_type",
            "period_month",
            "period_half",
            "total_amount",
            "paid_amount",
            "remaining_amount",
            "currency",
            "status",
            "due_date",
            "created_at",
            "updated_at",
        )
        read_only_fields = fields


class PaymentRecordSerializer(serializers.ModelSerializer):
    payable_id = serializers.UUIDField(read_only=True)

    class Meta:
        model = PaymentRecord
        fields = (
            "id",
            "payable_id",
            "payment_amount",
            "currency",
            "payment_date",
            "payment_method",
            "reference_number",
            "notes",
            "created_at",
        )
        read_only_fields = fields


class PayableLinkSerializer(serializers.ModelSerializer):
    purchase = PurchaseEntrySerializer(source="purchase_entry", read_only=True)

    class Meta:
        model = PayableLink
        fields = ("id", "amount", "currency", "created_at", "purchase")
        read_only_fields = fields


class PayableDetailSerializer(PayableRecordSerializer):
    """Payable with its links (and their purchase items) and payments."""

    links = PayableLinkSerializer(many=True, read_only=True)
    payments = PaymentRecordSerializer(many=True, read_only=True)
    purchase = PurchaseEntrySerializer(source="purchase_entry", read_only=True, allow_null=True)

    class Meta(PayableRecordSerializer.Meta):
        fields = PayableRecordSerializer.Meta.fields + ("purchase", "links", "payments")
        read_only_fields = fields


class PayableStatusSerializer(serializers.Serializer):
    status = serializers.CharField()


class PaymentCreateSerializer(serializers.Serializer):
    payable_id = serializers.UUIDField()
    amount = serializers.DecimalField(max_digits=15, decimal_places=2)
    payment_date = serializers.DateField(required=False, allow_null=True, input_formats=["%Y-%m-%d"])
    payment_method = serializers.CharField(required=False, allow_blank=True, max_length=32)
    reference = serializers.CharField(required=False, allow_blank=True, max_length=100)
    note = serializers.CharField(required=False, allow_blank=True)
