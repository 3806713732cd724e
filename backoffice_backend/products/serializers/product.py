# products/serializers/product.py

from rest_framework import serializers

from products.models import (
    Product,
    ProductPurchaseParam,
    ProductUnitSpec,
    SupplierProductPrice,
)


class ProductSerializer(serializers.ModelSerializer):
    supplier_name = serializers.CharField(source="supplier.name", read_only=True, default=None)

    class Meta:
        model = Product
        fields = [
            "id",
            "name",
            "unit",
            "base_unit",
            "unit_price",
            "supplier",
            "supplier_name",
            "status",
            "created_at",
        ]
        read_only_fields = fields


class ProductUnitSpecSerializer(serializers.ModelSerializer):
    class Meta:
        model = ProductUnitSpec
        fields = ["id", "product", "unit", "factor_to_base", "kind", "is_default", "updated_at"]
        read_only_fields = fields


class UnitSpecUpsertSerializer(serializers.Serializer):
    product_id = serializers.UUIDField()
    unit = serializers.CharField(max_length=32)
    factor_to_base = serializers.DecimalField(max_digits=18, decimal_places=6)
    kind = serializers.ChoiceField(
        choices=[k for k, _ in ProductUnitSpec.KINDS], required=False, allow_blank=True
    )
    is_default = serializers.BooleanField(required=False, default=False)


class ProductPurchaseParamSerializer(serializers.ModelSerializer):
    class Meta:
        model = ProductPurchaseParam
        fields = ["id", "product", "unit", "factor_to_base", "purchase_price", "updated_at"]
        read_only_fields = fields


class PurchaseParamUpsertSerializer(serializers.Serializer):
    product_id = serializers.UUIDField()
    unit = serializers.CharField(max_length=32)
    factor_to_base = serializers.DecimalField(max_digits=18, decimal_places=6)
    purchase_price = serializers.DecimalField(
        max_digits=15, decimal_places=2, required=False, default=0
    )


class SupplierProductPriceSerializer(serializers.ModelSerializer):
    class Meta:
        model = SupplierProductPrice
        fields = ["id", "supplier", "product", "price", "currency", "effective_from", "created_at"]
        read_only_fields = fields


class SupplierPriceCreateSerializer(serializers.Serializer):
    supplier_id = serializers.UUIDField()
    product_id = serializers.UUIDField()
    price = serializers.DecimalField(max_digits=15, decimal_places=2)
    effective_from = serializers.DateField()
    currency = serializers.CharField(max_length=3, required=False, allow_blank=True)
