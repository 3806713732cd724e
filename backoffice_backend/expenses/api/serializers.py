# expenses/api/serializers.py

from rest_framework import serializers

from expenses.models import BaseExpense, ExpenseCategory


class ExpenseCategorySerializer(serializers.ModelSerializer):
    class Meta:
        model = ExpenseCategory
        fields = ("id", "name", "status", "created_at")
        read_only_fields = ("id", "status", "created_at")
        # uniqueness is enforced by create_category (409 duplicate-name)
        extra_kwargs = {"name": {"validators": []}}


class BaseExpenseSerializer(serializers.ModelSerializer):
    base_id = serializers.UUIDField(read_only=True)
    base_name = serializers.CharField(source="base.name", read_only=True)
    category_id = serializers.UUIDField(read_only=True)
    category_name = serializers.CharField(source="category.name", read_only=True)

    class Meta:
        model = BaseExpense
        fields = (
            "id",
            "base_id",
            "base_name",
            "category_id",
            "category_name",
            "date",
            "amount",
            "currency",
            "detail",
            "creator_name",
            "created_at",
        )
        read_only_fields = fields


class BaseExpenseCreateSerializer(serializers.Serializer):
    base_id = serializers.UUIDField()
    category_id = serializers.UUIDField()
    date = serializers.DateField(input_formats=["%Y-%m-%d"])
    amount = serializers.DecimalField(max_digits=15, decimal_places=2)
    currency = serializers.CharField(required=False, allow_blank=True, max_length=3)
    detail = serializers.CharField(required=False, allow_blank=True)
