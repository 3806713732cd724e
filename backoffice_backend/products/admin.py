# products/admin.py

from __future__ import annotations

from django.contrib import admin

from products.models import (
    Product,
    ProductPurchaseParam,
    ProductUnitSpec,
    SupplierProductPrice,
)


class ProductUnitSpecInline(admin.TabularInline):
    model = ProductUnitSpec
    extra = 0
    fields = ("unit", "factor_to_base", "kind", "is_default")


class ProductPurchaseParamInline(admin.StackedInline):
    model = ProductPurchaseParam
    extra = 0
    max_num = 1
    fields = ("unit", "factor_to_base", "purchase_price")


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ("name", "base_unit", "unit_price", "supplier", "status")
    list_filter = ("status",)
    search_fields = ("name",)
    autocomplete_fields = ("supplier",)
    inlines = [ProductUnitSpecInline, ProductPurchaseParamInline]


@admin.register(SupplierProductPrice)
class SupplierProductPriceAdmin(admin.ModelAdmin):
    list_display = ("supplier", "product", "price", "currency", "effective_from")
    list_filter = ("currency",)
    search_fields = ("supplier__name", "product__name")
    date_hierarchy = "effective_from"
