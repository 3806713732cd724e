# analytics/admin.py

from django.contrib import admin

from analytics.models import BaseExpenseMonth, ExchangeRate, SupplierMonthlySpend


@admin.register(ExchangeRate)
class ExchangeRateAdmin(admin.ModelAdmin):
    list_display = ("currency", "rate_to_cny", "updated_at")
    search_fields = ("currency",)


class RollupAdmin(admin.ModelAdmin):
    """Rollups are rebuilt by refresh_rollups; edits would be overwritten."""

    list_filter = ("month", "currency")

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False


@admin.register(SupplierMonthlySpend)
class SupplierMonthlySpendAdmin(RollupAdmin):
    list_display = ("month", "supplier", "base", "currency", "total_purchase", "total_paid", "remaining", "purchase_count")


@admin.register(BaseExpenseMonth)
class BaseExpenseMonthAdmin(RollupAdmin):
    list_display = ("month", "base", "currency", "total_amount")
