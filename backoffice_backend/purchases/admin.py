# purchases/admin.py

from django.contrib import admin

from purchases.models import PurchaseEntry, PurchaseEntryItem


class PurchaseEntryItemInline(admin.TabularInline):
    model = PurchaseEntryItem
    extra = 0
    fields = ("product", "product_name", "unit", "quantity", "unit_price", "amount", "quantity_base")
    readonly_fields = fields
    can_delete = False


@admin.register(PurchaseEntry)
class PurchaseEntryAdmin(admin.ModelAdmin):
    """Read-mostly: mutations must go through the purchase services."""

    list_display = ("order_number", "supplier", "base", "purchase_date", "total_amount", "currency")
    list_filter = ("base", "currency")
    search_fields = ("order_number", "supplier__name", "receiver")
    date_hierarchy = "purchase_date"
    inlines = [PurchaseEntryItemInline]

    def has_delete_permission(self, request, obj=None):
        return False
