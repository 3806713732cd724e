# payables/admin.py

from django.contrib import admin

from payables.models import PayableLink, PayableRecord, PaymentRecord


class PayableLinkInline(admin.TabularInline):
    model = PayableLink
    extra = 0
    fields = ("purchase_entry", "amount", "currency", "created_at")
    readonly_fields = fields
    can_delete = False


class PaymentRecordInline(admin.TabularInline):
    model = PaymentRecord
    extra = 0
    fields = ("payment_amount", "currency", "payment_date", "payment_method", "reference_number")
    readonly_fields = fields
    can_delete = False


@admin.register(PayableRecord)
class PayableRecordAdmin(admin.ModelAdmin):
    """
    Read-only: totals and status are derived by the payable services, a
    direct edit here would break paid = SUM(payments).
    """

    list_display = (
        "supplier",
        "base",
        "settlement_type",
        "period_month",
        "period_half",
        "total_amount",
        "paid_amount",
        "remaining_amount",
        "currency",
        "status",
        "due_date",
    )
    list_filter = ("status", "settlement_type", "currency", "base")
    search_fields = ("supplier__name", "base__name", "period_month", "period_half")
    inlines = [PayableLinkInline, PaymentRecordInline]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(PaymentRecord)
class PaymentRecordAdmin(admin.ModelAdmin):
    list_display = ("payable", "payment_amount", "currency", "payment_date", "payment_method", "created_at")
    list_filter = ("payment_method", "currency")
    search_fields = ("reference_number", "payable__supplier__name")

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
