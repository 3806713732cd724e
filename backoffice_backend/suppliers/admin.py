# suppliers/admin.py

from django.contrib import admin

from suppliers.models import Supplier


@admin.register(Supplier)
class SupplierAdmin(admin.ModelAdmin):
    list_display = ("name", "settlement_type", "settlement_day", "is_active", "created_at")
    list_filter = ("settlement_type", "is_active")
    search_fields = ("name", "contact_person", "phone")
