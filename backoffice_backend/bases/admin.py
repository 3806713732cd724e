# bases/admin.py

from django.contrib import admin

from bases.models import Base


@admin.register(Base)
class BaseAdmin(admin.ModelAdmin):
    list_display = ("name", "code", "currency", "status", "created_at")
    list_filter = ("status", "currency")
    search_fields = ("name", "code", "location")
    ordering = ("name",)
