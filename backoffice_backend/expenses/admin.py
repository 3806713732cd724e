# expenses/admin.py

from django.contrib import admin

from expenses.models import BaseExpense, ExpenseCategory


@admin.register(ExpenseCategory)
class ExpenseCategoryAdmin(admin.ModelAdmin):
    list_display = ("name", "status", "created_at")
    list_filter = ("status",)
    search_fields = ("name",)


@admin.register(BaseExpense)
class BaseExpenseAdmin(admin.ModelAdmin):
    list_display = ("date", "base", "category", "amount", "currency", "creator_name")
    list_filter = ("base", "category", "currency")
    search_fields = ("detail", "creator_name")
    date_hierarchy = "date"
