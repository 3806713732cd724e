# expenses/urls.py

from django.urls import path

from expenses.api.views import ExpenseCategoryView, ExpenseCreateView, ExpenseListView

urlpatterns = [
    path("list", ExpenseListView.as_view(), name="expense-list"),
    path("create", ExpenseCreateView.as_view(), name="expense-create"),
    path("categories", ExpenseCategoryView.as_view(), name="expense-categories"),
]
