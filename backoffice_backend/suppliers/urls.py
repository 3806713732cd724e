# suppliers/urls.py

from django.urls import path

from suppliers.api.views import SupplierCreateView, SupplierListView, SupplierUpdateView

urlpatterns = [
    path("list", SupplierListView.as_view(), name="supplier-list"),
    path("create", SupplierCreateView.as_view(), name="supplier-create"),
    path("update", SupplierUpdateView.as_view(), name="supplier-update"),
]
