# bases/urls.py

from django.urls import path

from bases.api.views import BaseCreateView, BaseListView

urlpatterns = [
    path("list", BaseListView.as_view(), name="base-list"),
    path("create", BaseCreateView.as_view(), name="base-create"),
]
