# users/urls.py

from django.urls import path

from .views import LoginView, MeView, SeedAdminView

urlpatterns = [
    # ---------------- PUBLIC AUTH ----------------
    path("login", LoginView.as_view(), name="login"),
    path("dev/seed-admin", SeedAdminView.as_view(), name="dev-seed-admin"),
    # ---------------- AUTHENTICATED ----------------
    path("me", MeView.as_view(), name="me"),
]
