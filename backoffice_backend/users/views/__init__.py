from .auth import LoginView, SeedAdminView
from .me import MeView

__all__ = [
    "LoginView",
    "SeedAdminView",
    "MeView",
]
