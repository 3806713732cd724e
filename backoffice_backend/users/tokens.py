# users/tokens.py

from __future__ import annotations

from rest_framework_simplejwt.tokens import AccessToken


class BackofficeAccessToken(AccessToken):
    """
    HS256 access token carrying: uid, role, username, bases[], exp, iat.
    Lifetime comes from SIMPLE_JWT["ACCESS_TOKEN_LIFETIME"] (JWT_TTL_HOURS).
    """

    @classmethod
    def for_user(cls, user):
        token = super().for_user(user)
        token["role"] = user.role
        token["username"] = user.username
        token["bases"] = user.base_names()
        return token


def issue_token(user) -> str:
    return str(BackofficeAccessToken.for_user(user))
