# users/claims.py

"""
REQUEST CLAIMS

The contract every service consumes: Claims(uid, role, bases[]).

- Built from the bearer token (role / bases claims) when present
- Falls back to the user row (AUTH_BYPASS identity, session auth in admin)

Base scoping:
- admin      -> allowed_base_ids() is None (unrestricted)
- base_agent -> ids of the bases named in the `bases` claim
"""

from __future__ import annotations

from dataclasses import dataclass, field

from bases.models import Base
from core.exceptions import BaseScopeViolation
from permissions.roles import ROLE_ADMIN


@dataclass(frozen=True)
class Claims:
    uid: str
    role: str
    bases: tuple[str, ...] = ()
    username: str = ""
    _base_ids: dict = field(default_factory=dict, compare=False, repr=False)

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    def allowed_base_ids(self) -> set | None:
        if self.is_admin:
            return None
        if "ids" not in self._base_ids:
            names = [n for n in self.bases if n]
            ids = set(Base.objects.filter(name__in=names).values_list("id", flat=True)) if names else set()
            self._base_ids["ids"] = ids
        return self._base_ids["ids"]

    def can_access_base(self, base_id) -> bool:
        allowed = self.allowed_base_ids()
        if allowed is None:
            return True
        return any(str(b) == str(base_id) for b in allowed)

    def require_base(self, base_id) -> None:
        if not self.can_access_base(base_id):
            raise BaseScopeViolation()

    def scope(self, qs, field_name: str = "base_id"):
        allowed = self.allowed_base_ids()
        if allowed is None:
            return qs
        return qs.filter(**{f"{field_name}__in": allowed})


def claims_for_request(request) -> Claims:
    cached = getattr(request, "_backoffice_claims", None)
    if cached is not None:
        return cached

    user = request.user
    token = getattr(request, "auth", None)

    if token is not None and hasattr(token, "get") and token.get("role"):
        claims = Claims(
            uid=str(token.get("uid") or getattr(user, "pk", "")),
            role=token.get("role"),
            bases=tuple(token.get("bases") or ()),
            username=token.get("username") or getattr(user, "username", ""),
        )
    else:
        claims = Claims(
            uid=str(getattr(user, "pk", "")),
            role=getattr(user, "role", "") or "",
            bases=tuple(user.base_names()) if hasattr(user, "base_names") else (),
            username=getattr(user, "username", ""),
        )

    request._backoffice_claims = claims
    return claims
