from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping


class Role(str, Enum):
    SYSTEM_ADMIN = "system_admin"
    ADMIN = "admin"
    SITE_MANAGER = "site_manager"
    WORKER = "worker"
    CUSTOMER_MANAGER = "customer_manager"
    PARTNER = "partner"

    @classmethod
    def parse(cls, value: str | None) -> "Role | None":
        try:
            return cls(normalize_role(value))
        except ValueError:
            return None


PARTNER_ROLES = frozenset({Role.PARTNER, Role.CUSTOMER_MANAGER})


def normalize_role(role: str | None) -> str:
    return (role or "").strip().lower()


def _optional_id(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


@dataclass(frozen=True)
class ActorContext:
    """Authenticated identity plus the profile fields that drive scoping.

    Built once per request from the profile row; never cached.
    """

    user_id: str
    email: str
    role: str
    organization_id: str | None = None
    is_restricted: bool = False
    restricted_org_id: str | None = None
    site_id: str | None = None
    partner_company_id: str | None = None

    @property
    def known_role(self) -> Role | None:
        return Role.parse(self.role)

    @property
    def is_partner(self) -> bool:
        return self.known_role in PARTNER_ROLES


_FIELDS = (
    "organization_id",
    "is_restricted",
    "restricted_org_id",
    "site_id",
    "partner_company_id",
)


def build_actor_context(profile: Any) -> ActorContext:
    """Build an ActorContext from a profile row or a plain mapping.

    Missing ``is_restricted`` defaults to False and missing
    ``partner_company_id`` to None. A restricted profile without a
    ``restricted_org_id`` is passed through as-is; the resolver rejects it.
    """
    if isinstance(profile, Mapping):
        get = profile.get
    else:
        def get(key, default=None):
            return getattr(profile, key, default)

    user_id = _optional_id(get("id")) or _optional_id(get("user_id"))
    if user_id is None:
        raise ValueError("profile has no id")

    values = {name: get(name) for name in _FIELDS}
    return ActorContext(
        user_id=user_id,
        email=str(get("email") or ""),
        role=normalize_role(get("role")),
        organization_id=_optional_id(values["organization_id"]),
        is_restricted=values["is_restricted"] is True,
        restricted_org_id=_optional_id(values["restricted_org_id"]),
        site_id=_optional_id(values["site_id"]),
        partner_company_id=_optional_id(values["partner_company_id"]),
    )
