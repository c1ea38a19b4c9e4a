from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable


class ScopeMode(str, Enum):
    UNRESTRICTED = "unrestricted"
    ORG = "org"
    SITES = "sites"


@dataclass(frozen=True)
class AuthorizedScope:
    """Per-request description of what an actor may touch.

    ``org_id`` is set only in ORG mode and ``site_ids`` only in SITES mode.
    An empty ``site_ids`` means the actor is authorized for nothing.
    """

    mode: ScopeMode
    org_id: str | None = None
    site_ids: frozenset[str] | None = None

    def __post_init__(self) -> None:
        if self.mode is ScopeMode.ORG and not self.org_id:
            raise ValueError("org scope requires org_id")
        if self.mode is ScopeMode.SITES and self.site_ids is None:
            raise ValueError("sites scope requires site_ids")
        if self.mode is ScopeMode.UNRESTRICTED and (self.org_id or self.site_ids):
            raise ValueError("unrestricted scope carries no ids")

    @classmethod
    def unrestricted(cls) -> "AuthorizedScope":
        return cls(mode=ScopeMode.UNRESTRICTED)

    @classmethod
    def for_org(cls, org_id: str) -> "AuthorizedScope":
        return cls(mode=ScopeMode.ORG, org_id=str(org_id))

    @classmethod
    def for_sites(cls, site_ids: Iterable[str]) -> "AuthorizedScope":
        return cls(mode=ScopeMode.SITES, site_ids=frozenset(str(site_id) for site_id in site_ids))

    @property
    def is_empty(self) -> bool:
        return self.mode is ScopeMode.SITES and not self.site_ids

    def as_dict(self) -> dict:
        return {
            "mode": self.mode.value,
            "org_id": self.org_id,
            "site_ids": sorted(self.site_ids) if self.site_ids is not None else None,
        }


@dataclass(frozen=True)
class SiteRestriction:
    """Site-id filter a list handler must intersect with its query.

    ``unrestricted`` means "apply no site filter". Otherwise ``site_ids`` is the
    full allow-list; when it is empty the handler must not run the query.
    ``org_id`` additionally admits that organization's rows that carry no site.
    """

    unrestricted: bool
    site_ids: frozenset[str] = frozenset()
    org_id: str | None = None

    @classmethod
    def none(cls) -> "SiteRestriction":
        return cls(unrestricted=True)

    @classmethod
    def only(cls, site_ids: Iterable[str], *, org_id: str | None = None) -> "SiteRestriction":
        return cls(
            unrestricted=False,
            site_ids=frozenset(str(site_id) for site_id in site_ids),
            org_id=str(org_id) if org_id else None,
        )

    @property
    def is_empty(self) -> bool:
        return not self.unrestricted and not self.site_ids and not self.org_id
