from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from app.sitescope.core.actor import PARTNER_ROLES, ActorContext, Role
from app.sitescope.core.error_catalog import AppError, ErrorCatalog, ScopeConfigurationError
from app.sitescope.core.logging import log_json
from app.sitescope.core.metrics import metrics
from app.sitescope.core.scope import AuthorizedScope
from app.sitescope.repos.mappings import MappingSource, MappingSourceError

logger = logging.getLogger("sitescope.scope")


class FallbackPolicy(str, Enum):
    PRIMARY_ONLY = "primary_only"
    PRIMARY_THEN_LEGACY = "primary_then_legacy"

    @classmethod
    def from_flag(cls, legacy_fallback_enabled: bool) -> "FallbackPolicy":
        return cls.PRIMARY_THEN_LEGACY if legacy_fallback_enabled else cls.PRIMARY_ONLY


@dataclass(frozen=True)
class PartnerSiteResolution:
    site_ids: frozenset[str]
    sources: tuple[str, ...]


class SiteSetResolver:
    """Maps an actor to the organizations/sites it may access.

    Role rules, evaluated in order with no fallthrough:

    - system_admin: unrestricted
    - admin, restricted: its single restricted organization
    - admin, not restricted: unrestricted
    - site_manager: its assigned site, or nothing when unassigned
    - partner / customer_manager: sites from the partner mapping tables
    - anyone else: nothing

    Handlers that need a narrower exception (a worker reading their own
    rows) code it themselves on top of the empty scope.
    """

    def __init__(self, mapping_source: MappingSource, *, fallback_policy: FallbackPolicy = FallbackPolicy.PRIMARY_ONLY):
        self.mapping_source = mapping_source
        self.fallback_policy = fallback_policy

    def resolve(self, actor: ActorContext) -> AuthorizedScope:
        try:
            scope, sources = self._resolve(actor)
        except ScopeConfigurationError as exc:
            log_json(
                logger,
                {"event": "scope_configuration_error", "user_id": actor.user_id, "reason": exc.reason},
                level=logging.ERROR,
            )
            raise
        metrics.increment_scope_resolved(scope.mode.value)
        log_json(
            logger,
            {
                "event": "scope_resolved",
                "user_id": actor.user_id,
                "role": actor.role,
                "mode": scope.mode.value,
                "site_count": len(scope.site_ids) if scope.site_ids is not None else None,
                "sources": list(sources),
            },
        )
        return scope

    def _resolve(self, actor: ActorContext) -> tuple[AuthorizedScope, tuple[str, ...]]:
        role = actor.known_role
        if role is Role.SYSTEM_ADMIN:
            return AuthorizedScope.unrestricted(), ("role",)
        if role is Role.ADMIN:
            if actor.is_restricted:
                if not actor.restricted_org_id:
                    raise ScopeConfigurationError("restricted admin without restricted_org_id")
                return AuthorizedScope.for_org(actor.restricted_org_id), ("profile",)
            return AuthorizedScope.unrestricted(), ("role",)
        if role is Role.SITE_MANAGER:
            site_ids = [actor.site_id] if actor.site_id else []
            return AuthorizedScope.for_sites(site_ids), ("profile",)
        if role in PARTNER_ROLES:
            resolution = self.resolve_partner_sites(actor.partner_company_id)
            return AuthorizedScope.for_sites(resolution.site_ids), resolution.sources
        # worker and unrecognized roles
        return AuthorizedScope.for_sites(()), ()

    def resolve_partner_sites(self, partner_company_id: str | None) -> PartnerSiteResolution:
        if not partner_company_id:
            return PartnerSiteResolution(site_ids=frozenset(), sources=())

        site_ids: set[str] = set()
        sources: list[str] = []
        primary_failed = False
        try:
            primary_rows = self.mapping_source.list_primary(partner_company_id)
        except MappingSourceError as exc:
            primary_failed = True
            log_json(
                logger,
                {"event": "mapping_read_failed", "source": exc.source, "partner_company_id": partner_company_id},
                level=logging.WARNING,
            )
        else:
            active = {row.site_id for row in primary_rows if row.grants_access}
            if active:
                site_ids.update(active)
                sources.append("primary")

        if primary_failed or not site_ids:
            if self.fallback_policy is FallbackPolicy.PRIMARY_THEN_LEGACY:
                site_ids.update(self._legacy_site_ids(partner_company_id))
                sources.append("legacy")
                metrics.increment_legacy_fallback()
            elif primary_failed:
                raise AppError(ErrorCatalog.MAPPING_UNAVAILABLE)

        return PartnerSiteResolution(site_ids=frozenset(site_ids), sources=tuple(sources))

    def _legacy_site_ids(self, partner_company_id: str) -> set[str]:
        try:
            legacy_rows = self.mapping_source.list_legacy(partner_company_id)
        except MappingSourceError as exc:
            log_json(
                logger,
                {"event": "mapping_read_failed", "source": exc.source, "partner_company_id": partner_company_id},
                level=logging.WARNING,
            )
            raise AppError(ErrorCatalog.MAPPING_UNAVAILABLE) from exc
        return {row.site_id for row in legacy_rows if row.grants_access}


def resolve_authorized_scope(
    actor: ActorContext,
    mapping_source: MappingSource,
    *,
    legacy_fallback_enabled: bool = False,
) -> AuthorizedScope:
    resolver = SiteSetResolver(mapping_source, fallback_policy=FallbackPolicy.from_flag(legacy_fallback_enabled))
    return resolver.resolve(actor)
