from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Sequence, TypeVar

from app.sitescope.core.actor import ActorContext, Role
from app.sitescope.core.error_catalog import AppError, ErrorCatalog, ErrorDefinition, ErrorKind, ScopeConfigurationError
from app.sitescope.core.scope import AuthorizedScope, ScopeMode, SiteRestriction

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

SiteOrgLookup = Callable[[str], str | None]
OrgSitesLookup = Callable[[str], Iterable[str]]


def denial_for(actor: ActorContext | None) -> ErrorDefinition:
    """Actor-facing denial; never names the organization or site involved."""
    if actor is None:
        return ErrorCatalog.PERMISSION_DENIED
    role = actor.known_role
    if role is Role.ADMIN and actor.is_restricted:
        return ErrorCatalog.ORG_ACCESS_DENIED
    if actor.is_partner:
        return ErrorCatalog.PARTNER_SITE_ACCESS_DENIED
    if role in (Role.SITE_MANAGER, Role.WORKER):
        return ErrorCatalog.SITE_ACCESS_DENIED
    return ErrorCatalog.PERMISSION_DENIED


def _deny(denial: ErrorDefinition | None) -> AppError:
    return AppError(denial or ErrorCatalog.PERMISSION_DENIED)


def _same_id(left: Any, right: Any) -> bool:
    if left is None or right is None:
        return False
    return str(left) == str(right)


def assert_org_access(
    scope: AuthorizedScope,
    candidate_org_id: str | None,
    *,
    denial: ErrorDefinition | None = None,
) -> None:
    if scope.mode is ScopeMode.UNRESTRICTED:
        return
    if scope.mode is ScopeMode.ORG:
        if _same_id(candidate_org_id, scope.org_id):
            return
        raise _deny(denial)
    if scope.mode is ScopeMode.SITES:
        # Site-scoped actors have no organization dimension.
        raise ScopeConfigurationError("org check used with a sites scope")
    raise _deny(denial)


def assert_site_access(
    scope: AuthorizedScope,
    candidate_site_id: str | None,
    *,
    site_org_lookup: SiteOrgLookup | None = None,
    denial: ErrorDefinition | None = None,
) -> None:
    if scope.mode is ScopeMode.UNRESTRICTED:
        return
    if candidate_site_id is None:
        raise _deny(denial)
    if scope.mode is ScopeMode.ORG:
        if site_org_lookup is None:
            raise ScopeConfigurationError("org scope needs a site organization lookup")
        if _same_id(site_org_lookup(str(candidate_site_id)), scope.org_id):
            return
        raise _deny(denial)
    if scope.mode is ScopeMode.SITES:
        if str(candidate_site_id) in (scope.site_ids or frozenset()):
            return
        raise _deny(denial)
    raise _deny(denial)


def filter_to_scope(
    scope: AuthorizedScope,
    site_ids: Iterable[str] | None = None,
    *,
    org_site_lookup: OrgSitesLookup | None = None,
) -> SiteRestriction:
    """Site restriction for a list query.

    ``site_ids`` narrows the result to sites the caller asked for; it is
    intersected with the authorized set and can never widen it.
    """
    requested = frozenset(str(site_id) for site_id in site_ids) if site_ids is not None else None

    if scope.mode is ScopeMode.UNRESTRICTED:
        return SiteRestriction.none() if requested is None else SiteRestriction.only(requested)
    if scope.mode is ScopeMode.ORG:
        if org_site_lookup is None:
            raise ScopeConfigurationError("org scope needs an organization site lookup")
        allowed = frozenset(str(site_id) for site_id in org_site_lookup(scope.org_id))
    elif scope.mode is ScopeMode.SITES:
        allowed = scope.site_ids or frozenset()
    else:
        allowed = frozenset()

    if requested is not None:
        return SiteRestriction.only(allowed & requested)
    return SiteRestriction.only(allowed, org_id=scope.org_id)


def scoped_list(restriction: SiteRestriction, run_query: Callable[[SiteRestriction], Sequence[T]]) -> list[T]:
    """Run ``run_query`` under ``restriction``; an empty allow-list skips it."""
    if restriction.is_empty:
        return []
    return list(run_query(restriction))


def with_scoped_mutation(
    scope: AuthorizedScope,
    load_resource: Callable[[], T],
    mutate: Callable[[T, SiteRestriction], R],
    *,
    site_org_lookup: SiteOrgLookup | None = None,
    org_site_lookup: OrgSitesLookup | None = None,
    denial: ErrorDefinition | None = None,
    on_denied: Callable[[T], None] | None = None,
) -> R:
    """Load, check, then mutate.

    ``load_resource`` returns one resource or a list of them; each must expose
    ``site_id`` and may expose ``organization_id``. ``mutate`` runs only after
    every resource passed the check, and receives the restriction so it can
    apply it again as a condition on the write.
    """
    loaded = load_resource()
    resources = list(loaded) if isinstance(loaded, (list, tuple)) else [loaded]
    try:
        for resource in resources:
            _assert_resource_access(scope, resource, site_org_lookup=site_org_lookup, denial=denial)
        restriction = filter_to_scope(scope, org_site_lookup=org_site_lookup)
        return mutate(loaded, restriction)
    except AppError as exc:
        if on_denied is not None and exc.kind in (ErrorKind.AUTHORIZATION, ErrorKind.CONFIGURATION):
            on_denied(loaded)
        raise


def _assert_resource_access(
    scope: AuthorizedScope,
    resource: Any,
    *,
    site_org_lookup: SiteOrgLookup | None,
    denial: ErrorDefinition | None,
) -> None:
    organization_id = getattr(resource, "organization_id", None)
    if scope.mode is ScopeMode.ORG and organization_id is not None:
        assert_org_access(scope, organization_id, denial=denial)
        return
    assert_site_access(scope, getattr(resource, "site_id", None), site_org_lookup=site_org_lookup, denial=denial)


def ensure_rows_affected(affected: int | None, expected: int, *, denial: ErrorDefinition | None = None) -> None:
    """A conditional write that touched fewer rows than checked means the scope moved."""
    if affected != expected:
        logger.warning("Scoped write affected %s of %s rows", affected, expected)
        raise _deny(denial)


class AccessGuard:
    """Binds a scope to the lookups and denial message a handler uses."""

    def __init__(
        self,
        scope: AuthorizedScope,
        *,
        denial: ErrorDefinition | None = None,
        site_org_lookup: SiteOrgLookup | None = None,
        org_site_lookup: OrgSitesLookup | None = None,
    ):
        self.scope = scope
        self.denial = denial or ErrorCatalog.PERMISSION_DENIED
        self.site_org_lookup = site_org_lookup
        self.org_site_lookup = org_site_lookup

    def assert_org_access(self, candidate_org_id: str | None) -> None:
        assert_org_access(self.scope, candidate_org_id, denial=self.denial)

    def assert_site_access(self, candidate_site_id: str | None) -> None:
        assert_site_access(
            self.scope,
            candidate_site_id,
            site_org_lookup=self.site_org_lookup,
            denial=self.denial,
        )

    def filter_to_scope(self, site_ids: Iterable[str] | None = None) -> SiteRestriction:
        return filter_to_scope(self.scope, site_ids, org_site_lookup=self.org_site_lookup)

    def scoped_list(self, run_query: Callable[[SiteRestriction], Sequence[T]], site_ids: Iterable[str] | None = None) -> list[T]:
        return scoped_list(self.filter_to_scope(site_ids), run_query)

    def with_scoped_mutation(
        self,
        load_resource: Callable[[], T],
        mutate: Callable[[T, SiteRestriction], R],
        *,
        on_denied: Callable[[T], None] | None = None,
    ) -> R:
        return with_scoped_mutation(
            self.scope,
            load_resource,
            mutate,
            site_org_lookup=self.site_org_lookup,
            org_site_lookup=self.org_site_lookup,
            denial=self.denial,
            on_denied=on_denied,
        )

    def ensure_rows_affected(self, affected: int | None, expected: int) -> None:
        ensure_rows_affected(affected, expected, denial=self.denial)
