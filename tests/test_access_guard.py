import uuid
from types import SimpleNamespace

import pytest

from app.sitescope.core.actor import ActorContext
from app.sitescope.core.error_catalog import AppError, ErrorCatalog, ScopeConfigurationError
from app.sitescope.core.scope import AuthorizedScope, SiteRestriction
from app.sitescope.services.access_guard import (
    AccessGuard,
    assert_org_access,
    assert_site_access,
    denial_for,
    ensure_rows_affected,
    filter_to_scope,
    scoped_list,
    with_scoped_mutation,
)

ORG_A = str(uuid.uuid4())
ORG_B = str(uuid.uuid4())
SITE_A1 = str(uuid.uuid4())
SITE_A2 = str(uuid.uuid4())
SITE_B1 = str(uuid.uuid4())

SITE_ORGS = {SITE_A1: ORG_A, SITE_A2: ORG_A, SITE_B1: ORG_B}


def _site_org(site_id):
    return SITE_ORGS.get(site_id)


def _org_sites(org_id):
    return [site_id for site_id, owner in SITE_ORGS.items() if owner == org_id]


def test_org_access_allows_same_org_and_denies_other():
    scope = AuthorizedScope.for_org(ORG_A)

    assert_org_access(scope, ORG_A)
    with pytest.raises(AppError) as exc:
        assert_org_access(scope, ORG_B, denial=ErrorCatalog.ORG_ACCESS_DENIED)
    assert exc.value.error == ErrorCatalog.ORG_ACCESS_DENIED


def test_org_access_on_sites_scope_is_configuration_error():
    with pytest.raises(ScopeConfigurationError):
        assert_org_access(AuthorizedScope.for_sites([SITE_A1]), ORG_A)


def test_unrestricted_scope_allows_everything():
    scope = AuthorizedScope.unrestricted()

    assert_org_access(scope, ORG_B)
    assert_site_access(scope, SITE_B1)
    assert filter_to_scope(scope) == SiteRestriction.none()


def test_site_access_in_sites_scope():
    scope = AuthorizedScope.for_sites([SITE_A1])

    assert_site_access(scope, SITE_A1)
    with pytest.raises(AppError) as exc:
        assert_site_access(scope, SITE_A2)
    assert exc.value.error == ErrorCatalog.PERMISSION_DENIED


def test_site_access_in_org_scope_uses_site_owner():
    scope = AuthorizedScope.for_org(ORG_A)

    assert_site_access(scope, SITE_A2, site_org_lookup=_site_org)
    with pytest.raises(AppError):
        assert_site_access(scope, SITE_B1, site_org_lookup=_site_org)


def test_site_access_in_org_scope_without_lookup_is_configuration_error():
    with pytest.raises(ScopeConfigurationError):
        assert_site_access(AuthorizedScope.for_org(ORG_A), SITE_A1)


def test_site_with_no_organization_is_denied_for_org_scope():
    with pytest.raises(AppError):
        assert_site_access(AuthorizedScope.for_org(ORG_A), SITE_A1, site_org_lookup=lambda _site_id: None)


def test_empty_sites_scope_denies_every_site():
    with pytest.raises(AppError):
        assert_site_access(AuthorizedScope.for_sites([]), SITE_A1)


def test_filter_to_scope_intersects_requested_sites():
    scope = AuthorizedScope.for_sites([SITE_A1, SITE_A2])

    assert filter_to_scope(scope, [SITE_A2, SITE_B1]).site_ids == frozenset({SITE_A2})
    assert filter_to_scope(scope, [SITE_B1]).is_empty


def test_filter_to_scope_for_org_lists_org_sites():
    restriction = filter_to_scope(AuthorizedScope.for_org(ORG_A), org_site_lookup=_org_sites)

    assert restriction.site_ids == frozenset({SITE_A1, SITE_A2})
    assert restriction.org_id == ORG_A


def test_requested_sites_drop_org_level_rows():
    restriction = filter_to_scope(AuthorizedScope.for_org(ORG_A), [SITE_A1, SITE_B1], org_site_lookup=_org_sites)

    assert restriction.site_ids == frozenset({SITE_A1})
    assert restriction.org_id is None


def test_filter_to_scope_for_org_without_lookup_is_configuration_error():
    with pytest.raises(ScopeConfigurationError):
        filter_to_scope(AuthorizedScope.for_org(ORG_A))


def test_scoped_list_skips_query_for_empty_restriction():
    calls = []

    result = scoped_list(SiteRestriction.only([]), lambda restriction: calls.append(restriction) or ["row"])

    assert result == []
    assert calls == []


def test_scoped_list_runs_query_with_restriction():
    restriction = SiteRestriction.only([SITE_A1])

    assert scoped_list(restriction, lambda r: [sorted(r.site_ids)]) == [[SITE_A1]]


def test_with_scoped_mutation_denies_before_mutate():
    events = []
    resource = SimpleNamespace(site_id=SITE_B1)

    with pytest.raises(AppError) as exc:
        with_scoped_mutation(
            AuthorizedScope.for_sites([SITE_A1]),
            lambda: events.append("load") or resource,
            lambda _resource, _restriction: events.append("mutate"),
            denial=ErrorCatalog.SITE_ACCESS_DENIED,
            on_denied=lambda loaded: events.append(("denied", loaded.site_id)),
        )

    assert exc.value.error == ErrorCatalog.SITE_ACCESS_DENIED
    assert events == ["load", ("denied", SITE_B1)]


def test_with_scoped_mutation_passes_restriction_to_mutate():
    resource = SimpleNamespace(site_id=SITE_A1)
    seen = {}

    def mutate(loaded, restriction):
        seen["restriction"] = restriction
        return loaded

    result = with_scoped_mutation(AuthorizedScope.for_sites([SITE_A1]), lambda: resource, mutate)

    assert result is resource
    assert seen["restriction"].site_ids == frozenset({SITE_A1})


def test_with_scoped_mutation_checks_every_resource():
    mutated = []
    resources = [SimpleNamespace(site_id=SITE_A1), SimpleNamespace(site_id=SITE_B1)]

    with pytest.raises(AppError):
        with_scoped_mutation(
            AuthorizedScope.for_org(ORG_A),
            lambda: resources,
            lambda loaded, _restriction: mutated.extend(loaded),
            site_org_lookup=_site_org,
            org_site_lookup=_org_sites,
        )

    assert mutated == []


def test_with_scoped_mutation_uses_resource_organization_in_org_mode():
    resource = SimpleNamespace(site_id=None, organization_id=ORG_A)

    result = with_scoped_mutation(
        AuthorizedScope.for_org(ORG_A),
        lambda: resource,
        lambda loaded, _restriction: "ok",
        org_site_lookup=_org_sites,
    )

    assert result == "ok"


def test_with_scoped_mutation_does_not_report_not_found_as_denial():
    denied = []

    def load():
        raise AppError(ErrorCatalog.RESOURCE_NOT_FOUND)

    with pytest.raises(AppError) as exc:
        with_scoped_mutation(
            AuthorizedScope.for_sites([SITE_A1]),
            load,
            lambda _loaded, _restriction: None,
            on_denied=denied.append,
        )

    assert exc.value.error == ErrorCatalog.RESOURCE_NOT_FOUND
    assert denied == []


def test_ensure_rows_affected():
    ensure_rows_affected(2, 2)
    with pytest.raises(AppError) as exc:
        ensure_rows_affected(1, 2, denial=ErrorCatalog.SITE_ACCESS_DENIED)
    assert exc.value.error == ErrorCatalog.SITE_ACCESS_DENIED


def test_denial_for_roles():
    def actor(role, **kwargs):
        return ActorContext(user_id=str(uuid.uuid4()), email="x@example.com", role=role, **kwargs)

    assert denial_for(actor("admin", is_restricted=True, restricted_org_id=ORG_A)) == ErrorCatalog.ORG_ACCESS_DENIED
    assert denial_for(actor("partner")) == ErrorCatalog.PARTNER_SITE_ACCESS_DENIED
    assert denial_for(actor("customer_manager")) == ErrorCatalog.PARTNER_SITE_ACCESS_DENIED
    assert denial_for(actor("site_manager")) == ErrorCatalog.SITE_ACCESS_DENIED
    assert denial_for(actor("auditor")) == ErrorCatalog.PERMISSION_DENIED
    assert denial_for(None) == ErrorCatalog.PERMISSION_DENIED


def test_access_guard_binds_lookups_and_denial():
    guard = AccessGuard(
        AuthorizedScope.for_org(ORG_A),
        denial=ErrorCatalog.ORG_ACCESS_DENIED,
        site_org_lookup=_site_org,
        org_site_lookup=_org_sites,
    )

    guard.assert_site_access(SITE_A1)
    with pytest.raises(AppError) as exc:
        guard.assert_site_access(SITE_B1)
    assert exc.value.error == ErrorCatalog.ORG_ACCESS_DENIED
    assert guard.scoped_list(lambda r: sorted(r.site_ids), [SITE_A1, SITE_B1]) == [SITE_A1]
