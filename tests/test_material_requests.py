from app.sitescope.db.models import MaterialRequest
from app.sitescope.repos.audit import AuditRepository
from app.sitescope.repos.sites import SiteRepository
from tests.site_scope_helpers import (
    auth_headers,
    create_material_request,
    create_organization,
    create_partner_company,
    create_profile,
    create_site,
    map_partner_site,
)


def _two_orgs(db_session):
    org_a = create_organization(db_session, name="Org A")
    org_b = create_organization(db_session, name="Org B")
    site_a = create_site(db_session, organization=org_a, name="A1")
    site_b = create_site(db_session, organization=org_b, name="B1")
    return org_a, org_b, site_a, site_b


def _status(db_session, request_id):
    db_session.expire_all()
    return db_session.get(MaterialRequest, request_id).status


def test_restricted_admin_cannot_approve_other_org_request(client, db_session):
    org_a, _org_b, _site_a, site_b = _two_orgs(db_session)
    admin = create_profile(db_session, role="admin", organization=org_a, is_restricted=True, restricted_org=org_a)
    foreign = create_material_request(db_session, site=site_b)

    response = client.post(
        f"/sitescope/material-requests/{foreign.id}/approval",
        json={"action": "approve"},
        headers=auth_headers(admin),
    )

    assert response.status_code == 403
    payload = response.json()
    assert payload["code"] == "ORG_ACCESS_DENIED"
    assert str(site_b.id) not in response.text
    assert _status(db_session, foreign.id) == "pending"

    events = AuditRepository(db_session).list_by_action("material_request.access_denied")
    assert len(events) == 1
    assert events[0].result == "denied"
    assert events[0].resource_id == str(foreign.id)


def test_restricted_admin_approves_own_org_request(client, db_session):
    org_a, _org_b, site_a, _site_b = _two_orgs(db_session)
    admin = create_profile(db_session, role="admin", organization=org_a, is_restricted=True, restricted_org=org_a)
    own = create_material_request(db_session, site=site_a)

    response = client.post(
        f"/sitescope/material-requests/{own.id}/approval",
        json={"action": "approve", "comments": "ok"},
        headers=auth_headers(admin),
    )

    assert response.status_code == 200
    assert response.json()["updated"] == 1
    assert response.json()["status"] == "approved"
    db_session.expire_all()
    stored = db_session.get(MaterialRequest, own.id)
    assert stored.status == "approved"
    assert str(stored.approved_by) == str(admin.id)
    assert stored.notes == "ok (admin approved)"


def test_reject_marks_request_cancelled(client, db_session):
    _org_a, _org_b, site_a, _site_b = _two_orgs(db_session)
    manager = create_profile(db_session, role="site_manager", site=site_a)
    own = create_material_request(db_session, site=site_a)

    response = client.post(
        f"/sitescope/material-requests/{own.id}/approval",
        json={"action": "reject"},
        headers=auth_headers(manager),
    )

    assert response.status_code == 200
    assert _status(db_session, own.id) == "cancelled"


def test_bulk_approval_is_all_or_nothing(client, db_session):
    _org_a, _org_b, site_a, site_b = _two_orgs(db_session)
    manager = create_profile(db_session, role="site_manager", site=site_a)
    own = create_material_request(db_session, site=site_a)
    foreign = create_material_request(db_session, site=site_b)

    response = client.post(
        "/sitescope/material-requests/approvals",
        json={"action": "approve", "request_ids": [str(own.id), str(foreign.id)]},
        headers=auth_headers(manager),
    )

    assert response.status_code == 403
    assert response.json()["code"] == "SITE_ACCESS_DENIED"
    assert _status(db_session, own.id) == "pending"
    assert _status(db_session, foreign.id) == "pending"


def test_bulk_approval_within_scope(client, db_session):
    _org_a, _org_b, site_a, _site_b = _two_orgs(db_session)
    manager = create_profile(db_session, role="site_manager", site=site_a)
    first = create_material_request(db_session, site=site_a)
    second = create_material_request(db_session, site=site_a, material_name="Cement")

    response = client.post(
        "/sitescope/material-requests/approvals",
        json={"action": "approve", "request_ids": [str(first.id), str(second.id), str(first.id)]},
        headers=auth_headers(manager),
    )

    assert response.status_code == 200
    assert response.json()["updated"] == 2
    assert _status(db_session, first.id) == "approved"
    assert _status(db_session, second.id) == "approved"


def test_unknown_request_is_not_found(client, db_session):
    manager = create_profile(db_session, role="system_admin")

    response = client.post(
        "/sitescope/material-requests/00000000-0000-0000-0000-000000000001/approval",
        json={"action": "approve"},
        headers=auth_headers(manager),
    )

    assert response.status_code == 404
    assert response.json()["code"] == "RESOURCE_NOT_FOUND"


def test_invalid_request_id_is_validation_error(client, db_session):
    admin = create_profile(db_session, role="system_admin")

    response = client.post(
        "/sitescope/material-requests/not-a-uuid/approval",
        json={"action": "approve"},
        headers=auth_headers(admin),
    )

    assert response.status_code == 422
    assert response.json()["code"] == "VALIDATION_ERROR"


def test_workers_cannot_approve(client, db_session):
    _org_a, _org_b, site_a, _site_b = _two_orgs(db_session)
    worker = create_profile(db_session, role="worker", site=site_a)
    own = create_material_request(db_session, site=site_a)

    response = client.post(
        f"/sitescope/material-requests/{own.id}/approval",
        json={"action": "approve"},
        headers=auth_headers(worker),
    )

    assert response.status_code == 403
    assert response.json()["code"] == "PERMISSION_DENIED"


def test_partner_lists_requests_for_mapped_sites_only(client, db_session):
    org_a, _org_b, site_a, site_b = _two_orgs(db_session)
    company = create_partner_company(db_session)
    partner = create_profile(db_session, role="partner", organization=org_a, partner_company=company)
    map_partner_site(db_session, partner_company=company, site=site_a)
    own = create_material_request(db_session, site=site_a)
    create_material_request(db_session, site=site_b)

    response = client.get("/sitescope/material-requests", headers=auth_headers(partner))

    assert response.status_code == 200
    payload = response.json()
    assert [item["id"] for item in payload["requests"]] == [str(own.id)]
    assert payload["pagination"]["total"] == 1


def test_site_manager_without_site_lists_nothing(client, db_session):
    _org_a, _org_b, site_a, _site_b = _two_orgs(db_session)
    manager = create_profile(db_session, role="site_manager")
    create_material_request(db_session, site=site_a)

    response = client.get("/sitescope/material-requests", headers=auth_headers(manager))

    assert response.status_code == 200
    assert response.json()["requests"] == []
    assert response.json()["pagination"]["total"] == 0


def test_system_admin_lists_everything(client, db_session):
    _org_a, _org_b, site_a, site_b = _two_orgs(db_session)
    admin = create_profile(db_session, role="system_admin")
    create_material_request(db_session, site=site_a)
    create_material_request(db_session, site=site_b)

    response = client.get("/sitescope/material-requests", headers=auth_headers(admin))

    assert response.json()["pagination"]["total"] == 2


def test_stale_site_check_is_caught_by_conditional_update(client, db_session, monkeypatch):
    org_a, _org_b, _site_a, site_b = _two_orgs(db_session)
    admin = create_profile(db_session, role="admin", organization=org_a, is_restricted=True, restricted_org=org_a)
    foreign = create_material_request(db_session, site=site_b)
    monkeypatch.setattr(SiteRepository, "get_organization_id", lambda self, site_id: str(org_a.id))

    response = client.post(
        f"/sitescope/material-requests/{foreign.id}/approval",
        json={"action": "approve"},
        headers=auth_headers(admin),
    )

    assert response.status_code == 403
    assert response.json()["code"] == "ORG_ACCESS_DENIED"
    assert _status(db_session, foreign.id) == "pending"
    events = AuditRepository(db_session).list_by_action("material_request.access_denied", user_id=str(admin.id))
    assert len(events) == 1


def test_bulk_approval_short_update_rolls_back_every_row(client, db_session, monkeypatch):
    org_a, _org_b, site_a, site_b = _two_orgs(db_session)
    admin = create_profile(db_session, role="admin", organization=org_a, is_restricted=True, restricted_org=org_a)
    own = create_material_request(db_session, site=site_a)
    second = create_material_request(db_session, site=site_a, material_name="Cement")
    foreign = create_material_request(db_session, site=site_b)
    monkeypatch.setattr(SiteRepository, "get_organization_id", lambda self, site_id: str(org_a.id))

    response = client.post(
        "/sitescope/material-requests/approvals",
        json={"action": "approve", "request_ids": [str(own.id), str(second.id), str(foreign.id)]},
        headers=auth_headers(admin),
    )

    assert response.status_code == 403
    assert response.json()["code"] == "ORG_ACCESS_DENIED"
    assert _status(db_session, own.id) == "pending"
    assert _status(db_session, second.id) == "pending"
    assert _status(db_session, foreign.id) == "pending"
    events = AuditRepository(db_session).list_by_action("material_request.access_denied", user_id=str(admin.id))
    assert len(events) == 1


def test_decision_without_comment_keeps_existing_notes(client, db_session):
    _org_a, _org_b, site_a, _site_b = _two_orgs(db_session)
    manager = create_profile(db_session, role="site_manager", site=site_a)
    quiet = create_material_request(db_session, site=site_a)
    noted = create_material_request(db_session, site=site_a, material_name="Cement")
    quiet.notes = "deliver before noon"
    db_session.commit()

    client.post(
        f"/sitescope/material-requests/{quiet.id}/approval",
        json={"action": "reject"},
        headers=auth_headers(manager),
    )
    client.post(
        f"/sitescope/material-requests/{noted.id}/approval",
        json={"action": "reject", "comments": "duplicate"},
        headers=auth_headers(manager),
    )

    db_session.expire_all()
    assert db_session.get(MaterialRequest, quiet.id).notes == "deliver before noon"
    assert db_session.get(MaterialRequest, noted.id).notes == "duplicate (admin rejected)"
