from datetime import date

from tests.site_scope_helpers import (
    auth_headers,
    create_daily_report,
    create_organization,
    create_profile,
    create_site,
)


def _setup(db_session):
    org = create_organization(db_session, name="Org A")
    site_a = create_site(db_session, organization=org, name="A")
    site_b = create_site(db_session, organization=org, name="B")
    worker = create_profile(db_session, role="worker", organization=org, site=site_a)
    other_worker = create_profile(db_session, role="worker", organization=org, site=site_a)
    return site_a, site_b, worker, other_worker


def test_worker_reads_only_own_reports(client, db_session):
    site_a, site_b, worker, other_worker = _setup(db_session)
    own_a = create_daily_report(db_session, site=site_a, created_by=worker, work_date=date(2024, 3, 1))
    own_b = create_daily_report(db_session, site=site_b, created_by=worker, work_date=date(2024, 3, 2))
    create_daily_report(db_session, site=site_a, created_by=other_worker, work_date=date(2024, 3, 1))

    response = client.get("/sitescope/daily-reports", headers=auth_headers(worker))

    assert response.status_code == 200
    ids = {item["id"] for item in response.json()["reports"]}
    assert ids == {str(own_a.id), str(own_b.id)}


def test_worker_can_narrow_own_reports_by_site(client, db_session):
    site_a, site_b, worker, _other_worker = _setup(db_session)
    create_daily_report(db_session, site=site_a, created_by=worker, work_date=date(2024, 3, 1))
    own_b = create_daily_report(db_session, site=site_b, created_by=worker, work_date=date(2024, 3, 2))

    response = client.get(
        "/sitescope/daily-reports",
        params={"site_id": str(site_b.id)},
        headers=auth_headers(worker),
    )

    assert [item["id"] for item in response.json()["reports"]] == [str(own_b.id)]


def test_site_manager_reads_all_reports_for_their_site(client, db_session):
    site_a, site_b, worker, other_worker = _setup(db_session)
    manager = create_profile(db_session, role="site_manager", site=site_a)
    create_daily_report(db_session, site=site_a, created_by=worker, work_date=date(2024, 3, 1))
    create_daily_report(db_session, site=site_a, created_by=other_worker, work_date=date(2024, 3, 1))
    create_daily_report(db_session, site=site_b, created_by=worker, work_date=date(2024, 3, 1))

    response = client.get("/sitescope/daily-reports", headers=auth_headers(manager))

    payload = response.json()
    assert payload["pagination"]["total"] == 2
    assert {item["site_id"] for item in payload["reports"]} == {str(site_a.id)}


def test_date_filters_apply(client, db_session):
    site_a, _site_b, worker, _other_worker = _setup(db_session)
    create_daily_report(db_session, site=site_a, created_by=worker, work_date=date(2024, 3, 1))
    march_5 = create_daily_report(db_session, site=site_a, created_by=worker, work_date=date(2024, 3, 5))

    response = client.get(
        "/sitescope/daily-reports",
        params={"from": "2024-03-03", "to": "2024-03-10"},
        headers=auth_headers(worker),
    )

    assert [item["id"] for item in response.json()["reports"]] == [str(march_5.id)]


def test_inverted_date_range_is_rejected(client, db_session):
    _site_a, _site_b, worker, _other_worker = _setup(db_session)

    response = client.get(
        "/sitescope/daily-reports",
        params={"from": "2024-03-10", "to": "2024-03-01"},
        headers=auth_headers(worker),
    )

    assert response.status_code == 422
    assert response.json()["code"] == "VALIDATION_ERROR"
