from fastapi import APIRouter, Depends, Query, Request

from app.sitescope.core.actor import ActorContext, Role
from app.sitescope.core.config import settings
from app.sitescope.core.deps import get_access_guard, require_roles
from app.sitescope.core.scope import ScopeMode
from app.sitescope.db.session import get_db
from app.sitescope.repos.analytics import AnalyticsMetricRepository
from app.sitescope.routers.common import parse_optional_identifier, trace_id
from app.sitescope.schemas.analytics import MetricRow, MetricsMeta, MetricsResponse
from app.sitescope.services.access_guard import AccessGuard
from app.sitescope.services.date_ranges import resolve_date_range, validate_date_range

router = APIRouter()


@router.get("/sitescope/analytics/metrics", response_model=MetricsResponse)
def list_metrics(
    request: Request,
    from_value: str | None = Query(None, alias="from"),
    to_value: str | None = Query(None, alias="to"),
    site_id: str | None = Query(None),
    organization_id: str | None = Query(None),
    metric_type: str | None = Query(None, alias="type"),
    _actor: ActorContext = Depends(require_roles(Role.SYSTEM_ADMIN, Role.ADMIN, Role.SITE_MANAGER)),
    guard: AccessGuard = Depends(get_access_guard),
    db=Depends(get_db),
):
    # Input validation is independent of scoping; both always apply.
    date_range = resolve_date_range(from_value, to_value)
    validate_date_range(date_range, max_days=settings.ANALYTICS_MAX_DATE_RANGE_DAYS)
    requested_site_id = parse_optional_identifier(site_id, "site_id")
    requested_org_id = parse_optional_identifier(organization_id, "organization_id")

    # Sites scopes narrow by site; the organization filter only narrows further.
    if requested_org_id and guard.scope.mode is ScopeMode.ORG:
        guard.assert_org_access(requested_org_id)

    repo = AnalyticsMetricRepository(db)
    rows = guard.scoped_list(
        lambda restriction: repo.list(
            restriction,
            start_date=date_range.start_date,
            end_date=date_range.end_date,
            metric_type=metric_type,
            organization_id=requested_org_id,
        ),
        [requested_site_id] if requested_site_id else None,
    )
    return MetricsResponse(
        meta=MetricsMeta(
            from_date=date_range.start_date,
            to_date=date_range.end_date,
            metric_type=metric_type,
            site_id=requested_site_id,
            trace_id=trace_id(request),
        ),
        rows=[
            MetricRow(
                id=str(row.id),
                organization_id=str(row.organization_id) if row.organization_id else None,
                site_id=str(row.site_id) if row.site_id else None,
                metric_type=row.metric_type,
                metric_date=row.metric_date,
                value=row.value,
            )
            for row in rows
        ],
    )
