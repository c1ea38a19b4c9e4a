from fastapi import APIRouter, Depends, Query, Request

from app.sitescope.core.actor import ActorContext, Role
from app.sitescope.core.deps import get_access_guard, resolve_actor
from app.sitescope.core.error_catalog import AppError, ErrorCatalog
from app.sitescope.core.scope import SiteRestriction
from app.sitescope.db.session import get_db
from app.sitescope.repos.daily_reports import DailyReportRepository
from app.sitescope.routers.common import pagination_meta, parse_optional_identifier, resolve_page, trace_id
from app.sitescope.schemas.daily_reports import DailyReportItem, DailyReportListResponse
from app.sitescope.services.access_guard import AccessGuard
from app.sitescope.services.date_ranges import parse_date

router = APIRouter()


def _report_item(row) -> DailyReportItem:
    return DailyReportItem(
        id=str(row.id),
        site_id=str(row.site_id),
        created_by=str(row.created_by),
        work_date=row.work_date,
        status=row.status,
        summary=row.summary,
        created_at=row.created_at,
    )


@router.get("/sitescope/daily-reports", response_model=DailyReportListResponse)
def list_daily_reports(
    request: Request,
    site_id: str | None = Query(None),
    from_value: str | None = Query(None, alias="from"),
    to_value: str | None = Query(None, alias="to"),
    limit: int | None = Query(None, ge=1),
    offset: int | None = Query(None, ge=0),
    actor: ActorContext = Depends(resolve_actor),
    guard: AccessGuard = Depends(get_access_guard),
    db=Depends(get_db),
):
    requested_site_id = parse_optional_identifier(site_id, "site_id")
    requested = [requested_site_id] if requested_site_id else None
    work_date_from = parse_date(from_value, "from")
    work_date_to = parse_date(to_value, "to")
    if work_date_from and work_date_to and work_date_to < work_date_from:
        raise AppError(ErrorCatalog.VALIDATION_ERROR, details={"message": "to must be after from"})
    resolved_limit, resolved_offset = resolve_page(limit, offset)

    created_by = None
    if actor.known_role is Role.WORKER:
        # Workers have no site scope; they may read only reports they authored.
        restriction = SiteRestriction.none() if requested is None else SiteRestriction.only(requested)
        created_by = actor.user_id
    else:
        restriction = guard.filter_to_scope(requested)

    if restriction.is_empty:
        return DailyReportListResponse(
            reports=[],
            pagination=pagination_meta(total=0, count=0, limit=resolved_limit, offset=resolved_offset),
            trace_id=trace_id(request),
        )

    rows, total = DailyReportRepository(db).list(
        restriction,
        created_by=created_by,
        work_date_from=work_date_from,
        work_date_to=work_date_to,
        limit=resolved_limit,
        offset=resolved_offset,
    )
    return DailyReportListResponse(
        reports=[_report_item(row) for row in rows],
        pagination=pagination_meta(total=total, count=len(rows), limit=resolved_limit, offset=resolved_offset),
        trace_id=trace_id(request),
    )
