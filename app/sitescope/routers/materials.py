from fastapi import APIRouter, Depends, Query, Request

from app.sitescope.core.actor import ActorContext, Role
from app.sitescope.core.deps import get_access_guard, require_roles
from app.sitescope.core.error_catalog import AppError, ErrorCatalog
from app.sitescope.core.scope import SiteRestriction
from app.sitescope.db.session import get_db
from app.sitescope.repos.materials import MaterialRequestRepository
from app.sitescope.routers.common import (
    pagination_meta,
    parse_identifier,
    parse_optional_identifier,
    resolve_page,
    trace_id,
)
from app.sitescope.schemas.materials import (
    MaterialRequestApprovalRequest,
    MaterialRequestApprovalResponse,
    MaterialRequestBulkApprovalRequest,
    MaterialRequestItem,
    MaterialRequestListResponse,
)
from app.sitescope.services.access_guard import AccessGuard
from app.sitescope.services.audit import AuditService

router = APIRouter()

_APPROVER_ROLES = (Role.SYSTEM_ADMIN, Role.ADMIN, Role.SITE_MANAGER)
_DECISION_STATUS = {"approve": "approved", "reject": "cancelled"}
_DECISION_NOTE = {"approve": "admin approved", "reject": "admin rejected"}


def _request_item(row) -> MaterialRequestItem:
    return MaterialRequestItem(
        id=str(row.id),
        site_id=str(row.site_id),
        material_name=row.material_name,
        quantity=row.quantity,
        status=row.status,
        approved_by=str(row.approved_by) if row.approved_by else None,
        approved_at=row.approved_at,
        notes=row.notes,
        created_at=row.created_at,
    )


@router.get("/sitescope/material-requests", response_model=MaterialRequestListResponse)
def list_material_requests(
    request: Request,
    site_id: str | None = Query(None),
    status: str | None = Query(None),
    limit: int | None = Query(None, ge=1),
    offset: int | None = Query(None, ge=0),
    guard: AccessGuard = Depends(get_access_guard),
    db=Depends(get_db),
):
    requested_site_id = parse_optional_identifier(site_id, "site_id")
    resolved_limit, resolved_offset = resolve_page(limit, offset)
    restriction = guard.filter_to_scope([requested_site_id] if requested_site_id else None)
    if restriction.is_empty:
        return MaterialRequestListResponse(
            requests=[],
            pagination=pagination_meta(total=0, count=0, limit=resolved_limit, offset=resolved_offset),
            trace_id=trace_id(request),
        )

    rows, total = MaterialRequestRepository(db).list(
        restriction,
        status=status,
        limit=resolved_limit,
        offset=resolved_offset,
    )
    return MaterialRequestListResponse(
        requests=[_request_item(row) for row in rows],
        pagination=pagination_meta(total=total, count=len(rows), limit=resolved_limit, offset=resolved_offset),
        trace_id=trace_id(request),
    )


def _apply_decision(
    request: Request,
    *,
    request_ids: list[str],
    action: str,
    comments: str | None,
    actor: ActorContext,
    guard: AccessGuard,
    db,
) -> MaterialRequestApprovalResponse:
    repo = MaterialRequestRepository(db)
    status = _DECISION_STATUS[action]

    def load():
        rows = repo.list_by_ids(request_ids)
        if len(rows) != len(request_ids):
            raise AppError(ErrorCatalog.RESOURCE_NOT_FOUND)
        return rows

    def mutate(_rows, restriction: SiteRestriction) -> int:
        updated = repo.set_decision(
            request_ids,
            restriction,
            status=status,
            approved_by=actor.user_id if action == "approve" else None,
            notes=f"{comments} ({_DECISION_NOTE[action]})" if comments else None,
        )
        if updated != len(request_ids):
            db.rollback()
            guard.ensure_rows_affected(updated, len(request_ids))
        db.commit()
        return updated

    def on_denied(_rows) -> None:
        AuditService(db).record_denial(
            actor,
            resource_type="material_request",
            resource_ids=request_ids,
            trace_id=trace_id(request),
            reason=f"{action}_out_of_scope",
        )

    updated = guard.with_scoped_mutation(load, mutate, on_denied=on_denied)
    return MaterialRequestApprovalResponse(updated=updated, status=status, trace_id=trace_id(request))


@router.post("/sitescope/material-requests/{request_id}/approval", response_model=MaterialRequestApprovalResponse)
def decide_material_request(
    request: Request,
    request_id: str,
    payload: MaterialRequestApprovalRequest,
    actor: ActorContext = Depends(require_roles(*_APPROVER_ROLES)),
    guard: AccessGuard = Depends(get_access_guard),
    db=Depends(get_db),
):
    return _apply_decision(
        request,
        request_ids=[parse_identifier(request_id, "request_id")],
        action=payload.action,
        comments=payload.comments,
        actor=actor,
        guard=guard,
        db=db,
    )


@router.post("/sitescope/material-requests/approvals", response_model=MaterialRequestApprovalResponse)
def decide_material_requests(
    request: Request,
    payload: MaterialRequestBulkApprovalRequest,
    actor: ActorContext = Depends(require_roles(*_APPROVER_ROLES)),
    guard: AccessGuard = Depends(get_access_guard),
    db=Depends(get_db),
):
    request_ids = sorted({parse_identifier(value, "request_ids") for value in payload.request_ids})
    return _apply_decision(
        request,
        request_ids=request_ids,
        action=payload.action,
        comments=payload.comments,
        actor=actor,
        guard=guard,
        db=db,
    )
