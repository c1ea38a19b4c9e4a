from fastapi import APIRouter, Depends, Query, Request

from app.sitescope.core.actor import ActorContext, Role
from app.sitescope.core.deps import get_access_guard, require_roles
from app.sitescope.core.error_catalog import AppError, ErrorCatalog
from app.sitescope.core.scope import SiteRestriction
from app.sitescope.db.session import get_db
from app.sitescope.repos.shipments import ShipmentRepository
from app.sitescope.routers.common import (
    pagination_meta,
    parse_identifier,
    parse_optional_identifier,
    resolve_page,
    trace_id,
)
from app.sitescope.schemas.shipments import (
    ShipmentItem,
    ShipmentListResponse,
    ShipmentStatusUpdateRequest,
    ShipmentStatusUpdateResponse,
)
from app.sitescope.services.access_guard import AccessGuard
from app.sitescope.services.audit import AuditService

router = APIRouter()


def _shipment_item(row) -> ShipmentItem:
    return ShipmentItem(
        id=str(row.id),
        site_id=str(row.site_id),
        status=row.status,
        tracking_number=row.tracking_number,
        shipment_date=row.shipment_date,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


@router.get("/sitescope/shipments", response_model=ShipmentListResponse)
def list_shipments(
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
        return ShipmentListResponse(
            shipments=[],
            pagination=pagination_meta(total=0, count=0, limit=resolved_limit, offset=resolved_offset),
            trace_id=trace_id(request),
        )

    rows, total = ShipmentRepository(db).list(
        restriction,
        status=status,
        limit=resolved_limit,
        offset=resolved_offset,
    )
    return ShipmentListResponse(
        shipments=[_shipment_item(row) for row in rows],
        pagination=pagination_meta(total=total, count=len(rows), limit=resolved_limit, offset=resolved_offset),
        trace_id=trace_id(request),
    )


@router.patch("/sitescope/shipments/{shipment_id}/status", response_model=ShipmentStatusUpdateResponse)
def update_shipment_status(
    request: Request,
    shipment_id: str,
    payload: ShipmentStatusUpdateRequest,
    actor: ActorContext = Depends(require_roles(Role.SYSTEM_ADMIN, Role.ADMIN, Role.SITE_MANAGER)),
    guard: AccessGuard = Depends(get_access_guard),
    db=Depends(get_db),
):
    shipment_id = parse_identifier(shipment_id, "shipment_id")
    repo = ShipmentRepository(db)

    def load():
        shipment = repo.get_by_id(shipment_id)
        if shipment is None:
            raise AppError(ErrorCatalog.RESOURCE_NOT_FOUND)
        return shipment

    def mutate(_shipment, restriction: SiteRestriction) -> None:
        updated = repo.set_status(
            shipment_id,
            restriction,
            status=payload.status,
            tracking_number=payload.tracking_number,
        )
        if updated != 1:
            db.rollback()
            guard.ensure_rows_affected(updated, 1)
        db.commit()

    def on_denied(_shipment) -> None:
        AuditService(db).record_denial(
            actor,
            resource_type="shipment",
            resource_ids=[shipment_id],
            trace_id=trace_id(request),
            reason="status_update_out_of_scope",
        )

    guard.with_scoped_mutation(load, mutate, on_denied=on_denied)
    return ShipmentStatusUpdateResponse(id=shipment_id, status=payload.status, trace_id=trace_id(request))
