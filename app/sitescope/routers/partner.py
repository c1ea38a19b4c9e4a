from fastapi import APIRouter, Depends, Query, Request

from app.sitescope.core.actor import ActorContext, Role
from app.sitescope.core.deps import get_access_guard, require_roles
from app.sitescope.core.error_catalog import AppError, ErrorCatalog
from app.sitescope.db.session import get_db
from app.sitescope.repos.sites import SiteRepository
from app.sitescope.routers.common import parse_optional_identifier, trace_id
from app.sitescope.schemas.sites import SiteItem, SiteListResponse
from app.sitescope.services.access_guard import AccessGuard

router = APIRouter()


@router.get("/sitescope/partner/sites", response_model=SiteListResponse)
def list_partner_sites(
    request: Request,
    site_id: str | None = Query(None),
    status: str | None = Query(None),
    actor: ActorContext = Depends(require_roles(Role.PARTNER, Role.CUSTOMER_MANAGER)),
    guard: AccessGuard = Depends(get_access_guard),
    db=Depends(get_db),
):
    if not actor.partner_company_id:
        raise AppError(ErrorCatalog.MISSING_PARTNER_COMPANY)
    requested_site_id = parse_optional_identifier(site_id, "site_id")
    requested = [requested_site_id] if requested_site_id else None

    repo = SiteRepository(db)
    sites = guard.scoped_list(lambda restriction: repo.list_by_ids(restriction.site_ids, status=status), requested)
    items = [
        SiteItem(
            id=str(site.id),
            name=site.name,
            address=site.address,
            status=site.status,
            organization_id=str(site.organization_id) if site.organization_id else None,
        )
        for site in sites
    ]
    return SiteListResponse(sites=items, total=len(items), trace_id=trace_id(request))
