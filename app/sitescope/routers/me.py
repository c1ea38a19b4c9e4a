from fastapi import APIRouter, Depends, Request

from app.sitescope.core.actor import ActorContext
from app.sitescope.core.deps import get_authorized_scope, resolve_actor
from app.sitescope.core.scope import AuthorizedScope
from app.sitescope.routers.common import trace_id
from app.sitescope.schemas.scope import ActorSummary, ScopeResponse

router = APIRouter()


@router.get("/sitescope/me/scope", response_model=ScopeResponse)
def get_my_scope(
    request: Request,
    actor: ActorContext = Depends(resolve_actor),
    scope: AuthorizedScope = Depends(get_authorized_scope),
):
    return ScopeResponse(
        actor=ActorSummary(
            user_id=actor.user_id,
            email=actor.email,
            role=actor.role,
            organization_id=actor.organization_id,
            is_restricted=actor.is_restricted,
            partner_company_id=actor.partner_company_id,
        ),
        trace_id=trace_id(request),
        **scope.as_dict(),
    )
