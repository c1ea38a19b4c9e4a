import uuid

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials
from jose import JWTError
from pydantic import ValidationError

from app.sitescope.core.actor import ActorContext, Role, build_actor_context
from app.sitescope.core.config import settings
from app.sitescope.core.context import build_request_context
from app.sitescope.core.error_catalog import AppError, ErrorCatalog
from app.sitescope.core.scope import AuthorizedScope
from app.sitescope.core.security import TokenData, bearer_scheme, decode_token
from app.sitescope.db.session import get_db
from app.sitescope.repos.mappings import PartnerSiteMappingRepository
from app.sitescope.repos.profiles import ProfileRepository
from app.sitescope.repos.sites import SiteRepository
from app.sitescope.services.access_guard import AccessGuard, denial_for
from app.sitescope.services.site_scope import FallbackPolicy, SiteSetResolver


def get_current_token_data(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> TokenData:
    if credentials is None or not credentials.credentials:
        raise AppError(ErrorCatalog.INVALID_TOKEN)
    try:
        payload = decode_token(credentials.credentials)
        token_data = TokenData(**payload)
        uuid.UUID(token_data.sub)
    except (JWTError, ValidationError, TypeError, ValueError) as exc:
        raise AppError(ErrorCatalog.INVALID_TOKEN) from exc
    return token_data


def resolve_actor(
    request: Request,
    token_data: TokenData = Depends(get_current_token_data),
    db=Depends(get_db),
) -> ActorContext:
    profile = ProfileRepository(db).get_by_id(token_data.sub)
    if profile is None:
        raise AppError(ErrorCatalog.PROFILE_NOT_FOUND)
    if profile.status != "active":
        raise AppError(ErrorCatalog.USER_INACTIVE)

    actor = build_actor_context(profile)
    request.state.user_id = actor.user_id
    request.state.role = actor.role
    request.state.context = build_request_context(
        user_id=actor.user_id,
        role=actor.role,
        trace_id=getattr(request.state, "trace_id", ""),
    )
    return actor


def get_authorized_scope(
    actor: ActorContext = Depends(resolve_actor),
    db=Depends(get_db),
) -> AuthorizedScope:
    resolver = SiteSetResolver(
        PartnerSiteMappingRepository(db),
        fallback_policy=FallbackPolicy.from_flag(settings.ENABLE_SITE_PARTNERS_FALLBACK),
    )
    return resolver.resolve(actor)


def get_access_guard(
    actor: ActorContext = Depends(resolve_actor),
    scope: AuthorizedScope = Depends(get_authorized_scope),
    db=Depends(get_db),
) -> AccessGuard:
    sites = SiteRepository(db)
    return AccessGuard(
        scope,
        denial=denial_for(actor),
        site_org_lookup=sites.get_organization_id,
        org_site_lookup=sites.list_ids_by_organization,
    )


def require_roles(*roles: Role):
    allowed = frozenset(roles)

    def dependency(actor: ActorContext = Depends(resolve_actor)) -> ActorContext:
        if actor.known_role not in allowed:
            raise AppError(ErrorCatalog.PERMISSION_DENIED)
        return actor

    return dependency


__all__ = [
    "get_current_token_data",
    "resolve_actor",
    "get_authorized_scope",
    "get_access_guard",
    "require_roles",
]
