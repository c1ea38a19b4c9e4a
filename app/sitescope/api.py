from fastapi import APIRouter

from app.sitescope.core.config import settings
from app.sitescope.routers.analytics import router as analytics_router
from app.sitescope.routers.daily_reports import router as daily_reports_router
from app.sitescope.routers.health import router as health_router
from app.sitescope.routers.materials import router as materials_router
from app.sitescope.routers.me import router as me_router
from app.sitescope.routers.metrics import router as metrics_router
from app.sitescope.routers.partner import router as partner_router
from app.sitescope.routers.shipments import router as shipments_router
from app.sitescope.schemas.errors import ApiErrorResponse, ApiValidationErrorResponse

SCOPED_ERROR_RESPONSES = {
    401: {"model": ApiErrorResponse, "description": "Missing or invalid bearer token"},
    403: {"model": ApiErrorResponse, "description": "Outside the caller's authorized scope"},
    404: {"model": ApiErrorResponse, "description": "Profile or resource not found"},
    422: {"model": ApiValidationErrorResponse, "description": "Validation error"},
    503: {"model": ApiErrorResponse, "description": "Site assignments unavailable"},
}

api_router = APIRouter()
api_router.include_router(health_router)
api_router.include_router(me_router, tags=["scope"], responses=SCOPED_ERROR_RESPONSES)
api_router.include_router(partner_router, tags=["partner"], responses=SCOPED_ERROR_RESPONSES)
api_router.include_router(materials_router, tags=["materials"], responses=SCOPED_ERROR_RESPONSES)
api_router.include_router(shipments_router, tags=["shipments"], responses=SCOPED_ERROR_RESPONSES)
api_router.include_router(daily_reports_router, tags=["daily-reports"], responses=SCOPED_ERROR_RESPONSES)
api_router.include_router(analytics_router, tags=["analytics"], responses=SCOPED_ERROR_RESPONSES)
if settings.METRICS_ENABLED:
    api_router.include_router(metrics_router, tags=["ops"])
