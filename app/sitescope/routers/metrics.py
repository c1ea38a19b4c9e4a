from fastapi import APIRouter, Response

from app.sitescope.core.metrics import metrics

router = APIRouter()


@router.get("/sitescope/ops/metrics", include_in_schema=False)
def get_metrics():
    """Prometheus scrape endpoint for request and scope-resolution counters."""
    snapshot = metrics.render()
    return Response(
        content=snapshot.content,
        media_type=snapshot.content_type,
        headers={"Cache-Control": "no-store"},
    )
