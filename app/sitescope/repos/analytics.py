from datetime import date

from sqlalchemy import select

from app.sitescope.core.scope import SiteRestriction
from app.sitescope.db.models import AnalyticsMetric
from app.sitescope.repos.filters import apply_site_restriction


class AnalyticsMetricRepository:
    def __init__(self, db):
        self.db = db

    def list(
        self,
        restriction: SiteRestriction,
        *,
        start_date: date,
        end_date: date,
        metric_type: str | None = None,
        organization_id: str | None = None,
    ):
        stmt = select(AnalyticsMetric).where(
            AnalyticsMetric.metric_date >= start_date,
            AnalyticsMetric.metric_date <= end_date,
        )
        stmt = apply_site_restriction(
            stmt,
            AnalyticsMetric.site_id,
            restriction,
            org_column=AnalyticsMetric.organization_id,
        )
        if metric_type:
            stmt = stmt.where(AnalyticsMetric.metric_type == metric_type)
        if organization_id:
            stmt = stmt.where(AnalyticsMetric.organization_id == organization_id)
        stmt = stmt.order_by(AnalyticsMetric.metric_date.desc(), AnalyticsMetric.metric_type.asc())
        return self.db.execute(stmt).scalars().all()
