from datetime import date

from sqlalchemy import func, select

from app.sitescope.core.scope import SiteRestriction
from app.sitescope.db.models import DailyReport
from app.sitescope.repos.filters import apply_page, apply_site_restriction


class DailyReportRepository:
    def __init__(self, db):
        self.db = db

    def list(
        self,
        restriction: SiteRestriction,
        *,
        created_by: str | None = None,
        work_date_from: date | None = None,
        work_date_to: date | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ):
        stmt = apply_site_restriction(select(DailyReport), DailyReport.site_id, restriction)
        count_stmt = apply_site_restriction(
            select(func.count()).select_from(DailyReport),
            DailyReport.site_id,
            restriction,
        )
        if created_by:
            stmt = stmt.where(DailyReport.created_by == created_by)
            count_stmt = count_stmt.where(DailyReport.created_by == created_by)
        if work_date_from:
            stmt = stmt.where(DailyReport.work_date >= work_date_from)
            count_stmt = count_stmt.where(DailyReport.work_date >= work_date_from)
        if work_date_to:
            stmt = stmt.where(DailyReport.work_date <= work_date_to)
            count_stmt = count_stmt.where(DailyReport.work_date <= work_date_to)
        stmt = apply_page(
            stmt.order_by(DailyReport.work_date.desc(), DailyReport.created_at.desc()),
            limit=limit,
            offset=offset,
        )
        rows = self.db.execute(stmt).scalars().all()
        total = self.db.execute(count_stmt).scalar_one()
        return rows, total
