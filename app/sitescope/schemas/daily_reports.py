from datetime import date, datetime

from pydantic import BaseModel

from app.sitescope.schemas.common import ListPaginationMeta


class DailyReportItem(BaseModel):
    id: str
    site_id: str
    created_by: str
    work_date: date
    status: str
    summary: str | None = None
    created_at: datetime


class DailyReportListResponse(BaseModel):
    reports: list[DailyReportItem]
    pagination: ListPaginationMeta
    trace_id: str
