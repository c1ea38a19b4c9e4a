from datetime import date

from pydantic import BaseModel


class MetricRow(BaseModel):
    id: str
    organization_id: str | None = None
    site_id: str | None = None
    metric_type: str
    metric_date: date
    value: float


class MetricsMeta(BaseModel):
    from_date: date
    to_date: date
    metric_type: str | None = None
    site_id: str | None = None
    trace_id: str


class MetricsResponse(BaseModel):
    meta: MetricsMeta
    rows: list[MetricRow]
