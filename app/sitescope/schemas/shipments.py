from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, Field

from app.sitescope.schemas.common import ListPaginationMeta


ShipmentStatus = Literal["preparing", "shipped", "delivered", "cancelled"]


class ShipmentItem(BaseModel):
    id: str
    site_id: str
    status: str
    tracking_number: str | None = None
    shipment_date: date | None = None
    created_at: datetime
    updated_at: datetime | None = None


class ShipmentListResponse(BaseModel):
    shipments: list[ShipmentItem]
    pagination: ListPaginationMeta
    trace_id: str


class ShipmentStatusUpdateRequest(BaseModel):
    status: ShipmentStatus
    tracking_number: str | None = Field(default=None, max_length=100)


class ShipmentStatusUpdateResponse(BaseModel):
    id: str
    status: str
    trace_id: str
