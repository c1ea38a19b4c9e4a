from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from app.sitescope.schemas.common import ListPaginationMeta


ApprovalAction = Literal["approve", "reject"]


class MaterialRequestItem(BaseModel):
    id: str
    site_id: str
    material_name: str
    quantity: int
    status: str
    approved_by: str | None = None
    approved_at: datetime | None = None
    notes: str | None = None
    created_at: datetime


class MaterialRequestListResponse(BaseModel):
    requests: list[MaterialRequestItem]
    pagination: ListPaginationMeta
    trace_id: str


class MaterialRequestApprovalRequest(BaseModel):
    action: ApprovalAction
    comments: str | None = Field(default=None, max_length=1000)


class MaterialRequestBulkApprovalRequest(MaterialRequestApprovalRequest):
    request_ids: list[str] = Field(..., min_length=1, max_length=200)


class MaterialRequestApprovalResponse(BaseModel):
    updated: int
    status: str
    trace_id: str
