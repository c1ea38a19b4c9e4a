from typing import Any

from pydantic import BaseModel, Field


class ApiErrorResponse(BaseModel):
    code: str = Field(..., description="Stable error code, e.g. ORG_ACCESS_DENIED or MAPPING_UNAVAILABLE")
    message: str = Field(..., description="Actor-facing message; never names out-of-scope records")
    details: dict | None = None
    trace_id: str | None = None


class ApiFieldError(BaseModel):
    field: str | None = None
    message: str
    type: str
    loc: list[str | int] | None = None
    input: Any = None
    ctx: dict | None = None


class ApiValidationErrorDetails(BaseModel):
    errors: list[ApiFieldError] = Field(default_factory=list)
    field: str | None = None
    reason_code: str | None = None


class ApiValidationErrorResponse(ApiErrorResponse):
    details: ApiValidationErrorDetails | None = None
