import uuid

from fastapi import Request

from app.sitescope.core.config import settings
from app.sitescope.core.error_catalog import AppError, ErrorCatalog
from app.sitescope.schemas.common import ListPaginationMeta


def trace_id(request: Request) -> str:
    return getattr(request.state, "trace_id", "")


def parse_identifier(value: str, field: str) -> str:
    try:
        return str(uuid.UUID(str(value).strip()))
    except (ValueError, AttributeError) as exc:
        raise AppError(
            ErrorCatalog.VALIDATION_ERROR,
            details={"message": "invalid identifier", "field": field},
        ) from exc


def parse_optional_identifier(value: str | None, field: str) -> str | None:
    if value is None or not str(value).strip():
        return None
    return parse_identifier(value, field)


def resolve_page(limit: int | None, offset: int | None) -> tuple[int, int]:
    max_limit = settings.LIST_MAX_PAGE_SIZE
    resolved_limit = min(limit or max_limit, max_limit)
    return resolved_limit, max(offset or 0, 0)


def pagination_meta(*, total: int, count: int, limit: int, offset: int) -> ListPaginationMeta:
    return ListPaginationMeta(total=total, count=count, limit=limit, offset=offset)
