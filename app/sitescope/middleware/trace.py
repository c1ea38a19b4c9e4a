import re
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

TRACE_HEADER = "X-Trace-ID"
# Trace ids are stored on audit rows; anything else is replaced.
_TRACE_ID_PATTERN = re.compile(r"^[A-Za-z0-9._:-]{1,100}$")


def resolve_trace_id(header_value: str | None) -> str:
    candidate = (header_value or "").strip()
    if candidate and _TRACE_ID_PATTERN.match(candidate):
        return candidate
    return str(uuid.uuid4())


class TraceIdMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        request.state.trace_id = resolve_trace_id(request.headers.get(TRACE_HEADER))
        response: Response = await call_next(request)
        response.headers[TRACE_HEADER] = request.state.trace_id
        return response
