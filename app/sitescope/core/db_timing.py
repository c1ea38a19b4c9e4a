from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator

# Holds a mutable accumulator so sync endpoints running in the threadpool
# (which see a copied context) still add to the request's total.
_request_db_ms: ContextVar[list[float] | None] = ContextVar("request_db_ms", default=None)


@contextmanager
def track_db_time() -> Iterator[None]:
    token = _request_db_ms.set([0.0])
    try:
        yield
    finally:
        _request_db_ms.reset(token)


def is_tracking() -> bool:
    return _request_db_ms.get() is not None


def record_query_ms(elapsed_ms: float) -> None:
    bucket = _request_db_ms.get()
    if bucket is None:
        return
    bucket[0] += elapsed_ms


def current_db_ms() -> float | None:
    bucket = _request_db_ms.get()
    return bucket[0] if bucket is not None else None
