from __future__ import annotations

import json
import logging

from app.sitescope.core.config import settings

_JSON_FORMAT = "%(message)s"


def configure_logging() -> None:
    level = logging.getLevelName(settings.LOG_LEVEL.upper())
    if not isinstance(level, int):
        level = logging.INFO
    root = logging.getLogger()
    if root.handlers:
        # Already configured by the host process (uvicorn, pytest); only align the level.
        logging.getLogger("sitescope").setLevel(level)
        return
    logging.basicConfig(level=level, format=_JSON_FORMAT)


def log_json(logger: logging.Logger, payload: dict, *, level: int = logging.INFO) -> None:
    """Emit ``payload`` as one JSON line; every scoping and request event goes through here."""
    logger.log(level, json.dumps(payload, ensure_ascii=False, default=str, sort_keys=True))
