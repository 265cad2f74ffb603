from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

from hrms_engine.settings import get_settings

ENGINE_LOGGER_NAME = "hrms_engine"

# Attributes every LogRecord carries; anything else arrived through ``extra=``.
_STANDARD_RECORD_FIELDS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


def _json_default(value: Any) -> Any:
    # Engine log context carries dates and enums.
    if hasattr(value, "isoformat"):
        return value.isoformat()
    if hasattr(value, "value"):
        return value.value
    return str(value)


def _event_context(record: logging.LogRecord) -> dict[str, Any]:
    return {
        key: value
        for key, value in vars(record).items()
        if key not in _STANDARD_RECORD_FIELDS and not key.startswith("_")
    }


class EngineJsonFormatter(logging.Formatter):
    """One JSON object per engine event, with its ``extra=`` context inlined."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(_event_context(record))
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=_json_default, ensure_ascii=True)


def setup_logging(*, level: str | None = None, json_output: bool | None = None) -> None:
    settings = get_settings()
    resolved_level = (level or settings.log_level or "INFO").upper()
    use_json = settings.log_json if json_output is None else json_output

    handler = logging.StreamHandler()
    if use_json:
        handler.setFormatter(EngineJsonFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))

    engine_logger = logging.getLogger(ENGINE_LOGGER_NAME)
    engine_logger.handlers.clear()
    engine_logger.addHandler(handler)
    engine_logger.setLevel(resolved_level)
    engine_logger.propagate = False
