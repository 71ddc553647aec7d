from __future__ import annotations

import json
import logging
import os
import sys
import time
from typing import Optional


class JsonFormatter(logging.Formatter):
    """
    One JSON object per line:
      { "t": 1700000000000, "lvl": "INFO", "name": "conf_query", "msg": "text", "extra": {...} }

    Structured fields are passed as `extra={"extra": {...}}` so they survive the
    LogRecord attribute namespace untouched.
    """

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        payload = {
            "t": int(time.time() * 1000),
            "lvl": record.levelname,
            "name": record.name,
            "msg": record.getMessage(),
        }
        if hasattr(record, "extra") and isinstance(record.extra, dict):  # type: ignore[attr-defined]
            payload["extra"] = record.extra  # type: ignore[attr-defined]
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        # numpy scalars and tuples of them are common in geometry logs
        return json.dumps(payload, ensure_ascii=False, default=_json_default)


def _json_default(obj):
    if hasattr(obj, "tolist"):
        return obj.tolist()
    return str(obj)


def setup_logging(level: Optional[str] = None, *, force: bool = False) -> None:
    """
    Configure the root logger once with JSON formatting.

    Level precedence: explicit `level`, then env LOG_LEVEL, then INFO.
    `force=True` reconfigures an already configured root (used when a driver
    reads the level from its YAML parameters after modules grabbed loggers).
    """
    root = logging.getLogger()
    if getattr(root, "_confq_configured", False) and not force:
        return

    lvl_name = (level or os.environ.get("LOG_LEVEL") or "INFO").upper()
    lvl = getattr(logging, lvl_name, None)
    if not isinstance(lvl, int):
        lvl = logging.INFO

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter())

    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(lvl)
    root._confq_configured = True  # type: ignore[attr-defined]


def get_logger(name: str) -> logging.Logger:
    """Get a module logger; ensures root is configured."""
    setup_logging()
    return logging.getLogger(name)
