from __future__ import annotations

import json
import logging
import sys
import time
from typing import Any, Dict


Json = Dict[str, Any]

_CONFIGURED_ATTR = "_echonode_configured"


def _now_ms() -> int:
    return int(time.time() * 1000)


def configure_logging(level: int = logging.INFO) -> None:
    """Route stdlib logging to stderr as bare JSONL lines.

    stdout belongs to the wire protocol, so nothing may log there.
    Safe to call multiple times.
    """
    root = logging.getLogger()
    if getattr(root, _CONFIGURED_ATTR, False):
        root.setLevel(level)
        return

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(message)s"))

    root.handlers = [handler]
    root.setLevel(level)
    setattr(root, _CONFIGURED_ATTR, True)


def log_event(logger: logging.Logger, event: str, *, level: int = logging.INFO, **fields: Any) -> None:
    """Emit a single JSONL log event."""
    if not logger.isEnabledFor(level):
        return
    payload: Json = {"ts_ms": _now_ms(), "event": str(event)}
    payload.update(fields)
    try:
        logger.log(level, json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False))
    except (TypeError, ValueError):
        parts = [f"event={event}"] + [f"{k}={fields.get(k)!r}" for k in sorted(fields.keys())]
        logger.log(level, " ".join(parts))
