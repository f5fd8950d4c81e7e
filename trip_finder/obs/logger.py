"""Structured JSON logging to stdout.

Low overhead, minimal dependencies, safe for production stdout collectors.
"""

from typing import Any, Dict
from datetime import datetime, timezone
import json

from trip_finder.obs.context import request_id_var, session_id_var

_MAX_TEXT = 200


def _truncate(value: Any) -> Any:
    # Prompts and raw model output can be long; keep log lines bounded
    if isinstance(value, str) and len(value) > _MAX_TEXT:
        return value[:_MAX_TEXT] + "..."
    return value


def log_event(event: str, **fields: Any) -> None:
    now = datetime.now(timezone.utc).isoformat()
    payload: Dict[str, Any] = {
        "ts": now,
        "level": fields.pop("level", "INFO"),
        "event": event,
        "request_id": request_id_var.get(),
    }
    # Attach context vars if not provided explicitly
    payload.setdefault("session_id", session_id_var.get())

    # Merge remaining fields
    for k, v in fields.items():
        payload[k] = _truncate(v)

    try:
        print(json.dumps(payload, separators=(",", ":"), default=str))
    except Exception:
        # As a last resort, avoid crashing the app due to logging
        pass
