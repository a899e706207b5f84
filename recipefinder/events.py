"""
Event logging for Recipe Finder.

Responsibilities:
- Provide a single log_event(...) function that:
  - Appends a JSONL record to events.log (one event per line).
  - Never raises exceptions (analytics are strictly non-blocking).

- Provide small helper functions for the events the proxy emits:
  - log_search_performed(...)
  - log_search_rate_limited(...)
  - log_ingredients_detected(...)
  - log_image_search_performed(...)
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

# JSONL file with one event per line, relative to the working directory
EVENT_LOG_FILE = Path("events.log")


def _write_to_file(record: Dict[str, Any]) -> None:
    """
    Append a single JSON record to EVENT_LOG_FILE.
    Never raise exceptions.
    """
    try:
        EVENT_LOG_FILE.parent.mkdir(parents=True, exist_ok=True)
        with EVENT_LOG_FILE.open("a", encoding="utf-8") as f:
            f.write(json.dumps(record, ensure_ascii=False, default=str) + "\n")
    except Exception as exc:
        logger.debug("Failed to write event to %s: %s", EVENT_LOG_FILE, exc)


def log_event(
    event: str,
    client_id: Optional[str],
    payload: Optional[Dict[str, Any]] = None,
) -> None:
    """
    Core event logger.

    Builds a record with keys ts, event, client_id, payload and appends it to
    the event log. Never raises.
    """
    record = {
        "ts": datetime.now(timezone.utc).isoformat(),
        "event": event,
        "client_id": client_id,
        "payload": payload or {},
    }
    _write_to_file(record)


# ---------------------------------------------------------------------------
# Helper functions for common event types
# ---------------------------------------------------------------------------

def log_search_performed(
    client_id: Optional[str],
    ingredients: List[str],
    result_count: int,
    page: int = 1,
    cached: bool = False,
) -> None:
    """
    Log a search_performed event.

    payload:
    {
        "ingredients": ["chicken", "rice"],
        "result_count": 10,
        "page": 1,
        "cached": false
    }
    """
    payload = {
        "ingredients": ingredients,
        "result_count": result_count,
        "page": page,
        "cached": cached,
    }
    log_event("search_performed", client_id, payload)


def log_search_rate_limited(client_id: Optional[str], source: str) -> None:
    """
    Log a search_rate_limited event.

    source is "proxy" when the local token bucket rejected the request and
    "backend" when the remote backend answered 429.
    """
    log_event("search_rate_limited", client_id, {"source": source})


def log_ingredients_detected(client_id: Optional[str], ingredients: List[str]) -> None:
    """
    Log an ingredients_detected event.

    payload:
    {
        "ingredients": ["Tomato", "Basil"],
        "count": 2
    }
    """
    payload = {
        "ingredients": ingredients,
        "count": len(ingredients),
    }
    log_event("ingredients_detected", client_id, payload)


def log_image_search_performed(client_id: Optional[str], query: str, image_count: int) -> None:
    """Log an image_search_performed event."""
    log_event("image_search_performed", client_id, {"query": query, "image_count": image_count})
