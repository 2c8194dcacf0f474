"""Persist one JSON record per auto-assignment exchange for later debugging."""

from __future__ import annotations

import hashlib
import json
import re
import uuid
from dataclasses import fields, is_dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional, Sequence


def write_exchange_log(
    logs_root: Optional[Path],
    *,
    model: str,
    prompt: str,
    raw_response: Optional[str],
    outcome: str,
    issues: Sequence[str] = (),
    applied: Sequence[Any] = (),
    error: Optional[Exception] = None,
) -> Optional[Path]:
    """Write the exchange under ``<logs_root>/exchanges`` and return its path.

    Returns ``None`` when logging is disabled or the directory is not writable.
    """
    if logs_root is None:
        return None
    target_dir = Path(logs_root) / "exchanges"
    try:
        target_dir.mkdir(parents=True, exist_ok=True)
    except OSError:
        return None

    timestamp = datetime.now(timezone.utc)
    entry: dict[str, Any] = {
        "timestamp": timestamp.isoformat(),
        "model": model,
        "outcome": outcome,
        "prompt": prompt,
        "raw_response": raw_response,
        "issues": list(issues),
        "applied": _json_safe(list(applied)),
    }
    if error is not None:
        entry["error"] = str(error)

    parts = [
        "exchange",
        _slug(model, fallback="model"),
        _slug(outcome, fallback="outcome"),
        timestamp.strftime("%Y%m%dT%H%M%S%fZ"),
        uuid.uuid4().hex[:8],
    ]
    log_path = target_dir / ("__".join(parts) + ".json")
    try:
        with log_path.open("w", encoding="utf-8") as handle:
            json.dump(entry, handle, indent=2, sort_keys=True, ensure_ascii=False)
    except OSError:
        return None
    return log_path


def _json_safe(value: Any) -> Any:
    """Coerce complex objects into JSON-serialisable representations."""
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, datetime):
        return value.isoformat()
    if is_dataclass(value) and not isinstance(value, type):
        return {item.name: _json_safe(getattr(value, item.name)) for item in fields(value)}
    if hasattr(value, "model_dump"):
        try:
            return _json_safe(value.model_dump())
        except TypeError:
            pass
    if isinstance(value, dict):
        return {str(key): _json_safe(val) for key, val in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [_json_safe(item) for item in value]
    return str(value)


def _slug(value: str, *, fallback: str = "item", max_length: int = 60) -> str:
    """Normalise identifiers for use in log filenames."""
    cleaned = re.sub(r"[^A-Za-z0-9]+", "-", value).strip("-")
    slug = cleaned or fallback
    if len(slug) <= max_length:
        return slug
    digest = hashlib.sha256(slug.encode("utf-8")).hexdigest()[:8]
    prefix = slug[: max_length - len(digest) - 1].rstrip("-")
    return f"{prefix}-{digest}"


__all__ = ["write_exchange_log"]
