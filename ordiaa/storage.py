"""Persistence codec for Ordiaa: AppState <-> state.json.

The durable slot is a single JSON document. Loading never raises: a missing,
unreadable or malformed slot degrades to an empty AppState.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from pathlib import Path
from typing import Any

from ordiaa.fileio import read_json, write_json_atomic
from ordiaa.models import AppState
from ordiaa.workspace import state_path as _state_path

_logger = logging.getLogger(__name__)


def format_date(value: date | datetime | str) -> str:
    """Canonical day key (YYYY-MM-DD) for a date.

    Datetimes contribute their own wall-clock date; no timezone conversion
    happens, so every time of the same local day maps to the same key.
    """
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, str):
        return date.fromisoformat(value.strip()).isoformat()
    raise TypeError(f"Expected a date, got {type(value).__name__}")


# ── Validation ────────────────────────────────────────────────


def _is_str_mapping(value: Any) -> bool:
    return isinstance(value, dict) and all(isinstance(k, str) for k in value)


def validate_state(data: Any) -> list[str]:
    """Validate the shape of a stored document and return errors (empty if valid).

    Missing top-level sections are allowed and treated as empty.
    """
    if not isinstance(data, dict):
        return [f"State must be an object, got {type(data).__name__}"]

    errors = []
    habits = data.get("habits", [])
    if not isinstance(habits, list):
        errors.append("habits must be a list")
    else:
        for i, h in enumerate(habits):
            if not isinstance(h, dict):
                errors.append(f"habits[{i}] must be an object")
            elif not isinstance(h.get("id"), str):
                errors.append(f"habits[{i}].id must be a string")

    completions = data.get("completions", {})
    if not _is_str_mapping(completions):
        errors.append("completions must be an object")
    elif not all(isinstance(v, bool) for v in completions.values()):
        errors.append("completions values must be booleans")

    logs = data.get("logs", {})
    if not _is_str_mapping(logs):
        errors.append("logs must be an object")
    elif not all(isinstance(v, str) for v in logs.values()):
        errors.append("logs values must be strings")

    todos = data.get("todos", {})
    if not _is_str_mapping(todos):
        errors.append("todos must be an object")
    else:
        for day, items in todos.items():
            if not isinstance(items, list):
                errors.append(f"todos[{day}] must be a list")
                continue
            for i, t in enumerate(items):
                if not isinstance(t, dict):
                    errors.append(f"todos[{day}][{i}] must be an object")
                elif not isinstance(t.get("id"), str):
                    errors.append(f"todos[{day}][{i}].id must be a string")

    return errors


# ── Load / save ───────────────────────────────────────────────


def load_state(path: Path | None = None) -> AppState:
    """Read the durable slot, returning an empty AppState if absent or corrupt."""
    if path is None:
        path = _state_path()
    try:
        data = read_json(path)
    except (OSError, ValueError, RecursionError) as e:
        _logger.warning("Could not read %s, starting from empty state: %s", path, e)
        return AppState()

    errors = validate_state(data)
    if errors:
        _logger.warning(
            "Malformed state in %s, starting from empty state: %s", path, "; ".join(errors)
        )
        return AppState()
    return AppState.from_dict(data)


def save_state(state: AppState, path: Path | None = None) -> None:
    """Overwrite the durable slot with the full state."""
    if path is None:
        path = _state_path()
    write_json_atomic(path, state.to_dict())
