"""Workspace root, settings, timezone and path helpers for Ordiaa."""

from __future__ import annotations

import logging
import os
from datetime import date, datetime
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml

from ordiaa.fileio import read_yaml
from ordiaa.models import Settings

_logger = logging.getLogger(__name__)


def workspace_root() -> Path:
    """Get the workspace root directory (holds state.json and settings.yaml)."""
    return Path(
        os.environ.get("ORDIAA_ROOT", str(Path.home() / "ordiaa"))
    ).expanduser().resolve()


# ── Path helpers ──────────────────────────────────────────────

def state_path(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "state.json"


def settings_path(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "settings.yaml"


# ── Settings ──────────────────────────────────────────────────

def load_settings(root: Path | None = None) -> Settings:
    """Load settings.yaml, falling back to defaults if missing or malformed."""
    path = settings_path(root)
    try:
        data = read_yaml(path)
    except (OSError, yaml.YAMLError) as e:
        _logger.warning("Ignoring unreadable settings file %s: %s", path, e)
        return Settings()
    return Settings.from_dict(data)


def get_user_timezone(root: Path | None = None) -> ZoneInfo | None:
    """Get the configured timezone, or None to use the system local zone."""
    name = load_settings(root).timezone
    if not name:
        return None
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        _logger.warning("Unknown timezone %r in settings, using system local time", name)
        return None


def now_local(root: Path | None = None) -> datetime:
    """Get current datetime in the user's timezone."""
    tz = get_user_timezone(root)
    if tz is None:
        return datetime.now().astimezone()
    return datetime.now(tz)


def today_local(root: Path | None = None) -> date:
    """Get today's calendar date in the user's timezone."""
    return now_local(root).date()


def today_str(root: Path | None = None) -> str:
    """Get today's date string (YYYY-MM-DD) in the user's timezone."""
    return today_local(root).isoformat()


def configure_logging(settings: Settings | None = None, log_file: Path | None = None) -> None:
    """Configure root logging for the UI/TUI entry points.

    The TUI passes ``log_file`` so records don't draw over the screen.
    """
    if settings is None:
        settings = load_settings()
    level = logging.getLevelName(settings.log_level.upper())
    if not isinstance(level, int):
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        filename=str(log_file) if log_file is not None else None,
    )
