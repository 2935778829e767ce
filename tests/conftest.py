"""Shared test fixtures for Ordiaa tests."""

from __future__ import annotations

import json
import os
from datetime import date
from pathlib import Path

import pytest
import yaml

from ordiaa.models import AppState, Habit, TodoItem
from ordiaa.store import StateStore


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Create a temporary workspace with settings and a populated state.json."""
    root = tmp_path / "workspace"
    root.mkdir(parents=True)

    settings = {
        "timezone": "UTC",
        "history_days": 7,
        "log_level": "DEBUG",
    }
    (root / "settings.yaml").write_text(
        yaml.dump(settings, default_flow_style=False), encoding="utf-8"
    )

    state = {
        "habits": [
            {"id": "h1", "name": "Meditate", "emoji": "\U0001f9d8"},
            {"id": "h2", "name": "Read", "emoji": "\U0001f4da"},
        ],
        "completions": {
            "h1-2026-10-18": True,
            "h2-2026-10-18": False,
        },
        "logs": {
            "2026-10-18": "Slow morning, good evening walk.",
        },
        "todos": {
            "2026-10-18": [
                {
                    "id": "t1",
                    "text": "Call the dentist",
                    "completed": False,
                    "status": "todo",
                    "priority": "high",
                    "createdAt": "2026-10-18",
                },
                {
                    "id": "t2",
                    "text": "Water plants",
                    "completed": True,
                    "status": "done",
                    "priority": "low",
                    "createdAt": "2026-10-18",
                },
            ],
        },
    }
    (root / "state.json").write_text(json.dumps(state, indent=2), encoding="utf-8")

    os.environ["ORDIAA_ROOT"] = str(root)
    yield root
    if "ORDIAA_ROOT" in os.environ:
        del os.environ["ORDIAA_ROOT"]


@pytest.fixture
def today() -> date:
    return date(2026, 10, 19)


@pytest.fixture
def store(today: date) -> StateStore:
    """Memory-only store with a fixed 'today'."""
    return StateStore(today=lambda: today)


@pytest.fixture
def habit_store(today: date) -> StateStore:
    """Memory-only store with four habits and no marks."""
    state = AppState(
        habits=[Habit(id=f"h{i}", name=f"Habit {i}", emoji="*") for i in range(1, 5)],
        todos={"2026-10-19": [TodoItem(id="t1", text="Existing", created_at="2026-10-19")]},
    )
    return StateStore(state, today=lambda: today)
