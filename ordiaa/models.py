"""Typed dataclasses for the Ordiaa data model.

All models use from_dict/to_dict for JSON/YAML serialization.
camelCase in JSON is mapped to snake_case in Python.
Unknown keys are ignored; missing keys use defaults.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


TODO_STATUSES = ("todo", "doing", "done")
TODO_PRIORITIES = ("low", "medium", "high")

# About ten years of daily history; larger windows overflow date arithmetic.
MAX_HISTORY_DAYS = 3660


# ── Habits ────────────────────────────────────────────────────


@dataclass
class Habit:
    id: str = ""
    name: str = ""
    emoji: str = ""

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Habit:
        return cls(
            id=str(d.get("id", "")),
            name=str(d.get("name", "")),
            emoji=str(d.get("emoji", "")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "emoji": self.emoji}


def completion_key(habit_id: str, day: str) -> str:
    """Key of a completion mark: '<habitId>-<YYYY-MM-DD>'."""
    return f"{habit_id}-{day}"


# ── To-dos ────────────────────────────────────────────────────


@dataclass
class TodoItem:
    """A dated task.

    ``status`` is the single source of truth; ``completed`` is derived from it
    and only persisted so the stored document keeps its familiar shape.
    """

    id: str = ""
    text: str = ""
    status: str = "todo"  # todo, doing, done
    priority: str = "medium"  # low, medium, high
    created_at: str = ""  # YYYY-MM-DD

    def __post_init__(self) -> None:
        if self.status not in TODO_STATUSES:
            raise ValueError(f"Invalid status: {self.status!r}")
        if self.priority not in TODO_PRIORITIES:
            raise ValueError(f"Invalid priority: {self.priority!r}")

    @property
    def completed(self) -> bool:
        return self.status == "done"

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> TodoItem:
        status = d.get("status")
        if status not in TODO_STATUSES:
            status = "done" if d.get("completed") else "todo"
        priority = d.get("priority")
        if priority not in TODO_PRIORITIES:
            priority = "medium"
        return cls(
            id=str(d.get("id", "")),
            text=str(d.get("text", "")),
            status=status,
            priority=priority,
            created_at=str(d.get("createdAt", d.get("created_at", ""))),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "text": self.text,
            "completed": self.completed,
            "status": self.status,
            "priority": self.priority,
            "createdAt": self.created_at,
        }


# ── App state ─────────────────────────────────────────────────


@dataclass
class AppState:
    """The whole persisted document."""

    habits: list[Habit] = field(default_factory=list)
    completions: dict[str, bool] = field(default_factory=dict)
    logs: dict[str, str] = field(default_factory=dict)
    todos: dict[str, list[TodoItem]] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> AppState:
        if not d or not isinstance(d, dict):
            return cls()
        habits = [Habit.from_dict(h) for h in (d.get("habits") or [])]
        completions = {str(k): bool(v) for k, v in (d.get("completions") or {}).items()}
        logs = {str(k): str(v) for k, v in (d.get("logs") or {}).items()}
        todos = {
            str(day): [TodoItem.from_dict(t) for t in items]
            for day, items in (d.get("todos") or {}).items()
        }
        return cls(habits=habits, completions=completions, logs=logs, todos=todos)

    def to_dict(self) -> dict[str, Any]:
        return {
            "habits": [h.to_dict() for h in self.habits],
            "completions": dict(self.completions),
            "logs": dict(self.logs),
            "todos": {day: [t.to_dict() for t in items] for day, items in self.todos.items()},
        }


# ── History ───────────────────────────────────────────────────


@dataclass
class HistoryPoint:
    date: str = ""  # display string, e.g. "Oct 19"
    rate: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {"date": self.date, "rate": self.rate}


# ── Settings ──────────────────────────────────────────────────


@dataclass
class Settings:
    timezone: str = ""  # IANA name; empty means system local time
    history_days: int = 7
    log_level: str = "WARNING"

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Settings:
        if not d or not isinstance(d, dict):
            return cls()
        try:
            history_days = min(MAX_HISTORY_DAYS, max(1, int(d.get("history_days", 7))))
        except (TypeError, ValueError):
            history_days = 7
        return cls(
            timezone=str(d.get("timezone") or ""),
            history_days=history_days,
            log_level=str(d.get("log_level") or "WARNING"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "timezone": self.timezone,
            "history_days": self.history_days,
            "log_level": self.log_level,
        }
