"""State store for Ordiaa.

Owns the single AppState for the lifetime of a process, answers queries
and applies mutations. Every mutation that changes something is written
through to the durable slot immediately.
"""

from __future__ import annotations

import dataclasses
import logging
import time
from collections.abc import Callable, Iterable
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Any

from ordiaa.display import format_short_date
from ordiaa.models import AppState, Habit, HistoryPoint, TodoItem, completion_key
from ordiaa.storage import format_date, load_state, save_state
from ordiaa.workspace import state_path, today_local, workspace_root

_logger = logging.getLogger(__name__)

DateLike = date | datetime | str


def _percent(part: int, total: int) -> int:
    """100 * part / total rounded half up (0.5 -> 1), in integer arithmetic."""
    return (200 * part + total) // (2 * total)


class StateStore:
    """Query/mutation facade over one AppState.

    ``path`` is the durable slot; when None the store is memory-only.
    ``today`` and ``clock`` are injectable for tests.
    """

    def __init__(
        self,
        state: AppState | None = None,
        path: Path | None = None,
        today: Callable[[], date] | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self._state = state if state is not None else AppState()
        self._path = path
        self._today = today or date.today
        self._clock = clock or time.time

    @classmethod
    def open(cls, root: Path | None = None) -> StateStore:
        """Load the store for a workspace (defaults to ORDIAA_ROOT)."""
        if root is None:
            root = workspace_root()
        path = state_path(root)
        return cls(load_state(path), path=path, today=lambda: today_local(root))

    # ── Internals ─────────────────────────────────────────────

    def _persist(self) -> None:
        if self._path is not None:
            save_state(self._state, self._path)

    def _new_id(self, existing: Iterable[str]) -> str:
        """Millisecond timestamp id, bumped past any id already taken."""
        taken = set(existing)
        candidate = int(self._clock() * 1000)
        while str(candidate) in taken:
            candidate += 1
        return str(candidate)

    def _all_todo_ids(self) -> Iterable[str]:
        for items in self._state.todos.values():
            for t in items:
                yield t.id

    # ── Read access ───────────────────────────────────────────

    @property
    def state(self) -> AppState:
        return self._state

    @property
    def habits(self) -> list[Habit]:
        return list(self._state.habits)

    @property
    def completions(self) -> dict[str, bool]:
        return dict(self._state.completions)

    @property
    def logs(self) -> dict[str, str]:
        return dict(self._state.logs)

    @property
    def todos(self) -> dict[str, list[TodoItem]]:
        return {day: list(items) for day, items in self._state.todos.items()}

    def today(self) -> date:
        return self._today()

    def find_habit(self, habit_id: str) -> Habit | None:
        for h in self._state.habits:
            if h.id == habit_id:
                return h
        return None

    def find_todo(self, day: DateLike, todo_id: str) -> TodoItem | None:
        for t in self._state.todos.get(format_date(day), []):
            if t.id == todo_id:
                return t
        return None

    # ── Queries ───────────────────────────────────────────────

    def get_log(self, day: DateLike) -> str:
        return self._state.logs.get(format_date(day), "")

    def get_todos(self, day: DateLike) -> list[TodoItem]:
        return list(self._state.todos.get(format_date(day), []))

    def is_habit_completed(self, habit_id: str, day: DateLike) -> bool:
        return self._state.completions.get(completion_key(habit_id, format_date(day)), False)

    def get_completion_rate(self, day: DateLike) -> int:
        """Percentage (0-100) of current habits marked done on the day."""
        total = len(self._state.habits)
        if total == 0:
            return 0
        key = format_date(day)
        done = sum(
            1 for h in self._state.habits
            if self._state.completions.get(completion_key(h.id, key), False)
        )
        return _percent(done, total)

    def get_completion_history(self, days: int, today: date | None = None) -> list[HistoryPoint]:
        """Completion rate for each of the trailing ``days`` days, oldest first."""
        if today is None:
            today = self._today()
        history = []
        for offset in range(days - 1, -1, -1):
            d = today - timedelta(days=offset)
            history.append(HistoryPoint(date=format_short_date(d), rate=self.get_completion_rate(d)))
        return history

    # ── Habit mutations ───────────────────────────────────────

    def toggle_habit(self, habit_id: str, day: DateLike) -> bool:
        """Flip the completion mark and return the new value."""
        key = completion_key(habit_id, format_date(day))
        value = not self._state.completions.get(key, False)
        self._state.completions[key] = value
        _logger.debug("Habit mark %s -> %s", key, value)
        self._persist()
        return value

    def add_habit(self, name: str, emoji: str) -> Habit:
        habit = Habit(
            id=self._new_id(h.id for h in self._state.habits),
            name=name,
            emoji=emoji,
        )
        self._state.habits.append(habit)
        _logger.debug("Added habit %s (%s)", habit.id, name)
        self._persist()
        return habit

    def delete_habit(self, habit_id: str) -> bool:
        """Remove a habit. Its completion marks are kept as history."""
        for i, h in enumerate(self._state.habits):
            if h.id == habit_id:
                self._state.habits.pop(i)
                _logger.debug("Deleted habit %s", habit_id)
                self._persist()
                return True
        _logger.debug("delete_habit: no habit %s", habit_id)
        return False

    # ── Log mutations ─────────────────────────────────────────

    def update_log(self, day: DateLike, text: str) -> None:
        """Overwrite the day's log entry. An empty string is stored as-is."""
        self._state.logs[format_date(day)] = text
        self._persist()

    # ── To-do mutations ───────────────────────────────────────

    def add_todo(
        self,
        day: DateLike,
        text: str,
        priority: str = "medium",
        status: str = "todo",
    ) -> TodoItem:
        """Append a to-do to the day's list. Raises ValueError on unknown priority/status."""
        key = format_date(day)
        todo = TodoItem(
            id=self._new_id(self._all_todo_ids()),
            text=text,
            status=status,
            priority=priority,
            created_at=key,
        )
        self._state.todos.setdefault(key, []).append(todo)
        _logger.debug("Added todo %s on %s", todo.id, key)
        self._persist()
        return todo

    def toggle_todo(self, day: DateLike, todo_id: str) -> TodoItem | None:
        """Flip completion: done <-> todo. Returns the item, or None if not found."""
        todo = self.find_todo(day, todo_id)
        if todo is None:
            _logger.debug("toggle_todo: no todo %s on %s", todo_id, day)
            return None
        todo.status = "todo" if todo.completed else "done"
        self._persist()
        return todo

    def update_todo(self, day: DateLike, todo_id: str, updates: dict[str, Any]) -> TodoItem | None:
        """Merge ``updates`` into a to-do. Returns the updated item, or None if not found.

        Accepts text, priority, status, completed and createdAt. ``status``
        wins over ``completed`` when both are given; ``id`` and unknown keys
        are ignored. Raises ValueError on unknown priority/status.
        """
        key = format_date(day)
        items = self._state.todos.get(key, [])
        for i, todo in enumerate(items):
            if todo.id != todo_id:
                continue

            changes: dict[str, Any] = {}
            if "text" in updates:
                changes["text"] = str(updates["text"])
            if "priority" in updates:
                changes["priority"] = updates["priority"]
            if "status" in updates:
                changes["status"] = updates["status"]
            elif "completed" in updates:
                if updates["completed"]:
                    changes["status"] = "done"
                elif todo.completed:
                    changes["status"] = "todo"
            created_at = updates.get("createdAt", updates.get("created_at"))
            if created_at is not None:
                changes["created_at"] = format_date(created_at)

            updated = dataclasses.replace(todo, **changes)
            items[i] = updated
            self._persist()
            return updated

        _logger.debug("update_todo: no todo %s on %s", todo_id, key)
        return None

    def delete_todo(self, day: DateLike, todo_id: str) -> bool:
        key = format_date(day)
        items = self._state.todos.get(key, [])
        for i, todo in enumerate(items):
            if todo.id == todo_id:
                items.pop(i)
                self._persist()
                return True
        _logger.debug("delete_todo: no todo %s on %s", todo_id, key)
        return False
