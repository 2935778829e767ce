"""Tests for cli/ordiaa.py widgets — item ids travel as attributes."""

from cli.ordiaa import HabitCheckbox, TodoRow


def test_habit_checkbox_accepts_any_habit_id():
    box = HabitCheckbox("legacy id.1", "🏃 Run", False)
    assert box.habit_id == "legacy id.1"
    assert box.id is None


def test_todo_row_accepts_any_todo_id():
    row = TodoRow("a/b c", "Buy milk", False, "high")
    assert row.todo_id == "a/b c"
    assert row.id is None
