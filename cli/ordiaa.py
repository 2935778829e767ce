#!/usr/bin/env python3
"""Ordiaa TUI — habits, to-dos and daily log in the terminal, powered by Textual."""

from __future__ import annotations

import sys
from datetime import timedelta

from textual import on
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.widgets import (
    Checkbox,
    DataTable,
    Footer,
    Header,
    Input,
    Label,
    Static,
    TextArea,
)

from ordiaa import (
    StateStore,
    configure_logging,
    format_long_date,
    load_settings,
    quote_for_day,
    workspace_root,
)


CSS = """
#main-layout {
    height: 1fr;
}

#habits-pane, #todos-pane {
    width: 1fr;
    border: round $primary;
    padding: 0 1;
}

#right-pane {
    width: 1fr;
}

#log-section {
    height: 1fr;
    border: round $primary;
    padding: 0 1;
}

#log-area {
    height: 1fr;
}

#history-section {
    height: auto;
    max-height: 14;
    border: round $primary;
    padding: 0 1;
}

#quote {
    color: $text-muted;
    text-style: italic;
    padding: 0 1;
}

.section-title {
    text-style: bold;
    margin-bottom: 1;
}

.item-row {
    height: auto;
}

.item-done Checkbox {
    text-style: strike;
    color: $text-muted;
}

.priority {
    width: 8;
    color: $text-muted;
    padding: 1 0 0 1;
}
"""


# ── Custom widgets ─────────────────────────────────────────────


class HabitCheckbox(Checkbox):
    """Checkbox bound to a habit. Ids are kept as attributes, not widget ids."""

    def __init__(self, habit_id: str, label: str, value: bool, **kwargs) -> None:
        super().__init__(label, value=value, **kwargs)
        self.habit_id = habit_id


class TodoRow(Horizontal):
    """A single to-do: checkbox + priority tag."""

    def __init__(self, todo_id: str, text: str, done: bool, priority: str, **kwargs) -> None:
        super().__init__(**kwargs)
        self.todo_id = todo_id
        self.todo_text = text
        self.todo_done = done
        self.todo_priority = priority

    def compose(self) -> ComposeResult:
        yield Checkbox(self.todo_text or "(untitled)", value=self.todo_done)
        yield Label(self.todo_priority, classes="priority")

    def on_mount(self) -> None:
        self.add_class("item-row")
        if self.todo_done:
            self.add_class("item-done")


# ── Main app ───────────────────────────────────────────────────


class OrdiaaApp(App):
    """Ordiaa — daily habits, to-dos and journal."""

    TITLE = "Ordiaa"
    CSS = CSS
    AUTO_FOCUS = None

    BINDINGS = [
        Binding("[", "prev_day", "Prev day"),
        Binding("]", "next_day", "Next day"),
        Binding("ctrl+t", "go_today", "Today"),
        Binding("ctrl+d", "delete_item", "Delete"),
        Binding("escape", "blur_focus", "Back"),
        Binding("ctrl+q", "quit_app", "Quit"),
    ]

    def __init__(self, store: StateStore | None = None) -> None:
        super().__init__()
        self.store = store if store is not None else StateStore.open()
        self.day = self.store.today()
        self.history_days = load_settings().history_days

    def compose(self) -> ComposeResult:
        yield Header()
        yield Static(id="quote")
        yield Horizontal(
            VerticalScroll(
                Label("Habits", classes="section-title"),
                Vertical(id="habit-list"),
                Input(placeholder="emoji name, e.g. \U0001f3c3 Run", id="new-habit"),
                id="habits-pane",
            ),
            VerticalScroll(
                Label("To-do", classes="section-title"),
                Vertical(id="todo-list"),
                Input(placeholder="new task (!high / !low)", id="new-todo"),
                id="todos-pane",
            ),
            Vertical(
                Vertical(
                    Label("Daily log", classes="section-title"),
                    TextArea(id="log-area"),
                    id="log-section",
                ),
                Vertical(
                    Label("Progress", classes="section-title"),
                    DataTable(id="history-table"),
                    id="history-section",
                ),
                id="right-pane",
            ),
            id="main-layout",
        )
        yield Footer()

    async def on_mount(self) -> None:
        table: DataTable = self.query_one("#history-table", DataTable)
        table.add_columns("Date", "Rate", "")
        await self._load_day()

    # ── Rendering ──────────────────────────────────────────────

    async def _load_day(self) -> None:
        """Populate all widgets for the selected day."""
        today = self.store.today()
        self.query_one("#quote", Static).update(f'"{quote_for_day(today)}"')

        self.query_one("#log-area", TextArea).load_text(self.store.get_log(self.day))

        await self._rebuild_habits()
        await self._rebuild_todos()
        self._refresh_summary()

    async def _rebuild_habits(self) -> None:
        habit_list = self.query_one("#habit-list", Vertical)
        await habit_list.remove_children()
        rows = [
            HabitCheckbox(
                h.id,
                f"{h.emoji} {h.name}".strip(),
                value=self.store.is_habit_completed(h.id, self.day),
            )
            for h in self.store.habits
        ]
        if rows:
            await habit_list.mount_all(rows)

    async def _rebuild_todos(self) -> None:
        todo_list = self.query_one("#todo-list", Vertical)
        await todo_list.remove_children()
        rows = [
            TodoRow(t.id, t.text, t.completed, t.priority)
            for t in self.store.get_todos(self.day)
        ]
        if rows:
            await todo_list.mount_all(rows)

    def _refresh_summary(self) -> None:
        """Header subtitle + history table."""
        rate = self.store.get_completion_rate(self.day)
        self.sub_title = f"{format_long_date(self.day)}  ·  {rate}% habits done"

        table: DataTable = self.query_one("#history-table", DataTable)
        table.clear()
        for point in self.store.get_completion_history(self.history_days):
            table.add_row(point.date, f"{point.rate}%", "█" * (point.rate // 10))

    # ── Events ─────────────────────────────────────────────────

    @on(Checkbox.Changed)
    def _on_checkbox_toggle(self, event: Checkbox.Changed) -> None:
        checkbox = event.checkbox
        parent = checkbox.parent
        if isinstance(checkbox, HabitCheckbox):
            self.store.toggle_habit(checkbox.habit_id, self.day)
        elif isinstance(parent, TodoRow):
            todo = self.store.toggle_todo(self.day, parent.todo_id)
            if todo is not None:
                parent.set_class(todo.completed, "item-done")
        self._refresh_summary()

    @on(Input.Submitted, "#new-todo")
    async def _on_new_todo(self, event: Input.Submitted) -> None:
        text = event.value.strip()
        if not text:
            return
        priority = "medium"
        for tag in ("high", "low"):
            if text.endswith(f"!{tag}"):
                priority = tag
                text = text.removesuffix(f"!{tag}").strip()
        self.store.add_todo(self.day, text, priority=priority)
        event.input.value = ""
        await self._rebuild_todos()

    @on(Input.Submitted, "#new-habit")
    async def _on_new_habit(self, event: Input.Submitted) -> None:
        value = event.value.strip()
        if not value:
            return
        emoji, _, name = value.partition(" ")
        if emoji.isalnum() or not name:
            emoji, name = "", value
        self.store.add_habit(name.strip(), emoji)
        event.input.value = ""
        await self._rebuild_habits()
        self._refresh_summary()

    @on(TextArea.Changed, "#log-area")
    def _on_log_change(self, event: TextArea.Changed) -> None:
        text = event.text_area.text
        # load_text also fires Changed; only persist real edits
        if text == self.store.get_log(self.day):
            return
        self.store.update_log(self.day, text)

    # ── Actions ────────────────────────────────────────────────

    async def action_prev_day(self) -> None:
        self.day -= timedelta(days=1)
        await self._load_day()

    async def action_next_day(self) -> None:
        self.day += timedelta(days=1)
        await self._load_day()

    async def action_go_today(self) -> None:
        self.day = self.store.today()
        await self._load_day()

    async def action_delete_item(self) -> None:
        """Delete the focused habit or to-do."""
        focused = self.focused
        if isinstance(focused, HabitCheckbox):
            self.store.delete_habit(focused.habit_id)
            await self._rebuild_habits()
            self._refresh_summary()
        elif focused is not None and isinstance(focused.parent, TodoRow):
            self.store.delete_todo(self.day, focused.parent.todo_id)
            await self._rebuild_todos()

    def action_blur_focus(self) -> None:
        self.set_focus(None)

    def action_quit_app(self) -> None:
        self.exit()


# ── Entry point ────────────────────────────────────────────────


def main() -> None:
    root = workspace_root()
    if not root.exists():
        print(f"Workspace not found: {root}")
        print("Set ORDIAA_ROOT or create the directory first.")
        sys.exit(1)

    configure_logging(load_settings(root), log_file=root / "ordiaa.log")
    app = OrdiaaApp(StateStore.open(root))
    app.run()


if __name__ == "__main__":
    main()
