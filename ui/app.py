from __future__ import annotations

import os
import secrets
from typing import Any

import uvicorn
from fastapi import Body, Depends, FastAPI, HTTPException, status
from fastapi.responses import HTMLResponse
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from ordiaa import (
    StateStore,
    MAX_HISTORY_DAYS,
    configure_logging,
    format_date,
    format_long_date,
    load_settings,
    quote_for_day,
)

# ── HTML helpers ──────────────────────────────────────────────

def _escape(s: str) -> str:
    return (
        s.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
    )


CSS = """
body { font-family: system-ui, sans-serif; background: #fbf7fb; color: #444; margin: 0; }
.container { max-width: 1100px; margin: 0 auto; padding: 24px; }
header.top { background: linear-gradient(90deg, #ffe4ec, #efe4ff, #dff7f3); border-radius: 16px; padding: 24px; margin-bottom: 24px; }
blockquote { font-style: italic; border-left: 2px solid #c9b3f5; margin: 8px 0 0; padding-left: 12px; color: #777; }
.grid { display: grid; grid-template-columns: repeat(auto-fit, minmax(300px, 1fr)); gap: 20px; }
.card { background: #fff; border-radius: 12px; padding: 16px; box-shadow: 0 1px 3px rgba(0,0,0,.06); }
.muted { color: #999; } .small { font-size: 13px; }
.row { display: flex; gap: 8px; align-items: center; margin: 6px 0; }
.done { text-decoration: line-through; color: #aaa; }
.pill { border-radius: 999px; background: #f2ecfb; padding: 1px 8px; font-size: 12px; }
.bar { background: #c9b3f5; height: 10px; border-radius: 4px; }
textarea { width: 100%; box-sizing: border-box; }
"""


# ── Auth ──────────────────────────────────────────────────────

app = FastAPI(title="Ordiaa", version="0.1.0")

security = HTTPBasic(auto_error=False)


def get_current_user(credentials: HTTPBasicCredentials | None = Depends(security)) -> str:
    expected_username = os.environ.get("ORDIAA_USERNAME", "")
    expected_password = os.environ.get("ORDIAA_PASSWORD", "")

    if not expected_username or not expected_password:
        return "guest"

    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Basic"},
        )

    correct_username = secrets.compare_digest(credentials.username.encode("utf-8"), expected_username.encode("utf-8"))
    correct_password = secrets.compare_digest(credentials.password.encode("utf-8"), expected_password.encode("utf-8"))

    if not (correct_username and correct_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Basic"},
        )

    return credentials.username


def get_store() -> StateStore:
    """Fresh store per request, read from the workspace on disk."""
    return StateStore.open()


def _parse_day(day: str) -> str:
    try:
        return format_date(day)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid date: {day}")


def _day_payload(store: StateStore, day: str) -> dict[str, Any]:
    return {
        "date": day,
        "log": store.get_log(day),
        "todos": [t.to_dict() for t in store.get_todos(day)],
        "habits": [
            {**h.to_dict(), "completed": store.is_habit_completed(h.id, day)}
            for h in store.habits
        ],
        "completion_rate": store.get_completion_rate(day),
    }


# ── Dashboard ─────────────────────────────────────────────────

@app.get("/healthz")
def healthz() -> dict[str, str]:
    return {"ok": "true"}


@app.get("/", response_class=HTMLResponse)
def index(
    day: str | None = None,
    username: str = Depends(get_current_user),
    store: StateStore = Depends(get_store),
) -> HTMLResponse:
    today = store.today()
    selected = _parse_day(day) if day else format_date(today)
    history_days = load_settings().history_days

    habit_rows = []
    for h in store.habits:
        done = store.is_habit_completed(h.id, selected)
        habit_rows.append(
            f'<div class="row"><input type="checkbox" data-habit="{_escape(h.id)}" {"checked" if done else ""} />'
            f'<span>{_escape(h.emoji)} {_escape(h.name)}</span></div>'
        )

    todo_rows = []
    for t in store.get_todos(selected):
        todo_rows.append(
            f'<div class="row"><input type="checkbox" data-todo="{_escape(t.id)}" {"checked" if t.completed else ""} />'
            f'<span class="{"done" if t.completed else ""}">{_escape(t.text)}</span>'
            f'<span class="pill">{t.priority}</span><span class="pill">{t.status}</span></div>'
        )

    history_rows = []
    for point in store.get_completion_history(history_days, today=today):
        history_rows.append(
            f'<div class="row"><span class="small" style="width:60px">{_escape(point.date)}</span>'
            f'<div class="bar" style="width:{point.rate * 2}px"></div><span class="small">{point.rate}%</span></div>'
        )

    html = f"""<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1" />
  <title>Ordiaa</title>
  <style>{CSS}</style>
</head>
<body data-day="{selected}">
  <div class="container">
    <header class="top">
      <h1>\U0001f338 Ordiaa</h1>
      <div>{_escape(format_long_date(today))}</div>
      <blockquote>"{_escape(quote_for_day(today))}"</blockquote>
    </header>

    <section class="grid">
      <div class="card">
        <h2>To-do <span class="muted small">{selected}</span></h2>
        {''.join(todo_rows) if todo_rows else '<div class="muted small">Nothing planned yet.</div>'}
        <div class="row"><input id="newTodo" placeholder="Add a task" /><button id="addTodo">Add</button></div>
      </div>

      <div class="card">
        <h2>Habits <span class="pill">{store.get_completion_rate(selected)}%</span></h2>
        {''.join(habit_rows) if habit_rows else '<div class="muted small">No habits yet.</div>'}
      </div>

      <div class="card">
        <h2>Daily log</h2>
        <textarea id="log" rows="8">{_escape(store.get_log(selected))}</textarea>
        <button id="saveLog">Save</button>
      </div>
    </section>

    <section class="card" style="margin-top:20px">
      <h2>Progress</h2>
      {''.join(history_rows)}
    </section>
  </div>

  <script>
    const day = document.body.dataset.day;
    const call = (method, url, body) => fetch(url, {{
      method, headers: {{"Content-Type": "application/json"}},
      body: body === undefined ? undefined : JSON.stringify(body),
    }}).then(() => location.reload());
    document.querySelectorAll("[data-habit]").forEach(el => el.addEventListener("change",
      () => call("POST", `/api/habits/${{el.dataset.habit}}/toggle`, {{date: day}})));
    document.querySelectorAll("[data-todo]").forEach(el => el.addEventListener("change",
      () => call("POST", `/api/days/${{day}}/todos/${{el.dataset.todo}}/toggle`)));
    document.getElementById("addTodo").addEventListener("click",
      () => call("POST", `/api/days/${{day}}/todos`, {{text: document.getElementById("newTodo").value}}));
    document.getElementById("saveLog").addEventListener("click",
      () => call("PUT", `/api/days/${{day}}/log`, {{text: document.getElementById("log").value}}));
  </script>
</body>
</html>"""
    return HTMLResponse(html)


# ── State & history ───────────────────────────────────────────

@app.get("/api/state")
def api_get_state(username: str = Depends(get_current_user), store: StateStore = Depends(get_store)) -> dict[str, Any]:
    """Full state dump."""
    return store.state.to_dict()


@app.get("/api/history")
def api_history(
    days: int | None = None,
    username: str = Depends(get_current_user),
    store: StateStore = Depends(get_store),
) -> dict[str, Any]:
    """Completion-rate history for the chart, oldest first."""
    if days is None:
        days = load_settings().history_days
    if days < 1:
        raise HTTPException(status_code=400, detail="days must be >= 1")
    if days > MAX_HISTORY_DAYS:
        raise HTTPException(status_code=400, detail=f"days must be <= {MAX_HISTORY_DAYS}")
    return {"history": [p.to_dict() for p in store.get_completion_history(days)]}


# ── Habits ────────────────────────────────────────────────────

@app.get("/api/habits")
def api_list_habits(username: str = Depends(get_current_user), store: StateStore = Depends(get_store)) -> dict[str, Any]:
    return {"habits": [h.to_dict() for h in store.habits]}


@app.post("/api/habits")
def api_create_habit(
    payload: dict[str, Any] = Body(...),
    username: str = Depends(get_current_user),
    store: StateStore = Depends(get_store),
) -> dict[str, Any]:
    habit = store.add_habit(str(payload.get("name", "")), str(payload.get("emoji", "")))
    return {"ok": True, "habit": habit.to_dict()}


@app.delete("/api/habits/{habit_id}")
def api_delete_habit(habit_id: str, username: str = Depends(get_current_user), store: StateStore = Depends(get_store)) -> dict[str, Any]:
    if not store.delete_habit(habit_id):
        raise HTTPException(status_code=404, detail=f"Habit not found: {habit_id}")
    return {"ok": True, "habit_id": habit_id}


@app.post("/api/habits/{habit_id}/toggle")
def api_toggle_habit(
    habit_id: str,
    payload: dict[str, Any] = Body(default={}),
    username: str = Depends(get_current_user),
    store: StateStore = Depends(get_store),
) -> dict[str, Any]:
    """Toggle a habit's mark for payload['date'] (defaults to today)."""
    day = _parse_day(str(payload["date"])) if payload.get("date") else format_date(store.today())
    completed = store.toggle_habit(habit_id, day)
    return {"ok": True, "habit_id": habit_id, "date": day, "completed": completed}


# ── Days: log & to-dos ────────────────────────────────────────

@app.get("/api/days/{day}")
def api_get_day(day: str, username: str = Depends(get_current_user), store: StateStore = Depends(get_store)) -> dict[str, Any]:
    """Everything shown for one calendar day."""
    return _day_payload(store, _parse_day(day))


@app.put("/api/days/{day}/log")
def api_update_log(
    day: str,
    payload: dict[str, Any] = Body(...),
    username: str = Depends(get_current_user),
    store: StateStore = Depends(get_store),
) -> dict[str, Any]:
    key = _parse_day(day)
    store.update_log(key, str(payload.get("text", "")))
    return {"ok": True, "date": key}


@app.post("/api/days/{day}/todos")
def api_create_todo(
    day: str,
    payload: dict[str, Any] = Body(...),
    username: str = Depends(get_current_user),
    store: StateStore = Depends(get_store),
) -> dict[str, Any]:
    key = _parse_day(day)
    try:
        todo = store.add_todo(
            key,
            str(payload.get("text", "")),
            priority=payload.get("priority", "medium"),
            status=payload.get("status", "todo"),
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"ok": True, "todo": todo.to_dict()}


@app.patch("/api/days/{day}/todos/{todo_id}")
def api_update_todo(
    day: str,
    todo_id: str,
    payload: dict[str, Any] = Body(...),
    username: str = Depends(get_current_user),
    store: StateStore = Depends(get_store),
) -> dict[str, Any]:
    key = _parse_day(day)
    try:
        todo = store.update_todo(key, todo_id, payload)
    except (TypeError, ValueError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    if todo is None:
        raise HTTPException(status_code=404, detail=f"Todo not found: {todo_id}")
    return {"ok": True, "todo": todo.to_dict()}


@app.post("/api/days/{day}/todos/{todo_id}/toggle")
def api_toggle_todo(day: str, todo_id: str, username: str = Depends(get_current_user), store: StateStore = Depends(get_store)) -> dict[str, Any]:
    todo = store.toggle_todo(_parse_day(day), todo_id)
    if todo is None:
        raise HTTPException(status_code=404, detail=f"Todo not found: {todo_id}")
    return {"ok": True, "todo": todo.to_dict()}


@app.delete("/api/days/{day}/todos/{todo_id}")
def api_delete_todo(day: str, todo_id: str, username: str = Depends(get_current_user), store: StateStore = Depends(get_store)) -> dict[str, Any]:
    if not store.delete_todo(_parse_day(day), todo_id):
        raise HTTPException(status_code=404, detail=f"Todo not found: {todo_id}")
    return {"ok": True, "todo_id": todo_id}


# ── Entry point ───────────────────────────────────────────────

def main() -> None:
    configure_logging()
    uvicorn.run(
        app,
        host=os.environ.get("ORDIAA_HOST", "127.0.0.1"),
        port=int(os.environ.get("ORDIAA_PORT", "8000")),
    )


if __name__ == "__main__":
    main()
