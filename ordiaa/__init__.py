"""Ordiaa core library — habit, to-do and journal state with local persistence.

Public API re-exports for convenient imports:
    from ordiaa import StateStore, format_date, load_state, ...
"""

# Workspace, settings & paths
from ordiaa.workspace import (
    workspace_root,
    state_path,
    settings_path,
    load_settings,
    get_user_timezone,
    now_local,
    today_local,
    today_str,
    configure_logging,
)

# File I/O
from ordiaa.fileio import (
    read_text,
    read_json,
    read_yaml,
    write_json_atomic,
)

# Persistence codec
from ordiaa.storage import (
    format_date,
    validate_state,
    load_state,
    save_state,
)

# Display
from ordiaa.display import (
    DAILY_QUOTES,
    format_short_date,
    format_long_date,
    quote_for_day,
)

# Store
from ordiaa.store import StateStore

# Models
from ordiaa.models import (
    TODO_STATUSES,
    TODO_PRIORITIES,
    MAX_HISTORY_DAYS,
    Habit,
    TodoItem,
    AppState,
    HistoryPoint,
    Settings,
    completion_key,
)
