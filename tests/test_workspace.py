"""Tests for ordiaa/workspace.py — roots, settings and timezone."""

from datetime import date
from zoneinfo import ZoneInfo

from ordiaa.workspace import (
    get_user_timezone,
    load_settings,
    settings_path,
    state_path,
    today_local,
    today_str,
    workspace_root,
)


def test_workspace_root_from_env(workspace):
    assert workspace_root() == workspace.resolve()
    assert state_path() == workspace.resolve() / "state.json"
    assert settings_path(workspace) == workspace / "settings.yaml"


def test_load_settings(workspace):
    settings = load_settings(workspace)
    assert settings.timezone == "UTC"
    assert settings.history_days == 7
    assert settings.log_level == "DEBUG"


def test_load_settings_missing_file(tmp_path):
    assert load_settings(tmp_path).history_days == 7


def test_load_settings_malformed_yaml(tmp_path):
    (tmp_path / "settings.yaml").write_text("timezone: [unclosed", encoding="utf-8")
    assert load_settings(tmp_path).timezone == ""


def test_user_timezone(workspace):
    assert get_user_timezone(workspace) == ZoneInfo("UTC")


def test_unknown_timezone_falls_back_to_local(tmp_path):
    (tmp_path / "settings.yaml").write_text("timezone: Mars/Olympus\n", encoding="utf-8")
    assert get_user_timezone(tmp_path) is None
    assert isinstance(today_local(tmp_path), date)


def test_today_str_format(workspace):
    s = today_str(workspace)
    assert date.fromisoformat(s).isoformat() == s
