"""Display formatting for the dashboard header and history chart."""

from __future__ import annotations

from datetime import date

DAILY_QUOTES = [
    "Small steps every day add up to big results.",
    "You don't have to be great to start, but you have to start to be great.",
    "Progress, not perfection.",
    "Discipline is choosing between what you want now and what you want most.",
    "The secret of getting ahead is getting started.",
    "Done is better than perfect.",
    "Motivation gets you going, but habit keeps you growing.",
    "Focus on the step in front of you, not the whole staircase.",
    "A little progress each day adds up.",
    "Be gentle with yourself; you are doing the best you can.",
    "What you do every day matters more than what you do once in a while.",
    "Rest if you must, but don't quit.",
]


def format_short_date(d: date) -> str:
    """'Oct 19' — chart axis label."""
    return f"{d:%b} {d.day}"


def format_long_date(d: date) -> str:
    """'Monday, October 19, 2026' — header banner."""
    return f"{d:%A}, {d:%B} {d.day}, {d.year}"


def quote_for_day(d: date) -> str:
    """Quote of the day; rotates by day of the year."""
    day_of_year = d.timetuple().tm_yday
    return DAILY_QUOTES[day_of_year % len(DAILY_QUOTES)]
