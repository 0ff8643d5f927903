# -*- coding: utf-8 -*-

import datetime as dt
from typing import Optional


def format_time(ms: int) -> str:
    """
    HH:MM:SS for a millisecond duration.
    Hours are not wrapped into days (100h -> "100:00:00").
    """
    if ms <= 0:
        return "00:00:00"
    total = int(ms) // 1000
    h = total // 3600
    m = (total % 3600) // 60
    s = total % 60
    return f"{h:02d}:{m:02d}:{s:02d}"


def days_until(end_date: Optional[str], today: Optional[dt.date] = None) -> Optional[int]:
    if not end_date:
        return None
    try:
        due = dt.date.fromisoformat(end_date)
    except ValueError:
        return None
    today = today or dt.date.today()
    return (due - today).days


def deadline_label(end_date: Optional[str], today: Optional[dt.date] = None) -> str:
    days = days_until(end_date, today)
    if days is None:
        return ""
    if days == 0:
        return "Due today"
    if days < 0:
        n = -days
        return f"Overdue by {n} day" if n == 1 else f"Overdue by {n} days"
    return "1 day left" if days == 1 else f"{days} days left"
