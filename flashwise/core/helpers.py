# core/helpers.py
import math
from datetime import datetime, timezone
from typing import Dict, Optional, Union

from flashwise.models import Category

CATEGORY_NAMES: Dict[Category, str] = {
    Category.FULLSTACK: "Fullstack Web Development",
    Category.APPDEV: "App Development",
    Category.PYTHON: "Python Programming",
}

CATEGORY_ICONS: Dict[Category, str] = {
    Category.FULLSTACK: "🌐",
    Category.APPDEV: "📱",
    Category.PYTHON: "🐍",
}

def get_category_name(category: Union[Category, str]) -> str:
    return CATEGORY_NAMES[Category(category)]

def get_category_icon(category: Union[Category, str]) -> str:
    return CATEGORY_ICONS[Category(category)]

def round_half_up(value: float) -> int:
    """Rounds .5 upwards (12.5 -> 13). The builtin round() would give 12."""
    return math.floor(value + 0.5)

def percentage(part: int, whole: int) -> int:
    """Rounded percentage, 0 when whole is 0."""
    if not whole:
        return 0
    return round_half_up(part / whole * 100)

def as_utc(value: Union[datetime, str]) -> datetime:
    """
    Normalizes a timestamp for comparisons.
    SQLite hands back naive datetimes; those are stored as UTC so we tag them as such.
    """
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value

def format_quiz_duration(seconds: int) -> str:
    minutes, remaining_seconds = divmod(int(seconds), 60)
    return f"{minutes}m {remaining_seconds}s"

def time_ago(value: Optional[Union[datetime, str]], now: Optional[datetime] = None) -> str:
    """Short relative description, e.g. '3 days ago'."""
    if value is None:
        return "never"
    now = as_utc(now) if now else datetime.now(timezone.utc)
    seconds = int((now - as_utc(value)).total_seconds())

    if seconds < 45:
        return "just now"

    for unit, size in (("year", 365 * 86400), ("month", 30 * 86400), ("day", 86400),
                       ("hour", 3600), ("minute", 60)):
        if seconds >= size:
            count = seconds // size
            return f"{count} {unit}{'s' if count != 1 else ''} ago"
    return "1 minute ago"
