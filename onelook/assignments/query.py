"""
Pure derivations over the assignment list: the filtered/sorted view, days left, urgency band.
Nothing here touches storage or mutates its input.
"""
import math
from datetime import datetime, timedelta
from typing import Iterable, List, Optional, Union

from onelook.assignments.models import ALL_SOURCES, Assignment, Source, parse_due

NEXT_DAYS_WINDOW = timedelta(days=7)
SECONDS_PER_DAY = 24 * 60 * 60

CRITICAL = "critical"
WARNING = "warning"
NORMAL = "normal"


def _resolve_source_filter(source_filter: Union[Source, str, None]) -> Optional[Source]:
    if source_filter is None:
        return None
    if isinstance(source_filter, str) and source_filter.strip().lower() in ("", ALL_SOURCES.lower()):
        return None
    return Source.parse(source_filter)


def matches_search(item: Assignment, needle: str) -> bool:
    """Case-insensitive substring match on title, course, source label and link."""
    needle = needle.lower()
    fields = (item.title, item.course, Source.parse(item.source).value, item.link or "")
    return any(needle in value.lower() for value in fields)


def view(
    items: Iterable[Assignment],
    search_text: str = "",
    source_filter: Union[Source, str, None] = None,
    next7_only: bool = False,
    now: Optional[datetime] = None,
) -> List[Assignment]:
    """
    Derive the visible list: search, then source filter, then the 7-day window,
    then a stable ascending sort by due time. Raises ValueError for an unknown source label.
    """
    rows = list(items)

    needle = (search_text or "").strip()
    if needle:
        rows = [r for r in rows if matches_search(r, needle)]

    source = _resolve_source_filter(source_filter)
    if source is not None:
        rows = [r for r in rows if Source.parse(r.source) == source]

    if next7_only:
        cap = (now or datetime.now()) + NEXT_DAYS_WINDOW
        rows = [r for r in rows if parse_due(r.due_iso) <= cap]

    rows.sort(key=lambda r: parse_due(r.due_iso))
    return rows


def days_left(due_iso: str, now: Optional[datetime] = None) -> int:
    """Whole days until due, rounded up. Zero or negative once due/overdue."""
    delta = parse_due(due_iso) - (now or datetime.now())
    return math.ceil(delta.total_seconds() / SECONDS_PER_DAY)


def urgency(days: int, critical_days: int = 1, warning_days: int = 3) -> str:
    if days <= critical_days:
        return CRITICAL
    if days <= warning_days:
        return WARNING
    return NORMAL


def describe_days_left(days: int) -> str:
    if days <= 0:
        return "Due today"
    return f"{days} day{'' if days == 1 else 's'} left"
