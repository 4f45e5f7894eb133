"""Temporal matching of journal events on naive local clock times."""

from datetime import date, datetime, time, timedelta
from typing import Iterable, List, Protocol, TypeVar


class Timed(Protocol):
    date: date
    time: time


T = TypeVar("T", bound=Timed)


def combine(day: date, clock: time) -> datetime:
    """Combine a calendar day and a clock time into one naive instant."""
    return datetime.combine(day, clock)


def event_instant(event: Timed) -> datetime:
    return combine(event.date, event.time)


def minutes_between(start: datetime, end: datetime) -> int:
    """Whole minutes from start to end, truncated toward zero."""
    return int((end - start).total_seconds() / 60)


def in_window(anchor: datetime, instant: datetime, window_minutes: float) -> bool:
    """True if instant is strictly after anchor and at most window_minutes later."""
    return anchor < instant <= anchor + timedelta(minutes=window_minutes)


def events_after(
    anchor: datetime, candidates: Iterable[T], window_minutes: float
) -> List[T]:
    """
    Find candidate events that happened after the anchor, within the window.

    The lower bound is exclusive (an event at exactly the anchor time is not
    "after" it) and the upper bound is inclusive.

    Args:
        anchor: Instant of the causing event (e.g. a meal)
        candidates: Events with ``date`` and ``time`` attributes
        window_minutes: Maximum minutes between anchor and candidate

    Returns:
        Matching candidates in their original order
    """
    return [c for c in candidates if in_window(anchor, event_instant(c), window_minutes)]
