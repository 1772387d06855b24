"""Matching a client's target schools and round against the deadline table.

Everything here is pure: the caller supplies "today" and the deadline rows,
so results are deterministic and the input table is never modified.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Iterable, Sequence
from datetime import date, datetime, timedelta
from typing import Protocol
from zoneinfo import ZoneInfo

from admitdesk.types import DeadlineUrgency, DeadlineView, SchoolDeadlineRecord

DEFAULT_URGENT_WINDOW_DAYS = 14

Clock = Callable[[], date]


class RoundTarget(Protocol):
    target_schools: list[str] | None
    application_round: str | None


def round_token(application_round: str) -> str:
    return application_round.lower().replace("round ", "")


def relevant_deadlines(
    profile: RoundTarget | None,
    all_deadlines: Iterable[SchoolDeadlineRecord],
) -> list[SchoolDeadlineRecord]:
    """Rows for the profile's schools whose round name contains the round token.

    The match is a substring test, so "Round 1" (token "1") also hits any
    round name containing a "1". Order of ``all_deadlines`` is preserved.
    """
    if profile is None or not profile.target_schools or not profile.application_round:
        return []

    schools = set(profile.target_schools)
    token = round_token(profile.application_round)
    return [
        row
        for row in all_deadlines
        if row.school_name in schools and token in row.round_name.lower()
    ]


def days_until(deadline_date: date | datetime, today: date | datetime) -> int:
    if isinstance(deadline_date, datetime):
        deadline_date = deadline_date.date()
    if isinstance(today, datetime):
        today = today.date()
    return math.ceil((deadline_date - today) / timedelta(days=1))


def classify(days_left: int, urgent_window_days: int = DEFAULT_URGENT_WINDOW_DAYS) -> DeadlineUrgency:
    if days_left < 0:
        return "past"
    if days_left <= urgent_window_days:
        return "urgent"
    return "normal"


def annotate_deadlines(
    rows: Sequence[SchoolDeadlineRecord],
    today: date,
    urgent_window_days: int = DEFAULT_URGENT_WINDOW_DAYS,
) -> list[DeadlineView]:
    views: list[DeadlineView] = []
    for row in rows:
        left = days_until(row.deadline_date, today)
        views.append(
            DeadlineView(
                school_name=row.school_name,
                round_name=row.round_name,
                deadline_date=row.deadline_date,
                days_left=left,
                urgency=classify(left, urgent_window_days),
            )
        )
    return views


def timezone_clock(timezone: str) -> Clock:
    zone = ZoneInfo(timezone)

    def _today() -> date:
        return datetime.now(zone).date()

    return _today
