from __future__ import annotations

import datetime as dt
import re
import unicodedata
from typing import Optional, Tuple

from apscheduler.triggers.cron import CronTrigger

from .models import ReminderKind


# 0=Sunday .. 6=Saturday
WEEKDAYS = {
    "domingo": 0,
    "lunes": 1,
    "martes": 2,
    "miercoles": 3,
    "jueves": 4,
    "viernes": 5,
    "sabado": 6,
}

REVIEW_SEND_HOUR = 9

_TIME_RE = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*$")


def parse_send_time(value: str) -> Tuple[int, int]:
    match = _TIME_RE.match(value or "")
    if not match:
        raise ValueError(f"Invalid send time: {value!r} (expected HH:MM)")
    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        raise ValueError(f"Invalid send time: {value!r} (expected HH:MM)")
    return hour, minute


def weekday_number(name: Optional[str]) -> Optional[int]:
    if not name:
        return None
    folded = unicodedata.normalize("NFKD", name.strip().lower())
    folded = "".join(ch for ch in folded if not unicodedata.combining(ch))
    return WEEKDAYS.get(folded)


_CRON_DAYS = ("sun", "mon", "tue", "wed", "thu", "fri", "sat")


def next_weekly(now: dt.datetime, weekday: int, hour: int, minute: int) -> dt.datetime:
    trigger = CronTrigger(
        day_of_week=_CRON_DAYS[weekday], hour=hour, minute=minute, timezone=now.tzinfo
    )
    # The current minute never counts, even when it matches exactly.
    start = now.replace(second=0, microsecond=0) + dt.timedelta(minutes=1)
    return trigger.get_next_fire_time(None, start)


def next_monthly(now: dt.datetime, hour: int, minute: int) -> dt.datetime:
    """Same day-of-month in the next calendar month.

    Days that do not exist in that month overflow into the following one,
    so Jan 31 becomes Mar 3 (Mar 2 in leap years) and May 31 becomes Jul 1.
    """
    year, month = (now.year + 1, 1) if now.month == 12 else (now.year, now.month + 1)
    first = now.replace(
        year=year, month=month, day=1, hour=hour, minute=minute, second=0, microsecond=0
    )
    return first + dt.timedelta(days=now.day - 1)


def tomorrow_at_nine(now: dt.datetime) -> dt.datetime:
    target = now + dt.timedelta(days=1)
    return target.replace(hour=REVIEW_SEND_HOUR, minute=0, second=0, microsecond=0)


def compute_next_send(
    kind: ReminderKind,
    send_weekday: Optional[str],
    send_time: Optional[str],
    now: dt.datetime,
    send_at: Optional[dt.datetime] = None,
) -> Optional[dt.datetime]:
    """Return the next absolute send time for a reminder, or None.

    ``now`` must be timezone-aware and expressed in the zone the wall-clock
    ``send_time`` refers to.
    """
    if kind is ReminderKind.ONE_TIME:
        return send_at or now
    if kind in (ReminderKind.REVIEW, ReminderKind.ANNIVERSARY, ReminderKind.BIRTHDAY):
        return tomorrow_at_nine(now)
    if kind in (ReminderKind.WEEKLY, ReminderKind.MONTHLY):
        if not send_time:
            return None
        hour, minute = parse_send_time(send_time)
        if kind is ReminderKind.MONTHLY:
            return next_monthly(now, hour, minute)
        weekday = weekday_number(send_weekday)
        if weekday is None:
            return None
        return next_weekly(now, weekday, hour, minute)
    raise ValueError(f"Unhandled reminder kind: {kind!r}")
