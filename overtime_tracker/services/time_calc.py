from __future__ import annotations

import math
import re
from datetime import date

from overtime_tracker.errors import InvalidDate, InvalidTimeFormat

MINUTES_PER_DAY = 24 * 60

_HHMM_RE = re.compile(r"(\d{1,2}):(\d{2})", re.ASCII)
_ISO_DATE_RE = re.compile(r"\d{4}-\d{2}-\d{2}", re.ASCII)


def time_to_minutes(value: str) -> int:
    if not isinstance(value, str):
        raise InvalidTimeFormat(value)
    match = _HHMM_RE.fullmatch(value)
    if match is None:
        raise InvalidTimeFormat(value)
    hour = int(match.group(1))
    minute = int(match.group(2))
    if hour > 23 or minute > 59:
        raise InvalidTimeFormat(value)
    return hour * 60 + minute


def minutes_to_time(minutes: int) -> str:
    # Also renders elapsed spans, so hours may exceed 23.
    if minutes < 0:
        raise ValueError(f"minutes must be non-negative, got {minutes}")
    hours, mins = divmod(int(minutes), 60)
    return f"{hours:02d}:{mins:02d}"


def work_minutes(start_time: str, end_time: str, break_minutes: int) -> int:
    """Raw ``end - start - break``; no midnight wraparound is applied here."""
    return time_to_minutes(end_time) - time_to_minutes(start_time) - break_minutes


def parse_date(value: str) -> date:
    if not isinstance(value, str) or _ISO_DATE_RE.fullmatch(value) is None:
        raise InvalidDate(value)
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise InvalidDate(value) from exc


def coerce_date(value: date | str) -> date:
    if isinstance(value, date):
        return value
    return parse_date(value)


def current_date() -> date:
    return date.today()


def format_duration(hours: float) -> str:
    magnitude = abs(hours)
    whole_hours = math.floor(magnitude)
    minutes = math.floor((magnitude - whole_hours) * 60 + 0.5)
    if minutes >= 60:
        whole_hours += 1
        minutes -= 60
    return f"{whole_hours}時間{minutes:02d}分"


def format_currency(amount: float) -> str:
    rounded = math.floor(amount + 0.5)
    if rounded < 0:
        return f"-¥{-rounded:,}"
    return f"¥{rounded:,}"
