"""Japanese public holiday classification.

Two sources are combined. The fixed tables below list the statutory holidays
for each shipped year. The moving-holiday generator computes the Happy Monday
holidays and both equinoxes arithmetically for any year. Downstream code only
checks date membership, so the sources are not reconciled by name.
"""

from __future__ import annotations

import logging
import math
from calendar import monthrange
from dataclasses import dataclass
from datetime import date, timedelta

from overtime_tracker.schemas import DayClassification, HolidayEntry
from overtime_tracker.services.time_calc import coerce_date

logger = logging.getLogger("overtime_tracker.holidays")

UNSUPPORTED_YEAR_FALLBACK = "UNSUPPORTED_YEAR_FALLBACK"

YEAR_END_LABEL = "年末年始休暇"
WEEKDAY_LABELS = ("月", "火", "水", "木", "金", "土", "日")
WEEKEND_LABELS = {5: "土曜日", 6: "日曜日"}

MONDAY = 0

# The equinox approximation only holds inside this range.
MIN_CALENDAR_YEAR = 1900
MAX_CALENDAR_YEAR = 2099


def _table(year: int, rows: list[tuple[str, int, int]]) -> tuple[HolidayEntry, ...]:
    return tuple(HolidayEntry(name=name, date=date(year, month, day)) for name, month, day in rows)


FIXED_HOLIDAYS: dict[int, tuple[HolidayEntry, ...]] = {
    2024: _table(
        2024,
        [
            ("元日", 1, 1),
            ("成人の日", 1, 8),
            ("建国記念の日", 2, 11),
            ("天皇誕生日", 2, 23),
            ("春分の日", 3, 20),
            ("昭和の日", 4, 29),
            ("憲法記念日", 5, 3),
            ("みどりの日", 5, 4),
            ("こどもの日", 5, 5),
            ("海の日", 7, 15),
            ("山の日", 8, 11),
            ("敬老の日", 9, 16),
            ("秋分の日", 9, 22),
            ("スポーツの日", 10, 14),
            ("文化の日", 11, 3),
            ("勤労感謝の日", 11, 23),
        ],
    ),
    2025: _table(
        2025,
        [
            ("元日", 1, 1),
            ("成人の日", 1, 13),
            ("建国記念の日", 2, 11),
            ("天皇誕生日", 2, 23),
            ("春分の日", 3, 20),
            ("昭和の日", 4, 29),
            ("憲法記念日", 5, 3),
            ("みどりの日", 5, 4),
            ("こどもの日", 5, 5),
            ("海の日", 7, 21),
            ("山の日", 8, 11),
            ("敬老の日", 9, 15),
            ("秋分の日", 9, 23),
            ("スポーツの日", 10, 13),
            ("文化の日", 11, 3),
            ("勤労感謝の日", 11, 23),
        ],
    ),
}


@dataclass(frozen=True)
class HolidayTable:
    requested_year: int
    source_year: int
    entries: tuple[HolidayEntry, ...]
    approximated: bool


def nearest_table_year(year: int, available: list[int] | None = None) -> int:
    years = sorted(FIXED_HOLIDAYS) if available is None else sorted(available)
    # Ties go to the later year.
    return min(years, key=lambda candidate: (abs(candidate - year), -candidate))


def resolve_holiday_table(year: int) -> HolidayTable:
    """Fixed holidays for ``year``.

    Years without a table borrow the nearest tabulated year, re-dated onto
    ``year`` by month and day. The result is then only an approximation and
    is flagged as such.
    """
    entries = FIXED_HOLIDAYS.get(year)
    if entries is not None:
        return HolidayTable(requested_year=year, source_year=year, entries=entries, approximated=False)

    source_year = nearest_table_year(year)
    logger.warning(
        "holiday_table_fallback",
        extra={"requested_year": year, "source_year": source_year},
    )
    projected = []
    for entry in FIXED_HOLIDAYS[source_year]:
        try:
            projected.append(HolidayEntry(name=entry.name, date=entry.date.replace(year=year)))
        except ValueError:
            # Feb 29 has no counterpart in a common year.
            continue
    return HolidayTable(
        requested_year=year,
        source_year=source_year,
        entries=tuple(projected),
        approximated=True,
    )


def nth_weekday_of_month(year: int, month: int, weekday: int, n: int) -> date:
    first = date(year, month, 1)
    offset = (weekday - first.weekday()) % 7
    return first + timedelta(days=offset + (n - 1) * 7)


def _equinox_day(base: float, year: int) -> int:
    elapsed = year - 1851
    return math.floor(base + 0.242194 * elapsed - (elapsed // 4))


def spring_equinox_day(year: int) -> date:
    return date(year, 3, _equinox_day(20.8431, year))


def autumn_equinox_day(year: int) -> date:
    return date(year, 9, _equinox_day(23.2488, year))


def moving_holidays(year: int) -> tuple[HolidayEntry, ...]:
    return (
        HolidayEntry(name="成人の日", date=nth_weekday_of_month(year, 1, MONDAY, 2)),
        HolidayEntry(name="春分の日", date=spring_equinox_day(year)),
        HolidayEntry(name="海の日", date=nth_weekday_of_month(year, 7, MONDAY, 3)),
        HolidayEntry(name="敬老の日", date=nth_weekday_of_month(year, 9, MONDAY, 3)),
        HolidayEntry(name="秋分の日", date=autumn_equinox_day(year)),
        HolidayEntry(name="スポーツの日", date=nth_weekday_of_month(year, 10, MONDAY, 2)),
    )


def holiday_dates(year: int) -> set[date]:
    fixed = resolve_holiday_table(year).entries
    return {entry.date for entry in fixed} | {entry.date for entry in moving_holidays(year)}


def statutory_working_days(year: int, month: int) -> int:
    """Days in the month that are neither weekends nor holidays."""
    holidays = holiday_dates(year)
    days_in_month = monthrange(year, month)[1]
    count = 0
    for day_number in range(1, days_in_month + 1):
        day = date(year, month, day_number)
        if day.weekday() >= 5 or day in holidays:
            continue
        count += 1
    return count


def find_national_holiday(day: date | str) -> HolidayEntry | None:
    target = coerce_date(day)
    for entry in resolve_holiday_table(target.year).entries:
        if entry.date == target:
            return entry
    return None


def is_national_holiday(day: date | str) -> bool:
    return find_national_holiday(day) is not None


def is_weekend(day: date | str) -> bool:
    return coerce_date(day).weekday() >= 5


def is_year_end_holiday(day: date | str) -> bool:
    target = coerce_date(day)
    return (target.month == 12 and target.day >= 29) or (target.month == 1 and 2 <= target.day <= 3)


def day_of_week_label(day: date | str) -> str:
    return WEEKDAY_LABELS[coerce_date(day).weekday()]


def classify_day(day: date | str) -> DayClassification:
    target = coerce_date(day)
    table = resolve_holiday_table(target.year)
    flags = [UNSUPPORTED_YEAR_FALLBACK] if table.approximated else []
    day_label = day_of_week_label(target)

    for entry in table.entries:
        if entry.date == target:
            return DayClassification(
                date=target,
                is_holiday=True,
                kind="national",
                label=entry.name,
                day_of_week=day_label,
                flags=flags,
            )

    if is_weekend(target):
        return DayClassification(
            date=target,
            is_holiday=True,
            kind="weekend",
            label=WEEKEND_LABELS[target.weekday()],
            day_of_week=day_label,
            flags=flags,
        )

    if is_year_end_holiday(target):
        return DayClassification(
            date=target,
            is_holiday=True,
            kind="yearEnd",
            label=YEAR_END_LABEL,
            day_of_week=day_label,
            flags=flags,
        )

    return DayClassification(date=target, is_holiday=False, day_of_week=day_label, flags=flags)
