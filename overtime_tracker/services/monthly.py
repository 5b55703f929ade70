from __future__ import annotations

import re
from calendar import monthrange
from collections.abc import Iterable
from datetime import date

from overtime_tracker.errors import InvalidMonthKey
from overtime_tracker.schemas import (
    MaxOvertimeDay,
    MonthlySalarySummary,
    MonthlySummary,
    SalarySettings,
    WorkRecord,
)
from overtime_tracker.services.holidays import (
    MAX_CALENDAR_YEAR,
    MIN_CALENDAR_YEAR,
    statutory_working_days,
)
from overtime_tracker.services.salary import calculate_pay_breakdown, hourly_wage
from overtime_tracker.services.time_calc import coerce_date, current_date

_MONTH_KEY_RE = re.compile(r"(\d{4})-(\d{2})", re.ASCII)


def parse_month_key(month_key: str) -> tuple[int, int]:
    match = _MONTH_KEY_RE.fullmatch(month_key) if isinstance(month_key, str) else None
    if match is None:
        raise InvalidMonthKey(month_key)
    year = int(match.group(1))
    month = int(match.group(2))
    if not 1 <= month <= 12 or not MIN_CALENDAR_YEAR <= year <= MAX_CALENDAR_YEAR:
        raise InvalidMonthKey(month_key)
    return year, month


def month_key_for(day: date | str) -> str:
    target = coerce_date(day)
    return f"{target.year:04d}-{target.month:02d}"


def month_name(month_key: str) -> str:
    year, month = parse_month_key(month_key)
    return f"{year}年{month:02d}月"


def month_range(month_key: str) -> tuple[date, date]:
    year, month = parse_month_key(month_key)
    return date(year, month, 1), date(year, month, monthrange(year, month)[1])


def is_date_in_month(day: date | str, month_key: str) -> bool:
    start, end = month_range(month_key)
    return start <= coerce_date(day) <= end


def records_in_month(records: Iterable[WorkRecord], month_key: str) -> list[WorkRecord]:
    start, end = month_range(month_key)
    return [record for record in records if start <= record.date <= end]


def available_months(records: Iterable[WorkRecord], *, today: date | None = None) -> list[str]:
    months = {month_key_for(record.date) for record in records}
    months.add(month_key_for(today or current_date()))
    return sorted(months, reverse=True)


def aggregate_month(
    records: Iterable[WorkRecord],
    month_key: str,
    salary_settings: SalarySettings,
    *,
    today: date | None = None,
) -> MonthlySummary:
    year, month = parse_month_key(month_key)
    month_records = records_in_month(records, month_key)

    total_overtime = sum(record.overtime_hours for record in month_records)
    total_shortage = sum(record.shortage_hours for record in month_records)
    total_work = sum(record.actual_work_hours for record in month_records)
    net_overtime = total_overtime - total_shortage
    working_days = len(month_records)

    max_record: WorkRecord | None = None
    for record in month_records:
        if max_record is None or record.overtime_hours > max_record.overtime_hours:
            max_record = record

    estimated_pay = 0.0
    if net_overtime > 0:
        # Net overtime priced as weekday overtime.
        estimated_pay = net_overtime * hourly_wage(salary_settings, today=today) * salary_settings.overtime_rate

    return MonthlySummary(
        month_key=month_key,
        total_overtime_hours=total_overtime,
        total_shortage_hours=total_shortage,
        net_overtime_hours=net_overtime,
        total_work_hours=total_work,
        working_days=working_days,
        average_overtime_per_day=total_overtime / working_days if working_days else 0.0,
        max_overtime_day=(
            MaxOvertimeDay(date=max_record.date, hours=max_record.overtime_hours)
            if max_record is not None
            else None
        ),
        estimated_overtime_pay=estimated_pay,
        statutory_working_days=statutory_working_days(year, month),
    )


def calculate_monthly_salary_summary(
    records: Iterable[WorkRecord],
    month_key: str,
    salary_settings: SalarySettings,
    *,
    today: date | None = None,
) -> MonthlySalarySummary:
    month_records = records_in_month(records, month_key)

    total_regular_overtime_pay = 0.0
    total_holiday_pay = 0.0
    total_late_night_pay = 0.0
    total_premium_pay = 0.0
    holiday_work_days = 0
    total_overtime_hours = 0.0
    total_late_night_hours = 0.0

    for record in month_records:
        breakdown = calculate_pay_breakdown(record, salary_settings, today=today)
        total_regular_overtime_pay += breakdown.regular_overtime_pay
        total_holiday_pay += breakdown.holiday_pay
        total_late_night_pay += breakdown.late_night_pay
        total_premium_pay += breakdown.total_pay

        if breakdown.classification.is_holiday and record.actual_work_hours > 0:
            holiday_work_days += 1
        total_overtime_hours += record.overtime_hours
        total_late_night_hours += breakdown.late_night_hours

    return MonthlySalarySummary(
        month_key=month_key,
        base_salary=salary_settings.base_salary_monthly,
        total_regular_overtime_pay=total_regular_overtime_pay,
        total_holiday_pay=total_holiday_pay,
        total_late_night_pay=total_late_night_pay,
        total_premium_pay=total_premium_pay,
        total_salary=salary_settings.base_salary_monthly + total_premium_pay,
        working_days=len(month_records),
        holiday_work_days=holiday_work_days,
        total_overtime_hours=total_overtime_hours,
        total_late_night_hours=total_late_night_hours,
    )
