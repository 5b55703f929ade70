from __future__ import annotations

from datetime import date

from overtime_tracker.schemas import PayBreakdown, SalarySettings, WorkRecord
from overtime_tracker.services.holidays import classify_day, statutory_working_days
from overtime_tracker.services.time_calc import MINUTES_PER_DAY, current_date, time_to_minutes


def resolve_working_days_per_month(salary_settings: SalarySettings, *, today: date | None = None) -> int:
    if salary_settings.working_days_mode == "MANUAL":
        return salary_settings.working_days_per_month
    reference = today or current_date()
    return statutory_working_days(reference.year, reference.month)


def hourly_wage(salary_settings: SalarySettings, *, today: date | None = None) -> float:
    working_days = resolve_working_days_per_month(salary_settings, today=today)
    daily_wage = salary_settings.base_salary_monthly / working_days
    return daily_wage / salary_settings.standard_work_hours


def late_night_hours(start_time: str, end_time: str, night_start: str, night_end: str) -> float:
    """Hours of the shift that fall inside the night window.

    ``end <= start`` is read as a shift that crosses midnight: the part from
    ``max(start, night_start)`` up to midnight is counted, then midnight up to
    ``min(end, night_end)``.
    """
    start = time_to_minutes(start_time)
    end = time_to_minutes(end_time)
    window_start = time_to_minutes(night_start)
    window_end = time_to_minutes(night_end)

    minutes = 0
    if end <= start:
        minutes += MINUTES_PER_DAY - max(start, window_start)
        minutes += min(end, window_end)
    else:
        overlap_start = max(start, window_start)
        overlap_end = min(end, MINUTES_PER_DAY)
        minutes += max(0, overlap_end - overlap_start)
    return minutes / 60


def calculate_pay_breakdown(
    record: WorkRecord,
    salary_settings: SalarySettings,
    *,
    today: date | None = None,
) -> PayBreakdown:
    wage = hourly_wage(salary_settings, today=today)
    classification = classify_day(record.date)
    night_hours = late_night_hours(
        record.start_time,
        record.end_time,
        salary_settings.late_night_start,
        salary_settings.late_night_end,
    )

    regular_overtime_pay = 0.0
    holiday_pay = 0.0
    late_night_pay = 0.0

    if classification.is_holiday:
        # The whole shift is premium on a holiday, no standard-hours threshold.
        holiday_pay = max(0.0, record.actual_work_hours) * wage * salary_settings.holiday_rate
    elif record.overtime_hours > 0:
        regular_overtime_pay = record.overtime_hours * wage * salary_settings.overtime_rate

    # Added on top of either branch, even for hours already paid as overtime.
    if night_hours > 0:
        late_night_pay = night_hours * wage * salary_settings.late_night_rate

    return PayBreakdown(
        regular_overtime_pay=regular_overtime_pay,
        holiday_pay=holiday_pay,
        late_night_pay=late_night_pay,
        total_pay=regular_overtime_pay + holiday_pay + late_night_pay,
        hourly_wage=wage,
        late_night_hours=night_hours,
        classification=classification,
    )
