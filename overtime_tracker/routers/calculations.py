from datetime import date

from fastapi import APIRouter, Depends, Query

from overtime_tracker.schemas import (
    DayClassification,
    HolidayListResponse,
    MonthlyRequest,
    MonthlySalarySummary,
    MonthlySummary,
    PayBreakdown,
    PayBreakdownRequest,
    WorkingDaysResponse,
    WorkRecord,
    WorkRecordDeriveRequest,
)
from overtime_tracker.services.holidays import (
    MAX_CALENDAR_YEAR,
    MIN_CALENDAR_YEAR,
    classify_day,
    moving_holidays,
    resolve_holiday_table,
    statutory_working_days,
)
from overtime_tracker.services.monthly import aggregate_month, calculate_monthly_salary_summary
from overtime_tracker.services.salary import calculate_pay_breakdown
from overtime_tracker.services.time_calc import current_date, parse_date
from overtime_tracker.services.work_details import build_work_record
from overtime_tracker.settings import default_overtime_settings, default_salary_settings

router = APIRouter(tags=["calculations"])


def get_today() -> date:
    return current_date()


@router.get("/api/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@router.post("/api/work-records/derive", response_model=WorkRecord)
def derive_work_record(payload: WorkRecordDeriveRequest) -> WorkRecord:
    return build_work_record(
        payload.date,
        payload.start_time,
        payload.end_time,
        payload.settings or default_overtime_settings(),
        break_minutes=payload.break_minutes,
        overnight=payload.overnight,
        record_id=payload.id,
    )


@router.post("/api/pay/breakdown", response_model=PayBreakdown)
def pay_breakdown(
    payload: PayBreakdownRequest,
    today: date = Depends(get_today),
) -> PayBreakdown:
    return calculate_pay_breakdown(
        payload.record,
        payload.salary_settings or default_salary_settings(),
        today=today,
    )


@router.post("/api/monthly/summary", response_model=MonthlySummary)
def monthly_summary(
    payload: MonthlyRequest,
    today: date = Depends(get_today),
) -> MonthlySummary:
    return aggregate_month(
        payload.records,
        payload.month_key,
        payload.salary_settings or default_salary_settings(),
        today=today,
    )


@router.post("/api/monthly/salary-summary", response_model=MonthlySalarySummary)
def monthly_salary_summary(
    payload: MonthlyRequest,
    today: date = Depends(get_today),
) -> MonthlySalarySummary:
    return calculate_monthly_salary_summary(
        payload.records,
        payload.month_key,
        payload.salary_settings or default_salary_settings(),
        today=today,
    )


@router.get("/api/holidays/check", response_model=DayClassification)
def check_holiday(day: str = Query(..., alias="date")) -> DayClassification:
    return classify_day(parse_date(day))


@router.get("/api/holidays", response_model=HolidayListResponse)
def list_holidays(year: int = Query(..., ge=MIN_CALENDAR_YEAR, le=MAX_CALENDAR_YEAR)) -> HolidayListResponse:
    table = resolve_holiday_table(year)
    return HolidayListResponse(
        year=year,
        source_year=table.source_year,
        approximated=table.approximated,
        fixed=list(table.entries),
        moving=list(moving_holidays(year)),
    )


@router.get("/api/working-days", response_model=WorkingDaysResponse)
def working_days(
    year: int = Query(..., ge=MIN_CALENDAR_YEAR, le=MAX_CALENDAR_YEAR),
    month: int = Query(..., ge=1, le=12),
) -> WorkingDaysResponse:
    return WorkingDaysResponse(year=year, month=month, working_days=statutory_working_days(year, month))
