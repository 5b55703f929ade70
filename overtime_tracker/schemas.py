from datetime import date
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from overtime_tracker.services.time_calc import time_to_minutes

HolidayKind = Literal["national", "weekend", "yearEnd"]


def _validate_hhmm(value: str) -> str:
    time_to_minutes(value)
    return value


class OvertimeSettings(BaseModel):
    standard_work_hours: float = Field(default=8.0, gt=0, le=24)
    default_break_minutes: int = Field(default=60, ge=0)
    negative_span_policy: Literal["PRESERVE", "REJECT"] = "PRESERVE"

    model_config = ConfigDict(frozen=True)


class SalarySettings(BaseModel):
    base_salary_monthly: float = Field(default=250000, ge=0)
    working_days_per_month: int = Field(default=22, gt=0, le=31)
    working_days_mode: Literal["MANUAL", "AUTO"] = "MANUAL"
    standard_work_hours: float = Field(default=8.0, gt=0, le=24)
    overtime_rate: float = Field(default=1.25, ge=1.0)
    holiday_rate: float = Field(default=1.35, ge=1.0)
    late_night_rate: float = Field(default=1.25, ge=1.0)
    late_night_start: str = "22:00"
    late_night_end: str = "05:00"

    model_config = ConfigDict(frozen=True)

    @field_validator("late_night_start", "late_night_end")
    @classmethod
    def validate_night_window(cls, value: str) -> str:
        return _validate_hhmm(value)


class WorkRecord(BaseModel):
    id: str = Field(min_length=1)
    date: date
    start_time: str
    end_time: str
    break_minutes: int = Field(default=0, ge=0)
    overnight: bool = False
    actual_work_hours: float = 0.0
    overtime_hours: float = Field(default=0.0, ge=0)
    shortage_hours: float = Field(default=0.0, ge=0)
    standard_work_hours_snapshot: float = Field(default=8.0, gt=0)

    model_config = ConfigDict(frozen=True)

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_times(cls, value: str) -> str:
        return _validate_hhmm(value)

    @model_validator(mode="after")
    def check_overtime_and_shortage_exclusive(self) -> "WorkRecord":
        if self.overtime_hours > 0 and self.shortage_hours > 0:
            raise ValueError("overtime_hours and shortage_hours cannot both be positive")
        return self


class HolidayEntry(BaseModel):
    name: str
    date: date

    model_config = ConfigDict(frozen=True)


class DayClassification(BaseModel):
    date: date
    is_holiday: bool
    kind: HolidayKind | None = None
    label: str | None = None
    day_of_week: str
    flags: list[str] = Field(default_factory=list)


class PayBreakdown(BaseModel):
    regular_overtime_pay: float = 0.0
    holiday_pay: float = 0.0
    late_night_pay: float = 0.0
    total_pay: float = 0.0
    hourly_wage: float
    late_night_hours: float
    classification: DayClassification


class MaxOvertimeDay(BaseModel):
    date: date
    hours: float


class MonthlySummary(BaseModel):
    month_key: str
    total_overtime_hours: float
    total_shortage_hours: float
    net_overtime_hours: float
    total_work_hours: float
    working_days: int
    average_overtime_per_day: float
    max_overtime_day: MaxOvertimeDay | None = None
    estimated_overtime_pay: float
    statutory_working_days: int


class MonthlySalarySummary(BaseModel):
    month_key: str
    base_salary: float
    total_regular_overtime_pay: float
    total_holiday_pay: float
    total_late_night_pay: float
    total_premium_pay: float
    total_salary: float
    working_days: int
    holiday_work_days: int
    total_overtime_hours: float
    total_late_night_hours: float


class WorkRecordDeriveRequest(BaseModel):
    date: date
    start_time: str
    end_time: str
    break_minutes: int | None = Field(default=None, ge=0)
    overnight: bool = False
    id: str | None = None
    settings: OvertimeSettings | None = None


class PayBreakdownRequest(BaseModel):
    record: WorkRecord
    salary_settings: SalarySettings | None = None


class MonthlyRequest(BaseModel):
    month_key: str
    records: list[WorkRecord] = Field(default_factory=list)
    salary_settings: SalarySettings | None = None


class HolidayListResponse(BaseModel):
    year: int
    source_year: int
    approximated: bool
    fixed: list[HolidayEntry]
    moving: list[HolidayEntry]


class WorkingDaysResponse(BaseModel):
    year: int
    month: int
    working_days: int
