from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

from overtime_tracker.schemas import OvertimeSettings, SalarySettings


class Settings(BaseSettings):
    app_name: str = "OvertimeTracker"
    cors_allow_origins: str = "http://127.0.0.1:5173,http://localhost:5173"
    log_level: str = "INFO"

    standard_work_hours: float = 8.0
    default_break_minutes: int = 60
    negative_span_policy: Literal["PRESERVE", "REJECT"] = "PRESERVE"

    base_salary_monthly: float = 250000
    working_days_per_month: int = 22
    working_days_mode: Literal["MANUAL", "AUTO"] = "MANUAL"
    overtime_rate: float = 1.25
    holiday_rate: float = 1.35
    late_night_rate: float = 1.25
    late_night_start: str = "22:00"
    late_night_end: str = "05:00"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()


def get_cors_origins() -> list[str]:
    raw = get_settings().cors_allow_origins
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def default_overtime_settings() -> OvertimeSettings:
    settings = get_settings()
    return OvertimeSettings(
        standard_work_hours=settings.standard_work_hours,
        default_break_minutes=settings.default_break_minutes,
        negative_span_policy=settings.negative_span_policy,
    )


def default_salary_settings() -> SalarySettings:
    settings = get_settings()
    return SalarySettings(
        base_salary_monthly=settings.base_salary_monthly,
        working_days_per_month=settings.working_days_per_month,
        working_days_mode=settings.working_days_mode,
        standard_work_hours=settings.standard_work_hours,
        overtime_rate=settings.overtime_rate,
        holiday_rate=settings.holiday_rate,
        late_night_rate=settings.late_night_rate,
        late_night_start=settings.late_night_start,
        late_night_end=settings.late_night_end,
    )
