from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from uuid import uuid4

from overtime_tracker.errors import NegativeWorkSpan
from overtime_tracker.schemas import OvertimeSettings, WorkRecord
from overtime_tracker.services.time_calc import MINUTES_PER_DAY, coerce_date, work_minutes

logger = logging.getLogger("overtime_tracker.work_details")


@dataclass(frozen=True)
class WorkTimeDetails:
    actual_work_hours: float
    overtime_hours: float
    shortage_hours: float


def _span_minutes(
    start_time: str,
    end_time: str,
    break_minutes: int,
    *,
    overnight: bool,
    negative_span_policy: str,
) -> int:
    minutes = work_minutes(start_time, end_time, break_minutes)
    if overnight and minutes + break_minutes <= 0:
        minutes += MINUTES_PER_DAY

    if minutes < 0:
        if negative_span_policy == "REJECT":
            raise NegativeWorkSpan(
                start_time,
                end_time,
                break_minutes,
                reversed_span=minutes + break_minutes < 0,
            )
        logger.warning(
            "negative_work_span",
            extra={
                "start_time": start_time,
                "end_time": end_time,
                "break_minutes": break_minutes,
                "work_minutes": minutes,
            },
        )
    return minutes


def derive_work_details(
    start_time: str,
    end_time: str,
    settings: OvertimeSettings,
    *,
    break_minutes: int | None = None,
    overnight: bool = False,
) -> WorkTimeDetails:
    """Split a shift into actual hours and either overtime or shortage.

    Without ``overnight`` an end time before the start time is not wrapped
    past midnight. Whenever the span minus the break comes out negative, the
    ``PRESERVE`` policy keeps it as shortage and logs a warning, while
    ``REJECT`` raises ``NegativeWorkSpan``.
    """
    effective_break = settings.default_break_minutes if break_minutes is None else break_minutes
    minutes = _span_minutes(
        start_time,
        end_time,
        effective_break,
        overnight=overnight,
        negative_span_policy=settings.negative_span_policy,
    )
    actual_work_hours = minutes / 60
    difference = actual_work_hours - settings.standard_work_hours

    if difference >= 0:
        return WorkTimeDetails(
            actual_work_hours=actual_work_hours,
            overtime_hours=difference,
            shortage_hours=0.0,
        )
    return WorkTimeDetails(
        actual_work_hours=actual_work_hours,
        overtime_hours=0.0,
        shortage_hours=abs(difference),
    )


def net_overtime_hours(details: WorkTimeDetails | WorkRecord) -> float:
    return details.overtime_hours - details.shortage_hours


def build_work_record(
    day: date | str,
    start_time: str,
    end_time: str,
    settings: OvertimeSettings,
    *,
    break_minutes: int | None = None,
    overnight: bool = False,
    record_id: str | None = None,
) -> WorkRecord:
    effective_break = settings.default_break_minutes if break_minutes is None else break_minutes
    details = derive_work_details(
        start_time,
        end_time,
        settings,
        break_minutes=effective_break,
        overnight=overnight,
    )
    return WorkRecord(
        id=record_id or uuid4().hex,
        date=coerce_date(day),
        start_time=start_time,
        end_time=end_time,
        break_minutes=effective_break,
        overnight=overnight,
        actual_work_hours=details.actual_work_hours,
        overtime_hours=details.overtime_hours,
        shortage_hours=details.shortage_hours,
        standard_work_hours_snapshot=settings.standard_work_hours,
    )


def recalculate_record(record: WorkRecord, settings: OvertimeSettings | None = None) -> WorkRecord:
    """Re-derive a record's figures.

    The record's own standard-hours snapshot is used unless new settings are
    passed, in which case the snapshot is replaced too.
    """
    if settings is None:
        settings = OvertimeSettings(
            standard_work_hours=record.standard_work_hours_snapshot,
            default_break_minutes=record.break_minutes,
        )
    details = derive_work_details(
        record.start_time,
        record.end_time,
        settings,
        break_minutes=record.break_minutes,
        overnight=record.overnight,
    )
    return record.model_copy(
        update={
            "actual_work_hours": details.actual_work_hours,
            "overtime_hours": details.overtime_hours,
            "shortage_hours": details.shortage_hours,
            "standard_work_hours_snapshot": settings.standard_work_hours,
        }
    )
