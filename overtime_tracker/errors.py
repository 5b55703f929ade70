from __future__ import annotations

from fastapi import Request
from fastapi.responses import JSONResponse


class ApiError(Exception):
    def __init__(self, status_code: int, code: str, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.code = code
        self.message = message


class InvalidTimeFormat(ApiError, ValueError):
    def __init__(self, value: object):
        super().__init__(422, "INVALID_TIME_FORMAT", f"Invalid time {value!r}. Use HH:MM.")
        self.value = value


class InvalidDate(ApiError, ValueError):
    def __init__(self, value: object):
        super().__init__(422, "INVALID_DATE", f"Invalid date {value!r}. Use YYYY-MM-DD.")
        self.value = value


class InvalidMonthKey(ApiError, ValueError):
    def __init__(self, value: object):
        super().__init__(422, "INVALID_MONTH_KEY", f"Invalid month key {value!r}. Use YYYY-MM.")
        self.value = value


class NegativeWorkSpan(ApiError, ValueError):
    def __init__(self, start_time: str, end_time: str, break_minutes: int = 0, *, reversed_span: bool = True):
        if reversed_span:
            message = f"End time {end_time} is before start time {start_time}. Mark the record as overnight."
        else:
            message = f"Break of {break_minutes} minutes exceeds the span {start_time}-{end_time}."
        super().__init__(422, "NEGATIVE_WORK_SPAN", message)
        self.start_time = start_time
        self.end_time = end_time
        self.break_minutes = break_minutes


def get_request_id(request: Request) -> str:
    request_id = getattr(request.state, "request_id", None)
    if request_id:
        return str(request_id)
    return "unknown"


def error_response(request: Request, *, status_code: int, code: str, message: str) -> JSONResponse:
    payload = {
        "error": {
            "code": code,
            "message": message,
            "request_id": get_request_id(request),
        }
    }
    return JSONResponse(status_code=status_code, content=payload)
