from __future__ import annotations

import unittest
from datetime import date

from fastapi.testclient import TestClient

from overtime_tracker.main import app
from overtime_tracker.routers.calculations import get_today


def override_get_today(value: date):
    def _override() -> date:
        return value

    return _override


def _record_payload(**overrides) -> dict[str, object]:
    payload: dict[str, object] = {
        "id": "rec-1",
        "date": "2025-03-18",
        "start_time": "09:00",
        "end_time": "20:00",
        "break_minutes": 60,
        "actual_work_hours": 10,
        "overtime_hours": 2,
        "shortage_hours": 0,
        "standard_work_hours_snapshot": 8,
    }
    payload.update(overrides)
    return payload


SALARY_PAYLOAD = {
    "base_salary_monthly": 264000,
    "working_days_per_month": 22,
    "standard_work_hours": 8,
    "overtime_rate": 1.25,
    "holiday_rate": 1.35,
    "late_night_rate": 1.25,
}


class CalculationEndpointTests(unittest.TestCase):
    def setUp(self) -> None:
        self.client = TestClient(app)

    def tearDown(self) -> None:
        app.dependency_overrides.clear()

    def test_health_echoes_request_id(self) -> None:
        response = self.client.get("/api/health", headers={"X-Request-Id": "req-123"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"status": "ok"})
        self.assertEqual(response.headers["X-Request-Id"], "req-123")

    def test_derive_work_record(self) -> None:
        response = self.client.post(
            "/api/work-records/derive",
            json={
                "date": "2025-03-18",
                "start_time": "09:00",
                "end_time": "20:00",
                "break_minutes": 60,
                "id": "rec-1",
                "settings": {"standard_work_hours": 8},
            },
        )
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["id"], "rec-1")
        self.assertEqual(body["actual_work_hours"], 10)
        self.assertEqual(body["overtime_hours"], 2)
        self.assertEqual(body["shortage_hours"], 0)
        self.assertEqual(body["standard_work_hours_snapshot"], 8)

    def test_derive_invalid_time(self) -> None:
        response = self.client.post(
            "/api/work-records/derive",
            json={"date": "2025-03-18", "start_time": "25:00", "end_time": "20:00"},
        )
        self.assertEqual(response.status_code, 422)
        self.assertEqual(response.json()["error"]["code"], "INVALID_TIME_FORMAT")

    def test_derive_reject_policy(self) -> None:
        response = self.client.post(
            "/api/work-records/derive",
            json={
                "date": "2025-03-18",
                "start_time": "23:00",
                "end_time": "01:00",
                "break_minutes": 0,
                "settings": {"negative_span_policy": "REJECT"},
            },
        )
        self.assertEqual(response.status_code, 422)
        self.assertEqual(response.json()["error"]["code"], "NEGATIVE_WORK_SPAN")

    def test_pay_breakdown(self) -> None:
        response = self.client.post(
            "/api/pay/breakdown",
            json={"record": _record_payload(), "salary_settings": SALARY_PAYLOAD},
        )
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["regular_overtime_pay"], 3750)
        self.assertEqual(body["holiday_pay"], 0)
        self.assertEqual(body["late_night_pay"], 0)
        self.assertEqual(body["total_pay"], 3750)
        self.assertEqual(body["classification"]["day_of_week"], "火")

    def test_pay_breakdown_rejects_invalid_record(self) -> None:
        response = self.client.post(
            "/api/pay/breakdown",
            json={"record": _record_payload(shortage_hours=1), "salary_settings": SALARY_PAYLOAD},
        )
        self.assertEqual(response.status_code, 422)
        self.assertEqual(response.json()["error"]["code"], "VALIDATION_ERROR")

    def test_monthly_summary_uses_injected_today(self) -> None:
        app.dependency_overrides[get_today] = override_get_today(date(2025, 8, 5))
        response = self.client.post(
            "/api/monthly/summary",
            json={
                "month_key": "2025-03",
                "records": [_record_payload(), _record_payload(id="rec-2", date="2025-04-01")],
                "salary_settings": {**SALARY_PAYLOAD, "working_days_mode": "AUTO"},
            },
        )
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["working_days"], 1)
        self.assertEqual(body["total_overtime_hours"], 2)
        self.assertEqual(body["max_overtime_day"], {"date": "2025-03-18", "hours": 2})
        self.assertEqual(body["estimated_overtime_pay"], 2 * 1650 * 1.25)

    def test_monthly_summary_invalid_month_key(self) -> None:
        response = self.client.post("/api/monthly/summary", json={"month_key": "2025/03", "records": []})
        self.assertEqual(response.status_code, 422)
        self.assertEqual(response.json()["error"]["code"], "INVALID_MONTH_KEY")

    def test_rejected_calculation_is_logged_with_code(self) -> None:
        with self.assertLogs("overtime_tracker.request", level="INFO") as logs:
            response = self.client.post("/api/monthly/summary", json={"month_key": "2025-13", "records": []})
        self.assertEqual(response.status_code, 422)
        rejected = [record for record in logs.records if record.getMessage() == "calculation_rejected"]
        self.assertEqual(len(rejected), 1)
        self.assertEqual(rejected[0].code, "INVALID_MONTH_KEY")
        self.assertEqual(rejected[0].path, "/api/monthly/summary")

    def test_validation_error_message_names_field(self) -> None:
        response = self.client.post(
            "/api/pay/breakdown",
            json={"record": _record_payload(start_time="9am"), "salary_settings": SALARY_PAYLOAD},
        )
        self.assertEqual(response.status_code, 422)
        message = response.json()["error"]["message"]
        self.assertIn("body.record.start_time", message)
        self.assertNotIn("{'type'", message)

    def test_unknown_route_uses_error_envelope(self) -> None:
        response = self.client.get("/api/no-such-endpoint")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["error"]["code"], "NOT_FOUND")
        self.assertTrue(response.headers["X-Request-Id"])

    def test_wrong_method_uses_error_envelope(self) -> None:
        response = self.client.get("/api/monthly/summary")
        self.assertEqual(response.status_code, 405)
        self.assertEqual(response.json()["error"]["code"], "METHOD_NOT_ALLOWED")

    def test_monthly_summary_rejects_far_off_year(self) -> None:
        for month_key in ["0500-03", "5000-03"]:
            with self.subTest(month_key=month_key):
                response = self.client.post("/api/monthly/summary", json={"month_key": month_key, "records": []})
                self.assertEqual(response.status_code, 422)
                self.assertEqual(response.json()["error"]["code"], "INVALID_MONTH_KEY")

    def test_monthly_salary_summary(self) -> None:
        app.dependency_overrides[get_today] = override_get_today(date(2025, 3, 31))
        response = self.client.post(
            "/api/monthly/salary-summary",
            json={
                "month_key": "2025-03",
                "records": [_record_payload()],
                "salary_settings": SALARY_PAYLOAD,
            },
        )
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["total_regular_overtime_pay"], 3750)
        self.assertEqual(body["total_salary"], 264000 + 3750)
        self.assertEqual(body["holiday_work_days"], 0)

    def test_check_holiday(self) -> None:
        response = self.client.get("/api/holidays/check", params={"date": "2025-01-13"})
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["kind"], "national")
        self.assertEqual(body["label"], "成人の日")
        self.assertEqual(body["flags"], [])

    def test_check_holiday_invalid_date(self) -> None:
        response = self.client.get("/api/holidays/check", params={"date": "2025-13-01"})
        self.assertEqual(response.status_code, 422)
        self.assertEqual(response.json()["error"]["code"], "INVALID_DATE")

    def test_list_holidays_for_fallback_year(self) -> None:
        response = self.client.get("/api/holidays", params={"year": 2026})
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertTrue(body["approximated"])
        self.assertEqual(body["source_year"], 2025)
        self.assertIn({"name": "元日", "date": "2026-01-01"}, body["fixed"])
        self.assertIn({"name": "成人の日", "date": "2026-01-12"}, body["moving"])

    def test_working_days(self) -> None:
        response = self.client.get("/api/working-days", params={"year": 2024, "month": 8})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"year": 2024, "month": 8, "working_days": 22})

    def test_working_days_rejects_bad_month(self) -> None:
        response = self.client.get("/api/working-days", params={"year": 2024, "month": 13})
        self.assertEqual(response.status_code, 422)
        self.assertEqual(response.json()["error"]["code"], "VALIDATION_ERROR")


if __name__ == "__main__":
    unittest.main()
