from shiftpay.ingest.normalize import normalize_jobs, normalize_shifts


def test_normalize_shifts_coerces_numbers():
    shifts = normalize_shifts([
        {"id": "a", "date": "2025-09-01", "jobId": "cafe", "hours": "7.5", "breakMinutes": 30},
        {"id": "b", "date": "2025-09-02", "type": "cafe", "hours": "abc"},
        {"id": "c", "date": "2025-09-03", "job_id": "cafe", "hours": float("inf"), "break_minutes": float("nan")},
        {"id": "d", "date": "2025-09-04", "job_id": "cafe", "hours": -3, "note": "swap"},
    ])
    assert [s.hours for s in shifts] == [7.5, 0, 0, 0]
    assert [s.break_minutes for s in shifts] == [30, None, None, None]
    assert [s.job_id for s in shifts] == ["cafe"] * 4
    assert shifts[3].note == "swap"


def test_normalize_shifts_keeps_malformed_date():
    shifts = normalize_shifts([{"date": "someday", "job_id": "cafe", "hours": 4}])
    assert shifts[0].date == "someday"
    assert shifts[0].id == "shift-0"


def test_normalize_shifts_empty():
    assert normalize_shifts([]) == []


def test_normalize_jobs_nested_records():
    [job] = normalize_jobs([{
        "id": "cafe",
        "name": "Cafe",
        "hourlyRates": {"weekday": "25.5", "saturday": None, "sunday": float("nan"), "holiday": -4},
        "defaultHours": {"weekday": 8, "weekend": "x"},
        "defaultBreakMinutes": "30",
        "rateHistory": [
            {"effectiveDate": "2026-01-01", "rates": {"weekday": 27}},
            {"effectiveDate": "nope", "rates": {"weekday": 99}},
            {"effectiveDate": "2025-07-01", "rates": {"weekday": 26}},
            {"effectiveDate": "2026-01-01", "rates": {"weekday": 28}},
        ],
    }])
    assert job.hourly_rates.to_dict() == {"weekday": 25.5, "saturday": 0, "sunday": 0, "holiday": 0}
    assert (job.default_hours.weekday, job.default_hours.weekend) == (8, 0)
    assert job.default_break_minutes == 30
    assert [h.effective_date for h in job.rate_history] == ["2026-01-01", "2025-07-01"]
    assert job.rate_history[0].rates.weekday == 28


def test_normalize_jobs_flat_rows():
    [job] = normalize_jobs([{
        "id": "bar", "name": "Bar",
        "hourly_rate_weekday": 28, "hourly_rate_saturday": "33", "hourly_rate_sunday": 38, "hourly_rate_holiday": 56,
        "default_hours_weekday": 6, "default_hours_weekend": 7,
    }])
    assert job.hourly_rates.saturday == 33
    assert job.default_hours.weekend == 7
    assert job.default_break_minutes is None
    assert job.rate_history == ()
