"""
Raw record normalization.

Shift and job records arrive from forms, stored rows and roster scans with
strings, blanks, NaN or infinities where numbers should be. Everything is
coerced here so the model constructors only ever see finite, non-negative
numbers.
"""
import logging
from typing import Any, Dict, Iterable, List, Mapping

import pandas as pd

from shiftpay.core.models import DefaultHours, JobConfig, RateHistoryEntry, RateSet, Shift
from shiftpay.core.utils import to_date_key

logger = logging.getLogger(__name__)

RATE_KEYS = ("weekday", "saturday", "sunday", "holiday")

SHIFT_ALIASES = {
    "jobId": "job_id",
    "type": "job_id",
    "breakMinutes": "break_minutes",
}

JOB_ALIASES = {
    "hourlyRates": "hourly_rates",
    "defaultHours": "default_hours",
    "rateHistory": "rate_history",
    "defaultBreakMinutes": "default_break_minutes",
    "defaultStartTime": "default_start_time",
    "defaultEndTime": "default_end_time",
}


def coerce_amounts(values: pd.Series) -> pd.Series:
    """Numbers or NaN, with infinities treated as missing and negatives clipped to 0."""
    numeric = pd.to_numeric(values, errors="coerce")
    numeric = numeric.replace([float("inf"), float("-inf")], float("nan"))
    return numeric.clip(lower=0)


def _rename(record: Mapping[str, Any], aliases: Dict[str, str]) -> Dict[str, Any]:
    renamed = {}
    for key, value in record.items():
        target = aliases.get(key, key)
        # snake_case keys win over their camelCase aliases
        if target in renamed and key != target:
            continue
        renamed[target] = value
    return renamed


def _rate_set(raw: Any, flat: Mapping[str, Any] = None) -> RateSet:
    raw = raw if isinstance(raw, Mapping) else {}
    flat = flat or {}
    values = [raw.get(k, flat.get(f"hourly_rate_{k}")) for k in RATE_KEYS]
    amounts = coerce_amounts(pd.Series(values, index=RATE_KEYS, dtype="object")).fillna(0)
    return RateSet(**{k: float(amounts[k]) for k in RATE_KEYS})


def normalize_shifts(records: Iterable[Mapping[str, Any]]) -> List[Shift]:
    rows = [_rename(r, SHIFT_ALIASES) for r in records]
    if not rows:
        return []
    df = pd.DataFrame(rows)
    for col in ("id", "date", "job_id", "hours", "break_minutes", "note"):
        if col not in df.columns:
            df[col] = None
    df["hours"] = coerce_amounts(df["hours"]).fillna(0)
    # a missing break means "use the job default", so it stays None
    df["break_minutes"] = coerce_amounts(df["break_minutes"])

    shifts = []
    for i, row in enumerate(df.to_dict("records")):
        date_key = to_date_key(row["date"])
        if date_key is None:
            logger.warning("Shift %r has an unparseable date %r", row["id"], row["date"])
        shifts.append(Shift(
            id=str(row["id"]) if pd.notna(row["id"]) else f"shift-{i}",
            date=date_key or ("" if pd.isna(row["date"]) else str(row["date"])),
            job_id=str(row["job_id"]) if pd.notna(row["job_id"]) else "",
            hours=float(row["hours"]),
            break_minutes=None if pd.isna(row["break_minutes"]) else int(round(row["break_minutes"])),
            note=row["note"] if isinstance(row["note"], str) else None,
        ))
    return shifts


def normalize_rate_history(entries: Iterable[Mapping[str, Any]]) -> List[RateHistoryEntry]:
    """Valid entries only, one per effective date (the last one wins), newest first."""
    by_date: Dict[str, RateHistoryEntry] = {}
    for entry in entries or ():
        entry = dict(entry)
        key = to_date_key(entry.get("effective_date", entry.get("effectiveDate")))
        if key is None:
            logger.warning("Dropping rate history entry with invalid effective date: %r", entry)
            continue
        by_date[key] = RateHistoryEntry(key, _rate_set(entry.get("rates")))
    return sorted(by_date.values(), key=lambda h: h.effective_date, reverse=True)


def normalize_jobs(records: Iterable[Mapping[str, Any]]) -> List[JobConfig]:
    jobs = []
    for record in records:
        raw = _rename(record, JOB_ALIASES)
        hours = raw.get("default_hours")
        hours = hours if isinstance(hours, Mapping) else {
            "weekday": raw.get("default_hours_weekday"),
            "weekend": raw.get("default_hours_weekend"),
        }
        hour_amounts = coerce_amounts(pd.Series([hours.get("weekday"), hours.get("weekend")], dtype="object")).fillna(0)
        break_minutes = coerce_amounts(pd.Series([raw.get("default_break_minutes")], dtype="object"))[0]

        jobs.append(JobConfig(
            id=str(raw.get("id")),
            name=str(raw.get("name") or raw.get("id")),
            hourly_rates=_rate_set(raw.get("hourly_rates"), raw),
            default_hours=DefaultHours(float(hour_amounts[0]), float(hour_amounts[1])),
            rate_history=tuple(normalize_rate_history(raw.get("rate_history") or ())),
            default_break_minutes=None if pd.isna(break_minutes) else int(round(break_minutes)),
            default_start_time=raw.get("default_start_time"),
            default_end_time=raw.get("default_end_time"),
        ))
    return jobs
