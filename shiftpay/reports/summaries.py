from typing import Iterable, Sequence

import pandas as pd

from shiftpay.compliance.fortnightly import FortnightlyComplianceTracker
from shiftpay.core.models import Shift
from shiftpay.fiscal.reconcile import PayCycle
from shiftpay.payroll.aggregate import PayAggregator
from shiftpay.payroll.engine import ShiftPayCalculator


def shifts_frame(shifts: Iterable[Shift], calculator: ShiftPayCalculator) -> pd.DataFrame:
    rows = []
    for shift in sorted(shifts, key=lambda s: (s.date, s.id)):
        detail = calculator.breakdown(shift)
        job = calculator.job_for(shift)
        rows.append({
            "Date": shift.date,
            "Job": job.name if job else shift.job_id,
            "Day Type": detail.day_type.value,
            "Hours": shift.hours,
            "Paid Hours": detail.paid_hours,
            "Rate": detail.rate,
            "Pay": round(detail.pay, 2),
            "Holiday": calculator.classifier.holiday_name(shift.date) or "",
            "Note": shift.note or "",
        })
    if not rows:
        return pd.DataFrame(columns=["Date", "Job", "Day Type", "Hours", "Paid Hours", "Rate", "Pay", "Holiday", "Note"])
    return pd.DataFrame(rows)


def job_breakdown_frame(shifts: Sequence[Shift], calculator: ShiftPayCalculator) -> pd.DataFrame:
    totals = PayAggregator(calculator).by_job(shifts)
    if not totals:
        return pd.DataFrame(columns=["Job", "Shifts", "Hours", "Paid Hours", "Pay", "Share"])
    grand = sum(t.pay for t in totals.values())
    rows = []
    for job_id, t in totals.items():
        job = calculator.jobs.get(job_id)
        rows.append({
            "Job": job.name if job else job_id,
            "Shifts": t.shift_count,
            "Hours": round(t.hours, 2),
            "Paid Hours": round(t.paid_hours, 2),
            "Pay": round(t.pay, 2),
            "Share": round(t.pay / grand, 4) if grand else 0.0,
        })
    return pd.DataFrame(rows).sort_values("Pay", ascending=False).reset_index(drop=True)


def monthly_frame(shifts: Sequence[Shift], calculator: ShiftPayCalculator) -> pd.DataFrame:
    by_month = PayAggregator(calculator).pay_by_month(shifts)
    return pd.DataFrame(
        [{"Month": month, "Pay": round(pay, 2)} for month, pay in by_month.items()],
        columns=["Month", "Pay"],
    )


def _status(period) -> str:
    if period.is_exempt:
        return "Vacation"
    if period.is_over_limit:
        return "Over"
    if period.is_near_limit:
        return "Near"
    return "OK"


def fortnightly_frame(shifts: Sequence[Shift], tracker: FortnightlyComplianceTracker) -> pd.DataFrame:
    rows = [{
        "Start": p.period_start.isoformat(),
        "End": p.period_end.isoformat(),
        "Week 1": p.week1_hours,
        "Week 2": p.week2_hours,
        "Total": p.total_hours,
        "Remaining": p.remaining_hours,
        "Status": _status(p),
    } for p in tracker.periods(shifts)]
    return pd.DataFrame(rows, columns=["Start", "End", "Week 1", "Week 2", "Total", "Remaining", "Status"])


def cycles_frame(cycles: Iterable[PayCycle]) -> pd.DataFrame:
    rows = [{
        "Start": c.start.isoformat(),
        "End": c.end.isoformat(),
        "Shifts": c.shift_count,
        "Gross": c.gross_pay,
        "Withheld": c.withheld,
        "Net": round(c.gross_pay - c.withheld, 2),
    } for c in cycles]
    return pd.DataFrame(rows, columns=["Start", "End", "Shifts", "Gross", "Withheld", "Net"])
