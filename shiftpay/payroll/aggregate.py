"""
Pay and hour totals over arbitrary shift collections (a month, one job, a
fiscal year). Sums go through math.fsum, so a total does not depend on the
order of the shifts or on how the collection was split up.
"""
import logging
import math
from collections import defaultdict
from dataclasses import dataclass, asdict
from typing import Dict, Iterable, List, Optional, Sequence

from shiftpay.core.models import Shift
from shiftpay.core.utils import parse_local_date
from shiftpay.payroll.engine import ShiftPayCalculator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class JobTotals:
    shift_count: int
    hours: float
    paid_hours: float
    pay: float


@dataclass(frozen=True)
class PaySummary:
    shift_count: int
    total_hours: float
    total_paid_hours: float
    total_pay: float
    total_super: float

    def to_dict(self):
        return asdict(self)


def filter_shifts(
    shifts: Iterable[Shift],
    start: Optional[str] = None,
    end: Optional[str] = None,
    job_id: Optional[str] = None,
) -> List[Shift]:
    """Shifts within [start, end] (inclusive) and/or for one job. Undated shifts never match a range."""
    start_day = parse_local_date(start) if start else None
    end_day = parse_local_date(end) if end else None
    selected = []
    for shift in shifts:
        if job_id is not None and shift.job_id != job_id:
            continue
        if start_day or end_day:
            day = parse_local_date(shift.date)
            if day is None:
                continue
            if start_day and day < start_day:
                continue
            if end_day and day > end_day:
                continue
        selected.append(shift)
    return selected


class PayAggregator:
    def __init__(self, calculator: ShiftPayCalculator):
        self.calculator = calculator

    def total_pay(self, shifts: Iterable[Shift]) -> float:
        return math.fsum(self.calculator.shift_pay(s) for s in shifts)

    def total_hours(self, shifts: Iterable[Shift]) -> float:
        return math.fsum(s.hours for s in shifts)

    def total_paid_hours(self, shifts: Iterable[Shift]) -> float:
        return math.fsum(self.calculator.paid_hours(s) for s in shifts)

    def superannuation(self, shifts: Iterable[Shift], rate: float) -> float:
        return round(self.total_pay(shifts) * rate, 2)

    def by_job(self, shifts: Iterable[Shift]) -> Dict[str, JobTotals]:
        groups: Dict[str, List[Shift]] = defaultdict(list)
        for shift in shifts:
            groups[shift.job_id].append(shift)
        return {
            job_id: JobTotals(
                shift_count=len(group),
                hours=self.total_hours(group),
                paid_hours=self.total_paid_hours(group),
                pay=self.total_pay(group),
            )
            for job_id, group in groups.items()
        }

    def pay_by_job(self, shifts: Iterable[Shift]) -> Dict[str, float]:
        return {job_id: totals.pay for job_id, totals in self.by_job(shifts).items()}

    def hours_by_job(self, shifts: Iterable[Shift]) -> Dict[str, float]:
        return {job_id: totals.hours for job_id, totals in self.by_job(shifts).items()}

    def pay_by_day_type(self, shifts: Iterable[Shift]) -> Dict[str, float]:
        amounts: Dict[str, List[float]] = defaultdict(list)
        for shift in shifts:
            detail = self.calculator.breakdown(shift)
            amounts[detail.day_type.value].append(detail.pay)
        return {day_type: math.fsum(values) for day_type, values in amounts.items()}

    def pay_by_month(self, shifts: Iterable[Shift]) -> Dict[str, float]:
        """Pay keyed by YYYY-MM. Shifts with unparseable dates are left out."""
        amounts: Dict[str, List[float]] = defaultdict(list)
        for shift in shifts:
            day = parse_local_date(shift.date)
            if day is None:
                logger.warning("Skipping shift %s with unparseable date %r in monthly totals", shift.id, shift.date)
                continue
            amounts[day.strftime("%Y-%m")].append(self.calculator.shift_pay(shift))
        return {month: math.fsum(values) for month, values in sorted(amounts.items())}

    def summary(self, shifts: Sequence[Shift], super_rate: float = 0.0) -> PaySummary:
        shifts = list(shifts)
        total_pay = self.total_pay(shifts)
        return PaySummary(
            shift_count=len(shifts),
            total_hours=self.total_hours(shifts),
            total_paid_hours=self.total_paid_hours(shifts),
            total_pay=total_pay,
            total_super=round(total_pay * super_rate, 2),
        )
