"""
Student visa work-hour compliance.

The cap applies to every rolling fortnight starting on a Sunday, so each
week is counted twice: once with the week after it and once with the week
before it. Fortnights that touch a vacation period are exempt from the cap.
"""
import logging
import math
from collections import defaultdict
from dataclasses import dataclass, asdict
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional

from shiftpay.core.models import Shift, VacationPeriod
from shiftpay.core.utils import parse_local_date, ranges_overlap, setup_logging, week_start_sunday
from shiftpay.payroll.engine import ShiftPayCalculator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FortnightlyPeriod:
    period_start: date
    period_end: date
    week1_hours: float
    week2_hours: float
    total_hours: float
    remaining_hours: float
    is_exempt: bool
    is_over_limit: bool
    is_near_limit: bool

    def to_dict(self):
        return asdict(self)


class FortnightlyComplianceTracker:
    def __init__(
        self,
        cap: float = 48.0,
        near_limit_ratio: float = 0.83,
        vacations: Iterable[VacationPeriod] = (),
        calculator: Optional[ShiftPayCalculator] = None,
    ):
        self.cap = cap
        self.near_limit_ratio = near_limit_ratio
        self.calculator = calculator
        self.vacations = []
        for vacation in vacations:
            start, end = parse_local_date(vacation.start), parse_local_date(vacation.end)
            if start is None or end is None:
                logger.warning("Ignoring vacation period with unparseable dates: %r", vacation)
                continue
            self.vacations.append((start, end))

    @classmethod
    def from_settings(cls, settings, vacations: Iterable[VacationPeriod] = (), calculator: Optional[ShiftPayCalculator] = None):
        setup_logging(settings.APP_NAME, settings=settings)
        return cls(settings.VISA_HOURS_CAP, settings.NEAR_LIMIT_RATIO, vacations, calculator)

    def _hours(self, shift: Shift) -> float:
        # visa hours are paid hours, after the break
        if self.calculator is None:
            return shift.hours
        return self.calculator.paid_hours(shift)

    def weekly_hours(self, shifts: Iterable[Shift]) -> Dict[date, float]:
        weeks: Dict[date, List[float]] = defaultdict(list)
        for shift in shifts:
            day = parse_local_date(shift.date)
            if day is None:
                logger.warning("Skipping shift %s with unparseable date %r in visa hours", shift.id, shift.date)
                continue
            weeks[week_start_sunday(day)].append(self._hours(shift))
        return {week: round(math.fsum(hours), 2) for week, hours in weeks.items()}

    def is_exempt(self, start: date, end: date) -> bool:
        return any(ranges_overlap(start, end, v_start, v_end) for v_start, v_end in self.vacations)

    def periods(self, shifts: Iterable[Shift]) -> List[FortnightlyPeriod]:
        weeks = self.weekly_hours(shifts)
        periods = []
        for week_start in sorted(weeks):
            week1 = weeks[week_start]
            week2 = weeks.get(week_start + timedelta(days=7), 0.0)
            total = round(week1 + week2, 2)
            end = week_start + timedelta(days=13)
            exempt = self.is_exempt(week_start, end)
            periods.append(FortnightlyPeriod(
                period_start=week_start,
                period_end=end,
                week1_hours=week1,
                week2_hours=week2,
                total_hours=total,
                remaining_hours=max(0.0, round(self.cap - total, 2)),
                is_exempt=exempt,
                is_over_limit=not exempt and total > self.cap,
                is_near_limit=not exempt and total > self.near_limit_ratio * self.cap,
            ))
        return periods

    def breaches(self, shifts: Iterable[Shift]) -> List[FortnightlyPeriod]:
        return [p for p in self.periods(shifts) if p.is_over_limit]
