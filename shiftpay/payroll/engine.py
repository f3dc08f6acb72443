import logging
from dataclasses import dataclass, asdict
from typing import Iterable, Optional

from shiftpay.core.models import DayType, JobConfig, Shift, index_jobs
from shiftpay.days.classifier import DayClassifier
from shiftpay.rates.resolver import resolve_rates

logger = logging.getLogger(__name__)


def calculate_paid_hours(shift: Shift, job: Optional[JobConfig]) -> float:
    """Hours paid after the break, which is deducted whenever one is configured."""
    if job is None:
        return shift.hours
    break_minutes = shift.break_minutes
    if break_minutes is None:
        break_minutes = job.default_break_minutes or 0
    return max(0.0, round(shift.hours - break_minutes / 60, 2))


@dataclass(frozen=True)
class ShiftPay:
    shift_id: str
    job_id: str
    date: str
    day_type: DayType
    paid_hours: float
    rate: float
    pay: float

    def to_dict(self):
        return asdict(self)


class ShiftPayCalculator:
    def __init__(self, jobs: Iterable[JobConfig], classifier: DayClassifier):
        self.jobs = index_jobs(jobs)
        self.classifier = classifier

    def job_for(self, shift: Shift) -> Optional[JobConfig]:
        return self.jobs.get(shift.job_id)

    def paid_hours(self, shift: Shift) -> float:
        return calculate_paid_hours(shift, self.job_for(shift))

    def breakdown(self, shift: Shift) -> ShiftPay:
        job = self.job_for(shift)
        day_type = self.classifier.classify(shift.date)
        paid = calculate_paid_hours(shift, job)
        if job is None:
            # unmapped shifts are surfaced by the roster mapping step, not here
            logger.debug("Shift %s references unknown job %r, paying 0", shift.id, shift.job_id)
            return ShiftPay(shift.id, shift.job_id, shift.date, day_type, paid, 0.0, 0.0)
        rate = resolve_rates(job, shift.date).for_day(day_type)
        return ShiftPay(shift.id, shift.job_id, shift.date, day_type, paid, rate, paid * rate)

    def shift_pay(self, shift: Shift) -> float:
        return self.breakdown(shift).pay
