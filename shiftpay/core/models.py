"""
Domain records consumed by the engine.

Every record is immutable. Constructors reject negative or non-finite numbers;
raw user/OCR input is expected to pass through shiftpay.ingest.normalize first.
"""
import math
from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Dict, Iterable, Optional, Tuple

from shiftpay.core.utils import to_date_key


class DayType(str, Enum):
    WEEKDAY = "weekday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"
    HOLIDAY = "holiday"


class PayPeriod(str, Enum):
    WEEKLY = "weekly"
    FORTNIGHTLY = "fortnightly"
    MONTHLY = "monthly"
    ANNUAL = "annual"

    @property
    def periods_per_year(self) -> int:
        return {"weekly": 52, "fortnightly": 26, "monthly": 12, "annual": 1}[self.value]


class VisaType(str, Enum):
    DOMESTIC = "domestic"
    STUDENT = "student"
    WORKING_HOLIDAY = "working_holiday"


def _check_amount(name: str, value) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{name} must be a number, got {value!r}")
    if not math.isfinite(value):
        raise ValueError(f"{name} must be finite, got {value!r}")
    if value < 0:
        raise ValueError(f"{name} must be non-negative, got {value!r}")


@dataclass(frozen=True)
class RateSet:
    """Hourly rates per day type."""
    weekday: float
    saturday: float
    sunday: float
    holiday: float

    def __post_init__(self):
        for day_type in DayType:
            _check_amount(f"{day_type.value} rate", getattr(self, day_type.value))

    def for_day(self, day_type: DayType) -> float:
        if day_type is DayType.WEEKDAY:
            return self.weekday
        if day_type is DayType.SATURDAY:
            return self.saturday
        if day_type is DayType.SUNDAY:
            return self.sunday
        if day_type is DayType.HOLIDAY:
            return self.holiday
        raise ValueError(f"Unknown day type: {day_type!r}")

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


@dataclass(frozen=True)
class RateHistoryEntry:
    """Rates in force from effective_date onward."""
    effective_date: str
    rates: RateSet

    def __post_init__(self):
        key = to_date_key(self.effective_date)
        if key is None:
            raise ValueError(f"Invalid effective date: {self.effective_date!r}")
        object.__setattr__(self, "effective_date", key)


@dataclass(frozen=True)
class DefaultHours:
    weekday: float = 0.0
    weekend: float = 0.0

    def __post_init__(self):
        _check_amount("default weekday hours", self.weekday)
        _check_amount("default weekend hours", self.weekend)


@dataclass(frozen=True)
class JobConfig:
    id: str
    name: str
    hourly_rates: RateSet
    default_hours: DefaultHours = field(default_factory=DefaultHours)
    rate_history: Tuple[RateHistoryEntry, ...] = ()
    default_break_minutes: Optional[int] = None
    default_start_time: Optional[str] = None
    default_end_time: Optional[str] = None

    def __post_init__(self):
        history = tuple(self.rate_history or ())
        object.__setattr__(self, "rate_history", history)
        dates = [h.effective_date for h in history]
        if len(dates) != len(set(dates)):
            raise ValueError(f"Job {self.id} has more than one rate history entry for the same effective date")
        if self.default_break_minutes is not None:
            _check_amount("default break minutes", self.default_break_minutes)


@dataclass(frozen=True)
class Shift:
    id: str
    date: str
    job_id: str
    hours: float
    break_minutes: Optional[int] = None
    note: Optional[str] = None

    def __post_init__(self):
        _check_amount("shift hours", self.hours)
        if self.break_minutes is not None:
            _check_amount("break minutes", self.break_minutes)


@dataclass(frozen=True)
class VacationPeriod:
    """Inclusive date range during which the fortnightly cap is not enforced."""
    start: str
    end: str


def index_jobs(jobs: Iterable[JobConfig]) -> Dict[str, JobConfig]:
    return {job.id: job for job in jobs}
