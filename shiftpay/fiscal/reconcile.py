"""
Fiscal-year tax reconciliation.

Employers withhold tax one pay at a time, each pay taxed as if that cycle's
earnings repeated all year. The true liability is assessed once on the whole
year's income. For irregular shift work the two differ, and the difference
is the refund (positive) or bill (negative) at tax time.
"""
import calendar
import logging
import math
from dataclasses import dataclass, field, asdict
from datetime import date, timedelta
from typing import Iterable, List, Tuple, Union

from shiftpay.core.exceptions import ConfigurationError
from shiftpay.core.models import PayPeriod, Shift, VisaType
from shiftpay.core.utils import parse_local_date, setup_logging
from shiftpay.payroll.engine import ShiftPayCalculator
from shiftpay.tax.calculator import WITHHOLDING_METHODS, ProgressiveTaxCalculator, as_pay_period
from shiftpay.tax.jurisdictions import Jurisdiction

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PayCycle:
    start: date
    end: date
    shift_count: int
    gross_pay: float
    withheld: float


@dataclass(frozen=True)
class FiscalYearSummary:
    fy_start: date
    fy_end: date
    label: str
    ytd_gross_pay: float
    ytd_withheld_estimate: float
    annual_liability_estimate: float
    refund_estimate: float
    ytd_super: float
    cycles: Tuple[PayCycle, ...] = field(default=())

    @property
    def is_refund(self) -> bool:
        return self.refund_estimate > 0

    def to_dict(self):
        return asdict(self)


def _add_months(day: date, months: int) -> date:
    month_index = day.month - 1 + months
    year, month = day.year + month_index // 12, month_index % 12 + 1
    return date(year, month, min(day.day, calendar.monthrange(year, month)[1]))


def fiscal_year_range(as_of: date, jurisdiction: Jurisdiction) -> Tuple[date, date, str]:
    """Start, end (inclusive) and display label of the fiscal year containing as_of."""
    month, day = jurisdiction.fiscal_year_start
    start_year = as_of.year if (as_of.month, as_of.day) >= (month, day) else as_of.year - 1
    start = date(start_year, month, day)
    end = _add_months(start, 12) - timedelta(days=1)
    label = jurisdiction.fiscal_year_label.format(
        start_year=start.year,
        end_year=start.year + 1,
        end_short=str(start.year + 1)[-2:],
    )
    return start, end, label


def cycle_bounds(fy_start: date, fy_end: date, cycle: PayPeriod) -> List[Tuple[date, date]]:
    """Successive non-overlapping pay cycles from fy_start, the last one clipped to fy_end."""
    bounds = []
    if cycle is PayPeriod.ANNUAL:
        return [(fy_start, fy_end)]
    index = 0
    start = fy_start
    while start <= fy_end:
        if cycle is PayPeriod.MONTHLY:
            index += 1
            next_start = _add_months(fy_start, index)
        else:
            next_start = start + timedelta(days=7 if cycle is PayPeriod.WEEKLY else 14)
        bounds.append((start, min(next_start - timedelta(days=1), fy_end)))
        start = next_start
    return bounds


def group_pay_cycles(
    shifts: Iterable[Shift], fy_start: date, fy_end: date, cycle: PayPeriod = PayPeriod.FORTNIGHTLY
) -> List[Tuple[date, date, List[Shift]]]:
    bounds = cycle_bounds(fy_start, fy_end, cycle)
    groups = [(start, end, []) for start, end in bounds]
    starts = [start for start, _ in bounds]
    for shift in sorted(shifts, key=lambda s: s.date):
        day = parse_local_date(shift.date)
        if day is None:
            logger.warning("Skipping shift %s with unparseable date %r in fiscal year", shift.id, shift.date)
            continue
        if day < fy_start or day > fy_end:
            continue
        # last cycle starting on or before the shift date
        position = max(i for i, start in enumerate(starts) if start <= day)
        groups[position][2].append(shift)
    return groups


class FiscalYearReconciler:
    def __init__(
        self,
        jurisdiction: Jurisdiction,
        calculator: ShiftPayCalculator,
        visa_type: Union[str, VisaType] = VisaType.DOMESTIC,
        pay_cycle: Union[str, PayPeriod] = PayPeriod.FORTNIGHTLY,
        withholding_method: str = "annualised",
    ):
        if withholding_method not in WITHHOLDING_METHODS:
            raise ConfigurationError(f"Unknown withholding method: {withholding_method!r}")
        if withholding_method == "schedule" and not jurisdiction.withholding_schedules:
            raise ConfigurationError(f"No withholding schedules for jurisdiction {jurisdiction.code}")
        self.jurisdiction = jurisdiction
        self.calculator = calculator
        self.tax = ProgressiveTaxCalculator(jurisdiction, visa_type)
        self.pay_cycle = as_pay_period(pay_cycle)
        self.withholding_method = withholding_method

    @classmethod
    def from_settings(cls, settings, calculator: ShiftPayCalculator):
        setup_logging(settings.APP_NAME, settings=settings)
        return cls(
            settings.jurisdiction(),
            calculator,
            visa_type=settings.VISA_TYPE,
            pay_cycle=settings.PAY_CYCLE,
            withholding_method=settings.WITHHOLDING_METHOD,
        )

    def fiscal_year(self, as_of: date) -> Tuple[date, date, str]:
        return fiscal_year_range(as_of, self.jurisdiction)

    def cycles(self, shifts: Iterable[Shift], as_of: date) -> List[PayCycle]:
        fy_start, fy_end, _ = self.fiscal_year(as_of)
        cycles = []
        for start, end, group in group_pay_cycles(shifts, fy_start, fy_end, self.pay_cycle):
            gross = math.fsum(self.calculator.shift_pay(s) for s in group)
            withheld = self.tax.withholding(gross, self.pay_cycle, self.withholding_method) if group else 0.0
            cycles.append(PayCycle(start, end, len(group), round(gross, 2), withheld))
        return cycles

    def reconcile(self, shifts: Iterable[Shift], as_of: date) -> FiscalYearSummary:
        fy_start, fy_end, label = self.fiscal_year(as_of)
        cycles = self.cycles(shifts, as_of)

        ytd_gross = math.fsum(c.gross_pay for c in cycles)
        withheld = round(math.fsum(c.withheld for c in cycles), 2)
        # one assessment on the whole year's income, as a tax return would
        liability = self.tax.annual_liability(ytd_gross)
        refund = round(withheld - liability, 2)

        logger.info(
            "Fiscal year %s: gross %.2f withheld %.2f liability %.2f refund %.2f",
            label, ytd_gross, withheld, liability, refund,
        )
        return FiscalYearSummary(
            fy_start=fy_start,
            fy_end=fy_end,
            label=label,
            ytd_gross_pay=round(ytd_gross, 2),
            ytd_withheld_estimate=withheld,
            annual_liability_estimate=liability,
            refund_estimate=refund,
            ytd_super=self.tax.retirement_contribution(ytd_gross),
            cycles=tuple(cycles),
        )
