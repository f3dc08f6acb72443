import logging
import math
from dataclasses import dataclass, field, asdict
from typing import Dict, Union

from shiftpay.core.exceptions import ConfigurationError
from shiftpay.core.models import PayPeriod, VisaType
from shiftpay.tax.jurisdictions import Jurisdiction
from shiftpay.tax.withholding import payg_withholding

logger = logging.getLogger(__name__)

WITHHOLDING_METHODS = ("annualised", "schedule")


def as_pay_period(period: Union[str, PayPeriod]) -> PayPeriod:
    try:
        return PayPeriod(period)
    except ValueError:
        raise ConfigurationError(f"Unknown pay period: {period!r}") from None


def _check_finite(name: str, value: float) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        raise ValueError(f"{name} must be a finite number, got {value!r}")


@dataclass(frozen=True)
class PeriodTax:
    """Tax on one pay period's gross, estimated by annualising it."""
    gross_pay: float
    period: PayPeriod
    annual_income: float
    income_tax: float
    surtax: float
    levy: float
    contributions: Dict[str, float] = field(default_factory=dict, hash=False)
    total_tax: float = 0.0
    total_deductions: float = 0.0
    net_pay: float = 0.0
    effective_rate: float = 0.0

    def to_dict(self):
        return asdict(self)


class ProgressiveTaxCalculator:
    def __init__(self, jurisdiction: Jurisdiction, visa_type: Union[str, VisaType] = VisaType.DOMESTIC):
        self.jurisdiction = jurisdiction
        self.visa_type = VisaType(visa_type)
        self.brackets = jurisdiction.brackets_for(self.visa_type)

    def income_tax(self, annual_income: float) -> float:
        _check_finite("annual income", annual_income)
        if annual_income <= 0:
            return 0.0
        for bracket in self.brackets:
            if bracket.contains(annual_income):
                return round(bracket.tax_for(annual_income), 2)
        return round(self.brackets[-1].tax_for(annual_income), 2)

    def flat_levy(self, annual_income: float, exempt: bool = False) -> float:
        _check_finite("annual income", annual_income)
        if exempt or self.jurisdiction.is_levy_exempt(self.visa_type):
            return 0.0
        if annual_income <= self.jurisdiction.levy_threshold:
            return 0.0
        return round(annual_income * self.jurisdiction.levy_rate, 2)

    def surtax(self, income_tax: float) -> float:
        return round(income_tax * self.jurisdiction.surtax_rate, 2)

    def contributions(self, annual_income: float) -> Dict[str, float]:
        if annual_income <= 0:
            return {}
        return {c.name: round(annual_income * c.rate, 2) for c in self.jurisdiction.contributions}

    def annual_liability(self, annual_income: float, levy_exempt: bool = False) -> float:
        """Income tax, local surtax and levy owed on a full year's income."""
        tax = self.income_tax(annual_income)
        return round(tax + self.surtax(tax) + self.flat_levy(annual_income, exempt=levy_exempt), 2)

    def marginal_rate(self, annual_income: float) -> float:
        for bracket in self.brackets:
            if bracket.contains(annual_income):
                return bracket.rate
        return self.brackets[-1].rate

    def retirement_contribution(self, gross: float) -> float:
        """Superannuation (or pension) on gross pay."""
        return round(gross * self.jurisdiction.retirement_rate, 2)

    def convert_period(self, gross: float, period: Union[str, PayPeriod], levy_exempt: bool = False) -> PeriodTax:
        _check_finite("gross pay", gross)
        period = as_pay_period(period)
        per_year = period.periods_per_year
        annual_income = gross * per_year

        annual_tax = self.income_tax(annual_income)
        annual_surtax = self.surtax(annual_tax)
        annual_levy = self.flat_levy(annual_income, exempt=levy_exempt)
        annual_total = annual_tax + annual_surtax + annual_levy
        annual_contributions = self.contributions(annual_income)

        income_tax = round(annual_tax / per_year, 2)
        surtax = round(annual_surtax / per_year, 2)
        levy = round(annual_levy / per_year, 2)
        contributions = {name: round(amount / per_year, 2) for name, amount in annual_contributions.items()}
        total_tax = round(income_tax + surtax + levy, 2)
        total_deductions = round(total_tax + sum(contributions.values()), 2)

        return PeriodTax(
            gross_pay=gross,
            period=period,
            annual_income=round(annual_income, 2),
            income_tax=income_tax,
            surtax=surtax,
            levy=levy,
            contributions=contributions,
            total_tax=total_tax,
            total_deductions=total_deductions,
            net_pay=round(gross - total_deductions, 2),
            effective_rate=round(annual_total / annual_income, 4) if annual_income > 0 else 0.0,
        )

    def withholding(self, gross: float, period: Union[str, PayPeriod], method: str = "annualised") -> float:
        """Tax an employer would hold back from one pay of `gross`."""
        if method == "annualised":
            return self.convert_period(gross, period).total_tax
        if method == "schedule":
            if not self.jurisdiction.withholding_schedules:
                raise ConfigurationError(f"No withholding schedules for jurisdiction {self.jurisdiction.code}")
            return payg_withholding(gross, as_pay_period(period), self.visa_type)
        raise ConfigurationError(f"Unknown withholding method: {method!r}. Use one of {WITHHOLDING_METHODS}")
