"""
Tax and calendar configuration per country.

A Jurisdiction is passed explicitly to every calculator that needs it. Bracket
tables are validated when the Jurisdiction is built, so a bad table fails at
load time rather than skewing every tax figure.
"""
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Optional, Tuple

from shiftpay.core.exceptions import ConfigurationError
from shiftpay.core.models import VisaType
from shiftpay.tax.brackets import TaxBracket, validate_brackets

# ATO 2025-26 resident rates (Stage 3)
AU_TAX_BRACKETS = (
    TaxBracket(0, 18200, 0.0, 0),
    TaxBracket(18201, 45000, 0.16, 0),
    TaxBracket(45001, 135000, 0.30, 4288),
    TaxBracket(135001, 190000, 0.37, 31288),
    TaxBracket(190001, None, 0.45, 51638),
)

# Working holiday makers (417/462): 15% from the first dollar up to 45,000
AU_WHM_TAX_BRACKETS = (
    TaxBracket(0, 45000, 0.15, 0),
    TaxBracket(45001, 135000, 0.30, 6750),
    TaxBracket(135001, 190000, 0.37, 33750),
    TaxBracket(190001, None, 0.45, 54100),
)

AU_MEDICARE_LEVY_RATE = 0.02
AU_MEDICARE_LEVY_THRESHOLD = 27222
AU_SUPER_RATE = 0.12

# Korea 2024 income tax
KR_TAX_BRACKETS = (
    TaxBracket(0, 14_000_000, 0.06, 0),
    TaxBracket(14_000_001, 50_000_000, 0.15, 840_000),
    TaxBracket(50_000_001, 88_000_000, 0.24, 6_240_000),
    TaxBracket(88_000_001, 150_000_000, 0.35, 15_360_000),
    TaxBracket(150_000_001, 300_000_000, 0.38, 37_060_000),
    TaxBracket(300_000_001, 500_000_000, 0.40, 94_060_000),
    TaxBracket(500_000_001, 1_000_000_000, 0.42, 174_060_000),
    TaxBracket(1_000_000_001, None, 0.45, 384_060_000),
)

KR_LOCAL_INCOME_TAX_RATE = 0.10
KR_HEALTH_INSURANCE_RATE = 0.03545
KR_LONG_TERM_CARE_SHARE = 0.1281  # of the health insurance premium


@dataclass(frozen=True)
class Contribution:
    """Flat-rate social contribution on gross income (employee share)."""
    name: str
    rate: float


@dataclass(frozen=True)
class Jurisdiction:
    code: str
    name: str
    brackets: Tuple[TaxBracket, ...]
    holiday_country: Optional[str]
    holiday_subdiv: Optional[str] = None
    visa_brackets: Dict[VisaType, Tuple[TaxBracket, ...]] = field(default_factory=dict, hash=False)
    levy_rate: float = 0.0
    levy_threshold: float = 0.0
    levy_exempt_visas: FrozenSet[VisaType] = frozenset()
    surtax_rate: float = 0.0
    contributions: Tuple[Contribution, ...] = ()
    retirement_rate: float = 0.0
    retirement_name: str = ""
    fiscal_year_start: Tuple[int, int] = (7, 1)  # (month, day)
    fiscal_year_label: str = "FY{end_short} ({start_year}-{end_year})"
    withholding_schedules: bool = False
    bracket_tolerance: float = 1.0

    def __post_init__(self):
        object.__setattr__(self, "brackets", validate_brackets(self.brackets, self.bracket_tolerance))
        visa_tables = {
            VisaType(visa): validate_brackets(table, self.bracket_tolerance)
            for visa, table in self.visa_brackets.items()
        }
        object.__setattr__(self, "visa_brackets", visa_tables)

    def brackets_for(self, visa_type: VisaType) -> Tuple[TaxBracket, ...]:
        return self.visa_brackets.get(visa_type, self.brackets)

    def is_levy_exempt(self, visa_type: VisaType) -> bool:
        return visa_type in self.levy_exempt_visas


def australia(tolerance: float = 1.0) -> Jurisdiction:
    return Jurisdiction(
        code="AU",
        name="Australia (Victoria)",
        brackets=AU_TAX_BRACKETS,
        holiday_country="AU",
        holiday_subdiv="VIC",
        visa_brackets={VisaType.WORKING_HOLIDAY: AU_WHM_TAX_BRACKETS},
        levy_rate=AU_MEDICARE_LEVY_RATE,
        levy_threshold=AU_MEDICARE_LEVY_THRESHOLD,
        levy_exempt_visas=frozenset({VisaType.STUDENT, VisaType.WORKING_HOLIDAY}),
        retirement_rate=AU_SUPER_RATE,
        retirement_name="Super",
        fiscal_year_start=(7, 1),
        withholding_schedules=True,
        bracket_tolerance=tolerance,
    )


def korea(tolerance: float = 1.0) -> Jurisdiction:
    return Jurisdiction(
        code="KR",
        name="South Korea",
        brackets=KR_TAX_BRACKETS,
        holiday_country="KR",
        surtax_rate=KR_LOCAL_INCOME_TAX_RATE,
        contributions=(
            Contribution("National Pension", 0.045),
            Contribution("Health Insurance", KR_HEALTH_INSURANCE_RATE),
            Contribution("Long-term Care", KR_HEALTH_INSURANCE_RATE * KR_LONG_TERM_CARE_SHARE),
            Contribution("Employment Insurance", 0.009),
        ),
        retirement_rate=0.045,
        retirement_name="National Pension",
        fiscal_year_start=(1, 1),
        fiscal_year_label="{start_year}년",
        bracket_tolerance=tolerance,
    )


JURISDICTIONS = {
    "AU": australia,
    "KR": korea,
}


def get_jurisdiction(code: str, tolerance: float = 1.0) -> Jurisdiction:
    factory = JURISDICTIONS.get((code or "").upper())
    if factory is None:
        raise ConfigurationError(f"Unknown jurisdiction: {code!r}. Available: {', '.join(sorted(JURISDICTIONS))}")
    return factory(tolerance=tolerance)
