"""
Progressive tax bracket tables.

Tables are written the way tax offices publish them: whole-dollar ranges
(18,201 - 45,000) with a precomputed base tax for each bracket. The base tax
column is authoritative. Published tables round it, so the tax at the top of
one bracket may sit a few cents below the next bracket's base; validation
accepts such a gap up to a tolerance and rejects anything larger.
"""
import logging
import math
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from shiftpay.core.exceptions import BracketTableError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TaxBracket:
    lower: float
    upper: Optional[float]  # None means no upper limit
    rate: float
    base_tax: float  # tax on all income below `lower`

    def contains(self, income: float) -> bool:
        return self.upper is None or income <= self.upper

    def tax_for(self, income: float) -> float:
        # incomes between whole-dollar bounds (18,200.50) land here below `lower`
        return self.base_tax + max(0.0, income - self.lower) * self.rate

    def tax_at_upper(self) -> float:
        if self.upper is None:
            return math.inf
        return self.tax_for(self.upper)


def bracket_discontinuities(brackets: Iterable[TaxBracket]) -> List[Tuple[float, float]]:
    """
    (boundary, gap) for each adjacent pair, where gap is the next bracket's base
    tax minus the tax owed at the top of the previous bracket.
    """
    table = list(brackets)
    gaps = []
    for prev, nxt in zip(table, table[1:]):
        if prev.upper is None:
            continue
        gaps.append((prev.upper, round(nxt.base_tax - prev.tax_at_upper(), 2)))
    return gaps


def validate_brackets(brackets: Iterable[TaxBracket], tolerance: float = 1.0) -> Tuple[TaxBracket, ...]:
    """Check ordering, contiguity and base-tax continuity. Raises BracketTableError."""
    table = tuple(brackets)
    problems = []

    if not table:
        problems.append("table is empty")

    for i, bracket in enumerate(table):
        if not 0 <= bracket.rate <= 1:
            problems.append(f"bracket {i}: rate {bracket.rate} outside [0, 1]")
        if bracket.lower < 0 or bracket.base_tax < 0:
            problems.append(f"bracket {i}: negative lower bound or base tax")
        if bracket.upper is not None and bracket.upper < bracket.lower:
            problems.append(f"bracket {i}: upper {bracket.upper} below lower {bracket.lower}")
        if bracket.upper is None and i != len(table) - 1:
            problems.append(f"bracket {i}: only the last bracket may be unbounded")

    if table and table[-1].upper is not None:
        problems.append("last bracket must be unbounded")

    for i, (prev, nxt) in enumerate(zip(table, table[1:]), start=1):
        if nxt.lower <= prev.lower:
            problems.append(f"bracket {i}: not ordered ascending by lower bound")
            continue
        if prev.upper is None:
            continue
        contiguous = math.isclose(nxt.lower, prev.upper) or math.isclose(nxt.lower, prev.upper + 1)
        if not contiguous:
            problems.append(f"bracket {i}: starts at {nxt.lower} but previous bracket ends at {prev.upper}")
            continue
        gap = abs(nxt.base_tax - prev.tax_at_upper())
        if gap > tolerance + 1e-9:
            problems.append(
                f"bracket {i}: base tax {nxt.base_tax} differs from tax at {prev.upper} "
                f"({prev.tax_at_upper():.2f}) by {gap:.2f}"
            )

    if problems:
        message = "Invalid tax bracket table: " + "; ".join(problems)
        logger.error(message)
        raise BracketTableError(message)
    return table
