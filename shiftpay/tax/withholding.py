"""
PAYG withholding from the ATO coefficient schedules (NAT 1004, from 1 July 2024).

Weekly withholding is y = a*x - b, where x is weekly earnings floored to whole
dollars plus 99 cents and y is rounded to the nearest dollar. Other pay periods
are converted to weekly and back.
"""
import math
from dataclasses import dataclass
from typing import Tuple

from shiftpay.core.models import PayPeriod, VisaType


@dataclass(frozen=True)
class Coefficient:
    lower: float  # weekly earnings, inclusive
    upper: float  # weekly earnings, exclusive
    a: float
    b: float


# Scale 2: tax-free threshold claimed, Medicare levy included (domestic residents)
SCALE_2 = (
    Coefficient(0, 359, 0.0, 0.0),
    Coefficient(359, 438, 0.1900, 68.3462),
    Coefficient(438, 548, 0.2900, 112.1942),
    Coefficient(548, 721, 0.2100, 68.3465),
    Coefficient(721, 865, 0.2190, 74.8369),
    Coefficient(865, 1282, 0.3477, 186.2119),
    Coefficient(1282, 2307, 0.3450, 182.7504),
    Coefficient(2307, 3461, 0.3900, 286.5965),
    Coefficient(3461, math.inf, 0.4700, 563.5196),
)

# Scale 6: tax-free threshold claimed, full Medicare levy exemption (student visa)
SCALE_6 = (
    Coefficient(0, 359, 0.0, 0.0),
    Coefficient(359, 721, 0.1900, 68.3462),
    Coefficient(721, 865, 0.1990, 74.8365),
    Coefficient(865, 2307, 0.3250, 183.7058),
    Coefficient(2307, 3461, 0.3700, 287.5504),
    Coefficient(3461, math.inf, 0.4500, 564.4731),
)

# Schedule 15: working holiday makers
SCHEDULE_15 = (
    Coefficient(0, 865, 0.1500, 0.0),
    Coefficient(865, 2307, 0.3250, 151.4423),
    Coefficient(2307, 3461, 0.3700, 255.2869),
    Coefficient(3461, math.inf, 0.4500, 532.2096),
)

SCHEDULES = {
    VisaType.DOMESTIC: SCALE_2,
    VisaType.STUDENT: SCALE_6,
    VisaType.WORKING_HOLIDAY: SCHEDULE_15,
}


def to_weekly(amount: float, period: PayPeriod) -> float:
    if period is PayPeriod.WEEKLY:
        return amount
    if period is PayPeriod.FORTNIGHTLY:
        return amount / 2
    if period is PayPeriod.MONTHLY:
        return amount * 12 / 52
    return amount / 52


def from_weekly(amount: float, period: PayPeriod) -> float:
    if period is PayPeriod.WEEKLY:
        return amount
    if period is PayPeriod.FORTNIGHTLY:
        return amount * 2
    if period is PayPeriod.MONTHLY:
        return amount * 52 / 12
    return amount * 52


def _coefficient(table: Tuple[Coefficient, ...], weekly: float) -> Coefficient:
    for row in table:
        if row.lower <= weekly < row.upper:
            return row
    return table[-1]


def payg_withholding(gross: float, period: PayPeriod, visa_type: VisaType = VisaType.DOMESTIC) -> float:
    if gross <= 0:
        return 0.0
    period = PayPeriod(period)
    weekly = math.floor(to_weekly(gross, period)) + 0.99
    row = _coefficient(SCHEDULES[VisaType(visa_type)], weekly)
    weekly_tax = math.floor(max(0.0, row.a * weekly - row.b) + 0.5)
    return round(from_weekly(weekly_tax, period), 2)
