from datetime import date

import pytest

from shiftpay.core.config import get_settings
from shiftpay.core.exceptions import ConfigurationError
from shiftpay.core.models import JobConfig, PayPeriod, RateSet, Shift
from shiftpay.days.classifier import DayClassifier
from shiftpay.fiscal.reconcile import FiscalYearReconciler, cycle_bounds, fiscal_year_range, group_pay_cycles
from shiftpay.payroll.engine import ShiftPayCalculator
from shiftpay.tax.jurisdictions import australia, korea

JOB = JobConfig(id="cafe", name="Cafe", hourly_rates=RateSet(30, 30, 30, 30))
FIRST_FORTNIGHT = ["2025-07-01", "2025-07-02", "2025-07-03", "2025-07-04", "2025-07-07",
                   "2025-07-08", "2025-07-09", "2025-07-10", "2025-07-11", "2025-07-14"]


def make_shifts(days, hours=8):
    return [Shift(f"s{i}", d, "cafe", hours) for i, d in enumerate(days)]


def make_reconciler(**kwargs):
    return FiscalYearReconciler(australia(), ShiftPayCalculator([JOB], DayClassifier()), **kwargs)


def test_fiscal_year_au():
    assert fiscal_year_range(date(2025, 9, 15), australia()) == (date(2025, 7, 1), date(2026, 6, 30), "FY26 (2025-2026)")
    assert fiscal_year_range(date(2025, 6, 30), australia())[0] == date(2024, 7, 1)
    assert fiscal_year_range(date(2025, 7, 1), australia())[0] == date(2025, 7, 1)


def test_fiscal_year_kr():
    assert fiscal_year_range(date(2025, 3, 1), korea()) == (date(2025, 1, 1), date(2025, 12, 31), "2025년")


def test_cycle_bounds():
    start, end = date(2025, 7, 1), date(2026, 6, 30)
    fortnights = cycle_bounds(start, end, PayPeriod.FORTNIGHTLY)
    assert fortnights[0] == (date(2025, 7, 1), date(2025, 7, 14))
    assert fortnights[-1] == (date(2026, 6, 30), date(2026, 6, 30))
    assert len(fortnights) == 27
    months = cycle_bounds(start, end, PayPeriod.MONTHLY)
    assert len(months) == 12
    assert months[1] == (date(2025, 8, 1), date(2025, 8, 31))
    assert len(cycle_bounds(start, end, PayPeriod.WEEKLY)) == 53
    assert cycle_bounds(start, end, PayPeriod.ANNUAL) == [(start, end)]


def test_group_pay_cycles_skips_outside_and_malformed():
    shifts = make_shifts(["2025-06-30", "2025-07-15", "bad", "2026-07-01"])
    groups = group_pay_cycles(shifts, date(2025, 7, 1), date(2026, 6, 30))
    assert sum(len(g) for _, _, g in groups) == 1
    assert groups[1][2][0].date == "2025-07-15"


def test_over_withholding_becomes_refund():
    summary = make_reconciler().reconcile(make_shifts(FIRST_FORTNIGHT), date(2025, 9, 1))
    assert summary.label == "FY26 (2025-2026)"
    assert summary.ytd_gross_pay == 2400
    assert summary.ytd_withheld_estimate == 413.68
    assert summary.annual_liability_estimate == 0
    assert summary.refund_estimate == 413.68
    assert summary.is_refund
    assert summary.ytd_super == 288


def test_cycles_sum_to_ytd_gross():
    days = FIRST_FORTNIGHT + ["2025-08-04", "2025-10-20", "2026-02-02"]
    summary = make_reconciler(pay_cycle="weekly").reconcile(make_shifts(days, hours=7.6), date(2025, 9, 1))
    assert sum(c.gross_pay for c in summary.cycles) == pytest.approx(summary.ytd_gross_pay)
    assert sum(c.shift_count for c in summary.cycles) == len(days)
    assert all(c.withheld == 0 for c in summary.cycles if c.shift_count == 0)


def test_schedule_method():
    summary = make_reconciler(withholding_method="schedule").reconcile(make_shifts(FIRST_FORTNIGHT), date(2025, 9, 1))
    # 2400 a fortnight is 1200 a week on Scale 2
    assert summary.ytd_withheld_estimate == 2 * 231


def test_no_shifts():
    summary = make_reconciler().reconcile([], date(2025, 9, 1))
    assert summary.ytd_gross_pay == 0
    assert summary.refund_estimate == 0
    assert not summary.is_refund


def test_invalid_configuration():
    calc = ShiftPayCalculator([JOB], DayClassifier())
    with pytest.raises(ConfigurationError):
        FiscalYearReconciler(korea(), calc, withholding_method="schedule")
    with pytest.raises(ConfigurationError):
        FiscalYearReconciler(australia(), calc, withholding_method="guess")
    with pytest.raises(ConfigurationError):
        FiscalYearReconciler(australia(), calc, pay_cycle="daily")


def test_from_settings(tmp_path):
    calc = ShiftPayCalculator([JOB], DayClassifier())
    settings = get_settings(JURISDICTION="KR", PAY_CYCLE="monthly", APP_NAME="shiftpay-fiscal-test", LOG_PATH=str(tmp_path))
    rec = FiscalYearReconciler.from_settings(settings, calc)
    assert (tmp_path / "shiftpay-fiscal-test.log").exists()
    assert rec.jurisdiction.code == "KR"
    assert rec.pay_cycle == PayPeriod.MONTHLY
