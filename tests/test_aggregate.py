import random

import pytest

from shiftpay.core.models import JobConfig, RateSet, Shift
from shiftpay.days.classifier import DayClassifier
from shiftpay.payroll.aggregate import PayAggregator, filter_shifts
from shiftpay.payroll.engine import ShiftPayCalculator

JOBS = [
    JobConfig(id="cafe", name="Cafe", hourly_rates=RateSet(25.15, 30.4, 35.35, 50.3)),
    JobConfig(id="bar", name="Bar", hourly_rates=RateSet(28.1, 33.3, 38.7, 56.2), default_break_minutes=30),
]

SHIFTS = [
    Shift("1", "2025-09-01", "cafe", 7.3),
    Shift("2", "2025-09-06", "bar", 5.1),
    Shift("3", "2025-09-07", "cafe", 3.7),
    Shift("4", "2025-10-02", "bar", 6.6),
    Shift("5", "2025-10-04", "cafe", 4.4),
    Shift("6", "2025-10-05", "bar", 8.9),
]


def make_aggregator():
    return PayAggregator(ShiftPayCalculator(JOBS, DayClassifier()))


def test_empty_collection():
    agg = make_aggregator()
    assert agg.total_pay([]) == 0
    assert agg.total_hours([]) == 0
    assert agg.pay_by_month([]) == {}


def test_additive_over_partitions():
    agg = make_aggregator()
    total = agg.total_pay(SHIFTS)
    parts = agg.total_pay(SHIFTS[:2]) + agg.total_pay(SHIFTS[2:])
    assert total == pytest.approx(parts, abs=1e-9)
    assert total == pytest.approx(sum(agg.pay_by_job(SHIFTS).values()), abs=1e-9)
    assert total == pytest.approx(sum(agg.pay_by_month(SHIFTS).values()), abs=1e-9)


def test_order_independent_and_idempotent():
    agg = make_aggregator()
    shuffled = SHIFTS[:]
    random.Random(7).shuffle(shuffled)
    assert agg.total_pay(shuffled) == agg.total_pay(SHIFTS)
    assert agg.total_pay(SHIFTS) == agg.total_pay(SHIFTS)


def test_by_job_and_day_type():
    agg = make_aggregator()
    totals = agg.by_job(SHIFTS)
    assert totals["bar"].shift_count == 3
    assert totals["bar"].hours == pytest.approx(20.6)
    assert totals["bar"].paid_hours == pytest.approx(19.1)
    assert agg.hours_by_job(SHIFTS)["cafe"] == pytest.approx(15.4)
    by_type = agg.pay_by_day_type(SHIFTS)
    assert set(by_type) == {"weekday", "saturday", "sunday"}


def test_pay_by_month_keys():
    agg = make_aggregator()
    assert list(agg.pay_by_month(SHIFTS + [Shift("x", "bad", "cafe", 1)])) == ["2025-09", "2025-10"]


def test_summary_and_super():
    agg = make_aggregator()
    summary = agg.summary(SHIFTS, super_rate=0.12)
    assert summary.shift_count == 6
    assert summary.total_super == round(agg.total_pay(SHIFTS) * 0.12, 2)
    assert agg.superannuation(SHIFTS, 0.12) == summary.total_super


def test_filter_shifts():
    assert [s.id for s in filter_shifts(SHIFTS, "2025-10-01", "2025-10-04")] == ["4", "5"]
    assert [s.id for s in filter_shifts(SHIFTS, job_id="cafe")] == ["1", "3", "5"]
