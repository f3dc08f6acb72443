"""
Effective-dated hourly rate resolution.

A job's rate_history keeps every rate change keyed by the date it took effect,
so shifts worked before a pay rise are still paid at the old rate when pay is
recomputed.
"""
import logging
from dataclasses import replace
from datetime import date
from typing import Union

from shiftpay.core.models import JobConfig, RateHistoryEntry, RateSet
from shiftpay.core.utils import to_date_key

logger = logging.getLogger(__name__)


def resolve_rates(job: JobConfig, target_date: Union[str, date]) -> RateSet:
    """Return the rates in force for job on target_date."""
    if not job.rate_history:
        return job.hourly_rates

    target = to_date_key(target_date)
    if target is None:
        logger.debug("Unparseable date %r for job %s, using current rates", target_date, job.id)
        return job.hourly_rates

    # ISO date keys sort chronologically as strings
    history = sorted(job.rate_history, key=lambda h: h.effective_date, reverse=True)
    for entry in history:
        if entry.effective_date <= target:
            return entry.rates
    return job.hourly_rates


def with_rate_change(
    job: JobConfig,
    effective_date: Union[str, date],
    rates: RateSet,
    today: Union[str, date],
) -> JobConfig:
    """
    Record a rate change on a copy of job.

    Any existing entry for the same effective date is replaced. The job's
    current hourly_rates only move when the change is already in force today;
    a future-dated change waits in the history.
    """
    key = to_date_key(effective_date)
    if key is None:
        raise ValueError(f"Invalid effective date: {effective_date!r}")
    today_key = to_date_key(today)
    if today_key is None:
        raise ValueError(f"Invalid reference date: {today!r}")

    history = [h for h in job.rate_history if h.effective_date != key]
    history.append(RateHistoryEntry(effective_date=key, rates=rates))
    history.sort(key=lambda h: h.effective_date, reverse=True)

    current = rates if key <= today_key else job.hourly_rates
    return replace(job, hourly_rates=current, rate_history=tuple(history))
