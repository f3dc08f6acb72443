import logging
import os
import re
from datetime import date, datetime, timedelta
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Union

from shiftpay.core.config import get_settings

ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

DateLike = Union[str, date]


def mkdir_safe(path: str):
    Path(path).mkdir(parents=True, exist_ok=True)


def setup_logging(name: str = None, *, log_level: str = None, settings=None):
    settings = settings or get_settings()
    logger_name = name or settings.APP_NAME
    logger = logging.getLogger(logger_name)
    if logger.handlers:
        return logger
    level = log_level or settings.LOG_LEVEL
    logger.setLevel(getattr(logging, level.upper()))
    mkdir_safe(settings.LOG_PATH)
    logfile = Path(settings.LOG_PATH) / f"{logger_name}.log"
    handler = RotatingFileHandler(str(logfile), maxBytes=10_000_000, backupCount=5)
    formatter = logging.Formatter('%(asctime)s %(levelname)s %(name)s %(message)s')
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    if os.getenv("DEV", "").lower() in ("1", "true", "yes"):
        ch = logging.StreamHandler()
        ch.setFormatter(formatter)
        logger.addHandler(ch)
    logger.propagate = False
    return logger


def parse_local_date(value: DateLike) -> Optional[date]:
    """Parse a YYYY-MM-DD calendar date. Returns None for anything malformed."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not ISO_DATE.match(value.strip()):
        return None
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        return None


def to_date_key(value: DateLike) -> Optional[str]:
    parsed = parse_local_date(value)
    return parsed.isoformat() if parsed else None


def week_start_sunday(day: date) -> date:
    # date.weekday(): Monday=0 .. Sunday=6
    return day - timedelta(days=(day.weekday() + 1) % 7)


def ranges_overlap(start_a: date, end_a: date, start_b: date, end_b: date) -> bool:
    """Inclusive range overlap on calendar dates."""
    return start_a <= end_b and end_a >= start_b
