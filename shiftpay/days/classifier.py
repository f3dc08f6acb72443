import logging
from datetime import date
from functools import lru_cache
from typing import FrozenSet, Iterable, Optional, Union

import holidays

from shiftpay.core.exceptions import ConfigurationError
from shiftpay.core.models import DayType
from shiftpay.core.utils import parse_local_date, to_date_key

logger = logging.getLogger(__name__)

CUSTOM_HOLIDAY_NAME = "Custom holiday"


@lru_cache(maxsize=128)
def public_holiday_dates(country: str, subdiv: Optional[str], year: int) -> FrozenSet[date]:
    """Public holidays observed in one year, from the `holidays` calendars."""
    calendar = holidays.country_holidays(country, subdiv=subdiv, years=year)
    return frozenset(calendar.keys())


class DayClassifier:
    """
    Classifies calendar dates for pay purposes.

    Public holidays (custom or from the jurisdiction calendar) win over
    weekends. Only calendar dates are compared, never instants, so a date
    classifies the same way in every timezone.
    """

    def __init__(self, country: Optional[str] = None, subdiv: Optional[str] = None, custom_holidays: Iterable[str] = ()):
        self.country = country
        self.subdiv = subdiv
        if country:
            try:
                holidays.country_holidays(country, subdiv=subdiv)
            except NotImplementedError as e:
                raise ConfigurationError(f"No holiday calendar for {country}/{subdiv}: {e}") from e
        keys = (to_date_key(h) for h in custom_holidays)
        self.custom_holidays = frozenset(k for k in keys if k)

    @classmethod
    def for_jurisdiction(cls, jurisdiction, custom_holidays: Iterable[str] = ()):
        return cls(jurisdiction.holiday_country, jurisdiction.holiday_subdiv, custom_holidays)

    def is_public_holiday(self, day: date) -> bool:
        if not self.country:
            return False
        return day in public_holiday_dates(self.country, self.subdiv, day.year)

    def is_holiday(self, value: Union[str, date]) -> bool:
        day = parse_local_date(value)
        if day is None:
            return False
        return day.isoformat() in self.custom_holidays or self.is_public_holiday(day)

    def classify(self, value: Union[str, date]) -> DayType:
        day = parse_local_date(value)
        if day is None:
            logger.warning("Unparseable shift date %r, treating as a weekday", value)
            return DayType.WEEKDAY
        if day.isoformat() in self.custom_holidays or self.is_public_holiday(day):
            return DayType.HOLIDAY
        weekday = day.weekday()
        if weekday == 6:
            return DayType.SUNDAY
        if weekday == 5:
            return DayType.SATURDAY
        return DayType.WEEKDAY

    def holiday_name(self, value: Union[str, date], language: Optional[str] = None) -> Optional[str]:
        day = parse_local_date(value)
        if day is None:
            return None
        if self.country and self.is_public_holiday(day):
            calendar = holidays.country_holidays(self.country, subdiv=self.subdiv, years=day.year, language=language)
            return calendar.get(day)
        if day.isoformat() in self.custom_holidays:
            return CUSTOM_HOLIDAY_NAME
        return None
