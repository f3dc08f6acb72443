import pytest

from shiftpay.core.exceptions import ConfigurationError
from shiftpay.core.models import DayType
from shiftpay.days.classifier import CUSTOM_HOLIDAY_NAME, DayClassifier
from shiftpay.tax.jurisdictions import australia


def test_weekday_and_weekends():
    c = DayClassifier()
    assert c.classify("2025-09-01") == DayType.WEEKDAY
    assert c.classify("2025-09-06") == DayType.SATURDAY
    assert c.classify("2025-09-07") == DayType.SUNDAY


def test_public_holiday_from_calendar():
    c = DayClassifier.for_jurisdiction(australia())
    assert c.classify("2025-12-25") == DayType.HOLIDAY
    assert c.is_holiday("2025-12-25")
    assert c.holiday_name("2025-12-25") == "Christmas Day"
    assert c.holiday_name("2025-09-01") is None


def test_custom_holiday_beats_weekend():
    c = DayClassifier(custom_holidays=["2025-09-06", "garbage"])
    assert c.classify("2025-09-06") == DayType.HOLIDAY
    assert c.holiday_name("2025-09-06") == CUSTOM_HOLIDAY_NAME
    assert c.custom_holidays == frozenset({"2025-09-06"})


def test_malformed_date_is_weekday():
    c = DayClassifier()
    assert c.classify("2025-13-40") == DayType.WEEKDAY
    assert c.classify("") == DayType.WEEKDAY
    assert not c.is_holiday("nope")


def test_classification_is_deterministic():
    c = DayClassifier("AU", "VIC")
    assert {c.classify("2026-01-26") for _ in range(3)} == {DayType.HOLIDAY}


def test_unknown_country_rejected():
    with pytest.raises(ConfigurationError):
        DayClassifier("XX")
