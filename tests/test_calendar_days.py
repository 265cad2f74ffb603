from __future__ import annotations

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo
import unittest
from unittest.mock import patch

from hrms_engine.schemas import Holiday
from hrms_engine.services.calendar_days import (
    add_months,
    calendar_difference,
    count_qualifying_days,
    end_of_month,
    first_of_next_month,
    is_last_day_of_month,
    is_working_day,
    parse_hhmm,
    to_calendar_date,
)


class CountQualifyingDaysTests(unittest.TestCase):
    def test_week_with_monday_holiday_and_sunday(self) -> None:
        value = count_qualifying_days(date(2024, 1, 1), date(2024, 1, 7), {date(2024, 1, 1)})
        self.assertEqual(value, 5)

    def test_inverted_range_is_zero(self) -> None:
        self.assertEqual(count_qualifying_days(date(2024, 1, 7), date(2024, 1, 1), set()), 0)

    def test_unparseable_dates_are_zero(self) -> None:
        self.assertEqual(count_qualifying_days("2024-02-30", date(2024, 3, 1), set()), 0)
        self.assertEqual(count_qualifying_days(None, date(2024, 3, 1), set()), 0)
        self.assertEqual(count_qualifying_days(date(2024, 3, 1), "not-a-date", set()), 0)

    def test_accepts_day_first_strings_and_holiday_records(self) -> None:
        holidays = [Holiday(holiday_date=date(2024, 1, 1), description="New Year")]
        self.assertEqual(count_qualifying_days("01-01-2024", "07-01-2024", holidays), 5)

    def test_single_sunday_does_not_qualify(self) -> None:
        self.assertEqual(count_qualifying_days(date(2024, 1, 7), date(2024, 1, 7)), 0)
        self.assertFalse(is_working_day(date(2024, 1, 7)))
        self.assertTrue(is_working_day(date(2024, 1, 6)))

    def test_holiday_on_sunday_is_not_subtracted_twice(self) -> None:
        value = count_qualifying_days(date(2024, 1, 1), date(2024, 1, 7), {date(2024, 1, 7)})
        self.assertEqual(value, 6)


class CalendarHelpersTests(unittest.TestCase):
    def test_to_calendar_date_formats(self) -> None:
        self.assertEqual(to_calendar_date("2024-03-10"), date(2024, 3, 10))
        self.assertEqual(to_calendar_date("10-03-2024"), date(2024, 3, 10))
        self.assertEqual(to_calendar_date(datetime(2024, 3, 10, 23, 59)), date(2024, 3, 10))
        self.assertIsNone(to_calendar_date(""))
        self.assertIsNone(to_calendar_date(42))

    def test_aware_timestamp_uses_company_timezone(self) -> None:
        with patch(
            "hrms_engine.services.calendar_days.company_timezone",
            return_value=ZoneInfo("Asia/Kolkata"),
        ):
            value = to_calendar_date(datetime(2024, 1, 1, 20, 0, tzinfo=timezone.utc))
            iso_value = to_calendar_date("2024-01-01T20:00:00Z")
        self.assertEqual(value, date(2024, 1, 2))
        self.assertEqual(iso_value, date(2024, 1, 2))

    def test_add_months_clamps_day(self) -> None:
        self.assertEqual(add_months(date(2024, 1, 31), 1), date(2024, 2, 29))
        self.assertEqual(add_months(date(2023, 11, 15), 3), date(2024, 2, 15))
        self.assertEqual(add_months(date(2024, 3, 10), 12), date(2025, 3, 10))

    def test_month_end_helpers(self) -> None:
        self.assertEqual(end_of_month(date(2024, 2, 10)), date(2024, 2, 29))
        self.assertEqual(first_of_next_month(date(2024, 12, 15)), date(2025, 1, 1))
        self.assertTrue(is_last_day_of_month(date(2024, 2, 29)))
        self.assertFalse(is_last_day_of_month(date(2023, 2, 27)))

    def test_calendar_difference_months_and_days(self) -> None:
        self.assertEqual(calendar_difference(date(2024, 1, 15), date(2024, 3, 10)), (1, 24))
        self.assertEqual(calendar_difference(date(2024, 4, 1), date(2024, 5, 10)), (1, 9))
        self.assertEqual(calendar_difference(date(2024, 5, 10), date(2024, 5, 10)), (0, 0))
        self.assertEqual(calendar_difference(date(2024, 6, 1), date(2024, 5, 10)), (0, 0))

    def test_parse_hhmm(self) -> None:
        self.assertEqual(parse_hhmm("09:30"), 570)
        self.assertEqual(parse_hhmm("00:00"), 0)
        self.assertIsNone(parse_hhmm("24:00"))
        self.assertIsNone(parse_hhmm("abc"))
        self.assertIsNone(parse_hhmm(None))


if __name__ == "__main__":
    unittest.main()
