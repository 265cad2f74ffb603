from __future__ import annotations

from datetime import date, timedelta
import unittest

from hrms_engine.models import HolidayStatus
from hrms_engine.schemas import Holiday
from hrms_engine.services.holidays import (
    COMPLETE_WEEK_SUNDAY_DESCRIPTION,
    complete_week_sundays,
    filter_holidays,
    holiday_calendar,
)


def _holiday(day: date, description: str = "Holiday") -> Holiday:
    return Holiday(holiday_date=day, description=description)


class HolidayCalendarTests(unittest.TestCase):
    def test_full_week_generates_preceding_sunday(self) -> None:
        week = [_holiday(date(2024, 1, 1) + timedelta(days=offset)) for offset in range(6)]
        self.assertEqual(complete_week_sundays(week), [date(2023, 12, 31)])

    def test_partial_week_generates_nothing(self) -> None:
        week = [_holiday(date(2024, 1, 1) + timedelta(days=offset)) for offset in range(5)]
        self.assertEqual(complete_week_sundays(week), [])

    def test_calendar_is_sorted_newest_first_with_status(self) -> None:
        holidays = [
            _holiday(date(2024, 1, 26), "Republic Day"),
            _holiday(date(2024, 8, 15), "Independence Day"),
            _holiday(date(2023, 12, 25), "Christmas"),
        ]
        views = holiday_calendar(holidays, today=date(2024, 3, 1), year=2024)

        self.assertEqual([view.holiday_date for view in views], [date(2024, 8, 15), date(2024, 1, 26)])
        self.assertEqual(views[0].status, HolidayStatus.UPCOMING)
        self.assertEqual(views[1].status, HolidayStatus.PAST)

    def test_generated_sunday_is_flagged(self) -> None:
        week = [_holiday(date(2024, 1, 1) + timedelta(days=offset), "Winter break") for offset in range(6)]
        views = holiday_calendar(week)

        self.assertEqual(len(views), 7)
        generated = views[-1]
        self.assertEqual(generated.holiday_date, date(2023, 12, 31))
        self.assertEqual(generated.description, COMPLETE_WEEK_SUNDAY_DESCRIPTION)
        self.assertTrue(generated.is_generated)
        self.assertIsNone(generated.status)

    def test_filter_by_month_and_range(self) -> None:
        holidays = [_holiday(date(2024, 1, 1)), _holiday(date(2024, 1, 26)), _holiday(date(2024, 3, 25))]

        self.assertEqual(len(filter_holidays(holidays, month=1)), 2)
        ranged = filter_holidays(holidays, start=date(2024, 1, 2), end=date(2024, 3, 31))
        self.assertEqual([item.holiday_date for item in ranged], [date(2024, 1, 26), date(2024, 3, 25)])

    def test_wire_alias_is_accepted(self) -> None:
        holiday = Holiday.model_validate({"date": "26-01-2024", "description": "Republic Day"})
        self.assertEqual(holiday.holiday_date, date(2024, 1, 26))


if __name__ == "__main__":
    unittest.main()
