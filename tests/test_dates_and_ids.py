# -*- coding: utf-8 -*-

from __future__ import annotations

import unittest
from datetime import date, datetime, timedelta, timezone

from mealfit.dates import day_key, end_of_day_key, parse_calendar_date, parse_strict_day
from mealfit.errors import ValidationError
from mealfit.identifiers import IdentityId


class TestCalendarDates(unittest.TestCase):
    def test_lenient_parse_keeps_calendar_date_as_written(self) -> None:
        self.assertEqual(parse_calendar_date("2026-01-05"), date(2026, 1, 5))
        self.assertEqual(parse_calendar_date("2026-01-05T23:30:00Z"), date(2026, 1, 5))
        self.assertEqual(parse_calendar_date("2026-01-05T01:00:00+05:30"), date(2026, 1, 5))
        tz = timezone(timedelta(hours=-8))
        self.assertEqual(parse_calendar_date(datetime(2026, 1, 5, 22, 0, tzinfo=tz)), date(2026, 1, 5))

    def test_lenient_parse_rejects_garbage(self) -> None:
        for bad in ("", "not-a-date", None, 42, "2026-02-30", "2026-01-05garbage", "2026-01-05T99:99", "2026-01-05 not a date"):
            with self.assertRaises(ValueError):
                parse_calendar_date(bad)

    def test_strict_day(self) -> None:
        self.assertEqual(parse_strict_day("2026-01-05"), date(2026, 1, 5))
        for bad in ("2026-1-5", "2026-01-05T00:00:00Z", "2026-02-30", "05-01-2026", None):
            with self.assertRaises(ValueError) as ctx:
                parse_strict_day(bad)
            self.assertIn("YYYY-MM-DD", str(ctx.exception))

    def test_day_bounds_are_utc_and_inclusive(self) -> None:
        self.assertEqual(day_key(date(2026, 1, 5)), "2026-01-05T00:00:00+00:00")
        self.assertEqual(end_of_day_key(date(2026, 1, 5)), "2026-01-05T23:59:59.999999+00:00")
        self.assertLess(end_of_day_key(date(2026, 1, 5)), day_key(date(2026, 1, 6)))


class TestIdentityId(unittest.TestCase):
    def test_parse_normalizes(self) -> None:
        raw = "6F9619FF-8B86-D011-B42D-00C04FC964FF"
        self.assertEqual(IdentityId.parse(raw).value, "6f9619ff-8b86-d011-b42d-00c04fc964ff")
        ident = IdentityId.new()
        self.assertIs(IdentityId.parse(ident), ident)
        self.assertEqual(IdentityId.parse(str(ident)), ident)

    def test_parse_rejects_malformed(self) -> None:
        for bad in ("", "   ", "u1", "1234", None, 7):
            with self.assertRaises(ValidationError):
                IdentityId.parse(bad)


if __name__ == "__main__":
    unittest.main()
