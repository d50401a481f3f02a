from datetime import date as py_date
from datetime import timedelta

import pytest

from wallclock import (
    FRIDAY,
    MONDAY,
    SATURDAY,
    SUNDAY,
    THURSDAY,
    TUESDAY,
    WEDNESDAY,
    LocalDate,
    LocalDateTime,
    Month,
    OutOfRange,
    Weekday,
    Year,
)

from .common import AlwaysEqual, AlwaysLarger, AlwaysSmaller, NeverEqual

SWEEP_YEARS = [
    -123_456,
    -10_000,
    -753,
    -401,
    -400,
    -100,
    -1,
    0,
    1,
    1600,
    1601,
    1700,
    1800,
    1899,
    1900,
    1969,
    1970,
    1999,
    2000,
    2001,
    2100,
    2369,
    2400,
    9999,
    10_000,
    10_601,
    292_277_026_596,
]


def all_dates(year):
    for ym in Year(year).months():
        yield from ym.days()


class TestYear:

    @pytest.mark.parametrize(
        "year", [1600, 2000, 2004, 2008, 2400, 0, -4, -400, 1996]
    )
    def test_leap(self, year):
        assert Year(year).is_leap_year()
        assert Year(year).days_in_year() == 366

    @pytest.mark.parametrize(
        "year", [1700, 1800, 1900, 2001, 2100, 1999, -1, -100, 1601]
    )
    def test_not_leap(self, year):
        assert not Year(year).is_leap_year()
        assert Year(year).days_in_year() == 365

    @pytest.mark.parametrize("year", range(1550, 2450, 7))
    def test_leap_rule_matches_modulo_rule(self, year):
        expected = year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)
        assert Year(year).is_leap_year() == expected

    def test_equality(self):
        assert Year(2000) == Year(2000)
        assert Year(2000) != Year(2001)
        assert hash(Year(2000)) == hash(Year(2000))
        assert Year(2000) == AlwaysEqual()
        assert Year(2000) != NeverEqual()
        assert int(Year(1999)) == 1999

    def test_repr(self):
        assert repr(Year(-5)) == "Year(-5)"


class TestMonth:

    def test_values(self):
        assert Month.JANUARY == 1
        assert Month.DECEMBER == 12
        assert Month.MARCH > Month.FEBRUARY
        assert Month.MAY.months_from_january() == 4

    @pytest.mark.parametrize(
        "month, leap, expected",
        [
            (Month.JANUARY, False, 31),
            (Month.FEBRUARY, False, 28),
            (Month.FEBRUARY, True, 29),
            (Month.APRIL, True, 30),
            (Month.DECEMBER, False, 31),
        ],
    )
    def test_days_in_month(self, month, leap, expected):
        assert month.days_in_month(leap) == expected

    def test_days_before_start(self):
        assert Month.JANUARY.days_before_start() == 0
        assert Month.MARCH.days_before_start() == 59
        assert Month.DECEMBER.days_before_start() == 334

    def test_from_one_and_zero(self):
        assert Month.from_one(1) is Month.JANUARY
        assert Month.from_one(12) is Month.DECEMBER
        assert Month.from_zero(0) is Month.JANUARY
        assert Month.from_zero(11) is Month.DECEMBER

    @pytest.mark.parametrize("n", [0, 13, -1])
    def test_from_one_invalid(self, n):
        with pytest.raises(OutOfRange, match="month"):
            Month.from_one(n)

    @pytest.mark.parametrize("n", [-1, 12])
    def test_from_zero_invalid(self, n):
        with pytest.raises(OutOfRange, match="month"):
            Month.from_zero(n)


class TestWeekday:

    def test_iso_values(self):
        assert MONDAY.value == 1
        assert SUNDAY.value == 7
        assert SATURDAY.days_from_monday_as_one() == 6

    def test_from_zero(self):
        assert Weekday.from_zero(0) is SUNDAY
        assert Weekday.from_zero(1) is MONDAY
        assert Weekday.from_zero(6) is SATURDAY

    def test_from_one(self):
        assert Weekday.from_one(1) is MONDAY
        assert Weekday.from_one(7) is SUNDAY

    @pytest.mark.parametrize("n", [-1, 7])
    def test_from_zero_invalid(self, n):
        with pytest.raises(OutOfRange):
            Weekday.from_zero(n)

    @pytest.mark.parametrize("n", [0, 8])
    def test_from_one_invalid(self, n):
        with pytest.raises(OutOfRange):
            Weekday.from_one(n)

    def test_not_ordered(self):
        with pytest.raises(TypeError):
            MONDAY < TUESDAY  # type: ignore[operator]


class TestLocalDateInit:

    def test_basics(self):
        d = LocalDate(2021, 1, 2)
        assert d.year == 2021
        assert d.month is Month.JANUARY
        assert d.day == 2
        assert d.yearday == 2
        assert d.weekday is SATURDAY

    def test_named_constructor(self):
        assert LocalDate.from_year_month_day(2021, 1, 2) == LocalDate(
            2021, 1, 2
        )

    @pytest.mark.parametrize(
        "year, month, day",
        [
            (2021, 1, 0),
            (2021, 1, 32),
            (2021, 4, 31),
            (2021, 2, 29),
            (2100, 2, 29),
            (1900, 2, 29),
            (1700, 2, 29),
            (2000, 2, 30),
            (2021, 13, 1),
            (2021, 0, 1),
        ],
    )
    def test_invalid(self, year, month, day):
        with pytest.raises(OutOfRange):
            LocalDate(year, month, day)

    @pytest.mark.parametrize("year", [1600, 2000, 2400, 0, -400])
    def test_leap_day(self, year):
        d = LocalDate(year, 2, 29)
        assert d.yearday == 60

    def test_new_unchecked(self):
        d = LocalDate._new_unchecked(2015, Month.SEPTEMBER, 11, FRIDAY, 254)
        assert d == LocalDate(2015, 9, 11)
        assert d.weekday is FRIDAY
        assert d.yearday == 254

    def test_today(self):
        today = LocalDate.today()
        assert 2020 <= today.year < 2100


class TestWeekdayAnchors:

    @pytest.mark.parametrize(
        "d, weekday",
        [
            (LocalDate(1970, 1, 1), THURSDAY),
            (LocalDate(2000, 3, 1), WEDNESDAY),
            (LocalDate(2000, 1, 1), SATURDAY),
            (LocalDate(1600, 1, 1), SATURDAY),
            (LocalDate(1969, 7, 20), SUNDAY),
            (LocalDate(2001, 9, 9), SUNDAY),
            (LocalDate(2009, 2, 13), FRIDAY),
            (LocalDate(2038, 1, 19), TUESDAY),
        ],
    )
    def test_anchor(self, d, weekday):
        assert d.weekday is weekday

    @pytest.mark.parametrize("year", [1, 1582, 1752, 1900, 2000, 2024, 9999])
    def test_matches_stdlib(self, year):
        for d in all_dates(year):
            expected = py_date(d.year, d.month, d.day)
            assert d.weekday.value == expected.isoweekday()
            assert d.yearday == expected.timetuple().tm_yday


class TestDaysSinceEpoch:

    @pytest.mark.parametrize(
        "d, days",
        [
            (LocalDate(1970, 1, 1), 0),
            (LocalDate(1970, 1, 2), 1),
            (LocalDate(1969, 12, 31), -1),
            (LocalDate(2000, 1, 1), 10_957),
            (LocalDate(2000, 3, 1), 11_017),
            (LocalDate(2001, 9, 9), 11_574),
        ],
    )
    def test_fixtures(self, d, days):
        assert d.days_since_epoch() == days

    @pytest.mark.parametrize("year", SWEEP_YEARS)
    def test_roundtrip(self, year):
        for d in all_dates(year):
            days = d.days_since_epoch()
            back = LocalDateTime.at(days * 86_400).date
            assert back == d
            assert back.yearday == d.yearday
            assert back.weekday is d.weekday

    @pytest.mark.parametrize("year", SWEEP_YEARS)
    def test_consecutive(self, year):
        dates = list(all_dates(year))
        assert len(dates) == Year(year).days_in_year()
        for yearday, (d, following) in enumerate(
            zip(dates, dates[1:]), start=1
        ):
            assert d.yearday == yearday
            assert following.days_since_epoch() == d.days_since_epoch() + 1
            assert (
                following.weekday.value
                == d.weekday.value % 7 + 1
            )

    @pytest.mark.parametrize("year", SWEEP_YEARS)
    def test_year_boundary(self, year):
        last = LocalDate(year, 12, 31)
        first_next = LocalDate(year + 1, 1, 1)
        assert first_next.days_since_epoch() == last.days_since_epoch() + 1
        assert last.yearday == Year(year).days_in_year()
        assert first_next.yearday == 1

    def test_matches_stdlib_ordinals(self):
        base = py_date(1970, 1, 1)
        for offset in range(-719_162, 2_932_897, 997):
            expected = base + timedelta(days=offset)
            d = LocalDateTime.at(offset * 86_400).date
            assert (d.year, d.month, d.day) == (
                expected.year,
                expected.month,
                expected.day,
            )


class TestMonthBoundaries:

    @pytest.mark.parametrize("year", SWEEP_YEARS)
    def test_yearday_continues_into_next_month(self, year):
        for ym in Year(year).months(stop=Month.DECEMBER):
            last = ym.day(ym.day_count())
            first_next = LocalDate(year, ym.month + 1, 1)
            assert last.yearday + 1 == first_next.yearday

    def test_march_differs_by_one_in_leap_years(self):
        assert LocalDate(1600, 3, 1).yearday == 61
        assert LocalDate(1601, 3, 1).yearday == 60
        for year in (1700, 1800, 1900):
            assert LocalDate(year, 3, 1).yearday == 60
        assert LocalDate(2000, 3, 1).yearday == 61

    @pytest.mark.parametrize("year", [1700, 1800, 1900, 2000, 2100, 2400])
    def test_end_of_february_in_centuries(self, year):
        leap = Year(year).is_leap_year()
        last_feb = LocalDateTime.at(
            (LocalDate(year, 3, 1).days_since_epoch() - 1) * 86_400
        ).date
        assert last_feb == LocalDate(year, 2, 29 if leap else 28)

    def test_last_day_of_400_year_cycle(self):
        d = LocalDate(2400, 2, 29)
        assert d.yearday == 60
        following = LocalDateTime.at(
            (d.days_since_epoch() + 1) * 86_400
        ).date
        assert following == LocalDate(2400, 3, 1)


class TestYearDay:

    @pytest.mark.parametrize(
        "year, yearday, expected",
        [
            (2015, 0x100, LocalDate(2015, 9, 13)),
            (2016, 0x100, LocalDate(2016, 9, 12)),
            (2016, 1, LocalDate(2016, 1, 1)),
            (2016, 60, LocalDate(2016, 2, 29)),
            (2015, 60, LocalDate(2015, 3, 1)),
            (2016, 366, LocalDate(2016, 12, 31)),
            (1900, 365, LocalDate(1900, 12, 31)),
        ],
    )
    def test_valid(self, year, yearday, expected):
        d = LocalDate.from_year_day_of_year(year, yearday)
        assert d == expected
        assert d.yearday == yearday

    @pytest.mark.parametrize(
        "year, yearday", [(2015, 0), (2015, 366), (2016, 367), (2015, -1)]
    )
    def test_invalid(self, year, yearday):
        with pytest.raises(OutOfRange, match="day of year"):
            LocalDate.from_year_day_of_year(year, yearday)


class TestWeekDate:

    @pytest.mark.parametrize(
        "year, week, weekday, expected",
        [
            (2015, 37, FRIDAY, LocalDate(2015, 9, 11)),
            (2009, 1, MONDAY, LocalDate(2008, 12, 29)),
            (2009, 53, SUNDAY, LocalDate(2010, 1, 3)),
            (2020, 53, FRIDAY, LocalDate(2021, 1, 1)),
            (2021, 1, MONDAY, LocalDate(2021, 1, 4)),
            (2005, 1, MONDAY, LocalDate(2005, 1, 3)),
            (2008, 1, MONDAY, LocalDate(2007, 12, 31)),
        ],
    )
    def test_fixtures(self, year, week, weekday, expected):
        assert LocalDate.from_year_week_weekday(year, week, weekday) == (
            expected
        )

    def test_weekday_as_number(self):
        assert LocalDate.from_year_week_weekday(2015, 37, 5) == LocalDate(
            2015, 9, 11
        )

    @pytest.mark.parametrize("year", range(1995, 2031))
    def test_matches_stdlib(self, year):
        for d in all_dates(year):
            iso_year, week, weekday = py_date(
                d.year, d.month, d.day
            ).isocalendar()
            assert (
                LocalDate.from_year_week_weekday(iso_year, week, weekday)
                == d
            )

    @pytest.mark.parametrize(
        "year, week",
        [(2010, 53), (2021, 53), (2015, 0), (2015, 54), (2015, -1)],
    )
    def test_invalid_week(self, year, week):
        with pytest.raises(OutOfRange, match="week"):
            LocalDate.from_year_week_weekday(year, week, MONDAY)

    @pytest.mark.parametrize("weekday", [0, 8])
    def test_invalid_weekday(self, weekday):
        with pytest.raises(OutOfRange):
            LocalDate.from_year_week_weekday(2015, 10, weekday)


class TestAccessors:

    @pytest.mark.parametrize(
        "year, expected", [(2023, 23), (1900, 0), (-753, -53), (10_601, 1)]
    )
    def test_year_of_century(self, year, expected):
        assert LocalDate(year, 1, 1).year_of_century == expected

    def test_years_from_2000(self):
        assert LocalDate(1970, 1, 1).years_from_2000 == -30
        assert LocalDate(2024, 1, 1).years_from_2000 == 24

    def test_immutable(self):
        d = LocalDate(2021, 1, 2)
        with pytest.raises(AttributeError):
            d.year = 2022  # type: ignore[misc]


class TestFormat:

    @pytest.mark.parametrize(
        "d, expected",
        [
            (LocalDate(2021, 1, 2), "2021-01-02"),
            (LocalDate(1, 1, 1), "0001-01-01"),
            (LocalDate(0, 12, 31), "0000-12-31"),
            (LocalDate(-753, 12, 1), "-0753-12-01"),
            (LocalDate(10_601, 1, 31), "+10601-01-31"),
        ],
    )
    def test_canonical_format(self, d, expected):
        assert d.canonical_format() == expected
        assert str(d) == expected

    def test_repr(self):
        assert repr(LocalDate(1600, 2, 28)) == "LocalDate(1600-02-28)"
        assert repr(LocalDate(-753, 12, 1)) == "LocalDate(-0753-12-01)"
        assert repr(LocalDate(10_601, 1, 31)) == "LocalDate(+10601-01-31)"


class TestComparison:

    def test_equality(self):
        d = LocalDate(2021, 1, 2)
        same = LocalDate.from_year_day_of_year(2021, 2)
        different = LocalDate(2021, 1, 3)
        assert d == same
        assert not d == different
        assert d != different
        assert hash(d) == hash(same)
        assert d == AlwaysEqual()
        assert d != NeverEqual()

    def test_ordering(self):
        d = LocalDate(2021, 5, 2)
        assert d < LocalDate(2021, 5, 3)
        assert d < LocalDate(2021, 6, 1)
        assert d < LocalDate(2022, 1, 1)
        assert d > LocalDate(-2022, 12, 31)
        assert d <= LocalDate(2021, 5, 2)
        assert d >= LocalDate(2021, 5, 2)
        assert d < AlwaysLarger()
        assert d > AlwaysSmaller()

    def test_copy(self):
        from copy import copy, deepcopy

        d = LocalDate(2021, 5, 2)
        assert copy(d) is d
        assert deepcopy(d) is d
