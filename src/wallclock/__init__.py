# The MIT License (MIT)
#
# Copyright (c) Arie Bovenberg
#
# Permission is hereby granted, free of charge, to any person obtaining a copy
# of this software and associated documentation files (the "Software"), to deal
# in the Software without restriction, including without limitation the rights
# to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
# copies of the Software, and to permit persons to whom the Software is
# furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in all
# copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
# OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

# Maintainer's notes:
#
# - Why is everything in one file?
#   - Flat is better than nested
#   - It prevents circular imports since the classes 'know' about each other
#   - It's easier to vendor (i.e. copy-paste) this library if needed
# - The calendar math doesn't lean on the standard library's datetime.
#   Years are unbounded Python integers, so dates millions of years
#   away from the epoch are as exact as today's.
# - Internally, day counts start at 1 March 2000. Placing day zero just
#   after a possible leap day reduces every leap-year adjustment to a single
#   correction per 4/100/400-year cycle. Public APIs use the Unix epoch.
# - Leap seconds are ignored throughout.
from __future__ import annotations

__version__ = "0.1.0"

import enum
import logging
import time
from abc import ABC, abstractmethod
from bisect import bisect_left
from operator import attrgetter
from typing import (
    TYPE_CHECKING,
    ClassVar,
    Iterable,
    Iterator,
    Literal,
    NamedTuple,
    Optional,
    Tuple,
    no_type_check,
)

__all__ = [
    # Calendar
    "Year",
    "YearMonth",
    "Month",
    "Weekday",
    "LocalDate",
    "LocalTime",
    "LocalDateTime",
    # Timeline
    "Duration",
    "Instant",
    "hours",
    "minutes",
    # Offsets and zones
    "Offset",
    "OffsetDateTime",
    "FixedTimespan",
    "FixedTimespanSet",
    "Surroundings",
    "TimeZone",
    "ZonedDateTime",
    "LocalTimes",
    "Precise",
    "Ambiguous",
    "Impossible",
    # Exceptions
    "OutOfRange",
    "SignMismatch",
    "InvalidTimespans",
    "AmbiguousTime",
    "DoesntExistInZone",
    # Constants
    "MONDAY",
    "TUESDAY",
    "WEDNESDAY",
    "THURSDAY",
    "FRIDAY",
    "SATURDAY",
    "SUNDAY",
    "SECONDS_IN_DAY",
    "EPOCH_DIFFERENCE",
]

_logger = logging.getLogger(__name__)

#: Number of seconds in a day, leap seconds being ignored.
SECONDS_IN_DAY = 86_400

#: Number of days guaranteed to be in four years.
DAYS_IN_4Y = 365 * 4 + 1

#: Number of days guaranteed to be in a hundred years.
DAYS_IN_100Y = 365 * 100 + 24

#: Number of days guaranteed to be in four hundred years.
DAYS_IN_400Y = 365 * 400 + 97

#: Number of days between 1 January 1970 and 1 March 2000:
#: thirty years, seven leap days, and January and February of 2000.
EPOCH_DIFFERENCE = 30 * 365 + 7 + 31 + 29

# Days from 1970-01-01 to 2000-01-01, plus the 2000 leap day which
# the elapsed-leap-day count of a year leaves out.
_DAYS_UNTIL_2000 = 10_958

# Days elapsed at the end of each month, counting from the start of March
# and going backwards from the following January. February is absent:
# whatever doesn't fit in this table is in it.
_TIME_TRIANGLE = (
    31 + 30 + 31 + 30 + 31 + 31 + 30 + 31 + 30 + 31 + 31,  # January
    31 + 30 + 31 + 30 + 31 + 31 + 30 + 31 + 30 + 31,  # December
    31 + 30 + 31 + 30 + 31 + 31 + 30 + 31 + 30,  # November
    31 + 30 + 31 + 30 + 31 + 31 + 30 + 31,  # October
    31 + 30 + 31 + 30 + 31 + 31 + 30,  # September
    31 + 30 + 31 + 30 + 31 + 31,  # August
    31 + 30 + 31 + 30 + 31,  # July
    31 + 30 + 31 + 30,  # June
    31 + 30 + 31,  # May
    31 + 30,  # April
    31,  # March
)

_DAYS_IN_MONTH = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)
_DAYS_BEFORE_MONTH = (0, 31, 59, 90, 120, 151, 181, 212, 243, 273, 304, 334)


class OutOfRange(ValueError):
    """A calendar field, time field, or offset is outside its valid range"""

    @staticmethod
    def for_field(name: str, value: object) -> OutOfRange:
        return OutOfRange(f"{name} out of range: {value!r}")

    @staticmethod
    def for_date(year: int, month: int, day: int) -> OutOfRange:
        return OutOfRange(
            f"{year}-{int(month):02}-{day:02} is not a valid date"
        )

    @staticmethod
    def for_time(
        hour: int, minute: int, second: int, millisecond: int
    ) -> OutOfRange:
        return OutOfRange(
            f"{hour:02}:{minute:02}:{second:02}.{millisecond:03} "
            "is not a valid time"
        )


class SignMismatch(ValueError):
    """The hours and minutes of an offset have different signs"""


class InvalidTimespans(ValueError):
    """A table of timespans breaks the rules of a valid time zone"""

    @staticmethod
    def not_ascending(previous: int, transition: int) -> InvalidTimespans:
        return InvalidTimespans(
            f"transition at {transition} does not come after {previous}"
        )

    @staticmethod
    def same_offset(transition: int, offset: int) -> InvalidTimespans:
        return InvalidTimespans(
            f"transition at {transition} keeps the offset of {offset}s: "
            "adjacent timespans must have different offsets"
        )

    @staticmethod
    def offset_out_of_range(timespan: FixedTimespan) -> InvalidTimespans:
        return InvalidTimespans(
            f"timespan {timespan.name!r} has an offset of {timespan.offset}s, "
            "which is a day or more from UTC"
        )


class AmbiguousTime(Exception):
    """A local time occurs twice in a time zone, e.g. because of DST"""

    @staticmethod
    def for_zone(local: LocalDateTime, zone: TimeZone) -> AmbiguousTime:
        return AmbiguousTime(f"{local} is ambiguous in {zone.describe()}")


class DoesntExistInZone(Exception):
    """A local time doesn't exist in a time zone, e.g. because of DST"""

    @staticmethod
    def for_zone(local: LocalDateTime, zone: TimeZone) -> DoesntExistInZone:
        return DoesntExistInZone(
            f"{local} doesn't exist in {zone.describe()}"
        )


class _ImmutableBase:
    __slots__ = ()

    # Immutable classes don't need to be copied
    @no_type_check
    def __copy__(self):
        return self

    @no_type_check
    def __deepcopy__(self, _):
        return self


class Month(enum.IntEnum):
    """A month of the year. The value is 1 for January, up to 12 for
    December, so months compare by their position in the calendar.

    Example
    -------

    >>> Month.FEBRUARY.days_in_month(leap_year=True)
    29
    >>> Month.MARCH > Month.FEBRUARY
    True

    """

    JANUARY = 1
    FEBRUARY = 2
    MARCH = 3
    APRIL = 4
    MAY = 5
    JUNE = 6
    JULY = 7
    AUGUST = 8
    SEPTEMBER = 9
    OCTOBER = 10
    NOVEMBER = 11
    DECEMBER = 12

    def days_in_month(self, leap_year: bool) -> int:
        """The number of days in this month, depending on whether
        it's a leap year or not."""
        if self is Month.FEBRUARY and leap_year:
            return 29
        return _DAYS_IN_MONTH[self - 1]

    def days_before_start(self) -> int:
        """The number of days elapsed in a year *before* this month begins,
        with no leap year check."""
        return _DAYS_BEFORE_MONTH[self - 1]

    def months_from_january(self) -> int:
        return self - 1

    @classmethod
    def from_one(cls, month: int) -> Month:
        """The month based on a number, with January as month 1.

        Example
        -------

        >>> Month.from_one(5)
        <Month.MAY: 5>

        Raises
        ------
        OutOfRange
            If the number isn't in the range 1-12.
        """
        if not 1 <= month <= 12:
            raise OutOfRange.for_field("month", month)
        return cls(month)

    @classmethod
    def from_zero(cls, month: int) -> Month:
        """The month based on a number, with January as month 0.

        Example
        -------

        >>> Month.from_zero(5)
        <Month.JUNE: 6>
        """
        if not 0 <= month <= 11:
            raise OutOfRange.for_field("month", month)
        return cls(month + 1)


class Weekday(enum.Enum):
    """The days of the week; ``.value`` corresponds with ISO numbering.

    Weekdays deliberately have no ordering: there's no agreement on
    whether the week starts on Sunday or Monday.
    """

    MONDAY = 1
    TUESDAY = 2
    WEDNESDAY = 3
    THURSDAY = 4
    FRIDAY = 5
    SATURDAY = 6
    SUNDAY = 7

    def days_from_monday_as_one(self) -> int:
        return self.value

    @classmethod
    def from_zero(cls, weekday: int) -> Weekday:
        """The weekday based on a number, with Sunday as day 0,
        Monday as day 1, and so on.

        Example
        -------

        >>> Weekday.from_zero(4)
        <Weekday.THURSDAY: 4>
        >>> Weekday.from_zero(0)
        <Weekday.SUNDAY: 7>
        """
        if not 0 <= weekday <= 6:
            raise OutOfRange.for_field("weekday", weekday)
        return cls(weekday or 7)

    @classmethod
    def from_one(cls, weekday: int) -> Weekday:
        """The weekday based on a number, with Monday as day 1
        and Sunday as day 7."""
        if not 1 <= weekday <= 7:
            raise OutOfRange.for_field("weekday", weekday)
        return cls(weekday)


MONDAY = Weekday.MONDAY
TUESDAY = Weekday.TUESDAY
WEDNESDAY = Weekday.WEDNESDAY
THURSDAY = Weekday.THURSDAY
FRIDAY = Weekday.FRIDAY
SATURDAY = Weekday.SATURDAY
SUNDAY = Weekday.SUNDAY


class Year(_ImmutableBase):
    """A single year of the proleptic Gregorian calendar.

    Example
    -------

    >>> Year(2000).is_leap_year()
    True
    >>> Year(1900).is_leap_year()
    False
    >>> [ym.month for ym in Year(1999).months(Month.APRIL, Month.JUNE)]
    [<Month.APRIL: 4>, <Month.MAY: 5>]

    """

    __slots__ = ("_value",)

    def __init__(self, value: int) -> None:
        self._value = value

    @property
    def value(self) -> int:
        return self._value

    def __int__(self) -> int:
        return self._value

    def is_leap_year(self) -> bool:
        return self._leap_year_calculations()[1]

    def days_in_year(self) -> int:
        return 366 if self.is_leap_year() else 365

    def month(self, month: int) -> YearMonth:
        """Pair this year with the given month"""
        return YearMonth(self, month)

    def months(
        self, start: int | None = None, stop: int | None = None
    ) -> Iterator[YearMonth]:
        """Iterate over the months of this year, from ``start`` up to
        *but not including* ``stop``. Leaving out either bound runs to
        the respective end of the year.

        Example
        -------

        >>> len(list(Year(1999).months()))
        12
        >>> len(list(Year(1999).months(Month.APRIL)))
        9
        >>> len(list(Year(1999).months(stop=Month.JUNE)))
        5
        """
        first = Month.JANUARY if start is None else Month.from_one(start)
        if stop is None:
            last = 13
        elif 1 <= stop <= 13:
            last = stop
        else:
            raise OutOfRange.for_field("month", stop)
        return (YearMonth(self, m) for m in range(first, last))

    def _leap_year_calculations(self) -> Tuple[int, bool]:
        """Two related leap-year facts, computed once:

        1. The number of leap days elapsed between 2000 and the start of
           this year, not counting the one in 2000 itself.
        2. Whether this year is a leap year.
        """
        num_400y_cycles, remainder = divmod(self._value - 2000, 400)

        # standard leap-year rule, applied to the remainder
        is_leap_year = remainder == 0 or (
            remainder % 100 != 0 and remainder % 4 == 0
        )

        num_100y_cycles, remainder = divmod(remainder, 100)

        leap_years_elapsed = (
            remainder // 4
            + 97 * num_400y_cycles  # 97 leap years in 400 years
            + 24 * num_100y_cycles  # 24 leap years in 100 years
            - (1 if is_leap_year else 0)
        )
        return leap_years_elapsed, is_leap_year

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Year):
            return NotImplemented
        return self._value == other._value

    def __hash__(self) -> int:
        return hash(self._value)

    def __repr__(self) -> str:
        return f"Year({self._value})"


class YearMonth(_ImmutableBase):
    """A month of a particular year. Since the year is known,
    so is the number of days in the month.

    Example
    -------

    >>> Year(2000).month(Month.FEBRUARY).day_count()
    29
    >>> Year(1900).month(Month.FEBRUARY).day_count()
    28

    """

    __slots__ = ("_year", "_month")

    def __init__(self, year: Year | int, month: int) -> None:
        self._year = year if isinstance(year, Year) else Year(year)
        self._month = Month.from_one(month)

    @property
    def year(self) -> Year:
        return self._year

    @property
    def month(self) -> Month:
        return self._month

    def day_count(self) -> int:
        return self._month.days_in_month(self._year.is_leap_year())

    def day(self, day: int) -> LocalDate:
        """The date of the given day in this month. A shortcut for
        the :class:`LocalDate` constructor."""
        return LocalDate(self._year.value, self._month, day)

    def days(
        self, start: int | None = None, stop: int | None = None
    ) -> Iterator[LocalDate]:
        """Iterate over the dates of this month, from day ``start`` up to
        *but not including* day ``stop``.

        Example
        -------

        >>> ym = Year(1999).month(Month.SEPTEMBER)
        >>> len(list(ym.days()))
        30
        >>> len(list(ym.days(10, 20)))
        10

        Raises
        ------
        OutOfRange
            If the span reaches outside the month.
        """
        first = 1 if start is None else start
        last = self.day_count() + 1 if stop is None else stop
        if not 1 <= first <= last <= self.day_count() + 1:
            raise OutOfRange.for_field("day span", (first, last))
        return (self.day(d) for d in range(first, last))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, YearMonth):
            return NotImplemented
        return (self._year, self._month) == (other._year, other._month)

    def __hash__(self) -> int:
        return hash((self._year, self._month))

    def __repr__(self) -> str:
        return f"YearMonth({self._year.value}-{self._month:02})"


class _YMD(NamedTuple):
    # Unchecked year-month-day triple: it can hold the 30th of February.
    # Validity and the leap-year math happen in one go, when it's converted.
    year: int
    month: Month
    day: int

    def to_days_since_epoch(self) -> int:
        """Days since 1 January 1970 of this date. Raises
        :class:`OutOfRange` if the day doesn't exist in the month."""
        leap_days_elapsed, is_leap_year = Year(
            self.year
        )._leap_year_calculations()

        if not self.is_valid(is_leap_year):
            raise OutOfRange.for_date(self.year, self.month, self.day)

        return (
            (self.year - 2000) * 365
            + _DAYS_UNTIL_2000
            + leap_days_elapsed
            + self.month.days_before_start()
            # the leap day of this year, if it's already behind us
            + (1 if is_leap_year and self.month >= Month.MARCH else 0)
            + self.day
            - 1
        )

    def is_valid(self, is_leap_year: bool) -> bool:
        return 1 <= self.day <= self.month.days_in_month(is_leap_year)


def _days_to_weekday(days: int) -> Weekday:
    # March 1st, 2000 was a Wednesday
    return Weekday.from_zero((days + 3) % 7)


def _civil_from_days(days: int) -> Tuple[_YMD, int, Weekday]:
    # Gregorian dates repeat every 400 years. Find the number of 400-year,
    # 100-year and 4-year cycles, and whittle down the leftover days.
    num_400y_cycles, remainder = divmod(days, DAYS_IN_400Y)

    # At most 3: the last day of a 400-year cycle is the leap day
    # which ends its fourth century.
    num_100y_cycles = min(remainder // DAYS_IN_100Y, 3)
    remainder -= num_100y_cycles * DAYS_IN_100Y

    num_4y_cycles = remainder // DAYS_IN_4Y
    remainder -= num_4y_cycles * DAYS_IN_4Y

    # At most 3, for the same reason: day 1460 is a leap day.
    years = min(remainder // 365, 3)
    remainder -= years * 365

    # The counters already say which multiples we're at: the year holding
    # this March is a leap year if it starts a 4-year cycle, unless it
    # starts a century that doesn't also start a 400-year cycle.
    days_this_year = (
        366
        if years == 0 and not (num_4y_cycles == 0 and num_100y_cycles != 0)
        else 365
    )

    # 306 is the number of days from March to December
    day_of_year = remainder + days_this_year - 306
    if day_of_year >= days_this_year:
        day_of_year -= days_this_year  # January and February

    years += 4 * num_4y_cycles + 100 * num_100y_cycles + 400 * num_400y_cycles

    for index, elapsed in enumerate(_TIME_TRIANGLE):
        if elapsed <= remainder:
            month, month_days = 11 - index, remainder - elapsed
            break
    else:
        month, month_days = 0, remainder  # still March

    # month 0 is March here: shift to January-based, wrapping the year
    month += 2
    if month >= 12:
        years += 1
        month -= 12

    return (
        _YMD(years + 2000, Month.from_zero(month), month_days + 1),
        day_of_year + 1,
        _days_to_weekday(days),
    )


class _DatePiece(_ImmutableBase):
    __slots__ = ()

    if TYPE_CHECKING:

        @property
        def year(self) -> int: ...

    @property
    def year_of_century(self) -> int:
        """The last two digits of the year, carrying the sign of the year"""
        return self.year % 100 if self.year >= 0 else -(-self.year % 100)

    @property
    def years_from_2000(self) -> int:
        """The year number, relative to the year 2000"""
        return self.year - 2000


class LocalDate(_DatePiece):
    """A date without a time component or a time zone.

    The values are checked for validity on construction.

    Example
    -------

    >>> d = LocalDate(1969, Month.JULY, 20)
    LocalDate(1969-07-20)
    >>> d.weekday
    <Weekday.SUNDAY: 7>
    >>> LocalDate(2100, 2, 29)
    Traceback (most recent call last):
      ...
    wallclock.OutOfRange: 2100-02-29 is not a valid date

    """

    __slots__ = ("_ymd", "_yearday", "_weekday")

    def __init__(self, year: int, month: int, day: int) -> None:
        days = _YMD(year, Month.from_one(month), day).to_days_since_epoch()
        self._ymd, self._yearday, self._weekday = _civil_from_days(
            days - EPOCH_DIFFERENCE
        )

    @classmethod
    def from_year_month_day(cls, year: int, month: int, day: int) -> LocalDate:
        """Create from year, month and day. Same as the constructor."""
        return cls(year, month, day)

    @classmethod
    def from_year_day_of_year(cls, year: int, yearday: int) -> LocalDate:
        """Create from a year and a day of that year, starting at 1.

        Example
        -------

        >>> LocalDate.from_year_day_of_year(2015, 0x100)
        LocalDate(2015-09-13)
        >>> LocalDate.from_year_day_of_year(2016, 0x100)
        LocalDate(2016-09-12)

        Raises
        ------
        OutOfRange
            If the year doesn't have that many days.
        """
        if not 1 <= yearday <= Year(year).days_in_year():
            raise OutOfRange.for_field("day of year", yearday)
        jan_1 = _YMD(year, Month.JANUARY, 1).to_days_since_epoch()
        return cls._from_days_since_epoch(
            jan_1 + yearday - 1 - EPOCH_DIFFERENCE
        )

    @classmethod
    def from_year_week_weekday(
        cls, year: int, week: int, weekday: Weekday | int
    ) -> LocalDate:
        """Create from an ISO 8601 week date.

        Weekdays given as a number use ISO numbering, with Monday as 1.

        Example
        -------

        >>> LocalDate.from_year_week_weekday(2015, 37, FRIDAY)
        LocalDate(2015-09-11)

        Note
        ----
        Week years don't line up with calendar years: early in week 1 and
        late in week 53, the date falls in the adjacent year.

        >>> LocalDate.from_year_week_weekday(2009, 1, MONDAY)
        LocalDate(2008-12-29)
        >>> LocalDate.from_year_week_weekday(2009, 53, SUNDAY)
        LocalDate(2010-01-03)

        Raises
        ------
        OutOfRange
            If the week year doesn't have the given week.
        """
        if not isinstance(weekday, Weekday):
            weekday = Weekday.from_one(weekday)

        jan_4 = _YMD(year, Month.JANUARY, 4).to_days_since_epoch()
        jan_4_weekday = _days_to_weekday(jan_4 - EPOCH_DIFFERENCE)

        if not 1 <= week <= _weeks_in_week_year(year, jan_4_weekday):
            raise OutOfRange.for_field("week", week)

        correction = jan_4_weekday.days_from_monday_as_one() + 3
        yearday = 7 * week + weekday.days_from_monday_as_one() - correction

        if yearday <= 0:
            return cls.from_year_day_of_year(
                year - 1, Year(year - 1).days_in_year() + yearday
            )
        days_in_year = Year(year).days_in_year()
        if yearday > days_in_year:
            return cls.from_year_day_of_year(year + 1, yearday - days_in_year)
        return cls.from_year_day_of_year(year, yearday)

    @classmethod
    def today(cls) -> LocalDate:
        """The current date in UTC"""
        return LocalDateTime.now().date

    @classmethod
    def _from_days_since_epoch(cls, days: int) -> LocalDate:
        # days since 1 March 2000
        self = _object_new(cls)
        self._ymd, self._yearday, self._weekday = _civil_from_days(days)
        return self

    @classmethod
    def _new_unchecked(
        cls,
        year: int,
        month: Month,
        day: int,
        weekday: Weekday,
        yearday: int,
    ) -> LocalDate:
        """Create a date from prefilled values.

        Warning
        -------
        **Nothing is checked.** The day may not exist in the month, and the
        weekday and yearday may be out of step with the date. Only use this
        for values already known to be valid.
        """
        self = _object_new(cls)
        self._ymd = _YMD(year, month, day)
        self._weekday = weekday
        self._yearday = yearday
        return self

    if TYPE_CHECKING:

        @property
        def year(self) -> int: ...

        @property
        def month(self) -> Month: ...

        @property
        def day(self) -> int: ...

    else:
        year = property(attrgetter("_ymd.year"))
        month = property(attrgetter("_ymd.month"))
        day = property(attrgetter("_ymd.day"))

    @property
    def yearday(self) -> int:
        """The day of the year, from 1 to 366"""
        return self._yearday

    @property
    def weekday(self) -> Weekday:
        return self._weekday

    def days_since_epoch(self) -> int:
        """The number of days since 1 January 1970

        Example
        -------

        >>> LocalDate(1970, 1, 2).days_since_epoch()
        1
        """
        return self._ymd.to_days_since_epoch()

    def canonical_format(self) -> str:
        """The date in ISO 8601 format. Years outside 0-9999 get a sign.

        Example
        -------

        >>> LocalDate(2021, 1, 2).canonical_format()
        '2021-01-02'
        >>> LocalDate(-753, 12, 1).canonical_format()
        '-0753-12-01'
        """
        year, month, day = self._ymd
        if 0 <= year <= 9999:
            return f"{year:04}-{month:02}-{day:02}"
        return f"{year:+05}-{month:02}-{day:02}"

    __str__ = canonical_format

    def __repr__(self) -> str:
        return f"LocalDate({self})"

    # The yearday and weekday follow from the date, so they're left out
    # of comparisons and hashing.
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LocalDate):
            return NotImplemented
        return self._ymd == other._ymd

    def __hash__(self) -> int:
        return hash(self._ymd)

    def __lt__(self, other: LocalDate) -> bool:
        if not isinstance(other, LocalDate):
            return NotImplemented
        return self._ymd < other._ymd

    def __le__(self, other: LocalDate) -> bool:
        if not isinstance(other, LocalDate):
            return NotImplemented
        return self._ymd <= other._ymd

    def __gt__(self, other: LocalDate) -> bool:
        if not isinstance(other, LocalDate):
            return NotImplemented
        return self._ymd > other._ymd

    def __ge__(self, other: LocalDate) -> bool:
        if not isinstance(other, LocalDate):
            return NotImplemented
        return self._ymd >= other._ymd


def _weeks_in_week_year(year: int, jan_4_weekday: Weekday) -> int:
    # 53 weeks if the year starts on a Thursday, or on a Wednesday
    # in a leap year.
    if jan_4_weekday is SUNDAY or (
        jan_4_weekday is SATURDAY and Year(year).is_leap_year()
    ):
        return 53
    return 52


class LocalTime(_ImmutableBase):
    """A time of day, without a date or time zone, with
    millisecond precision.

    ``24:00:00.000`` is allowed as well, to mark the end of a day.

    Example
    -------

    >>> LocalTime(23, 31, 30)
    LocalTime(23:31:30.000)
    >>> LocalTime(24)
    LocalTime(24:00:00.000)

    """

    __slots__ = ("_hour", "_minute", "_second", "_millisecond")

    def __init__(
        self,
        hour: int,
        minute: int = 0,
        second: int = 0,
        millisecond: int = 0,
    ) -> None:
        if not (
            (
                0 <= hour < 24
                and 0 <= minute < 60
                and 0 <= second < 60
                and 0 <= millisecond < 1000
            )
            or (hour == 24 and minute == second == millisecond == 0)
        ):
            raise OutOfRange.for_time(hour, minute, second, millisecond)
        self._hour = hour
        self._minute = minute
        self._second = second
        self._millisecond = millisecond

    @classmethod
    def from_hour_minute(cls, hour: int, minute: int) -> LocalTime:
        return cls(hour, minute)

    @classmethod
    def from_hour_minute_second(
        cls, hour: int, minute: int, second: int
    ) -> LocalTime:
        return cls(hour, minute, second)

    @classmethod
    def from_hour_minute_second_millisecond(
        cls, hour: int, minute: int, second: int, millisecond: int
    ) -> LocalTime:
        return cls(hour, minute, second, millisecond)

    @classmethod
    def from_seconds_since_midnight(
        cls, seconds: int, millisecond: int = 0
    ) -> LocalTime:
        """Create from the number of seconds elapsed since midnight

        Example
        -------

        >>> LocalTime.from_seconds_since_midnight(3_723)
        LocalTime(01:02:03.000)
        """
        return cls(
            seconds // 3600, seconds // 60 % 60, seconds % 60, millisecond
        )

    @classmethod
    def midnight(cls) -> LocalTime:
        return cls(0)

    @property
    def hour(self) -> int:
        return self._hour

    @property
    def minute(self) -> int:
        return self._minute

    @property
    def second(self) -> int:
        return self._second

    @property
    def millisecond(self) -> int:
        return self._millisecond

    def to_seconds(self) -> int:
        """The number of seconds since midnight, ignoring milliseconds"""
        return self._hour * 3600 + self._minute * 60 + self._second

    def canonical_format(self) -> str:
        return (
            f"{self._hour:02}:{self._minute:02}:{self._second:02}"
            f".{self._millisecond:03}"
        )

    __str__ = canonical_format

    def __repr__(self) -> str:
        return f"LocalTime({self})"

    def _as_tuple(self) -> Tuple[int, int, int, int]:
        return (self._hour, self._minute, self._second, self._millisecond)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LocalTime):
            return NotImplemented
        return self._as_tuple() == other._as_tuple()

    def __hash__(self) -> int:
        return hash(self._as_tuple())

    def __lt__(self, other: LocalTime) -> bool:
        if not isinstance(other, LocalTime):
            return NotImplemented
        return self._as_tuple() < other._as_tuple()

    def __le__(self, other: LocalTime) -> bool:
        if not isinstance(other, LocalTime):
            return NotImplemented
        return self._as_tuple() <= other._as_tuple()

    def __gt__(self, other: LocalTime) -> bool:
        if not isinstance(other, LocalTime):
            return NotImplemented
        return self._as_tuple() > other._as_tuple()

    def __ge__(self, other: LocalTime) -> bool:
        if not isinstance(other, LocalTime):
            return NotImplemented
        return self._as_tuple() >= other._as_tuple()


class LocalDateTime(_DatePiece):
    """A date and time on the wall clock, *without* a time zone.

    Example
    -------

    >>> LocalDateTime.at(1_000_000_000)
    LocalDateTime(2001-09-09T01:46:40.000)
    >>> dt = LocalDateTime(LocalDate(2009, 2, 13), LocalTime(23, 31, 30))
    >>> dt.to_instant()
    Instant(1234567890s/0ms)

    """

    __slots__ = ("_date", "_time")

    def __init__(self, date: LocalDate, time: LocalTime) -> None:
        self._date = date
        self._time = time

    @classmethod
    def at(cls, seconds: int) -> LocalDateTime:
        """The date and time a number of seconds after
        midnight, 1 January 1970"""
        return cls.at_ms(seconds, 0)

    @classmethod
    def at_ms(cls, seconds: int, millisecond: int) -> LocalDateTime:
        """The date and time a number of seconds (and milliseconds
        into the next second) after midnight, 1 January 1970"""
        days, secs = divmod(
            seconds - EPOCH_DIFFERENCE * SECONDS_IN_DAY, SECONDS_IN_DAY
        )
        return cls(
            LocalDate._from_days_since_epoch(days),
            LocalTime.from_seconds_since_midnight(secs, millisecond),
        )

    @classmethod
    def from_instant(cls, instant: Instant) -> LocalDateTime:
        return cls.at_ms(instant.seconds, instant.milliseconds)

    @classmethod
    def now(cls) -> LocalDateTime:
        """The current date and time in UTC"""
        return cls.from_instant(Instant.now())

    @property
    def date(self) -> LocalDate:
        return self._date

    @property
    def time(self) -> LocalTime:
        return self._time

    if TYPE_CHECKING:

        @property
        def year(self) -> int: ...

        @property
        def month(self) -> Month: ...

        @property
        def day(self) -> int: ...

        @property
        def yearday(self) -> int: ...

        @property
        def weekday(self) -> Weekday: ...

        @property
        def hour(self) -> int: ...

        @property
        def minute(self) -> int: ...

        @property
        def second(self) -> int: ...

        @property
        def millisecond(self) -> int: ...

    else:
        # Defining properties this way is faster than declaring a `def`,
        # but the type checker doesn't like it.
        year = property(attrgetter("_date.year"))
        month = property(attrgetter("_date.month"))
        day = property(attrgetter("_date.day"))
        yearday = property(attrgetter("_date.yearday"))
        weekday = property(attrgetter("_date.weekday"))
        hour = property(attrgetter("_time.hour"))
        minute = property(attrgetter("_time.minute"))
        second = property(attrgetter("_time.second"))
        millisecond = property(attrgetter("_time.millisecond"))

    def to_instant(self) -> Instant:
        """The instant this date and time would be in UTC"""
        return Instant.at_ms(
            self._date.days_since_epoch() * SECONDS_IN_DAY
            + self._time.to_seconds(),
            self._time.millisecond,
        )

    def add_seconds(self, seconds: int) -> LocalDateTime:
        return self + Duration.of(seconds)

    def __add__(self, other: Duration) -> LocalDateTime:
        """Shift by a duration of exact time

        Example
        -------

        >>> LocalDateTime.at(10_000) + Duration.of(1)
        LocalDateTime(1970-01-01T02:46:41.000)
        """
        if not isinstance(other, Duration):
            return NotImplemented
        return LocalDateTime.from_instant(self.to_instant() + other)

    def __sub__(self, other: Duration) -> LocalDateTime:
        if not isinstance(other, Duration):
            return NotImplemented
        return LocalDateTime.from_instant(self.to_instant() - other)

    def canonical_format(self) -> str:
        return f"{self._date}T{self._time}"

    __str__ = canonical_format

    def __repr__(self) -> str:
        return f"LocalDateTime({self})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LocalDateTime):
            return NotImplemented
        return (self._date, self._time) == (other._date, other._time)

    def __hash__(self) -> int:
        return hash((self._date, self._time))

    def __lt__(self, other: LocalDateTime) -> bool:
        if not isinstance(other, LocalDateTime):
            return NotImplemented
        return (self._date, self._time) < (other._date, other._time)

    def __le__(self, other: LocalDateTime) -> bool:
        if not isinstance(other, LocalDateTime):
            return NotImplemented
        return (self._date, self._time) <= (other._date, other._time)

    def __gt__(self, other: LocalDateTime) -> bool:
        if not isinstance(other, LocalDateTime):
            return NotImplemented
        return (self._date, self._time) > (other._date, other._time)

    def __ge__(self, other: LocalDateTime) -> bool:
        if not isinstance(other, LocalDateTime):
            return NotImplemented
        return (self._date, self._time) >= (other._date, other._time)


class Duration(_ImmutableBase):
    """A length of time on the timeline, irrespective of time zone or
    calendar, with millisecond precision.

    The inputs are normalized, so the millisecond part is always
    between 0 and 999, with any excess carried into the seconds.

    Example
    -------

    >>> d = Duration(seconds=1, milliseconds=1_500)
    Duration(2.500s)
    >>> d.lengths()
    (2, 500)
    >>> Duration(milliseconds=-1).lengths()
    (-1, 999)

    """

    __slots__ = ("_seconds", "_milliseconds")

    def __init__(self, *, seconds: int = 0, milliseconds: int = 0) -> None:
        carry, self._milliseconds = divmod(milliseconds, 1000)
        self._seconds = seconds + carry

    ZERO: ClassVar[Duration]
    """A duration of zero"""

    @classmethod
    def of(cls, seconds: int) -> Duration:
        """A duration of the given number of seconds"""
        return cls(seconds=seconds)

    @classmethod
    def of_ms(cls, seconds: int, milliseconds: int) -> Duration:
        """A duration of the given number of seconds and milliseconds.

        Raises
        ------
        OutOfRange
            If the milliseconds aren't in the range 0-999.
        """
        if not 0 <= milliseconds <= 999:
            raise OutOfRange.for_field("milliseconds", milliseconds)
        return cls(seconds=seconds, milliseconds=milliseconds)

    def lengths(self) -> Tuple[int, int]:
        """The seconds and milliseconds portions of the duration.

        Note
        ----
        These come as a pair to make clear that the milliseconds
        are only a portion of the duration, not its total length.
        """
        return (self._seconds, self._milliseconds)

    def in_milliseconds(self) -> int:
        """The total duration in milliseconds

        >>> Duration.of_ms(2, 50).in_milliseconds()
        2050
        """
        return self._seconds * 1000 + self._milliseconds

    def in_seconds(self) -> float:
        return self.in_milliseconds() / 1000

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Duration):
            return NotImplemented
        return self.lengths() == other.lengths()

    def __hash__(self) -> int:
        return hash(self.lengths())

    def __lt__(self, other: Duration) -> bool:
        if not isinstance(other, Duration):
            return NotImplemented
        return self.lengths() < other.lengths()

    def __le__(self, other: Duration) -> bool:
        if not isinstance(other, Duration):
            return NotImplemented
        return self.lengths() <= other.lengths()

    def __gt__(self, other: Duration) -> bool:
        if not isinstance(other, Duration):
            return NotImplemented
        return self.lengths() > other.lengths()

    def __ge__(self, other: Duration) -> bool:
        if not isinstance(other, Duration):
            return NotImplemented
        return self.lengths() >= other.lengths()

    def __bool__(self) -> bool:
        """True if the duration is non-zero

        Example
        -------

        >>> bool(Duration())
        False
        >>> bool(Duration(milliseconds=1))
        True

        """
        return bool(self._seconds or self._milliseconds)

    def __add__(self, other: Duration) -> Duration:
        """Add two durations together

        Example
        -------

        >>> Duration.of_ms(0, 750) + Duration.of_ms(0, 750)
        Duration(1.500s)

        """
        if not isinstance(other, Duration):
            return NotImplemented
        return Duration(
            seconds=self._seconds + other._seconds,
            milliseconds=self._milliseconds + other._milliseconds,
        )

    def __sub__(self, other: Duration) -> Duration:
        """Subtract two durations

        Example
        -------

        >>> Duration.of_ms(1, 500) - Duration.of_ms(0, 750)
        Duration(0.750s)

        """
        if not isinstance(other, Duration):
            return NotImplemented
        return Duration(
            seconds=self._seconds - other._seconds,
            milliseconds=self._milliseconds - other._milliseconds,
        )

    def __mul__(self, other: int) -> Duration:
        """Multiply by a whole number

        Example
        -------

        >>> Duration.of_ms(0, 500) * 3
        Duration(1.500s)

        """
        if not isinstance(other, int):
            return NotImplemented
        return Duration(
            seconds=self._seconds * other,
            milliseconds=self._milliseconds * other,
        )

    __rmul__ = __mul__

    def __neg__(self) -> Duration:
        return Duration(
            seconds=-self._seconds, milliseconds=-self._milliseconds
        )

    def __abs__(self) -> Duration:
        return -self if self._seconds < 0 else self

    def canonical_format(self) -> str:
        """The duration in seconds, with the milliseconds as a fraction.

        Example
        -------

        >>> Duration(milliseconds=-1_500).canonical_format()
        '-1.500s'
        """
        secs, ms = divmod(abs(self.in_milliseconds()), 1000)
        return f"{'-' * (self._seconds < 0)}{secs}.{ms:03}s"

    __str__ = canonical_format

    def __repr__(self) -> str:
        return f"Duration({self})"


Duration.ZERO = Duration()


class Instant(_ImmutableBase):
    """An exact point on the timeline, irrespective of time zone or
    calendar, with millisecond precision.

    Example
    -------

    >>> Instant.at(1_000_000_000) + Duration.of_ms(0, 500)
    Instant(1000000000s/500ms)

    """

    __slots__ = ("_seconds", "_milliseconds")

    def __init__(self, seconds: int, milliseconds: int = 0) -> None:
        if not 0 <= milliseconds <= 999:
            raise OutOfRange.for_field("milliseconds", milliseconds)
        self._seconds = seconds
        self._milliseconds = milliseconds

    @classmethod
    def at(cls, seconds: int) -> Instant:
        """The instant a number of seconds after the Unix epoch"""
        return cls(seconds)

    @classmethod
    def at_ms(cls, seconds: int, milliseconds: int) -> Instant:
        return cls(seconds, milliseconds)

    @classmethod
    def at_epoch(cls) -> Instant:
        return cls(0)

    @classmethod
    def now(cls) -> Instant:
        """The current time, according to the system clock"""
        seconds, nanos = divmod(time.time_ns(), 1_000_000_000)
        return cls(seconds, nanos // 1_000_000)

    @property
    def seconds(self) -> int:
        return self._seconds

    @property
    def milliseconds(self) -> int:
        return self._milliseconds

    @classmethod
    def _normalized(cls, seconds: int, milliseconds: int) -> Instant:
        carry, ms = divmod(milliseconds, 1000)
        return cls(seconds + carry, ms)

    def __add__(self, other: Duration) -> Instant:
        if not isinstance(other, Duration):
            return NotImplemented
        seconds, milliseconds = other.lengths()
        return self._normalized(
            self._seconds + seconds, self._milliseconds + milliseconds
        )

    def __sub__(self, other: Duration | Instant) -> Instant | Duration:
        """Subtract a duration, or find the duration between two instants

        Example
        -------

        >>> Instant.at(10) - Instant.at_ms(8, 500)
        Duration(1.500s)
        """
        if isinstance(other, Duration):
            seconds, milliseconds = other.lengths()
            return self._normalized(
                self._seconds - seconds, self._milliseconds - milliseconds
            )
        elif isinstance(other, Instant):
            return Duration(
                seconds=self._seconds - other._seconds,
                milliseconds=self._milliseconds - other._milliseconds,
            )
        return NotImplemented

    def _as_tuple(self) -> Tuple[int, int]:
        return (self._seconds, self._milliseconds)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Instant):
            return NotImplemented
        return self._as_tuple() == other._as_tuple()

    def __hash__(self) -> int:
        return hash(self._as_tuple())

    def __lt__(self, other: Instant) -> bool:
        if not isinstance(other, Instant):
            return NotImplemented
        return self._as_tuple() < other._as_tuple()

    def __le__(self, other: Instant) -> bool:
        if not isinstance(other, Instant):
            return NotImplemented
        return self._as_tuple() <= other._as_tuple()

    def __gt__(self, other: Instant) -> bool:
        if not isinstance(other, Instant):
            return NotImplemented
        return self._as_tuple() > other._as_tuple()

    def __ge__(self, other: Instant) -> bool:
        if not isinstance(other, Instant):
            return NotImplemented
        return self._as_tuple() >= other._as_tuple()

    def __repr__(self) -> str:
        return f"Instant({self._seconds}s/{self._milliseconds}ms)"


class Offset(_ImmutableBase):
    """A fixed offset from UTC, or UTC itself.

    Example
    -------

    >>> Offset.of_hours_and_minutes(5, 30)
    Offset(+05:30)
    >>> Offset.of_seconds(-25 * 60 - 21)
    Offset(-00:25:21)
    >>> Offset.utc()
    Offset(Z)

    """

    __slots__ = ("_offset_seconds",)

    # None means UTC, which formats differently from a zero offset
    _offset_seconds: Optional[int]

    def __init__(self, seconds: int | None) -> None:
        if seconds is not None and not (
            -SECONDS_IN_DAY < seconds < SECONDS_IN_DAY
        ):
            raise OutOfRange.for_field("offset", seconds)
        self._offset_seconds = seconds

    @classmethod
    def utc(cls) -> Offset:
        return cls(None)

    @classmethod
    def of_seconds(cls, seconds: int) -> Offset:
        """An offset of the given number of seconds.

        Raises
        ------
        OutOfRange
            If the offset is a day or more in either direction.
        """
        return cls(seconds)

    @classmethod
    def of_hours_and_minutes(cls, hours: int, minutes: int) -> Offset:
        """An offset of the given hours and minutes, which must
        have the same sign (or be zero).

        Raises
        ------
        SignMismatch
            If one component is positive and the other negative.
        OutOfRange
            If the hours aren't within ±23, or the minutes within ±59.
        """
        if (hours > 0 and minutes < 0) or (hours < 0 and minutes > 0):
            raise SignMismatch(
                f"hours ({hours}) and minutes ({minutes}) differ in sign"
            )
        if not (-24 < hours < 24 and -60 < minutes < 60):
            raise OutOfRange.for_field("offset", (hours, minutes))
        return cls(hours * 3600 + minutes * 60)

    def is_utc(self) -> bool:
        return self._offset_seconds is None

    def is_negative(self) -> bool:
        return self.total_seconds() < 0

    def total_seconds(self) -> int:
        return self._offset_seconds or 0

    def _components(self) -> Tuple[int, int, int]:
        total = self.total_seconds()
        sign = -1 if total < 0 else 1
        hrs, rem = divmod(abs(total), 3600)
        mins, secs = divmod(rem, 60)
        return (sign * hrs, sign * mins, sign * secs)

    def hours(self) -> int:
        return self._components()[0]

    def minutes(self) -> int:
        return self._components()[1]

    def seconds(self) -> int:
        return self._components()[2]

    def adjust(self, local: LocalDateTime) -> LocalDateTime:
        """Shift a UTC date and time to the wall clock of this offset"""
        if self._offset_seconds is None:
            return local
        return local + Duration.of(self._offset_seconds)

    def transform_date(self, local: LocalDateTime) -> OffsetDateTime:
        """Pair a date and time in UTC with this offset"""
        return OffsetDateTime(local, self)

    def canonical_format(self) -> str:
        if self._offset_seconds is None:
            return "Z"
        hrs, mins, secs = map(abs, self._components())
        sign = "-" if self.is_negative() else "+"
        if mins == secs == 0:
            return f"{sign}{hrs:02}"
        elif secs == 0:
            return f"{sign}{hrs:02}:{mins:02}"
        return f"{sign}{hrs:02}:{mins:02}:{secs:02}"

    __str__ = canonical_format

    def __repr__(self) -> str:
        return f"Offset({self})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Offset):
            return NotImplemented
        return self._offset_seconds == other._offset_seconds

    def __hash__(self) -> int:
        return hash(self._offset_seconds)


class OffsetDateTime(_DatePiece):
    """A date and time with a fixed offset from UTC.

    It holds the date and time in UTC; the fields report the
    wall clock of the offset.

    Example
    -------

    >>> utc = LocalDateTime(LocalDate(2009, 2, 13), LocalTime(23, 31, 30))
    >>> d = Offset.of_hours_and_minutes(1, 0).transform_date(utc)
    OffsetDateTime(2009-02-14T00:31:30.000+01)
    >>> d.day
    14

    """

    __slots__ = ("_local", "_offset", "_adjusted")

    def __init__(self, local: LocalDateTime, offset: Offset) -> None:
        self._local = local
        self._offset = offset
        self._adjusted = offset.adjust(local)

    @property
    def local(self) -> LocalDateTime:
        """The date and time in UTC"""
        return self._local

    @property
    def offset(self) -> Offset:
        return self._offset

    @property
    def adjusted(self) -> LocalDateTime:
        """The date and time on the wall clock"""
        return self._adjusted

    if TYPE_CHECKING:

        @property
        def year(self) -> int: ...

        @property
        def month(self) -> Month: ...

        @property
        def day(self) -> int: ...

        @property
        def yearday(self) -> int: ...

        @property
        def weekday(self) -> Weekday: ...

        @property
        def hour(self) -> int: ...

        @property
        def minute(self) -> int: ...

        @property
        def second(self) -> int: ...

        @property
        def millisecond(self) -> int: ...

    else:
        year = property(attrgetter("_adjusted.year"))
        month = property(attrgetter("_adjusted.month"))
        day = property(attrgetter("_adjusted.day"))
        yearday = property(attrgetter("_adjusted.yearday"))
        weekday = property(attrgetter("_adjusted.weekday"))
        hour = property(attrgetter("_adjusted.hour"))
        minute = property(attrgetter("_adjusted.minute"))
        second = property(attrgetter("_adjusted.second"))
        millisecond = property(attrgetter("_adjusted.millisecond"))

    def to_instant(self) -> Instant:
        return self._local.to_instant()

    def canonical_format(self) -> str:
        return f"{self._adjusted}{self._offset}"

    __str__ = canonical_format

    def __repr__(self) -> str:
        return f"OffsetDateTime({self})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, OffsetDateTime):
            return NotImplemented
        return (self._local, self._offset) == (other._local, other._offset)

    def __hash__(self) -> int:
        return hash((self._local, self._offset))


class FixedTimespan(NamedTuple):
    """An individual timespan with a fixed offset."""

    offset: int
    """The *total* offset from UTC in seconds during this timespan: the
    standard offset plus any daylight-saving offset."""

    is_dst: bool
    """Whether a daylight-saving offset is in effect."""

    name: str
    """The abbreviation in use, such as "GMT" or "PDT". Abbreviations are
    notoriously vague; only use them to refer to a known zone."""


class Surroundings(NamedTuple):
    """The timespan in effect at some instant, with its neighbours."""

    previous: Optional[Tuple[FixedTimespan, int]]
    """The timespan before the current one, and the instant it ended."""

    current: FixedTimespan

    next: Optional[Tuple[int, FixedTimespan]]
    """The instant the next timespan begins, and that timespan."""


class FixedTimespanSet(_ImmutableBase):
    """The history of a time zone: a first timespan, followed by
    transitions into further timespans.

    The first timespan is in effect until the first transition. Transitions
    are Unix timestamps, and must be strictly ascending. Each transition
    must actually change the offset.

    Example
    -------

    >>> spans = FixedTimespanSet(
    ...     FixedTimespan(0, False, "GMT"),
    ...     [(1174784400, FixedTimespan(3600, True, "BST"))],
    ... )
    >>> spans.find(1184000000)
    FixedTimespan(offset=3600, is_dst=True, name='BST')

    Raises
    ------
    InvalidTimespans
        If the transitions aren't ascending or don't change the offset,
        or an offset is a day or more from UTC.
    """

    __slots__ = ("_first", "_rest", "_transitions")

    def __init__(
        self,
        first: FixedTimespan,
        rest: Iterable[Tuple[int, FixedTimespan]] = (),
    ) -> None:
        rest = tuple(rest)
        for timespan in (first, *(span for _, span in rest)):
            if not -SECONDS_IN_DAY < timespan.offset < SECONDS_IN_DAY:
                raise InvalidTimespans.offset_out_of_range(timespan)

        previous_time: int | None = None
        previous = first
        for transition_time, timespan in rest:
            if previous_time is not None and transition_time <= previous_time:
                raise InvalidTimespans.not_ascending(
                    previous_time, transition_time
                )
            if timespan.offset == previous.offset:
                raise InvalidTimespans.same_offset(
                    transition_time, timespan.offset
                )
            previous_time, previous = transition_time, timespan

        self._first = first
        self._rest = rest
        self._transitions = tuple(t for t, _ in rest)
        _logger.debug(
            "built timespan set starting with %s, %d transitions",
            first.name,
            len(rest),
        )

    @property
    def first(self) -> FixedTimespan:
        return self._first

    @property
    def rest(self) -> Tuple[Tuple[int, FixedTimespan], ...]:
        return self._rest

    def _position(self, timestamp: int) -> int:
        # index in `rest` of the last transition strictly before the
        # timestamp, or -1 if the first timespan is in effect
        return bisect_left(self._transitions, timestamp) - 1

    def find(self, timestamp: int) -> FixedTimespan:
        """The timespan in effect at the given Unix timestamp.

        At the exact instant of a transition, the old timespan
        is still in effect.
        """
        position = self._position(timestamp)
        return self._first if position < 0 else self._rest[position][1]

    def find_with_surroundings(self, timestamp: int) -> Surroundings:
        """The timespan in effect at the given Unix timestamp, along with
        the timespans (and transitions) immediately before and after it."""
        position = self._position(timestamp)
        if position < 0:
            return Surroundings(
                previous=None,
                current=self._first,
                next=self._rest[0] if self._rest else None,
            )

        transition_time, current = self._rest[position]
        previous = (
            self._first if position == 0 else self._rest[position - 1][1]
        )
        return Surroundings(
            previous=(previous, transition_time),
            current=current,
            next=(
                self._rest[position + 1]
                if position + 1 < len(self._rest)
                else None
            ),
        )

    def offset(self, local: LocalDateTime) -> int:
        """The offset in effect at the given date and time in UTC"""
        return self.find(local.to_instant().seconds).offset

    def name(self, local: LocalDateTime) -> str:
        """The abbreviation in effect at the given date and time in UTC"""
        return self.find(local.to_instant().seconds).name

    def is_fixed(self) -> bool:
        """Whether there are no transitions at all"""
        return not self._rest

    def convert_local(
        self, local: LocalDateTime, zone: TimeZone
    ) -> LocalTimes:
        """Resolve a wall-clock date and time in this zone.

        See :meth:`TimeZone.convert_local`.
        """
        # Pretend the wall clock shows UTC, and look around that instant
        # for transitions close enough to matter.
        unix_timestamp = local.to_instant().seconds
        previous, current, next_ = self.find_with_surroundings(unix_timestamp)

        if previous is not None:
            previous_span, previous_transition = previous
            delta = unix_timestamp - previous_transition

            # in the overlap after the current timespan started,
            # but before the previous one would have ended
            if (
                previous_span.offset > current.offset
                and current.offset <= delta < previous_span.offset
            ):
                return self._ambiguous(
                    local, zone, previous_span.offset, current.offset
                )

            # in the gap after the previous timespan ended,
            # but before the current one would have started
            if (
                previous_span.offset < current.offset
                and previous_span.offset <= delta < current.offset
            ):
                return self._impossible(local, zone)

        if next_ is not None:
            next_transition, next_span = next_
            delta = unix_timestamp - next_transition

            if (
                current.offset > next_span.offset
                and next_span.offset <= delta < current.offset
            ):
                return self._ambiguous(
                    local, zone, current.offset, next_span.offset
                )

            if (
                current.offset < next_span.offset
                and current.offset <= delta < next_span.offset
            ):
                return self._impossible(local, zone)

        return Precise(ZonedDateTime(local, current.offset, zone))

    @staticmethod
    def _ambiguous(
        local: LocalDateTime, zone: TimeZone, earlier: int, later: int
    ) -> Ambiguous:
        _logger.debug("%s is ambiguous in %s", local, zone.describe())
        return Ambiguous(
            earlier=ZonedDateTime(local, earlier, zone),
            later=ZonedDateTime(local, later, zone),
        )

    @staticmethod
    def _impossible(local: LocalDateTime, zone: TimeZone) -> Impossible:
        _logger.debug("%s doesn't exist in %s", local, zone.describe())
        return Impossible(local, zone)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FixedTimespanSet):
            return NotImplemented
        return (self._first, self._rest) == (other._first, other._rest)

    def __hash__(self) -> int:
        return hash((self._first, self._rest))

    def __repr__(self) -> str:
        return (
            f"FixedTimespanSet(first={self._first!r}, "
            f"{len(self._rest)} transitions)"
        )


class TimeZone(_ImmutableBase):
    """A time zone, described by its history of fixed-offset timespans.

    The timespans are never modified, so a zone can be shared freely,
    whether its table was written out in code or decoded at runtime.

    Example
    -------

    >>> london = TimeZone(
    ...     FixedTimespanSet(
    ...         FixedTimespan(0, False, "GMT"),
    ...         [
    ...             (1269738000, FixedTimespan(3600, True, "BST")),
    ...             (1288486800, FixedTimespan(0, False, "GMT")),
    ...         ],
    ...     ),
    ...     name="Europe/London",
    ... )
    >>> summer = LocalDateTime(LocalDate(2010, 6, 9), LocalTime(15, 15))
    >>> london.convert_local(summer)
    Precise(ZonedDateTime(2010-06-09T15:15:00.000+01[Europe/London]))

    """

    __slots__ = ("_timespans", "_name")

    def __init__(
        self, timespans: FixedTimespanSet, name: str | None = None
    ) -> None:
        self._timespans = timespans
        self._name = name

    @classmethod
    def fixed(cls, offset: int, name: str) -> TimeZone:
        """A zone that is always at the same offset from UTC"""
        return cls(FixedTimespanSet(FixedTimespan(offset, False, name)), name)

    @property
    def zone_name(self) -> str | None:
        """The name of this zone in the zoneinfo database,
        such as "America/New_York", if known."""
        return self._name

    @property
    def timespans(self) -> FixedTimespanSet:
        return self._timespans

    def describe(self) -> str:
        return "an unnamed zone" if self._name is None else repr(self._name)

    def offset(self, local: LocalDateTime) -> int:
        """The total offset from UTC, in seconds, at the given
        date and time in UTC"""
        return self._timespans.offset(local)

    def name(self, local: LocalDateTime) -> str:
        """The abbreviation in effect at the given date and time in UTC"""
        return self._timespans.name(local)

    def is_fixed(self) -> bool:
        """Whether this zone is always at the same offset from UTC"""
        return self._timespans.is_fixed()

    def to_zoned(self, local: LocalDateTime) -> LocalDateTime:
        """Shift a date and time in UTC to the wall clock of this zone"""
        return local + Duration.of(self.offset(local))

    def convert_local(self, local: LocalDateTime) -> LocalTimes:
        """Resolve a date and time as shown on a wall clock in this zone.

        Around transitions, a wall clock reading can occur once, twice,
        or not at all, so the result is one of:

        - :class:`Precise`: it occurs exactly once;
        - :class:`Ambiguous`: it occurs twice, because the clocks
          went back;
        - :class:`Impossible`: it's skipped, because the clocks
          went forward.

        These are ordinary results, not errors: match on all three.

        Warning
        -------
        The timespan is looked up by reading the wall clock as if it were
        UTC. In zones away from UTC, a reading within the base offset of a
        transition gets the offset from the other side of it. For example,
        03:00 just after New York springs forward resolves to EST rather
        than EDT.
        """
        return self._timespans.convert_local(local, self)

    def at(self, instant: Instant) -> ZonedDateTime:
        """The wall clock of this zone at the given instant"""
        return ZonedDateTime.from_instant(instant, self)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TimeZone):
            return NotImplemented
        return (self._name, self._timespans) == (other._name, other._timespans)

    def __hash__(self) -> int:
        return hash((self._name, self._timespans))

    def __repr__(self) -> str:
        return f"TimeZone({self._name!r})"


class LocalTimes(_ImmutableBase, ABC):
    """The result of resolving a wall-clock date and time in a zone.

    See :meth:`TimeZone.convert_local`.
    """

    __slots__ = ()

    def is_precise(self) -> bool:
        return isinstance(self, Precise)

    def is_ambiguous(self) -> bool:
        """Whether the wall clock shows this time twice"""
        return isinstance(self, Ambiguous)

    def is_impossible(self) -> bool:
        """Whether the wall clock skips this time"""
        return isinstance(self, Impossible)

    @abstractmethod
    def unwrap_precise(self) -> ZonedDateTime:
        """The precise zoned date and time.

        It's usually better to handle the other outcomes explicitly.

        Raises
        ------
        AmbiguousTime
            If the result is ambiguous.
        DoesntExistInZone
            If the result is impossible.
        """


class Precise(LocalTimes):
    """The wall clock shows this time exactly once"""

    __slots__ = ("_zoned",)

    def __init__(self, zoned: ZonedDateTime) -> None:
        self._zoned = zoned

    @property
    def zoned(self) -> ZonedDateTime:
        return self._zoned

    def unwrap_precise(self) -> ZonedDateTime:
        return self._zoned

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Precise):
            return NotImplemented
        return self._zoned.exact_eq(other._zoned)

    def __hash__(self) -> int:
        return hash(self._zoned)

    def __repr__(self) -> str:
        return f"Precise({self._zoned!r})"


class Ambiguous(LocalTimes):
    """The wall clock shows this time twice: first under the
    larger offset, then again after the clocks went back."""

    __slots__ = ("_earlier", "_later")

    def __init__(self, earlier: ZonedDateTime, later: ZonedDateTime) -> None:
        self._earlier = earlier
        self._later = later

    @property
    def earlier(self) -> ZonedDateTime:
        return self._earlier

    @property
    def later(self) -> ZonedDateTime:
        return self._later

    def unwrap_precise(self) -> ZonedDateTime:
        raise AmbiguousTime.for_zone(
            self._earlier.adjusted, self._earlier.time_zone
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Ambiguous):
            return NotImplemented
        return self._earlier.exact_eq(other._earlier) and self._later.exact_eq(
            other._later
        )

    def __hash__(self) -> int:
        return hash((self._earlier, self._later))

    def __repr__(self) -> str:
        return f"Ambiguous(earlier={self._earlier!r}, later={self._later!r})"


class Impossible(LocalTimes):
    """The wall clock never shows this time: the clocks skipped it"""

    __slots__ = ("_local", "_zone")

    def __init__(self, local: LocalDateTime, zone: TimeZone) -> None:
        self._local = local
        self._zone = zone

    @property
    def local(self) -> LocalDateTime:
        return self._local

    @property
    def zone(self) -> TimeZone:
        return self._zone

    def unwrap_precise(self) -> ZonedDateTime:
        raise DoesntExistInZone.for_zone(self._local, self._zone)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Impossible):
            return NotImplemented
        return (self._local, self._zone) == (other._local, other._zone)

    def __hash__(self) -> int:
        return hash((self._local, self._zone))

    def __repr__(self) -> str:
        return f"Impossible({self._local}, {self._zone!r})"


class ZonedDateTime(_DatePiece):
    """A date and time on the wall clock of a time zone, along with the
    offset under which it's read.

    Create one by resolving a wall clock reading with
    :meth:`TimeZone.convert_local` or :meth:`from_local`, or from an
    instant with :meth:`TimeZone.at`.

    Example
    -------

    >>> zone = TimeZone(
    ...     FixedTimespanSet(
    ...         FixedTimespan(0, False, "GMT"),
    ...         [(1269738000, FixedTimespan(3600, True, "BST"))],
    ...     ),
    ...     name="Europe/London",
    ... )
    >>> d = zone.at(Instant.at(1276096500))
    >>> d.hour, d.offset
    (16, 3600)
    >>> d.to_instant()
    Instant(1276096500s/0ms)

    Disambiguation
    --------------

    The ``disambiguate`` argument of :meth:`from_local` controls
    what happens when the wall clock reading isn't precise:

    +------------------+-------------------------------------------------+
    | ``disambiguate`` | Behavior in case of ambiguity                   |
    +==================+=================================================+
    | ``"raise"``      | (default) Refuse to guess:                      |
    |                  | raise :exc:`~wallclock.AmbiguousTime`.          |
    +------------------+-------------------------------------------------+
    | ``"earlier"``    | Choose the earlier of the two options           |
    +------------------+-------------------------------------------------+
    | ``"later"``      | Choose the later of the two options             |
    +------------------+-------------------------------------------------+

    Times skipped by the wall clock always raise
    :exc:`~wallclock.DoesntExistInZone`.
    """

    __slots__ = ("_adjusted", "_offset", "_time_zone")

    def __init__(
        self, adjusted: LocalDateTime, offset: int, time_zone: TimeZone
    ) -> None:
        self._adjusted = adjusted
        self._offset = offset
        self._time_zone = time_zone

    @classmethod
    def from_instant(cls, instant: Instant, zone: TimeZone) -> ZonedDateTime:
        offset = zone.timespans.find(instant.seconds).offset
        return cls(
            LocalDateTime.from_instant(instant + Duration.of(offset)),
            offset,
            zone,
        )

    @classmethod
    def from_local(
        cls,
        local: LocalDateTime,
        zone: TimeZone,
        disambiguate: Disambiguate = "raise",
    ) -> ZonedDateTime:
        """Resolve a wall clock reading in a zone, choosing one of the
        readings if it's ambiguous.

        Raises
        ------
        AmbiguousTime
            If the time is ambiguous and ``disambiguate="raise"``.
        DoesntExistInZone
            If the wall clock skips this time.
        """
        result = zone.convert_local(local)
        if isinstance(result, Ambiguous) and disambiguate != "raise":
            return (
                result.earlier if disambiguate == "earlier" else result.later
            )
        return result.unwrap_precise()

    @property
    def adjusted(self) -> LocalDateTime:
        """The date and time on the wall clock"""
        return self._adjusted

    @property
    def offset(self) -> int:
        """The offset from UTC in seconds"""
        return self._offset

    @property
    def time_zone(self) -> TimeZone:
        return self._time_zone

    if TYPE_CHECKING:

        @property
        def year(self) -> int: ...

        @property
        def month(self) -> Month: ...

        @property
        def day(self) -> int: ...

        @property
        def yearday(self) -> int: ...

        @property
        def weekday(self) -> Weekday: ...

        @property
        def hour(self) -> int: ...

        @property
        def minute(self) -> int: ...

        @property
        def second(self) -> int: ...

        @property
        def millisecond(self) -> int: ...

    else:
        year = property(attrgetter("_adjusted.year"))
        month = property(attrgetter("_adjusted.month"))
        day = property(attrgetter("_adjusted.day"))
        yearday = property(attrgetter("_adjusted.yearday"))
        weekday = property(attrgetter("_adjusted.weekday"))
        hour = property(attrgetter("_adjusted.hour"))
        minute = property(attrgetter("_adjusted.minute"))
        second = property(attrgetter("_adjusted.second"))
        millisecond = property(attrgetter("_adjusted.millisecond"))

    def to_instant(self) -> Instant:
        return (self._adjusted - Duration.of(self._offset)).to_instant()

    def __add__(self, delta: Duration) -> ZonedDateTime:
        """Add an amount of exact time, accounting for changes
        in offset along the way"""
        if not isinstance(delta, Duration):
            return NotImplemented
        return ZonedDateTime.from_instant(
            self.to_instant() + delta, self._time_zone
        )

    def __sub__(
        self, other: Duration | ZonedDateTime
    ) -> ZonedDateTime | Duration:
        """Subtract a duration, or find the exact time between
        two zoned datetimes"""
        if isinstance(other, Duration):
            return ZonedDateTime.from_instant(
                self.to_instant() - other, self._time_zone
            )
        elif isinstance(other, ZonedDateTime):
            return self.to_instant() - other.to_instant()
        return NotImplemented

    # Hiding __eq__ from mypy ensures that --strict-equality works
    if not TYPE_CHECKING:  # pragma: no branch

        def __eq__(self, other: object) -> bool:
            """Check if two zoned datetimes are at the same moment in time.

            Use :meth:`exact_eq` to compare their values instead.
            """
            if not isinstance(other, ZonedDateTime):
                return NotImplemented
            return self.to_instant() == other.to_instant()

    def __hash__(self) -> int:
        return hash(self.to_instant())

    def exact_eq(self, other: ZonedDateTime, /) -> bool:
        """Compare by wall clock, offset, and zone, instead of by
        the moment in time"""
        return (
            self._adjusted == other._adjusted
            and self._offset == other._offset
            and self._time_zone == other._time_zone
        )

    def __lt__(self, other: ZonedDateTime) -> bool:
        if not isinstance(other, ZonedDateTime):
            return NotImplemented
        return self.to_instant() < other.to_instant()

    def __le__(self, other: ZonedDateTime) -> bool:
        if not isinstance(other, ZonedDateTime):
            return NotImplemented
        return self.to_instant() <= other.to_instant()

    def __gt__(self, other: ZonedDateTime) -> bool:
        if not isinstance(other, ZonedDateTime):
            return NotImplemented
        return self.to_instant() > other.to_instant()

    def __ge__(self, other: ZonedDateTime) -> bool:
        if not isinstance(other, ZonedDateTime):
            return NotImplemented
        return self.to_instant() >= other.to_instant()

    def canonical_format(self) -> str:
        """The format is:

        .. code-block:: text

           YYYY-MM-DDTHH:MM:SS.mmm+HH(:MM(:SS))[ZONE NAME]

        The zone name is left out for unnamed zones.
        """
        zone = "" if self._time_zone.zone_name is None else (
            f"[{self._time_zone.zone_name}]"
        )
        return f"{self._adjusted}{Offset.of_seconds(self._offset)}{zone}"

    __str__ = canonical_format

    def __repr__(self) -> str:
        return f"ZonedDateTime({self})"


# Helpers that pre-compute/lookup as much as possible
_object_new = object.__new__
Disambiguate = Literal["earlier", "later", "raise"]


def hours(i: int, /) -> Duration:
    """Create a :class:`Duration` with the given number of hours.
    ``hours(1) == Duration.of(3600)``
    """
    return Duration.of(i * 3600)


def minutes(i: int, /) -> Duration:
    """Create a :class:`Duration` with the given number of minutes.
    ``minutes(1) == Duration.of(60)``
    """
    return Duration.of(i * 60)
