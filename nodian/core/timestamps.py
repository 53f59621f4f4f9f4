# nodian/core/timestamps.py
"""
Epoch <-> date-time conversion and the cascading date/time picker model.

All date-time strings use DATETIME_FORMAT. A `tz` of None means the local
timezone of the running process.
"""
from datetime import datetime, timedelta, timezone, tzinfo
from enum import Enum
from typing import List, Optional, Union

from loguru import logger

from .errors import ParseError

DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"
_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]


class TimeUnit(str, Enum):
    SECONDS = "seconds"
    MILLISECONDS = "milliseconds"


DEFAULT_UNIT = TimeUnit.SECONDS


def format_datetime(dt: datetime) -> str:
    # strftime drops the zero padding of years below 1000 on some platforms
    return (f"{dt.year:04d}-{dt.month:02d}-{dt.day:02d} "
            f"{dt.hour:02d}:{dt.minute:02d}:{dt.second:02d}")


def parse_datetime(text: str) -> datetime:
    """Parses a DATETIME_FORMAT string into a naive datetime."""
    try:
        return datetime.strptime(text.strip(), DATETIME_FORMAT)
    except ValueError as e:
        raise ParseError("Invalid date-time format, expected YYYY-MM-DD HH:MM:SS") from e


def to_date(epoch: Union[int, str], unit: TimeUnit = DEFAULT_UNIT, tz: Optional[tzinfo] = None) -> str:
    """Converts an epoch value to a date-time string. Milliseconds are floored to the second."""
    if isinstance(epoch, str):
        try:
            epoch = int(epoch.strip())
        except ValueError as e:
            raise ParseError("Invalid timestamp") from e

    seconds = epoch if TimeUnit(unit) is TimeUnit.SECONDS else epoch // 1000
    try:
        if tz is None:
            dt = datetime.fromtimestamp(seconds)
        else:
            dt = (_EPOCH + timedelta(seconds=seconds)).astimezone(tz)
    except (OverflowError, OSError, ValueError) as e:
        logger.debug(f"Timestamp {epoch} ({unit}) cannot be represented: {e}")
        raise ParseError("Timestamp out of range") from e
    return format_datetime(dt)


def to_epoch(text: str, unit: TimeUnit = DEFAULT_UNIT, tz: Optional[tzinfo] = None) -> int:
    """Converts a date-time string to an integer epoch in the given unit."""
    naive = parse_datetime(text)
    try:
        aware = naive.replace(tzinfo=tz) if tz is not None else naive.astimezone()
    except (OverflowError, OSError, ValueError) as e:
        raise ParseError("Date-time out of range") from e
    seconds = (aware - _EPOCH) // timedelta(seconds=1)
    return seconds if TimeUnit(unit) is TimeUnit.SECONDS else seconds * 1000


# --- Calendar arithmetic ---

def is_leap_year(year: int) -> bool:
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)

def days_in_month(year: int, month: int) -> int:
    if not 1 <= month <= 12:
        raise ValueError(f"Month must be in 1..12, got {month}")
    if month in (4, 6, 9, 11):
        return 30
    if month == 2:
        return 29 if is_leap_year(year) else 28
    return 31


# --- Picker option lists ---

def year_options(center: int, span: int = 50) -> List[str]:
    return [str(year) for year in range(center - span, center + span + 1)]

def month_options() -> List[str]:
    return list(MONTH_NAMES)

def day_options(year: int, month: int) -> List[str]:
    return [str(day) for day in range(1, days_in_month(year, month) + 1)]

def hour_options() -> List[str]:
    return [f"{hour:02d}" for hour in range(24)]

def minute_options() -> List[str]:
    return [f"{minute:02d}" for minute in range(60)]

def second_options() -> List[str]:
    return minute_options()


class DateTimePicker:
    """
    Six cascading selections (year, month, day, hour, minute, second).

    Changing the year or month regenerates the day list and clamps the
    selected day to the new month length.
    """

    def __init__(self, initial: datetime, year_span: int = 50, center_year: Optional[int] = None):
        center = center_year if center_year is not None else datetime.now().year
        if abs(initial.year - center) > year_span:
            center = initial.year
        self.year_span = year_span
        self.years = year_options(center, year_span)
        self.year = initial.year
        self.month = initial.month
        self.day = initial.day
        self.hour = initial.hour
        self.minute = initial.minute
        self.second = initial.second

    @classmethod
    def from_string(cls, text: str, tz: Optional[tzinfo] = None, **kwargs) -> "DateTimePicker":
        """Seeds the picker from a formatted string, falling back to the current time."""
        initial: Optional[datetime] = None
        if text and text.strip():
            try:
                initial = parse_datetime(text)
            except ParseError:
                logger.debug(f"Picker seed '{text}' unparsable, using current time.")
        if initial is None:
            initial = datetime.now(tz) if tz is not None else datetime.now()
        return cls(initial, **kwargs)

    @property
    def days(self) -> List[str]:
        return day_options(self.year, self.month)

    @property
    def month_name(self) -> str:
        return MONTH_NAMES[self.month - 1]

    def _regenerate_days(self):
        last_day = days_in_month(self.year, self.month)
        if self.day > last_day:
            logger.debug(f"Clamping day {self.day} to {last_day} for {self.year}-{self.month:02d}")
            self.day = last_day

    def select_year(self, year: Union[int, str]):
        if str(year) not in self.years:
            raise ValueError(f"Year {year} is not among the picker options")
        self.year = int(year)
        self._regenerate_days()

    def select_month(self, month: Union[int, str]):
        if isinstance(month, str) and not month.isdigit():
            if month not in MONTH_NAMES:
                raise ValueError(f"Unknown month: {month}")
            month = MONTH_NAMES.index(month) + 1
        month = int(month)
        if not 1 <= month <= 12:
            raise ValueError(f"Month must be in 1..12, got {month}")
        self.month = month
        self._regenerate_days()

    def select_day(self, day: Union[int, str]):
        if str(int(day)) not in self.days:
            raise ValueError(f"Day {day} is not valid for {self.month_name} {self.year}")
        self.day = int(day)

    def select_hour(self, hour: Union[int, str]):
        self.hour = self._checked(hour, 24, "Hour")

    def select_minute(self, minute: Union[int, str]):
        self.minute = self._checked(minute, 60, "Minute")

    def select_second(self, second: Union[int, str]):
        self.second = self._checked(second, 60, "Second")

    @staticmethod
    def _checked(value: Union[int, str], limit: int, what: str) -> int:
        number = int(value)
        if not 0 <= number < limit:
            raise ValueError(f"{what} must be in 0..{limit - 1}, got {value}")
        return number

    def value(self) -> datetime:
        return datetime(self.year, self.month, self.day, self.hour, self.minute, self.second)

    def formatted(self) -> str:
        return format_datetime(self.value())
