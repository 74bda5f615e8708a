"""
Calendar helpers shared by the engine.

All month arithmetic is done in UTC. The clock is always passed in,
never read here, so every computation is reproducible.
"""

import calendar
import re
from datetime import datetime, timedelta, timezone

from pydantic import BaseModel, ConfigDict, Field


MONTH_PATTERN = re.compile(r"^\d{4}-\d{2}$")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def month_key(moment: datetime) -> str:
    """YYYY-MM for a datetime."""
    return f"{moment.year:04d}-{moment.month:02d}"


def parse_month(month: str) -> tuple[int, int]:
    """
    Split a YYYY-MM string into (year, month).

    Raises:
        ValueError: If the string is malformed or the month is not 01-12
    """
    if not MONTH_PATTERN.match(month or ""):
        raise ValueError(f"Month must be in YYYY-MM format, got {month!r}")
    year, month_num = (int(part) for part in month.split("-"))
    if not 1 <= month_num <= 12:
        raise ValueError(f"Month number must be between 01 and 12, got {month_num:02d}")
    return year, month_num


def shift_month(year: int, month: int, offset: int) -> tuple[int, int]:
    """Move (year, month) by offset months."""
    index = year * 12 + (month - 1) + offset
    return index // 12, index % 12 + 1


def window_start(now: datetime, days: int) -> datetime:
    """Start of a trailing window of `days` days ending at now."""
    return now - timedelta(days=days)


class MonthPeriod(BaseModel):
    """
    The month a plan is built for, seen from a fixed point in time.

    For the current month, elapsed_days is today's day of month.
    For any other month the full month length is used, so a closed
    month is summarized at its final burn rate.
    """
    model_config = ConfigDict(frozen=True)

    year: int = Field(ge=1)
    month: int = Field(ge=1, le=12)
    days_in_month: int = Field(ge=28, le=31)
    elapsed_days: int = Field(ge=1, le=31)
    is_current_month: bool

    @classmethod
    def for_month(cls, month: str, now: datetime) -> 'MonthPeriod':
        year, month_num = parse_month(month)
        days_in_month = calendar.monthrange(year, month_num)[1]
        is_current = (now.year, now.month) == (year, month_num)
        return cls(
            year=year,
            month=month_num,
            days_in_month=days_in_month,
            elapsed_days=now.day if is_current else days_in_month,
            is_current_month=is_current,
        )

    @property
    def key(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"

    @property
    def start(self) -> datetime:
        return datetime(self.year, self.month, 1, tzinfo=timezone.utc)

    @property
    def end(self) -> datetime:
        """Exclusive end: the first instant of the next month."""
        year, month = shift_month(self.year, self.month, 1)
        return datetime(year, month, 1, tzinfo=timezone.utc)

    @property
    def remaining_days(self) -> int:
        return self.days_in_month - self.elapsed_days

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment < self.end
