"""MS-DOS date and time as stored in ZIP files."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone


@dataclass(frozen=True)
class ZipDateTime:
    """A date and time in the MS-DOS representation used by ZIP files."""

    date: int = 0
    time: int = 0

    def year(self) -> int:
        return ((self.date & 0xFE00) >> 9) + 1980

    def month(self) -> int:
        return (self.date & 0x1E0) >> 5

    def day(self) -> int:
        return self.date & 0x1F

    def hour(self) -> int:
        return (self.time & 0xF800) >> 11

    def minute(self) -> int:
        return (self.time & 0x7E0) >> 5

    def second(self) -> int:
        """The second; MS-DOS has a granularity of two seconds."""
        return (self.time & 0x1F) << 1

    def to_datetime(self) -> datetime | None:
        """A UTC datetime, or None if the stored fields are not a valid date."""
        try:
            return datetime(
                self.year(),
                self.month(),
                self.day(),
                self.hour(),
                self.minute(),
                self.second(),
                tzinfo=timezone.utc,
            )
        except ValueError:
            return None

    @classmethod
    def from_datetime(cls, dt: datetime) -> ZipDateTime:
        """Encode a datetime; aware values are converted to UTC first."""
        if dt.tzinfo is not None:
            dt = dt.astimezone(timezone.utc)
        year = ((dt.year - 1980) << 9) & 0xFE00
        month = (dt.month << 5) & 0x1E0
        day = dt.day & 0x1F
        hour = (dt.hour << 11) & 0xF800
        minute = (dt.minute << 5) & 0x7E0
        second = (dt.second >> 1) & 0x1F
        return cls(date=year | month | day, time=hour | minute | second)