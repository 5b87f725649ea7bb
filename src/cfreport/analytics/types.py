"""Time range values shared by analytics queries and report rendering."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum


class TimePreset(str, Enum):
    """Relative time windows offered by the CLI and config file."""

    LAST_24H = "24h"
    LAST_7D = "7d"
    LAST_30D = "30d"


_PRESET_DELTAS = {
    TimePreset.LAST_24H: timedelta(hours=24),
    TimePreset.LAST_7D: timedelta(days=7),
    TimePreset.LAST_30D: timedelta(days=30),
}


def parse_timestamp(text: str) -> datetime:
    """Parse an ISO 8601 date or date-time string into an aware UTC datetime.

    A trailing ``Z`` is read as UTC.  Naive values are assumed to be UTC.

    Raises:
        ValueError: If *text* is not a recognizable timestamp.
    """
    if not isinstance(text, str) or not text.strip():
        raise ValueError(f"Invalid ISO 8601 datetime: {text!r}")

    value = text.strip()
    if value[-1] in ("Z", "z"):
        value = value[:-1] + "+00:00"

    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        raise ValueError(f"Invalid ISO 8601 datetime: {text!r}")  # noqa: B904

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def format_timestamp(moment: datetime) -> str:
    """Render a datetime as UTC ISO 8601 with millisecond precision and a ``Z`` suffix."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    utc = moment.astimezone(timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"


@dataclass(frozen=True)
class TimeRange:
    """A half-open reporting window.

    Both bounds are kept as the textual timestamps the upstream API expects.
    ``start`` must strictly precede ``end``.
    """

    start: str
    end: str

    def __post_init__(self) -> None:
        if parse_timestamp(self.start) >= parse_timestamp(self.end):
            raise ValueError("timeRange.start must be before timeRange.end")

    @property
    def start_datetime(self) -> datetime:
        return parse_timestamp(self.start)

    @property
    def end_datetime(self) -> datetime:
        return parse_timestamp(self.end)

    @classmethod
    def from_datetimes(cls, start: datetime, end: datetime) -> TimeRange:
        """Build a range from two datetimes (naive values are taken as UTC)."""
        return cls(start=format_timestamp(start), end=format_timestamp(end))

    @classmethod
    def from_preset(cls, preset: TimePreset | str, now: datetime | None = None) -> TimeRange:
        """Resolve a relative preset (``24h``, ``7d``, ``30d``) ending at *now*.

        Raises:
            ValueError: If the preset is not recognized.
        """
        try:
            preset = TimePreset(preset)
        except ValueError:
            valid = ", ".join(p.value for p in TimePreset)
            raise ValueError(f"Unknown time preset: {preset}. Valid presets: {valid}")  # noqa: B904

        end = now or datetime.now(timezone.utc)
        return cls.from_datetimes(end - _PRESET_DELTAS[preset], end)
