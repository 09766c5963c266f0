"""
Display formatting for outage timestamps and durations.

Formatter is the contract used by placeholder rendering; DefaultFormatter
renders dates in a configured timezone and durations the way the host
platform's format_time does ("1 day 2 hours", "30 mins", "now").
"""

from abc import ABC, abstractmethod
from datetime import datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .exceptions import InvalidInputError

DEFAULT_DATETIME_FORMAT = "%a %d %b %Y at %I:%M%p %Z"

MINUTE = 60
HOUR = 60 * MINUTE
DAY = 24 * HOUR
YEAR = 365 * DAY

# (seconds per unit, singular, plural), largest first
DURATION_UNITS = (
    (YEAR, "year", "years"),
    (DAY, "day", "days"),
    (HOUR, "hour", "hours"),
    (MINUTE, "min", "mins"),
    (1, "sec", "secs"),
)


class Formatter(ABC):
    """Renders schedule values into display strings."""

    @abstractmethod
    def format_datetime(self, timestamp: int) -> str:
        """
        Render a unix timestamp as a date and time.

        Args:
            timestamp: Unix timestamp in seconds

        Returns:
            Human-readable date/time
        """
        pass

    @abstractmethod
    def format_duration(self, seconds: int) -> str:
        """
        Render a number of seconds as a duration.

        Args:
            seconds: Duration in seconds (sign is ignored)

        Returns:
            Human-readable duration
        """
        pass


class DefaultFormatter(Formatter):
    """strftime dates in a zoneinfo timezone, platform-style durations."""

    def __init__(
        self, datetime_format: str = DEFAULT_DATETIME_FORMAT, timezone: str = "UTC"
    ):
        """
        Initialize the formatter.

        Args:
            datetime_format: strftime format used for timestamps
            timezone: IANA timezone name, e.g. "Australia/Melbourne"

        Raises:
            InvalidInputError: If the timezone is unknown
        """
        try:
            self.tz = ZoneInfo(timezone)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise InvalidInputError(f"Unknown timezone: {timezone}") from e
        self.datetime_format = datetime_format

    def format_datetime(self, timestamp: int) -> str:
        try:
            moment = datetime.fromtimestamp(timestamp, tz=self.tz)
        except (OverflowError, OSError, ValueError) as e:
            raise InvalidInputError(f"timestamp out of range: {timestamp}") from e
        return moment.strftime(self.datetime_format)

    def format_duration(self, seconds: int) -> str:
        remainder = abs(int(seconds))
        parts = []
        for size, singular, plural in DURATION_UNITS:
            count, remainder = divmod(remainder, size)
            parts.append((count, singular if count == 1 else plural))

        # Largest non-zero unit plus the next one down, if that is non-zero
        for i, (count, label) in enumerate(parts):
            if count:
                shown = [f"{count} {label}"]
                if i + 1 < len(parts) and parts[i + 1][0]:
                    next_count, next_label = parts[i + 1]
                    shown.append(f"{next_count} {next_label}")
                return " ".join(shown)
        return "now"
