"""
Data models for scheduled outages.

These models represent the domain objects used throughout the application,
independent of how outages are stored or displayed.
"""

from collections.abc import Mapping
from dataclasses import dataclass, fields
from enum import Enum
from typing import Any

from .directory import AdminDirectory
from .exceptions import InvalidInputError, OutageStateError
from .formatting import DefaultFormatter, Formatter

INT_FIELDS = (
    "createdby",
    "id",
    "lastmodified",
    "modifiedby",
    "starttime",
    "stoptime",
    "warntime",
    "finished",
)

PLACEHOLDER_START = "{{start}}"
PLACEHOLDER_STOP = "{{stop}}"
PLACEHOLDER_DURATION = "{{duration}}"


class Stage(str, Enum):
    """Lifecycle phase of an outage at a given instant."""

    WAITING = "waiting"  # Before the warning period
    WARNING = "warning"  # Announced, not started yet
    ONGOING = "ongoing"  # Started, not stopped or finished
    FINISHED = "finished"  # After the explicit finish marker
    STOPPED = "stopped"  # Past stop time, never marked as finished


def validate_time(time: Any) -> int:
    """
    Check that a reference time is a positive unix timestamp.

    Raises:
        InvalidInputError: If time is not a positive int
    """
    if isinstance(time, bool) or not isinstance(time, int) or time <= 0:
        raise InvalidInputError(f"time must be a positive int, got {time!r}")
    return time


def _to_int(name: str, value: Any) -> int | None:
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError) as e:
        raise InvalidInputError(f"{name} must be an integer, got {value!r}") from e


def _to_bool(value: Any) -> bool | None:
    """
    Cast a stored flag to bool, keeping None.

    Unlike a plain bool() cast, the strings "", "0" and "false" (any case)
    are False.
    """
    if value is None:
        return None
    if isinstance(value, str):
        # Flags stored as text ("0"/"1") must not be truthy just for being non-empty
        return value.strip().lower() not in ("", "0", "false")
    return bool(value)


@dataclass
class OutageDefaults:
    """
    Values used to pre-fill a new outage.

    Durations are in seconds. Loaded from the environment by
    outage_admin.config.get_defaults().
    """

    autostart: bool = False
    default_warning_duration: int = 60 * 60
    default_duration: int = 2 * 60 * 60
    default_title: str = "System down from {{start}} for {{duration}}."
    default_description: str = (
        "There is a scheduled maintenance from {{start}} to {{stop}} "
        "and our system will not be available during that time."
    )
    mailinglist: str = ""


@dataclass
class Outage:
    """
    Represents a scheduled outage (maintenance window).

    Outages progress through stages: waiting -> warning -> ongoing,
    then end as either finished (explicitly closed) or stopped (past the
    planned stop time without being closed). The stage is never stored,
    it is always computed from the timestamps and a reference time.
    """

    id: int | None = None  # Assigned by persistence on first save
    autostart: bool | None = None  # Engage maintenance mode at start time
    starttime: int | None = None
    stoptime: int | None = None
    warntime: int | None = None
    finished: int | None = None  # None until the outage is closed
    title: str | None = None  # Short notice, may contain placeholders
    description: str | None = None  # Long notice, may contain placeholders
    createdby: int | None = None
    modifiedby: int | None = None
    lastmodified: int | None = None
    outagemailinglist: str | None = None  # Comma-separated user ids

    def __post_init__(self) -> None:
        for name in INT_FIELDS:
            setattr(self, name, _to_int(name, getattr(self, name)))
        self.autostart = _to_bool(self.autostart)

    @classmethod
    def from_dict(cls, data: Any = None) -> "Outage":
        """
        Create an outage from a field mapping.

        Only recognized field names are copied, anything else is ignored.

        Args:
            data: None for an empty outage, a mapping, or an object whose
                attributes hold the fields

        Returns:
            Normalized Outage

        Raises:
            InvalidInputError: If data is not None, a mapping or an object
                with attributes
        """
        if data is None:
            return cls()
        if not isinstance(data, Mapping):
            if isinstance(data, (str, bytes)) or not hasattr(data, "__dict__"):
                raise InvalidInputError(
                    f"data must be a mapping, an object or None, got {type(data).__name__}"
                )
            data = vars(data)
        return cls(**{k: v for k, v in data.items() if k in OUTAGE_FIELDS})

    def to_dict(self) -> dict[str, Any]:
        """Convert outage to its field mapping (for persistence and JSON)."""
        return {name: getattr(self, name) for name in OUTAGE_FIELDS}

    def clone(self) -> "Outage":
        """Copy this outage without its id, so saving it creates a new one."""
        data = self.to_dict()
        data["id"] = None
        return Outage(**data)

    def get_stage(self, time: int) -> Stage:
        """
        Get the stage of this outage at the given time.

        An explicit finish always wins over the planned stop time, and a
        stale outage that was never closed reports as stopped.

        Args:
            time: Reference unix timestamp

        Returns:
            Stage at the reference time

        Raises:
            InvalidInputError: If time is not a positive int or the
                schedule is incomplete
        """
        validate_time(time)
        self._require("starttime", "stoptime", "warntime")

        if self.finished is not None and time >= self.finished:
            return Stage.FINISHED
        if time >= self.stoptime:
            return Stage.STOPPED
        if time < self.warntime:
            return Stage.WAITING
        if time < self.starttime:
            return Stage.WARNING
        return Stage.ONGOING

    def is_active(self, time: int) -> bool:
        """True if the outage is in its warning period or ongoing."""
        return self.get_stage(time) in (Stage.WARNING, Stage.ONGOING)

    def is_ongoing(self, time: int) -> bool:
        """True if the outage has started and not yet stopped or finished."""
        return self.get_stage(time) == Stage.ONGOING

    def has_ended(self, time: int) -> bool:
        """True if the outage was marked as finished or is past its stop time."""
        return self.get_stage(time) in (Stage.FINISHED, Stage.STOPPED)

    def duration_planned(self) -> int:
        """Seconds from start to planned stop (warning not included)."""
        self._require("starttime", "stoptime")
        return self.stoptime - self.starttime

    def duration_actual(self) -> int | None:
        """Seconds from start to actual finish, or None if not finished."""
        if self.finished is None:
            return None
        self._require("starttime")
        return self.finished - self.starttime

    def warning_duration(self) -> int:
        """Seconds from warning start to outage start."""
        self._require("starttime", "warntime")
        return self.starttime - self.warntime

    def finish(self, time: int) -> None:
        """
        Mark the outage as finished at the given time.

        Args:
            time: Unix timestamp of the finish

        Raises:
            InvalidInputError: If time is not a positive int
            OutageStateError: If the outage is not ongoing at that time or
                was already marked as finished
        """
        stage = self.get_stage(time)
        if self.finished is not None:
            raise OutageStateError(f"Outage {self.id} is already marked as finished")
        if stage != Stage.ONGOING:
            raise OutageStateError(
                f"Cannot finish outage {self.id}: it is {stage.value}, not ongoing"
            )
        self.finished = time

    def get_title(self, formatter: Formatter | None = None) -> str:
        """Get the title with placeholders such as {{start}} replaced."""
        return self._replace_placeholders(self.title, formatter)

    def get_description(self, formatter: Formatter | None = None) -> str:
        """Get the description with placeholders such as {{start}} replaced."""
        return self._replace_placeholders(self.description, formatter)

    def get_siteadmin_emails(self, directory: AdminDirectory) -> str:
        """Get the emails of all site admins, comma separated."""
        return ",".join(admin.email for admin in directory.list_admins())

    def _replace_placeholders(self, text: str | None, formatter: Formatter | None) -> str:
        if text is None:
            return ""
        if formatter is None:
            formatter = DefaultFormatter()

        if PLACEHOLDER_START in text:
            self._require("starttime")
            text = text.replace(PLACEHOLDER_START, formatter.format_datetime(self.starttime))
        if PLACEHOLDER_STOP in text:
            self._require("stoptime")
            text = text.replace(PLACEHOLDER_STOP, formatter.format_datetime(self.stoptime))
        if PLACEHOLDER_DURATION in text:
            text = text.replace(
                PLACEHOLDER_DURATION, formatter.format_duration(self.duration_planned())
            )
        return text

    def _require(self, *names: str) -> None:
        missing = [name for name in names if getattr(self, name) is None]
        if missing:
            raise InvalidInputError(
                f"Outage {self.id} has no {', '.join(missing)} set"
            )


OUTAGE_FIELDS = tuple(f.name for f in fields(Outage))


def create_default_outage(defaults: OutageDefaults, time: int) -> Outage:
    """
    Build a new outage starting at the given time, pre-filled from defaults.

    Args:
        defaults: Configured default values
        time: Unix timestamp used as the start time

    Returns:
        Unsaved Outage (id is None)
    """
    validate_time(time)
    return Outage(
        autostart=defaults.autostart,
        starttime=time,
        stoptime=time + defaults.default_duration,
        warntime=time - defaults.default_warning_duration,
        title=defaults.default_title,
        description=defaults.default_description,
        outagemailinglist=defaults.mailinglist,
    )
