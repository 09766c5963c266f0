"""
Environment-based configuration for the outage tools.

Environment variables:
    OUTAGE_DEFAULT_AUTOSTART: Auto start flag for new outages (default: 0)
    OUTAGE_DEFAULT_WARNING_DURATION: Warning period in seconds (default: 3600)
    OUTAGE_DEFAULT_DURATION: Outage duration in seconds (default: 7200)
    OUTAGE_DEFAULT_TITLE: Title template for new outages
    OUTAGE_DEFAULT_DESCRIPTION: Description template for new outages
    OUTAGE_MAILING_LIST: Default comma-separated recipient user ids
    OUTAGE_TIMEZONE: Timezone used to render dates (default: UTC)
    OUTAGE_DATETIME_FORMAT: strftime format used to render dates
    OUTAGE_LOG_LEVEL: Logging level (default: WARNING)
"""

import logging
import os

from outage_common.formatting import DEFAULT_DATETIME_FORMAT, DefaultFormatter
from outage_common.models import OutageDefaults

logger = logging.getLogger(__name__)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def _get_seconds(name: str, default: int) -> int:
    """Read a non-negative number of seconds, falling back to default."""
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning(f"Invalid {name}={raw}, using default {default}")
        return default
    if value < 0:
        logger.warning(f"Invalid {name}={value}, using default {default}")
        return default
    return value


def get_defaults() -> OutageDefaults:
    """
    Get the values used to pre-fill new outages.

    Returns:
        OutageDefaults built from the environment
    """
    base = OutageDefaults()
    return OutageDefaults(
        autostart=os.environ.get("OUTAGE_DEFAULT_AUTOSTART", "0").strip().lower()
        in ("1", "true", "yes", "on"),
        default_warning_duration=_get_seconds(
            "OUTAGE_DEFAULT_WARNING_DURATION", base.default_warning_duration
        ),
        default_duration=_get_seconds("OUTAGE_DEFAULT_DURATION", base.default_duration),
        default_title=os.environ.get("OUTAGE_DEFAULT_TITLE", base.default_title),
        default_description=os.environ.get(
            "OUTAGE_DEFAULT_DESCRIPTION", base.default_description
        ),
        mailinglist=os.environ.get("OUTAGE_MAILING_LIST", base.mailinglist),
    )


def get_timezone() -> str:
    """Get the timezone used to render dates."""
    return os.environ.get("OUTAGE_TIMEZONE", "UTC")


def get_datetime_format() -> str:
    """Get the strftime format used to render dates."""
    return os.environ.get("OUTAGE_DATETIME_FORMAT", DEFAULT_DATETIME_FORMAT)


def get_log_level() -> str:
    """Get the logging level name, WARNING if unset or unknown."""
    level = os.environ.get("OUTAGE_LOG_LEVEL", "WARNING").upper()
    if level not in LOG_LEVELS:
        logger.warning(f"Invalid OUTAGE_LOG_LEVEL={level}, using default WARNING")
        return "WARNING"
    return level


def get_formatter() -> DefaultFormatter:
    """
    Get a formatter configured from the environment.

    Raises:
        InvalidInputError: If OUTAGE_TIMEZONE is not a known timezone
    """
    return DefaultFormatter(datetime_format=get_datetime_format(), timezone=get_timezone())
