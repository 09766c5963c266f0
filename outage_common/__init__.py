"""
Outage Common module.

This module contains the outage domain model and the contracts of the
collaborators it relies on (formatting, user directory).

The common module has no dependencies on other outage_* modules, making it
a pure domain layer that can be imported by any component.
"""

from .directory import AdminDirectory, StaticDirectory, UserAccount
from .exceptions import InvalidInputError, OutageError, OutageStateError
from .formatting import DefaultFormatter, Formatter
from .models import (
    OUTAGE_FIELDS,
    Outage,
    OutageDefaults,
    Stage,
    create_default_outage,
)

__all__ = [
    "AdminDirectory",
    "DefaultFormatter",
    "Formatter",
    "InvalidInputError",
    "OUTAGE_FIELDS",
    "Outage",
    "OutageDefaults",
    "OutageError",
    "OutageStateError",
    "Stage",
    "StaticDirectory",
    "UserAccount",
    "create_default_outage",
]
