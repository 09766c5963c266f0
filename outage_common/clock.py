"""
Wall-clock access for the outer layers.

The domain model always takes an explicit reference time; only entry
points (CLI, schedulers) should call current_time().
"""

import time


def current_time() -> int:
    """Get the current unix timestamp in whole seconds."""
    return int(time.time())
