"""Error kinds raised by the engine.

Every error is raised synchronously to the immediate caller. Nothing in the
core catches or logs these.
"""


class CaltrackError(Exception):
    """Base class for all engine errors."""


class InvalidProfile(CaltrackError, ValueError):
    """Biometric values outside the supported domain."""


class InvalidActivityLevel(InvalidProfile):
    """Activity level not in the multiplier table."""


class InvalidQuantity(CaltrackError, ValueError):
    """Non-positive quantity or calories per serving on insertion."""


class EntryNotFound(CaltrackError, LookupError):
    """No entry with the given id in that meal/day."""


class DuplicateDay(CaltrackError, ValueError):
    """More than one DailyEntry for the same date in an aggregation window."""
