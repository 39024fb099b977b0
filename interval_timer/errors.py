"""Exceptions raised inside the interval timer core.

None of these reach the window: each is caught where the failing operation
lives and reported with a printed diagnostic.
"""


class IntervalTimerError(Exception):
    """Base class for interval timer errors"""


class ParseError(IntervalTimerError, ValueError):
    """Duration input that is not a positive number"""


class PersistenceError(IntervalTimerError):
    """Intervals blob could not be encoded, decoded, read or written"""


class PlaybackError(IntervalTimerError):
    """Sound cue missing or the mixer refused to play it"""
