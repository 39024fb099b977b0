"""Run/walk interval timer: date-keyed interval lists and a countdown over them."""

from .config import ConfigManager
from .countdown import CountdownLogic, IDLE, RUNNING, PAUSED, COMPLETE, format_clock
from .errors import IntervalTimerError, ParseError, PersistenceError, PlaybackError
from .store import IntervalRecord, IntervalStore, INTERVAL_KINDS, date_key, parse_duration

__version__ = "1.0.0"
