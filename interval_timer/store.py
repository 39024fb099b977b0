"""Date-keyed interval storage.

Each calendar date ("YYYY-MM-DD", local time) owns an ordered list of
intervals. The whole mapping lives in one JSON blob that is rewritten after
every change.
"""

import json
import math
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path

from .errors import ParseError, PersistenceError

INTERVAL_KINDS = ("Run", "Walk")
DATE_FORMAT = '%Y-%m-%d'


def new_record_id():
    return str(uuid.uuid4()).upper()


@dataclass(frozen=True)
class IntervalRecord:
    kind: str
    duration: float
    id: str = field(default_factory=new_record_id)

    def to_dict(self):
        return {"id": self.id, "type": self.kind, "duration": self.duration}

    @classmethod
    def from_dict(cls, raw):
        if not isinstance(raw, dict):
            raise PersistenceError(f"interval must be an object, got {type(raw).__name__}")
        try:
            record_id = raw["id"]
            kind = raw["type"]
            duration = raw["duration"]
        except KeyError as e:
            raise PersistenceError(f"interval is missing field {e}") from e

        if not isinstance(record_id, str) or not record_id:
            raise PersistenceError("interval id must be a non-empty string")
        if not isinstance(kind, str) or not kind:
            raise PersistenceError("interval type must be a non-empty string")
        if isinstance(duration, bool) or not isinstance(duration, (int, float)):
            raise PersistenceError("interval duration must be a number")
        try:
            duration = float(duration)
        except OverflowError as e:
            raise PersistenceError(f"interval duration out of range: {e}") from e
        if not math.isfinite(duration) or duration <= 0:
            raise PersistenceError(f"interval duration must be positive, got {duration!r}")

        return cls(kind=kind, duration=duration, id=record_id)

    def label(self):
        return f"{self.kind} - {int(self.duration)} sec"


def date_key(value=None):
    """Normalize a date, datetime or key string to "YYYY-MM-DD" (local time)"""
    if value is None:
        value = datetime.now()
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone()
        return value.strftime(DATE_FORMAT)
    if isinstance(value, date):
        return value.strftime(DATE_FORMAT)
    if isinstance(value, str):
        return datetime.strptime(value.strip(), DATE_FORMAT).strftime(DATE_FORMAT)
    raise TypeError(f"cannot build a date key from {type(value).__name__}")


def parse_duration(value):
    """Parse user input into a positive, finite number of seconds"""
    if isinstance(value, bool):
        raise ParseError(f"not a duration: {value!r}")
    try:
        seconds = float(value.strip() if isinstance(value, str) else value)
    except (TypeError, ValueError, OverflowError) as e:
        raise ParseError(f"not a duration: {value!r}") from e

    if not math.isfinite(seconds) or seconds <= 0:
        raise ParseError(f"duration must be positive: {value!r}")
    return seconds


def dumps(intervals_by_date):
    payload = {
        key: [record.to_dict() for record in records]
        for key, records in intervals_by_date.items()
    }
    try:
        return json.dumps(payload, indent=2, allow_nan=False).encode("utf-8")
    except (TypeError, ValueError) as e:
        raise PersistenceError(f"cannot encode intervals: {e}") from e


def loads(blob):
    if not blob or not blob.strip():
        return {}
    try:
        raw = json.loads(blob)
    except ValueError as e:
        raise PersistenceError(f"intervals blob is not valid JSON: {e}") from e

    if not isinstance(raw, dict):
        raise PersistenceError("intervals blob must be a JSON object")

    intervals_by_date = {}
    for key, records in raw.items():
        if not isinstance(records, list):
            raise PersistenceError(f"intervals for {key} must be a list")
        intervals_by_date[key] = [IntervalRecord.from_dict(r) for r in records]
    return intervals_by_date


class IntervalStore:
    """Owns the date -> intervals mapping and writes it back on every change"""
    def __init__(self, data_file):
        self.data_file = Path(data_file)
        self.intervals = {}

    def load(self):
        """Read the blob from disk; missing or malformed data gives an empty store"""
        self.intervals = {}
        if not self.data_file.exists():
            return self.intervals

        try:
            self.intervals = loads(self.data_file.read_bytes())
        except (OSError, PersistenceError) as e:
            print(f"Load intervals error: {e}")
        return self.intervals

    def persist(self):
        try:
            blob = dumps(self.intervals)
            self.data_file.parent.mkdir(parents=True, exist_ok=True)
            self.data_file.write_bytes(blob)
        except (OSError, PersistenceError) as e:
            print(f"Save intervals error: {e}")
            return False
        return True

    def get(self, key):
        return list(self.intervals.setdefault(key, []))

    def add(self, key, kind, duration):
        """Append an interval; returns its id, or None when kind or duration is rejected"""
        if not isinstance(kind, str) or not kind.strip():
            return None
        try:
            seconds = parse_duration(duration)
        except ParseError:
            return None

        record = IntervalRecord(kind=kind, duration=seconds)
        self.intervals.setdefault(key, []).append(record)
        self.persist()
        return record.id

    def remove(self, key, record_id):
        records = self.intervals.get(key, [])
        kept = [r for r in records if r.id != record_id]
        removed = len(kept) != len(records)
        if key in self.intervals:
            self.intervals[key] = kept
        self.persist()
        return removed

    def clear(self, key):
        self.intervals[key] = []
        self.persist()

    def dates(self):
        return sorted(k for k, records in self.intervals.items() if records)

    def total_seconds(self, key):
        return sum(r.duration for r in self.intervals.get(key, []))
