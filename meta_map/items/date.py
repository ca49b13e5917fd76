"""Date value object for mapped date fields."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any

from pydantic import TypeAdapter, ValidationError

from meta_map.core.exceptions import MissingObjectError

_DATETIME = TypeAdapter(datetime)


def _from_timestamp(value: int | float | str) -> datetime:
    try:
        seconds = int(value) if isinstance(value, str) else value
        return datetime.fromtimestamp(seconds, tz=timezone.utc)
    except (OverflowError, OSError, ValueError) as e:
        raise MissingObjectError(f"Timestamp out of range: {value!r}") from e


def _parse(value: Any) -> datetime:
    if isinstance(value, Date):
        return value.datetime
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, bool):
        raise MissingObjectError(f"Cannot build a date from {value!r}")
    if isinstance(value, (int, float)):
        return _from_timestamp(value)

    if isinstance(value, str):
        text = value.strip()
        if text.isdigit():
            return _from_timestamp(text)
        try:
            return datetime.fromisoformat(text)
        except ValueError:
            pass

    try:
        return _DATETIME.validate_python(value)
    except ValidationError as e:
        raise MissingObjectError(f"Cannot build a date from {value!r}") from e


class Date:
    """A point in time parsed from a stored value.

    Accepts ``Date``, ``datetime``, ``date``, Unix timestamps (as numbers or
    digit strings) and ISO / MySQL datetime strings. An empty value means now.

    Raises:
        MissingObjectError: If the value cannot be read as a date.
    """

    default_format = "%Y-%m-%d"
    time_format = "%H:%M"

    def __init__(self, value: Any = None) -> None:
        if value is None or value == "":
            self._datetime = datetime.now(tz=timezone.utc)
        else:
            self._datetime = _parse(value)

    @classmethod
    def create(cls, value: Any = None) -> Date:
        return cls(value)

    @property
    def datetime(self) -> datetime:
        return self._datetime

    @property
    def timestamp(self) -> int:
        return int(self._datetime.timestamp())

    @property
    def time(self) -> str:
        return self.format(self.time_format)

    def format(self, fmt: str) -> str:
        return self._datetime.strftime(fmt)

    def __str__(self) -> str:
        return self.format(self.default_format)

    def __repr__(self) -> str:
        return f"Date({self._datetime.isoformat()!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Date):
            return self._datetime == other._datetime
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._datetime)
