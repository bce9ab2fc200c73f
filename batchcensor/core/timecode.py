"""Timecodes and open-ended time ranges."""

import re
from functools import total_ordering
from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, NonNegativeInt, model_serializer, model_validator

from ..constants import MAX_SAMPLE_OFFSET, OPEN_END, OPEN_START
from ..errors import PositionError, RangeError, SampleRangeError

_DIGITS = re.compile(r"[0-9]+")


def _checked(value: int) -> Optional[int]:
    if value > MAX_SAMPLE_OFFSET:
        return None
    return value


def _number(text: str) -> Optional[int]:
    if not _DIGITS.fullmatch(text):
        return None
    return int(text)


def _split_pos(text: str) -> Optional[Dict[str, int]]:
    fields = text.split(":")
    if len(fields) > 3:
        return None

    head, dot, tail = fields.pop().partition(".")
    if not dot:
        return None

    seconds = 0 if head == "" else _number(head)
    milliseconds = _number(tail)
    if seconds is None or milliseconds is None:
        return None

    minutes = hours = 0
    if fields:
        minutes = _number(fields.pop())
    if fields:
        hours = _number(fields.pop())
    if minutes is None or hours is None:
        return None

    return {
        "hours": hours,
        "minutes": minutes,
        "seconds": seconds,
        "milliseconds": milliseconds,
    }


@total_ordering
class Pos(BaseModel):
    """A position in a recording, as written in configuration: ``[[h:]m:]s.ms``."""

    model_config = ConfigDict(frozen=True)

    hours: NonNegativeInt = 0
    minutes: NonNegativeInt = 0
    seconds: NonNegativeInt = 0
    milliseconds: NonNegativeInt = 0

    @classmethod
    def parse(cls, text: str) -> Optional["Pos"]:
        fields = _split_pos(text)
        if fields is None:
            return None
        return cls(**fields)

    @model_validator(mode="before")
    @classmethod
    def _from_text(cls, value: Any) -> Any:
        if isinstance(value, str):
            fields = _split_pos(value)
            if fields is None:
                raise PositionError(f"bad position: {value!r}")
            return fields
        return value

    @model_serializer
    def _to_text(self) -> str:
        return str(self)

    def as_samples(self, sample_rate: int) -> Optional[int]:
        """Convert into a sample offset, or None if it does not fit in 32 bits."""
        samples = 0
        for term in (
            self.hours * 3600 * sample_rate,
            self.minutes * 60 * sample_rate,
            self.seconds * sample_rate,
            self.milliseconds * sample_rate // 1000,
        ):
            if _checked(term) is None:
                return None
            samples = _checked(samples + term)
            if samples is None:
                return None
        return samples

    def _key(self) -> Tuple[int, int, int, int]:
        return (self.hours, self.minutes, self.seconds, self.milliseconds)

    def __lt__(self, other: "Pos") -> bool:
        if not isinstance(other, Pos):
            return NotImplemented
        return self._key() < other._key()

    def __str__(self) -> str:
        if self.hours:
            return f"{self.hours:02}:{self.minutes:02}:{self.seconds:02}.{self.milliseconds:03}"
        if self.minutes:
            return f"{self.minutes:02}:{self.seconds:02}.{self.milliseconds:03}"
        return f"{self.seconds:02}.{self.milliseconds:03}"


def _split_range(text: str) -> Optional[Dict[str, Optional[Pos]]]:
    start, dash, end = text.partition("-")
    if not dash:
        return None

    bounds: Dict[str, Optional[Pos]] = {}
    for key, value, open_marker in (("start", start, OPEN_START), ("end", end, OPEN_END)):
        if value == open_marker:
            bounds[key] = None
            continue
        pos = Pos.parse(value)
        if pos is None:
            return None
        bounds[key] = pos
    return bounds


class Range(BaseModel):
    """A half-open interval of a recording. A missing bound is open."""

    model_config = ConfigDict(frozen=True)

    start: Optional[Pos] = None
    end: Optional[Pos] = None

    @classmethod
    def parse(cls, text: str) -> Optional["Range"]:
        bounds = _split_range(text)
        if bounds is None:
            return None
        return cls(**bounds)

    @model_validator(mode="before")
    @classmethod
    def _from_text(cls, value: Any) -> Any:
        if isinstance(value, str):
            bounds = _split_range(value)
            if bounds is None:
                raise RangeError(f"bad range: {value!r}")
            return bounds
        return value

    @model_serializer
    def _to_text(self) -> str:
        return str(self)

    def __str__(self) -> str:
        start = OPEN_START if self.start is None else str(self.start)
        end = OPEN_END if self.end is None else str(self.end)
        return f"{start}-{end}"

    def resolve(self, sample_rate: int, channels: int, total: int) -> Tuple[int, int]:
        """Resolve into interleaved sample offsets ``[start, end)``.

        ``total`` is the number of interleaved samples in the buffer. The end
        is clamped to it; a start beyond it, or after the end, is an error.
        """
        start = self._offset(self.start, sample_rate, channels, 0)
        end = min(self._offset(self.end, sample_rate, channels, total), total)

        if start > total:
            raise SampleRangeError(f"{self}: {start} (start) is out of range 0-{total}")

        if start > end:
            raise SampleRangeError(f"{self}: {start} (start) is not before {end} (end)")

        return start, end

    def _offset(self, pos: Optional[Pos], sample_rate: int, channels: int, default: int) -> int:
        if pos is None:
            return default

        samples = pos.as_samples(sample_rate)
        if samples is not None:
            samples = _checked(samples * channels)

        if samples is None:
            raise SampleRangeError(
                f"{self}: {pos} overflows with sample rate {sample_rate} and {channels} channel(s)"
            )
        return samples
