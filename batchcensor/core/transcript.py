"""Transcripts annotated with inline ``[word]{range}`` markers."""

from typing import Any, List, Tuple

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_serializer, model_validator

from ..errors import TranscriptError
from .timecode import Range


class Replace(BaseModel):
    """A single censorship directive: a word and the range it is spoken in."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    word: str = Field(validation_alias=AliasChoices("word", "kind"))
    range: Range

    def __str__(self) -> str:
        return f"[{self.word}]{{{self.range}}}"


def _read_until(text: str, index: int, terminator: str) -> Tuple[str, int]:
    end = text.find(terminator, index)
    if end < 0:
        raise ValueError(terminator)
    return text[index:end], end + 1


def _scan(text: str) -> Tuple[List[Replace], List[str]]:
    replace: List[Replace] = []
    missing: List[str] = []

    index = 0
    while True:
        index = text.find("[", index)
        if index < 0:
            break

        try:
            word, index = _read_until(text, index + 1, "]")
        except ValueError:
            raise TranscriptError(f"missing word in transcript: {text!r}") from None

        # A word without a range is known to be offensive, but not yet timed.
        if not text.startswith("{", index):
            missing.append(word)
            continue

        try:
            spec, index = _read_until(text, index + 1, "}")
        except ValueError:
            raise TranscriptError(f"missing range for [{word}] in transcript: {text!r}") from None

        parsed = Range.parse(spec)
        if parsed is None:
            raise TranscriptError(f"bad range for [{word}]: {spec!r}")

        replace.append(Replace(word=word, range=parsed))

    return replace, missing


class Transcript(BaseModel):
    """Free text with ``[word]{range}`` markers and bare ``[word]`` flags."""

    model_config = ConfigDict(frozen=True)

    text: str
    replace: List[Replace] = Field(default_factory=list)
    missing: List[str] = Field(default_factory=list)

    @classmethod
    def parse(cls, text: str) -> "Transcript":
        replace, missing = _scan(text)
        return cls(text=text, replace=replace, missing=missing)

    @model_validator(mode="before")
    @classmethod
    def _from_text(cls, value: Any) -> Any:
        if isinstance(value, str):
            replace, missing = _scan(value)
            return {"text": value, "replace": replace, "missing": missing}
        return value

    @model_serializer
    def _to_text(self) -> str:
        return self.text

    def __str__(self) -> str:
        return self.text
