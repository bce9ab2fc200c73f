"""Error hierarchy for batchcensor."""

from typing import Optional


class CensorError(Exception):
    """Base error for batchcensor."""


class ParseError(CensorError, ValueError):
    """Raised when configuration text (timecodes, ranges, transcripts) is malformed."""


class PositionError(ParseError):
    """Raised when a timecode cannot be parsed."""


class RangeError(ParseError):
    """Raised when a time range cannot be parsed."""


class TranscriptError(ParseError):
    """Raised when a transcript contains a malformed marker."""


class TemplateError(CensorError):
    """Raised when a file name does not fit a directory's templating rules."""


class ConfigError(CensorError):
    """Raised when a configuration document cannot be read or validated."""


class ReconcileError(CensorError):
    """Raised when configuration and filesystem disagree."""


class SampleRangeError(CensorError):
    """Raised when a range cannot be mapped onto the samples of a file."""


class AudioError(CensorError):
    """Raised when a WAV file cannot be decoded or encoded."""


class UnsupportedFormatError(AudioError):
    """Raised for WAV files that are not 16-bit PCM."""


class ManifestError(CensorError):
    """Raised when the archive manifest cannot be built."""


class TaskError(CensorError):
    """Raised when a single task fails. Carries the task description."""

    def __init__(self, task: str, cause: Optional[BaseException] = None):
        self.task = task
        self.cause = cause
        message = f"failed to run: {task}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
