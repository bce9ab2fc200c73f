"""16-bit PCM WAV decoding and encoding."""

import logging
import wave
from dataclasses import dataclass
from pathlib import Path
from typing import Tuple

import numpy as np

from .constants import SAMPLE_WIDTH_BYTES
from .errors import AudioError, UnsupportedFormatError

logger = logging.getLogger("BatchCensor.Audio")

# Interleaved little-endian 16-bit samples, as stored in the container.
SAMPLE_DTYPE = np.dtype("<i2")


@dataclass(frozen=True)
class WavInfo:
    """Format of a WAV file, as needed to write another one like it."""
    sample_rate: int
    channels: int
    frames: int

    @classmethod
    def from_params(cls, params) -> "WavInfo":
        return cls(sample_rate=params.framerate, channels=params.nchannels, frames=params.nframes)

    @property
    def total_samples(self) -> int:
        return self.frames * self.channels


def _check_format(path: Path, params) -> None:
    if params.sampwidth != SAMPLE_WIDTH_BYTES:
        raise UnsupportedFormatError(
            f"{path}: unsupported sample width of {params.sampwidth * 8} bits, only 16-bit PCM is handled"
        )


def read_info(path: Path) -> WavInfo:
    """Read the format and duration of a WAV file without decoding samples."""
    try:
        with wave.open(str(path), "rb") as wav:
            params = wav.getparams()
    except (wave.Error, EOFError, OSError) as e:
        raise AudioError(f"failed to open file: {path}: {e}") from e

    _check_format(path, params)
    return WavInfo.from_params(params)


def read_samples(path: Path) -> Tuple[WavInfo, np.ndarray]:
    """Decode a WAV file into a writable array of interleaved samples."""
    try:
        with wave.open(str(path), "rb") as wav:
            params = wav.getparams()
            _check_format(path, params)
            frames = wav.readframes(params.nframes)
    except (wave.Error, EOFError, OSError) as e:
        raise AudioError(f"failed to open file: {path}: {e}") from e

    samples = np.frombuffer(frames, dtype=SAMPLE_DTYPE).copy()
    expected = params.nframes * params.nchannels
    if samples.size != expected:
        raise AudioError(f"{path}: truncated data, expected {expected} samples but read {samples.size}")

    logger.debug(f"Decoded {path}: {params.nchannels}ch {params.framerate}Hz, {params.nframes} frames")
    return WavInfo.from_params(params), samples


def write_samples(path: Path, info: WavInfo, samples: np.ndarray) -> None:
    """Encode interleaved samples into a WAV file with the given format."""
    try:
        with wave.open(str(path), "wb") as wav:
            wav.setnchannels(info.channels)
            wav.setsampwidth(SAMPLE_WIDTH_BYTES)
            wav.setframerate(info.sample_rate)
            wav.writeframes(samples.astype(SAMPLE_DTYPE, copy=False).tobytes())
    except (wave.Error, OSError) as e:
        raise AudioError(f"failed to write file: {path}: {e}") from e
