"""Generators for the audio written over censored ranges."""

import math
from abc import ABC, abstractmethod

import numpy as np

from ..audio import SAMPLE_DTYPE
from ..constants import TONE_AMPLITUDE, TONE_FREQUENCY


class Generator(ABC):
    """Produces replacement samples. Instances are shared read-only across tasks."""

    name: str

    @abstractmethod
    def generate(self, start: int, end: int, sample_rate: int, channels: int = 1) -> np.ndarray:
        """Generate interleaved samples to place over ``[start, end)``."""


class SilenceGenerator(Generator):
    name = "silence"

    def generate(self, start: int, end: int, sample_rate: int, channels: int = 1) -> np.ndarray:
        return np.zeros(end - start, dtype=SAMPLE_DTYPE)


class ToneGenerator(Generator):
    name = "tone"

    def __init__(self, frequency: float = TONE_FREQUENCY, amplitude: float = TONE_AMPLITUDE):
        self.frequency = frequency
        # Fraction of full scale, 0..1
        self.amplitude = amplitude

    def generate(self, start: int, end: int, sample_rate: int, channels: int = 1) -> np.ndarray:
        length = end - start
        frames = -(-length // channels)

        t = np.arange(frames, dtype=np.float64)
        wave = np.sin(t * self.frequency * 2.0 * math.pi / sample_rate)
        tone = (wave * self.amplitude * np.iinfo(np.int16).max).astype(SAMPLE_DTYPE)

        # Same value on every channel of a frame.
        return np.repeat(tone, channels)[:length]


def create_generator(tone: bool = False) -> Generator:
    return ToneGenerator() if tone else SilenceGenerator()
