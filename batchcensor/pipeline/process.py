from pathlib import Path
from typing import List, Sequence, Tuple
import logging

from .base import BaseTask
from .generator import Generator
from ..audio import read_samples, write_samples
from ..core.transcript import Replace
from ..errors import SampleRangeError
from ..file_manager import FileManager

logger = logging.getLogger("BatchCensor.Process")

class ProcessTask(BaseTask):
    """Decode a file, overwrite every censored range and encode it again."""

    verb = "process"

    def __init__(self, src: Path, dest: Path, replacements: Sequence[Replace]):
        super().__init__(src, dest)
        self.replacements = tuple(replacements)

    def execute(self, generator: Generator) -> bool:
        info, samples = read_samples(self.src)
        applied: List[Tuple[int, int]] = []

        # Applied in declaration order; where ranges overlap the last one wins.
        for replace in self.replacements:
            try:
                start, end = replace.range.resolve(info.sample_rate, info.channels, samples.size)
            except SampleRangeError as e:
                raise SampleRangeError(f"{self.src}: [{replace.word}] {e}") from e

            if start == end:
                logger.debug(f"{self.src}: {replace} is empty, skipping")
                continue

            for other_start, other_end in applied:
                if start < other_end and other_start < end:
                    logger.warning(f"{self.src}: {replace} overlaps samples {other_start}-{other_end}")

            samples[start:end] = generator.generate(start, end, info.sample_rate, info.channels)
            applied.append((start, end))

        with FileManager.atomic_destination(self.dest) as tmp:
            write_samples(tmp, info, samples)

        logger.debug(f"Censored {len(applied)} range(s) in {self.src}")
        return True
