import logging

import numpy as np

from .base import BaseTask
from .generator import Generator
from ..audio import SAMPLE_DTYPE, read_info, write_samples
from ..file_manager import FileManager

logger = logging.getLogger("BatchCensor.Silence")

class SilenceTask(BaseTask):
    """Replace a whole file with silence of the same duration and format.

    An existing destination is never overwritten, so a hand-made override
    placed in the output tree survives later runs.
    """

    verb = "silence"

    def execute(self, generator: Generator) -> bool:
        if self.dest.is_file():
            return False

        info = read_info(self.src)
        samples = np.zeros(info.total_samples, dtype=SAMPLE_DTYPE)

        with FileManager.atomic_destination(self.dest) as tmp:
            write_samples(tmp, info, samples)

        logger.debug(f"Silenced {self.src} ({info.frames} frames)")
        return True
