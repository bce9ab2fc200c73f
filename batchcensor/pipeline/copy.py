import logging

from .base import BaseTask
from .generator import Generator
from ..file_manager import FileManager

logger = logging.getLogger("BatchCensor.Copy")

class CopyTask(BaseTask):
    """Copy a file verbatim. An existing destination is left alone."""

    verb = "copy"

    def execute(self, generator: Generator) -> bool:
        if self.dest.exists():
            return False

        FileManager.copy(self.src, self.dest)
        return True
