"""File management utilities for batchcensor."""

import os
import shutil
import logging
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

logger = logging.getLogger("BatchCensor.Files")


def _current_umask() -> int:
    # Reading the umask means setting it, so only do it at import.
    mask = os.umask(0)
    os.umask(mask)
    return mask


# Mode of a newly created regular file, as open() would give it.
DEFAULT_FILE_MODE = 0o666 & ~_current_umask()


class FileManager:
    """Handles destination files so that they are either complete or absent."""

    @staticmethod
    def ensure_parent(dest: Path) -> None:
        """
        Create the parent directory of a destination if needed.

        Args:
            dest: Destination file path
        """
        dest.parent.mkdir(parents=True, exist_ok=True)

    @staticmethod
    @contextmanager
    def atomic_destination(dest: Path) -> Iterator[Path]:
        """
        Yield a temporary path next to `dest` and move it into place on success.
        The temporary file starts with the umask-based mode of a new file.

        On failure the temporary file is removed and `dest` is left untouched.

        Args:
            dest: Final destination path
        """
        FileManager.ensure_parent(dest)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{dest.name}.", suffix=".tmp", dir=dest.parent)
        os.close(fd)
        tmp = Path(tmp_name)
        os.chmod(tmp, DEFAULT_FILE_MODE)

        try:
            yield tmp
            os.replace(tmp, dest)
        finally:
            if tmp.exists():
                tmp.unlink()

    @staticmethod
    def copy(src: Path, dest: Path) -> None:
        """
        Copy a file byte-for-byte into place, keeping its permission bits.

        Args:
            src: Source file
            dest: Destination file
        """
        with FileManager.atomic_destination(dest) as tmp:
            shutil.copyfile(src, tmp)
            shutil.copymode(src, tmp)
        logger.debug(f"Copied {src} -> {dest}")
