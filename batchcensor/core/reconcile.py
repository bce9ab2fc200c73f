"""Match every physical audio file against the configuration.

Each WAV file below a configured directory ends up in exactly one of four
outcomes and produces exactly one task:

- ``clean``: configured without replacements, copied verbatim.
- ``processed``: configured with replacements, censored range by range.
- ``silenced``: configured, but its transcript flags words without timing.
- ``unaccounted``: not configured at all, silenced as a precaution.
"""

import os
import logging
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Sequence, Set, Tuple

from .config import LoadedConfig
from .models import ReplaceDir
from ..constants import DEFAULT_OUTPUT_DIRNAME, SIDECAR_EXTENSION, WAV_EXTENSION
from ..errors import ReconcileError
from ..pipeline import BaseTask, CopyTask, ProcessTask, SilenceTask

logger = logging.getLogger("BatchCensor.Reconcile")

Walker = Callable[[Path], Iterable[Path]]


def walk_files(root: Path) -> Iterator[Path]:
    """Yield every regular file below root as a path relative to it.

    Hidden files and directories are skipped. Output is sorted.
    """
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if not d.startswith("."))
        for name in sorted(filenames):
            if name.startswith("."):
                continue
            path = Path(dirpath) / name
            if path.is_file():
                yield path.relative_to(root)


class Outcome(str, Enum):
    CLEAN = "clean"
    PROCESSED = "processed"
    SILENCED = "silenced"
    UNACCOUNTED = "unaccounted"


@dataclass(frozen=True)
class FileOrigin:
    """Where a physical file was found, and where its output goes."""
    config_path: Path
    root: Path
    dest_root: Path
    dir_path: str


@dataclass
class ReconcileState:
    """Classification of one run. Built before any task executes."""
    tasks: List[BaseTask] = field(default_factory=list)
    outcomes: Dict[Path, Outcome] = field(default_factory=dict)
    origins: Dict[Path, FileOrigin] = field(default_factory=dict)
    # Directory paths that will contain at least one modified file.
    modified: Set[str] = field(default_factory=set)
    word_counts: Counter = field(default_factory=Counter)

    def classify(self, path: Path, outcome: Outcome, origin: FileOrigin, task: BaseTask) -> None:
        if path in self.outcomes:
            raise ReconcileError(f"{origin.config_path}: file classified twice: {path}")

        self.outcomes[path] = outcome
        self.origins[path] = origin
        self.tasks.append(task)

        if outcome in (Outcome.PROCESSED, Outcome.SILENCED, Outcome.UNACCOUNTED):
            self.modified.add(origin.dir_path)

    def files(self, outcome: Outcome) -> List[Path]:
        return sorted(path for path, o in self.outcomes.items() if o == outcome)

    @property
    def clean(self) -> List[Path]:
        return self.files(Outcome.CLEAN)

    @property
    def processed(self) -> List[Path]:
        return self.files(Outcome.PROCESSED)

    @property
    def silenced(self) -> List[Path]:
        return self.files(Outcome.SILENCED)

    @property
    def unaccounted(self) -> List[Path]:
        return self.files(Outcome.UNACCOUNTED)


@dataclass
class _PhysicalDir:
    origin: FileOrigin
    entries: List[Tuple[LoadedConfig, ReplaceDir]] = field(default_factory=list)


class Reconciler:
    """Builds the task list for a set of configuration documents.

    Args:
        output: Output root. Defaults to ``<root>/output`` of each document.
        walker: Lists the files below a directory, relative to it.
    """

    def __init__(self, output: Optional[Path] = None, walker: Walker = walk_files):
        self.output = output
        self.walker = walker

    def reconcile(self, configs: Sequence[LoadedConfig]) -> ReconcileState:
        state = ReconcileState()
        physical = self._collect(configs)

        for root in sorted(physical):
            self._reconcile_dir(state, root, physical[root])

        logger.debug(
            f"Reconciled {len(state.outcomes)} audio file(s): "
            f"{len(state.clean)} clean, {len(state.processed)} processed, "
            f"{len(state.silenced)} silenced, {len(state.unaccounted)} unaccounted"
        )
        return state

    def _collect(self, configs: Sequence[LoadedConfig]) -> Dict[Path, _PhysicalDir]:
        """Group configured directories by the physical directory they describe."""
        physical: Dict[Path, _PhysicalDir] = {}

        for loaded in configs:
            output = self.output if self.output is not None else loaded.root / DEFAULT_OUTPUT_DIRNAME

            for replace_dir in loaded.config.dirs:
                root = loaded.root / replace_dir.path

                if not root.is_dir():
                    raise ReconcileError(f"{loaded.path}: no such directory: {root}")

                if root not in physical:
                    origin = FileOrigin(
                        config_path=loaded.path,
                        root=root,
                        dest_root=output / replace_dir.path,
                        dir_path=replace_dir.path,
                    )
                    physical[root] = _PhysicalDir(origin)

                physical[root].entries.append((loaded, replace_dir))

        # The walk of an outer directory would also claim every file of an inner one.
        for root, inner in physical.items():
            for parent in root.parents:
                outer = physical.get(parent)
                if outer is not None:
                    raise ReconcileError(
                        f"{inner.origin.config_path}: directory {inner.origin.dir_path} is nested "
                        f"in configured directory {outer.origin.dir_path} ({outer.origin.config_path})"
                    )

        return physical

    def _reconcile_dir(self, state: ReconcileState, root: Path, physical: _PhysicalDir) -> None:
        origin = physical.origin
        index: Dict[Path, FileOrigin] = {}

        # Archive sidecar next to the directory, e.g. `voices/foo.oac` for `voices/foo`.
        if root.name and root.with_suffix(SIDECAR_EXTENSION).is_file():
            sidecar = root.with_suffix(SIDECAR_EXTENSION)
            state.tasks.append(CopyTask(sidecar, origin.dest_root.with_suffix(SIDECAR_EXTENSION)))

        for relative in self.walker(root):
            path = root / relative

            if path.suffix.lower() != WAV_EXTENSION:
                state.tasks.append(CopyTask(path, origin.dest_root / relative))
                continue

            index[path] = origin

        claimed: Set[Path] = set()

        for loaded, replace_dir in physical.entries:
            entry_origin = FileOrigin(
                config_path=loaded.path,
                root=root,
                dest_root=origin.dest_root,
                dir_path=replace_dir.path,
            )
            for i, entry in enumerate(replace_dir.files.iter()):
                path = self._claim(index, claimed, root, loaded, replace_dir, i, entry[0])
                self._classify_entry(state, path, entry_origin, entry)

        for path in sorted(index):
            dest = origin.dest_root / path.relative_to(root)
            state.classify(path, Outcome.UNACCOUNTED, index[path], SilenceTask(path, dest))

    def _claim(
        self,
        index: Dict[Path, FileOrigin],
        claimed: Set[Path],
        root: Path,
        loaded: LoadedConfig,
        replace_dir: ReplaceDir,
        i: int,
        entry_path: str,
    ) -> Path:
        relative = replace_dir.expected_path(entry_path, i, loaded.config.file_extension)
        path = root / relative

        if path in claimed:
            raise ReconcileError(f"{loaded.path}: file configured more than once: {path}")

        if index.pop(path, None) is None:
            raise ReconcileError(f"{loaded.path}: did not expect to censor file: {path}")

        claimed.add(path)
        return path

    def _classify_entry(self, state: ReconcileState, path: Path, origin: FileOrigin, entry) -> None:
        _, replace, transcript = entry
        dest = origin.dest_root / path.relative_to(origin.root)

        if transcript is not None:
            # Marked words without a range: the file cannot be censored precisely yet.
            if transcript.missing:
                state.classify(path, Outcome.SILENCED, origin, SilenceTask(path, dest))
                return

            replace = replace + transcript.replace

        if not replace:
            state.classify(path, Outcome.CLEAN, origin, CopyTask(path, dest))
            return

        state.word_counts.update(r.word.lower() for r in replace)
        state.classify(path, Outcome.PROCESSED, origin, ProcessTask(path, dest, replace))
