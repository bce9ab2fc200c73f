import logging
from pathlib import Path
from typing import Dict, List, Sequence

from .config import LoadedConfig
from .models import Config
from .reconcile import ReconcileState
from .transcript import Transcript
from ..constants import MISSING_TRANSCRIPT

logger = logging.getLogger("BatchCensor.Init")


def initialize_missing(state: ReconcileState, configs: Sequence[LoadedConfig]) -> List[Config]:
    """
    Complete configurations with an entry for every unaccounted file.

    New entries get a `[missing]` transcript, which keeps the file silenced
    until someone times the offending words. The loaded configurations are
    left untouched; updated copies are returned in the same order.
    """
    updated: Dict[Path, Config] = {
        loaded.path: loaded.config.model_copy(deep=True) for loaded in configs
    }
    transcript = Transcript.parse(MISSING_TRANSCRIPT)

    for path in state.unaccounted:
        origin = state.origins[path]
        config = updated[origin.config_path]

        file = path.relative_to(origin.root).as_posix()
        config.insert_file(origin.dir_path, file, transcript)
        logger.debug(f"{origin.config_path}: added {origin.dir_path}/{file}")

    for config in updated.values():
        config.optimize()

    return [updated[loaded.path] for loaded in configs]
