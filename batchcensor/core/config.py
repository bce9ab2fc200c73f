import os
import yaml
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, TextIO
from dotenv import load_dotenv
from pydantic import ValidationError

from .models import Config
from ..constants import CONFIG_EXTENSIONS, DEFAULT_CONFIG_FILENAMES
from ..errors import ConfigError

# Load environment variables from .env file
load_dotenv()

logger = logging.getLogger("BatchCensor.Config")


@dataclass
class LoadedConfig:
    """A configuration document together with where it came from."""
    path: Path
    root: Path
    config: Config


def load_yaml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"could not open configuration: {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"failed to parse: {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"failed to parse: {path}: expected a mapping at the top level")
    return data


def load_config(path: Path, root: Optional[Path] = None) -> LoadedConfig:
    """Load and validate a single configuration file.

    Args:
        path: The YAML document to load.
        root: Project root the document's directories are relative to.
            Defaults to the directory containing the document.
    """
    data = load_yaml(path)

    try:
        config = Config.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"failed to parse: {path}: {e}") from e

    if root is None:
        root = path.parent

    logger.debug(f"Loaded {path} ({len(config.dirs)} dir(s), root {root})")
    return LoadedConfig(path=path, root=root, config=config)


def discover_configs(config_dir: Path) -> List[Path]:
    """Find every configuration document below a directory, skipping hidden entries."""
    if not config_dir.is_dir():
        raise ConfigError(f"no such configuration directory: {config_dir}")

    found = []
    for dirpath, dirnames, filenames in os.walk(config_dir):
        dirnames[:] = sorted(d for d in dirnames if not d.startswith("."))
        for name in filenames:
            if name.startswith("."):
                continue
            if Path(name).suffix.lower() in CONFIG_EXTENSIONS:
                found.append(Path(dirpath) / name)

    return sorted(found)


def resolve_config_paths(configs: Iterable[str] = (), config_dir: Optional[str] = None) -> List[Path]:
    """Collect configuration files from explicit paths and a directory.

    With neither, fall back to a default file in the working directory.
    """
    paths = [Path(c) for c in configs]

    if config_dir:
        paths.extend(discover_configs(Path(config_dir)))

    if not paths:
        for name in DEFAULT_CONFIG_FILENAMES:
            candidate = Path(name)
            if candidate.exists():
                paths.append(candidate)
                break

    if not paths:
        raise ConfigError(
            "no configuration given: use --config or --config-dir, "
            f"or create {DEFAULT_CONFIG_FILENAMES[0]} in the current directory"
        )

    return paths


def load_configs(paths: Iterable[Path], root: Optional[Path] = None) -> List[LoadedConfig]:
    return [load_config(path, root=root) for path in paths]


def dump_configs(configs: Iterable[Config], stream: TextIO) -> None:
    """Write configuration documents as a YAML stream, one document each."""
    documents = [config.model_dump(mode="json", by_alias=True) for config in configs]
    yaml.safe_dump_all(documents, stream, sort_keys=False, allow_unicode=True, explicit_start=True)
