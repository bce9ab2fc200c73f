"""Package manifest (.oiv) listing the audio archives touched by a run."""

import sys
import logging
from pathlib import Path, PurePosixPath
from typing import Dict, Iterable, List, Optional

from jinja2 import Template
from pydantic import BaseModel, Field

from ..constants import MANIFEST_ARCHIVE_ROOT, MANIFEST_ARCHIVE_TYPE, MANIFEST_AUDIO_EXTENSION
from ..errors import ManifestError

logger = logging.getLogger("BatchCensor.Manifest")

MANIFEST_TEMPLATE = "oiv_manifest.xml"


class ManifestAdd(BaseModel):
    source: str
    value: str


class ManifestArchive(BaseModel):
    path: str
    create_if_not_exists: str = "True"
    type: str = MANIFEST_ARCHIVE_TYPE
    add: List[ManifestAdd] = Field(default_factory=list)


class OivContent(BaseModel):
    archives: List[ManifestArchive] = Field(default_factory=list)


def load_template(template_name: str) -> str:
    """Read a template shipped in batchcensor/templates/{template_name}.j2."""
    template_path = Path(__file__).parent.parent / "templates" / f"{template_name}.j2"
    if not template_path.exists():
        raise ManifestError(f"template not found: {template_path}")
    with open(template_path, "r", encoding="utf-8") as f:
        return f.read()


def build_manifest(modified: Iterable[str]) -> OivContent:
    """
    Group modified directories into the archives that contain them.

    A directory `<archive>/<audio>` becomes `<audio>.awc` inside
    `x64/audio/sfx/<archive>.rpf`.
    """
    archives: Dict[str, ManifestArchive] = {}

    for m in sorted(modified):
        parts = PurePosixPath(m).parts
        if len(parts) < 2:
            raise ManifestError(f"expected <archive>/<audio file> for modified directory: {m!r}")

        rpf, audio_file = parts[0], parts[1]

        archive = archives.get(rpf)
        if archive is None:
            archive = ManifestArchive(path=f"{MANIFEST_ARCHIVE_ROOT}/{rpf}.rpf")
            archives[rpf] = archive

        archive.add.append(ManifestAdd(
            source=f"{m}{MANIFEST_AUDIO_EXTENSION}",
            value=f"{audio_file}{MANIFEST_AUDIO_EXTENSION}",
        ))

    return OivContent(archives=[archives[key] for key in sorted(archives)])


def render_manifest(content: OivContent) -> str:
    template = Template(load_template(MANIFEST_TEMPLATE), autoescape=True)
    return template.render(archives=content.archives) + "\n"


def write_manifest(modified: Iterable[str], output: Optional[str] = None) -> None:
    """Write the manifest to a file, or to stdout when output is None or `-`."""
    text = render_manifest(build_manifest(modified))

    if output is None or output == "-":
        sys.stdout.write(text)
        return

    with open(output, "w", encoding="utf-8") as f:
        f.write(text)
    logger.info(f"Wrote manifest: {output}")
