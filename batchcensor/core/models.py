from pathlib import PurePosixPath
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, RootModel, model_serializer, model_validator

from .templating import expected_path, strip_template
from .transcript import Replace, Transcript

# (path, replacements, transcript) as seen by the reconciliation engine.
FileEntry = Tuple[str, List[Replace], Optional[Transcript]]


def _is_empty(value: Any) -> bool:
    return value is None or value == [] or value == {}


class _Document(BaseModel):
    """Base for configuration sections. Dumps without empty keys."""

    @model_serializer(mode="wrap")
    def _skip_empty(self, handler):
        return {key: value for key, value in handler(self).items() if not _is_empty(value)}


class ReplaceFile(_Document):
    model_config = ConfigDict(extra="forbid")

    path: str
    # Transcript of the recording.
    transcript: Optional[Transcript] = None
    # Explicit replacements. If there are none and no transcript, the file is clean.
    replace: List[Replace] = Field(default_factory=list)


class FileList(RootModel[List[ReplaceFile]]):
    """Files as a list of entries with explicit replacements."""

    root: List[ReplaceFile] = Field(default_factory=list)

    def iter(self) -> Iterator[FileEntry]:
        for entry in self.root:
            yield entry.path, list(entry.replace), entry.transcript

    def insert(self, path: str, transcript: Transcript) -> None:
        self.root.append(ReplaceFile(path=path, transcript=transcript))

    def is_empty(self) -> bool:
        return not self.root


class FileMap(RootModel[Dict[str, Transcript]]):
    """Files as an ordered mapping of path to transcript."""

    root: Dict[str, Transcript] = Field(default_factory=dict)

    def iter(self) -> Iterator[FileEntry]:
        for path, transcript in self.root.items():
            yield path, [], transcript

    def insert(self, path: str, transcript: Transcript) -> None:
        self.root[path] = transcript

    def is_empty(self) -> bool:
        return not self.root


class FileMapList(RootModel[List[Dict[str, Transcript]]]):
    """Legacy form: a list of path to transcript mappings, one per batch."""

    root: List[Dict[str, Transcript]] = Field(default_factory=list)

    def iter(self) -> Iterator[FileEntry]:
        for batch in self.root:
            for path, transcript in batch.items():
                yield path, [], transcript

    def insert(self, path: str, transcript: Transcript) -> None:
        self.root.append({path: transcript})

    def is_empty(self) -> bool:
        return all(not batch for batch in self.root)


Files = Union[FileList, FileMap, FileMapList]


class ReplaceDir(_Document):
    """One physical directory: its templating rules and its files."""

    model_config = ConfigDict(populate_by_name=True)

    path: str
    prefix: Optional[str] = Field(default=None, alias="file_prefix")
    suffix: Optional[str] = None
    file_extension: Optional[str] = None
    # Shapes are tried in order; the first that validates wins.
    files: Files = Field(default_factory=FileMapList, union_mode="left_to_right")

    @model_validator(mode="before")
    @classmethod
    def _null_files(cls, data: Any) -> Any:
        # `files:` with no value is the same as leaving the key out.
        if isinstance(data, dict) and "files" in data and data["files"] is None:
            data = {key: value for key, value in data.items() if key != "files"}
        return data

    @model_serializer(mode="wrap")
    def _skip_empty(self, handler):
        data = handler(self)
        if self.files.is_empty():
            data.pop("files", None)
        return {key: value for key, value in data.items() if not _is_empty(value)}

    def effective_extension(self, default: Optional[str] = None) -> Optional[str]:
        return self.file_extension if self.file_extension is not None else default

    def expected_path(self, path: str, index: int, default_extension: Optional[str] = None) -> str:
        """Physical path (relative to the directory) for the configured entry at index."""
        return expected_path(
            path,
            index,
            prefix=self.prefix,
            suffix=self.suffix,
            extension=self.effective_extension(default_extension),
        )

    def contains(self, path: str) -> bool:
        """Test if a physical file fits this directory's prefix, suffix and extension."""
        p = PurePosixPath(path)
        if not p.name:
            return False

        stem = p.stem
        if self.prefix is not None and not stem.startswith(self.prefix):
            return False
        if self.suffix is not None and not stem.endswith(self.suffix):
            return False
        if self.file_extension is not None and p.suffix != f".{self.file_extension}":
            return False
        return True

    def insert_file(self, default_extension: Optional[str], file: str, transcript: Transcript) -> None:
        """Insert a physical file as a new entry, stripping templating from its name."""
        entry = strip_template(
            file,
            prefix=self.prefix,
            suffix=self.suffix,
            extension=self.effective_extension(default_extension),
        )
        self.files.insert(entry, transcript)

    def sort_key(self) -> Tuple[str, str, str, str]:
        return (self.path, self.prefix or "", self.suffix or "", self.file_extension or "")


class Config(_Document):
    """A single configuration document."""

    # Default extension for every directory that does not set its own.
    file_extension: Optional[str] = None
    dirs: List[ReplaceDir] = Field(default_factory=list)

    def insert_file(self, dir_path: str, file: str, transcript: Transcript) -> None:
        """Insert a file into the first matching directory, creating one if needed."""
        for replace_dir in self.dirs:
            if replace_dir.path == dir_path and replace_dir.contains(file):
                break
        else:
            replace_dir = ReplaceDir(path=dir_path, files=FileMapList())
            self.dirs.append(replace_dir)

        replace_dir.insert_file(self.file_extension, file, transcript)

    def optimize(self) -> None:
        self.dirs.sort(key=ReplaceDir.sort_key)
