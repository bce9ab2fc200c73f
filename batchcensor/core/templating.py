"""Derive physical file names from configured entries, and back."""

from pathlib import PurePosixPath
from typing import Optional

from ..errors import TemplateError


def as_uppercase_radix(index: int) -> str:
    """Convert a number into an uppercase base-26 string of at least two letters.

    ``0 -> AA``, ``25 -> AZ``, ``26 -> BA``.
    """
    letters = []
    while index > 0:
        index, digit = divmod(index, 26)
        letters.append(chr(ord("A") + digit))

    letters.extend("A" * max(0, 2 - len(letters)))
    return "".join(reversed(letters))


def path_enumeration(index: int, path: str) -> str:
    """Replace the first ``$@`` or run of ``$`` in the path with the enumeration.

    ``$@`` becomes ``as_uppercase_radix(index)``; ``$$$`` becomes ``index + 1``
    zero-padded to three digits.
    """
    at = path.find("$")
    if at < 0:
        return path

    head, rest = path[:at], path[at:]

    if rest.startswith("$@"):
        return head + as_uppercase_radix(index) + rest[2:]

    width = len(rest) - len(rest.lstrip("$"))
    return head + str(index + 1).zfill(width) + rest[width:]


def path_file_prefix(prefix: Optional[str], path: str) -> str:
    if prefix is None:
        return path

    p = PurePosixPath(path)
    if not p.name:
        return prefix
    return str(p.with_name(prefix + p.name))


def path_file_suffix(suffix: Optional[str], path: str) -> str:
    if suffix is None:
        return path

    p = PurePosixPath(path)
    if not p.name:
        return suffix
    return str(p.with_name(p.name + suffix))


def path_with_extension(extension: Optional[str], path: str) -> str:
    if extension is None:
        return path

    p = PurePosixPath(path)
    if not p.name:
        raise TemplateError(f"expected file name in: {path!r}")
    return str(p.with_suffix(f".{extension}"))


def expected_path(
    path: str,
    index: int,
    prefix: Optional[str] = None,
    suffix: Optional[str] = None,
    extension: Optional[str] = None,
) -> str:
    """Apply enumeration, prefix, suffix and extension to a configured path."""
    path = path_enumeration(index, path)
    path = path_file_prefix(prefix, path)
    path = path_file_suffix(suffix, path)
    return path_with_extension(extension, path)


def _rename(p: PurePosixPath, name: str, path: str) -> PurePosixPath:
    if not name:
        raise TemplateError(f"nothing left of file name after templating: {path}")
    return p.with_name(name)


def strip_template(
    path: str,
    prefix: Optional[str] = None,
    suffix: Optional[str] = None,
    extension: Optional[str] = None,
) -> str:
    """Turn a physical file name back into a configured entry.

    Raises:
        TemplateError: If the name does not carry the expected extension,
            prefix or suffix.
    """
    p = PurePosixPath(path)

    if extension is not None:
        if p.suffix != f".{extension}":
            raise TemplateError(f"extension does not match {extension!r}: {path}")
        p = _rename(p, p.stem, path)

    if prefix is not None:
        if not p.name.startswith(prefix):
            raise TemplateError(f"bad prefix in file, expected {prefix!r}: {path}")
        p = _rename(p, p.name[len(prefix):], path)

    if suffix is not None:
        if not p.name.endswith(suffix):
            raise TemplateError(f"bad suffix in file, expected {suffix!r}: {path}")
        p = _rename(p, p.name[:len(p.name) - len(suffix)], path)

    return str(p)
