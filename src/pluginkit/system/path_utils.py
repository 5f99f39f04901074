"""File system helpers used when reading, writing and archiving configuration files."""

import re
from pathlib import Path

_DUPLICATE_SUFFIX = re.compile(r"^(?P<base>.*)\((?P<count>[0-9]+)\)$")


def _split_name(name: str) -> tuple[str, str]:
    """Split a file name at its last dot into stem and extension (dot included)."""
    index = name.rfind(".")
    if index == -1:
        return name, ""
    return name[:index], name[index:]


def next_duplicate_name(name: str) -> str:
    """Return the name that follows ``name`` in a series of duplicates.

    ``"config.yml"`` becomes ``"config (1).yml"`` and ``"config (3).yml"``
    becomes ``"config (4).yml"``. A parenthesized suffix that is not an
    integer does not count as a duplicate marker.
    """
    stem, extension = _split_name(name)
    stem = stem.strip()

    match = _DUPLICATE_SUFFIX.match(stem)
    if match:
        base = match.group("base")
        # "a b(3)" becomes "a b (4)", but "config(3)" stays without a space.
        if " " in stem and not base.endswith(" "):
            base += " "
        count = int(match.group("count")) + 1
        return f"{base}({count}){extension}"

    return f"{stem} (1){extension}"


def unique_path(path: Path) -> Path:
    """Return ``path`` or, if it exists, the first free duplicate name beside it.

    Works for files and directories alike. The check runs against the live
    file system, so the result is only guaranteed free at the time of the call.
    """
    path = Path(path)

    while path.exists():
        path = path.with_name(next_duplicate_name(path.name))

    return path


def read_text(path: Path, encoding: str = "utf-8") -> str | None:
    """Read a file, returning None if it does not exist or is a directory."""
    path = Path(path)
    if not path.is_file():
        return None
    return path.read_text(encoding=encoding)


def write_text(content: str, path: Path, encoding: str = "utf-8") -> None:
    """Write content to a file, creating parent directories as needed.

    Raises:
        IsADirectoryError: If path points to a directory
    """
    path = Path(path)
    if path.is_dir():
        raise IsADirectoryError(f"Destination path is a directory: {path}")

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding=encoding, newline="")

