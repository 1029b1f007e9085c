from __future__ import annotations

import re
from dataclasses import dataclass

# name.~12~ (numbered) or name~ (single) backup suffix
_VERSION_SUFFIX = re.compile(r"(?:\.~\d+~|~)$")
_DIGITS = re.compile(r"\d+")


@dataclass(frozen=True)
class BackupVersion:
    """One numbered backup on disk."""

    number: int
    path: str


def file_name_sans_versions(filename: str) -> str:
    """Strip a trailing ``.~N~`` or ``~`` backup suffix from ``filename``."""
    return _VERSION_SUFFIX.sub("", filename, count=1)


def parse_version(filename: str, start: int | None = None) -> int:
    """Return the first run of digits in ``filename`` at or after ``start``.

    ``start`` defaults to the length of the version-stripped name, so
    ``parse_version("/tmp/a.txt.~12~")`` is 12.

    Raises ValueError if no digits follow ``start``.
    """
    if start is None:
        start = len(file_name_sans_versions(filename))
    match = _DIGITS.search(filename, start)
    if match is None:
        raise ValueError(f"no version number in {filename!r} after position {start}")
    return int(match.group())
