"""
File discovery — Expand root paths into the sorted list of files to check.

Patterns are matched against the path relative to its root with
`fnmatch`, so `*` also crosses directory separators. A leading `**/`
additionally matches at the root itself (`**/*.py` matches `setup.py`).
"""

from __future__ import annotations

import os
from fnmatch import fnmatchcase
from pathlib import Path
from typing import NamedTuple


class Discovery(NamedTuple):
    files: list[str]
    missing: list[str]


def matches(relative: str, pattern: str) -> bool:
    if fnmatchcase(relative, pattern):
        return True
    return pattern.startswith("**/") and fnmatchcase(relative, pattern[3:])


def is_selected(relative: str, include: tuple[str, ...], exclude: tuple[str, ...]) -> bool:
    if any(matches(relative, pattern) for pattern in exclude):
        return False
    return any(matches(relative, pattern) for pattern in include)


def discover(
    roots: list[str],
    include: tuple[str, ...],
    exclude: tuple[str, ...],
) -> Discovery:
    """
    Walk every root and keep the files selected by the patterns.

    A root may itself be a file, in which case it is matched by name.
    Roots that do not exist are returned in `missing`.
    """
    found: set[str] = set()
    missing: list[str] = []
    for root in roots:
        base = Path(root)
        if base.is_file():
            if is_selected(base.name, include, exclude):
                found.add(base.as_posix())
            continue
        if not base.is_dir():
            missing.append(root)
            continue
        for dirpath, dirnames, filenames in os.walk(base):
            dirnames.sort()
            for name in filenames:
                path = Path(dirpath) / name
                relative = path.relative_to(base).as_posix()
                if is_selected(relative, include, exclude):
                    found.add(path.as_posix())
    return Discovery(files=sorted(found), missing=missing)
