from __future__ import annotations

import os
from collections.abc import Iterator
from itertools import islice
from pathlib import Path
from typing import Optional

from pydantic import BaseModel

__all__ = [
    "MAX_VISITED_ENTRIES",
    "FileInfo",
    "display_name",
    "walk",
    "search",
    "list_directory",
]

# Upper bound on entries (files and directories, root included) a search visits.
MAX_VISITED_ENTRIES = 1000


class FileInfo(BaseModel):
    """Snapshot of a single directory entry."""

    path: str
    name: str
    is_file: bool
    size: Optional[int] = None  # None when metadata could not be read


def display_name(raw: str) -> str:
    """Return `raw` as valid UTF-8 text, with undecodable bytes replaced by U+FFFD.

    Names that are not UTF-8 come back from os with lone surrogates, which
    cannot be serialized to JSON.
    """
    return os.fsencode(raw).decode("utf-8", "replace")


def _file_info(path: str, name: str) -> FileInfo:
    try:
        size: int | None = os.lstat(path).st_size
    except OSError:
        size = None
    return FileInfo(
        path=display_name(path),
        name=display_name(name),
        is_file=os.path.isfile(path),
        size=size,
    )


def _children(directory: str) -> Iterator[os.DirEntry]:
    try:
        with os.scandir(directory) as it:
            return iter(list(it))
    except OSError:
        return iter(())


def _is_real_dir(entry: os.DirEntry) -> bool:
    try:
        return entry.is_dir(follow_symlinks=False)
    except OSError:
        return False


def walk(root: str) -> Iterator[tuple[str, str]]:
    """Yield (path, name) for `root` and everything below it, depth-first.

    The root comes first, then each directory's entries in the order the OS
    returns them, descending into a subdirectory as soon as it is yielded.
    Directory symlinks are not followed. Entries or directories that cannot
    be read are skipped; an unreadable root yields nothing.
    """
    try:
        os.stat(root)
    except OSError:
        return
    yield root, Path(root).name

    # Explicit stack so deep trees don't hit the recursion limit.
    stack = [_children(root)]
    while stack:
        entry = next(stack[-1], None)
        if entry is None:
            stack.pop()
            continue
        yield entry.path, entry.name
        if _is_real_dir(entry):
            stack.append(_children(entry.path))


def search(directory: str, pattern: str, *, limit: int = MAX_VISITED_ENTRIES) -> list[FileInfo]:
    """Return entries under `directory` whose name contains `pattern`.

    Matching is a case-insensitive substring test on the entry name. Only the
    first `limit` visited entries are considered, so large trees may return
    fewer matches than exist; truncation is not reported.
    """
    needle = pattern.lower()
    return [
        _file_info(path, name)
        for path, name in islice(walk(directory), limit)
        if needle in display_name(name).lower()
    ]


def list_directory(directory: str) -> list[FileInfo]:
    """Return the immediate children of `directory`.

    Raises:
        OSError: if the directory itself cannot be opened.
    """
    with os.scandir(directory) as it:
        return [_file_info(entry.path, entry.name) for entry in it]
