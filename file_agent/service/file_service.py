from __future__ import annotations

import os
import shutil

from ..domain import walker
from ..domain.codec import decode_text, encode_bytes
from ..domain.errors import AgentError, NotFoundError
from ..domain.walker import FileInfo
from ..logging_conf import get_logger

logger = get_logger("service.files")


def _ensure_parent(path: str, message: str) -> None:
    """Create the missing ancestors of `path`, wrapping failures in AgentError."""
    parent = os.path.dirname(path)
    if parent and not os.path.exists(parent):
        try:
            os.makedirs(parent)
        except OSError as e:
            raise AgentError(f"{message}: {e}") from e


def _copy_file(source: str, destination: str) -> None:
    shutil.copyfile(source, destination)
    shutil.copymode(source, destination)


def _copy_tree(source: str, destination: str) -> None:
    """Copy `source` into `destination`, merging with whatever is there.

    Stops at the first error; entries copied so far are left in place.
    """
    if not os.path.exists(destination):
        os.makedirs(destination)
    with os.scandir(source) as it:
        entries = list(it)
    for entry in entries:
        target = os.path.join(destination, entry.name)
        if entry.is_dir():
            _copy_tree(entry.path, target)
        else:
            _copy_file(entry.path, target)


# ------------------------
# Use-cases
# ------------------------

def read_text(*, path: str) -> str:
    """Return the file at `path` decoded as UTF-8."""
    # newline="" keeps line endings exactly as stored.
    with open(path, encoding="utf-8", newline="") as fh:
        content = fh.read()
    logger.info("file.read", extra={"event": "file_read", "path": path})
    return content


def read_binary(*, path: str) -> str:
    """Return the raw bytes at `path` as base64 text."""
    with open(path, "rb") as fh:
        data = fh.read()
    logger.info(
        "file.read_binary",
        extra={"event": "file_read_binary", "path": path, "bytes": len(data)},
    )
    return encode_bytes(data)


def write_text(*, path: str, content: str) -> str:
    """Replace the file at `path` with `content`. Parents must already exist."""
    with open(path, "w", encoding="utf-8", newline="") as fh:
        fh.write(content)
    logger.info("file.write", extra={"event": "file_write", "path": path})
    return "File written successfully"


def write_binary(*, path: str, content: str) -> str:
    """Decode base64 `content` and replace the file at `path` with the bytes.

    Nothing is written when decoding fails.
    """
    data = decode_text(content)
    try:
        with open(path, "wb") as fh:
            fh.write(data)
    except OSError as e:
        raise AgentError(f"File write error: {e}") from e
    logger.info(
        "file.write_binary",
        extra={"event": "file_write_binary", "path": path, "bytes": len(data)},
    )
    return "Binary file written successfully"


def delete(*, path: str) -> str:
    """Remove a file, or a directory and everything in it."""
    if os.path.isfile(path):
        os.remove(path)
    elif os.path.isdir(path):
        shutil.rmtree(path)
    else:
        raise NotFoundError("Path does not exist")
    logger.info("file.delete", extra={"event": "file_delete", "path": path})
    return "Deleted successfully"


def create(*, path: str, is_directory: bool) -> str:
    """Create a directory chain, or an empty file (truncating an existing one)."""
    if is_directory:
        os.makedirs(path, exist_ok=True)
        kind = "Directory"
    else:
        _ensure_parent(path, "Failed to create parent directory")
        with open(path, "w", encoding="utf-8"):
            pass
        kind = "File"
    logger.info(
        "file.create",
        extra={"event": "file_create", "path": path, "is_directory": is_directory},
    )
    return f"{kind} created successfully"


def move(*, source: str, destination: str) -> str:
    """Rename `source` to `destination`, creating destination parents first.

    Overwrite and cross-device behavior are whatever os.replace does on the
    host platform; an existing destination file is replaced.
    """
    if not os.path.exists(source):
        raise NotFoundError("Source file does not exist")
    _ensure_parent(destination, "Failed to create destination directory")
    os.replace(source, destination)
    logger.info(
        "file.move",
        extra={"event": "file_move", "source": source, "destination": destination},
    )
    return "File moved successfully"


def copy(*, source: str, destination: str) -> str:
    """Copy a file, or a directory tree recursively, to `destination`."""
    if not os.path.exists(source):
        raise NotFoundError("Source file does not exist")
    _ensure_parent(destination, "Failed to create destination directory")
    if os.path.isdir(source):
        _copy_tree(source, destination)
    else:
        _copy_file(source, destination)
    logger.info(
        "file.copy",
        extra={"event": "file_copy", "source": source, "destination": destination},
    )
    return "File copied successfully"


def search(*, directory: str, pattern: str) -> list[FileInfo]:
    """Bounded, case-insensitive name search below `directory`."""
    found = walker.search(directory, pattern)
    logger.info(
        "dir.search",
        extra={
            "event": "dir_search",
            "directory": directory,
            "pattern": pattern,
            "count": len(found),
        },
    )
    return found


def list_directory(*, path: str) -> list[FileInfo]:
    """Shallow listing of `path`."""
    items = walker.list_directory(path)
    logger.info(
        "dir.list",
        extra={"event": "dir_list", "path": path, "count": len(items)},
    )
    return items
