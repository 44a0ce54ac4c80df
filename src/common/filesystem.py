"""Filesystem and path helpers.

All paths handled by the bundler are canonicalized to forward slashes with
``.`` and ``..`` segments resolved, so string comparison of two absolute
paths is a reliable identity check.
"""
from __future__ import annotations

import contextlib
import logging
import os
import posixpath
import shutil
from typing import Iterator

from constants import Constants
from common.exceptions import CannotDetectWorkingDirectory, DirectoryDoesNotExist
from common.logging_utils import extra_context, is_debug_enabled

logger = logging.getLogger(__name__)


def canonicalize(path: str) -> str:
    """Normalize separators and resolve ``.``/``..`` segments without touching the disk."""
    if path == "":
        return ""
    path = path.replace("\\", "/")
    normalized = posixpath.normpath(path)
    # normpath keeps a leading double slash as-is
    if normalized.startswith("//"):
        normalized = "/" + normalized.lstrip("/")
    return "" if normalized == "." else normalized


def is_absolute(path: str) -> bool:
    return path.replace("\\", "/").startswith("/")


def join(*parts: str) -> str:
    """Join path segments and canonicalize the result."""
    return canonicalize(posixpath.join(*[p.replace("\\", "/") for p in parts if p != ""]))


def make_absolute(path: str, base_path: str) -> str:
    """Turn ``path`` into an absolute path using ``base_path`` for relative input.

    Raises:
        ValueError: If ``base_path`` is not absolute.
    """
    if not is_absolute(base_path):
        raise ValueError(f'The base path "{base_path}" is not an absolute path.')
    if is_absolute(path):
        return canonicalize(path)
    return join(base_path, path)


def make_relative(path: str, base_path: str) -> str:
    """Express ``path`` relative to ``base_path``.

    A path equal to the base path becomes an empty string.
    """
    absolute = make_absolute(path, base_path)
    base = canonicalize(base_path)
    if absolute == base:
        return ""
    return posixpath.relpath(absolute, base)


def get_extension(path: str, lowercase: bool = True) -> str:
    """Return the file extension without the leading dot."""
    extension = posixpath.splitext(path.replace("\\", "/"))[1].lstrip(".")
    return extension.lower() if lowercase else extension


def dump_file(filename: str, contents: str) -> None:
    """Write ``contents`` to ``filename``, creating parent directories as needed."""
    directory = os.path.dirname(filename)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(filename, "w", encoding="utf-8") as handle:
        handle.write(contents)


def backup_file(filename: str) -> str:
    """Copy ``filename`` next to itself with a ``.bak`` suffix and return the copy's path."""
    backup = f"{filename}{Constants.BACKUP_SUFFIX}"
    shutil.copyfile(filename, backup)
    if is_debug_enabled(logger):
        logger.debug(
            "Created backup",
            extra=extra_context(event="backup", component="filesystem", target=backup),
        )
    return backup


@contextlib.contextmanager
def execute_in_directory(directory: str) -> Iterator[str]:
    """Temporarily switch the working directory.

    The previous working directory is restored on every exit path, including
    exceptions raised inside the block.

    Raises:
        CannotDetectWorkingDirectory: If the current directory cannot be read.
        DirectoryDoesNotExist: If ``directory`` is missing.
    """
    try:
        previous = os.getcwd()
    except OSError as exc:
        raise CannotDetectWorkingDirectory(exc) from exc

    if not os.path.isdir(directory):
        raise DirectoryDoesNotExist(directory)

    os.chdir(directory)
    try:
        yield directory
    finally:
        os.chdir(previous)
