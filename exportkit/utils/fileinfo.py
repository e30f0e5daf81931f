"""
File existence and timestamp queries.

Thin wrappers around the platform filesystem calls used by the
generators and the dynlib cache. OS failures other than "no such file"
are reported as :class:`FileIOError`.
"""

import errno
import os
import shutil
from typing import Optional

from .exceptions import FileIOError
from .logging import get_logger

logger = get_logger(__name__)


class FileInfo:
    """
    Snapshot of a path's existence and last-modified time.

    The snapshot is taken on construction; create a new instance to
    observe later changes.
    """

    def __init__(self, path: str):
        self.path = str(path)
        self.exists = False
        self.last_modified = 0.0

        try:
            stat_result = os.stat(self.path)
        except FileNotFoundError:
            return
        except OSError as e:
            if e.errno == errno.ENOENT:
                return
            raise FileIOError.from_os_error(self.path, e) from e

        self.exists = True
        self.last_modified = stat_result.st_mtime

    def __repr__(self) -> str:
        return f"FileInfo(path={self.path!r}, exists={self.exists}, last_modified={self.last_modified})"


def read_file(path: str) -> Optional[str]:
    """
    Read a text file if it exists.

    Args:
        path: File to read

    Returns:
        File contents, or None if the file does not exist. Bytes that are
        not valid UTF-8 are kept as surrogate escapes.

    Raises:
        FileIOError: If the file exists but cannot be read
    """
    if not FileInfo(path).exists:
        return None
    try:
        with open(path, 'r', encoding='utf-8', errors='surrogateescape', newline='') as f:
            return f.read()
    except OSError as e:
        raise FileIOError.from_os_error(path, e) from e


def write_file(path: str, content: str, append: bool = False) -> None:
    """
    Write (or append) text to a file.

    Raises:
        FileIOError: If the file cannot be opened or written
    """
    mode = 'a' if append else 'w'
    try:
        with open(path, mode, encoding='utf-8', newline='') as f:
            f.write(content)
    except OSError as e:
        raise FileIOError.from_os_error(path, e) from e


def copy_file(source: str, destination: str) -> None:
    """Copy ``source`` over ``destination``, replacing any existing file."""
    try:
        shutil.copyfile(source, destination)
    except OSError as e:
        raise FileIOError.from_os_error(destination, e) from e


def remove_file(path: str) -> bool:
    """
    Remove a file if it exists.

    Returns:
        True if a file was removed, False if there was nothing to remove
    """
    if not FileInfo(path).exists:
        return False
    try:
        os.remove(path)
    except OSError as e:
        raise FileIOError.from_os_error(path, e) from e
    logger.debug(f"Removed {path}")
    return True


def create_directory(path: str) -> None:
    """Recursively create a directory if it does not already exist."""
    if FileInfo(path).exists:
        return
    try:
        os.makedirs(path, exist_ok=True)
    except OSError as e:
        raise FileIOError.from_os_error(path, e) from e
