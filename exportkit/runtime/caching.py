"""
Dynlib build context caching.

The cache maps a source identity, either a file path or the fingerprint
of inline code, to the :class:`SourceDynlib` created for it. Entries are
never evicted; a stale entry is regenerated in place.

The cache is not thread-safe. Callers that share one between threads
must serialize access.
"""

import hashlib
import os
import tempfile
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .dynlib import Platform, SourceDynlib
from ..attributes.parser import SourceParser
from ..utils.config import BuildConfig
from ..utils.exceptions import FileIOError
from ..utils.fileinfo import remove_file
from ..utils.logging import ExportsLogger, get_logger

logger = get_logger(__name__)


def code_fingerprint(code: str) -> str:
    """Hex digest identifying a piece of inline code."""
    return hashlib.sha256(code.encode('utf-8')).hexdigest()


@dataclass
class _CacheEntry:
    dynlib: SourceDynlib
    file: Optional[str] = None
    code: Optional[str] = None


class DynlibCache:
    """
    Append-only cache of build contexts.

    File entries and code entries live in separate key spaces: a lookup
    by code never returns an entry inserted by file, and vice versa.
    """

    def __init__(self) -> None:
        self._entries: List[_CacheEntry] = []

    def __len__(self) -> int:
        return len(self._entries)

    def insert_file(self, file: str, dynlib: SourceDynlib) -> None:
        """Insert a build context keyed by source file path."""
        self._entries.append(_CacheEntry(dynlib=dynlib, file=str(file)))

    def insert_code(self, code: str, dynlib: SourceDynlib) -> None:
        """Insert a build context keyed by inline code."""
        self._entries.append(_CacheEntry(dynlib=dynlib, code=code_fingerprint(code)))

    def lookup_by_file(self, file: str) -> Optional[SourceDynlib]:
        """Return the build context for a file path, or None."""
        file = str(file)
        for entry in self._entries:
            if entry.file is not None and entry.file == file:
                return entry.dynlib
        return None

    def lookup_by_code(self, code: str) -> Optional[SourceDynlib]:
        """Return the build context for inline code, or None."""
        fingerprint = code_fingerprint(code)
        for entry in self._entries:
            if entry.code is not None and entry.code == fingerprint:
                return entry.dynlib
        return None


def _write_code_file(code: str, build_config: BuildConfig) -> str:
    """Save inline code to a temporary source file."""
    try:
        fd, path = tempfile.mkstemp(prefix=build_config.build_dir_prefix, suffix=".cpp",
                                    dir=build_config.temp_dir)
        with os.fdopen(fd, 'w', encoding='utf-8') as f:
            f.write(code)
    except OSError as e:
        raise FileIOError.from_os_error(build_config.temp_dir or tempfile.gettempdir(), e) from e
    return path


def resolve_build_context(cache: DynlibCache,
                          source_path: Optional[str] = None,
                          code: Optional[str] = None,
                          platform: Optional[Platform] = None,
                          build_config: Optional[BuildConfig] = None,
                          parser: Optional[SourceParser] = None) -> Tuple[SourceDynlib, bool]:
    """
    Find or create the build context for a source file or inline code.

    When ``code`` is non-empty it is the cache identity; ``source_path``
    is then the file holding that code, and is created in a temporary
    location when omitted. Empty code means no inline code.

    Args:
        cache: Cache shared across requests
        source_path: Source file to build
        code: Inline code to build
        platform: Path separator and dynlib extension
        build_config: Build directory and module naming settings
        parser: Source parser

    Returns:
        Tuple of (build context, whether a build is required)

    Raises:
        ValueError: If neither ``source_path`` nor non-empty ``code`` is given
        SourceNotFoundError, FileIOError, ParseError
    """
    if source_path is None and not code:
        raise ValueError("Either source_path or code is required")

    build_config = build_config or BuildConfig()
    exports_logger = ExportsLogger(__name__)
    key = f"code:{code_fingerprint(code)[:16]}" if code else f"file:{source_path}"

    if code:
        dynlib = cache.lookup_by_code(code)
    else:
        dynlib = cache.lookup_by_file(source_path)

    if dynlib is None:
        exports_logger.log_cache_miss(key)
        code_file = None
        if source_path is None:
            source_path = code_file = _write_code_file(code, build_config)
        try:
            dynlib = SourceDynlib(source_path, platform, build_config, parser)
        except Exception:
            if code_file is not None:
                remove_file(code_file)
            raise
        if code:
            cache.insert_code(code, dynlib)
        else:
            cache.insert_file(source_path, dynlib)
        return dynlib, True

    exports_logger.log_cache_hit(key)

    if dynlib.is_source_dirty():
        logger.debug(f"Source for {dynlib.module_name} changed, regenerating")
        dynlib.regenerate_source()
        return dynlib, True

    if not dynlib.is_built():
        logger.debug(f"{dynlib.dynlib_path} not built yet")
        return dynlib, True

    return dynlib, False
