"""
Base class for exports generators.

Each generator owns one target file. It snapshots the file on
construction, refuses to touch files it did not generate, accumulates
its output in memory and only writes when the output differs from the
snapshot.
"""

import os
from abc import ABC, abstractmethod
from typing import List, Sequence

from ..attributes.model import SourceFileAttributes
from ..utils.exceptions import OverwriteConflictError
from ..utils.fileinfo import FileInfo, create_directory, read_file, remove_file, write_file
from ..utils.logging import get_logger

logger = get_logger(__name__)

# Written into every generated file so that later runs can tell a
# generated file from a hand-written one.
GENERATOR_TOKEN = "10BE3573-1514-4C36-9D1C-5A225CD40393"
GENERATOR_NOTICE = "This file was generated by Rcpp::compileAttributes"

# Module under which all package exports are registered
EXPORTS_MODULE_NAME = "RcppExports"


class ExportsGenerator(ABC):
    """
    Abstract generator for a single exports artifact.

    Subclasses are driven in strict order: :meth:`write_begin`, then
    :meth:`write_functions` once per source file, :meth:`write_end`,
    and finally :meth:`commit`.
    """

    def __init__(self, target_file: str, comment_prefix: str):
        """
        Initialize generator and snapshot the existing target.

        Args:
            target_file: Path of the artifact this generator owns
            comment_prefix: Line comment marker for the artifact's language

        Raises:
            FileIOError: If the existing target cannot be read
            OverwriteConflictError: If the target exists and was not generated by us
        """
        self._target_file = str(target_file)
        self._comment_prefix = comment_prefix
        self._chunks: List[str] = []

        existing = read_file(self._target_file)
        self._existing_code = existing if existing is not None else ""

        if not self.is_safe_to_overwrite():
            raise OverwriteConflictError(self._target_file)

    @property
    def target_file(self) -> str:
        return self._target_file

    @property
    def comment_prefix(self) -> str:
        return self._comment_prefix

    @property
    def code(self) -> str:
        """Code accumulated so far, without header or preamble."""
        return "".join(self._chunks)

    def write(self, text: str) -> None:
        """Append text to the generated code."""
        self._chunks.append(text)

    def is_safe_to_overwrite(self) -> bool:
        """True if the target is absent or carries the generator token."""
        return not self._existing_code or GENERATOR_TOKEN in self._existing_code

    def header(self) -> str:
        return (
            f"{self._comment_prefix} {GENERATOR_NOTICE}\n"
            f"{self._comment_prefix} Generator token: {GENERATOR_TOKEN}\n"
            "\n"
        )

    @abstractmethod
    def write_begin(self) -> None:
        """Emit the artifact prologue."""

    @abstractmethod
    def write_functions(self, attributes: SourceFileAttributes, verbose: bool) -> None:
        """Emit the content derived from one source file."""

    @abstractmethod
    def write_end(self) -> None:
        """Emit the artifact epilogue."""

    @abstractmethod
    def commit(self, includes: Sequence[str], prototypes: Sequence[str]) -> bool:
        """
        Write the artifact to disk if it changed.

        Args:
            includes: Include directives for the artifact preamble
            prototypes: Prototype declarations collected from all sources

        Returns:
            True if the target file was written
        """

    def _commit(self, preamble: str = "") -> bool:
        """
        Write header, preamble and code, unless identical to the snapshot.

        Nothing is written when no code was generated and the target does
        not exist yet.
        """
        code = self.code
        if not code and not FileInfo(self._target_file).exists:
            return False

        generated_code = self.header() + preamble + code
        if generated_code == self._existing_code:
            logger.debug(f"{self._target_file} is up to date")
            return False

        create_directory(os.path.dirname(self._target_file) or ".")
        write_file(self._target_file, generated_code)
        self._existing_code = generated_code
        logger.debug(f"Wrote {self._target_file}")
        return True

    def remove(self) -> bool:
        """Remove the target file entirely."""
        removed = remove_file(self._target_file)
        self._existing_code = ""
        return removed

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(target_file={self._target_file!r})"


def format_preamble(includes: Sequence[str], prototypes: Sequence[str] = ()) -> str:
    """
    Build the preamble placed after the generated-file header.

    Each non-empty group is followed by a blank line; prototypes are
    terminated with ``;``.
    """
    lines = []
    if includes:
        lines.extend(f"{include}\n" for include in includes)
        lines.append("\n")
    if prototypes:
        lines.extend(f"{prototype};\n" for prototype in prototypes)
        lines.append("\n")
    return "".join(lines)
