"""
Build context for one-off compiled source files.

A :class:`SourceDynlib` owns a private build directory holding a copy of
the source file with a module registration block appended, plus the
names the compiler step needs (module name, dynlib path, exports).
"""

import os
import random
import shutil
import sys
import tempfile
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..attributes.model import DEPENDS_ATTRIBUTE
from ..attributes.parser import AttributesParser, SourceParser
from ..codegen.generators import render_module
from ..utils.config import BuildConfig
from ..utils.exceptions import FileIOError, SourceNotFoundError
from ..utils.fileinfo import FileInfo, copy_file, write_file
from ..utils.logging import get_logger

logger = get_logger(__name__)


def default_dynlib_ext() -> str:
    """Shared library extension for the running platform."""
    if sys.platform.startswith("win"):
        return ".dll"
    return ".so"


@dataclass(frozen=True)
class Platform:
    """Platform strings used to build paths."""

    file_sep: str = "/"
    dynlib_ext: str = field(default_factory=default_dynlib_ext)


class SourceDynlib:
    """
    Build context for a single source file.

    Construction copies the source into a fresh build directory and
    generates its registration code. Afterwards the context only changes
    through :meth:`regenerate_source`.
    """

    def __init__(self, cpp_source_path: str,
                 platform: Optional[Platform] = None,
                 build_config: Optional[BuildConfig] = None,
                 parser: Optional[SourceParser] = None):
        """
        Create the build context.

        Args:
            cpp_source_path: Source file to build
            platform: Path separator and dynlib extension
            build_config: Build directory and module naming settings
            parser: Source parser (defaults to :class:`AttributesParser`)

        Raises:
            SourceNotFoundError: If the source file does not exist
            FileIOError: If the build directory or generated source cannot be written
        """
        self._cpp_source_path = str(cpp_source_path)
        self._platform = platform or Platform()
        self._parser = parser or AttributesParser()
        build_config = build_config or BuildConfig()

        source_info = FileInfo(self._cpp_source_path)
        if not source_info.exists:
            raise SourceNotFoundError(self._cpp_source_path)

        self._cpp_source_last_modified = source_info.last_modified
        self._cpp_source_filename = os.path.basename(self._cpp_source_path)
        self._dynlib_ext = build_config.dynlib_ext or self._platform.dynlib_ext

        try:
            build_directory = tempfile.mkdtemp(prefix=build_config.build_dir_prefix,
                                               dir=build_config.temp_dir)
        except OSError as e:
            raise FileIOError.from_os_error(build_config.temp_dir or tempfile.gettempdir(), e) from e
        self._build_directory = build_directory.replace("\\", "/")

        self._module_name = (
            f"{build_config.module_name_prefix}"
            f"{random.randint(1, build_config.module_name_range)}"
        )

        self._generated_cpp = ""
        self._exported_functions: List[str] = []
        self._depends: List[str] = []

        logger.debug(f"Created build context {self._module_name} in {self._build_directory}")
        try:
            self.regenerate_source()
        except Exception:
            shutil.rmtree(self._build_directory, ignore_errors=True)
            raise

    @property
    def cpp_source_path(self) -> str:
        return self._cpp_source_path

    @property
    def cpp_source_last_modified(self) -> float:
        return self._cpp_source_last_modified

    @property
    def cpp_source_filename(self) -> str:
        return self._cpp_source_filename

    @property
    def module_name(self) -> str:
        return self._module_name

    @property
    def build_directory(self) -> str:
        return self._build_directory

    @property
    def generated_cpp(self) -> str:
        """Registration code appended to the generated source."""
        return self._generated_cpp

    @property
    def generated_cpp_source_path(self) -> str:
        return self._build_directory + self._platform.file_sep + self._cpp_source_filename

    @property
    def dynlib_filename(self) -> str:
        return self._module_name + self._dynlib_ext

    @property
    def dynlib_path(self) -> str:
        return self._build_directory + self._platform.file_sep + self.dynlib_filename

    @property
    def exported_functions(self) -> List[str]:
        return list(self._exported_functions)

    @property
    def depends(self) -> List[str]:
        return list(self._depends)

    def is_built(self) -> bool:
        """True if the dynamic library exists."""
        return FileInfo(self.dynlib_path).exists

    def is_source_dirty(self) -> bool:
        """
        True if the generated source is stale.

        That is the case when the original source is newer than the
        generated copy, or the copy has gone missing.
        """
        generated = FileInfo(self.generated_cpp_source_path)
        if not generated.exists:
            return True
        return FileInfo(self._cpp_source_path).last_modified > generated.last_modified

    def is_dirty(self) -> bool:
        """True if a build is needed, either for stale source or missing dynlib."""
        return self.is_source_dirty() or not self.is_built()

    def regenerate_source(self) -> None:
        """
        Recreate the generated source and rediscover exports.

        The module name and build directory are kept.
        """
        source_info = FileInfo(self._cpp_source_path)
        if not source_info.exists:
            raise SourceNotFoundError(self._cpp_source_path)
        self._cpp_source_last_modified = source_info.last_modified

        generated_path = self.generated_cpp_source_path
        copy_file(self._cpp_source_path, generated_path)

        attributes = self._parser.parse(self._cpp_source_path)
        self._generated_cpp = render_module(self._module_name, attributes)
        write_file(generated_path, "\n" + self._generated_cpp, append=True)

        self._exported_functions = []
        self._depends = []
        for attribute in attributes:
            if attribute.is_exported_function():
                self._exported_functions.append(attribute.exported_name())
            elif attribute.name == DEPENDS_ATTRIBUTE:
                self._depends.extend(attribute.param_names())

        logger.debug(
            f"Generated {generated_path} with {len(self._exported_functions)} exported functions"
        )

    def to_dict(self, build_required: bool = False) -> Dict[str, Any]:
        """Snapshot of the context, in the form the compiler step consumes."""
        return {
            "moduleName": self.module_name,
            "cppSourcePath": self.cpp_source_path,
            "buildRequired": build_required,
            "buildDirectory": self.build_directory,
            "generatedCpp": self.generated_cpp,
            "exportedFunctions": self.exported_functions,
            "cppSourceFilename": self.cpp_source_filename,
            "dynlibFilename": self.dynlib_filename,
            "dynlibPath": self.dynlib_path,
            "depends": self.depends,
        }

    def __repr__(self) -> str:
        return f"SourceDynlib(module_name={self._module_name!r}, cpp_source_path={self._cpp_source_path!r})"
