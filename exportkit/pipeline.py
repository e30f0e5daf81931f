"""
Exports generation pipeline.

Parses every source file of a package, feeds the attributes to the
exports generators and commits the generated artifacts.
"""

import os
import re
from typing import Iterable, List, Optional, Sequence

from .attributes.parser import AttributesParser, SourceParser
from .codegen.generator_set import ExportsGenerators
from .codegen.generators import (
    CrossModuleShimGenerator,
    HostLoaderGenerator,
    RegistrationModuleGenerator,
)
from .utils.config import get_config
from .utils.exceptions import FileIOError
from .utils.fileinfo import read_file
from .utils.logging import ExportsLogger, get_logger

logger = get_logger(__name__)

SOURCE_EXTENSIONS = (".c", ".cc", ".cpp", ".h", ".hpp")
GENERATED_SOURCE = "RcppExports.cpp"

_PACKAGE_FIELD = re.compile(r'^Package:\s*(\S+)\s*$', re.MULTILINE)


def generate_exports(generators: ExportsGenerators,
                     source_paths: Iterable[str],
                     includes: Sequence[str] = (),
                     verbose: bool = False,
                     parser: Optional[SourceParser] = None) -> bool:
    """
    Run the generation pipeline over ``source_paths``.

    Source files without any attributes are skipped. Prototypes are
    accumulated across files in processing order.

    Args:
        generators: Generators that own the output artifacts
        source_paths: Source files, processed in the given order
        includes: Include directives prepended to native artifacts
        verbose: Whether to log each file's exports
        parser: Source parser (defaults to :class:`AttributesParser`)

    Returns:
        True if any artifact was written

    Raises:
        SourceNotFoundError, FileIOError, OverwriteConflictError, ParseError
    """
    parser = parser or AttributesParser()
    prototypes: List[str] = []

    generators.write_begin()

    for source_path in source_paths:
        attributes = parser.parse(source_path)
        if attributes.empty():
            logger.debug(f"No attributes in {source_path}, skipping")
            continue

        prototypes.extend(attributes.prototypes)
        generators.write_functions(attributes, verbose)

    generators.write_end()

    wrote = generators.commit(includes, prototypes)
    ExportsLogger(__name__, verbose).log_commit_result(wrote)
    return wrote


def create_generators(package_dir: str, package_name: str) -> ExportsGenerators:
    """Build the standard generator set for a package, in commit order."""
    generators = ExportsGenerators()
    generators.add(RegistrationModuleGenerator(package_dir))
    generators.add(HostLoaderGenerator(package_dir))
    generators.add(CrossModuleShimGenerator(package_dir, package_name))
    return generators


def read_package_name(package_dir: str) -> str:
    """
    Determine the package name.

    Uses the ``Package:`` field of ``DESCRIPTION`` when present, otherwise
    the package directory name.
    """
    description = read_file(os.path.join(package_dir, "DESCRIPTION"))
    if description is not None:
        match = _PACKAGE_FIELD.search(description)
        if match:
            return match.group(1)
    return os.path.basename(os.path.abspath(package_dir))


def discover_sources(package_dir: str) -> List[str]:
    """List the package's native sources in sorted order, minus generated ones."""
    src_dir = os.path.join(package_dir, "src")
    try:
        names = os.listdir(src_dir)
    except FileNotFoundError:
        return []
    except OSError as e:
        raise FileIOError.from_os_error(src_dir, e) from e

    return [
        os.path.join(src_dir, name)
        for name in sorted(names)
        if name.endswith(SOURCE_EXTENSIONS) and name != GENERATED_SOURCE
    ]


def compile_attributes(package_dir: str,
                       package_name: Optional[str] = None,
                       source_paths: Optional[Sequence[str]] = None,
                       includes: Optional[Sequence[str]] = None,
                       verbose: Optional[bool] = None,
                       parser: Optional[SourceParser] = None) -> bool:
    """
    Regenerate the exports artifacts of a package.

    Args:
        package_dir: Package root directory
        package_name: Package name; read from ``DESCRIPTION`` when omitted
        source_paths: Source files; discovered under ``src/`` when omitted
        includes: Include directives; taken from configuration when omitted
        verbose: Verbose output; taken from configuration when omitted
        parser: Source parser (defaults to :class:`AttributesParser`)

    Returns:
        True if any artifact was written
    """
    config = get_config()
    if package_name is None:
        package_name = read_package_name(package_dir)
    if source_paths is None:
        source_paths = discover_sources(package_dir)
    if includes is None:
        includes = config.generation.includes
    if verbose is None:
        verbose = config.generation.verbose

    logger.debug(f"Compiling attributes for package '{package_name}' ({len(source_paths)} sources)")

    generators = create_generators(package_dir, package_name)
    return generate_exports(generators, source_paths, includes, verbose, parser)
