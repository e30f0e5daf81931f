"""
exportkit: exports generation for annotated native sources

Discovers export, depends and interfaces attributes in native source
files and keeps three generated artifacts in sync:

- the module registration source (``src/RcppExports.cpp``)
- the host loader script (``R/RcppExports.R``)
- the cross-module calling header (``inst/include/<package>.hpp``)

It also prepares build contexts for one-off compiled sources, cached for
the lifetime of the process.

Usage:
    import exportkit

    changed = exportkit.compile_attributes("path/to/package")

    cache = exportkit.DynlibCache()
    dynlib, build_required = exportkit.resolve_build_context(cache, "script.cpp")
"""

__version__ = "0.1.0"
__author__ = "exportkit developers"

from .pipeline import compile_attributes, generate_exports, create_generators
from .runtime import DynlibCache, SourceDynlib, Platform, resolve_build_context
from .utils.exceptions import (
    ExportKitError,
    SourceNotFoundError,
    FileIOError,
    OverwriteConflictError,
    ParseError,
    ConfigurationError,
)

__all__ = [
    "compile_attributes",
    "generate_exports",
    "create_generators",
    "DynlibCache",
    "SourceDynlib",
    "Platform",
    "resolve_build_context",
    "ExportKitError",
    "SourceNotFoundError",
    "FileIOError",
    "OverwriteConflictError",
    "ParseError",
    "ConfigurationError",
]
