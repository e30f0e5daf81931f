"""
Utils package for exportkit.

Logging, the exception hierarchy, configuration and filesystem helpers
shared by the generators and the dynlib cache.
"""

from .exceptions import (
    ExportKitError,
    SourceNotFoundError,
    FileIOError,
    OverwriteConflictError,
    ParseError,
    ConfigurationError,
)
from .logging import setup_logging, get_logger, ExportsLogger
from .config import (
    ExportKitConfig,
    GenerationConfig,
    BuildConfig,
    LoggingConfig,
    get_config,
    set_config,
    load_config,
)
from .fileinfo import FileInfo

__all__ = [
    'ExportKitError',
    'SourceNotFoundError',
    'FileIOError',
    'OverwriteConflictError',
    'ParseError',
    'ConfigurationError',
    'setup_logging',
    'get_logger',
    'ExportsLogger',
    'ExportKitConfig',
    'GenerationConfig',
    'BuildConfig',
    'LoggingConfig',
    'get_config',
    'set_config',
    'load_config',
    'FileInfo',
]
