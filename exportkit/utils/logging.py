"""
Logging configuration and utilities.

This module provides centralized logging configuration for the
exportkit package with appropriate formatting and levels.
"""

import logging
import os
from typing import Optional


def setup_logging(level: Optional[str] = None, log_file: Optional[str] = None) -> None:
    """
    Configure logging for the exportkit package.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file path for log output
    """
    if level is None:
        level = os.environ.get("EXPORTKIT_LOG_LEVEL", "INFO")

    log_level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger("exportkit")
    logger.setLevel(log_level)

    # Remove existing handlers
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for the given module.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger instance
    """
    if name == "exportkit" or name.startswith("exportkit."):
        return logging.getLogger(name)
    return logging.getLogger(f"exportkit.{name}")


class ExportsLogger:
    """
    Verbose reporting for the exports generation pipeline.

    Messages are emitted at INFO level and only when the owning
    operation was invoked with ``verbose=True``.
    """

    def __init__(self, name: str, verbose: bool = False):
        """
        Initialize logger for specific component.

        Args:
            name: Component name for logging context
            verbose: Whether verbose messages are emitted at all
        """
        self.logger = get_logger(name)
        self.verbose = verbose

    def log_unit_start(self, source_file: str) -> None:
        """Announce the exports discovered in a source file."""
        if self.verbose:
            self.logger.info(f"Exports from {source_file}:")

    def log_exported_function(self, signature: str) -> None:
        """
        Log a single exported function.

        Args:
            signature: Canonical signature of the native function
        """
        if self.verbose:
            self.logger.info(f"  {signature}")

    def log_commit_result(self, changed: bool) -> None:
        """
        Log the overall result of committing the generated artifacts.

        Args:
            changed: Whether any artifact was written
        """
        if not self.verbose:
            return
        if changed:
            self.logger.info("Exports files updated")
        else:
            self.logger.info("Exports files already up to date")

    def log_cache_hit(self, key: str) -> None:
        """Log a dynlib cache hit."""
        self.logger.debug(f"Dynlib cache hit for {key}")

    def log_cache_miss(self, key: str) -> None:
        """Log a dynlib cache miss requiring a new build context."""
        self.logger.debug(f"Dynlib cache miss for {key}")


# Initialize logging on module import
setup_logging()
