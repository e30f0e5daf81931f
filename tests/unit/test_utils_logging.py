"""
Unit tests for logging utilities.

Tests the logging configuration and the verbose exports reporter.
"""

import logging
import os
from unittest.mock import Mock, patch

from exportkit.utils.logging import ExportsLogger, get_logger, setup_logging


class TestLoggingSetup:
    """Test logging setup and configuration."""

    def teardown_method(self):
        setup_logging()

    def test_setup_logging_default(self):
        """Test default logging setup."""
        setup_logging()

        logger = logging.getLogger('exportkit')
        assert logger.level == logging.INFO
        assert len(logger.handlers) == 1
        assert logger.propagate is False

    def test_setup_logging_debug_level(self):
        setup_logging(level='DEBUG')

        assert logging.getLogger('exportkit').level == logging.DEBUG

    def test_setup_logging_invalid_level(self):
        """Test logging setup with invalid level defaults to INFO."""
        setup_logging(level='INVALID')

        assert logging.getLogger('exportkit').level == logging.INFO

    def test_setup_logging_with_file(self, tmp_path):
        """Test logging setup with file output."""
        log_file = str(tmp_path / "exportkit.log")
        setup_logging(log_file=log_file)

        logger = logging.getLogger('exportkit')
        handler_types = [type(h).__name__ for h in logger.handlers]
        assert 'StreamHandler' in handler_types
        assert 'FileHandler' in handler_types

        logger.info("Test message")
        for handler in logger.handlers:
            handler.flush()

        assert os.path.exists(log_file)
        with open(log_file, 'r') as f:
            assert "Test message" in f.read()

    def test_setup_logging_environment_variable(self):
        """Test logging setup with environment variable."""
        with patch.dict('os.environ', {'EXPORTKIT_LOG_LEVEL': 'DEBUG'}):
            setup_logging()

        assert logging.getLogger('exportkit').level == logging.DEBUG

    def test_setup_logging_removes_existing_handlers(self):
        """Test that setup_logging removes existing handlers."""
        logger = logging.getLogger('exportkit')
        logger.addHandler(logging.NullHandler())

        setup_logging()

        assert not any(isinstance(h, logging.NullHandler) for h in logger.handlers)


class TestGetLogger:
    """Test logger naming."""

    def test_prefixes_plain_names(self):
        assert get_logger('pipeline').name == 'exportkit.pipeline'

    def test_keeps_package_names(self):
        assert get_logger('exportkit.codegen.base').name == 'exportkit.codegen.base'
        assert get_logger('exportkit').name == 'exportkit'


class TestExportsLogger:
    """Test the verbose exports reporter."""

    def make_logger(self, verbose: bool) -> ExportsLogger:
        exports_logger = ExportsLogger('test', verbose)
        exports_logger.logger = Mock()
        return exports_logger

    def test_verbose_messages(self):
        """Test unit and function lines are emitted when verbose."""
        exports_logger = self.make_logger(True)

        exports_logger.log_unit_start("src/a.cpp")
        exports_logger.log_exported_function("int add(int a, int b)")

        exports_logger.logger.info.assert_any_call("Exports from src/a.cpp:")
        exports_logger.logger.info.assert_any_call("  int add(int a, int b)")

    def test_quiet_by_default(self):
        """Test nothing is emitted without verbose."""
        exports_logger = self.make_logger(False)

        exports_logger.log_unit_start("src/a.cpp")
        exports_logger.log_exported_function("int add(int a, int b)")
        exports_logger.log_commit_result(True)

        exports_logger.logger.info.assert_not_called()

    def test_commit_result(self):
        exports_logger = self.make_logger(True)

        exports_logger.log_commit_result(True)
        exports_logger.log_commit_result(False)

        assert [c.args[0] for c in exports_logger.logger.info.call_args_list] == [
            "Exports files updated",
            "Exports files already up to date",
        ]

    def test_cache_messages_are_debug(self):
        """Test cache hits and misses log at debug level regardless of verbose."""
        exports_logger = self.make_logger(False)

        exports_logger.log_cache_hit("file:a.cpp")
        exports_logger.log_cache_miss("code:abcd")

        exports_logger.logger.debug.assert_any_call("Dynlib cache hit for file:a.cpp")
        exports_logger.logger.debug.assert_any_call("Dynlib cache miss for code:abcd")
