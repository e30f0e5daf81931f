"""
Pytest configuration and shared fixtures for exportkit tests.

This module provides common test fixtures used across the unit and
integration suites: scratch packages, source file writers and a clean
global configuration.
"""

import textwrap
from pathlib import Path
from typing import Callable

import pytest

from exportkit.utils.config import set_config


@pytest.fixture(autouse=True)
def reset_global_config(monkeypatch, tmp_path):
    """Isolate tests from config files and environment overrides."""
    monkeypatch.delenv("EXPORTKIT_VERBOSE", raising=False)
    monkeypatch.delenv("EXPORTKIT_LOG_LEVEL", raising=False)
    monkeypatch.chdir(tmp_path)
    set_config(None)
    yield
    set_config(None)


@pytest.fixture
def package_dir(tmp_path) -> Path:
    """Create an empty package skeleton with src/ and R/ directories."""
    root = tmp_path / "mypkg"
    (root / "src").mkdir(parents=True)
    (root / "R").mkdir()
    (root / "DESCRIPTION").write_text("Package: mypkg\nVersion: 0.1\n")
    return root


@pytest.fixture
def write_source(package_dir) -> Callable[[str, str], str]:
    """Write a dedented source file into the package's src/ directory."""
    def _write_source(name: str, content: str) -> str:
        path = package_dir / "src" / name
        path.write_text(textwrap.dedent(content).lstrip("\n"))
        return str(path)

    return _write_source


@pytest.fixture
def sum_source() -> str:
    """Source exporting add() under the alias sum, with the cpp interface."""
    return """
        // [[Rcpp::interfaces(r, cpp)]]

        // [[Rcpp::export(sum)]]
        int add(int a, int b) {
            return a + b;
        }
    """


@pytest.fixture
def helper_source() -> str:
    """Source exporting helper() with the default interfaces."""
    return """
        #include <Rcpp.h>

        // [[Rcpp::export]]
        int helper() {
            return 1;
        }
    """


