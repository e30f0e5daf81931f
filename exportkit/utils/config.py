"""
Configuration system for exportkit.

Settings are read from a single JSON or YAML file with one section per
concern (generation, build, logging). Missing files fall back to
defaults; a few environment variables override file values.
"""

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .exceptions import ConfigurationError
from .logging import get_logger

logger = get_logger(__name__)

DEFAULT_CONFIG_FILES = ("exportkit.yaml", "exportkit.yml", "exportkit.json")


@dataclass
class GenerationConfig:
    """Exports generation configuration."""

    includes: List[str] = field(default_factory=lambda: ["#include <Rcpp.h>"])
    verbose: bool = False


@dataclass
class BuildConfig:
    """Dynlib build context configuration."""

    build_dir_prefix: str = "sourcecpp_"
    module_name_prefix: str = "sourceCpp_"
    module_name_range: int = 100000
    dynlib_ext: Optional[str] = None
    temp_dir: Optional[str] = None


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    enable_file_logging: bool = False
    log_file: str = "exportkit.log"


class ExportKitConfig:
    """
    Unified configuration manager.

    Loads the configuration file once on construction and exposes each
    section as a dataclass attribute.
    """

    def __init__(self, config_file: Optional[str] = None):
        """
        Initialize configuration.

        Args:
            config_file: Path to configuration file. If None, looks for
                ``exportkit.yaml``/``.yml``/``.json`` in the working directory.
        """
        self.config_file = self._get_config_file_path(config_file)
        self._config_data = self._load_config()

        self.generation = self._create_generation_config()
        self.build = self._create_build_config()
        self.logging = self._create_logging_config()

    def _get_config_file_path(self, config_file: Optional[str]) -> Optional[Path]:
        """Get the configuration file path."""
        if config_file:
            return Path(config_file)

        for name in DEFAULT_CONFIG_FILES:
            candidate = Path.cwd() / name
            if candidate.exists():
                return candidate
        return None

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from file (JSON or YAML)."""
        if self.config_file is None:
            return {}
        if not self.config_file.exists():
            logger.warning(f"Configuration file {self.config_file} not found, using defaults")
            return {}

        try:
            with open(self.config_file, "r", encoding="utf-8") as f:
                if self.config_file.suffix.lower() in (".yaml", ".yml"):
                    config_data = yaml.safe_load(f)
                else:
                    config_data = json.load(f)
        except (yaml.YAMLError, json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ConfigurationError(f"Malformed configuration: {e}", str(self.config_file)) from e
        except OSError as e:
            raise ConfigurationError(f"Cannot read configuration: {e}", str(self.config_file)) from e

        if config_data is None:
            return {}
        if not isinstance(config_data, dict):
            raise ConfigurationError("Configuration root must be a mapping", str(self.config_file))

        logger.debug(f"Loaded configuration from {self.config_file}")
        return config_data

    def _section(self, name: str) -> Dict[str, Any]:
        data = self._config_data.get(name) or {}
        if not isinstance(data, dict):
            raise ConfigurationError(f"Section '{name}' must be a mapping", str(self.config_file))
        return data

    def _create_generation_config(self) -> GenerationConfig:
        """Create generation configuration from loaded data."""
        gen_data = self._section("generation")

        includes = gen_data.get("includes", GenerationConfig().includes)
        if isinstance(includes, str):
            includes = [includes]

        env_verbose = os.getenv("EXPORTKIT_VERBOSE", "").lower() in ("1", "true", "yes")
        verbose = env_verbose or bool(gen_data.get("verbose", False))

        return GenerationConfig(includes=list(includes), verbose=verbose)

    def _create_build_config(self) -> BuildConfig:
        """Create build configuration from loaded data."""
        build_data = self._section("build")

        module_name_range = build_data.get("module_name_range", 100000)
        if not isinstance(module_name_range, int) or module_name_range < 1:
            raise ConfigurationError(
                f"build.module_name_range must be a positive integer, got {module_name_range!r}",
                str(self.config_file),
            )

        return BuildConfig(
            build_dir_prefix=build_data.get("build_dir_prefix", "sourcecpp_"),
            module_name_prefix=build_data.get("module_name_prefix", "sourceCpp_"),
            module_name_range=module_name_range,
            dynlib_ext=build_data.get("dynlib_ext"),
            temp_dir=build_data.get("temp_dir"),
        )

    def _create_logging_config(self) -> LoggingConfig:
        """Create logging configuration from loaded data."""
        log_data = self._section("logging")

        return LoggingConfig(
            level=os.getenv("EXPORTKIT_LOG_LEVEL", log_data.get("level", "INFO")),
            enable_file_logging=log_data.get("enable_file_logging", False),
            log_file=log_data.get("log_file", "exportkit.log"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Return the effective configuration as a plain dictionary."""
        return {
            "generation": {
                "includes": list(self.generation.includes),
                "verbose": self.generation.verbose,
            },
            "build": {
                "build_dir_prefix": self.build.build_dir_prefix,
                "module_name_prefix": self.build.module_name_prefix,
                "module_name_range": self.build.module_name_range,
                "dynlib_ext": self.build.dynlib_ext,
                "temp_dir": self.build.temp_dir,
            },
            "logging": {
                "level": self.logging.level,
                "enable_file_logging": self.logging.enable_file_logging,
                "log_file": self.logging.log_file,
            },
        }

    def save_config(self, config_file: Optional[str] = None) -> None:
        """Save current configuration to file."""
        target = Path(config_file) if config_file else self.config_file
        if target is None:
            target = Path.cwd() / "exportkit.json"

        with open(target, "w", encoding="utf-8") as f:
            if target.suffix.lower() in (".yaml", ".yml"):
                yaml.safe_dump(self.to_dict(), f, sort_keys=False)
            else:
                json.dump(self.to_dict(), f, indent=2)
        self.config_file = target
        logger.info(f"Configuration saved to {target}")


# Global configuration instance
_global_config: Optional[ExportKitConfig] = None


def get_config() -> ExportKitConfig:
    """Get the global configuration instance."""
    global _global_config
    if _global_config is None:
        _global_config = ExportKitConfig()
    return _global_config


def set_config(config: Optional[ExportKitConfig]) -> None:
    """Set (or reset, with None) the global configuration instance."""
    global _global_config
    _global_config = config


def load_config(config_file: str) -> ExportKitConfig:
    """Load configuration from a specific file."""
    return ExportKitConfig(config_file)
