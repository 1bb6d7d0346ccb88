"""
Configuration module for mpexport.

This module provides configuration management for the exporter, including
name length limits, LP line wrapping and logging preferences.

Configuration can be set via:
1. Environment variables (MPEXPORT_*)
2. Config file (~/.mpexport/config.toml or ./mpexport.toml)
3. Programmatic API

Example:
    >>> from mpexport.config import config
    >>> print(config.max_line_length)
    10000
    >>> config.show_unused_variables = True
"""

import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from mpexport.export.context import ExportOptions


# Longest name any reader we target accepts.
MAX_NAME_LENGTH = 255

# Room kept for the "_lhs" / "_rhs" suffixes of split range rows.
NAME_SUFFIX_MARGIN = 4

# Field width of names in fixed MPS format.
FIXED_MPS_NAME_LENGTH = 8


def _env_int(name: str, default: int) -> int:
    """Read an integer from the environment, falling back to default."""
    value = os.environ.get(name)
    if value is None or not value.strip().lstrip("-").isdigit():
        return default
    return int(value)


def _get_default_log_level() -> str:
    return os.environ.get("MPEXPORT_LOG_LEVEL", "WARNING").upper()


def _get_default_line_length() -> int:
    return _env_int("MPEXPORT_MAX_LINE_LENGTH", 10000)


@dataclass
class ExportConfig:
    """
    Configuration for the mpexport library.

    Attributes:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        max_name_length: Longest sanitized name kept before falling back to
            the obfuscated name
        fixed_mps_name_length: Longest name allowed in fixed MPS format
        fixed_mps_number_width: Width of numeric fields in fixed MPS format
        max_line_length: LP lines are wrapped once they grow past this
        show_unused_variables: Keep variables with no nonzero coefficient in
            LP output
        log_invalid_names: Log a warning each time a name is rewritten
    """

    # Logging
    log_level: str = "WARNING"

    # Names
    max_name_length: int = MAX_NAME_LENGTH - NAME_SUFFIX_MARGIN
    fixed_mps_name_length: int = FIXED_MPS_NAME_LENGTH

    # Layout
    fixed_mps_number_width: int = 12
    max_line_length: int = 10000

    # Content
    show_unused_variables: bool = False
    log_invalid_names: bool = False

    def __post_init__(self):
        """Normalize the log level."""
        self.log_level = str(self.log_level).upper()

    # =========================================================================
    # Option helpers
    # =========================================================================

    def default_options(self, **overrides: Any) -> 'ExportOptions':
        """
        Build ExportOptions seeded from this configuration.

        Args:
            **overrides: Fields of ExportOptions to override

        Returns:
            A fresh ExportOptions instance
        """
        from mpexport.export.context import ExportOptions

        values = {
            "max_name_length": self.max_name_length,
            "fixed_mps_name_length": self.fixed_mps_name_length,
            "fixed_mps_number_width": self.fixed_mps_number_width,
            "max_line_length": self.max_line_length,
            "show_unused_variables": self.show_unused_variables,
            "log_invalid_names": self.log_invalid_names,
        }
        values.update(overrides)
        return ExportOptions(**values)

    # =========================================================================
    # Serialization
    # =========================================================================

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary."""
        return {
            "log_level": self.log_level,
            "max_name_length": self.max_name_length,
            "fixed_mps_name_length": self.fixed_mps_name_length,
            "fixed_mps_number_width": self.fixed_mps_number_width,
            "max_line_length": self.max_line_length,
            "show_unused_variables": self.show_unused_variables,
            "log_invalid_names": self.log_invalid_names,
        }

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> 'ExportConfig':
        """Create config from dictionary."""
        defaults = cls()
        return cls(
            log_level=d.get("log_level", defaults.log_level),
            max_name_length=int(d.get("max_name_length", defaults.max_name_length)),
            fixed_mps_name_length=int(
                d.get("fixed_mps_name_length", defaults.fixed_mps_name_length)
            ),
            fixed_mps_number_width=int(
                d.get("fixed_mps_number_width", defaults.fixed_mps_number_width)
            ),
            max_line_length=int(d.get("max_line_length", defaults.max_line_length)),
            show_unused_variables=bool(
                d.get("show_unused_variables", defaults.show_unused_variables)
            ),
            log_invalid_names=bool(d.get("log_invalid_names", defaults.log_invalid_names)),
        )

    def save(self, path: Optional[Path] = None) -> None:
        """
        Save configuration to a TOML file.

        Args:
            path: Path to save to (default: ./mpexport.toml)
        """
        if path is None:
            path = Path("mpexport.toml")

        lines = [
            "# mpexport configuration",
            "",
            "[general]",
            f'log_level = "{self.log_level}"',
            "",
            "[names]",
            f"max_name_length = {self.max_name_length}",
            f"fixed_mps_name_length = {self.fixed_mps_name_length}",
            f"log_invalid_names = {str(self.log_invalid_names).lower()}",
            "",
            "[layout]",
            f"fixed_mps_number_width = {self.fixed_mps_number_width}",
            f"max_line_length = {self.max_line_length}",
            f"show_unused_variables = {str(self.show_unused_variables).lower()}",
        ]
        path.write_text("\n".join(lines) + "\n")

    @classmethod
    def load(cls, path: Optional[Path] = None) -> 'ExportConfig':
        """
        Load configuration from a TOML file.

        Args:
            path: Path to load from (default: ./mpexport.toml or
                ~/.mpexport/config.toml)

        Returns:
            Loaded configuration (or default if file not found)
        """
        if path is None:
            local_config = Path("mpexport.toml")
            user_config = Path.home() / ".mpexport" / "config.toml"

            if local_config.exists():
                path = local_config
            elif user_config.exists():
                path = user_config
            else:
                return cls()

        if not path.exists():
            return cls()

        # Sections only group keys; every key is unique across sections
        config_dict: dict[str, Any] = {}
        for line in path.read_text().splitlines():
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            if line.startswith("[") and line.endswith("]"):
                continue

            if "=" in line:
                key, value = line.split("=", 1)
                key = key.strip()
                value = value.strip().strip('"')

                if value in ("true", "false"):
                    value = value == "true"
                elif value.lstrip("-").isdigit():
                    value = int(value)

                config_dict[key] = value

        return cls.from_dict(config_dict)


def _default_config() -> ExportConfig:
    return ExportConfig(
        log_level=_get_default_log_level(),
        max_line_length=_get_default_line_length(),
    )


# Global configuration instance
config = _default_config()


def setup_logging(level: Optional[str] = None, verbose: bool = False) -> logging.Logger:
    """
    Configure console logging for mpexport.

    Args:
        level: Logging level name (default: config.log_level)
        verbose: Force DEBUG level

    Returns:
        The package logger
    """
    if verbose:
        level = "DEBUG"
    elif level is None:
        level = config.log_level

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
        handlers=[logging.StreamHandler(sys.stderr)],
        force=True
    )
    return logging.getLogger("mpexport")
