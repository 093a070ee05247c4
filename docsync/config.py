"""Viewer configuration module.

This module provides:
- ViewerConfig: Dataclass for all viewer configuration options
- YAML configuration file loading
- Validation of page geometry, DPI and logging options
"""

from __future__ import annotations

import argparse
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from .constants import (
    DEFAULT_DPI,
    DEFAULT_PAGE_HEIGHT,
    DEFAULT_PAGE_WIDTH,
    DEFAULT_VIEWPORT_HEIGHT,
    POINTS_PER_INCH,
    VALID_LOG_LEVELS,
)
from .exceptions import InvalidConfigError

logger = logging.getLogger(__name__)


def _load_yaml_config(config_path: Path) -> dict[str, Any]:
    """Load YAML configuration file with error handling.

    Args:
        config_path: Path to YAML config file

    Returns:
        Configuration dict, or empty dict if file not found or invalid
    """
    try:
        if config_path.exists():
            with open(config_path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
            if not isinstance(data, dict):
                logger.warning("Config file %s does not contain a mapping; ignoring it", config_path)
                return {}
            return data
        logger.debug("Config file not found: %s", config_path)
        return {}
    except yaml.YAMLError as e:
        logger.warning("Failed to parse config file %s: %s", config_path, e)
        return {}
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Failed to read config file %s: %s", config_path, e)
        return {}


@dataclass
class ViewerConfig:
    """Viewer configuration with validation.

    Configuration Sources (in order of precedence):
    1. Constructor arguments (highest priority)
    2. CLI arguments via from_cli()
    3. YAML configuration files via from_yaml()
    4. Default values (lowest priority)

    Example:
        >>> config = ViewerConfig(dpi=144)
        >>> config.validate()
        >>> config.scale
        2.0

        >>> config = ViewerConfig.from_yaml(Path("settings/viewer.yaml"), dpi=72)
    """

    # ==================== Rendering ====================
    dpi: int = DEFAULT_DPI

    # ==================== Page Geometry ====================
    default_page_width: float = DEFAULT_PAGE_WIDTH
    default_page_height: float = DEFAULT_PAGE_HEIGHT
    viewport_height: float = DEFAULT_VIEWPORT_HEIGHT

    # ==================== Logging ====================
    log_level: str = "INFO"

    @classmethod
    def from_yaml(cls, config_path: Path, **overrides: Any) -> ViewerConfig:
        """Load configuration from YAML file.

        Args:
            config_path: Path to YAML configuration file
            **overrides: Values to override from file

        Returns:
            ViewerConfig instance
        """
        yaml_config = _load_yaml_config(config_path)

        field_names = ("dpi", "default_page_width", "default_page_height", "viewport_height", "log_level")
        kwargs: dict[str, Any] = {name: yaml_config[name] for name in field_names if name in yaml_config}

        unknown = sorted(set(yaml_config) - set(field_names))
        if unknown:
            logger.warning("Ignoring unknown config keys in %s: %s", config_path, ", ".join(unknown))

        kwargs.update(overrides)
        return cls(**kwargs)

    @classmethod
    def from_cli(cls, args: argparse.Namespace) -> ViewerConfig:
        """Create configuration from CLI arguments.

        A ``--config`` file is loaded first; explicit CLI values override it.
        """
        # Format: (cli_name, config_name)
        mappings = [
            ("dpi", "dpi"),
            ("viewport_height", "viewport_height"),
            ("log_level", "log_level"),
        ]

        kwargs: dict[str, Any] = {}
        for cli_name, config_name in mappings:
            value = getattr(args, cli_name, None)
            if value is not None:
                kwargs[config_name] = value

        config_path = getattr(args, "config", None)
        if config_path is not None:
            return cls.from_yaml(Path(config_path), **kwargs)
        return cls(**kwargs)

    def validate(self) -> None:
        """Validate configuration values.

        Raises:
            InvalidConfigError: If a value is out of range
        """
        if int(self.dpi) <= 0:
            raise InvalidConfigError(f"dpi must be positive, got {self.dpi}")
        if self.default_page_width <= 0 or self.default_page_height <= 0:
            raise InvalidConfigError(
                f"Default page size must be positive, got {self.default_page_width}x{self.default_page_height}"
            )
        if self.viewport_height <= 0:
            raise InvalidConfigError(f"viewport_height must be positive, got {self.viewport_height}")

        level = str(self.log_level).upper()
        if level not in VALID_LOG_LEVELS:
            raise InvalidConfigError(f"Invalid log level: {self.log_level}. Must be one of: {list(VALID_LOG_LEVELS)}")
        self.log_level = level

        logger.debug("Configuration validated: dpi=%d, scale=%.3f", self.dpi, self.scale)

    @property
    def scale(self) -> float:
        """Canvas pixels per document unit."""
        return self.dpi / POINTS_PER_INCH

    def to_dict(self) -> dict[str, Any]:
        return {
            "dpi": self.dpi,
            "default_page_width": self.default_page_width,
            "default_page_height": self.default_page_height,
            "viewport_height": self.viewport_height,
            "log_level": self.log_level,
        }
