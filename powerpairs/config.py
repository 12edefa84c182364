"""
Configuration management for the power-of-two pair search.

Settings come from, in increasing priority: defaults, a YAML file
(``.powerpairs.yml`` in the working directory unless a path is given),
``POWERPAIRS_*`` environment variables, and command-line options.
"""

import logging
import os
from dataclasses import dataclass, asdict, fields
from pathlib import Path
from typing import Any, Callable, Dict, Optional

import yaml
from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax

from .core.powers import PowerTable
from .engine.errors import ConfigurationError
from .engine.moves import MOVE_RULES

logger = logging.getLogger(__name__)

# Without 4 among the powers the triplet pool is finite
MIN_POWER_COUNT = 3
# Largest power count whose sums still fit comfortably in int64
MAX_POWER_COUNT = 62


@dataclass
class SearchConfig:
    """Search parameters."""

    # Powers of two 2^0 .. 2^(power_count-1) drive triplet generation and
    # replacement candidates.
    power_count: int = 10

    # Worker threads; None means CPU count - 1
    workers: Optional[int] = None

    # Progress display
    progress_interval: float = 0.1  # seconds between polls
    progress_skip_polls: int = 20
    show_progress: bool = True

    # Local search move rule (see engine.moves.MOVE_RULES)
    move_rule: str = "worst_swap"

    # Simplified mode tries negative offsets 0, 2, ... below this span
    simplified_negative_span: int = 20

    # Logging
    log_level: str = "WARNING"
    log_dir: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SearchConfig':
        """Create from dictionary, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigurationError(
                f"Unknown configuration keys: {', '.join(unknown)}",
                errors=[f"unknown key '{key}'" for key in unknown],
            )
        return cls(**data)

    def power_table(self) -> PowerTable:
        return PowerTable.of_count(self.power_count)

    def validate(self) -> None:
        """
        Validate configuration parameters.

        Raises:
            ConfigurationError: listing every invalid parameter
        """
        errors = []

        if not MIN_POWER_COUNT <= self.power_count <= MAX_POWER_COUNT:
            errors.append(f"power_count must be between {MIN_POWER_COUNT} and {MAX_POWER_COUNT}, got {self.power_count}")

        if self.workers is not None and self.workers < 1:
            errors.append(f"workers must be at least 1, got {self.workers}")

        if self.progress_interval <= 0:
            errors.append(f"progress_interval must be positive, got {self.progress_interval}")

        if self.progress_skip_polls < 0:
            errors.append(f"progress_skip_polls must not be negative, got {self.progress_skip_polls}")

        if self.move_rule not in MOVE_RULES:
            errors.append(f"move_rule must be one of {sorted(MOVE_RULES)}, got {self.move_rule!r}")

        if self.simplified_negative_span < 1:
            errors.append(f"simplified_negative_span must be positive, got {self.simplified_negative_span}")

        if not isinstance(logging.getLevelName(str(self.log_level).upper()), int):
            errors.append(f"log_level is not a logging level: {self.log_level!r}")

        if errors:
            raise ConfigurationError("Invalid search configuration", errors=errors)


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def _parse_optional_int(value: str) -> Optional[int]:
    return None if value.strip().lower() in ("", "none", "auto") else int(value)


def _parse_optional_str(value: str) -> Optional[str]:
    return value or None


# How environment variable text becomes each field's value
ENV_PARSERS: Dict[str, Callable[[str], Any]] = {
    "power_count": int,
    "workers": _parse_optional_int,
    "progress_interval": float,
    "progress_skip_polls": int,
    "show_progress": _parse_bool,
    "move_rule": str,
    "simplified_negative_span": int,
    "log_level": str,
    "log_dir": _parse_optional_str,
}


class ConfigManager:
    """Manages search configuration."""

    DEFAULT_CONFIG_FILE = ".powerpairs.yml"
    ENV_PREFIX = "POWERPAIRS_"

    def __init__(self, config_path: Optional[Path] = None):
        """
        Initialize config manager.

        Args:
            config_path: Path to configuration file
        """
        self.config_path = Path(config_path) if config_path else Path(self.DEFAULT_CONFIG_FILE)
        self._config: Optional[SearchConfig] = None

    def load(self) -> SearchConfig:
        """
        Load configuration from file or create default, then apply
        environment overrides.

        Raises:
            ConfigurationError: if the file is not valid YAML or holds
                unknown keys
        """
        if self._config is not None:
            return self._config

        if self.config_path.exists():
            try:
                with open(self.config_path, 'r') as f:
                    data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigurationError(
                    f"Error loading config: {e}", source=str(self.config_path)
                ) from e
            if not isinstance(data, dict):
                raise ConfigurationError(
                    "Configuration file must hold a mapping", source=str(self.config_path)
                )
            self._config = SearchConfig.from_dict(data)
            logger.info(f"Loaded config from {self.config_path}")
        else:
            self._config = SearchConfig()
            logger.debug("Using default configuration")

        self._apply_env_overrides()
        return self._config

    def save(self, config: Optional[SearchConfig] = None) -> None:
        """Save configuration to the config file."""
        config = config or self._config or SearchConfig()
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.config_path, 'w') as f:
            yaml.dump(config.to_dict(), f, default_flow_style=False, sort_keys=False)
        logger.info(f"Saved config to {self.config_path}")

    def display(self, console: Console, config: Optional[SearchConfig] = None):
        """
        Display configuration in a formatted panel.

        Args:
            console: Console to print on
            config: Configuration to display (uses current if None)
        """
        config = config or self._config or self.load()

        yaml_str = yaml.dump(config.to_dict(), default_flow_style=False, sort_keys=False)
        syntax = Syntax(yaml_str, "yaml", theme="monokai", line_numbers=True)
        panel = Panel(
            syntax,
            title="[bold cyan]Search Configuration[/bold cyan]",
            border_style="cyan"
        )
        console.print(panel)

    def _apply_env_overrides(self):
        """Apply environment variable overrides."""
        if self._config is None:
            return

        for name, parse in ENV_PARSERS.items():
            raw = os.getenv(f"{self.ENV_PREFIX}{name.upper()}")
            if raw is None:
                continue
            try:
                value = parse(raw)
            except ValueError as e:
                raise ConfigurationError(
                    f"Invalid env value for {name}: {raw!r}",
                    errors=[str(e)],
                    source="env",
                ) from e
            setattr(self._config, name, value)
            logger.debug(f"Applied env override: {name}={value!r}")


def create_default_config_file(path: Optional[Path] = None) -> Path:
    """Write the default configuration to ``path`` and return it."""
    path = Path(path or ConfigManager.DEFAULT_CONFIG_FILE)
    ConfigManager(path).save(SearchConfig())
    return path
