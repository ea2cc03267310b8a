"""Configuration loading and management for PageWatch.

Configuration sources are merged in priority order:
    1. Defaults (defined in AuditConfig)
    2. Global config (~/.pagewatch.toml)
    3. Project config (./pagewatch.toml)
    4. Explicit config file
    5. Environment variables (PAGEWATCH_* prefix)
    6. CLI overrides (passed as kwargs)

Example:
    >>> config = load_config(fetch_timeout_seconds=2.0)
    >>> config.fetch_timeout_seconds
    2.0
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints

from .exceptions import ConfigurationError, InvalidConfigError

Verbosity = Literal["quiet", "normal", "verbose"]


@dataclass(frozen=True)
class AuditConfig:
    """Configuration for audit execution and persistence.

    Attributes:
        Measurement:
            measurement_window_seconds: How long each live observer collects samples
            fetch_timeout_seconds: Upper bound for manifest / header probe requests

        Issue emission:
            layout_shift_materiality: Per-element shift needed for a sub-issue
            long_task_materiality_ms: Blocking time needed for a long-task sub-issue
            max_contributors: Maximum sub-issues per windowed metric

        Scoring:
            score_scale_factor: Multiplier applied to the log-weighted penalty

        Persistence:
            max_history_per_domain: Scans retained per hostname
            data_dir: Directory holding the sqlite key-value store

        Output control:
            verbosity: Logging verbosity level
    """

    # Measurement
    measurement_window_seconds: float = 0.5
    fetch_timeout_seconds: float = 5.0

    # Issue emission
    layout_shift_materiality: float = 0.01
    long_task_materiality_ms: float = 100.0
    max_contributors: int = 5

    # Scoring
    score_scale_factor: float = 2.5

    # Persistence
    max_history_per_domain: int = 10
    data_dir: str = ".pagewatch"

    # Output control
    verbosity: Verbosity = "normal"

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.measurement_window_seconds < 0:
            raise ValueError("measurement_window_seconds must be non-negative")
        if self.fetch_timeout_seconds <= 0:
            raise ValueError("fetch_timeout_seconds must be positive")
        if self.layout_shift_materiality < 0:
            raise ValueError("layout_shift_materiality must be non-negative")
        if self.long_task_materiality_ms < 0:
            raise ValueError("long_task_materiality_ms must be non-negative")
        if self.max_contributors < 0:
            raise ValueError("max_contributors must be non-negative")
        if self.score_scale_factor <= 0:
            raise ValueError("score_scale_factor must be positive")
        if self.max_history_per_domain < 1:
            raise ValueError("max_history_per_domain must be at least 1")
        if self.verbosity not in ("quiet", "normal", "verbose"):
            raise ValueError("verbosity must be one of quiet, normal, verbose")

    @property
    def store_path(self) -> Path:
        """Location of the sqlite key-value store."""
        return Path(self.data_dir) / "store.db"


DEFAULT_CONFIG = AuditConfig()


def load_config(config_file: Optional[Path] = None, **overrides) -> AuditConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags)

    Returns:
        Validated AuditConfig instance

    Raises:
        ConfigurationError: If a config file is invalid or missing
    """
    merged: dict = {}

    global_config = Path.home() / ".pagewatch.toml"
    if global_config.exists():
        merged.update(_load_toml_file(global_config))

    project_config = Path.cwd() / "pagewatch.toml"
    if project_config.exists():
        merged.update(_load_toml_file(project_config))

    if config_file is not None:
        if not config_file.exists():
            raise ConfigurationError(f"Config file not found: {config_file}")
        merged.update(_load_toml_file(config_file))

    merged.update(_load_env_vars())

    if "verbose" in overrides:
        if overrides["verbose"]:
            overrides["verbosity"] = "verbose"
        del overrides["verbose"]
    if "quiet" in overrides:
        if overrides["quiet"]:
            overrides["verbosity"] = "quiet"
        del overrides["quiet"]

    merged.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return AuditConfig(**merged)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid configuration: {e}")


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from PAGEWATCH_* environment variables.

    Returns:
        Dict of field_name -> parsed_value for any PAGEWATCH_* vars found.
    """
    type_hints = get_type_hints(AuditConfig)
    result: dict[str, Any] = {}

    for field_name in AuditConfig.__dataclass_fields__:
        env_key = f"PAGEWATCH_{field_name.upper()}"
        env_value = os.environ.get(env_key)
        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hint)
        except ValueError as e:
            raise InvalidConfigError(env_key, env_value, str(e))
        if parsed is not None:
            result[field_name] = parsed

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse environment variable string to the correct type."""
    origin = getattr(type_hint, "__origin__", None)

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        if lower in ("false", "0", "no", "off"):
            return False
        raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    if type_hint is float:
        return float(value)

    # String (including Literal types like Verbosity)
    if type_hint is str or origin is Literal:
        return value

    return None


def _load_toml_file(path: Path) -> dict:
    """Load TOML file and return the [pagewatch] table, or the whole document."""
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigurationError(f"Invalid config file '{path}': {e}")
    section = data.get("pagewatch")
    return dict(section) if isinstance(section, dict) else data
