"""Configuration for crosswalk runs.

Design assumptions:
- A run is configured once and the RunConfiguration is shared by reference
  across all units (it is frozen).
- File configuration is a YAML mapping; the path defaults to the
  CROSSWALK_CONFIG env var, then ./crosswalk.yaml when it exists.
- Command-line flags override file values.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Literal

import yaml

MarkerFailurePolicy = Literal["log", "raise"]

MARKER_FAILURE_POLICIES = ("log", "raise")
CONFIG_ENV_VAR = "CROSSWALK_CONFIG"
DEFAULT_CONFIG_NAME = "crosswalk.yaml"


class ConfigurationError(Exception):
    """Raised when a configuration file is invalid."""

    def __init__(self, message: str, path: Path | None = None):
        self.path = path
        full_message = f"{path}: {message}" if path else message
        super().__init__(full_message)


@dataclass
class Settings:
    """Application settings."""

    # Marker persistence
    markers_db: Path = field(
        default_factory=lambda: Path.home() / ".crosswalk" / "markers.db"
    )

    # Output
    output_extension: str = ".cs"


@dataclass(frozen=True)
class RunConfiguration:
    """Options for one translation run."""

    header: str = ""
    """Text written verbatim before every rendered unit."""

    ignore_errors: bool = False
    """Translate units even when the parser reported errors."""

    emit_markers: bool = False
    """Forward diagnostics to the marker store."""

    marker_failure_policy: MarkerFailurePolicy = "log"
    """What to do when the marker store fails: log and continue, or raise."""

    def __post_init__(self) -> None:
        if self.marker_failure_policy not in MARKER_FAILURE_POLICIES:
            raise ConfigurationError(
                f"marker_failure_policy must be one of {MARKER_FAILURE_POLICIES}, "
                f"got {self.marker_failure_policy!r}"
            )

    def with_overrides(self, **overrides) -> "RunConfiguration":
        """Return a copy with the non-None overrides applied."""
        values = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **values)

    @classmethod
    def from_dict(cls, data: dict, path: Path | None = None) -> "RunConfiguration":
        """Build from a mapping (typically parsed YAML)."""
        known = {"header", "header_file", "ignore_errors", "emit_markers",
                 "marker_failure_policy"}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigurationError(f"Unknown option(s): {', '.join(unknown)}", path)

        header = data.get("header", "")
        header_file = data.get("header_file")
        if header_file:
            header_path = Path(header_file)
            if path is not None and not header_path.is_absolute():
                header_path = path.parent / header_path
            try:
                header = header_path.read_text(encoding="utf-8")
            except OSError as e:
                raise ConfigurationError(
                    f"Cannot read header file {header_path}: {e}", path
                ) from e

        if not isinstance(header, str):
            raise ConfigurationError("header must be a string", path)
        for flag in ("ignore_errors", "emit_markers"):
            if flag in data and not isinstance(data[flag], bool):
                raise ConfigurationError(f"{flag} must be true or false", path)

        return cls(
            header=header,
            ignore_errors=data.get("ignore_errors", False),
            emit_markers=data.get("emit_markers", False),
            marker_failure_policy=data.get("marker_failure_policy", "log"),
        )


def find_config_path(path: Path | str | None = None) -> Path | None:
    """Locate the configuration file.

    Search order:
    1. explicit path
    2. CROSSWALK_CONFIG env var
    3. ./crosswalk.yaml if present
    """
    if path:
        return Path(path)

    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)

    local = Path.cwd() / DEFAULT_CONFIG_NAME
    if local.exists():
        return local
    return None


def load_run_configuration(path: Path | str | None = None) -> RunConfiguration:
    """Load a RunConfiguration from YAML, or defaults when no file is found.

    Raises:
        ConfigurationError: If the file is missing, unreadable or invalid
    """
    config_path = find_config_path(path)
    if config_path is None:
        return RunConfiguration()

    if not config_path.exists():
        raise ConfigurationError("Configuration file not found", config_path)

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            raw_data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML: {e}", config_path) from e

    if raw_data is None:
        return RunConfiguration()
    if not isinstance(raw_data, dict):
        raise ConfigurationError("Configuration must be a YAML mapping", config_path)

    return RunConfiguration.from_dict(raw_data, path=config_path)
