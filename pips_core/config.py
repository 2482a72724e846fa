"""
Solver configuration.

Pip range constants plus the tunables of the backtracking search. Settings
come from defaults, then an optional YAML file, then ``PIPS_*`` environment
variables.
"""

import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

logger = logging.getLogger(__name__)

# Pip values on a standard double-six set
PIP_MIN = 0
PIP_MAX = 6
DISTINCT_PIP_VALUES = PIP_MAX - PIP_MIN + 1

# Environment variable -> SolverConfig field
ENV_OVERRIDES: Dict[str, str] = {
    "PIPS_CHECK_INTERVAL": "check_interval",
    "PIPS_TIMEOUT_SECONDS": "timeout_seconds",
    "PIPS_LOG_LEVEL": "log_level",
}


@dataclass
class SolverConfig:
    # Poll the cancellation token once per this many explored nodes
    check_interval: int = 1024
    # Wall-clock budget for one solve; None means unbounded
    timeout_seconds: Optional[float] = None
    log_level: str = "INFO"

    def __post_init__(self):
        self.check_interval = int(self.check_interval)
        if self.check_interval < 1:
            raise ValueError(f"check_interval must be >= 1, got {self.check_interval}")
        if self.timeout_seconds is not None:
            self.timeout_seconds = float(self.timeout_seconds)
            if self.timeout_seconds <= 0:
                raise ValueError(f"timeout_seconds must be positive, got {self.timeout_seconds}")
        self.log_level = str(self.log_level).upper()


def _coerce_env(name: str, raw: str) -> Any:
    if name == "timeout_seconds" and raw.strip().lower() in ("", "none", "0"):
        return None
    return raw


def load_config(path: Optional[Union[str, Path]] = None) -> SolverConfig:
    """
    Build a SolverConfig.

    Args:
        path: Optional YAML file with any of the SolverConfig fields

    Returns:
        SolverConfig with file values and environment overrides applied

    Raises:
        ValueError: If the file has unknown keys or invalid values
    """
    values: Dict[str, Any] = {}

    if path is not None:
        raw = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
        if not isinstance(raw, dict):
            raise ValueError(f"Config file {path} must contain a mapping")
        known = {f.name for f in fields(SolverConfig)}
        unknown = set(raw) - known
        if unknown:
            raise ValueError(f"Unknown config keys in {path}: {sorted(unknown)}")
        values.update(raw)
        logger.debug(f"Loaded config file {path}: {raw}")

    for env_name, field_name in ENV_OVERRIDES.items():
        if env_name in os.environ:
            values[field_name] = _coerce_env(field_name, os.environ[env_name])
            logger.debug(f"Config override from {env_name}")

    return SolverConfig(**values)
