"""Casting query configuration."""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

ANGLE_UNITS = ("degrees", "radians")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class CastingConfig:
    """Options for ``find_single_mold_translational_casting``.

    Attributes:
        early_exit: stop as soon as every pull direction is blocked by
            two or more edges.  Never changes the result.
        check_simple: run the (quadratic) self-intersection check
            before the query.
        angle_units: units used when reporting arc angles
            ("degrees" or "radians").
        log_level: level the command line tool configures logging with.
    """

    early_exit: bool = True
    check_simple: bool = False
    angle_units: str = "degrees"
    log_level: str = "WARNING"

    def __post_init__(self):
        if self.angle_units not in ANGLE_UNITS:
            raise ValueError(f"angle_units must be one of {ANGLE_UNITS}, got {self.angle_units!r}")
        self.log_level = str(self.log_level).upper()
        if self.log_level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {LOG_LEVELS}, got {self.log_level!r}")

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "CastingConfig":
        data = dict(data or {})
        if "casting" in data and isinstance(data["casting"], dict):
            data = dict(data["casting"])
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"unknown casting config keys: {unknown}")
        return cls(**data)

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def updated(self, **overrides) -> "CastingConfig":
        """copy with every non-``None`` override applied"""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


def load_config(path: Path | str) -> CastingConfig:
    """Read a YAML casting configuration.

    The options may sit at the top level of the document or under a
    ``casting:`` key.  An empty document yields the defaults.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"config not found: {path}")
    with path.open("r", encoding="utf-8") as fp:
        data = yaml.safe_load(fp) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: config must be a mapping")
    return CastingConfig.from_dict(data)


__all__ = [
    "ANGLE_UNITS",
    "CastingConfig",
    "load_config",
]
