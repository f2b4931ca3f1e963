from __future__ import annotations

import logging
from dataclasses import dataclass, fields, replace
from pathlib import Path

import yaml

ALGORITHM_CHOICES = ("auto", "optimized", "standard")


@dataclass(frozen=True)
class SolverConfig:
    # Boards with more cells than this are rejected with an error result.
    max_cells: int = 1000
    # Dimension reported to callers alongside max_cells.
    max_size: int = 32
    # "auto" runs the packed variant up to this many cells, the standard one above.
    optimized_max_cells: int = 400
    # Caller-side limit on rows and cols for submitted boards.
    max_dimension: int = 30
    algorithm: str = "auto"
    minimize: bool = False
    max_nullity: int = 12
    log_level: str = "INFO"
    log_file: str | None = None

    def __post_init__(self):
        for name in ("max_cells", "max_size", "optimized_max_cells", "max_dimension"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise ValueError(f"{name} must be a positive integer, got {value!r}")
        if not isinstance(self.max_nullity, int) or self.max_nullity < 0:
            raise ValueError(
                f"max_nullity must be a non-negative integer, got {self.max_nullity!r}"
            )
        if self.algorithm not in ALGORITHM_CHOICES:
            raise ValueError(
                f"algorithm must be one of {ALGORITHM_CHOICES}, got {self.algorithm!r}"
            )
        if not isinstance(logging.getLevelName(str(self.log_level).upper()), int):
            raise ValueError(f"Unknown log level: {self.log_level!r}")

    def with_overrides(self, **overrides) -> "SolverConfig":
        """Return a copy with every non-None override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


def config_from_dict(cfg: dict | None) -> SolverConfig:
    """Build a SolverConfig from the parsed `solver:` / `logging:` sections."""
    cfg = cfg or {}
    unknown_sections = set(cfg) - {"solver", "logging"}
    if unknown_sections:
        raise ValueError(f"Unknown config sections: {sorted(unknown_sections)}")

    solver = dict(cfg.get("solver") or {})
    known = {f.name for f in fields(SolverConfig)} - {"log_level", "log_file"}
    unknown = set(solver) - known
    if unknown:
        raise ValueError(f"Unknown solver options: {sorted(unknown)}")

    log_cfg = dict(cfg.get("logging") or {})
    unknown = set(log_cfg) - {"level", "file"}
    if unknown:
        raise ValueError(f"Unknown logging options: {sorted(unknown)}")
    if "level" in log_cfg:
        solver["log_level"] = log_cfg["level"]
    if "file" in log_cfg:
        solver["log_file"] = log_cfg["file"]
    return SolverConfig(**solver)


def load_config(path: str | Path | None = None) -> SolverConfig:
    if path is None:
        return SolverConfig()
    with open(path, "r", encoding="utf-8") as f:
        cfg = yaml.safe_load(f)
    if cfg is not None and not isinstance(cfg, dict):
        raise ValueError(f"Config file {path} must contain a mapping")
    return config_from_dict(cfg)
