"""
Decoupling Run Configuration

Options recognized by decouple_u_stat:

    B                       iteration count (default 1000); runtime is O(B * n^2)
    parallel                run iterations on a thread pool (default False)
    degree_of_parallelism   pool size; defaults to min(B, 4) when parallel
    seed                    base seed for every per-iteration stream (default 123)
    timeout                 wall-clock limit in seconds for the iteration phase

Configuration can be built directly, read from USTAT_DECOUPLE_* environment
variables, or loaded from a YAML file.
"""

from __future__ import annotations

import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from ustat_decouple.errors import InputError


DEFAULT_B = 1000
DEFAULT_SEED = 123

ENV_PREFIX = "USTAT_DECOUPLE_"


def _env_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return _env_bool(value)
    raise InputError(f"parallel must be a boolean, got {value!r}")


def _optional(value: Any, cast):
    if value is None or value == "":
        return None
    return cast(value)


@dataclass(frozen=True)
class DecoupleConfig:
    """Parameters for one decoupling analysis."""

    B: int = DEFAULT_B
    parallel: bool = False
    degree_of_parallelism: Optional[int] = None
    seed: int = DEFAULT_SEED
    timeout: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DecoupleConfig":
        unknown = set(data) - {"B", "parallel", "degree_of_parallelism", "seed", "timeout"}
        if unknown:
            raise InputError(f"unknown configuration keys: {', '.join(sorted(unknown))}")
        try:
            return cls(
                B=int(data.get("B", DEFAULT_B)),
                parallel=_parse_bool(data.get("parallel", False)),
                degree_of_parallelism=_optional(data.get("degree_of_parallelism"), int),
                seed=int(data.get("seed", DEFAULT_SEED)),
                timeout=_optional(data.get("timeout"), float),
            )
        except (TypeError, ValueError) as exc:
            raise InputError(f"invalid configuration value: {exc}") from exc

    @classmethod
    def from_file(cls, path: Path | str) -> "DecoupleConfig":
        """Load configuration from a YAML mapping."""
        try:
            data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
        except (OSError, yaml.YAMLError) as exc:
            raise InputError(f"cannot read configuration file {path}: {exc}") from exc
        if not isinstance(data, dict):
            raise InputError(f"configuration file {path} must contain a mapping")
        return cls.from_dict(data)

    @classmethod
    def from_env(cls) -> "DecoupleConfig":
        """
        Load configuration from environment variables.

        Environment variables:
            USTAT_DECOUPLE_B (default 1000)
            USTAT_DECOUPLE_PARALLEL (default false)
            USTAT_DECOUPLE_WORKERS
            USTAT_DECOUPLE_SEED (default 123)
            USTAT_DECOUPLE_TIMEOUT
        """
        try:
            return cls(
                B=int(os.getenv(ENV_PREFIX + "B", str(DEFAULT_B))),
                parallel=_env_bool(os.getenv(ENV_PREFIX + "PARALLEL", "false")),
                degree_of_parallelism=_optional(os.getenv(ENV_PREFIX + "WORKERS"), int),
                seed=int(os.getenv(ENV_PREFIX + "SEED", str(DEFAULT_SEED))),
                timeout=_optional(os.getenv(ENV_PREFIX + "TIMEOUT"), float),
            )
        except ValueError as exc:
            raise InputError(f"invalid {ENV_PREFIX}* environment value: {exc}") from exc

    def validate(self) -> None:
        """Validate configuration parameters."""
        errors = []

        if isinstance(self.B, bool) or not isinstance(self.B, int) or self.B < 1:
            errors.append(f"B must be a positive integer, got {self.B!r}")

        if isinstance(self.seed, bool) or not isinstance(self.seed, int) or self.seed < 0:
            errors.append(f"seed must be a non-negative integer, got {self.seed!r}")

        if self.degree_of_parallelism is not None and self.degree_of_parallelism < 1:
            errors.append(
                f"degree_of_parallelism must be >= 1, got {self.degree_of_parallelism}"
            )

        if self.timeout is not None and self.timeout <= 0:
            errors.append(f"timeout must be positive, got {self.timeout}")

        if errors:
            raise InputError("Invalid decoupling configuration:\n" + "\n".join(f"  - {e}" for e in errors))


__all__ = ["DEFAULT_B", "DEFAULT_SEED", "DecoupleConfig"]
