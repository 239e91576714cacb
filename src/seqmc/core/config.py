"""Simulation configuration.

A SimulationConfig bundles the sequential-sampling parameters and the seed.
It can be loaded from and saved to YAML or JSON files.

Example usage:
    from seqmc.core.config import load_simulation_config

    config = load_simulation_config(Path("config/birthday.yaml"))
    rng = config.make_rng()
"""

import dataclasses
import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import numpy as np
import yaml

from seqmc.core.errors import InvalidArgumentError


DEFAULT_SEED = 0x134D6EE


@dataclass
class SimulationConfig:
    """Parameters for a sequential Monte Carlo run.

    Attributes:
        seed: Seed for the random generator.
        level: Two-sided confidence level, in (0, 1).
        max_half_width: Target confidence interval half-width.
        initial_runs: Trials before the first precision check (>= 2).
        batch_runs: Trials per refinement batch (> 0).
        max_runs: Optional cap on total trials. None means uncapped.
    """

    seed: int = DEFAULT_SEED
    level: float = 0.95
    max_half_width: float = 1e-4
    initial_runs: int = 1_000_000
    batch_runs: int = 100_000
    max_runs: Optional[int] = None

    def __post_init__(self) -> None:
        if not 0.0 < self.level < 1.0:
            raise InvalidArgumentError(f"level must be in (0, 1), got {self.level}")
        if self.initial_runs < 2:
            raise InvalidArgumentError("initial_runs must be at least 2")
        if self.batch_runs <= 0:
            raise InvalidArgumentError("batch_runs must be positive")
        if self.max_runs is not None and self.max_runs < self.initial_runs:
            raise InvalidArgumentError("max_runs must be >= initial_runs")

    def make_rng(self) -> np.random.Generator:
        """Create a fresh generator seeded with this config's seed."""
        return np.random.default_rng(self.seed)

    def clone_with_seed(self, new_seed: int) -> "SimulationConfig":
        """Create a copy of this config with a different seed."""
        return dataclasses.replace(self, seed=new_seed)

    def with_overrides(self, **changes: Any) -> "SimulationConfig":
        """Create a copy with some fields replaced (validated again)."""
        return dataclasses.replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        return dataclasses.asdict(self)


def load_simulation_config(config_path: Path) -> SimulationConfig:
    """Load a simulation configuration from a YAML or JSON file.

    Args:
        config_path: Path to configuration file (.yaml, .yml, or .json)

    Returns:
        SimulationConfig instance

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If file format is not supported
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path) as f:
        if config_path.suffix in (".yaml", ".yml"):
            data = yaml.safe_load(f) or {}
        elif config_path.suffix == ".json":
            data = json.load(f)
        else:
            raise ValueError(
                f"Unsupported config format: {config_path.suffix}. "
                "Use .yaml, .yml, or .json"
            )

    return SimulationConfig(**data)


def save_simulation_config(config: SimulationConfig, config_path: Path) -> None:
    """Save a simulation configuration to a YAML or JSON file.

    Args:
        config: Configuration to save
        config_path: Path to save to (.yaml, .yml, or .json)

    Raises:
        ValueError: If file format is not supported
    """
    config_path = Path(config_path)
    if config_path.suffix not in (".yaml", ".yml", ".json"):
        raise ValueError(
            f"Unsupported config format: {config_path.suffix}. "
            "Use .yaml, .yml, or .json"
        )

    config_path.parent.mkdir(parents=True, exist_ok=True)

    data = config.to_dict()
    with open(config_path, "w") as f:
        if config_path.suffix == ".json":
            json.dump(data, f, indent=2)
        else:
            yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)


def get_default_config_dir() -> Path:
    """Get default configuration directory.

    Checks in order:
    1. SEQMC_CONFIG_DIR environment variable
    2. ./config directory under the current working directory

    Returns:
        Path to configuration directory
    """
    if env_dir := os.environ.get("SEQMC_CONFIG_DIR"):
        return Path(env_dir)
    return Path.cwd() / "config"
