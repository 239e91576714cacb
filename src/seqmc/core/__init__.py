"""Core foundation layer: errors, quantile function, experiments, configuration."""

from seqmc.core.errors import InvalidArgumentError, SeqmcError, UndefinedStatisticError
from seqmc.core.quantile import inverse_std_normal_cdf, two_sided_quantile
from seqmc.core.experiments import (
    Experiment,
    BernoulliExperiment,
    BirthdayExperiment,
    birthday_probability,
)
from seqmc.core.config import (
    SimulationConfig,
    load_simulation_config,
    save_simulation_config,
)

__all__ = [
    "SeqmcError",
    "InvalidArgumentError",
    "UndefinedStatisticError",
    "inverse_std_normal_cdf",
    "two_sided_quantile",
    "Experiment",
    "BernoulliExperiment",
    "BirthdayExperiment",
    "birthday_probability",
    "SimulationConfig",
    "load_simulation_config",
    "save_simulation_config",
]
