"""Experimentation layer: simulation runners, precision and coverage studies."""

from seqmc.experiment.runner import (
    PrecisionOutcome,
    simulate_n_runs,
    simulate_until_half_width,
    estimate_required_runs,
)
from seqmc.experiment.analysis import (
    precision_sweep,
    coverage_study,
    find_minimum_parameter,
)

__all__ = [
    "PrecisionOutcome",
    "simulate_n_runs",
    "simulate_until_half_width",
    "estimate_required_runs",
    "precision_sweep",
    "coverage_study",
    "find_minimum_parameter",
]
