"""
seqmc - Sequential Monte Carlo estimation.

Estimates the probability of a random outcome by repeated sampling and
reports it with a normal-approximation confidence interval, sampling
until the interval is as narrow as requested.
"""

__version__ = "0.1.0"

from seqmc.core.quantile import inverse_std_normal_cdf
from seqmc.results.collector import StatCollector
from seqmc.experiment.runner import simulate_n_runs, simulate_until_half_width

__all__ = [
    "inverse_std_normal_cdf",
    "StatCollector",
    "simulate_n_runs",
    "simulate_until_half_width",
    "__version__",
]
