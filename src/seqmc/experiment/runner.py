"""Fixed-count and precision-driven simulation runners."""

import logging
import math
from dataclasses import dataclass
from typing import Callable, Optional, Union

import numpy as np

from seqmc.core.errors import InvalidArgumentError
from seqmc.core.experiments import Experiment
from seqmc.core.quantile import two_sided_quantile
from seqmc.results.collector import StatCollector

logger = logging.getLogger(__name__)

ExperimentLike = Union[Experiment, Callable[[np.random.Generator], float]]


@dataclass
class PrecisionOutcome:
    """Result of a precision-driven run.

    The collector passed to the run holds the same information; this is a
    convenience snapshot.

    Attributes:
        converged: Whether the half-width reached the target.
        n_runs: Total observations in the collector when sampling stopped.
        mean: Estimated mean.
        half_width: Final CI half-width.
        projected_runs: Batch-rounded total projected after the initial
            phase, or None if no projection was made.
        n_checks: Number of half-width evaluations performed.
    """
    converged: bool
    n_runs: int
    mean: float
    half_width: float
    projected_runs: Optional[int]
    n_checks: int


def _trial_fn(experiment: ExperimentLike) -> Callable[[np.random.Generator], float]:
    """Resolve an experiment object or plain callable to a trial function."""
    execute = getattr(experiment, "execute", None)
    if callable(execute):
        return execute
    if callable(experiment):
        return experiment
    raise InvalidArgumentError(
        f"experiment must have an execute(rng) method or be callable, got {type(experiment).__name__}"
    )


def simulate_n_runs(
    experiment: ExperimentLike,
    n: int,
    rng: np.random.Generator,
    collector: StatCollector,
) -> None:
    """Run an experiment n times and collect every outcome.

    The same generator is used throughout, so consecutive calls continue
    the same random stream.

    Args:
        experiment: Experiment (or callable) to run each time.
        n: Number of runs. Zero is a no-op.
        rng: Random generator passed to every run.
        collector: Collector receiving each outcome, in order.
    """
    if n < 0:
        raise InvalidArgumentError(f"n must be non-negative, got {n}")

    execute = _trial_fn(experiment)
    add = collector.add
    for _ in range(n):
        add(execute(rng))


def estimate_required_runs(
    collector: StatCollector,
    level: float,
    max_half_width: float,
    batch_runs: int,
) -> int:
    """Project the total number of runs needed to reach a target half-width.

    Solves half_width = z * s / sqrt(N) for N using the current sample
    standard deviation, then rounds up to a multiple of batch_runs.

    Args:
        collector: Collector with at least 2 observations.
        level: Confidence level.
        max_half_width: Target half-width, must be positive.
        batch_runs: Rounding granularity.

    Returns:
        Projected total number of runs (a multiple of batch_runs).
    """
    if max_half_width <= 0:
        raise InvalidArgumentError("max_half_width must be positive to project a run count")
    if batch_runs <= 0:
        raise InvalidArgumentError("batch_runs must be positive")

    z = two_sided_quantile(level)
    factor = z * collector.standard_deviation() / max_half_width
    required = math.ceil(factor * factor)
    return -(-required // batch_runs) * batch_runs


def simulate_until_half_width(
    experiment: ExperimentLike,
    level: float,
    max_half_width: float,
    initial_runs: int,
    batch_runs: int,
    rng: np.random.Generator,
    collector: StatCollector,
    *,
    project: bool = True,
    max_runs: Optional[int] = None,
) -> PrecisionOutcome:
    """Run an experiment until the CI half-width is at most max_half_width.

    First runs initial_runs trials. If the interval is still too wide,
    projects the total needed from the current variance estimate and runs
    the missing trials in one shot. Then runs batch_runs more trials at a
    time, re-checking after every batch, until the target is met.

    A non-positive max_half_width can only be met when the observed
    variance is zero; otherwise sampling continues until max_runs (or
    forever if max_runs is None).

    Args:
        experiment: Experiment (or callable) to run each time.
        level: Confidence level of the interval.
        max_half_width: Target half-width.
        initial_runs: Trials before the first check, at least 2.
        batch_runs: Trials per refinement batch, positive.
        rng: Random generator passed to every run.
        collector: Collector receiving each outcome.
        project: If False, skip the analytic jump and only refine in batches.
        max_runs: Optional cap on the collector's total observation count.

    Returns:
        PrecisionOutcome describing where sampling stopped.

    Raises:
        InvalidArgumentError: On invalid arguments, before any trial runs.
    """
    if batch_runs <= 0:
        raise InvalidArgumentError(f"batch_runs must be positive, got {batch_runs}")
    if initial_runs < 2:
        raise InvalidArgumentError(f"initial_runs must be at least 2, got {initial_runs}")
    if not 0.0 < level < 1.0:
        raise InvalidArgumentError(f"level must be in (0, 1), got {level}")
    if max_runs is not None and max_runs < collector.number_of_observations() + initial_runs:
        raise InvalidArgumentError("max_runs leaves no room for the initial runs")

    simulate_n_runs(experiment, initial_runs, rng, collector)
    half_width = collector.confidence_interval_half_width(level)
    n_checks = 1
    logger.info(
        f"Initial phase: {collector.number_of_observations()} runs, "
        f"half-width {half_width:.6g} (target {max_half_width:.6g})"
    )

    projected = None
    if half_width > max_half_width and project and max_half_width > 0:
        projected = estimate_required_runs(collector, level, max_half_width, batch_runs)
        if max_runs is not None:
            projected = min(projected, max_runs)
        additional = max(0, projected - collector.number_of_observations())
        logger.info(f"Projected {projected} total runs, running {additional} more")
        simulate_n_runs(experiment, additional, rng, collector)
        half_width = collector.confidence_interval_half_width(level)
        n_checks += 1

    while half_width > max_half_width:
        batch = batch_runs
        if max_runs is not None:
            batch = min(batch, max_runs - collector.number_of_observations())
            if batch <= 0:
                logger.warning(
                    f"Stopped at max_runs={max_runs} with half-width {half_width:.6g} "
                    f"above target {max_half_width:.6g}"
                )
                break
        simulate_n_runs(experiment, batch, rng, collector)
        half_width = collector.confidence_interval_half_width(level)
        n_checks += 1
        logger.debug(
            f"Batch done: {collector.number_of_observations()} runs, half-width {half_width:.6g}"
        )

    return PrecisionOutcome(
        converged=half_width <= max_half_width,
        n_runs=collector.number_of_observations(),
        mean=collector.average(),
        half_width=half_width,
        projected_runs=projected,
        n_checks=n_checks,
    )
