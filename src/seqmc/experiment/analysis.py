"""Studies built on the runners.

- precision_sweep(): Repeat a precision-driven run for successively tighter targets
- coverage_study(): Measure how often fixed-size CIs contain a known value
- find_minimum_parameter(): Scan a parameter until the estimate crosses a threshold
"""

import logging
import math
import time
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from seqmc.core.config import SimulationConfig
from seqmc.core.errors import InvalidArgumentError
from seqmc.core.quantile import two_sided_quantile
from seqmc.experiment.runner import (
    ExperimentLike,
    simulate_n_runs,
    simulate_until_half_width,
)
from seqmc.results.collector import StatCollector

logger = logging.getLogger(__name__)


@dataclass
class PrecisionSweepResult:
    """Result of a precision sweep.

    Attributes:
        level: Confidence level used for every run.
        results: DataFrame with columns: max_half_width, estimate, half_width,
            ci_lower, ci_upper, n_runs, converged, elapsed_s.
    """
    level: float
    results: pd.DataFrame

    def to_dataframe(self) -> pd.DataFrame:
        """Return results as DataFrame."""
        return self.results

    def summary(self) -> str:
        lines = []
        for row in self.results.itertuples(index=False):
            lines.append(
                f"target {row.max_half_width:.2e}: estimate {row.estimate:.6f} "
                f"[{row.ci_lower:.6f}, {row.ci_upper:.6f}] after {row.n_runs} runs "
                f"({row.elapsed_s:.1f} s)"
            )
        return "\n".join(lines)


@dataclass
class CoverageResult:
    """Result of a coverage study.

    Attributes:
        true_value: Value the intervals were checked against.
        level: Nominal confidence level of each interval.
        sample_size: Runs per interval.
        repetitions: Number of intervals built.
        n_contained: Intervals that contained true_value.
        coverage: Empirical coverage, n_contained / repetitions.
        coverage_interval: (lower, upper) normal-approximation CI for the coverage.
        intervals: DataFrame with columns: estimate, ci_lower, ci_upper, contains.
    """
    true_value: float
    level: float
    sample_size: int
    repetitions: int
    n_contained: int
    coverage: float
    coverage_interval: Tuple[float, float]
    intervals: pd.DataFrame

    def summary(self) -> str:
        """Human-readable summary of the coverage study."""
        return (
            f"{self.n_contained} of {self.repetitions} intervals "
            f"({self.level:.0%}, n={self.sample_size}) contain {self.true_value}\n"
            f"Empirical coverage {self.coverage:.4f} "
            f"(CI: {self.coverage_interval[0]:.4f} - {self.coverage_interval[1]:.4f})"
        )


@dataclass
class ThresholdSearchResult:
    """Result of a minimum-parameter search.

    Attributes:
        threshold: Estimate value that had to be exceeded.
        found: First parameter value whose estimate exceeded threshold,
            or None if no scanned value did.
        estimate_at_found: Estimate at the found value (None if not found).
        history: DataFrame with columns: value, estimate, ci_lower, ci_upper.
    """
    threshold: float
    found: Optional[int]
    estimate_at_found: Optional[float]
    history: pd.DataFrame

    def summary(self) -> str:
        if self.found is None:
            return f"No scanned value gave an estimate above {self.threshold}"
        return (
            f"Minimal value {self.found}: estimate {self.estimate_at_found:.6f} "
            f"exceeds {self.threshold}"
        )


def precision_sweep(
    experiment: ExperimentLike,
    config: SimulationConfig,
    half_widths: Optional[Sequence[float]] = None,
    n_steps: int = 3,
    rng: Optional[np.random.Generator] = None,
) -> PrecisionSweepResult:
    """Run precision-driven estimations for successively tighter targets.

    Each target gets a fresh collector; the generator is shared, so runs
    continue the same random stream.

    Args:
        experiment: Experiment to estimate.
        config: Sampling parameters (level, initial/batch runs, cap, seed).
        half_widths: Targets to reach. Defaults to config.max_half_width
            halved n_steps - 1 times.
        n_steps: Number of default targets when half_widths is None.
        rng: Generator to use. Defaults to config.make_rng().

    Returns:
        PrecisionSweepResult with one row per target.
    """
    if half_widths is None:
        half_widths = [config.max_half_width / 2 ** i for i in range(n_steps)]
    if rng is None:
        rng = config.make_rng()

    rows = []
    for max_half_width in half_widths:
        collector = StatCollector()
        start = time.perf_counter()
        outcome = simulate_until_half_width(
            experiment,
            config.level,
            max_half_width,
            config.initial_runs,
            config.batch_runs,
            rng,
            collector,
            max_runs=config.max_runs,
        )
        elapsed = time.perf_counter() - start
        logger.info(f"Target {max_half_width:.2e} reached after {outcome.n_runs} runs")

        rows.append({
            "max_half_width": max_half_width,
            "estimate": outcome.mean,
            "half_width": outcome.half_width,
            "ci_lower": outcome.mean - outcome.half_width,
            "ci_upper": outcome.mean + outcome.half_width,
            "n_runs": outcome.n_runs,
            "converged": outcome.converged,
            "elapsed_s": elapsed,
        })

    return PrecisionSweepResult(level=config.level, results=pd.DataFrame(rows))


def coverage_study(
    experiment: ExperimentLike,
    true_value: float,
    sample_size: int,
    repetitions: int,
    rng: np.random.Generator,
    level: float = 0.95,
) -> CoverageResult:
    """Estimate the actual coverage of fixed-size confidence intervals.

    Builds `repetitions` intervals of `sample_size` runs each and counts
    how many contain `true_value`. For a well-calibrated interval the
    empirical coverage should be close to `level`.

    Args:
        experiment: Experiment to sample.
        true_value: Known value of the estimated mean.
        sample_size: Runs per interval (at least 2).
        repetitions: Number of intervals (at least 1).
        rng: Generator shared by all repetitions.
        level: Confidence level of each interval.

    Returns:
        CoverageResult with the empirical coverage and its own CI.
    """
    if sample_size < 2:
        raise InvalidArgumentError("sample_size must be at least 2")
    if repetitions < 1:
        raise InvalidArgumentError("repetitions must be at least 1")
    z = two_sided_quantile(level)

    rows = []
    for _ in range(repetitions):
        collector = StatCollector()
        simulate_n_runs(experiment, sample_size, rng, collector)
        lower, upper = collector.confidence_interval(level)
        rows.append({
            "estimate": collector.average(),
            "ci_lower": lower,
            "ci_upper": upper,
            "contains": lower <= true_value <= upper,
        })

    intervals = pd.DataFrame(rows)
    n_contained = int(intervals["contains"].sum())
    coverage = n_contained / repetitions
    margin = z * math.sqrt(coverage * (1 - coverage) / repetitions)

    return CoverageResult(
        true_value=true_value,
        level=level,
        sample_size=sample_size,
        repetitions=repetitions,
        n_contained=n_contained,
        coverage=coverage,
        coverage_interval=(coverage - margin, coverage + margin),
        intervals=intervals,
    )


def find_minimum_parameter(
    factory: Callable[[int], ExperimentLike],
    values: Iterable[int],
    sample_size: int,
    threshold: float,
    rng: np.random.Generator,
    level: float = 0.95,
) -> ThresholdSearchResult:
    """Find the first parameter value whose estimated mean exceeds a threshold.

    Scans `values` in order, building an experiment for each with
    `factory(value)` and estimating its mean from `sample_size` runs.
    Stops at the first estimate above `threshold`.

    Example:
        >>> # Smallest group in which three people share a birthday with p > 0.5
        >>> result = find_minimum_parameter(
        ...     lambda k: BirthdayExperiment(k, min_shared=3),
        ...     range(80, 101),
        ...     sample_size=1_000_000,
        ...     threshold=0.5,
        ...     rng=np.random.default_rng(0x134D6EE),
        ... )
        >>> print(result.summary())
    """
    if sample_size < 2:
        raise InvalidArgumentError("sample_size must be at least 2")

    history: List[dict] = []
    found = None
    estimate_at_found = None

    for value in values:
        collector = StatCollector()
        simulate_n_runs(factory(value), sample_size, rng, collector)
        estimate = collector.average()
        lower, upper = collector.confidence_interval(level)
        history.append({
            "value": value,
            "estimate": estimate,
            "ci_lower": lower,
            "ci_upper": upper,
        })
        logger.debug(f"value={value}: estimate {estimate:.6f}")

        if estimate > threshold:
            found = value
            estimate_at_found = estimate
            break

    return ThresholdSearchResult(
        threshold=threshold,
        found=found,
        estimate_at_found=estimate_at_found,
        history=pd.DataFrame(history, columns=["value", "estimate", "ci_lower", "ci_upper"]),
    )
