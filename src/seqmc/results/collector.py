"""Online statistics collection during simulation runs."""

import math
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from seqmc.core.errors import UndefinedStatisticError
from seqmc.core.quantile import two_sided_quantile


@dataclass
class StatCollector:
    """Running mean, variance and confidence interval of a stream of observations.

    Observations are folded in with Welford's single-pass update, so no
    history is kept and the variance stays accurate for very large counts.

    Attributes:
        count: Number of observations folded in so far.
        mean: Arithmetic mean of those observations.
        m2: Sum of squared deviations from the running mean.
    """

    count: int = 0
    mean: float = 0.0
    m2: float = 0.0

    def add(self, observation: float) -> None:
        """Fold one observation into the running state.

        Args:
            observation: Outcome of one trial.
        """
        self.count += 1
        delta = observation - self.mean
        self.mean += delta / self.count
        self.m2 += delta * (observation - self.mean)

    def merge(self, other: "StatCollector") -> None:
        """Fold another collector's observations into this one.

        Uses the pairwise combine of (count, mean, m2), so collectors filled
        by independent workers can be reduced in any order.

        Args:
            other: Collector to merge in. It is left unchanged.
        """
        if other.count == 0:
            return
        if self.count == 0:
            self.count, self.mean, self.m2 = other.count, other.mean, other.m2
            return

        total = self.count + other.count
        delta = other.mean - self.mean
        self.mean += delta * other.count / total
        self.m2 += other.m2 + delta * delta * self.count * other.count / total
        self.count = total

    def number_of_observations(self) -> int:
        return self.count

    def average(self) -> float:
        """Return the current mean.

        Raises:
            UndefinedStatisticError: If no observation has been added.
        """
        if self.count == 0:
            raise UndefinedStatisticError("mean is undefined with no observations")
        return self.mean

    def variance(self) -> float:
        """Return the unbiased sample variance (denominator count - 1).

        Raises:
            UndefinedStatisticError: If fewer than 2 observations were added.
        """
        if self.count < 2:
            raise UndefinedStatisticError(
                f"variance needs at least 2 observations, got {self.count}"
            )
        return self.m2 / (self.count - 1)

    def standard_deviation(self) -> float:
        """Return the sample standard deviation."""
        # m2 can drift a hair below zero for constant streams
        return math.sqrt(max(self.variance(), 0.0))

    def confidence_interval_half_width(self, level: float) -> float:
        """Return the half-width of the two-sided normal CI for the mean.

        Args:
            level: Confidence level in (0, 1), e.g. 0.95.

        Returns:
            z * s / sqrt(count).

        Raises:
            UndefinedStatisticError: If fewer than 2 observations were added.
            InvalidArgumentError: If level is not in (0, 1).
        """
        s = self.standard_deviation()
        z = two_sided_quantile(level)
        return z * s / math.sqrt(self.count)

    def confidence_interval(self, level: float) -> Tuple[float, float]:
        """Return (lower, upper) bounds of the CI for the mean."""
        half_width = self.confidence_interval_half_width(level)
        return self.mean - half_width, self.mean + half_width

    def summary(self, level: float = 0.95) -> Dict[str, Optional[float]]:
        """Summary statistics as a dictionary.

        Returns:
            Dictionary containing mean, std, ci_lower, ci_upper,
            ci_half_width and n. Entries that are undefined for the current
            count are None.
        """
        result: Dict[str, Optional[float]] = {
            "mean": self.mean if self.count > 0 else None,
            "std": None,
            "ci_lower": None,
            "ci_upper": None,
            "ci_half_width": None,
            "n": self.count,
        }
        if self.count >= 2:
            half_width = self.confidence_interval_half_width(level)
            result.update(
                std=self.standard_deviation(),
                ci_lower=self.mean - half_width,
                ci_upper=self.mean + half_width,
                ci_half_width=half_width,
            )
        return result
