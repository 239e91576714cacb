"""Random experiments that can be sampled by the simulation runner.

An experiment is anything with an ``execute(rng)`` method returning a float.
The runner also accepts a plain callable ``f(rng) -> float``.
"""

from dataclasses import dataclass
from typing import Protocol, runtime_checkable

import numpy as np

from seqmc.core.errors import InvalidArgumentError


@runtime_checkable
class Experiment(Protocol):
    """A single random trial.

    Implementations must be callable any number of times with the same
    generator, consuming some finite amount of randomness each time.
    """

    def execute(self, rng: np.random.Generator) -> float:
        """Run one trial and return its outcome (usually 0.0 or 1.0)."""
        ...


@dataclass(frozen=True)
class BernoulliExperiment:
    """Success (1.0) with a fixed probability, failure (0.0) otherwise.

    Attributes:
        probability: Success probability in [0, 1].
    """

    probability: float

    def __post_init__(self) -> None:
        if not 0.0 <= self.probability <= 1.0:
            raise InvalidArgumentError(
                f"probability must be in [0, 1], got {self.probability}"
            )

    def execute(self, rng: np.random.Generator) -> float:
        return 1.0 if rng.random() < self.probability else 0.0


@dataclass(frozen=True)
class BirthdayExperiment:
    """Birthday coincidence trial.

    A group of ``group_size`` people each pick a birthday uniformly among
    ``days_in_year`` days. The trial succeeds if some day is picked at
    least ``min_shared`` times.

    Attributes:
        group_size: Number of people in the group (K).
        days_in_year: Number of possible days (Y).
        min_shared: Occurrences of a single day needed for success (M).
    """

    group_size: int
    days_in_year: int = 365
    min_shared: int = 2

    def __post_init__(self) -> None:
        if self.group_size < 1:
            raise InvalidArgumentError("group_size must be at least 1")
        if self.days_in_year < 1:
            raise InvalidArgumentError("days_in_year must be at least 1")
        if self.min_shared < 1:
            raise InvalidArgumentError("min_shared must be at least 1")

    def execute(self, rng: np.random.Generator) -> float:
        days = rng.integers(0, self.days_in_year, size=self.group_size)
        counts = np.bincount(days, minlength=self.days_in_year)
        return 1.0 if counts.max() >= self.min_shared else 0.0


def birthday_probability(group_size: int, days_in_year: int = 365) -> float:
    """Exact probability that at least two of ``group_size`` people share a day.

    Args:
        group_size: Number of people.
        days_in_year: Number of equally likely days.

    Returns:
        1 - prod_{i<K} (Y - i) / Y. For K=23, Y=365 this is ~0.5072972343.
    """
    if group_size < 0 or days_in_year < 1:
        raise InvalidArgumentError("group_size must be >= 0 and days_in_year >= 1")
    if group_size > days_in_year:
        return 1.0

    p_distinct = 1.0
    for i in range(group_size):
        p_distinct *= (days_in_year - i) / days_in_year
    return 1.0 - p_distinct
