"""Tests for the bundled experiments."""

import numpy as np
import pytest

from seqmc.core.errors import InvalidArgumentError
from seqmc.core.experiments import (
    BernoulliExperiment,
    BirthdayExperiment,
    Experiment,
    birthday_probability,
)


class TestBernoulliExperiment:
    """Test the fixed-probability trial."""

    def test_outcomes_are_indicators(self, rng):
        """Outcomes are 0.0 or 1.0."""
        experiment = BernoulliExperiment(0.3)
        outcomes = {experiment.execute(rng) for _ in range(200)}

        assert outcomes <= {0.0, 1.0}

    def test_extremes(self, rng):
        """Probability 0 never succeeds, probability 1 always does."""
        assert all(BernoulliExperiment(0.0).execute(rng) == 0.0 for _ in range(100))
        assert all(BernoulliExperiment(1.0).execute(rng) == 1.0 for _ in range(100))

    def test_frequency(self, rng):
        """Success frequency is close to the probability."""
        experiment = BernoulliExperiment(0.25)
        mean = np.mean([experiment.execute(rng) for _ in range(20_000)])

        assert mean == pytest.approx(0.25, abs=0.015)

    @pytest.mark.parametrize("probability", [-0.1, 1.1])
    def test_rejects_bad_probability(self, probability):
        """Probability must be in [0, 1]."""
        with pytest.raises(InvalidArgumentError, match=r"\[0, 1\]"):
            BernoulliExperiment(probability)

    def test_satisfies_protocol(self):
        """BernoulliExperiment is an Experiment."""
        assert isinstance(BernoulliExperiment(0.5), Experiment)


class TestBirthdayExperiment:
    """Test the birthday coincidence trial."""

    def test_pigeonhole_always_succeeds(self, rng):
        """More people than days guarantees a shared day."""
        experiment = BirthdayExperiment(group_size=6, days_in_year=5, min_shared=2)

        assert all(experiment.execute(rng) == 1.0 for _ in range(50))

    def test_single_person_never_shares(self, rng):
        """One person cannot share a birthday."""
        experiment = BirthdayExperiment(group_size=1)

        assert all(experiment.execute(rng) == 0.0 for _ in range(50))

    def test_min_shared_one(self, rng):
        """min_shared = 1 is met by anyone."""
        assert BirthdayExperiment(group_size=1, min_shared=1).execute(rng) == 1.0

    def test_frequency_matches_exact(self, rng):
        """Frequency for 23 people is close to the exact 0.507."""
        experiment = BirthdayExperiment(23)
        mean = np.mean([experiment.execute(rng) for _ in range(10_000)])

        assert mean == pytest.approx(birthday_probability(23), abs=0.03)

    def test_reproducible(self):
        """Same seed gives the same outcomes."""
        experiment = BirthdayExperiment(30)
        a = [experiment.execute(np.random.default_rng(1)) for _ in range(5)]
        b = [experiment.execute(np.random.default_rng(1)) for _ in range(5)]

        assert a == b

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"group_size": 0},
            {"group_size": 10, "days_in_year": 0},
            {"group_size": 10, "min_shared": 0},
        ],
    )
    def test_rejects_bad_parameters(self, kwargs):
        """Non-positive parameters are rejected."""
        with pytest.raises(InvalidArgumentError):
            BirthdayExperiment(**kwargs)


class TestBirthdayProbability:
    """Test the exact birthday probability."""

    def test_classic_value(self):
        """23 people in 365 days give ~0.5072972343."""
        assert birthday_probability(23) == pytest.approx(0.5072972343, abs=1e-10)

    def test_trivial_groups(self):
        """0 or 1 people never share, more people than days always do."""
        assert birthday_probability(0) == 0.0
        assert birthday_probability(1) == 0.0
        assert birthday_probability(366) == 1.0

    def test_increasing(self):
        """Probability grows with group size."""
        values = [birthday_probability(k) for k in range(1, 60)]

        assert values == sorted(values)
