"""Pytest fixtures for seqmc tests."""

import numpy as np
import pytest


@pytest.fixture
def default_seed() -> int:
    """Default random seed for reproducible tests."""
    return 42


@pytest.fixture
def rng(default_seed) -> np.random.Generator:
    """Seeded generator shared within a test."""
    return np.random.default_rng(default_seed)
