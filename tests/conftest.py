"""
pytest configuration and shared fixtures.
"""

import pytest
import numpy as np


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def simple_survival_data(rng):
    """Exponential survival times with one covariate and admin censoring."""
    n = 200
    x = rng.standard_normal(n)
    rate = np.exp(-3.0 + 0.7 * x)
    t = rng.exponential(1.0 / rate)
    cutoff = 60.0
    time = np.minimum(t, cutoff)
    event = (t <= cutoff).astype(np.float64)
    return time, event, x
