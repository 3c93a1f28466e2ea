import numpy as np
import pytest


MEDIAN_VALUES = [
    70.24, 60.83, 85.13, 73.07, 95.93, 98.36, 25.59, 60.73, 32.21, 57.72,
    98.39, 42.23, 47.39, 61.58, 64.78, 66.71, 21.44, 61.58, 51.21, 18.78,
    69.33, 83.71, 72.75, 96.07, 59.69, 85.14, 89.58, 66.86, 22.29, 7.72,
    69.11, 48.53, 77.52, 10.23, 10.06, 18.04, 81.4, 3.46, 6.74, 10.9,
    88.57, 93.28, 75.38, 3.57, 40.93, 70.64, 13.98, 23.06, 44.94, 87.38,
]


class CountingAccessor:
    """Identity accessor that records how many times it was called."""

    def __init__(self):
        self.calls = 0

    def __call__(self, item):
        self.calls += 1
        return item


@pytest.fixture
def median_values():
    """Fresh copy of the 50-value median benchmark (median mutates its input)."""
    return list(MEDIAN_VALUES)


@pytest.fixture
def mixed_signs():
    """Alternating positive/negative integers"""
    return [1, -3, 2, -4, 3, -5, 4, -6, 5, -7]


@pytest.fixture
def counting_accessor():
    return CountingAccessor()


@pytest.fixture
def sample_data():
    """Fixture providing sample data for testing"""
    rng = np.random.default_rng(42)
    return list(rng.normal(5.0, 2.0, 1000))


@pytest.fixture
def ctx_basic():
    """Basic context for stats engine tests"""
    return {
        "log_base": 2.0,
        "nan_policy": "propagate",
    }
