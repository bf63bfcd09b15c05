# tests/conftest.py
"""Shared fixtures for childweight tests."""

import os
import tempfile
from pathlib import Path
from typing import Generator

os.environ.setdefault("MPLBACKEND", "Agg")

import numpy as np
import pytest

from childweight import Population


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def boy() -> dict:
    """10-year-old boy, 25 kg FFM, 5 kg FM."""
    return {"age": [10.0], "sex": [0], "ffm": [25.0], "fm": [5.0]}


@pytest.fixture
def small_population() -> Population:
    """Four children of mixed age and sex."""
    return Population.from_arrays(
        age=[10.0, 10.0, 6.0, 14.0],
        sex=[0, 1, 0, 1],
        ffm=[25.0, 24.0, 17.0, 38.0],
        fm=[5.0, 7.0, 3.5, 12.0],
    )


@pytest.fixture
def random_population() -> tuple[Population, np.ndarray]:
    """Ten seeded random children with per-day intake over 30 days."""
    rng = np.random.default_rng(42)
    n = 10
    population = Population.from_arrays(
        age=rng.uniform(3.0, 17.0, n),
        sex=rng.integers(0, 2, n),
        ffm=rng.uniform(12.0, 45.0, n),
        fm=rng.uniform(2.0, 15.0, n),
    )
    intake = rng.uniform(1200.0, 2800.0, (n, 30))
    return population, intake
