"""Pytest configuration and fixtures for the primal grid tests."""

import sys
from pathlib import Path

import matplotlib
import numpy as np
import pytest

matplotlib.use("Agg")

# Add the project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from snapgrid import GridConfig  # noqa: E402


@pytest.fixture
def config_2d():
    return GridConfig(n_dim=2)


@pytest.fixture
def config_3d():
    return GridConfig(n_dim=3)


@pytest.fixture
def unit_square():
    """Corners of the unit square, counter-clockwise."""
    return np.array([[0.0, 0.0], [1.0, 0.0], [1.0, 1.0], [0.0, 1.0]])


@pytest.fixture
def unit_cube():
    """Hexahedron node ordering: bottom face 0-3, top face 4-7."""
    return np.array([
        [0.0, 0.0, 0.0], [1.0, 0.0, 0.0], [1.0, 1.0, 0.0], [0.0, 1.0, 0.0],
        [0.0, 0.0, 1.0], [1.0, 0.0, 1.0], [1.0, 1.0, 1.0], [0.0, 1.0, 1.0],
    ])
