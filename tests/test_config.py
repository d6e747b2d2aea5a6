"""Tests for GridConfig validation."""

import dataclasses

import pytest

from snapgrid import GridConfig, PrimalMesh


@pytest.mark.parametrize("n_dim", [2, 3])
def test_valid_dimensions(n_dim):
    assert GridConfig.for_dimension(n_dim).n_dim == n_dim


@pytest.mark.parametrize("n_dim", [0, 1, 4])
def test_invalid_dimension(n_dim):
    with pytest.raises(ValueError):
        GridConfig(n_dim=n_dim)


def test_invalid_policy():
    with pytest.raises(ValueError):
        GridConfig(degenerate_policy="ignore")


def test_frozen():
    config = GridConfig(n_dim=3)
    with pytest.raises(dataclasses.FrozenInstanceError):
        config.n_dim = 2


def test_mesh_default_config():
    assert PrimalMesh().n_dim == 2
