"""Tests for the element quality inspector."""

import numpy as np
import pytest

from snapgrid import GridConfig, PrimalMesh
from snapgrid.elements import Triangle
from snapgrid.errors import DegenerateGeometryError
from snapgrid.quality import ElementQuality
from snapgrid.structured import generate_quad_mesh


def test_uniform_mesh():
    inspector = ElementQuality(generate_quad_mesh(3, 3)).analyze()
    assert np.allclose(inspector.min_weights, 1.0)
    assert np.allclose(inspector.centroid_offsets, 0.0, atol=1e-12)


def test_stretched_cells_have_small_weights():
    inspector = ElementQuality(generate_quad_mesh(2, 2, lx=10.0, ly=1.0)).analyze()
    # Faces of length 0.5 against faces of length 5
    assert np.allclose(inspector.min_weights, 0.01)


def test_report():
    summary = ElementQuality(generate_quad_mesh(2, 2)).report()
    assert summary["n_elements"] == 4
    assert summary["min_face_weight"] == 1.0


def test_plot_histograms():
    fig = ElementQuality(generate_quad_mesh(2, 2)).plot_histograms()
    assert len(fig.axes) == 2


def test_degenerate_element_with_node_average_policy():
    mesh = PrimalMesh(GridConfig(n_dim=2, degenerate_policy="node_average"))
    for xy in [(0.0, 0.0), (1.0, 0.0), (0.0, 1.0)]:
        mesh.add_node(*xy)
    for _ in range(3):
        mesh.add_node(0.0, 0.0)
    mesh.add_element(Triangle, (0, 1, 2))
    mesh.add_element(Triangle, (3, 4, 5))
    mesh.compute_centroids()

    inspector = ElementQuality(mesh).analyze()
    assert inspector.min_weights[1] == 0.0
    assert inspector.centroid_offsets[1] == 0.0
    assert inspector.report()["min_face_weight"] == 0.0


def test_degenerate_element_raises_by_default():
    mesh = PrimalMesh(GridConfig(n_dim=2))
    for _ in range(3):
        mesh.add_node(0.0, 0.0)
    mesh.add_element(Triangle, (0, 1, 2))
    with pytest.raises(DegenerateGeometryError):
        ElementQuality(mesh).analyze()
