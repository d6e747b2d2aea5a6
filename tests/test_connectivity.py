"""Tests for adjacency slots, constant-Jacobian flags and interpolation donors."""

import numpy as np
import pytest

from snapgrid.connectivity import FaceAdjacency, InterpolationDonorSet, JacobianFlags
from snapgrid.elements import Hexahedron, Quadrilateral, Triangle
from snapgrid.errors import AdjacencyStateError


class TestFaceAdjacency:
    @pytest.mark.parametrize("n_faces", [1, 3, 4, 6])
    def test_initial_values(self, n_faces):
        adj = FaceAdjacency()
        adj.initialize(n_faces)

        assert len(adj.neighbor_element) == len(adj.face_is_owned) == \
            len(adj.periodic_transform_index) == n_faces
        assert np.all(adj.neighbor_element == -1)
        assert not np.any(adj.face_is_owned)
        assert np.all(adj.periodic_transform_index == -1)

    def test_uninitialized_has_no_arrays(self):
        adj = FaceAdjacency()
        assert not adj.initialized
        assert adj.neighbor_element is None
        assert adj.face_is_owned is None
        assert adj.periodic_transform_index is None

    def test_double_initialization_fails(self):
        adj = FaceAdjacency()
        adj.initialize(3)
        with pytest.raises(AdjacencyStateError):
            adj.initialize(3)

    def test_access_before_initialization(self):
        adj = FaceAdjacency()
        with pytest.raises(AdjacencyStateError):
            adj.get_neighbor(0)
        with pytest.raises(AdjacencyStateError):
            adj.reset()

    def test_face_out_of_range(self):
        adj = FaceAdjacency()
        adj.initialize(3)
        with pytest.raises(IndexError):
            adj.set_neighbor(3, 1)
        with pytest.raises(IndexError):
            adj.owns(-1)

    def test_reset_keeps_allocation(self):
        adj = FaceAdjacency()
        adj.initialize(4)
        adj.set_neighbor(2, 17)
        adj.set_owns(2, True)
        adj.set_periodic_index(2, 1)

        arrays = adj.neighbor_element
        adj.reset()
        assert adj.neighbor_element is arrays
        assert adj.get_neighbor(2) == -1
        assert adj.owns(2) is False
        assert adj.get_periodic_index(2) == -1

    def test_zero_faces_rejected(self):
        with pytest.raises(ValueError):
            FaceAdjacency().initialize(0)


class TestElementAdjacency:
    def test_initialize_with_face_count(self, config_2d):
        tri = Triangle((0, 1, 2), config=config_2d)
        tri.initialize_neighbors(3)

        for f in range(3):
            assert tri.get_neighbor_element(f) == -1
            assert tri.owns_face(f) is False
            assert tri.get_periodic_transform_index(f) == -1

    def test_face_count_must_match(self, config_2d):
        tri = Triangle((0, 1, 2), config=config_2d)
        with pytest.raises(ValueError):
            tri.initialize_neighbors(4)

    def test_setters(self, config_3d):
        hexa = Hexahedron(range(8), config=config_3d)
        hexa.initialize_neighbors()
        hexa.set_neighbor_element(5, 12)
        hexa.set_own_face(5, True)
        hexa.set_periodic_transform_index(5, 2)

        assert hexa.get_neighbor_element(5) == 12
        assert hexa.owns_face(5) is True
        assert hexa.get_periodic_transform_index(5) == 2

    def test_reinitialization_fails(self, config_2d):
        quad = Quadrilateral((0, 1, 2, 3), config=config_2d)
        quad.initialize_neighbors()
        with pytest.raises(AdjacencyStateError):
            quad.initialize_neighbors()

    def test_describe_neighbors(self, config_2d):
        tri = Triangle((0, 1, 2), config=config_2d)
        tri.initialize_neighbors()
        tri.set_neighbor_element(1, 7)
        assert tri.describe_neighbors() == "( -1, 7, -1, )"


class TestJacobianFlags:
    @pytest.mark.parametrize("n_faces", range(1, 9))
    def test_all_false_after_initialization(self, n_faces):
        flags = JacobianFlags()
        flags.initialize(n_faces)
        assert all(flags.get(f) is False for f in range(n_faces))

    def test_independent_of_neighbors(self, config_2d):
        quad = Quadrilateral((0, 1, 2, 3), config=config_2d)
        quad.initialize_jacobian_constant_faces(4)
        quad.set_jacobian_constant(2)

        assert quad.is_jacobian_constant(2) is True
        assert quad.is_jacobian_constant(0) is False
        assert not quad.neighbors_initialized

    def test_reinitialization_fails(self, config_2d):
        quad = Quadrilateral((0, 1, 2, 3), config=config_2d)
        quad.initialize_jacobian_constant_faces()
        with pytest.raises(AdjacencyStateError):
            quad.initialize_jacobian_constant_faces()

    def test_query_before_initialization(self, config_2d):
        quad = Quadrilateral((0, 1, 2, 3), config=config_2d)
        with pytest.raises(AdjacencyStateError):
            quad.is_jacobian_constant(0)


class TestInterpolationDonorSet:
    def test_idempotent(self):
        donors = InterpolationDonorSet()
        assert donors.add(3) is True
        assert donors.add(3) is False
        assert len(donors) == 1

    def test_keeps_insertion_order(self):
        donors = InterpolationDonorSet()
        ranks = [5, 1, 9, 1, 0, 5, 12, 9, 7]
        for rank in ranks:
            donors.add(rank)
        assert donors.as_tuple() == (5, 1, 9, 0, 12, 7)

    def test_no_loss_across_growth(self):
        donors = InterpolationDonorSet()
        for rank in range(100):
            donors.add(rank)
            assert donors.as_tuple() == tuple(range(rank + 1))
        assert 42 in donors

    def test_negative_rank(self):
        with pytest.raises(ValueError):
            InterpolationDonorSet().add(-1)

    def test_element_interface(self, config_2d):
        tri = Triangle((0, 1, 2), config=config_2d)
        assert tri.get_interpolation_donor_processors() == ()
        tri.add_interpolation_donor(4)
        tri.add_interpolation_donor(2)
        tri.add_interpolation_donor(4)
        assert tri.get_interpolation_donor_processors() == (4, 2)
