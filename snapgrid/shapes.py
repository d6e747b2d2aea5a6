''' shapes.py
    ---------
    Face shape evaluators. Each one turns the ordered coordinates of a face's
    nodes into the face measure: a length in 2D, an area in 3D.

    The evaluators are stateless, so a single instance per arity is built
    at import time and shared by every element.
'''
import numpy as np
from abc import ABC, abstractmethod

from .errors import InvalidTopologyError

# Two-point Gauss rule on [-1, 1]
_GAUSS_2 = 1.0 / np.sqrt(3.0)


class FaceShape(ABC):
    ''' Abstract Base Class for all face shapes.
        Subclasses fix the node count and the spatial dimension they live in.
    '''
    n_nodes = None
    n_dim = None

    def compute_measure(self, face_coords):
        ''' Returns the length / area of the face.

        Args:
            face_coords (array_like): (n_nodes, n_dim) coordinates, ordered
                as the face nodes.
        '''
        coords = np.asarray(face_coords, dtype=np.float64)
        if coords.shape != (self.n_nodes, self.n_dim):
            raise ValueError(f"{type(self).__name__} expects coordinates of shape "
                             f"{(self.n_nodes, self.n_dim)}, got {coords.shape}.")
        return self._measure(coords)

    @abstractmethod
    def _measure(self, coords):
        pass

    def __repr__(self):
        return f"{type(self).__name__}(n_nodes={self.n_nodes}, n_dim={self.n_dim})"


class SegmentFace(FaceShape):
    ''' Edge of a 2D element. Measure is the Euclidean distance between
        the two endpoints. '''
    n_nodes = 2
    n_dim = 2

    def _measure(self, coords):
        return float(np.linalg.norm(coords[1] - coords[0]))


class TriangleFace(FaceShape):
    """
    Linear triangle in 3D. The reference-to-physical Jacobian is constant,
    so one-point quadrature over the reference triangle (weight 1/2) is exact.
    """
    n_nodes = 3
    n_dim = 3

    def _measure(self, coords):
        # Columns of the Jacobian: dx/dxi, dx/deta
        d_xi = coords[1] - coords[0]
        d_eta = coords[2] - coords[0]
        return 0.5 * float(np.linalg.norm(np.cross(d_xi, d_eta)))


class QuadrilateralFace(FaceShape):
    """
    Bilinear quadrilateral in 3D. The surface Jacobian varies over a warped
    face, so its norm is integrated with a 2x2 Gauss rule on [-1, 1]^2.
    Nodes are ordered around the face, reference corners
    (-1,-1), (1,-1), (1,1), (-1,1).
    """
    n_nodes = 4
    n_dim = 3

    # Reference corner signs, one row per node
    _XI = np.array([-1.0, 1.0, 1.0, -1.0])
    _ETA = np.array([-1.0, -1.0, 1.0, 1.0])

    def _measure(self, coords):
        area = 0.0
        for xi in (-_GAUSS_2, _GAUSS_2):
            for eta in (-_GAUSS_2, _GAUSS_2):
                # Derivatives of the bilinear shape functions N_i = (1+xi_i xi)(1+eta_i eta)/4
                dn_dxi = 0.25 * self._XI * (1.0 + self._ETA * eta)
                dn_deta = 0.25 * self._ETA * (1.0 + self._XI * xi)
                t_xi = dn_dxi @ coords
                t_eta = dn_deta @ coords
                # Unit Gauss weights
                area += np.linalg.norm(np.cross(t_xi, t_eta))
        return float(area)


SEGMENT = SegmentFace()
TRIANGLE = TriangleFace()
QUADRILATERAL = QuadrilateralFace()

_SHAPES = {
    (2, 2): SEGMENT,
    (3, 3): TRIANGLE,
    (4, 3): QUADRILATERAL,
}


def face_shape(n_nodes_face, n_dim):
    ''' Picks the shared evaluator for a face with n_nodes_face nodes in an
        n_dim grid. Raises InvalidTopologyError if the arity does not fit. '''
    try:
        return _SHAPES[(int(n_nodes_face), int(n_dim))]
    except KeyError:
        expected = sorted(n for n, d in _SHAPES if d == n_dim)
        raise InvalidTopologyError(
            f"A face with {n_nodes_face} nodes is not valid in {n_dim}D "
            f"(expected {expected}).") from None
