import logging

import numpy as np

from .config import GridConfig
from .connectivity import FaceAdjacency, InterpolationDonorSet, JacobianFlags
from .errors import DegenerateGeometryError
from .recording import preaccumulation
from .shapes import face_shape

logger = logging.getLogger(__name__)


class PrimalElement:
    ''' A cell or boundary face of the primal grid.

    An element knows its global node ids and its face topology (which local
    nodes bound each face), but owns no coordinates: they are handed to
    `set_centroid` every time the geometry is (re)built, e.g. after mesh
    deformation. This class uses `__slots__` because a grid holds one
    instance per cell.

    Subclasses fix the topology through three class attributes:

        N_NODES (int): Number of nodes.
        FACES (tuple of tuples): Local node ids of every face, in order.
        VTK_TYPE (int): VTK cell type id, for writers.

    Attributes:
        nodes (tuple of int): Global node indices, ordered as the topology expects.
        config (GridConfig): Grid settings; fixes the spatial dimension.
        global_index (int): Externally assigned, stable identifier.
        centroid (np.ndarray): (n_dim,) weighted centroid, zeros until set.
        face_centroids (np.ndarray): (n_faces, n_dim) face centroids, zeros until set.
        adjacency (FaceAdjacency): Neighbor / ownership / periodic slots.
        jacobian_flags (JacobianFlags): Constant-Jacobian flag per face.
        donors (InterpolationDonorSet): Ranks this element is only a donor for.
    '''
    __slots__ = ['nodes', 'config', 'global_index', 'centroid', 'face_centroids',
                 'adjacency', 'jacobian_flags', 'donors']

    N_NODES = None
    FACES = ()
    VTK_TYPE = None

    def __init__(self, nodes, config=None, global_index=0):
        self.config = GridConfig() if config is None else config

        nodes = tuple(int(n) for n in nodes)
        if len(nodes) != self.N_NODES:
            raise ValueError(f"{type(self).__name__} needs {self.N_NODES} nodes, "
                             f"got {len(nodes)}.")
        self.nodes = nodes

        # Fails fast on faces whose arity does not exist in this dimension
        for face in self.FACES:
            face_shape(len(face), self.config.n_dim)

        self.global_index = 0
        self.set_global_index(global_index)

        n_dim = self.config.n_dim
        self.centroid = np.zeros(n_dim, dtype=np.float64)
        self.face_centroids = np.zeros((self.n_faces, n_dim), dtype=np.float64)

        self.adjacency = FaceAdjacency()
        self.jacobian_flags = JacobianFlags()
        self.donors = InterpolationDonorSet()

    # --- Topology ---
    @property
    def n_dim(self):
        return self.config.n_dim

    @property
    def n_nodes(self):
        return self.N_NODES

    @property
    def n_faces(self):
        return len(self.FACES)

    def n_nodes_face(self, face):
        return len(self.FACES[face])

    def get_faces(self, face, node_in_face):
        ''' Local node id of the node_in_face-th node of face. '''
        return self.FACES[face][node_in_face]

    def get_global_index(self):
        return self.global_index

    def set_global_index(self, value):
        value = int(value)
        if value < 0:
            raise ValueError(f"Global index must be non-negative, got {value}.")
        self.global_index = value

    # --- Geometry ---
    def _as_coords(self, coords):
        coords = np.asarray(coords, dtype=np.float64)
        if coords.shape != (self.N_NODES, self.n_dim):
            raise ValueError(f"{type(self).__name__} expects coordinates of shape "
                             f"{(self.N_NODES, self.n_dim)}, got {coords.shape}.")
        return coords

    def compute_face_centroids(self, coords):
        ''' Average of the node coordinates of every face, (n_faces, n_dim). '''
        coords = self._as_coords(coords)
        return np.array([coords[list(face)].mean(axis=0) for face in self.FACES])

    def compute_face_measures(self, coords):
        ''' Length (2D) or area (3D) of every face, (n_faces,). '''
        coords = self._as_coords(coords)
        return np.array([face_shape(len(face), self.n_dim).compute_measure(coords[list(face)])
                         for face in self.FACES])

    def face_weights(self, coords):
        """
        Centroid weight of every face: (measure / largest measure)**2.

        Squaring the normalized measure keeps big faces dominant and pushes
        sliver faces towards zero weight. Raises DegenerateGeometryError if
        every face has zero measure.
        """
        measures = self.compute_face_measures(coords)
        max_face = measures.max()
        if not max_face > 0.0:
            raise DegenerateGeometryError(
                f"{type(self).__name__} {self.global_index} is degenerate: "
                f"every face has zero measure. Nodes: {self.nodes}.")
        return (measures / max_face) ** 2

    def set_centroid(self, coords, recorder=None):
        """
        Recomputes the face centroids and the element centroid from the
        coordinates of the element's nodes.

        The element centroid is the average of the face centroids weighted by
        the squared, max-normalized face measures (see face_weights). The
        computation is bracketed for the differentiation recorder: inputs are
        the node coordinates, outputs the centroid and the face centroids.

        Args:
            coords (array_like): (n_nodes, n_dim) coordinates, indexed by
                local node id.
            recorder (Recorder, optional): Differentiation recorder.

        Returns:
            np.ndarray: Copy of the new centroid.
        """
        coords = self._as_coords(coords)

        with preaccumulation(recorder) as rec:
            rec.declare_inputs(coords)

            face_centroids = self.compute_face_centroids(coords)
            try:
                weights = self.face_weights(coords)
            except DegenerateGeometryError:
                if self.config.degenerate_policy != "node_average":
                    raise
                logger.warning("Degenerate %s %d: falling back to node average centroid.",
                               type(self).__name__, self.global_index)
                centroid = coords.mean(axis=0)
            else:
                centroid = weights @ face_centroids / weights.sum()

            self.face_centroids = face_centroids
            self.centroid = centroid

            rec.declare_outputs(self.centroid, self.face_centroids)

        return self.centroid.copy()

    def get_centroid(self):
        return self.centroid.copy()

    def get_face_centroid(self, face):
        if not 0 <= face < self.n_faces:
            raise IndexError(f"Face index {face} out of range [0, {self.n_faces}).")
        return self.face_centroids[face].copy()

    # --- Adjacency ---
    def initialize_neighbors(self, n_faces=None):
        ''' Allocates neighbor (-1), ownership (False) and periodic (-1)
            slots. Allowed once per element. '''
        n_faces = self.n_faces if n_faces is None else int(n_faces)
        if n_faces != self.n_faces:
            raise ValueError(f"{type(self).__name__} has {self.n_faces} faces, "
                             f"cannot allocate neighbors for {n_faces}.")
        self.adjacency.initialize(n_faces)

    @property
    def neighbors_initialized(self):
        return self.adjacency.initialized

    def reset_neighbors(self):
        self.adjacency.reset()

    def get_neighbor_element(self, face):
        return self.adjacency.get_neighbor(face)

    def set_neighbor_element(self, face, element):
        self.adjacency.set_neighbor(face, element)

    def owns_face(self, face):
        return self.adjacency.owns(face)

    def set_own_face(self, face, owns):
        self.adjacency.set_owns(face, owns)

    def get_periodic_transform_index(self, face):
        return self.adjacency.get_periodic_index(face)

    def set_periodic_transform_index(self, face, index):
        self.adjacency.set_periodic_index(face, index)

    def describe_neighbors(self):
        ''' e.g. "( 3, -1, 7, )" '''
        text = "( " + "".join(f"{self.get_neighbor_element(f)}, "
                              for f in range(self.n_faces)) + ")"
        logger.debug("Neighbors of %s %d: %s", type(self).__name__, self.global_index, text)
        return text

    # --- Constant Jacobian flags ---
    def initialize_jacobian_constant_faces(self, n_faces=None):
        n_faces = self.n_faces if n_faces is None else int(n_faces)
        self.jacobian_flags.initialize(n_faces)

    def is_jacobian_constant(self, face):
        return self.jacobian_flags.get(face)

    def set_jacobian_constant(self, face, value=True):
        self.jacobian_flags.set(face, value)

    # --- Interpolation donors ---
    def add_interpolation_donor(self, rank):
        return self.donors.add(rank)

    def get_interpolation_donor_processors(self):
        return self.donors.as_tuple()

    def __repr__(self):
        return f"{type(self).__name__}(id={self.global_index}, nodes={self.nodes})"


# --- 2D / boundary elements ---
class Line(PrimalElement):
    __slots__ = ()
    N_NODES = 2
    FACES = ((0, 1),)
    VTK_TYPE = 3


class Triangle(PrimalElement):
    __slots__ = ()
    N_NODES = 3
    FACES = ((0, 1), (1, 2), (2, 0))
    VTK_TYPE = 5


class Quadrilateral(PrimalElement):
    __slots__ = ()
    N_NODES = 4
    FACES = ((0, 1), (1, 2), (2, 3), (3, 0))
    VTK_TYPE = 9


# --- 3D volume elements ---
class Tetrahedron(PrimalElement):
    __slots__ = ()
    N_NODES = 4
    FACES = ((0, 2, 1), (0, 1, 3), (0, 3, 2), (1, 2, 3))
    VTK_TYPE = 10


class Hexahedron(PrimalElement):
    ''' Nodes 0-3 form the bottom face, 4-7 the top face above them. '''
    __slots__ = ()
    N_NODES = 8
    FACES = ((0, 1, 5, 4), (1, 2, 6, 5), (2, 3, 7, 6),
             (3, 0, 4, 7), (0, 3, 2, 1), (4, 5, 6, 7))
    VTK_TYPE = 12


class Prism(PrimalElement):
    ''' Triangle 0-1-2 extruded to 3-4-5. '''
    __slots__ = ()
    N_NODES = 6
    FACES = ((0, 2, 1), (3, 4, 5),
             (0, 1, 4, 3), (1, 2, 5, 4), (2, 0, 3, 5))
    VTK_TYPE = 13


class Pyramid(PrimalElement):
    ''' Quadrilateral base 0-1-2-3, apex 4. '''
    __slots__ = ()
    N_NODES = 5
    FACES = ((0, 3, 2, 1),
             (0, 1, 4), (1, 2, 4), (2, 3, 4), (3, 0, 4))
    VTK_TYPE = 14


ELEMENT_TYPES = {cls.VTK_TYPE: cls for cls in
                 (Line, Triangle, Quadrilateral, Tetrahedron, Hexahedron, Prism, Pyramid)}


def element_from_vtk(vtk_type, nodes, config=None, global_index=0):
    ''' Builds an element from its VTK type id. '''
    try:
        cls = ELEMENT_TYPES[int(vtk_type)]
    except KeyError:
        raise ValueError(f"Unsupported VTK element type {vtk_type}.") from None
    return cls(nodes, config=config, global_index=global_index)
