import logging

import numpy as np

from .config import GridConfig
from .errors import InvalidTopologyError

logger = logging.getLogger(__name__)


# --- The Mesh Class ---
class PrimalMesh:
    """
    Owns the node coordinates and the elements of a primal grid, and drives
    the per-element kernel: connectivity, periodic links and centroids.

    Node and element indices are 0-based positions in insertion order.
    """
    def __init__(self, config=None):
        self.config = GridConfig() if config is None else config
        self._coords = []
        self.elements = []
        self._coord_array = None

    @property
    def n_dim(self):
        return self.config.n_dim

    @property
    def n_nodes(self):
        return len(self._coords)

    @property
    def n_elements(self):
        return len(self.elements)

    @property
    def coordinates(self):
        ''' (n_nodes, n_dim) array of all node coordinates. '''
        if self._coord_array is None:
            self._coord_array = np.array(self._coords, dtype=np.float64).reshape(-1, self.n_dim)
        return self._coord_array

    def add_node(self, *coords):
        """Stores a node and returns its index."""
        if len(coords) != self.n_dim:
            raise ValueError(f"Expected {self.n_dim} coordinates, got {len(coords)}.")
        self._coords.append([float(c) for c in coords])
        self._coord_array = None
        return len(self._coords) - 1

    def add_element(self, cls, node_ids, global_index=None):
        """Creates an element of type cls and returns it.

        global_index defaults to the element's position in the mesh.
        """
        for nid in node_ids:
            if not 0 <= nid < self.n_nodes:
                raise IndexError(f"Node {nid} does not exist (mesh has {self.n_nodes} nodes).")
        if global_index is None:
            global_index = len(self.elements)
        element = cls(node_ids, config=self.config, global_index=global_index)
        self.elements.append(element)
        return element

    def coordinates_of(self, element):
        ''' Coordinates of element's nodes, indexed by local node id. '''
        return self.coordinates[list(element.nodes)]

    # --- Connectivity ---
    @staticmethod
    def _is_boundary_element(element):
        ''' Single-face elements (e.g. a Line in 2D) mark the boundary; they
            lie on a cell face rather than next to it. '''
        return element.n_faces == 1

    def build_connectivity(self):
        """
        Matches element faces through their sorted global node ids.

        Shared faces link both elements as neighbors; the element with the
        lower index owns the face. Boundary faces keep neighbor -1 and are
        owned by their only element. Boundary elements (single-face elements)
        take no part in the matching: they get neighbor -1 and own their face.

        The topology is validated before any element is touched, so a face
        shared by more than two elements leaves every element as it was.
        Returns the number of internal faces.
        """
        face_to_elements = {}
        for e_idx, element in enumerate(self.elements):
            if self._is_boundary_element(element):
                continue
            for f in range(element.n_faces):
                key = tuple(sorted(element.nodes[n] for n in element.FACES[f]))
                face_to_elements.setdefault(key, []).append((e_idx, f))

        for key, sides in face_to_elements.items():
            if len(sides) > 2:
                raise InvalidTopologyError(
                    f"Face {key} is shared by {len(sides)} elements.")

        for element in self.elements:
            if not element.neighbors_initialized:
                element.initialize_neighbors()
            else:
                element.reset_neighbors()
            if self._is_boundary_element(element):
                element.set_own_face(0, True)

        n_internal = 0
        for sides in face_to_elements.values():
            (e_a, f_a) = sides[0]
            self.elements[e_a].set_own_face(f_a, True)
            if len(sides) == 2:
                (e_b, f_b) = sides[1]
                self.elements[e_a].set_neighbor_element(f_a, e_b)
                self.elements[e_b].set_neighbor_element(f_b, e_a)
                n_internal += 1

        logger.info("Connectivity built: %d elements, %d internal faces, %d boundary faces.",
                    self.n_elements, n_internal, len(face_to_elements) - n_internal)
        return n_internal

    def boundary_faces(self):
        ''' List of (element index, face index) of cell faces with no neighbor. '''
        return [(e_idx, f)
                for e_idx, element in enumerate(self.elements)
                if not self._is_boundary_element(element)
                for f in range(element.n_faces)
                if element.get_neighbor_element(f) == -1]

    def link_periodic_faces(self, elem_a, face_a, elem_b, face_b, transform_index):
        """
        Pairs two boundary faces across a periodic boundary. Both sides get
        the same transform index; elem_a owns the face.
        """
        transform_index = int(transform_index)
        if transform_index < 0:
            raise ValueError(f"Periodic transform index must be non-negative, got {transform_index}.")

        a = self.elements[elem_a]
        b = self.elements[elem_b]
        if a.n_nodes_face(face_a) != b.n_nodes_face(face_b):
            raise InvalidTopologyError(
                f"Periodic faces have different node counts "
                f"({a.n_nodes_face(face_a)} vs {b.n_nodes_face(face_b)}).")

        a.set_neighbor_element(face_a, elem_b)
        b.set_neighbor_element(face_b, elem_a)
        a.set_periodic_transform_index(face_a, transform_index)
        b.set_periodic_transform_index(face_b, transform_index)
        a.set_own_face(face_a, True)
        b.set_own_face(face_b, False)

    # --- Geometry ---
    def compute_centroids(self, recorder=None):
        ''' Runs set_centroid on every element. Returns (n_elements, n_dim). '''
        coords = self.coordinates
        centroids = np.array([element.set_centroid(coords[list(element.nodes)], recorder=recorder)
                              for element in self.elements])
        logger.info("Centroids computed for %d elements.", self.n_elements)
        return centroids.reshape(-1, self.n_dim)

    def move_nodes(self, displacement, recorder=None):
        """
        Deforms the mesh by displacement (n_nodes, n_dim) and recomputes
        every centroid from the new coordinates.
        """
        displacement = np.asarray(displacement, dtype=np.float64)
        if displacement.shape != (self.n_nodes, self.n_dim):
            raise ValueError(f"Displacement must have shape {(self.n_nodes, self.n_dim)}, "
                             f"got {displacement.shape}.")
        new_coords = self.coordinates + displacement
        self._coords = new_coords.tolist()
        self._coord_array = new_coords
        return self.compute_centroids(recorder=recorder)

    def __repr__(self):
        return f"PrimalMesh(n_dim={self.n_dim}, nodes={self.n_nodes}, elements={self.n_elements})"
