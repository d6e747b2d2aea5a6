"""
snapgrid/connectivity.py
------------------------
Per-element bookkeeping filled in while the mesh is being connected and
partitioned: face neighbors, face ownership, periodic transforms, constant
Jacobian flags and interpolation donor ranks.

All containers start "unallocated" and are allocated exactly once.
"""
import numpy as np

from .errors import AdjacencyStateError

NO_NEIGHBOR = -1
NO_PERIODIC_TRANSFORM = -1


class FaceAdjacency:
    ''' Neighbor, ownership and periodic-index slots, one per element face.

    The three arrays are allocated together by `initialize` or not at all.

    Attributes:
        neighbor_element (np.ndarray[int64]): Adjacent element index, -1 on a boundary.
        face_is_owned (np.ndarray[bool]): True if this side owns the shared face.
        periodic_transform_index (np.ndarray[int16]): Periodic transform id, -1 if none.
    '''
    __slots__ = ['neighbor_element', 'face_is_owned', 'periodic_transform_index']

    def __init__(self):
        self.neighbor_element = None
        self.face_is_owned = None
        self.periodic_transform_index = None

    @property
    def initialized(self):
        return self.neighbor_element is not None

    @property
    def n_faces(self):
        return 0 if self.neighbor_element is None else len(self.neighbor_element)

    def initialize(self, n_faces):
        if self.initialized:
            raise AdjacencyStateError(
                f"Neighbor storage already allocated for {self.n_faces} faces.")
        n_faces = int(n_faces)
        if n_faces < 1:
            raise ValueError(f"n_faces must be positive, got {n_faces}.")

        self.neighbor_element = np.full(n_faces, NO_NEIGHBOR, dtype=np.int64)
        self.face_is_owned = np.zeros(n_faces, dtype=bool)
        self.periodic_transform_index = np.full(n_faces, NO_PERIODIC_TRANSFORM, dtype=np.int16)

    def reset(self):
        ''' Back to -1 / False / -1 in every slot, keeping the allocation. '''
        self._require_initialized()
        self.neighbor_element[:] = NO_NEIGHBOR
        self.face_is_owned[:] = False
        self.periodic_transform_index[:] = NO_PERIODIC_TRANSFORM

    def _require_initialized(self):
        if not self.initialized:
            raise AdjacencyStateError("Neighbor storage used before initialize_neighbors().")

    def _check_face(self, face):
        self._require_initialized()
        if not 0 <= face < self.n_faces:
            raise IndexError(f"Face index {face} out of range [0, {self.n_faces}).")
        return face

    # --- Access ---
    def get_neighbor(self, face):
        return int(self.neighbor_element[self._check_face(face)])

    def set_neighbor(self, face, element):
        self.neighbor_element[self._check_face(face)] = int(element)

    def owns(self, face):
        return bool(self.face_is_owned[self._check_face(face)])

    def set_owns(self, face, owns):
        self.face_is_owned[self._check_face(face)] = bool(owns)

    def get_periodic_index(self, face):
        return int(self.periodic_transform_index[self._check_face(face)])

    def set_periodic_index(self, face, index):
        self.periodic_transform_index[self._check_face(face)] = int(index)

    def __repr__(self):
        if not self.initialized:
            return "FaceAdjacency(uninitialized)"
        return f"FaceAdjacency(neighbors={self.neighbor_element.tolist()})"


class JacobianFlags:
    ''' One boolean per face: True if the face's geometric Jacobian is constant. '''
    __slots__ = ['values']

    def __init__(self):
        self.values = None

    @property
    def initialized(self):
        return self.values is not None

    def initialize(self, n_faces):
        if self.initialized:
            raise AdjacencyStateError(
                f"Jacobian-constant flags already allocated for {len(self.values)} faces.")
        n_faces = int(n_faces)
        if n_faces < 1:
            raise ValueError(f"n_faces must be positive, got {n_faces}.")
        self.values = np.zeros(n_faces, dtype=bool)

    def _check_face(self, face):
        if not self.initialized:
            raise AdjacencyStateError(
                "Jacobian-constant flags used before initialize_jacobian_constant_faces().")
        if not 0 <= face < len(self.values):
            raise IndexError(f"Face index {face} out of range [0, {len(self.values)}).")
        return face

    def get(self, face):
        return bool(self.values[self._check_face(face)])

    def set(self, face, value):
        self.values[self._check_face(face)] = bool(value)


class InterpolationDonorSet:
    """
    Processor ranks for which an element is only an interpolation donor.

    Ranks are unique and kept in insertion order, so parallel runs see the
    same ordering every time. Sets are tiny (bounded by the neighbor ring of
    a partition), so the linear membership test is fine.
    """
    __slots__ = ['_ranks']

    def __init__(self):
        self._ranks = []

    def add(self, rank):
        ''' Stores rank unless it is already present. Returns True if added. '''
        rank = int(rank)
        if rank < 0:
            raise ValueError(f"Processor rank must be non-negative, got {rank}.")
        if rank in self._ranks:
            return False
        self._ranks.append(rank)
        return True

    def as_tuple(self):
        return tuple(self._ranks)

    def __contains__(self, rank):
        return rank in self._ranks

    def __iter__(self):
        return iter(self._ranks)

    def __len__(self):
        return len(self._ranks)

    def __repr__(self):
        return f"InterpolationDonorSet({self._ranks})"
