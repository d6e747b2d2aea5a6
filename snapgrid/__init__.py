# snapgrid/__init__.py

__version__ = "1.0"

# Import Settings and Errors
from .config import GridConfig
from .errors import GridError, InvalidTopologyError, DegenerateGeometryError, AdjacencyStateError

# Import Primitives
from .elements import (PrimalElement, Line, Triangle, Quadrilateral,
                       Tetrahedron, Hexahedron, Prism, Pyramid, element_from_vtk)
from .connectivity import FaceAdjacency, JacobianFlags, InterpolationDonorSet
from .shapes import SegmentFace, TriangleFace, QuadrilateralFace, face_shape
from .recording import Recorder, NullRecorder, TapeRecorder, preaccumulation

# Import the Mesh class
from .mesh import PrimalMesh
from .structured import generate_quad_mesh, generate_hex_mesh
