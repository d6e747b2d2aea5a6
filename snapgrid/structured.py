from .config import GridConfig
from .elements import Hexahedron, Quadrilateral
from .mesh import PrimalMesh


def generate_quad_mesh(nx, ny, lx=1.0, ly=1.0, config=None):
    """
    Generates a structured quadrilateral mesh of the rectangle [0, lx] x [0, ly].

    Parameters:
      nx: Number of cells along x
      ny: Number of cells along y

    Cells are numbered with i running fastest. Connectivity is built.
    """
    if nx < 1 or ny < 1:
        raise ValueError("nx and ny must be at least 1.")
    mesh = PrimalMesh(GridConfig(n_dim=2) if config is None else config)

    # grid[i][j] holds the node index at (i, j)
    grid = [[None for _ in range(ny + 1)] for _ in range(nx + 1)]
    for j in range(ny + 1):
        for i in range(nx + 1):
            grid[i][j] = mesh.add_node(lx * i / nx, ly * j / ny)

    # Counter-clockwise: (i,j) -> (i+1,j) -> (i+1,j+1) -> (i,j+1)
    for j in range(ny):
        for i in range(nx):
            mesh.add_element(Quadrilateral, (grid[i][j], grid[i + 1][j],
                                             grid[i + 1][j + 1], grid[i][j + 1]))

    mesh.build_connectivity()
    return mesh


def generate_hex_mesh(nx, ny, nz, lx=1.0, ly=1.0, lz=1.0, config=None):
    """
    Generates a structured hexahedral mesh of the box [0, lx] x [0, ly] x [0, lz].
    Cells are numbered with i fastest, then j, then k. Connectivity is built.
    """
    if nx < 1 or ny < 1 or nz < 1:
        raise ValueError("nx, ny and nz must be at least 1.")
    mesh = PrimalMesh(GridConfig(n_dim=3) if config is None else config)

    def node_id(i, j, k):
        return i + (nx + 1) * (j + (ny + 1) * k)

    for k in range(nz + 1):
        for j in range(ny + 1):
            for i in range(nx + 1):
                mesh.add_node(lx * i / nx, ly * j / ny, lz * k / nz)

    for k in range(nz):
        for j in range(ny):
            for i in range(nx):
                bottom = (node_id(i, j, k), node_id(i + 1, j, k),
                          node_id(i + 1, j + 1, k), node_id(i, j + 1, k))
                top = tuple(n + (nx + 1) * (ny + 1) for n in bottom)
                mesh.add_element(Hexahedron, bottom + top)

    mesh.build_connectivity()
    return mesh
