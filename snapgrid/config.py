"""
snapgrid/config.py
------------------
Grid-wide settings shared by every element built from them.
"""
from dataclasses import dataclass

DEGENERATE_POLICIES = ("raise", "node_average")


@dataclass(frozen=True)
class GridConfig:
    """Settings fixed once at mesh-load time.

    Attributes:
        n_dim (int): Spatial dimension of the grid, 2 or 3.
        degenerate_policy (str): What set_centroid does when every face of
            an element has zero measure. "raise" raises
            DegenerateGeometryError, "node_average" falls back to the plain
            average of the element's nodes.
    """
    n_dim: int = 2
    degenerate_policy: str = "raise"

    def __post_init__(self):
        if self.n_dim not in (2, 3):
            raise ValueError(f"n_dim must be 2 or 3, got {self.n_dim}.")
        if self.degenerate_policy not in DEGENERATE_POLICIES:
            raise ValueError(f"Unknown degenerate_policy '{self.degenerate_policy}'. "
                             f"Expected one of {DEGENERATE_POLICIES}.")

    @classmethod
    def for_dimension(cls, n_dim, **kwargs):
        return cls(n_dim=int(n_dim), **kwargs)
