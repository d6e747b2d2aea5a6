"""
snapgrid/errors.py
------------------
Exceptions raised by the primal grid kernel.
"""


class GridError(Exception):
    """Base class for all snapgrid errors."""


class InvalidTopologyError(GridError, ValueError):
    """A face's node count does not fit the grid dimension, or a face is
    shared by more than two elements."""


class DegenerateGeometryError(GridError, ValueError):
    """Every face of an element has zero measure, so no centroid weight exists."""


class AdjacencyStateError(GridError, RuntimeError):
    """Per-face storage used before allocation, or allocated twice."""
