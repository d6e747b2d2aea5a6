"""
snapgrid/quality.py
-------------------
Tools for inspecting how skewed the elements of a primal grid are, seen
through the centroid face weights.
Calculates the smallest face weight and the centroid offset per element.
"""
import logging

import numpy as np
import matplotlib.pyplot as plt

from .errors import DegenerateGeometryError

logger = logging.getLogger(__name__)


class ElementQuality:
    """
    Inspector class for a PrimalMesh object.

    Usage:
        inspector = ElementQuality(mesh)
        inspector.analyze()
        inspector.report()
        inspector.plot_histograms()
    """
    def __init__(self, mesh):
        self.mesh = mesh
        # Metric Storage
        self.min_weights = np.array([])
        self.centroid_offsets = np.array([])
        self.ids = np.array([], dtype=int)

        self._analyzed = False

    def analyze(self):
        """
        Iterates through all elements and computes metrics.
        """
        min_weights = []
        offsets = []
        ids = []

        for element in self.mesh.elements:
            min_w, offset = self._compute_single_element(element)
            ids.append(element.global_index)
            min_weights.append(min_w)
            offsets.append(offset)

        self.min_weights = np.array(min_weights)
        self.centroid_offsets = np.array(offsets)
        self.ids = np.array(ids, dtype=int)

        self._analyzed = True
        return self

    def _compute_single_element(self, element):
        """ Helper: Returns (min face weight, |centroid - node average|).

        The centroid is the element's own set_centroid result, so the grid's
        degenerate policy applies. A degenerate element that falls back to the
        node average has a minimum face weight of 0.0.
        """
        coords = self.mesh.coordinates_of(element)
        centroid = element.set_centroid(coords)
        try:
            min_w = element.face_weights(coords).min()
        except DegenerateGeometryError:
            min_w = 0.0
        offset = np.linalg.norm(centroid - coords.mean(axis=0))
        return min_w, offset

    def report(self):
        """ Logs a summary of the metrics. Returns it as a dict. """
        if not self._analyzed: self.analyze()
        if len(self.ids) == 0:
            logger.info("Element quality: mesh has no elements.")
            return {}

        summary = {
            "n_elements": len(self.ids),
            "min_face_weight": float(self.min_weights.min()),
            "max_centroid_offset": float(self.centroid_offsets.max()),
        }
        logger.info("--- Element Quality Report (%d Elements) ---", summary["n_elements"])
        logger.info("Min face weight: %.3e", summary["min_face_weight"])
        logger.info("Max centroid offset from node average: %.3e", summary["max_centroid_offset"])
        if summary["min_face_weight"] < 1e-2:
            logger.warning("Elements with near-degenerate faces detected.")
        return summary

    def plot_histograms(self):
        """ Visualizes the distribution of quality metrics. """
        if not self._analyzed: self.analyze()

        fig, ax = plt.subplots(1, 2, figsize=(10, 4))
        _histogram(ax[0], self.min_weights, 'skyblue',
                   "Minimum Face Weight", "(measure / max measure)^2")
        _histogram(ax[1], self.centroid_offsets, 'salmon',
                   "Centroid Offset", "Distance to node average")

        fig.tight_layout()
        return fig


def _histogram(axis, data, color, title, xlabel):
    ''' Histogram that tolerates constant data (a uniform mesh gives one value). '''
    if len(data) == 0:
        return
    if np.ptp(data) > 0.0:
        bins = 20
    else:
        pad = max(1e-6, 0.1 * abs(data[0]))
        bins = np.linspace(data[0] - pad, data[0] + pad, 10)
    axis.hist(data, bins=bins, color=color, edgecolor='black')
    axis.set_title(title)
    axis.set_xlabel(xlabel)
