"""
ex01_element_centroids.py
-------------------------
Goal: Compare the face-weighted centroid with the plain node average.
"""
import numpy as np
from snapgrid import GridConfig, Triangle, Tetrahedron, TapeRecorder


def run():
    print("--- Element Centroids ---")

    # 1. A 3-4-5 triangle: the weighted centroid leans towards the long faces
    tri = Triangle((0, 1, 2), config=GridConfig(n_dim=2))
    coords = np.array([[0.0, 0.0], [4.0, 0.0], [0.0, 3.0]])
    print(f"Face weights     : {tri.face_weights(coords)}")
    print(f"Weighted centroid: {tri.set_centroid(coords)}")
    print(f"Node average     : {coords.mean(axis=0)}")

    # 2. A flattened tetrahedron with a sliver face
    tape = TapeRecorder()
    tet = Tetrahedron((0, 1, 2, 3), config=GridConfig(n_dim=3))
    coords = np.array([[0.0, 0.0, 0.0], [1.0, 0.0, 0.0],
                       [0.0, 1.0, 0.0], [0.5, 0.5, 0.0]])
    print(f"\nSliver face weights: {tet.face_weights(coords)}")
    print(f"Centroid           : {tet.set_centroid(coords, recorder=tape)}")
    print(f"Recorded brackets  : {len(tape)}")


if __name__ == "__main__":
    run()
