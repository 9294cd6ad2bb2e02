"""Facet normal computation used when writing STL."""

import numpy as np


def facet_normals(vertices: np.ndarray, faces: np.ndarray) -> np.ndarray:
    """Normal of every facet (p0, p1, p2) as ``(p2 - p1) x (p0 - p1)``.

    Computed in single precision and not normalized, so the magnitude is twice
    the facet area and the sign follows the vertex winding.

    Parameters
    ----------
    vertices : (N, 3) array-like
        Point coordinates, converted to float32.
    faces : (M, 3) int array
        Point ids of each facet.

    Returns
    -------
    normals : (M, 3) np.ndarray of float32
    """
    verts = np.asarray(vertices, dtype=np.float32)
    faces = np.asarray(faces, dtype=np.int64).reshape(-1, 3)
    if faces.shape[0] == 0:
        return np.zeros((0, 3), dtype=np.float32)

    v0 = verts[faces[:, 0]]
    v1 = verts[faces[:, 1]]
    v2 = verts[faces[:, 2]]
    return np.cross(v2 - v1, v0 - v1).astype(np.float32, copy=False)
