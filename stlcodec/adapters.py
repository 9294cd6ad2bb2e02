"""Conversions between the codec Mesh and trimesh / PyVista containers."""

from typing import List, Tuple

import numpy as np
import pyvista as pv
import trimesh

from stlcodec.mesh import Mesh, Point3, Triangle


def to_trimesh(mesh: Mesh) -> trimesh.Trimesh:
    """Wrap a decoded mesh as a trimesh.Trimesh.

    ``process=False`` keeps the point order and ids exactly as decoded;
    trimesh would otherwise merge and reorder vertices on its own.
    """
    return trimesh.Trimesh(vertices=mesh.vertices, faces=mesh.faces, process=False)


def from_trimesh(tri_mesh: trimesh.Trimesh, name: str = "") -> Mesh:
    points = [Point3.from_values(v) for v in np.asarray(tri_mesh.vertices)]
    triangles = [Triangle(int(a), int(b), int(c)) for a, b, c in np.asarray(tri_mesh.faces)]
    return Mesh(points=points, triangles=triangles, name=name)


def to_pyvista(mesh: Mesh) -> pv.PolyData:
    """Build a PolyData with one triangle cell per facet."""
    vertices = mesh.vertices
    if mesh.n_triangles == 0:
        return pv.PolyData(vertices) if mesh.n_points else pv.PolyData()

    faces = mesh.faces
    # PolyData faces are a flat [n, i0, i1, ..., n, ...] array
    flat = np.hstack([np.full((faces.shape[0], 1), 3, dtype=np.int64), faces]).ravel()
    return pv.PolyData(vertices, flat)


def from_pyvista(pv_mesh: pv.PolyData) -> Tuple[np.ndarray, List[List[int]]]:
    """Split a PolyData into points and per-cell id lists.

    Polygons of any size are returned as they are; the encoder skips the
    ones that are not triangles.
    """
    points = np.asarray(pv_mesh.points)
    flat = np.asarray(pv_mesh.faces)

    cells: List[List[int]] = []
    i = 0
    while i < len(flat):
        n = int(flat[i])
        cells.append([int(pid) for pid in flat[i + 1:i + 1 + n]])
        i += n + 1
    return points, cells
