"""Deduplicating map from a 3D point to a stable integer id."""

from typing import Dict, List, Optional

import numpy as np

from stlcodec.mesh import Point3

KEY_SIZE = 12


class VertexIndex:
    """Assigns sequential ids to points in first-seen order.

    Two points share an id only when their float32 components are bit-identical;
    there is no tolerance, so points one ULP apart stay distinct. Lookup is a
    dict keyed by the packed float32 bytes of the point.
    """

    def __init__(self) -> None:
        self._ids: Dict[bytes, int] = {}
        self._points: List[Point3] = []

    def _insert_key(self, key: bytes, point: Point3) -> int:
        pid = self._ids.get(key)
        if pid is None:
            pid = len(self._points)
            self._ids[key] = pid
            self._points.append(point)
        return pid

    def insert(self, point) -> int:
        """Return the id of ``point``, registering it if it is new."""
        if not isinstance(point, Point3):
            point = Point3.from_values(point)
        return self._insert_key(point.key(), point)

    def insert_many(self, vertices: np.ndarray) -> List[int]:
        """Insert each row of a (K, 3) array in order and return the ids."""
        verts = np.ascontiguousarray(vertices, dtype="<f4").reshape(-1, 3)
        raw = verts.tobytes()
        ids = []
        for i, xyz in enumerate(verts.tolist()):
            key = raw[i * KEY_SIZE:(i + 1) * KEY_SIZE]
            ids.append(self._insert_key(key, Point3(*xyz)))
        return ids

    def get(self, point) -> Optional[int]:
        if not isinstance(point, Point3):
            point = Point3.from_values(point)
        return self._ids.get(point.key())

    def points(self) -> List[Point3]:
        """Unique points in id order."""
        return list(self._points)

    def __len__(self) -> int:
        return len(self._points)

    def __contains__(self, point) -> bool:
        return self.get(point) is not None
