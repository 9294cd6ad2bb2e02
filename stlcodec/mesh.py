"""Indexed triangle mesh produced by decoding and consumed by encoding."""

import enum
from dataclasses import dataclass, field
from typing import Iterable, List, NamedTuple, Optional, Tuple

import numpy as np


class FileFormat(enum.Enum):
    """On-disk STL representation."""

    ASCII = "ascii"
    BINARY = "binary"


class Point3(NamedTuple):
    x: float
    y: float
    z: float

    @classmethod
    def from_values(cls, values: Iterable[float]) -> "Point3":
        """Build a point, rounding each component to single precision."""
        x, y, z = np.asarray(list(values), dtype=np.float32)
        return cls(float(x), float(y), float(z))

    def key(self) -> bytes:
        """Little-endian float32 bit pattern of the three components."""
        return np.array(self, dtype="<f4").tobytes()


@dataclass(frozen=True)
class Triangle:
    p0: int
    p1: int
    p2: int
    # Written verbatim when present, otherwise recomputed from the vertices
    normal: Optional[Point3] = None

    @property
    def ids(self) -> Tuple[int, int, int]:
        return (self.p0, self.p1, self.p2)

    def __len__(self) -> int:
        return 3

    def __iter__(self):
        return iter(self.ids)

    def __getitem__(self, i):
        return self.ids[i]


@dataclass
class Mesh:
    points: List[Point3] = field(default_factory=list)
    triangles: List[Triangle] = field(default_factory=list)
    name: str = ""
    header: bytes = b""

    @property
    def n_points(self) -> int:
        return len(self.points)

    @property
    def n_triangles(self) -> int:
        return len(self.triangles)

    @property
    def vertices(self) -> np.ndarray:
        """(N, 3) float32 array of the unique points."""
        return np.array(self.points, dtype=np.float32).reshape(-1, 3)

    @property
    def faces(self) -> np.ndarray:
        """(M, 3) int64 array of point ids."""
        return np.array([t.ids for t in self.triangles], dtype=np.int64).reshape(-1, 3)

    @property
    def normals(self) -> Optional[np.ndarray]:
        """(M, 3) float32 array of stored normals, or None if any is missing."""
        if any(t.normal is None for t in self.triangles):
            return None
        return np.array([t.normal for t in self.triangles], dtype=np.float32).reshape(-1, 3)

    def bounds(self) -> Tuple[np.ndarray, np.ndarray]:
        if not self.points:
            raise ValueError("Mesh has no points.")
        verts = self.vertices
        return verts.min(axis=0), verts.max(axis=0)

    def summary(self) -> dict:
        """Counts and bounding box, in the shape used by the CLI ``info`` command."""
        results: dict = {
            "name": self.name,
            "points": self.n_points,
            "triangles": self.n_triangles,
            "bbox": None,
        }
        if self.points:
            min_bounds, max_bounds = self.bounds()
            results["bbox"] = {
                "min": min_bounds,
                "max": max_bounds,
                "extents": max_bounds - min_bounds,
            }
        return results
