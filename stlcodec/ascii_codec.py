"""Reader and writer for the textual ("solid ... endsolid") STL form."""

import logging
from typing import Optional

import numpy as np

from stlcodec.byte_stream import ByteReader, ByteWriter
from stlcodec.config import ASCII_SOLID_NAME
from stlcodec.errors import GrammarError
from stlcodec.mesh import Mesh, Point3, Triangle
from stlcodec.vertex_index import VertexIndex

logger = logging.getLogger(__name__)

#  solid <name>
#    facet normal ni nj nk
#      outer loop
#        vertex v1x v1y v1z
#        vertex v2x v2y v2z
#        vertex v3x v3y v3z
#      endloop
#    endfacet
#  endsolid


class _Lines:
    """Non-blank lines of the body with their 1-based physical line numbers."""

    def __init__(self, reader: ByteReader) -> None:
        self.reader = reader
        # Line 1 is the header, consumed before the body is parsed
        self.line_number = 1

    def next(self) -> str:
        while True:
            raw = self.reader.readline()
            self.line_number += 1
            if not raw:
                return ""
            text = " ".join(raw.decode("latin-1").split())
            if text:
                return text


def _expect(lines: _Lines, keyword: str, line: Optional[str] = None) -> None:
    if line is None:
        line = lines.next()
    if keyword not in line:
        raise GrammarError(keyword, line, lines.line_number)


def _read_vertex(lines: _Lines) -> Point3:
    line = lines.next()
    tokens = line.split()
    if not tokens or "vertex" not in tokens[0] or len(tokens) < 4:
        raise GrammarError("vertex", line, lines.line_number)
    try:
        return Point3.from_values(float(t) for t in tokens[1:4])
    except ValueError:
        raise GrammarError("vertex", line, lines.line_number) from None


def solid_name(header_line: bytes) -> str:
    text = header_line.decode("latin-1").strip()
    if "solid" not in text:
        return ""
    return text.split("solid", 1)[1].strip()


def decode_ascii(reader: ByteReader, index: Optional[VertexIndex] = None) -> Mesh:
    """Parse an ASCII STL body into an indexed mesh.

    The numeric facet normal is ignored; triangles are returned without a
    stored normal. Any keyword out of place raises GrammarError.
    """
    if index is None:
        index = VertexIndex()

    name = solid_name(reader.readline())
    lines = _Lines(reader)
    triangles = []

    while True:
        line = lines.next()
        if "endsolid" in line:
            break
        _expect(lines, "facet normal", line)
        _expect(lines, "outer loop")
        p0 = index.insert(_read_vertex(lines))
        p1 = index.insert(_read_vertex(lines))
        p2 = index.insert(_read_vertex(lines))
        _expect(lines, "endloop")
        _expect(lines, "endfacet")
        triangles.append(Triangle(p0, p1, p2))

    logger.info(
        f"Decoded ASCII STL '{name}': {len(triangles)} triangles, "
        f"{len(index)} unique points."
    )
    return Mesh(points=index.points(), triangles=triangles, name=name)


def _fmt(values) -> str:
    # str() of a float32 scalar is the shortest text that parses back to it
    return " ".join(str(v) for v in np.asarray(values, dtype=np.float32))


def encode_ascii(
    writer: ByteWriter,
    vertices: np.ndarray,
    faces: np.ndarray,
    normals: np.ndarray,
    name: str = ASCII_SOLID_NAME,
) -> int:
    """Write facets as ASCII STL and return the number of facets written.

    Parameters
    ----------
    writer : ByteWriter
        Destination.
    vertices : (N, 3) float32 array
    faces : (M, 3) int array
        Point ids of each facet, in winding order.
    normals : (M, 3) float32 array
        Normal written for each facet.
    name : str
        Solid name written after ``solid``.
    """
    writer.write_text(f"solid {name}\n")
    for (a, b, c), n in zip(faces, normals):
        writer.write_text(
            f"  facet normal {_fmt(n)}\n"
            "    outer loop\n"
            f"      vertex {_fmt(vertices[a])}\n"
            f"      vertex {_fmt(vertices[b])}\n"
            f"      vertex {_fmt(vertices[c])}\n"
            "    endloop\n"
            "  endfacet\n"
        )
    writer.write_text("endsolid\n")

    logger.info(f"Encoded ASCII STL '{name}': {len(faces)} triangles.")
    return len(faces)
