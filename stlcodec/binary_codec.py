"""Reader and writer for the fixed-layout binary STL form."""

import logging
from typing import Optional

import numpy as np

from stlcodec.byte_stream import ByteReader, ByteWriter
from stlcodec.config import BINARY_BANNER, FACET_SIZE, HEADER_SIZE
from stlcodec.errors import TruncatedInputError
from stlcodec.mesh import Mesh, Point3, Triangle
from stlcodec.vertex_index import VertexIndex

logger = logging.getLogger(__name__)

#  UINT8[80]    header
#  UINT32       number of triangles
#  foreach triangle
#    REAL32[3]  normal vector
#    REAL32[3]  vertex 1
#    REAL32[3]  vertex 2
#    REAL32[3]  vertex 3
#    UINT16     attribute byte count
FACET_DTYPE = np.dtype(
    [
        ("normal", "<f4", (3,)),
        ("vertices", "<f4", (3, 3)),
        ("attributes", "<u2"),
    ]
)


def make_header(header: Optional[bytes] = None) -> bytes:
    """Zero-pad or truncate ``header`` (default banner) to exactly 80 bytes."""
    if header is None:
        header = BINARY_BANNER
    return header[:HEADER_SIZE].ljust(HEADER_SIZE, b"\0")


def decode_binary(reader: ByteReader, index: Optional[VertexIndex] = None) -> Mesh:
    """Parse a binary STL stream into an indexed mesh.

    The stored facet normals are kept on the triangles; attribute bytes are
    dropped. A stream shorter than the declared triangle count raises
    TruncatedInputError instead of returning a partial mesh.
    """
    if index is None:
        index = VertexIndex()

    header = reader.read_exact(HEADER_SIZE, "header")
    count = reader.read_uint32("triangle count")
    logger.debug(f"Binary STL declares {count} triangles.")

    start = reader.offset
    try:
        records = reader.read_records(FACET_DTYPE, count, "facets")
    except TruncatedInputError as e:
        complete = e.available // FACET_SIZE
        raise TruncatedInputError(
            f"facet {complete} of {count}",
            start + complete * FACET_SIZE,
            count * FACET_SIZE,
            e.available,
        ) from None

    ids = index.insert_many(records["vertices"])
    triangles = [
        Triangle(ids[3 * i], ids[3 * i + 1], ids[3 * i + 2], Point3(*normal))
        for i, normal in enumerate(records["normal"].tolist())
    ]

    trailing = reader.read_remaining()
    if trailing:
        logger.warning(f"Ignoring {len(trailing)} bytes after the last facet.")

    logger.info(
        f"Decoded binary STL: {len(triangles)} triangles, {len(index)} unique points."
    )
    return Mesh(points=index.points(), triangles=triangles, header=header)


def encode_binary(
    writer: ByteWriter,
    vertices: np.ndarray,
    faces: np.ndarray,
    normals: np.ndarray,
    header: Optional[bytes] = None,
) -> int:
    """Write facets as binary STL and return the number of facets written.

    Parameters
    ----------
    writer : ByteWriter
        Destination.
    vertices : (N, 3) float32 array
    faces : (M, 3) int array
        Point ids of each facet, in winding order.
    normals : (M, 3) float32 array
        Normal written for each facet.
    header : bytes, optional
        Header content, padded/truncated to 80 bytes.
    """
    faces = np.asarray(faces, dtype=np.int64).reshape(-1, 3)

    records = np.zeros(faces.shape[0], dtype=FACET_DTYPE)
    records["normal"] = normals
    records["vertices"] = np.asarray(vertices, dtype=np.float32)[faces]

    writer.write_bytes(make_header(header))
    writer.write_uint32(faces.shape[0])
    writer.write_records(records)

    logger.info(f"Encoded binary STL: {faces.shape[0]} triangles.")
    return faces.shape[0]
