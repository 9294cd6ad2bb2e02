"""Read/write entry points: detection, validation and dispatch to the codecs."""

import contextlib
import io
import logging
import os
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Tuple

import numpy as np

from stlcodec.ascii_codec import decode_ascii, encode_ascii
from stlcodec.binary_codec import decode_binary, encode_binary
from stlcodec.byte_stream import ByteReader, ByteWriter
from stlcodec.config import (
    ASCII_SOLID_NAME,
    COUNT_SIZE,
    DEFAULT_FORMAT,
    HEADER_SIZE,
    SUPPORTED_EXTENSIONS,
)
from stlcodec.detect import detect_format, sniff_format
from stlcodec.errors import (
    CellIndexError,
    InvalidSolidNameError,
    StreamOpenError,
    UnsupportedComponentTypeError,
    UnsupportedDimensionError,
)
from stlcodec.mesh import FileFormat, Mesh, Point3
from stlcodec.normals import facet_normals
from stlcodec.vertex_index import VertexIndex

logger = logging.getLogger(__name__)


# -----------------------------------------------
# File selection
# -----------------------------------------------
def can_read_file(path) -> bool:
    """True if ``path`` exists and carries an STL extension."""
    p = Path(path)
    return p.is_file() and p.suffix in SUPPORTED_EXTENSIONS


def can_write_file(path) -> bool:
    return Path(path).suffix in SUPPORTED_EXTENSIONS


def can_decode(sniff: bytes) -> bool:
    """True if the leading bytes look like the start of an STL file."""
    if detect_format(sniff) is FileFormat.ASCII:
        return True
    return len(sniff) >= HEADER_SIZE + COUNT_SIZE


@contextlib.contextmanager
def _open(target, mode: str):
    """Yield a binary file object for a path or pass an open stream through."""
    if isinstance(target, (str, os.PathLike)):
        purpose = "reading" if "r" in mode else "writing"
        try:
            fh = open(target, mode)
        except OSError as e:
            raise StreamOpenError(os.fspath(target), purpose, e.strerror) from e
        with fh:
            yield fh
    else:
        yield target


# -----------------------------------------------
# Decode
# -----------------------------------------------
def decode(source, file_format: Optional[FileFormat] = None) -> Mesh:
    """Decode a complete STL file.

    Parameters
    ----------
    source : str, os.PathLike or binary file object
        File to read.
    file_format : FileFormat, optional
        Skip detection and force this representation.

    Returns
    -------
    mesh : Mesh
        Unique points in first-seen order and one triangle per facet.

    Raises
    ------
    StreamOpenError
        If the path cannot be opened.
    TruncatedInputError
        If a binary file ends before its declared triangle count.
    GrammarError
        If an ASCII file does not follow the facet grammar.
    """
    with _open(source, "rb") as stream:
        seekable = getattr(stream, "seekable", None)
        if seekable is None or not seekable():
            stream = io.BytesIO(stream.read())

        if file_format is None:
            file_format = sniff_format(stream)
        else:
            logger.debug(f"Format forced to {file_format.value}, skipping detection.")

        reader = ByteReader(stream)
        index = VertexIndex()
        if file_format is FileFormat.ASCII:
            return decode_ascii(reader, index)
        return decode_binary(reader, index)


# -----------------------------------------------
# Encode
# -----------------------------------------------
def _float32_converter(dtype: np.dtype) -> Callable[[np.ndarray], np.ndarray]:
    if dtype.kind in "iuf":
        return lambda a: a.astype(np.float32)
    raise UnsupportedComponentTypeError(dtype)


def as_float32_points(points) -> np.ndarray:
    """Convert caller points to an (N, 3) float32 array or raise."""
    try:
        arr = np.asarray(points)
    except ValueError:
        raise UnsupportedDimensionError("inconsistent") from None

    # A bare [] has no shape to check
    if arr.ndim == 1 and arr.size == 0:
        return np.zeros((0, 3), dtype=np.float32)
    if arr.ndim != 2:
        raise UnsupportedDimensionError(arr.shape[1:] if arr.ndim > 2 else 1)
    if arr.shape[1] != 3:
        raise UnsupportedDimensionError(arr.shape[1])
    if arr.size == 0:
        return np.zeros((0, 3), dtype=np.float32)

    convert = _float32_converter(arr.dtype)
    return convert(arr)


def collect_triangles(cells: Iterable, n_points: int) -> Tuple[np.ndarray, List[Optional[Point3]]]:
    """Keep the 3-vertex cells, checking their ids against ``n_points``.

    Returns the (M, 3) face array and the stored normal of each kept cell
    (None where the cell has no normal).
    """
    faces = []
    normals: List[Optional[Point3]] = []
    skipped = 0
    for i, cell in enumerate(cells):
        ids = tuple(int(pid) for pid in cell)
        if len(ids) != 3:
            skipped += 1
            continue
        for pid in ids:
            if pid < 0 or pid >= n_points:
                raise CellIndexError(i, pid, n_points)
        faces.append(ids)
        normals.append(getattr(cell, "normal", None))

    if skipped:
        logger.debug(f"Skipping {skipped} non-triangular cells.")
    return np.array(faces, dtype=np.int64).reshape(-1, 3), normals


def resolve_normals(vertices: np.ndarray, faces: np.ndarray, stored: List[Optional[Point3]]) -> np.ndarray:
    """Stored normals where present, computed facet normals elsewhere."""
    normals = facet_normals(vertices, faces)
    for k, n in enumerate(stored):
        if n is not None:
            normals[k] = n
    return normals


def solid_line_name(name: str) -> str:
    """Collapse ``name`` onto one line and check it can be written as latin-1."""
    line = " ".join(str(name).split())
    try:
        line.encode("latin-1")
    except UnicodeEncodeError:
        raise InvalidSolidNameError(name) from None
    return line


def encode(
    points,
    cells: Iterable,
    file_format: FileFormat,
    sink,
    header: Optional[bytes] = None,
    name: str = ASCII_SOLID_NAME,
) -> int:
    """Encode an indexed mesh as STL.

    Points and cells are validated before anything is written.

    Parameters
    ----------
    points : (N, 3) array-like
        Point coordinates of any integer or floating type.
    cells : iterable
        Triangle objects, id sequences or an (M, k) id array. Cells that are
        not triangles are skipped.
    file_format : FileFormat
        Representation to write.
    sink : str, os.PathLike or binary file object
        Destination.
    header : bytes, optional
        Binary header content (padded/truncated to 80 bytes).
    name : str
        ASCII solid name. Runs of whitespace, line breaks included, are
        collapsed to single spaces.

    Returns
    -------
    count : int
        Number of facets written.

    Raises
    ------
    InvalidSolidNameError
        If an ASCII ``name`` has characters outside latin-1.
    """
    vertices = as_float32_points(points)
    faces, stored = collect_triangles(cells, vertices.shape[0])
    normals = resolve_normals(vertices, faces, stored)
    if file_format is FileFormat.ASCII:
        name = solid_line_name(name)

    with _open(sink, "wb") as stream:
        writer = ByteWriter(stream)
        if file_format is FileFormat.ASCII:
            return encode_ascii(writer, vertices, faces, normals, name=name)
        return encode_binary(writer, vertices, faces, normals, header=header)


def encode_mesh(mesh: Mesh, file_format: FileFormat, sink, header: Optional[bytes] = None) -> int:
    return encode(mesh.points, mesh.triangles, file_format, sink, header=header)


# -----------------------------------------------
# Path helpers
# -----------------------------------------------
def read_stl(path, file_format: Optional[FileFormat] = None) -> Mesh:
    logger.info(f"Reading STL from: {path}")
    return decode(path, file_format)


def write_stl(path, mesh: Mesh, file_format: FileFormat = DEFAULT_FORMAT, header: Optional[bytes] = None) -> int:
    logger.info(f"Writing {file_format.value} STL to: {path}")
    return encode_mesh(mesh, file_format, path, header=header)


def convert(src, dst, file_format: FileFormat) -> Mesh:
    """Decode ``src`` and write it to ``dst`` as ``file_format``."""
    mesh = decode(src)
    encode_mesh(mesh, file_format, dst)
    return mesh
