"""Shared STL fixtures."""

import logging
import struct

import pytest

# normal, v0, v1, v2
UNIT_TRIANGLE = ((0.0, 0.0, 1.0), (0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (0.0, 1.0, 0.0))

SQUARE_ASCII = b"""solid square
  facet normal 0 0 1
    outer loop
      vertex 0 0 0
      vertex 1 0 0
      vertex 0 1 0
    endloop
  endfacet
  facet normal 0 0 1
    outer loop
      vertex 0 1 0
      vertex 1 0 0
      vertex 1 1 0
    endloop
  endfacet
endsolid square
"""


def pack_binary_stl(facets, header=b"\0" * 80, count=None, attributes=0):
    out = bytearray(header)
    out += struct.pack("<I", len(facets) if count is None else count)
    for normal, v0, v1, v2 in facets:
        out += struct.pack("<12f", *normal, *v0, *v1, *v2)
        out += struct.pack("<H", attributes)
    return bytes(out)


@pytest.fixture
def binary_stl():
    return pack_binary_stl


@pytest.fixture
def unit_triangle_bytes():
    return pack_binary_stl([UNIT_TRIANGLE])


@pytest.fixture
def square_ascii():
    return SQUARE_ASCII


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo setup_logging() calls made by CLI tests."""
    yield
    logger = logging.getLogger("stlcodec")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
