"""ASCII/binary detection."""

import io

from stlcodec.detect import detect_format, sniff_format
from stlcodec.mesh import FileFormat


def test_solid_header_is_ascii():
    assert detect_format(b"solid cube\nfacet normal 0 0 1\n") is FileFormat.ASCII


def test_zero_header_is_binary(unit_triangle_bytes):
    assert detect_format(unit_triangle_bytes[:80]) is FileFormat.BINARY


def test_solid_must_be_on_the_first_line():
    assert detect_format(b"binary header\nsolid\n") is FileFormat.BINARY


def test_detection_is_case_sensitive():
    assert detect_format(b"SOLID cube\n") is FileFormat.BINARY


def test_binary_header_containing_solid_is_misdetected(binary_stl):
    # Known limitation of the heuristic; callers pass the format explicitly
    data = binary_stl([], header=b"solidworks export".ljust(80, b"\0"))
    assert detect_format(data) is FileFormat.ASCII


def test_sniff_does_not_consume(square_ascii):
    stream = io.BytesIO(square_ascii)
    assert sniff_format(stream) is FileFormat.ASCII
    assert stream.tell() == 0
