"""ASCII STL grammar."""

import io

import numpy as np
import pytest

from stlcodec.ascii_codec import decode_ascii, encode_ascii, solid_name
from stlcodec.byte_stream import ByteReader, ByteWriter
from stlcodec.errors import GrammarError
from stlcodec.mesh import Point3, Triangle
from stlcodec.normals import facet_normals


def _decode(text: bytes):
    return decode_ascii(ByteReader(io.BytesIO(text)))


def _facet(v0, v1, v2, normal="0 0 0"):
    return (
        f"facet normal {normal}\nouter loop\n"
        f"vertex {v0}\nvertex {v1}\nvertex {v2}\n"
        "endloop\nendfacet\n"
    ).encode()


def test_decodes_and_merges_shared_vertices(square_ascii):
    mesh = _decode(square_ascii)

    assert mesh.name == "square"
    assert mesh.points == [
        Point3(0.0, 0.0, 0.0),
        Point3(1.0, 0.0, 0.0),
        Point3(0.0, 1.0, 0.0),
        Point3(1.0, 1.0, 0.0),
    ]
    assert [t.ids for t in mesh.triangles] == [(0, 1, 2), (2, 1, 3)]


def test_textual_normal_is_ignored(square_ascii):
    mesh = _decode(square_ascii)
    assert all(t.normal is None for t in mesh.triangles)


def test_empty_solid():
    mesh = _decode(b"solid empty\nendsolid empty\n")
    assert mesh.n_points == 0
    assert mesh.n_triangles == 0


def test_whitespace_and_blank_lines_are_tolerated():
    text = (
        b"solid  spaced \r\n"
        b"\r\n"
        b"   facet   normal 0 0 1\r\n"
        b"\touter    loop\r\n"
        b"  vertex   0  0  0\r\n"
        b"  vertex 1e0 0 0\r\n"
        b"  vertex 0 1.0 0\r\n"
        b"\r\n"
        b"  endloop\r\n"
        b"endfacet\r\n"
        b"endsolid\r\n"
    )
    mesh = _decode(text)
    assert mesh.name == "spaced"
    assert mesh.n_triangles == 1
    assert mesh.points[1] == Point3(1.0, 0.0, 0.0)


def test_missing_endloop_is_reported():
    text = (
        b"solid bad\n"
        b"facet normal 0 0 1\n"
        b"outer loop\n"
        b"vertex 0 0 0\n"
        b"vertex 1 0 0\n"
        b"vertex 0 1 0\n"
        b"endfacet\n"
        b"endsolid\n"
    )
    with pytest.raises(GrammarError) as excinfo:
        _decode(text)

    err = excinfo.value
    assert err.expected == "endloop"
    assert err.found == "endfacet"
    assert err.line_number == 7


def test_line_numbers_start_after_header():
    with pytest.raises(GrammarError) as excinfo:
        _decode(b"solid bad\nouter loop\n")
    assert excinfo.value.expected == "facet normal"
    assert excinfo.value.line_number == 2


def test_line_numbers_count_physical_lines():
    text = b"solid x\n" + _facet("0 0 0", "1 0 0", "0 1 0") + b"\n\nfacet normal 0 0 1\nvertex 0 0 0\n"
    with pytest.raises(GrammarError) as excinfo:
        _decode(text)
    assert excinfo.value.expected == "outer loop"
    assert excinfo.value.line_number == 12


def test_end_of_input_without_endsolid():
    text = b"solid cut\nfacet normal 0 0 1\nouter loop\n"
    with pytest.raises(GrammarError) as excinfo:
        _decode(text)

    assert excinfo.value.expected == "vertex"
    assert excinfo.value.found == ""
    assert excinfo.value.line_number == 4


def test_missing_endsolid_after_complete_facet():
    text = b"solid cut\n" + _facet("0 0 0", "1 0 0", "0 1 0")
    with pytest.raises(GrammarError) as excinfo:
        _decode(text)
    assert excinfo.value.expected == "facet normal"


@pytest.mark.parametrize(
    "line",
    [b"vertex 0 0\n", b"vertex 0 zero 0\n", b"vertx 0 0 0\n", b"normal 0 0 0\n"],
)
def test_malformed_vertex_line(line):
    text = b"solid x\nfacet normal 0 0 1\nouter loop\n" + line
    with pytest.raises(GrammarError) as excinfo:
        _decode(text)
    assert excinfo.value.expected == "vertex"
    assert excinfo.value.line_number == 4


def test_grammar_error_is_a_value_error():
    with pytest.raises(ValueError, match="missed 'facet normal' in line 2"):
        _decode(b"solid x\nfoo\n")


def test_solid_name():
    assert solid_name(b"solid my part\n") == "my part"
    assert solid_name(b"solid\n") == ""
    assert solid_name(b"nothing here\n") == ""


def test_encode_layout():
    vertices = np.array([[0, 0, 0], [1, 0, 0], [0, 1, 0]], dtype=np.float32)
    faces = np.array([[0, 1, 2]])
    buf = io.BytesIO()

    count = encode_ascii(ByteWriter(buf), vertices, faces, facet_normals(vertices, faces))

    lines = buf.getvalue().decode("ascii").splitlines()
    assert count == 1
    assert lines[0] == "solid ascii"
    assert lines[1].split()[:2] == ["facet", "normal"]
    assert [float(v) for v in lines[1].split()[2:]] == [0.0, 0.0, 1.0]
    assert lines[2] == "    outer loop"
    assert lines[3] == "      vertex 0.0 0.0 0.0"
    assert lines[4] == "      vertex 1.0 0.0 0.0"
    assert lines[5] == "      vertex 0.0 1.0 0.0"
    assert lines[6] == "    endloop"
    assert lines[7] == "  endfacet"
    assert lines[8] == "endsolid"
    assert len(lines) == 9


def test_encoded_numbers_round_trip_at_single_precision():
    rng = np.random.default_rng(7)
    vertices = (rng.normal(size=(30, 3)) * 1e3).astype(np.float32)
    vertices[0] = [np.float32(1e-30), np.float32(3.4e38), np.float32(-1.17549435e-38)]
    faces = np.arange(30).reshape(10, 3)
    buf = io.BytesIO()
    encode_ascii(ByteWriter(buf), vertices, faces, facet_normals(vertices, faces))

    buf.seek(0)
    mesh = decode_ascii(ByteReader(buf))

    assert np.array_equal(mesh.vertices, vertices)
    assert [t.ids for t in mesh.triangles] == [tuple(f) for f in faces.tolist()]


def test_decoded_triangles_reencode_with_computed_normals(square_ascii):
    mesh = _decode(square_ascii)
    buf = io.BytesIO()
    encode_ascii(ByteWriter(buf), mesh.vertices, mesh.faces, facet_normals(mesh.vertices, mesh.faces))

    normals = [
        [float(v) for v in line.split()[2:]]
        for line in buf.getvalue().decode().splitlines()
        if "facet normal" in line
    ]
    assert normals == [[0.0, 0.0, 1.0], [0.0, 0.0, 1.0]]
    assert isinstance(mesh.triangles[0], Triangle)
