"""ASCII vs binary detection from the first bytes of a file."""

import logging
from typing import BinaryIO

from stlcodec.config import HEADER_SIZE
from stlcodec.mesh import FileFormat

logger = logging.getLogger(__name__)


def detect_format(header_bytes: bytes) -> FileFormat:
    """Guess the representation of an STL file from its leading bytes.

    The first line is treated as ASCII when it contains ``solid``. This is a
    heuristic: a binary header that happens to contain ``solid`` is
    misdetected, in which case callers should pass the format explicitly.
    """
    first_line = header_bytes.split(b"\n", 1)[0]
    text = first_line.decode("latin-1")
    fmt = FileFormat.ASCII if "solid" in text else FileFormat.BINARY
    logger.debug(f"Detected {fmt.value} STL from header {first_line[:40]!r}")
    return fmt


def sniff_format(stream: BinaryIO) -> FileFormat:
    """Detect the format of a seekable stream without consuming any bytes."""
    start = stream.tell()
    head = stream.read(HEADER_SIZE) or b""
    stream.seek(start)
    return detect_format(head)
