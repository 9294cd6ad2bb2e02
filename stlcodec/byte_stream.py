"""Little-endian binary read/write primitives over file objects."""

import io
from typing import BinaryIO, Iterable, Optional

import numpy as np

from stlcodec.errors import TruncatedInputError

CHUNK_SIZE = 1 << 20

UINT32 = np.dtype("<u4")
UINT16 = np.dtype("<u2")
FLOAT32 = np.dtype("<f4")


class ByteReader:
    """Reads from a binary stream and keeps track of the consumed byte offset."""

    def __init__(self, stream: BinaryIO) -> None:
        self.stream = stream
        self.offset = 0

    def remaining(self) -> Optional[int]:
        """Bytes left in a seekable stream, or None if it cannot seek."""
        seekable = getattr(self.stream, "seekable", None)
        if seekable is None or not seekable():
            return None
        here = self.stream.tell()
        end = self.stream.seek(0, io.SEEK_END)
        self.stream.seek(here)
        return max(end - here, 0)

    def read_exact(self, size: int, what: str = "data") -> bytes:
        # Sizes come from file contents; never ask the stream for more than
        # CHUNK_SIZE bytes at once
        left = self.remaining()
        if left is not None and left < size:
            raise TruncatedInputError(what, self.offset, size, left)

        chunks = []
        got = 0
        while got < size:
            chunk = self.stream.read(min(CHUNK_SIZE, size - got))
            if not chunk:
                break
            chunks.append(chunk)
            got += len(chunk)
        if got < size:
            raise TruncatedInputError(what, self.offset, size, got)
        self.offset += size
        return b"".join(chunks)

    def read_uint32(self, what: str = "uint32") -> int:
        return int(np.frombuffer(self.read_exact(UINT32.itemsize, what), dtype=UINT32)[0])

    def read_uint16(self, what: str = "uint16") -> int:
        return int(np.frombuffer(self.read_exact(UINT16.itemsize, what), dtype=UINT16)[0])

    def read_float32(self, count: int = 1, what: str = "float32") -> np.ndarray:
        data = self.read_exact(FLOAT32.itemsize * count, what)
        return np.frombuffer(data, dtype=FLOAT32)

    def read_records(self, dtype: np.dtype, count: int, what: str = "records") -> np.ndarray:
        """Bulk read ``count`` packed records of a numpy structured dtype."""
        data = self.read_exact(dtype.itemsize * count, what)
        if count == 0:
            return np.zeros(0, dtype=dtype)
        return np.frombuffer(data, dtype=dtype, count=count)

    def readline(self) -> bytes:
        """Read one line including its terminator; b"" at end of input."""
        line = self.stream.readline()
        self.offset += len(line)
        return line

    def read_remaining(self) -> bytes:
        data = self.stream.read()
        if data is None:
            data = b""
        self.offset += len(data)
        return data


class ByteWriter:
    """Writes little-endian values to a binary stream, counting bytes written."""

    def __init__(self, stream: BinaryIO) -> None:
        self.stream = stream
        self.written = 0

    def write_bytes(self, data: bytes) -> None:
        self.stream.write(data)
        self.written += len(data)

    def write_uint32(self, value: int) -> None:
        self.write_bytes(np.array([value], dtype=UINT32).tobytes())

    def write_uint16(self, value: int) -> None:
        self.write_bytes(np.array([value], dtype=UINT16).tobytes())

    def write_float32(self, values: Iterable[float]) -> None:
        self.write_bytes(np.asarray(list(values), dtype=FLOAT32).tobytes())

    def write_records(self, records: np.ndarray) -> None:
        self.write_bytes(records.tobytes())

    def write_text(self, text: str) -> None:
        self.write_bytes(text.encode("latin-1"))
