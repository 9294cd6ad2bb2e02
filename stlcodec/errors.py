"""Exception types raised by the STL codec."""

from typing import Optional


class StlError(Exception):
    """Base class for every error raised while decoding or encoding STL."""


class StreamOpenError(StlError, OSError):
    """The source or sink could not be opened for the requested mode."""

    def __init__(self, path: str, mode: str, reason: Optional[str] = None) -> None:
        self.path = path
        self.mode = mode
        self.reason = reason
        msg = f"Unable to open file for {mode}: {path}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)


class TruncatedInputError(StlError, EOFError):
    """The binary stream ended before the expected number of bytes."""

    def __init__(self, what: str, offset: int, expected: int, available: int) -> None:
        self.what = what
        self.offset = offset
        self.expected = expected
        self.available = available
        super().__init__(
            f"Truncated STL input while reading {what} at byte offset {offset}: "
            f"expected {expected} bytes, got {available}."
        )


class GrammarError(StlError, ValueError):
    """An ASCII STL line does not contain the keyword expected at that position."""

    def __init__(self, expected: str, found: str, line_number: int) -> None:
        self.expected = expected
        self.found = found
        self.line_number = line_number
        shown = found if found else "<end of file>"
        super().__init__(
            f"Parsing error: missed '{expected}' in line {line_number} found: {shown}"
        )


class UnsupportedDimensionError(StlError, ValueError):
    """Points are not three dimensional."""

    def __init__(self, dimension) -> None:
        self.dimension = dimension
        super().__init__(f"STL points must be 3-dimensional, got dimension {dimension}.")


class UnsupportedComponentTypeError(StlError, TypeError):
    """Point components cannot be converted to float32."""

    def __init__(self, dtype) -> None:
        self.dtype = dtype
        super().__init__(f"Unknown point component type: {dtype}")


class CellIndexError(StlError, IndexError):
    """A cell references a point id outside the point list."""

    def __init__(self, cell: int, point_id: int, n_points: int) -> None:
        self.cell = cell
        self.point_id = point_id
        self.n_points = n_points
        super().__init__(
            f"Cell {cell} references point {point_id}, "
            f"but the mesh only has {n_points} points."
        )


class InvalidSolidNameError(StlError, ValueError):
    """The ASCII solid name cannot be written as a single latin-1 line."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Solid name {name!r} is not representable in latin-1.")
