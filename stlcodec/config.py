# stlcodec/config.py
"""Format constants and library-wide defaults."""

from stlcodec.mesh import FileFormat

# Name of the package logger configured by logging_config.setup_logging()
LOGGER_NAME = "stlcodec"

# Binary layout
HEADER_SIZE = 80
COUNT_SIZE = 4
FACET_SIZE = 50

# Written into the 80-byte header of every binary file unless a header is given
BINARY_BANNER = b"binary STL generated by stlcodec"

# Name written after "solid" in ASCII output
ASCII_SOLID_NAME = "ascii"

SUPPORTED_EXTENSIONS = (".stl", ".STL")

DEFAULT_FORMAT = FileFormat.BINARY
