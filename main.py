import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from stlcodec.codec import convert, read_stl
from stlcodec.detect import sniff_format
from stlcodec.errors import StlError
from stlcodec.logging_config import setup_logging
from stlcodec.mesh import FileFormat

logger = logging.getLogger("stlcodec.cli")

FORMAT_CHOICES = [f.value for f in FileFormat]


def run_info(path: str, file_format: Optional[FileFormat] = None) -> None:
    mesh = read_stl(path, file_format)
    if file_format is None:
        with open(path, "rb") as fh:
            file_format = sniff_format(fh)

    summary = mesh.summary()
    print(f"File:      {Path(path).name}")
    print(f"Format:    {file_format.value}")
    if file_format is FileFormat.ASCII:
        print(f"Solid:     {summary['name'] or '-'}")
    print(f"Points:    {summary['points']}")
    print(f"Triangles: {summary['triangles']}")
    bbox = summary["bbox"]
    if bbox is not None:
        print(f"Min:       {' '.join(f'{v:g}' for v in bbox['min'])}")
        print(f"Max:       {' '.join(f'{v:g}' for v in bbox['max'])}")
        print(f"Extents:   {' '.join(f'{v:g}' for v in bbox['extents'])}")


def run_convert(src: str, dst: str, file_format: FileFormat) -> None:
    mesh = convert(src, dst, file_format)
    print(f"Wrote {mesh.n_triangles} triangles to {dst} ({file_format.value}).")


def run_view(path: str) -> None:
    # PyVista opens a window; imported lazily so the other commands stay headless
    from visualization.pv_display import show_mesh

    mesh = read_stl(path)
    show_mesh(mesh, title=f"stlcodec – {Path(path).name}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stlcodec", description="Read, inspect and convert STL triangle meshes."
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--log-file", help="Also write the log to this file")
    sub = parser.add_subparsers(dest="command", required=True)

    p_info = sub.add_parser("info", help="Print point/triangle counts and bounding box")
    p_info.add_argument("path")
    p_info.add_argument("--format", choices=FORMAT_CHOICES, help="Skip ASCII/binary detection")

    p_conv = sub.add_parser("convert", help="Re-encode an STL file as ASCII or binary")
    p_conv.add_argument("src")
    p_conv.add_argument("dst")
    p_conv.add_argument("--to", choices=FORMAT_CHOICES, default=FileFormat.BINARY.value)

    p_view = sub.add_parser("view", help="Show the mesh in a PyVista window")
    p_view.add_argument("path")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.WARNING, args.log_file)

    try:
        if args.command == "info":
            run_info(args.path, FileFormat(args.format) if args.format else None)
        elif args.command == "convert":
            run_convert(args.src, args.dst, FileFormat(args.to))
        elif args.command == "view":
            run_view(args.path)
    except StlError as e:
        logger.error(str(e))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
