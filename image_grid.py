#!/usr/bin/env python
"""
Grid Image Splitter

Usage:
    python image_grid.py split <image_path> --rows R --columns C [--output-root DIR] [--preview PNG] [--show]
    python image_grid.py merge <frames_dir> --rows R --columns C --output <output_path> [--show]
    python image_grid.py [interactive]

Examples:
    python image_grid.py split "./sprites/sheet.png" --rows 4 --columns 8
    python image_grid.py merge "./sprites/sheet_split_20240101_120000" -r 4 -c 8 -o "./sheet_merged.png"
"""

import argparse
import sys

from core.errors import (
    DecodeError,
    GridImageError,
    InvalidCellSizeError,
    InvalidGridError,
    PathError,
    ResourceExhaustedError,
    SizeOverflowError,
    UnsupportedFormatError
)
from core.image_utils import load_image
from pipeline import merge_directory, split_file

# Most specific first; the first matching entry names the error
ERROR_PREFIXES = [
    (InvalidGridError, "Error: Invalid grid"),
    (InvalidCellSizeError, "Error: Invalid cell size"),
    (SizeOverflowError, "Error: Final image size is too large"),
    (UnsupportedFormatError, "Error: Unsupported file format"),
    (DecodeError, "Error: Could not read image"),
    (ResourceExhaustedError, "Error: Insufficient memory to process the image"),
    (PathError, "Error: File or folder problem"),
]


def describe_error(error: Exception) -> str:
    """One-line, kind-specific message for an aborted operation."""
    for kind, prefix in ERROR_PREFIXES:
        if isinstance(error, kind):
            return f"{prefix}: {error}"
    if isinstance(error, MemoryError):
        return "Error: Insufficient memory to process the image or invalid file format!"
    if isinstance(error, PermissionError):
        return "Error: No access to file or folder!"
    return f"An error occurred: {error}"


def positive_int(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"{text!r} is not an integer") from None
    if value <= 0:
        raise argparse.ArgumentTypeError("Please enter a positive integer!")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Split an image into a grid of cells, or merge cells back into one image",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Split output: <image>_split_<YYYYmmdd_HHMMSS>/cell_001_row01_col01.png ...
Merge input:  PNG/JPG/JPEG/BMP files of a folder, sorted by name
        """
    )
    parser.add_argument("--quiet", "-q", action="store_true", help="Suppress progress output")
    sub = parser.add_subparsers(dest="command")

    split = sub.add_parser("split", help="Split an image into cells")
    split.add_argument("image_path", help="Path to the image to split")
    split.add_argument("--rows", "-r", type=positive_int, required=True, help="Number of rows")
    split.add_argument("--columns", "-c", type=positive_int, required=True, help="Number of columns")
    split.add_argument("--output-root", help="Folder for the output folder (default: next to the image)")
    split.add_argument("--preview", help="Save a contact sheet of the cells to this path")
    split.add_argument("--show", action="store_true", help="Display the cells in their grid layout")

    merge = sub.add_parser("merge", help="Merge a folder of cells into one image")
    merge.add_argument("frames_dir", help="Folder containing the cell images")
    merge.add_argument("--rows", "-r", type=positive_int, required=True, help="Number of rows")
    merge.add_argument("--columns", "-c", type=positive_int, required=True, help="Number of columns")
    merge.add_argument("--output", "-o", required=True, help="Output path (.png is appended if missing)")
    merge.add_argument("--show", action="store_true", help="Display the merged image")

    sub.add_parser("interactive", help="Choose mode and parameters at the console")
    return parser


def run_split(args, verbose):
    result = split_file(args.image_path, args.rows, args.columns,
                        output_root=args.output_root, verbose=verbose)
    if args.preview or args.show:
        from visualization import display_cells, save_cell_sheet
        cells = [load_image(p) for p in result.cell_paths]
        titles = [p.stem for p in result.cell_paths]
        if args.preview:
            path = save_cell_sheet(cells, args.rows, args.columns, args.preview, titles=titles)
            if verbose:
                print(f"Preview saved: {path}")
        if args.show:
            display_cells(cells, args.rows, args.columns, titles=titles)
    return result


def run_merge(args, verbose):
    result = merge_directory(args.frames_dir, args.rows, args.columns, args.output, verbose=verbose)
    if args.show:
        from visualization import display_image
        display_image(load_image(result.output_path), title=result.output_path.name)
    return result


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    verbose = not args.quiet

    try:
        if args.command == "split":
            run_split(args, verbose)
        elif args.command == "merge":
            run_merge(args, verbose)
        else:
            from interactive import run_interactive
            if run_interactive() is None:
                return 1
    except (GridImageError, MemoryError, OSError) as e:
        print(describe_error(e))
        return 1
    except (KeyboardInterrupt, EOFError):
        print("\nCancelled")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
