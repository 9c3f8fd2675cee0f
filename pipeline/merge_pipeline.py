"""
Merge Pipeline

Ordered cell images -> alpha probe -> size guard -> composed canvas -> PNG.

The first image fixes the cell size for the whole grid. Failing to read it,
an invalid grid, an oversized canvas or a failed canvas allocation abort the
merge before anything is written. Failures of any other cell are recovered
by leaving the background at its position.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Sequence

from core.alpha import requires_alpha
from core.composer import Canvas, Failed, compose
from core.errors import DecodeError, PathError
from core.geometry import check_grid
from core.image_utils import read_image_size, save_image
from core.settings import DEFAULT_SETTINGS
from core.size_guard import CanvasSize, validate_canvas_size


@dataclass
class MergeResult:
    """Summary of a finished merge."""
    output_path: Path
    rows: int
    columns: int
    cell_width: int
    cell_height: int
    canvas_size: CanvasSize
    alpha: bool
    images_used: int
    failures: List[Failed] = field(default_factory=list)

    @property
    def placed_count(self) -> int:
        return self.images_used - len(self.failures)


def list_image_files(directory, settings=DEFAULT_SETTINGS) -> List[Path]:
    """
    Supported image files of a folder, sorted by file name.

    Raises:
        PathError: Folder missing or not readable
    """
    directory = Path(directory)
    if not directory.is_dir():
        raise PathError(f"Folder {directory} not found")
    try:
        entries = list(directory.iterdir())
    except PermissionError as e:
        raise PathError(f"No access to folder {directory}") from e

    files = [p for p in entries if p.is_file() and settings.is_supported(p.name)]
    return sorted(files, key=lambda p: p.name)


def strip_quotes(text: str) -> str:
    """Remove one pair of surrounding double quotes (as pasted from a file manager)."""
    text = text.strip()
    if len(text) >= 2 and text.startswith('"') and text.endswith('"'):
        text = text[1:-1]
    return text


def normalize_output_path(output_path, settings=DEFAULT_SETTINGS) -> Path:
    """
    Strip surrounding quotes, append the output extension when missing and
    check the target folder.

    Raises:
        PathError: Empty path or missing target folder
    """
    text = strip_quotes(str(output_path))
    if not text:
        raise PathError("Output path cannot be empty")
    if not text.lower().endswith(settings.output_extension):
        text += settings.output_extension

    path = Path(text)
    if not path.parent.is_dir():
        raise PathError(f"Folder {path.parent} does not exist")
    return path


def read_cell_size(first_path):
    """
    (width, height) of the size-determining first image.

    Raises:
        DecodeError: First file missing or unreadable
    """
    try:
        return read_image_size(first_path)
    except DecodeError as e:
        raise DecodeError(f"First file {first_path} could not be loaded: {e}", path=first_path) from e


def merge_images(image_paths: Sequence, rows: int, columns: int, output_path,
                 settings=DEFAULT_SETTINGS, verbose: bool = True) -> MergeResult:
    """
    Merge ordered cell images into one PNG.

    Args:
        image_paths: Ordered cell image files
        rows: Number of grid rows
        columns: Number of grid columns
        output_path: Target file; the output extension is appended if missing
        settings: Limits and formats
        verbose: Print progress info

    Returns:
        MergeResult with the written path and per-cell failures

    Raises:
        PathError: No inputs, or the target folder is missing
        InvalidGridError, InvalidCellSizeError, SizeOverflowError: Invalid sizes
        DecodeError: First image cannot be read
        ResourceExhaustedError: Canvas cannot be allocated
    """
    image_paths = list(image_paths)
    if not image_paths:
        raise PathError("No images found to merge")
    check_grid(rows, columns)
    output_path = normalize_output_path(output_path, settings)

    cell_width, cell_height = read_cell_size(image_paths[0])
    if verbose:
        print(f"Size of each cell: {cell_width}x{cell_height} pixels")

    size = validate_canvas_size(cell_width, cell_height, rows, columns, settings, verbose)

    cells = rows * columns
    if cells != len(image_paths) and verbose:
        print(f"Warning: Number of cells ({cells}) does not match number of images ({len(image_paths)})")
        print(f"The first {min(cells, len(image_paths))} images will be used")

    if verbose:
        print(f"Final image size: {size.width}x{size.height} pixels")
        print("Processing...")

    alpha = requires_alpha(image_paths, settings, verbose)
    canvas = Canvas.allocate(size.width, size.height, alpha)
    compose(canvas, image_paths, rows, columns, cell_width, cell_height, alpha, verbose)

    first = canvas.outcomes[0]
    if not first.ok:
        # The size-determining image must be drawable, not only its header
        if not isinstance(first.error, DecodeError):
            raise first.error
        raise DecodeError(
            f"First file {first.source} could not be loaded: {first.error}",
            path=first.source) from first.error

    try:
        save_image(canvas.freeze(), output_path)
    except (OSError, PathError):
        output_path.unlink(missing_ok=True)
        raise

    result = MergeResult(
        output_path=output_path,
        rows=rows,
        columns=columns,
        cell_width=cell_width,
        cell_height=cell_height,
        canvas_size=size,
        alpha=alpha,
        images_used=len(canvas.outcomes),
        failures=canvas.diagnostics
    )

    if verbose:
        print("\nFrames successfully merged!")
        if result.failures:
            print(f"{len(result.failures)} cell(s) could not be read and were left blank")
        print(f"Result saved: {output_path}")

    return result


def merge_directory(directory, rows: int, columns: int, output_path,
                    settings=DEFAULT_SETTINGS, verbose: bool = True) -> MergeResult:
    """Merge every supported image of a folder, in file name order."""
    image_paths = list_image_files(directory, settings)
    if not image_paths:
        raise PathError(f"No images found in the specified folder: {directory}")
    if verbose:
        print(f"Found {len(image_paths)} images")
    return merge_images(image_paths, rows, columns, output_path, settings, verbose)
