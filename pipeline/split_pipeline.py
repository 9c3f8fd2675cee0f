"""
Split Pipeline

Source image -> grid geometry -> cropped cells -> one PNG per cell.

Cells are written as they are extracted; if a later cell fails, the cells
already written stay in the output folder.
"""

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from core.errors import PathError, UnsupportedFormatError
from core.geometry import base_cell_size, cell_file_name, check_grid, check_grid_fits
from core.image_utils import image_size, load_image, save_image
from core.settings import DEFAULT_SETTINGS
from core.splitting import split_image


@dataclass
class SplitResult:
    """Summary of a finished split."""
    output_dir: Path
    rows: int
    columns: int
    cell_width: int
    cell_height: int
    cell_paths: List[Path] = field(default_factory=list)

    @property
    def cell_count(self) -> int:
        return len(self.cell_paths)


def create_output_directory(image_path, output_root=None, now: Optional[datetime] = None,
                            settings=DEFAULT_SETTINGS) -> Path:
    """
    Create a fresh `{stem}_split_{timestamp}` folder next to the source (or under output_root).

    Raises:
        PathError: Parent folder missing or not writable
    """
    image_path = Path(image_path)
    parent = Path(output_root) if output_root else image_path.parent
    stamp = (now or datetime.now()).strftime(settings.timestamp_format)
    base_name = f"{image_path.stem}_split_{stamp}"
    output_dir = parent / base_name
    suffix = 1
    try:
        if output_root:
            parent.mkdir(parents=True, exist_ok=True)
        # A second split within the same second gets _2, _3, ...
        while True:
            try:
                output_dir.mkdir()
                break
            except FileExistsError:
                suffix += 1
                output_dir = parent / f"{base_name}_{suffix}"
    except FileNotFoundError as e:
        raise PathError(f"Folder {parent} not found") from e
    except PermissionError as e:
        raise PathError(f"No access to folder {parent}") from e
    return output_dir


def check_source_file(image_path, settings=DEFAULT_SETTINGS) -> Path:
    """
    Validate a split input before decoding it.

    Raises:
        PathError: File does not exist
        UnsupportedFormatError: Extension not supported
    """
    image_path = Path(image_path)
    if not image_path.is_file():
        raise PathError(f"File not found: {image_path}")
    if not settings.is_supported(image_path):
        supported = ", ".join(ext.lstrip('.').upper() for ext in settings.supported_extensions)
        raise UnsupportedFormatError(
            f"Unsupported file format! Supported formats: {supported}", path=image_path)
    return image_path


def split_file(image_path, rows: int, columns: int, output_root=None,
               settings=DEFAULT_SETTINGS, verbose: bool = True) -> SplitResult:
    """
    Split an image file into rows x columns PNG cells.

    Args:
        image_path: Source PNG/JPG/JPEG/BMP file
        rows: Number of grid rows
        columns: Number of grid columns
        output_root: Folder in which the timestamped output folder is created
                     (defaults to the source folder)
        settings: Formats and naming rules
        verbose: Print progress info

    Returns:
        SplitResult listing the written cell files

    Raises:
        PathError, UnsupportedFormatError, DecodeError, ResourceExhaustedError,
        InvalidGridError
    """
    check_grid(rows, columns)
    image_path = check_source_file(image_path, settings)

    image = load_image(image_path)
    width, height = image_size(image)
    if verbose:
        print(f"Image loaded: {width}x{height} pixels")

    check_grid_fits(width, height, rows, columns)
    cell_width, cell_height = base_cell_size(width, height, rows, columns)

    output_dir = create_output_directory(image_path, output_root, settings=settings)
    result = SplitResult(output_dir, rows, columns, cell_width, cell_height)

    if verbose:
        print(f"\nSize of each cell: {cell_width}x{cell_height} pixels")
        print("Processing...")

    total = rows * columns
    for rect, cell in split_image(image, rows, columns):
        name = cell_file_name(rect.index, rect.row + 1, rect.column + 1, settings.output_extension)
        result.cell_paths.append(save_image(cell, output_dir / name))
        if verbose:
            print(f"\rProcessed cells: {rect.index}/{total}", end='')

    if verbose:
        print()
        print(f"\nImage successfully split into {result.cell_count} cells!")
        print(f"Results saved to folder: {output_dir}")

    return result
