"""Canvas size validation before allocation."""

from dataclasses import dataclass

from .errors import InvalidCellSizeError, InvalidGridError, SizeOverflowError
from .settings import DEFAULT_SETTINGS

SOFT_DIMENSION_LIMIT = DEFAULT_SETTINGS.soft_dimension_limit
MAX_IMAGE_DIMENSION = DEFAULT_SETTINGS.max_image_dimension


@dataclass(frozen=True)
class CanvasSize:
    width: int
    height: int
    exceeds_soft_limit: bool = False

    @property
    def pixel_count(self) -> int:
        return self.width * self.height


def validate_canvas_size(cell_width: int, cell_height: int, rows: int, columns: int,
                         settings=DEFAULT_SETTINGS, verbose: bool = True) -> CanvasSize:
    """
    Validate the merged canvas dimensions.

    Args:
        cell_width: Width of one cell (taken from the first merge input)
        cell_height: Height of one cell
        rows: Number of grid rows
        columns: Number of grid columns
        settings: Soft and hard dimension limits
        verbose: Print the large-image warning

    Returns:
        CanvasSize with the totals; exceeds_soft_limit is set when either side
        is above the soft limit

    Raises:
        InvalidCellSizeError: cell_width or cell_height <= 0
        InvalidGridError: rows or columns <= 0
        SizeOverflowError: a side exceeds the maximum image dimension
    """
    if cell_width <= 0 or cell_height <= 0:
        raise InvalidCellSizeError(
            f"Invalid dimensions of the first image: {cell_width}x{cell_height}")
    if rows <= 0 or columns <= 0:
        raise InvalidGridError(f"Invalid number of rows or columns: {rows}x{columns}")

    total_width = int(cell_width) * int(columns)
    total_height = int(cell_height) * int(rows)

    limit = settings.max_image_dimension
    if total_width > limit or total_height > limit:
        raise SizeOverflowError(
            f"Final image size is too large: {total_width}x{total_height} "
            f"(maximum side is {limit} pixels)"
        )

    soft = settings.soft_dimension_limit
    exceeds = total_width > soft or total_height > soft
    if exceeds and verbose:
        print("Warning: Very large image may cause memory issues!")

    return CanvasSize(total_width, total_height, exceeds)
