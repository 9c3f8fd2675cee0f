"""
Grid geometry for splitting and merging.

Cells are produced in row-major order. Every cell of a row shares the same
height and every cell of a column the same width, except the last row and
column, which absorb the integer-division remainder so the union of all
cells covers the source exactly.
"""

from dataclasses import dataclass
from typing import List

from .errors import InvalidGridError


@dataclass(frozen=True)
class GridSpec:
    """Number of rows and columns of a grid."""
    rows: int
    columns: int

    def __post_init__(self):
        check_grid(self.rows, self.columns)

    @property
    def cell_count(self) -> int:
        return self.rows * self.columns


@dataclass(frozen=True)
class CellRect:
    """
    One cell in source/canvas pixel coordinates.

    Attributes:
        x, y: Top-left corner
        width, height: Cell size (may be 0 for grids finer than the image)
        row, column: 0-based grid position
        index: 1-based sequence number in row-major order
    """
    x: int
    y: int
    width: int
    height: int
    row: int = 0
    column: int = 0
    index: int = 1

    @property
    def box(self):
        """(left, top, right, bottom) box as used by Pillow."""
        return (self.x, self.y, self.x + self.width, self.y + self.height)

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0


def check_grid(rows: int, columns: int) -> None:
    """Raise InvalidGridError unless rows and columns are positive integers."""
    if rows <= 0 or columns <= 0:
        raise InvalidGridError(f"Invalid number of rows or columns: {rows}x{columns}")


def check_grid_fits(source_width: int, source_height: int, rows: int, columns: int) -> None:
    """
    Reject grids finer than the image.

    compute_cells() stays permissive and produces zero-sized cells for such
    grids; callers that need to encode every cell use this check first.
    """
    check_grid(rows, columns)
    if columns > source_width or rows > source_height:
        raise InvalidGridError(
            f"Grid {rows}x{columns} is finer than the image ({source_width}x{source_height}): "
            f"at most {source_height} rows and {source_width} columns are possible"
        )


def base_cell_size(source_width: int, source_height: int, rows: int, columns: int):
    """Truncated (width, height) shared by every cell outside the last row/column."""
    check_grid(rows, columns)
    return source_width // columns, source_height // rows


def compute_cells(source_width: int, source_height: int, rows: int, columns: int) -> List[CellRect]:
    """
    Compute the cell rectangles of a rows x columns grid.

    Args:
        source_width: Width of the image being partitioned
        source_height: Height of the image being partitioned
        rows: Number of grid rows
        columns: Number of grid columns

    Returns:
        rows * columns CellRects in row-major order

    Raises:
        InvalidGridError: If rows or columns is not positive
    """
    cell_w, cell_h = base_cell_size(source_width, source_height, rows, columns)

    cells = []
    index = 1
    for row in range(rows):
        y = row * cell_h
        height = source_height - y if row == rows - 1 else cell_h
        for col in range(columns):
            x = col * cell_w
            width = source_width - x if col == columns - 1 else cell_w
            cells.append(CellRect(x, y, width, height, row=row, column=col, index=index))
            index += 1

    return cells


def cell_file_name(index: int, row: int, column: int, extension: str = '.png') -> str:
    """
    File name of a split cell.

    Args:
        index: 1-based sequence number
        row: 1-based row
        column: 1-based column
        extension: Output extension including the dot
    """
    return f"cell_{index:03d}_row{row:02d}_col{column:02d}{extension}"
