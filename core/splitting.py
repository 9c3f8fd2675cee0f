"""Image splitting into grid cells."""

from typing import Iterator, Tuple

import numpy as np

from .geometry import CellRect, compute_cells


def extract_cell(image_data: np.ndarray, rect: CellRect) -> np.ndarray:
    """
    Copy one rectangle out of an image.

    Args:
        image_data: Source image as numpy array
        rect: Cell rectangle, in bounds of the source

    Returns:
        New array of exactly rect.height x rect.width pixels
    """
    y_end = rect.y + rect.height
    x_end = rect.x + rect.width
    return image_data[rect.y:y_end, rect.x:x_end].copy()


def split_image(image_data: np.ndarray, rows: int, columns: int) -> Iterator[Tuple[CellRect, np.ndarray]]:
    """
    Split image into rows x columns cells.

    Cells are produced lazily so only one copied cell is alive at a time.

    Args:
        image_data: Input image as numpy array
        rows: Number of grid rows
        columns: Number of grid columns

    Yields:
        (rect, cell) pairs in row-major order
    """
    height, width = image_data.shape[:2]
    for rect in compute_cells(width, height, rows, columns):
        yield rect, extract_cell(image_data, rect)


def split_image_to_dict(image_data, rows, columns):
    """Split image into cells keyed by 1-based sequence number."""
    return {rect.index: cell for rect, cell in split_image(image_data, rows, columns)}
