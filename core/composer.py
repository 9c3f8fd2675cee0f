"""
Canvas composition for merging cells into one image.

The canvas buffer is owned by the composer for the duration of a merge;
cells are copied into it, never referenced. Every grid position resolves
to a CellOutcome: Placed, or Failed with the background left in place.
"""

from dataclasses import dataclass, field
from typing import List, Sequence, Union

import numpy as np

from .errors import DecodeError, ResourceExhaustedError
from .geometry import check_grid
from .image_utils import has_alpha_channel, load_image, resize_image

WHITE = (255, 255, 255)
TRANSPARENT = (0, 0, 0, 0)


@dataclass
class Placed:
    """Cell drawn at its grid position."""
    index: int
    row: int
    column: int
    source: object
    resized: bool = False

    @property
    def ok(self) -> bool:
        return True


@dataclass
class Failed:
    """Cell could not be drawn; its position keeps the background."""
    index: int
    row: int
    column: int
    source: object
    error: Exception

    @property
    def ok(self) -> bool:
        return False

    @property
    def message(self) -> str:
        return f"Error processing cell {self.index} (row {self.row + 1}, col {self.column + 1}): {self.error}"


CellOutcome = Union[Placed, Failed]


@dataclass
class Canvas:
    """
    Mutable pixel buffer for one merge.

    Attributes:
        pixels: H x W x 4 (alpha) or H x W x 3 uint8 buffer
        alpha: Whether the canvas keeps transparency
        outcomes: One CellOutcome per visited grid position
    """
    pixels: np.ndarray
    alpha: bool
    outcomes: List[CellOutcome] = field(default_factory=list)

    @classmethod
    def allocate(cls, width: int, height: int, alpha: bool) -> 'Canvas':
        """
        Allocate a canvas filled with the background colour.

        Raises:
            ResourceExhaustedError: The buffer cannot be allocated
        """
        channels = 4 if alpha else 3
        try:
            pixels = np.empty((height, width, channels), dtype=np.uint8)
        except (MemoryError, ValueError) as e:
            raise ResourceExhaustedError(
                f"Insufficient memory to create final image ({width}x{height})") from e
        canvas = cls(pixels=pixels, alpha=alpha)
        canvas.clear()
        return canvas

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    @property
    def background(self):
        return TRANSPARENT if self.alpha else WHITE

    @property
    def diagnostics(self) -> List[Failed]:
        return [o for o in self.outcomes if not o.ok]

    def clear(self):
        self.pixels[...] = self.background
        self.outcomes = []

    def fill_cell(self, x: int, y: int, width: int, height: int):
        self.pixels[y:y + height, x:x + width] = self.background

    def place(self, cell: np.ndarray, x: int, y: int):
        """Copy a cell into the canvas, converting it to the canvas channels."""
        cell = self._match_channels(cell)
        h, w = cell.shape[:2]
        self.pixels[y:y + h, x:x + w] = cell

    def _match_channels(self, cell: np.ndarray) -> np.ndarray:
        if cell.ndim == 2:
            cell = np.repeat(cell[:, :, None], 3, axis=2)
        if self.alpha:
            if has_alpha_channel(cell):
                return cell
            opaque = np.full(cell.shape[:2] + (1,), 255, dtype=np.uint8)
            return np.concatenate([cell[:, :, :3], opaque], axis=2)
        if not has_alpha_channel(cell):
            return cell
        # Transparent pixels are drawn over the white background
        a = cell[:, :, 3:4].astype(np.float32) / 255.0
        rgb = cell[:, :, :3].astype(np.float32) * a + 255.0 * (1.0 - a)
        return np.clip(np.rint(rgb), 0, 255).astype(np.uint8)

    def freeze(self) -> np.ndarray:
        """Finish composition; the returned buffer is read-only."""
        self.pixels.flags.writeable = False
        return self.pixels


def _load_cell(source) -> np.ndarray:
    if isinstance(source, np.ndarray):
        return source
    return load_image(source)


def _draw_cell(canvas, source, index, row, col, cell_width, cell_height) -> CellOutcome:
    x, y = col * cell_width, row * cell_height
    try:
        cell = _load_cell(source)
        h, w = cell.shape[:2]
        resized = (w, h) != (cell_width, cell_height)
        if resized:
            cell = resize_image(cell, cell_width, cell_height)
        canvas.place(cell, x, y)
        return Placed(index, row, col, source, resized)
    except MemoryError as e:
        error = ResourceExhaustedError(f"Insufficient memory to process file {source}")
        error.__cause__ = e
    except (DecodeError, ResourceExhaustedError) as e:
        error = e
    canvas.fill_cell(x, y, cell_width, cell_height)
    return Failed(index, row, col, source, error)


def compose(canvas: Canvas, cell_images: Sequence, rows: int, columns: int,
            cell_width: int, cell_height: int, alpha_required: bool,
            verbose: bool = False) -> Canvas:
    """
    Draw cells onto the canvas in row-major order.

    Args:
        canvas: Canvas sized cell_width*columns x cell_height*rows
        cell_images: Ordered file paths or decoded arrays
        rows: Number of grid rows
        columns: Number of grid columns
        cell_width: Uniform cell width; cells of another size are stretched
        cell_height: Uniform cell height
        alpha_required: Background is transparent if True, else opaque white
        verbose: Print per-cell progress and failures

    Returns:
        The same canvas, with one outcome recorded per visited position.
        Positions after the last input keep the background; extra inputs
        are ignored.
    """
    check_grid(rows, columns)
    if canvas.alpha != alpha_required:
        raise ValueError(
            f"Canvas alpha={canvas.alpha} does not match alpha_required={alpha_required}")
    if canvas.width < cell_width * columns or canvas.height < cell_height * rows:
        raise ValueError(
            f"Canvas {canvas.width}x{canvas.height} is smaller than the "
            f"{rows}x{columns} grid of {cell_width}x{cell_height} cells")

    canvas.clear()
    sources = list(cell_images)[:rows * columns]
    total = len(sources)

    for i, source in enumerate(sources):
        row, col = divmod(i, columns)
        outcome = _draw_cell(canvas, source, i + 1, row, col, cell_width, cell_height)
        canvas.outcomes.append(outcome)
        if verbose:
            if outcome.ok:
                print(f"\rProcessed images: {i + 1}/{total}", end='')
            else:
                print(f"\n{outcome.message}")

    if verbose and total:
        print()

    return canvas


