"""Core grid split/merge engine."""
from .errors import (
    GridImageError,
    InvalidGridError,
    SizeError,
    InvalidCellSizeError,
    SizeOverflowError,
    DecodeError,
    UnsupportedFormatError,
    ResourceExhaustedError,
    PathError
)
from .settings import GridSettings, DEFAULT_SETTINGS
from .geometry import GridSpec, CellRect, compute_cells, check_grid_fits, cell_file_name
from .image_utils import load_image, save_image
from .splitting import extract_cell, split_image
from .alpha import requires_alpha, format_implies_alpha, sampled_region_has_transparency
from .size_guard import CanvasSize, validate_canvas_size
from .composer import Canvas, Placed, Failed, compose
