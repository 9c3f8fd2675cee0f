"""Visualization utilities for split cells and merged images."""
from .display import (
    display_cells,
    display_image,
    save_cell_sheet
)
