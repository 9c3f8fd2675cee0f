"""Display utilities for split cells and merged images."""

import matplotlib.pyplot as plt
import numpy as np
from typing import List, Optional
from pathlib import Path


def _draw_cells(cells: List[np.ndarray], rows: int, columns: int,
                titles: Optional[List[str]] = None,
                figsize: Optional[tuple] = None):
    """Lay out cells on a rows x columns grid of axes; returns the figure."""
    if figsize is None:
        figsize = (columns * 2.5, rows * 2.5)

    fig, axes = plt.subplots(rows, columns, figsize=figsize, squeeze=False)

    for ax in axes.flat:
        ax.axis('off')

    for idx, cell in enumerate(cells[:rows * columns]):
        r, c = divmod(idx, columns)
        ax = axes[r, c]
        ax.imshow(cell, cmap='gray' if cell.ndim == 2 else None)
        if titles and idx < len(titles):
            ax.set_title(titles[idx], fontsize=8)
        else:
            ax.set_title(f"r{r + 1} c{c + 1}", fontsize=8)

    plt.tight_layout()
    return fig


def display_cells(cells: List[np.ndarray], rows: int, columns: int,
                  titles: Optional[List[str]] = None,
                  figsize: Optional[tuple] = None):
    """
    Display cells in their grid layout.

    Args:
        cells: Cell images in row-major order
        rows: Grid rows
        columns: Grid columns
        titles: Optional titles for each cell
        figsize: Figure size
    """
    _draw_cells(cells, rows, columns, titles, figsize)
    plt.show()


def save_cell_sheet(cells: List[np.ndarray], rows: int, columns: int,
                    output_path: str, titles: Optional[List[str]] = None,
                    dpi: int = 100) -> Path:
    """
    Save a contact sheet of the cells to file.

    Args:
        cells: Cell images in row-major order
        rows: Grid rows
        columns: Grid columns
        output_path: Path to save the sheet
        titles: Optional titles for each cell
        dpi: Output DPI
    """
    fig = _draw_cells(cells, rows, columns, titles)

    output_path = Path(output_path)
    if str(output_path.parent) != '.':
        output_path.parent.mkdir(parents=True, exist_ok=True)

    fig.savefig(output_path, dpi=dpi, bbox_inches='tight')
    plt.close(fig)
    return output_path


def display_image(image: np.ndarray, title: str = "Merged", figsize: tuple = (8, 8)):
    """Display a single (merged) image."""
    fig, ax = plt.subplots(figsize=figsize)
    ax.imshow(image)
    ax.set_title(title)
    ax.axis('off')
    plt.tight_layout()
    plt.show()
