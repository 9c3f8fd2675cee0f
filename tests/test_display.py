"""Tests for the matplotlib contact sheet."""

import matplotlib
matplotlib.use("Agg")

from PIL import Image

from visualization import save_cell_sheet

from conftest import gradient_image, solid_image


def test_save_cell_sheet(tmp_path):
    cells = [gradient_image(6, 4), solid_image(6, 4, (255, 0, 0)), gradient_image(6, 4, channels=4)]
    path = save_cell_sheet(cells, 2, 2, tmp_path / "sheets" / "sheet.png")
    assert path.exists()
    with Image.open(path) as img:
        assert img.width > 0 and img.height > 0


def test_save_cell_sheet_single_cell_with_titles(tmp_path):
    path = save_cell_sheet([gradient_image(3, 3)], 1, 1, tmp_path / "one.png", titles=["only"])
    assert path.exists()


def test_display_cells_lays_out_grid(monkeypatch):
    import visualization.display as display

    figures = []
    monkeypatch.setattr(display.plt, "show", lambda: figures.append(display.plt.gcf()))
    display.display_cells([gradient_image(4, 4)] * 5, 2, 3)

    (fig,) = figures
    assert len(fig.axes) == 6
    assert fig.axes[4].get_title() == "r2 c2"
    display.plt.close(fig)
