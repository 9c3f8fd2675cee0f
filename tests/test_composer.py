"""Tests for canvas allocation and composition."""

import numpy as np
import pytest

from core.composer import TRANSPARENT, WHITE, Canvas, Failed, Placed, compose
from core.errors import DecodeError, ResourceExhaustedError

from conftest import solid_image

RED = (255, 0, 0)
GREEN = (0, 255, 0)
BLUE = (0, 0, 255)


def _block(canvas, row, col, cell_w, cell_h):
    return canvas.pixels[row * cell_h:(row + 1) * cell_h, col * cell_w:(col + 1) * cell_w]


def test_allocate_fills_background():
    opaque = Canvas.allocate(6, 4, alpha=False)
    assert opaque.pixels.shape == (4, 6, 3)
    assert np.all(opaque.pixels == WHITE)

    clear = Canvas.allocate(6, 4, alpha=True)
    assert clear.pixels.shape == (4, 6, 4)
    assert np.all(clear.pixels == TRANSPARENT)


def test_allocation_failure(monkeypatch):
    def fail(*args, **kwargs):
        raise MemoryError
    monkeypatch.setattr(np, "empty", fail)
    with pytest.raises(ResourceExhaustedError):
        Canvas.allocate(10, 10, alpha=False)


def test_cells_placed_row_major():
    cells = [solid_image(4, 3, c) for c in (RED, GREEN, BLUE, WHITE)]
    canvas = compose(Canvas.allocate(8, 6, False), cells, 2, 2, 4, 3, False)
    assert np.all(_block(canvas, 0, 0, 4, 3) == RED)
    assert np.all(_block(canvas, 0, 1, 4, 3) == GREEN)
    assert np.all(_block(canvas, 1, 0, 4, 3) == BLUE)
    assert all(isinstance(o, Placed) for o in canvas.outcomes)
    assert canvas.diagnostics == []


def test_short_input_keeps_background():
    cells = [solid_image(4, 3, c) for c in (RED, GREEN, BLUE)]
    canvas = compose(Canvas.allocate(8, 6, False), cells, 2, 2, 4, 3, False)
    assert len(canvas.outcomes) == 3
    assert np.all(_block(canvas, 1, 1, 4, 3) == WHITE)


def test_extra_inputs_ignored():
    cells = [solid_image(2, 2, RED)] * 2 + [solid_image(2, 2, BLUE)] * 3
    canvas = compose(Canvas.allocate(4, 2, False), cells, 1, 2, 2, 2, False)
    assert len(canvas.outcomes) == 2
    assert np.all(canvas.pixels == RED)


def test_mismatched_cell_is_stretched():
    cells = [solid_image(4, 4, RED), solid_image(9, 2, GREEN)]
    canvas = compose(Canvas.allocate(8, 4, False), cells, 1, 2, 4, 4, False)
    assert np.all(_block(canvas, 0, 1, 4, 4) == GREEN)
    assert canvas.outcomes[0].resized is False
    assert canvas.outcomes[1].resized is True


def test_failed_cell_gets_background(tmp_path, corrupt_file):
    cells = [
        solid_image(4, 4, RED),
        tmp_path / "missing.png",
        corrupt_file("broken.png"),
        solid_image(4, 4, BLUE),
    ]
    canvas = Canvas.allocate(8, 8, True)
    canvas.pixels[...] = 77  # overwritten by clear()
    compose(canvas, cells, 2, 2, 4, 4, True)

    assert np.all(_block(canvas, 0, 0, 4, 4) == RED + (255,))
    assert np.all(_block(canvas, 0, 1, 4, 4) == TRANSPARENT)
    assert np.all(_block(canvas, 1, 0, 4, 4) == TRANSPARENT)
    assert np.all(_block(canvas, 1, 1, 4, 4) == BLUE + (255,))

    failures = canvas.diagnostics
    assert [f.index for f in failures] == [2, 3]
    assert all(isinstance(f, Failed) for f in failures)
    assert all(isinstance(f.error, DecodeError) for f in failures)
    assert "row 1, col 2" in failures[0].message


def test_rgba_cell_on_opaque_canvas_is_drawn_over_white():
    cell = solid_image(2, 2, (0, 0, 0, 0))
    cell[0, 0] = (0, 0, 0, 255)
    canvas = compose(Canvas.allocate(2, 2, False), [cell], 1, 1, 2, 2, False)
    assert tuple(canvas.pixels[0, 0]) == (0, 0, 0)
    assert tuple(canvas.pixels[1, 1]) == WHITE


def test_rgb_cell_on_alpha_canvas_is_opaque():
    canvas = compose(Canvas.allocate(2, 2, True), [solid_image(2, 2, GREEN)], 1, 1, 2, 2, True)
    assert np.all(canvas.pixels == GREEN + (255,))


def test_alpha_mismatch_rejected():
    with pytest.raises(ValueError):
        compose(Canvas.allocate(2, 2, False), [], 1, 1, 2, 2, True)


def test_canvas_too_small_rejected():
    with pytest.raises(ValueError):
        compose(Canvas.allocate(3, 2, False), [], 1, 2, 2, 2, False)


def test_cells_are_copied_not_aliased():
    cell = solid_image(2, 2, RED)
    canvas = compose(Canvas.allocate(2, 2, False), [cell], 1, 1, 2, 2, False)
    cell[:] = 0
    assert np.all(canvas.pixels == RED)


def test_freeze_makes_buffer_read_only():
    canvas = Canvas.allocate(2, 2, False)
    pixels = canvas.freeze()
    with pytest.raises(ValueError):
        pixels[0, 0] = 0


def test_progress_and_failures_printed(tmp_path, capsys):
    cells = [solid_image(2, 2, RED), tmp_path / "missing.png"]
    compose(Canvas.allocate(4, 2, False), cells, 1, 2, 2, 2, False, verbose=True)
    out = capsys.readouterr().out
    assert "Processed images: 1/2" in out
    assert "missing.png" in out


def test_out_of_memory_cell_gets_background(monkeypatch):
    from core import composer

    cells = [solid_image(2, 2, RED), "huge.png", solid_image(2, 2, BLUE)]
    real_load = composer._load_cell

    def load(source):
        if source == "huge.png":
            raise MemoryError
        return real_load(source)

    monkeypatch.setattr(composer, "_load_cell", load)
    canvas = compose(Canvas.allocate(6, 2, False), cells, 1, 3, 2, 2, False)

    assert [o.ok for o in canvas.outcomes] == [True, False, True]
    failure = canvas.outcomes[1]
    assert isinstance(failure, Failed)
    assert isinstance(failure.error, ResourceExhaustedError)
    assert "huge.png" in str(failure.error)
    assert np.all(_block(canvas, 0, 1, 2, 2) == WHITE)
    assert np.all(_block(canvas, 0, 2, 2, 2) == BLUE)
