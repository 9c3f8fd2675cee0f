"""Tests for the command line entry point."""

import pytest
from PIL import Image

import image_grid
from core.errors import (
    DecodeError,
    InvalidGridError,
    PathError,
    ResourceExhaustedError,
    SizeOverflowError,
    UnsupportedFormatError
)

from conftest import gradient_image, solid_image


def test_split_and_merge(tmp_path, capsys):
    src = tmp_path / "sheet.png"
    Image.fromarray(gradient_image(20, 10)).save(src)

    assert image_grid.main(["split", str(src), "--rows", "2", "--columns", "4",
                            "--output-root", str(tmp_path / "out")]) == 0
    (out_dir,) = list((tmp_path / "out").iterdir())
    assert len(list(out_dir.iterdir())) == 8

    assert image_grid.main(["-q", "merge", str(out_dir), "-r", "2", "-c", "4",
                            "-o", str(tmp_path / "merged")]) == 0
    with Image.open(tmp_path / "merged.png") as img:
        assert img.size == (20, 10)
    assert "Frames successfully merged!" not in capsys.readouterr().out


def test_split_with_preview(tmp_path):
    pytest.importorskip("matplotlib")
    import matplotlib
    matplotlib.use("Agg")

    src = tmp_path / "sheet.png"
    Image.fromarray(gradient_image(8, 8)).save(src)
    preview = tmp_path / "preview.png"
    assert image_grid.main(["-q", "split", str(src), "-r", "2", "-c", "2",
                            "--preview", str(preview)]) == 0
    assert preview.exists()


def test_errors_reported_not_raised(tmp_path, capsys):
    assert image_grid.main(["split", str(tmp_path / "missing.png"), "-r", "1", "-c", "1"]) == 1
    assert "Error: File or folder problem" in capsys.readouterr().out

    Image.fromarray(solid_image(40000, 1, (1, 2, 3))).save(tmp_path / "wide.png")
    assert image_grid.main(["merge", str(tmp_path), "-r", "1", "-c", "2",
                            "-o", str(tmp_path / "o.png")]) == 1
    assert "Error: Final image size is too large" in capsys.readouterr().out
    assert not (tmp_path / "o.png").exists()


def test_non_positive_grid_rejected_by_parser(tmp_path):
    with pytest.raises(SystemExit):
        image_grid.main(["split", str(tmp_path / "a.png"), "-r", "0", "-c", "1"])


@pytest.mark.parametrize("error,prefix", [
    (InvalidGridError("x"), "Error: Invalid grid"),
    (SizeOverflowError("x"), "Error: Final image size is too large"),
    (UnsupportedFormatError("x"), "Error: Unsupported file format"),
    (DecodeError("x"), "Error: Could not read image"),
    (ResourceExhaustedError("x"), "Error: Insufficient memory"),
    (PathError("x"), "Error: File or folder problem"),
    (MemoryError(), "Error: Insufficient memory"),
    (PermissionError(), "Error: No access"),
    (OSError("disk full"), "An error occurred: disk full"),
])
def test_describe_error_is_distinct(error, prefix):
    assert image_grid.describe_error(error).startswith(prefix)


def test_split_with_show(tmp_path, monkeypatch):
    pytest.importorskip("matplotlib")
    import matplotlib
    matplotlib.use("Agg")
    import visualization.display as display

    shown = []
    monkeypatch.setattr(display.plt, "show", lambda: shown.append(True))

    src = tmp_path / "sheet.png"
    Image.fromarray(gradient_image(8, 6)).save(src)
    assert image_grid.main(["-q", "split", str(src), "-r", "2", "-c", "3", "--show"]) == 0
    assert shown == [True]


def test_merge_accepts_quoted_output(tmp_path):
    frames = tmp_path / "frames"
    frames.mkdir()
    Image.fromarray(solid_image(2, 2, (9, 9, 9))).save(frames / "a.png")
    assert image_grid.main(["-q", "merge", str(frames), "-r", "1", "-c", "1",
                            "-o", f'"{tmp_path / "out"}"']) == 0
    assert (tmp_path / "out.png").exists()
