"""Shared fixtures: synthetic images written with Pillow."""

import sys
import os

import numpy as np
import pytest
from PIL import Image

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


def gradient_image(width, height, channels=3):
    """Image whose every pixel is distinct enough to catch misplaced copies."""
    ys, xs = np.mgrid[0:height, 0:width]
    img = np.zeros((height, width, channels), dtype=np.uint8)
    img[:, :, 0] = (xs * 7) % 256
    img[:, :, 1] = (ys * 11) % 256
    img[:, :, 2] = (xs + ys) % 256
    if channels == 4:
        img[:, :, 3] = 255
    return img


def solid_image(width, height, color):
    return np.full((height, width, len(color)), color, dtype=np.uint8)


@pytest.fixture
def write_image(tmp_path):
    """Write an array to tmp_path/name and return the path."""
    def _write(name, array, **save_kwargs):
        path = tmp_path / name
        Image.fromarray(array).save(path, **save_kwargs)
        return path
    return _write


@pytest.fixture
def corrupt_file(tmp_path):
    def _write(name):
        path = tmp_path / name
        path.write_bytes(b"definitely not an image")
        return path
    return _write
