"""
Alpha requirement probe for merging.

Decides whether the merged canvas needs an alpha channel by looking at a
bounded sample: the first few files and a small top-left pixel block of
each. Transparency outside the sample is missed.
"""

from pathlib import Path
from typing import Iterable

import numpy as np

from .errors import DecodeError, ResourceExhaustedError
from .image_utils import ALPHA_MODES, open_image
from .settings import DEFAULT_SETTINGS

PROBE_FILE_LIMIT = DEFAULT_SETTINGS.probe_file_limit
PROBE_BLOCK_SIZE = DEFAULT_SETTINGS.probe_block_size


def format_implies_alpha(mode: str) -> bool:
    """True if the decoded pixel format natively carries an alpha band."""
    return mode in ALPHA_MODES


def sampled_region_has_transparency(rgba: np.ndarray, max_x: int = PROBE_BLOCK_SIZE,
                                    max_y: int = PROBE_BLOCK_SIZE) -> bool:
    """
    Check the top-left max_x x max_y block for any alpha below 255.

    Args:
        rgba: H x W x 4 array
        max_x: Columns to sample
        max_y: Rows to sample
    """
    if rgba.ndim != 3 or rgba.shape[2] != 4:
        return False
    block = rgba[:max_y, :max_x, 3]
    return bool(block.size) and bool(np.any(block < 255))


def _file_has_alpha(path, settings) -> bool:
    with open_image(path) as img:
        if format_implies_alpha(img.mode):
            return True
        if Path(path).suffix.lower() not in settings.alpha_capable_extensions:
            return False
        # Palette/greyscale PNGs can still hold a transparency key
        n = settings.probe_block_size
        block = img.crop((0, 0, min(img.width, n), min(img.height, n))).convert('RGBA')
        return sampled_region_has_transparency(np.array(block), n, n)


def requires_alpha(image_paths: Iterable, settings=DEFAULT_SETTINGS, verbose: bool = False) -> bool:
    """
    Decide whether the merged image must keep transparency.

    Args:
        image_paths: Ordered merge inputs
        settings: Probe limits
        verbose: Print a notice when transparency is found

    Returns:
        True as soon as one probed file shows transparency
    """
    for i, path in enumerate(image_paths):
        if i >= settings.probe_file_limit:
            break
        try:
            found = _file_has_alpha(path, settings)
        except (DecodeError, ResourceExhaustedError):
            # Unreadable files are left for the composer to report
            continue
        if found:
            if verbose:
                print("Transparency detected in images - will be preserved in result")
            return True
    return False
