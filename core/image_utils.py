"""Low-level image operations: decode, encode and resample."""

from contextlib import contextmanager
from pathlib import Path

import cv2
import numpy as np
from PIL import Image, UnidentifiedImageError

from .errors import DecodeError, PathError, ResourceExhaustedError

# Pillow modes that carry an alpha band
ALPHA_MODES = frozenset({'RGBA', 'LA', 'PA', 'RGBa', 'La'})


def _open_header(file_path) -> Image.Image:
    """Open an image and parse its header only; pixels are not decoded yet."""
    try:
        return Image.open(file_path)
    except FileNotFoundError:
        raise DecodeError(f"File {file_path} not found", path=file_path) from None
    except PermissionError as e:
        raise DecodeError(f"No access to file {file_path}", path=file_path) from e
    except (UnidentifiedImageError, OSError) as e:
        raise DecodeError(f"Could not load image {file_path}: {e}", path=file_path) from e
    except Image.DecompressionBombError as e:
        raise ResourceExhaustedError(f"Image {file_path} is too large to decode: {e}") from e


def read_image_size(file_path):
    """(width, height) from the file header, without decoding the pixels."""
    with _open_header(file_path) as img:
        return img.size


@contextmanager
def open_image(file_path):
    """
    Open and fully decode an image, releasing the file on exit.

    Raises:
        DecodeError: Missing, unreadable or corrupt file
        ResourceExhaustedError: Not enough memory to decode
    """
    img = _open_header(file_path)

    with img:
        try:
            img.load()
        except MemoryError as e:
            raise ResourceExhaustedError(
                f"Insufficient memory to process file {file_path}") from e
        except (OSError, ValueError, SyntaxError) as e:
            raise DecodeError(f"Could not load image {file_path}: {e}", path=file_path) from e
        yield img


def has_alpha_mode(img: Image.Image) -> bool:
    """True if the decoded image carries transparency (alpha band or palette key)."""
    return img.mode in ALPHA_MODES or 'transparency' in img.info


def to_array(img: Image.Image) -> np.ndarray:
    """Convert a decoded image to an RGB or RGBA uint8 array."""
    target = 'RGBA' if has_alpha_mode(img) else 'RGB'
    if img.mode != target:
        img = img.convert(target)
    return np.array(img)


def load_image(file_path) -> np.ndarray:
    """Load image from path and return as numpy array (RGB, or RGBA when it has alpha)."""
    with open_image(file_path) as img:
        try:
            return to_array(img)
        except MemoryError as e:
            raise ResourceExhaustedError(
                f"Insufficient memory to process file {file_path}") from e


def save_image(image: np.ndarray, file_path) -> Path:
    """
    Encode an RGB/RGBA array as PNG.

    Raises:
        PathError: Target folder missing or not writable
    """
    file_path = Path(file_path)
    try:
        Image.fromarray(image).save(file_path, format='PNG')
    except FileNotFoundError as e:
        raise PathError(f"Folder {file_path.parent} not found") from e
    except PermissionError as e:
        raise PathError(f"No access to file {file_path}") from e
    return file_path


def has_alpha_channel(image: np.ndarray) -> bool:
    return image.ndim == 3 and image.shape[2] == 4


def image_size(image: np.ndarray):
    """(width, height) of an image array."""
    h, w = image.shape[:2]
    return w, h


def resize_image(image: np.ndarray, width: int, height: int) -> np.ndarray:
    """Stretch image to exactly width x height (no aspect ratio preservation)."""
    h, w = image.shape[:2]
    if (w, h) == (width, height):
        return image
    return cv2.resize(image, (width, height), interpolation=cv2.INTER_LINEAR)
