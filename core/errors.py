"""Error types raised by the grid split/merge engine."""


class GridImageError(Exception):
    """Base class for every anticipated split/merge failure."""


class InvalidGridError(GridImageError, ValueError):
    """Rows or columns are not positive, or the grid does not fit the image."""


class SizeError(GridImageError):
    """Canvas or cell dimensions cannot be used for an output image."""


class InvalidCellSizeError(SizeError, ValueError):
    """A cell (or the size-determining first image) has a degenerate size."""


class SizeOverflowError(SizeError):
    """Total canvas dimensions exceed what an image can represent."""


class DecodeError(GridImageError):
    """A specific image file cannot be read."""

    def __init__(self, message, path=None):
        super().__init__(message)
        self.path = path


class UnsupportedFormatError(DecodeError):
    """File extension is not one of the supported image formats."""


class ResourceExhaustedError(GridImageError):
    """Allocation failed for a source, cell or canvas buffer."""


class PathError(GridImageError):
    """Missing file or directory, or access denied."""
