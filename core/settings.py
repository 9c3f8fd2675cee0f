"""
Tunable limits and naming rules shared by the split and merge pipelines.

Per-run parameters (rows, columns, paths) are not stored here; they come
from the command line or the interactive prompts.
"""

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class GridSettings:
    """
    Limits and naming rules.

    Attributes:
        supported_extensions: Lowercase extensions accepted as input images
        alpha_capable_extensions: Extensions whose pixels are sampled for transparency
        output_extension: Extension of every written cell / merged file
        probe_file_limit: How many merge inputs the alpha probe inspects
        probe_block_size: Side of the top-left block sampled for transparency
        soft_dimension_limit: Canvas side above which a warning is printed
        max_image_dimension: Canvas side above which merging is refused
        timestamp_format: strftime pattern for split output folders
    """
    supported_extensions: Tuple[str, ...] = ('.png', '.jpg', '.jpeg', '.bmp')
    alpha_capable_extensions: Tuple[str, ...] = ('.png',)
    output_extension: str = '.png'
    probe_file_limit: int = 5
    probe_block_size: int = 10
    soft_dimension_limit: int = 32767
    max_image_dimension: int = 65535
    timestamp_format: str = '%Y%m%d_%H%M%S'

    def __post_init__(self):
        if self.probe_file_limit < 1 or self.probe_block_size < 1:
            raise ValueError("Probe limits must be positive")
        if self.soft_dimension_limit > self.max_image_dimension:
            raise ValueError(
                f"Soft limit {self.soft_dimension_limit} exceeds "
                f"maximum dimension {self.max_image_dimension}"
            )
        if not self.output_extension.startswith('.'):
            raise ValueError(f"Output extension must start with '.', got {self.output_extension!r}")

    def is_supported(self, path) -> bool:
        """Case-insensitive extension check against supported_extensions."""
        return str(path).lower().endswith(self.supported_extensions)


DEFAULT_SETTINGS = GridSettings()
