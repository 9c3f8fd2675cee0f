"""
Pipeline orchestration modules.

1. split_file() - source image -> one PNG per grid cell
2. merge_images() / merge_directory() - ordered cells -> one PNG
"""
from .split_pipeline import (
    SplitResult,
    split_file,
    create_output_directory,
    check_source_file
)
from .merge_pipeline import (
    MergeResult,
    merge_images,
    merge_directory,
    list_image_files,
    normalize_output_path,
    strip_quotes
)
