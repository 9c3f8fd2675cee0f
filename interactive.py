"""
Interactive console dialogue.

Asks for the mode, paths and grid size, re-prompting until the answer is
usable, then runs the split or merge pipeline.
"""

from pathlib import Path

from core.settings import DEFAULT_SETTINGS
from pipeline import list_image_files, merge_images, split_file, strip_quotes


def get_work_mode(input_fn=input) -> int:
    """Ask for 1 (split) or 2 (merge)."""
    print("Choose operation mode:")
    print("1 - Split image into frames")
    print("2 - Merge frames into one image")
    print()
    while True:
        answer = input_fn("Enter mode number (1 or 2): ").strip()
        if answer in ('1', '2'):
            return int(answer)
        print("Please enter 1 or 2!")


def get_positive_integer(prompt: str, input_fn=input) -> int:
    while True:
        answer = input_fn(prompt).strip()
        try:
            value = int(answer)
        except ValueError:
            value = 0
        if value > 0:
            return value
        print("Please enter a positive integer!")


def get_image_path(input_fn=input) -> Path:
    while True:
        path = strip_quotes(input_fn("Enter path to image file: "))
        if not path:
            print("Path cannot be empty!")
            continue
        return Path(path)


def get_frames_directory(input_fn=input) -> Path:
    while True:
        path = strip_quotes(input_fn("Enter path to frames folder: "))
        if not path:
            print("Path cannot be empty!")
            continue
        if not Path(path).is_dir():
            print("Folder not found!")
            continue
        return Path(path)


def get_output_path(input_fn=input, settings=DEFAULT_SETTINGS) -> Path:
    """Ask for the merge target; appends the output extension and checks the folder."""
    while True:
        path = strip_quotes(input_fn(f"Enter path to save result (with {settings.output_extension} extension): "))
        if not path:
            print("Path cannot be empty!")
            continue
        if not path.lower().endswith(settings.output_extension):
            path += settings.output_extension
        parent = Path(path).parent
        if not parent.is_dir():
            print("Folder does not exist!")
            continue
        return Path(path)


def split_mode(input_fn=input, settings=DEFAULT_SETTINGS):
    print("\n=== Image Splitting Mode ===")
    image_path = get_image_path(input_fn)
    rows = get_positive_integer("Enter number of rows: ", input_fn)
    columns = get_positive_integer("Enter number of columns: ", input_fn)
    return split_file(image_path, rows, columns, settings=settings)


def merge_mode(input_fn=input, settings=DEFAULT_SETTINGS):
    print("\n=== Frame Merging Mode ===")
    directory = get_frames_directory(input_fn)
    image_paths = list_image_files(directory, settings)
    if not image_paths:
        print("Error: No images found in the specified folder!")
        return None

    print(f"Found {len(image_paths)} images")
    rows = get_positive_integer("Enter number of rows: ", input_fn)
    columns = get_positive_integer("Enter number of columns: ", input_fn)
    output_path = get_output_path(input_fn, settings)
    return merge_images(image_paths, rows, columns, output_path, settings)


def run_interactive(input_fn=input, settings=DEFAULT_SETTINGS):
    """Run one split or merge chosen at the console. Errors propagate to the caller."""
    print("=== Image Processing Program ===")
    print()
    mode = get_work_mode(input_fn)
    if mode == 1:
        return split_mode(input_fn, settings)
    return merge_mode(input_fn, settings)
