"""
Image discovery: find every supported image under a source directory.

Matches are grouped by extension (all ``*.png`` first, then ``*.jpg``, then
``*.jpeg``); the list is not globally sorted by filename. Hidden files and
directories are included.
"""
import os
from fnmatch import fnmatch

# Searched in this order
IMAGE_PATTERNS = ("*.png", "*.jpg", "*.jpeg")


def raise_walk_error(err: OSError) -> None:
    """os.walk onerror hook: an unreadable directory fails the walk."""
    raise err


def find_images(src_dir: str) -> list[str]:
    """
    Return all image paths under src_dir (recursive).

    Raises FileNotFoundError if src_dir does not exist, and any OSError raised
    while listing a subdirectory.
    """
    if not os.path.isdir(src_dir):
        raise FileNotFoundError(f"Source directory not found: {src_dir}")

    groups: dict[str, list[str]] = {pattern: [] for pattern in IMAGE_PATTERNS}
    for root, _, files in os.walk(src_dir, onerror=raise_walk_error):
        for fname in files:
            for pattern in IMAGE_PATTERNS:
                if fnmatch(fname, pattern):
                    groups[pattern].append(os.path.join(root, fname))
                    break

    files: list[str] = []
    for pattern in IMAGE_PATTERNS:
        files.extend(sorted(groups[pattern]))
    return files
