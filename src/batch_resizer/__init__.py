from .cleanup import clean
from .discovery import find_images
from .resize import ResizeOutcome, WorkStatus, resize_image_file, resize_images
from .runner import BatchResizeError, resize_images_concurrent, summarize

__all__ = [
    "BatchResizeError",
    "ResizeOutcome",
    "WorkStatus",
    "clean",
    "find_images",
    "resize_image_file",
    "resize_images",
    "resize_images_concurrent",
    "summarize",
]
