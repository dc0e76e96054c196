"""
Empty a destination directory before a run.

Only files are deleted; the directory tree itself is left in place.
"""
import logging
import os

from .discovery import raise_walk_error

log = logging.getLogger(__name__)


def clean(dst_dir: str) -> int:
    """
    Delete every file under dst_dir, creating dst_dir if it does not exist.

    Returns the number of files removed. The first failed listing or deletion raises;
    files removed before it stay removed.
    """
    if not os.path.isdir(dst_dir):
        os.makedirs(dst_dir, exist_ok=True)
        log.debug("Created empty %s", dst_dir)
        return 0

    removed = 0
    for root, _, files in os.walk(dst_dir, onerror=raise_walk_error):
        for fname in files:
            os.remove(os.path.join(root, fname))
            removed += 1
    log.info("Removed %d file(s) from %s", removed, dst_dir)
    return removed
