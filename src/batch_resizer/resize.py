"""
Sequential batch image resizer: finds all images under a source directory, scales them
by a uniform factor and saves them as JPEG into a flat destination directory.

Every output is named <source stem>.jpg, so sources that share a stem (a.png, a.jpg)
overwrite each other. Collisions are logged as warnings, not prevented.
"""
from __future__ import annotations

import logging
import os
import threading
from collections import defaultdict
from enum import Enum
from typing import Iterable, Optional

from pydantic import BaseModel, ConfigDict

from .config import settings
from .discovery import find_images
from . import imaging

log = logging.getLogger(__name__)


class WorkStatus(str, Enum):
    SUCCESS = "success"
    CANCELED = "canceled"
    FAILED = "failed"


class ResizeOutcome(BaseModel):
    """Terminal state of one unit of work."""

    model_config = ConfigDict(frozen=True)

    source: str
    status: WorkStatus
    output: Optional[str] = None  # written file, success only
    size: Optional[tuple[int, int]] = None  # target (width, height), success only
    reason: Optional[str] = None  # failed only


def validate_scale(scale: float) -> float:
    if not scale > 0:
        raise ValueError(f"scale must be positive, got {scale!r}")
    return float(scale)


def ensure_dir(path: str) -> None:
    os.makedirs(path, exist_ok=True)


def output_path_for(src_path: str, dst_dir: str, ext: Optional[str] = None) -> str:
    """
    Flat output location for src_path: dst_dir/<stem><ext>.
    """
    stem = os.path.splitext(os.path.basename(src_path))[0]
    return os.path.join(dst_dir, stem + (ext or settings.OUTPUT_EXT))


def find_collisions(paths: Iterable[str]) -> dict[str, list[str]]:
    """
    Map each output name produced by more than one source to those sources.
    """
    by_name: dict[str, list[str]] = defaultdict(list)
    for p in paths:
        by_name[os.path.basename(output_path_for(p, ""))].append(p)
    return {name: srcs for name, srcs in by_name.items() if len(srcs) > 1}


def warn_collisions(paths: list[str], logger: logging.Logger) -> None:
    for name, srcs in find_collisions(paths).items():
        logger.warning(
            "Output %s is produced by %d sources, last replace wins: %s",
            name,
            len(srcs),
            ", ".join(srcs),
        )


def resize_image_file(
    input_path: str,
    output_path: str,
    scale: float,
    resample: Optional[str] = None,
    quality: Optional[int] = None,
    cancel_event: Optional[threading.Event] = None,
) -> ResizeOutcome:
    """
    Scale a single image and write it as JPEG, overwriting output_path.

    The file is written under a temporary name and moved into place, so units that
    collide on output_path replace each other whole instead of interleaving bytes.

    If cancel_event is set before the decode or before the resample/encode/write
    phase, nothing is written and a CANCELED outcome is returned.
    Decode and write errors propagate.
    """
    resample = resample or settings.RESAMPLE
    quality = settings.JPEG_QUALITY if quality is None else quality

    if cancel_event is not None and cancel_event.is_set():
        return ResizeOutcome(source=input_path, status=WorkStatus.CANCELED)

    img = imaging.decode(input_path)
    width, height = imaging.target_size(img.size, scale)

    # Decode may have taken a while; re-check before doing anything visible
    if cancel_event is not None and cancel_event.is_set():
        return ResizeOutcome(source=input_path, status=WorkStatus.CANCELED)

    resized = imaging.resample(img, width, height, imaging.get_resample_filter(resample))
    data = imaging.encode(resized, "JPEG", quality)
    tmp_path = f"{output_path}.{os.getpid()}.{threading.get_ident()}.tmp"
    try:
        with open(tmp_path, "wb") as f:
            f.write(data)
        os.replace(tmp_path, output_path)
    except OSError:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise

    return ResizeOutcome(
        source=input_path,
        status=WorkStatus.SUCCESS,
        output=output_path,
        size=(width, height),
    )


def resize_images(
    src_dir: str,
    dst_dir: str,
    scale: float,
    resample: Optional[str] = None,
    quality: Optional[int] = None,
    logger: Optional[logging.Logger] = None,
) -> list[ResizeOutcome]:
    """
    Resize every image under src_dir into dst_dir, one at a time.

    The first failing image aborts the batch; its exception propagates unchanged.
    """
    logger = logger or log
    scale = validate_scale(scale)
    resample = resample or settings.RESAMPLE
    quality = settings.JPEG_QUALITY if quality is None else quality

    ensure_dir(dst_dir)
    paths = find_images(src_dir)
    warn_collisions(paths, logger)

    outcomes = []
    for in_path in paths:
        out_path = output_path_for(in_path, dst_dir)
        outcome = resize_image_file(in_path, out_path, scale, resample, quality)
        logger.info("Resized: %s -> %s %s", in_path, out_path, outcome.size)
        outcomes.append(outcome)
    return outcomes
