#!/usr/bin/env python3
"""
runner.py: concurrent batch resize and the command-line entry point.

Each discovered image becomes one unit of work on a thread pool (Pillow releases the
GIL while decoding, resampling and encoding). The runner waits for every unit to reach
a terminal state, then reports one ResizeOutcome per image. A failing unit does not
stop its peers.

Usage:
  batch-resize --src-dir photos --dst-dir resized --scale 0.5 \
    [--mode sequential|concurrent|compare] [--workers 8] [--clean]
"""
from __future__ import annotations

import argparse
import logging
import signal
import sys
import threading
import time
from concurrent.futures import ThreadPoolExecutor, wait
from typing import Optional

from .cleanup import clean
from .config import settings
from .discovery import find_images
from .imaging import RESAMPLE_CHOICES
from .resize import (
    ResizeOutcome,
    WorkStatus,
    ensure_dir,
    output_path_for,
    resize_image_file,
    resize_images,
    validate_scale,
    warn_collisions,
)

log = logging.getLogger(__name__)


class BatchResizeError(Exception):
    """One or more units of a concurrent batch failed."""

    def __init__(self, outcomes: list[ResizeOutcome]):
        self.outcomes = list(outcomes)
        self.failures = [o for o in self.outcomes if o.status is WorkStatus.FAILED]
        super().__init__(
            f"{len(self.failures)} of {len(self.outcomes)} image(s) failed"
        )


def summarize(outcomes: list[ResizeOutcome]) -> dict[str, int]:
    """Count outcomes per status; every status is present."""
    counts = {status.value: 0 for status in WorkStatus}
    for outcome in outcomes:
        counts[outcome.status.value] += 1
    return counts


def _run_unit(
    in_path: str,
    out_path: str,
    scale: float,
    resample: str,
    quality: int,
    cancel_event: threading.Event,
    logger: logging.Logger,
) -> ResizeOutcome:
    worker = threading.current_thread().name
    logger.debug("[%s] start %s", worker, in_path)
    outcome = resize_image_file(in_path, out_path, scale, resample, quality, cancel_event)
    logger.info("[%s] %s %s", worker, outcome.status.value, in_path)
    return outcome


def resize_images_concurrent(
    src_dir: str,
    dst_dir: str,
    scale: float,
    cancel_event: Optional[threading.Event] = None,
    max_workers: Optional[int] = None,
    resample: Optional[str] = None,
    quality: Optional[int] = None,
    logger: Optional[logging.Logger] = None,
) -> list[ResizeOutcome]:
    """
    Resize every image under src_dir into dst_dir on a pool of max_workers threads.

    Args:
        cancel_event: when set, units that have not yet written skip their work and
            report CANCELED. None means the batch cannot be canceled.
        max_workers: pool size, defaults to settings.MAX_WORKERS.

    Returns:
        One outcome per discovered image, in discovery order.

    Raises:
        FileNotFoundError: src_dir does not exist.
        BatchResizeError: at least one unit failed; carries every outcome.
    """
    logger = logger or log
    scale = validate_scale(scale)
    resample = resample or settings.RESAMPLE
    quality = settings.JPEG_QUALITY if quality is None else quality
    if max_workers is None:
        max_workers = settings.MAX_WORKERS
    if cancel_event is None:
        cancel_event = threading.Event()

    ensure_dir(dst_dir)
    paths = find_images(src_dir)
    warn_collisions(paths, logger)
    logger.info("Processing %d image(s) with %d worker thread(s)", len(paths), max_workers)

    with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="resize") as pool:
        futures = [
            pool.submit(
                _run_unit,
                p,
                output_path_for(p, dst_dir),
                scale,
                resample,
                quality,
                cancel_event,
                logger,
            )
            for p in paths
        ]
        # Join on all units; a failure does not short-circuit
        wait(futures)

    outcomes = []
    for unit_id, (path, fut) in enumerate(zip(paths, futures)):
        exc = fut.exception()
        if exc is not None:
            outcome = ResizeOutcome(
                source=path,
                status=WorkStatus.FAILED,
                reason=f"{type(exc).__name__}: {exc}",
            )
            logger.error("Unit %d faulted on %s: %s", unit_id, path, outcome.reason)
        else:
            outcome = fut.result()
        logger.debug("Unit %d %s", unit_id, outcome.status.value)
        outcomes.append(outcome)

    if any(o.status is WorkStatus.FAILED for o in outcomes):
        raise BatchResizeError(outcomes)
    return outcomes


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """
    Parse command-line arguments.
    """
    parser = argparse.ArgumentParser(
        description="Batch resize images from a source tree into a flat destination directory."
    )
    parser.add_argument(
        "--src-dir", "-s", required=True, help="Directory searched (recursively) for images."
    )
    parser.add_argument(
        "--dst-dir", "-o", required=True, help="Directory for the resized JPEGs."
    )
    parser.add_argument(
        "--scale", type=float, default=settings.SCALE, help="Uniform scale factor."
    )
    parser.add_argument(
        "--mode",
        choices=["sequential", "concurrent", "compare"],
        default="concurrent",
        help="compare = clean + sequential run, clean + concurrent run, report timings.",
    )
    parser.add_argument(
        "--workers", type=int, default=settings.MAX_WORKERS, help="Thread pool size."
    )
    parser.add_argument(
        "--resample",
        choices=RESAMPLE_CHOICES,
        default=settings.RESAMPLE,
        help="Resampling filter.",
    )
    parser.add_argument(
        "--quality", type=int, default=settings.JPEG_QUALITY, help="JPEG quality."
    )
    parser.add_argument(
        "--clean",
        action="store_true",
        help="Delete every file under --dst-dir before resizing.",
    )
    parser.add_argument("--log-level", default=settings.LOG_LEVEL)
    return parser.parse_args(argv)


def run_sequential(args: argparse.Namespace) -> list[ResizeOutcome]:
    return resize_images(
        args.src_dir, args.dst_dir, args.scale, args.resample, args.quality
    )


def run_concurrent(args: argparse.Namespace) -> list[ResizeOutcome]:
    cancel_event = threading.Event()

    def _on_sigint(signum, frame):
        log.warning("Interrupted, canceling remaining images...")
        cancel_event.set()

    previous = signal.signal(signal.SIGINT, _on_sigint)
    try:
        return resize_images_concurrent(
            args.src_dir,
            args.dst_dir,
            args.scale,
            cancel_event=cancel_event,
            max_workers=args.workers,
            resample=args.resample,
            quality=args.quality,
        )
    finally:
        signal.signal(signal.SIGINT, previous)


def _timed(fn, args):
    start = time.perf_counter()
    result = fn(args)
    return result, time.perf_counter() - start


def main(argv: Optional[list[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.mode == "compare":
            clean(args.dst_dir)
            _, seq_s = _timed(run_sequential, args)
            clean(args.dst_dir)
            outcomes, con_s = _timed(run_concurrent, args)
            speedup = seq_s / con_s if con_s else 0.0
            log.info(
                "Sequential: %.0f ms | concurrent: %.0f ms | speedup %.2fx",
                seq_s * 1000,
                con_s * 1000,
                speedup,
            )
        else:
            if args.clean:
                clean(args.dst_dir)
            runner = run_sequential if args.mode == "sequential" else run_concurrent
            outcomes = runner(args)
    except BatchResizeError as e:
        for failure in e.failures:
            log.error("Failed: %s (%s)", failure.source, failure.reason)
        log.info("Summary: %s", summarize(e.outcomes))
        return 1
    except (OSError, ValueError) as e:
        # Sequential runs, a missing --src-dir and a bad --scale end up here
        log.error("Batch aborted: %s: %s", type(e).__name__, e)
        return 1

    log.info("Summary: %s", summarize(outcomes))
    return 0


if __name__ == "__main__":
    sys.exit(main())
