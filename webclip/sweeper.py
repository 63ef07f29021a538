"""Retention sweeper — best-effort deletion of managed files past their age limit."""

import logging
import random
import time
from pathlib import Path
from typing import Iterable

from webclip.config import ClipConfig
from webclip.models import SweepResult

logger = logging.getLogger(__name__)


def sweep(
    directories: Iterable[Path],
    max_age: float,
    max_files: int | None,
    now: float | None = None,
    rng: random.Random | None = None,
) -> SweepResult:
    """Delete files older than *max_age* seconds from *directories*.

    Entries are shuffled per directory, and at most *max_files* plain files
    are evaluated across all directories (``None`` means no budget). Failures
    to stat or unlink are swallowed; only aggregate counts are returned.
    No locking is done against concurrent writers or sweeps.
    """
    now = time.time() if now is None else now
    rng = rng or random.Random()
    result = SweepResult()

    for directory in directories:
        directory = Path(directory)
        if not directory.is_dir():
            continue

        try:
            entries = list(directory.iterdir())
        except OSError as e:
            logger.debug("Could not list %s: %s", directory, e)
            continue
        rng.shuffle(entries)

        for entry in entries:
            if max_files is not None and result.processed >= max_files:
                return result
            if entry.is_dir():
                continue

            result.processed += 1
            try:
                age = now - entry.stat().st_mtime
                if age > max_age:
                    entry.unlink()
                    result.deleted += 1
            except OSError as e:
                logger.debug("Could not remove %s: %s", entry, e)

    return result


def sweep_storage(config: ClipConfig, unbounded: bool = False) -> SweepResult:
    """Sweep the uploads, clips and thumbnails directories.

    The configured per-run budget applies unless *unbounded* is set.
    """
    budget = None if unbounded else config.sweep_max_files
    result = sweep(config.managed_dirs, config.retention_seconds, budget)
    if result.deleted:
        logger.info(
            "Retention sweep processed %d files, deleted %d",
            result.processed,
            result.deleted,
        )
    return result
