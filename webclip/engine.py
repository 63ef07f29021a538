"""Orchestrator — runs one clip request from source file to encoded clip."""

import dataclasses
import logging
from pathlib import Path
from typing import Callable

from webclip import ffutil, storage
from webclip.builder import build_clip_job
from webclip.config import ClipConfig
from webclip.errors import ClipError, InvalidInputError
from webclip.estimate import estimate_file_size
from webclip.models import (
    ClipFailure,
    ClipJob,
    ClipRequest,
    ClipResult,
    ClipSuccess,
)

logger = logging.getLogger(__name__)


def _failure(error: ClipError) -> ClipFailure:
    logger.warning("Clip request failed (%s): %s", error.code.value, error)
    return ClipFailure(reason=error.code, message=str(error))


def run_job(job: ClipJob, config: ClipConfig, preflight: bool = True) -> ClipResult:
    """Run the extraction once, optionally after the tool preflight.

    Never raises ClipError; failures come back as ClipFailure.
    """
    try:
        if preflight:
            ffutil.check_ffmpeg(config)
        output_path = ffutil.extract_clip(job, config)
    except ClipError as e:
        return _failure(e)

    return ClipSuccess(
        output_path=output_path,
        start=job.time_range.start,
        end=job.time_range.end,
        duration=job.duration,
    )


def process(
    source: Path,
    request: ClipRequest,
    config: ClipConfig,
    on_progress: Callable[[str, float], None] | None = None,
) -> ClipResult:
    """Execute the full clip pipeline for an already-stored source video.

    Args:
        source: Path to the uploaded MP4.
        request: Time range, size and quality as submitted.
        config: Application configuration.
        on_progress: Optional callback(stage_name, fraction_complete).
    """

    def _progress(stage: str, frac: float) -> None:
        if on_progress:
            on_progress(stage, frac)

    try:
        if not Path(source).is_file():
            raise InvalidInputError("The selected video file no longer exists")

        ffutil.check_ffmpeg(config)

        _progress("Probing video metadata", 0.0)
        info = ffutil.probe(source, config)

        # No end time means "to the end of the video"
        end_time = request.end_time
        if not end_time or end_time.strip() == "0":
            end_time = str(info.duration)

        storage.ensure_directories(config)
        job = build_clip_job(
            source,
            request.start_time,
            end_time,
            request.width,
            request.height,
            request.quality,
            storage.clip_path(config),
            config,
            source_size=(info.width, info.height),
        )
    except ClipError as e:
        return _failure(e)

    out_w, out_h = job.output_size or (info.width, info.height)
    estimated_size = estimate_file_size(
        job.duration, out_w, out_h, job.output.quality, config.quality_presets
    )

    _progress(f"Encoding {job.duration:.2f}s at {job.output.quality} quality", 0.1)
    result = run_job(job, config, preflight=False)
    if not result.success:
        return result

    _progress("Done", 1.0)
    logger.info("Clip written to %s", result.output_path)
    return dataclasses.replace(result, estimated_size=estimated_size, video_info=info)
