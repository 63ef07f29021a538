"""Clip job builder — validates a request and renders the ffmpeg argument vector."""

import math
from pathlib import Path

from webclip.config import ClipConfig
from webclip.errors import InvalidRangeError
from webclip.models import ClipJob, OutputSpec, TimeRange
from webclip.timecode import parse_time_input


def _positive(value: int | None) -> int | None:
    return value if value and value > 0 else None


def _even(value: float) -> int:
    return max(2, int(round(value / 2)) * 2)


def dimension_args(width: int | None, height: int | None) -> list[str]:
    """Return the ffmpeg scaling tokens for the requested size.

    Both given: exact size. One given: the other follows the source aspect
    ratio, rounded to an even pixel count (``-2``). Neither: no scaling.
    """
    width, height = _positive(width), _positive(height)
    if width and height:
        return ["-s", f"{width}x{height}"]
    if width:
        return ["-vf", f"scale={width}:-2"]
    if height:
        return ["-vf", f"scale=-2:{height}"]
    return []


def resolve_output_size(
    source_size: tuple[int, int] | None,
    width: int | None,
    height: int | None,
) -> tuple[int, int] | None:
    """Predict the encoded frame size; None when it depends on an unknown source."""
    width, height = _positive(width), _positive(height)
    if width and height:
        return (width, height)
    if source_size is None:
        return None

    src_w, src_h = source_size
    if width:
        return (width, _even(src_h * width / src_w))
    if height:
        return (_even(src_w * height / src_h), height)
    return (src_w, src_h)


def _format_seconds(value: float) -> str:
    text = f"{value:.6f}".rstrip("0").rstrip(".")
    return text or "0"


def build_clip_job(
    source: Path,
    start_text: str | None,
    end_text: str | None,
    width: int | None,
    height: int | None,
    quality: str | None,
    destination: Path,
    config: ClipConfig,
    source_size: tuple[int, int] | None = None,
) -> ClipJob:
    """Validate the time range and resolve size/quality into a ClipJob.

    Raises InvalidRangeError when either time is negative or not finite, or
    when the end time is not after the start time.
    """
    start = parse_time_input(start_text)
    end = parse_time_input(end_text)
    if not (math.isfinite(start) and math.isfinite(end)):
        raise InvalidRangeError("Start and end times must be finite numbers")
    if start < 0:
        raise InvalidRangeError("Start time cannot be negative")

    time_range = TimeRange(start=start, end=end)
    if time_range.duration <= 0:
        raise InvalidRangeError("End time must be greater than start time")

    tier, preset = config.preset_for(quality)
    width, height = _positive(width), _positive(height)

    return ClipJob(
        source=Path(source),
        time_range=time_range,
        output=OutputSpec(width=width, height=height, quality=tier),
        preset=preset,
        dimension_args=dimension_args(width, height),
        destination=Path(destination),
        output_size=resolve_output_size(source_size, width, height),
    )


def build_ffmpeg_args(job: ClipJob, ffmpeg_bin: str = "ffmpeg") -> list[str]:
    """Render the extraction command as discrete tokens (never a shell string)."""
    return [
        ffmpeg_bin, "-y",
        "-ss", _format_seconds(job.time_range.start),
        "-i", str(job.source),
        "-t", _format_seconds(job.duration),
        *job.dimension_args,
        "-crf", str(job.preset.crf),
        "-preset", job.preset.preset,
        "-c:v", "libx264",
        "-profile:v", "main",
        "-level", "3.1",
        "-pix_fmt", "yuv420p",
        "-movflags", "+faststart",
        "-an",
        str(job.destination),
    ]
