"""FFmpeg/ffprobe subprocess helpers."""

import json
import logging
import shlex
import shutil
import subprocess
from pathlib import Path

from webclip.builder import build_ffmpeg_args
from webclip.config import ClipConfig
from webclip.errors import (
    EncodeFailedError,
    MetadataUnavailableError,
    ToolUnavailableError,
)
from webclip.models import ClipJob, VideoInfo

logger = logging.getLogger(__name__)


def check_ffmpeg(config: ClipConfig) -> None:
    """Raise ToolUnavailableError unless ffmpeg and ffprobe answer a version probe."""
    for cmd in (config.ffmpeg_bin, config.ffprobe_bin):
        if shutil.which(cmd) is None:
            logger.warning("%s not found on PATH", cmd)
            raise ToolUnavailableError("FFmpeg is not installed or accessible")
        try:
            result = subprocess.run([cmd, "-version"], capture_output=True, text=True)
        except OSError as e:
            raise ToolUnavailableError("FFmpeg is not installed or accessible") from e
        if result.returncode != 0:
            logger.warning("%s -version exited with rc=%d", cmd, result.returncode)
            raise ToolUnavailableError("FFmpeg is not installed or accessible")


def _optional_int(value) -> int | None:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def probe(input_path: Path, config: ClipConfig) -> VideoInfo:
    """Extract duration, dimensions, codec and bitrate in one ffprobe call."""
    cmd = [
        config.ffprobe_bin,
        "-v", "error",
        "-print_format", "json",
        "-show_format",
        "-show_streams",
        "-select_streams", "v:0",
        str(input_path),
    ]
    logger.debug("Running %s", shlex.join(cmd))
    result = subprocess.run(cmd, capture_output=True, text=True)

    if result.returncode != 0 or not result.stdout.strip():
        logger.warning("ffprobe failed for %s: %s", input_path, result.stderr.strip())
        raise MetadataUnavailableError("Failed to get video duration")

    try:
        data = json.loads(result.stdout)
        duration = float(data["format"]["duration"])
    except (ValueError, KeyError, TypeError) as e:
        raise MetadataUnavailableError("Failed to get video duration") from e

    video_stream = next(
        (s for s in data.get("streams", []) if s.get("codec_type", "video") == "video"), None
    )
    width = _optional_int(video_stream.get("width")) if video_stream else None
    height = _optional_int(video_stream.get("height")) if video_stream else None
    if not width or not height:
        raise MetadataUnavailableError("Failed to get video dimensions")

    return VideoInfo(
        filename=Path(input_path).name,
        duration=duration,
        width=width,
        height=height,
        codec=video_stream.get("codec_name") or None,
        bitrate=_optional_int(video_stream.get("bit_rate")),
    )


def extract_clip(job: ClipJob, config: ClipConfig) -> Path:
    """Run the single extraction pass; ffmpeg's diagnostics surface verbatim on failure."""
    cmd = build_ffmpeg_args(job, config.ffmpeg_bin)
    logger.debug("Running %s", shlex.join(cmd))
    try:
        result = subprocess.run(
            cmd, capture_output=True, text=True, timeout=config.ffmpeg_timeout
        )
    except subprocess.TimeoutExpired as e:
        raise EncodeFailedError(
            f"Failed to generate clip: ffmpeg timed out after {e.timeout:g}s"
        ) from e

    if result.returncode != 0:
        output = "\n".join(part for part in (result.stdout, result.stderr) if part)
        logger.warning("ffmpeg exited with rc=%d for %s", result.returncode, job.source)
        raise EncodeFailedError(f"Failed to generate clip: {output.strip()}")

    return job.destination


def list_streams(input_path: Path, config: ClipConfig) -> list[str]:
    """Return the codec_type of every stream in a file (e.g. ["video"])."""
    cmd = [
        config.ffprobe_bin,
        "-v", "error",
        "-print_format", "json",
        "-show_streams",
        str(input_path),
    ]
    result = subprocess.run(cmd, capture_output=True, text=True, check=True)
    data = json.loads(result.stdout)
    return [s["codec_type"] for s in data.get("streams", [])]
