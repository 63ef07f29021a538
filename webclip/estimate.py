"""Rough output-size estimate, for display only."""

from typing import Mapping

from webclip.config import QUALITY_PRESETS, QualityPreset

ASSUMED_FPS = 30
COMPRESSION_FACTOR = 0.005


def estimate_bytes(
    duration: float,
    width: int,
    height: int,
    quality: str,
    presets: Mapping[str, QualityPreset] = QUALITY_PRESETS,
) -> float:
    preset = presets.get(quality)
    multiplier = preset.size_multiplier if preset else 1.0
    bitrate = width * height * ASSUMED_FPS * COMPRESSION_FACTOR * multiplier
    return bitrate * duration / 8


def format_size(size_bytes: float) -> str:
    """Render bytes as KB below 1 MiB and as MB from 1 MiB up."""
    if size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.1f} KB"
    return f"{size_bytes / (1024 * 1024):.1f} MB"


def estimate_file_size(
    duration: float,
    width: int,
    height: int,
    quality: str,
    presets: Mapping[str, QualityPreset] = QUALITY_PRESETS,
) -> str:
    """Estimate the encoded clip size from pixel count, duration and tier."""
    return format_size(estimate_bytes(duration, width, height, quality, presets))
