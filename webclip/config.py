"""Application configuration — quality presets, storage layout and policy limits."""

import json
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Mapping


@dataclass(frozen=True)
class QualityPreset:
    """Encoder settings for one quality tier."""

    crf: int
    preset: str
    size_multiplier: float


DEFAULT_QUALITY = "medium"

QUALITY_PRESETS: Mapping[str, QualityPreset] = MappingProxyType({
    "lowest": QualityPreset(crf=32, preset="ultrafast", size_multiplier=0.2),
    "low": QualityPreset(crf=28, preset="faster", size_multiplier=0.4),
    "medium": QualityPreset(crf=23, preset="medium", size_multiplier=1.0),
    "high": QualityPreset(crf=18, preset="slow", size_multiplier=1.5),
    "highest": QualityPreset(crf=14, preset="veryslow", size_multiplier=2.5),
})


@dataclass(frozen=True)
class ClipConfig:
    """Immutable settings shared by the builder, invoker, sweeper and web app."""

    upload_dir: Path
    clip_dir: Path
    thumbnail_dir: Path
    quality_presets: Mapping[str, QualityPreset] = field(default_factory=lambda: QUALITY_PRESETS)
    retention_seconds: float = 10 * 60
    sweep_max_files: int = 20
    max_upload_bytes: int = 500 * 1024 * 1024
    ffmpeg_bin: str = "ffmpeg"
    ffprobe_bin: str = "ffprobe"
    ffmpeg_timeout: float | None = None

    @classmethod
    def from_base_dir(cls, base_dir: str | Path, **overrides) -> "ClipConfig":
        """Lay out uploads/, clips/ and thumbnails/ as siblings under *base_dir*."""
        base = Path(base_dir)
        return cls(
            upload_dir=base / "uploads",
            clip_dir=base / "clips",
            thumbnail_dir=base / "thumbnails",
            **overrides,
        )

    @property
    def managed_dirs(self) -> tuple[Path, Path, Path]:
        return (self.upload_dir, self.clip_dir, self.thumbnail_dir)

    def preset_for(self, quality: str | None) -> tuple[str, QualityPreset]:
        """Resolve a tier name, falling back to medium for unknown tiers."""
        if quality not in self.quality_presets:
            quality = DEFAULT_QUALITY
        return quality, self.quality_presets[quality]


_SCALAR_KEYS = {
    "retention_seconds": float,
    "sweep_max_files": int,
    "max_upload_bytes": int,
    "ffmpeg_bin": str,
    "ffprobe_bin": str,
}


def load_config(path: str | Path) -> ClipConfig:
    """Load and validate a configuration from a JSON file.

    ``base_dir`` is required; relative paths resolve against the file's
    directory. ``quality_presets`` entries override or extend the defaults.
    """
    path = Path(path)
    data = json.loads(path.read_text())

    if "base_dir" not in data:
        raise ValueError("Config must contain a 'base_dir' field")

    unknown = set(data) - set(_SCALAR_KEYS) - {"base_dir", "quality_presets", "ffmpeg_timeout"}
    if unknown:
        raise ValueError(f"Unknown config keys: {', '.join(sorted(unknown))}")

    base_dir = Path(data["base_dir"])
    if not base_dir.is_absolute():
        base_dir = path.parent / base_dir

    overrides = {key: cast(data[key]) for key, cast in _SCALAR_KEYS.items() if key in data}

    if data.get("ffmpeg_timeout") is not None:
        overrides["ffmpeg_timeout"] = float(data["ffmpeg_timeout"])

    if "quality_presets" in data:
        presets = dict(QUALITY_PRESETS)
        for name, values in data["quality_presets"].items():
            presets[name] = QualityPreset(**values)
        overrides["quality_presets"] = MappingProxyType(presets)

    return ClipConfig.from_base_dir(base_dir, **overrides)
