"""Shared data types used across webclip."""

from dataclasses import asdict, dataclass, field
from pathlib import Path

from webclip.config import QualityPreset
from webclip.errors import ErrorCode


@dataclass
class TimeRange:
    """A start/end time pair in seconds."""

    start: float
    end: float

    @property
    def duration(self) -> float:
        return self.end - self.start


@dataclass
class OutputSpec:
    """Requested output dimensions and quality tier."""

    width: int | None = None
    height: int | None = None
    quality: str = "medium"


@dataclass
class VideoInfo:
    """Metadata extracted from a source video via ffprobe."""

    filename: str
    duration: float
    width: int
    height: int
    codec: str | None = None
    bitrate: int | None = None

    @property
    def bitrate_label(self) -> str:
        if not self.bitrate:
            return "Unknown"
        return f"{round(self.bitrate / 1000)} kbps"

    @property
    def codec_label(self) -> str:
        return self.codec or "Unknown"

    def to_dict(self) -> dict:
        return {
            "filename": self.filename,
            "duration": self.duration,
            "width": self.width,
            "height": self.height,
            "codec": self.codec_label,
            "bitrate": self.bitrate_label,
        }


@dataclass
class ClipJob:
    """One clip extraction: where to read, what to cut, how to encode."""

    source: Path
    time_range: TimeRange
    output: OutputSpec
    preset: QualityPreset
    dimension_args: list[str]
    destination: Path
    output_size: tuple[int, int] | None = None

    @property
    def duration(self) -> float:
        return self.time_range.duration


@dataclass
class ClipSuccess:
    output_path: Path
    start: float
    end: float
    duration: float
    estimated_size: str | None = None
    video_info: VideoInfo | None = None
    success: bool = field(default=True, init=False)

    def to_dict(self) -> dict:
        return {
            "success": True,
            "output_path": str(self.output_path),
            "start": self.start,
            "end": self.end,
            "duration": self.duration,
            "estimated_size": self.estimated_size,
            "video_info": self.video_info.to_dict() if self.video_info else None,
        }


@dataclass
class ClipFailure:
    reason: ErrorCode
    message: str
    success: bool = field(default=False, init=False)

    def to_dict(self) -> dict:
        return {"success": False, "reason": self.reason.value, "message": self.message}


ClipResult = ClipSuccess | ClipFailure


@dataclass
class SweepResult:
    """Aggregate counts from one retention sweep."""

    processed: int = 0
    deleted: int = 0

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class ClipRequest:
    """Raw clip parameters as submitted by a user."""

    start_time: str = "0"
    end_time: str = "0"
    width: int | None = None
    height: int | None = None
    quality: str = "medium"
