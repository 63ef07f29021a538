"""WebClip — browser-driven MP4 clip extraction on top of ffmpeg."""

__version__ = "0.1.0"
