"""Error taxonomy for the clip pipeline.

Every failure the request path can report derives from ClipError and carries
an ErrorCode, so the request boundary can turn it into a single message.
"""

from enum import Enum


class ErrorCode(str, Enum):
    TOOL_UNAVAILABLE = "tool_unavailable"
    INVALID_INPUT = "invalid_input"
    INVALID_RANGE = "invalid_range"
    METADATA_UNAVAILABLE = "metadata_unavailable"
    ENCODE_FAILED = "encode_failed"
    UPLOAD_TRANSPORT = "upload_transport"


class ClipError(Exception):
    """Base exception for all clip-related failures."""

    code: ErrorCode = ErrorCode.INVALID_INPUT


class ToolUnavailableError(ClipError):
    """Raised when ffmpeg/ffprobe cannot be found or executed."""

    code = ErrorCode.TOOL_UNAVAILABLE


class InvalidInputError(ClipError):
    """Bad MIME type, oversized upload or missing source file."""

    code = ErrorCode.INVALID_INPUT


class InvalidRangeError(ClipError):
    code = ErrorCode.INVALID_RANGE


class MetadataUnavailableError(ClipError):
    """Raised when ffprobe fails or returns nothing usable."""

    code = ErrorCode.METADATA_UNAVAILABLE


class EncodeFailedError(ClipError):
    """Raised when the extraction run exits non-zero or times out."""

    code = ErrorCode.ENCODE_FAILED


class UploadTransportError(ClipError):
    code = ErrorCode.UPLOAD_TRANSPORT
