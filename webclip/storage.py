"""Storage layout — managed directories, file naming and upload saving."""

import logging
import random
import re
import time
from pathlib import Path

from werkzeug.datastructures import FileStorage

from webclip.config import ClipConfig
from webclip.errors import InvalidInputError, UploadTransportError

logger = logging.getLogger(__name__)

DIR_MODE = 0o755
ACCEPTED_MIME = "video/mp4"

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9_.-]")


def ensure_directories(config: ClipConfig) -> None:
    for directory in config.managed_dirs:
        directory.mkdir(mode=DIR_MODE, parents=True, exist_ok=True)


def unique_id() -> str:
    """Timestamp plus a random four-digit suffix, e.g. ``1718000000_4821``."""
    return f"{int(time.time())}_{random.randint(1000, 9999)}"


def sanitize_filename(name: str) -> str:
    return _UNSAFE_CHARS.sub("", name)


def upload_filename(original_name: str, uid: str | None = None) -> str:
    return f"{uid or unique_id()}_{sanitize_filename(original_name)}"


def clip_path(config: ClipConfig, uid: str | None = None) -> Path:
    return config.clip_dir / f"clip_{uid or unique_id()}.mp4"


def _stream_size(upload: FileStorage) -> int:
    stream = upload.stream
    try:
        pos = stream.tell()
        stream.seek(0, 2)
        size = stream.tell()
        stream.seek(pos)
    except (AttributeError, OSError):
        return upload.content_length or 0
    return size


def save_upload(upload: FileStorage, config: ClipConfig) -> Path:
    """Validate and store an uploaded MP4 under the uploads directory.

    Raises InvalidInputError for a wrong MIME type or an oversized file, and
    UploadTransportError when the bytes cannot be received or written.
    """
    if ACCEPTED_MIME not in (upload.mimetype or upload.content_type or ""):
        raise InvalidInputError("Please upload an MP4 video file")

    max_mb = config.max_upload_bytes // (1024 * 1024)
    if _stream_size(upload) > config.max_upload_bytes:
        raise InvalidInputError(f"File size exceeds the limit ({max_mb}MB)")

    try:
        ensure_directories(config)
    except OSError as e:
        logger.warning("Could not create storage directories: %s", e)
        raise UploadTransportError("Missing a temporary folder") from e

    destination = config.upload_dir / upload_filename(upload.filename or "video.mp4")
    try:
        upload.save(destination)
    except FileNotFoundError as e:
        raise UploadTransportError("Missing a temporary folder") from e
    except OSError as e:
        logger.warning("Failed to write upload %s: %s", destination, e)
        raise UploadTransportError("Failed to write file to disk") from e

    logger.info("Stored upload %s", destination.name)
    return destination


def resolve_kept_upload(value: str | None, config: ClipConfig) -> Path | None:
    """Map a ``keep_video`` form value to a file inside the uploads directory.

    Only the final path component is honored, so the value cannot point
    outside the managed directory.
    """
    if not value:
        return None
    name = Path(value).name
    if not name or name in (".", ".."):
        return None
    candidate = config.upload_dir / name
    return candidate if candidate.is_file() else None
