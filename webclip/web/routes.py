"""Web UI routes for webclip."""

import logging

from flask import (
    Blueprint,
    current_app,
    g,
    jsonify,
    render_template,
    request,
    send_from_directory,
)
from werkzeug.exceptions import ClientDisconnected, RequestEntityTooLarge

from webclip import engine, storage
from webclip.config import ClipConfig
from webclip.errors import (
    ClipError,
    ErrorCode,
    InvalidInputError,
    UploadTransportError,
)
from webclip.models import ClipFailure, ClipRequest, ClipResult, ClipSuccess
from webclip.sweeper import sweep_storage
from webclip.timecode import format_time

logger = logging.getLogger(__name__)

bp = Blueprint("web", __name__, template_folder="templates")

_STATUS_BY_REASON = {
    ErrorCode.INVALID_INPUT: 400,
    ErrorCode.INVALID_RANGE: 400,
    ErrorCode.UPLOAD_TRANSPORT: 400,
    ErrorCode.METADATA_UNAVAILABLE: 422,
    ErrorCode.ENCODE_FAILED: 422,
    ErrorCode.TOOL_UNAVAILABLE: 503,
}

TOO_LARGE_MESSAGE = "The uploaded file exceeds the maximum file size limit"


def _config() -> ClipConfig:
    return current_app.config["CLIP_CONFIG"]


def _form_int(name: str) -> int | None:
    try:
        value = int(request.form.get(name, ""))
    except ValueError:
        return None
    return value if value > 0 else None


def _clip_request() -> ClipRequest:
    form = request.form
    return ClipRequest(
        start_time=form.get("start_time", "0"),
        end_time=form.get("end_time", "0"),
        width=_form_int("width"),
        height=_form_int("height"),
        quality=form.get("quality") or "medium",
    )


def _handle_clip_form(config: ClipConfig) -> tuple[ClipResult, str | None]:
    """Resolve the source video, run the pipeline, and return (result, kept upload name)."""
    source = None
    try:
        source = storage.resolve_kept_upload(request.form.get("keep_video"), config)
        if source is None:
            try:
                upload = request.files.get("video")
            except ClientDisconnected as e:
                raise UploadTransportError("The file was only partially uploaded") from e
            if upload is None or not upload.filename:
                raise InvalidInputError("Please select a video file to upload")
            source = storage.save_upload(upload, config)
    except ClipError as e:
        logger.warning("Rejected upload: %s", e)
        return ClipFailure(reason=e.code, message=str(e)), None

    return engine.process(source, _clip_request(), config), source.name


def _render_page(
    result: ClipResult | None = None,
    keep_video: str | None = None,
    status: int = 200,
    form=None,
):
    config = _config()
    return render_template(
        "index.html",
        result=result,
        keep_video=keep_video,
        clip_name=result.output_path.name if isinstance(result, ClipSuccess) else None,
        cleanup=g.get("cleanup"),
        form=request.form if form is None else form,
        qualities=list(config.quality_presets),
        max_upload_mb=round(config.max_upload_bytes / (1024 * 1024), 2),
        retention_minutes=round(config.retention_seconds / 60),
        format_time=format_time,
    ), status


@bp.before_request
def run_retention_sweep():
    g.cleanup = sweep_storage(_config())


@bp.route("/", methods=["GET"])
def index():
    return _render_page()


@bp.route("/", methods=["POST"])
def clip_form():
    result, keep_video = _handle_clip_form(_config())
    return _render_page(result, keep_video)


@bp.route("/api/clip", methods=["POST"])
def clip_api():
    result, keep_video = _handle_clip_form(_config())

    payload = result.to_dict()
    payload["keep_video"] = keep_video
    if isinstance(result, ClipSuccess):
        payload["download_url"] = f"/clips/{result.output_path.name}"
        return jsonify(payload)
    return jsonify(payload), _STATUS_BY_REASON.get(result.reason, 400)


@bp.route("/uploads/<path:name>")
def uploaded_file(name: str):
    return send_from_directory(_config().upload_dir, name)


@bp.route("/clips/<path:name>")
def clip_file(name: str):
    return send_from_directory(_config().clip_dir, name)


@bp.app_errorhandler(RequestEntityTooLarge)
def request_entity_too_large(error):
    failure = ClipFailure(reason=ErrorCode.INVALID_INPUT, message=TOO_LARGE_MESSAGE)
    if request.path.startswith("/api/"):
        return jsonify(failure.to_dict()), 413
    # The oversized body cannot be parsed again, so render with an empty form
    return _render_page(failure, status=413, form={})
