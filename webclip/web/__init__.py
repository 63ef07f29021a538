"""Flask application factory for the webclip web UI."""

import tempfile
from pathlib import Path

from flask import Flask

from webclip.config import ClipConfig
from webclip.storage import ensure_directories

# Headroom for the non-file form fields on top of the video itself
FORM_OVERHEAD_BYTES = 1024 * 1024


def create_app(config: ClipConfig | None = None) -> Flask:
    app = Flask(__name__)
    if config is None:
        config = ClipConfig.from_base_dir(Path(tempfile.mkdtemp(prefix="webclip_")))
    ensure_directories(config)

    app.config["CLIP_CONFIG"] = config
    app.config["MAX_CONTENT_LENGTH"] = config.max_upload_bytes + FORM_OVERHEAD_BYTES

    from webclip.web.routes import bp
    app.register_blueprint(bp)

    return app
