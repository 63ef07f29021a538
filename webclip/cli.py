"""Thin CLI entry point — serve the web UI, clip a local file, or sweep storage."""

import argparse
import logging
import sys
from pathlib import Path

from webclip.config import ClipConfig, load_config
from webclip.engine import process
from webclip.models import ClipRequest
from webclip.sweeper import sweep_storage
from webclip.timecode import format_time


def _load(args: argparse.Namespace) -> ClipConfig:
    if args.config:
        return load_config(args.config)
    return ClipConfig.from_base_dir(args.data_dir)


def main() -> None:
    parser = argparse.ArgumentParser(
        prog="webclip",
        description="WebClip — cut web-optimized MP4 clips with ffmpeg.",
    )
    parser.add_argument("--config", "-c", type=Path, help="Path to a JSON config file")
    parser.add_argument("--data-dir", type=Path, default=Path.cwd(), help="Base directory for uploads/clips/thumbnails")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command")

    serve = sub.add_parser("serve", help="Launch the web UI")
    serve.add_argument("--port", type=int, default=8321, help="Port to listen on")
    serve.add_argument("--host", type=str, default="127.0.0.1", help="Host to bind to")

    clip = sub.add_parser("clip", help="Cut a clip from a local MP4 file")
    clip.add_argument("video", type=Path, help="Input video file")
    clip.add_argument("--start", default="0", help="Start timecode (H:MM:SS, MM:SS or seconds)")
    clip.add_argument("--end", default="0", help="End timecode; 0 means end of video")
    clip.add_argument("--width", type=int, help="Output width in pixels")
    clip.add_argument("--height", type=int, help="Output height in pixels")
    clip.add_argument("--quality", default="medium", help="lowest, low, medium, high or highest")

    sweep = sub.add_parser("sweep", help="Delete managed files past the retention window")
    sweep.add_argument("--limited", action="store_true", help="Apply the per-request file budget")

    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    config = _load(args)

    if args.command == "serve":
        from webclip.web import create_app
        app = create_app(config)
        print(f"WebClip web UI: http://{args.host}:{args.port}")
        app.run(host=args.host, port=args.port, debug=False)
        return

    if args.command == "sweep":
        result = sweep_storage(config, unbounded=not args.limited)
        print(f"Processed {result.processed} files, deleted {result.deleted} old files.")
        return

    request = ClipRequest(
        start_time=args.start,
        end_time=args.end,
        width=args.width,
        height=args.height,
        quality=args.quality,
    )

    def on_progress(stage: str, frac: float) -> None:
        print(f"  [{frac:3.0%}] {stage}")

    result = process(args.video, request, config, on_progress=on_progress)

    if not result.success:
        print(f"Error: {result.message}", file=sys.stderr)
        sys.exit(1)

    print()
    print(f"Done! Output: {result.output_path}")
    print(f"  Range: {format_time(result.start)} -> {format_time(result.end)} ({result.duration:.2f}s)")
    print(f"  Estimated size: {result.estimated_size}")
