#!/usr/bin/env python3
"""Generate a synthetic test video for WebClip end-to-end testing.

Produces a 10-second 1920x1080 H.264 MP4 at 30 fps with a 440 Hz AAC tone,
so tests can check that clips come out at full size with the audio stripped.
"""

import subprocess
import sys
from pathlib import Path


def generate_test_video(
    output: Path,
    duration: float = 10.0,
    size: str = "1920x1080",
) -> Path:
    output.parent.mkdir(parents=True, exist_ok=True)

    cmd = [
        "ffmpeg", "-y",
        "-f", "lavfi", "-i", f"testsrc=size={size}:rate=30:duration={duration}",
        "-f", "lavfi", "-i", f"sine=frequency=440:duration={duration}",
        "-c:v", "libx264",
        "-preset", "ultrafast",
        "-pix_fmt", "yuv420p",
        "-c:a", "aac",
        "-shortest",
        str(output),
    ]
    subprocess.run(cmd, capture_output=True, check=True)
    return output


if __name__ == "__main__":
    out = Path(sys.argv[1]) if len(sys.argv) > 1 else Path("tests/fixtures/synthetic.mp4")
    generate_test_video(out)
    print(f"Generated: {out}")
