"""Unit tests for ffutil — probing, preflight and the extraction subprocess."""

import json
import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from webclip.builder import build_clip_job
from webclip.errors import (
    EncodeFailedError,
    MetadataUnavailableError,
    ToolUnavailableError,
)
from webclip.ffutil import check_ffmpeg, extract_clip, list_streams, probe

PROBE_JSON = {
    "format": {"duration": "10.000000", "bit_rate": "2100000"},
    "streams": [
        {
            "codec_type": "video",
            "codec_name": "h264",
            "width": 1920,
            "height": 1080,
            "bit_rate": "2000000",
        },
    ],
}


def _job(config, tmp_path: Path):
    return build_clip_job(
        tmp_path / "in.mp4", "2", "5", None, None, "low", tmp_path / "out.mp4", config
    )


# ---------------------------------------------------------------------------
# check_ffmpeg
# ---------------------------------------------------------------------------

class TestCheckFfmpeg:
    @patch("webclip.ffutil.subprocess.run")
    @patch("webclip.ffutil.shutil.which", return_value="/usr/bin/ffmpeg")
    def test_available(self, mock_which, mock_run, config):
        mock_run.return_value = MagicMock(returncode=0)
        check_ffmpeg(config)
        cmds = [c.args[0] for c in mock_run.call_args_list]
        assert cmds == [["ffmpeg", "-version"], ["ffprobe", "-version"]]

    @patch("webclip.ffutil.shutil.which", return_value=None)
    def test_not_on_path(self, mock_which, config):
        with pytest.raises(ToolUnavailableError, match="not installed or accessible"):
            check_ffmpeg(config)

    @patch("webclip.ffutil.subprocess.run")
    @patch("webclip.ffutil.shutil.which", return_value="/usr/bin/ffmpeg")
    def test_version_probe_fails(self, mock_which, mock_run, config):
        mock_run.return_value = MagicMock(returncode=1)
        with pytest.raises(ToolUnavailableError):
            check_ffmpeg(config)

    @patch("webclip.ffutil.subprocess.run", side_effect=PermissionError("denied"))
    @patch("webclip.ffutil.shutil.which", return_value="/usr/bin/ffmpeg")
    def test_not_executable(self, mock_which, mock_run, config):
        with pytest.raises(ToolUnavailableError):
            check_ffmpeg(config)


# ---------------------------------------------------------------------------
# probe (mocked subprocess)
# ---------------------------------------------------------------------------

class TestProbe:
    @patch("webclip.ffutil.subprocess.run")
    def test_basic(self, mock_run, config):
        mock_run.return_value = MagicMock(returncode=0, stdout=json.dumps(PROBE_JSON), stderr="")
        info = probe(Path("/data/uploads/video.mp4"), config)
        assert info.filename == "video.mp4"
        assert info.duration == 10.0
        assert (info.width, info.height) == (1920, 1080)
        assert info.codec == "h264"
        assert info.bitrate_label == "2000 kbps"

        mock_run.assert_called_once()
        cmd = mock_run.call_args[0][0]
        assert cmd[0] == "ffprobe"
        assert "-show_format" in cmd and "-show_streams" in cmd

    @patch("webclip.ffutil.subprocess.run")
    def test_missing_bitrate_and_codec(self, mock_run, config):
        data = {
            "format": {"duration": "4.5"},
            "streams": [{"codec_type": "video", "width": 640, "height": 360}],
        }
        mock_run.return_value = MagicMock(returncode=0, stdout=json.dumps(data), stderr="")
        info = probe(Path("video.mp4"), config)
        assert info.bitrate_label == "Unknown"
        assert info.codec_label == "Unknown"

    @patch("webclip.ffutil.subprocess.run")
    def test_nonzero_exit(self, mock_run, config):
        mock_run.return_value = MagicMock(returncode=1, stdout="", stderr="Invalid data found")
        with pytest.raises(MetadataUnavailableError, match="duration"):
            probe(Path("video.mp4"), config)

    @patch("webclip.ffutil.subprocess.run")
    def test_empty_duration(self, mock_run, config):
        data = {"format": {}, "streams": PROBE_JSON["streams"]}
        mock_run.return_value = MagicMock(returncode=0, stdout=json.dumps(data), stderr="")
        with pytest.raises(MetadataUnavailableError, match="duration"):
            probe(Path("video.mp4"), config)

    @patch("webclip.ffutil.subprocess.run")
    def test_no_video_stream(self, mock_run, config):
        data = {"format": {"duration": "60.0"}, "streams": []}
        mock_run.return_value = MagicMock(returncode=0, stdout=json.dumps(data), stderr="")
        with pytest.raises(MetadataUnavailableError, match="dimensions"):
            probe(Path("video.mp4"), config)


# ---------------------------------------------------------------------------
# extract_clip (mocked subprocess — verify the command and failure mapping)
# ---------------------------------------------------------------------------

class TestExtractClip:
    @patch("webclip.ffutil.subprocess.run")
    def test_runs_once_without_shell(self, mock_run, config, tmp_path):
        mock_run.return_value = MagicMock(returncode=0, stdout="", stderr="")
        job = _job(config, tmp_path)
        assert extract_clip(job, config) == job.destination

        mock_run.assert_called_once()
        args, kwargs = mock_run.call_args
        assert isinstance(args[0], list)
        assert "shell" not in kwargs
        assert kwargs["timeout"] is None
        assert "-an" in args[0]

    @patch("webclip.ffutil.subprocess.run")
    def test_failure_surfaces_diagnostics(self, mock_run, config, tmp_path):
        mock_run.return_value = MagicMock(
            returncode=1, stdout="", stderr="in.mp4: No such file or directory\n"
        )
        with pytest.raises(EncodeFailedError) as exc:
            extract_clip(_job(config, tmp_path), config)
        assert str(exc.value) == "Failed to generate clip: in.mp4: No such file or directory"
        mock_run.assert_called_once()

    @patch("webclip.ffutil.subprocess.run")
    def test_timeout(self, mock_run, tmp_path):
        from webclip.config import ClipConfig

        config = ClipConfig.from_base_dir(tmp_path, ffmpeg_timeout=5)
        mock_run.side_effect = subprocess.TimeoutExpired(cmd="ffmpeg", timeout=5)
        with pytest.raises(EncodeFailedError, match="timed out after 5s"):
            extract_clip(_job(config, tmp_path), config)
        assert mock_run.call_args.kwargs["timeout"] == 5


class TestListStreams:
    @patch("webclip.ffutil.subprocess.run")
    def test_codec_types(self, mock_run, config):
        data = {"streams": [{"codec_type": "video"}, {"codec_type": "audio"}]}
        mock_run.return_value = MagicMock(returncode=0, stdout=json.dumps(data))
        assert list_streams(Path("video.mp4"), config) == ["video", "audio"]
