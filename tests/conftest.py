"""Shared test fixtures."""

import importlib.util
from pathlib import Path

import pytest

from webclip.config import ClipConfig

FIXTURES_DIR = Path(__file__).parent / "fixtures"
SCRIPTS_DIR = Path(__file__).parent.parent / "scripts"


@pytest.fixture
def sample_config_path() -> Path:
    return FIXTURES_DIR / "sample_config.json"


@pytest.fixture
def config(tmp_path: Path) -> ClipConfig:
    return ClipConfig.from_base_dir(tmp_path)


@pytest.fixture(scope="session")
def synthetic_video(tmp_path_factory) -> Path:
    """A 10-second 1920x1080 MP4 with an audio track, generated once per session."""
    spec = importlib.util.spec_from_file_location(
        "generate_test_video", SCRIPTS_DIR / "generate_test_video.py"
    )
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module.generate_test_video(tmp_path_factory.mktemp("media") / "synthetic.mp4")
