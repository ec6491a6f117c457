import sys
from pathlib import Path

import pytest

from gateway import create_app
from gateway.webcam.session import webcam_session

FAKE_DETECTOR = Path(__file__).parent / "fake_detector.py"


@pytest.fixture
def app(tmp_path):
    """Create app wired to the fake detector"""
    app = create_app("testing")
    app.config.update(
        UPLOAD_FOLDER=tmp_path / "uploads",
        OUTPUT_FOLDER=tmp_path / "output",
        DETECTOR_PYTHON=sys.executable,
        DETECTOR_SCRIPT=FAKE_DETECTOR,
    )
    yield app
    webcam_session.shutdown()


@pytest.fixture
def client(app):
    with app.test_client() as client:
        yield client
