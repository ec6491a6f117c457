"""
Tests for the webcam MJPEG streaming endpoint
"""

import json
import time

from gateway.webcam.session import multipart_section, webcam_session

STREAM_TYPE = "multipart/x-mixed-replace; boundary=frame"


class TestWebcamActions:
    """start / stop / invalid action handling"""

    def test_invalid_action(self, client):
        response = client.get("/webcam?action=pause")
        assert response.status_code == 400
        assert json.loads(response.data) == {
            "error": "Invalid action. Use ?action=start or ?action=stop"
        }

    def test_missing_action(self, client):
        response = client.get("/webcam")
        assert response.status_code == 400

    def test_stop_when_idle(self, client):
        response = client.get("/webcam?action=stop")
        assert response.status_code == 400
        assert json.loads(response.data) == {
            "error": "No webcam detection process is running."
        }

    def test_start_twice_is_rejected(self, client, monkeypatch):
        monkeypatch.setenv("FAKE_DETECTOR_MODE", "hang")

        first = client.get("/webcam?action=start")
        assert first.status_code == 200
        assert first.headers["Content-Type"] == STREAM_TYPE

        second = client.get("/webcam?action=start")
        assert second.status_code == 400
        assert json.loads(second.data) == {
            "error": "Webcam detection is already running."
        }
        assert webcam_session.running

        # the first stream still delivers frames
        first_chunk = next(iter(first.response))
        assert first_chunk.startswith(b"--frame\r\nContent-Type: image/jpeg\r\n\r\n")

        assert client.get("/webcam?action=stop").status_code == 200
        first.close()

    def test_stop_then_restart(self, client, monkeypatch):
        monkeypatch.setenv("FAKE_DETECTOR_MODE", "hang")

        first = client.get("/webcam?action=start")
        assert first.status_code == 200

        response = client.get("/webcam?action=stop")
        assert response.status_code == 200
        assert json.loads(response.data) == {"message": "Webcam detection stopped."}
        assert not webcam_session.running
        first.close()

        second = client.get("/webcam?action=start")
        assert second.status_code == 200
        assert webcam_session.running

        assert client.get("/webcam?action=stop").status_code == 200
        second.close()

    def test_client_disconnect_keeps_session_running(self, client, monkeypatch):
        monkeypatch.setenv("FAKE_DETECTOR_MODE", "hang")

        response = client.get("/webcam?action=start")
        assert response.status_code == 200
        next(iter(response.response))
        response.close()

        time.sleep(1)
        assert webcam_session.running

        # the detector is still alive, so it has to be stopped explicitly
        assert client.get("/webcam?action=stop").status_code == 200
        assert not webcam_session.running

    def test_spawn_failure(self, app, client, tmp_path):
        app.config["DETECTOR_PYTHON"] = str(tmp_path / "no-such-python")

        response = client.get("/webcam?action=start")
        assert response.status_code == 500

        data = json.loads(response.data)
        assert data["error"] == "Failed to start Python process"
        assert data["details"]
        assert not webcam_session.running


class TestWebcamStream:
    """Frames relayed from detector stdout"""

    def test_frames_relayed_until_process_exits(self, app, client, monkeypatch):
        monkeypatch.setenv("FAKE_DETECTOR_MODE", "stream")
        monkeypatch.setenv("FAKE_DETECTOR_FRAMES", "3")

        response = client.get("/webcam?action=start")
        assert response.status_code == 200
        assert app.config["OUTPUT_FOLDER"].is_dir()

        data = response.get_data()
        assert data.startswith(b"--frame\r\nContent-Type: image/jpeg\r\n\r\n")
        assert data.endswith(b"\r\n")
        for i in range(3):
            assert b"\xff\xd8FRAME%d\xff\xd9" % i in data

        # process exited on its own, so the slot is free again
        assert not webcam_session.running
        assert client.get("/webcam?action=stop").status_code == 400
        assert client.get("/webcam?action=start").status_code == 200


def test_multipart_section_keeps_bytes_as_is():
    chunk = b"\xff\xd8\x00partial"
    assert multipart_section(chunk) == (
        b"--frame\r\nContent-Type: image/jpeg\r\n\r\n\xff\xd8\x00partial\r\n"
    )
