import logging
import threading
from pathlib import Path

from gateway.errors import ConflictError, ProcessSpawnError
from gateway.process import DetectorInvocation, spawn

FRAME_BOUNDARY = "frame"
STREAM_MIMETYPE = f"multipart/x-mixed-replace; boundary={FRAME_BOUNDARY}"


def multipart_section(chunk):
    """stdout 청크 하나를 MJPEG 파트 하나로 감싼다. 재인코딩/검증 없음."""
    return (
        f"--{FRAME_BOUNDARY}\r\n".encode()
        + b"Content-Type: image/jpeg\r\n\r\n"
        + chunk
        + b"\r\n"
    )


class WebcamSession:
    """
    프로세스 전체에서 하나뿐인 웹캠 검출 프로세스 슬롯.

    상태는 Idle(핸들 없음)과 Running(핸들 있음) 두 가지이며, 전환은 start/stop 요청 또는
    프로세스 종료로만 일어난다. 요청 스레드가 여러 개이므로 슬롯은 락으로 보호한다.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._handle = None

    def _current(self):
        # 락을 잡은 상태에서만 호출. 스스로 종료된 프로세스는 Idle 로 본다.
        if self._handle is not None and self._handle.returncode is not None:
            logging.info(
                f"[webcam] 웹캠 검출 프로세스 종료됨 (exit code {self._handle.returncode})"
            )
            self._handle = None
        return self._handle

    @property
    def running(self):
        with self._lock:
            return self._current() is not None

    def start(self, config):
        """프로세스를 시작하고 MJPEG 파트를 내보내는 제너레이터를 반환한다."""
        with self._lock:
            if self._current() is not None:
                logging.warning("[webcam] 이미 웹캠 검출이 실행 중입니다.")
                raise ConflictError("Webcam detection is already running.")

            output_folder = Path(config["OUTPUT_FOLDER"])
            output_folder.mkdir(parents=True, exist_ok=True)

            invocation = DetectorInvocation.from_config(
                config,
                source=config["WEBCAM_SOURCE"],  # 웹캠을 소스로 사용
                project=output_folder,
                name=config["WEBCAM_RUN_NAME"],
            )
            try:
                handle = spawn(invocation, "webcam")
            except ProcessSpawnError as e:
                raise ProcessSpawnError("Failed to start Python process", details=e.details)
            handle.pump_stderr()
            self._handle = handle

        logging.info("[webcam] 웹캠 검출 시작...")
        return self._frames(handle)

    def _frames(self, handle):
        finished = False
        try:
            for chunk in handle.iter_stdout():
                yield multipart_section(chunk)
            finished = True
        finally:
            if finished:
                code = handle.wait()
                logging.info(f"[webcam] 웹캠 검출 프로세스 종료 (exit code {code})")
                self._release(handle)
            else:
                # 클라이언트 연결이 끊겨도 세션은 stop 요청 전까지 유지
                logging.warning("[webcam] 스트림 클라이언트 연결 종료")
                handle.discard_stdout()

    def _release(self, handle):
        with self._lock:
            if self._handle is handle:
                self._handle = None

    def stop(self):
        with self._lock:
            handle = self._current()
            if handle is None:
                logging.warning("[webcam] 실행 중인 웹캠 검출 프로세스가 없습니다.")
                raise ConflictError("No webcam detection process is running.")
            handle.terminate()
            self._handle = None
        logging.info("[webcam] 웹캠 검출 중지.")

    def shutdown(self):
        """서버 종료 시 남은 프로세스 정리"""
        with self._lock:
            if self._handle is not None:
                self._handle.terminate()
                self._handle = None


# 전역 웹캠 세션 (프로세스당 하나)
webcam_session = WebcamSession()
