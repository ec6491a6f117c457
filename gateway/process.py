import codecs
import logging
import subprocess
import threading
from dataclasses import dataclass

from gateway.errors import ProcessSpawnError

CHUNK_SIZE = 64 * 1024


@dataclass(frozen=True)
class DetectorInvocation:
    """검출 프로그램 실행 명령 (실행 파일 + 순서가 있는 인자 목록)"""

    executable: str
    args: tuple

    @classmethod
    def from_config(cls, config, source, project, name):
        return cls(
            executable=str(config["DETECTOR_PYTHON"]),
            args=(
                str(config["DETECTOR_SCRIPT"]),
                "--weights", str(config["DETECTOR_WEIGHTS"]),  # 가중치 파일
                "--img", str(config["DETECTOR_IMG_SIZE"]),  # 이미지 크기
                "--conf", str(config["DETECTOR_CONF"]),  # 신뢰도 임계값
                "--source", str(source),
                "--project", str(project),
                "--name", name,
            ),
        )

    @property
    def command(self):
        return [self.executable, *self.args]


class ProcessHandle:
    """실행 중인 검출 프로세스. stdout/stderr 를 바이트 청크 단위로 노출한다."""

    def __init__(self, popen, label):
        self._popen = popen
        self.label = label

    @property
    def pid(self):
        return self._popen.pid

    @property
    def returncode(self):
        return self._popen.poll()

    def iter_stdout(self):
        return _iter_chunks(self._popen.stdout)

    def iter_stderr(self):
        return _iter_chunks(self._popen.stderr)

    def wait(self) -> int:
        return self._popen.wait()

    def terminate(self):
        if self._popen.poll() is None:
            self._popen.terminate()  # SIGTERM

    def pump_stderr(self):
        """stderr 를 백그라운드 스레드에서 로그로 흘려보낸다 (파이프가 가득 차지 않도록)."""
        thread = threading.Thread(
            target=_drain, args=(self.iter_stderr(), self.label, logging.ERROR, None),
            daemon=True,
        )
        thread.start()
        return thread

    def discard_stdout(self):
        """남은 stdout 을 백그라운드 스레드에서 읽어 버린다 (프로세스가 계속 쓸 수 있도록)."""
        thread = threading.Thread(
            target=_discard, args=(self.iter_stdout(),), daemon=True
        )
        thread.start()
        return thread

    def collect(self):
        """stdout/stderr 를 끝까지 읽어 텍스트로 모은 뒤 (종료 코드, stdout, stderr) 반환"""
        out_parts, err_parts = [], []
        readers = [
            threading.Thread(
                target=_drain,
                args=(self.iter_stdout(), self.label, logging.INFO, out_parts),
                daemon=True,
            ),
            threading.Thread(
                target=_drain,
                args=(self.iter_stderr(), self.label, logging.ERROR, err_parts),
                daemon=True,
            ),
        ]
        for reader in readers:
            reader.start()
        for reader in readers:
            reader.join()
        code = self.wait()
        return code, "".join(out_parts), "".join(err_parts)


def _iter_chunks(stream):
    # EOF 에서만 닫는다. 소비자가 중간에 멈춰도 파이프는 열어 둔다.
    while True:
        chunk = stream.read(CHUNK_SIZE)
        if not chunk:
            break
        yield chunk
    stream.close()


def _discard(chunks):
    for _ in chunks:
        pass


def _drain(chunks, label, level, parts):
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    for chunk in chunks:
        text = decoder.decode(chunk)
        if text.strip():
            logging.log(level, f"[{label}] {text.rstrip()}")
        if parts is not None:
            parts.append(text)
    if parts is not None:
        parts.append(decoder.decode(b"", final=True))


def spawn(invocation, label):
    """검출 프로세스를 시작한다. 시작 자체가 실패하면 ProcessSpawnError."""
    try:
        popen = subprocess.Popen(
            invocation.command,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            bufsize=0,
        )
    except OSError as e:
        logging.error(f"[{label}] 프로세스 시작 실패: {e}")
        raise ProcessSpawnError("Failed to start the Python process", details=str(e))
    logging.info(f"[{label}] 프로세스 시작 (pid={popen.pid})")
    return ProcessHandle(popen, label)
