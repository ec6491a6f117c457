import logging
import secrets
from pathlib import Path

from gateway.errors import ClientInputError, GatewayError, ProcessExecutionError
from gateway.process import DetectorInvocation, spawn
from gateway.results import ResultCollector
from gateway.uploads import remove_upload

JOB_ID_BYTES = 16


def new_job_id():
    return secrets.token_hex(JOB_ID_BYTES)


class DetectionJob:
    """
    업로드 이미지 한 장에 대한 검출 작업.

    작업마다 고유한 출력 폴더(OUTPUT_FOLDER/<job_id>)를 만들고 검출 프로세스를 실행한 뒤,
    종료되면 업로드 파일을 지우고 결과 이미지 URL 목록을 반환한다.
    타임아웃이나 재시도는 없다.
    """

    def __init__(self, config, base_url, job_id=None):
        self.config = config
        self.job_id = job_id or new_job_id()
        self.output_folder = Path(config["OUTPUT_FOLDER"]).resolve() / self.job_id
        self.collector = ResultCollector(
            config["OUTPUT_FOLDER"],
            config["RESULTS_RUN_NAME"],
            base_url,
            config["IMAGE_EXTENSIONS"],
        )

    @property
    def result_folder(self):
        return self.collector.result_folder(self.job_id)

    def run(self, upload_path):
        if upload_path is None:
            raise ClientInputError("No image uploaded")

        try:
            return self._detect(upload_path)
        finally:
            # 성공/실패와 관계없이 업로드 파일은 한 번만 정리
            remove_upload(upload_path, self.job_id)

    def _detect(self, upload_path):
        try:
            self.output_folder.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logging.error(f"[{self.job_id}] 출력 폴더 생성 실패: {e}")
            raise GatewayError("Failed to create output folder", details=str(e))

        invocation = DetectorInvocation.from_config(
            self.config,
            source=upload_path,
            project=self.output_folder,
            name=self.config["RESULTS_RUN_NAME"],
        )
        handle = spawn(invocation, self.job_id)
        logging.info(f"[{self.job_id}] 객체 검출 프로세스 시작")

        code, _, stderr = handle.collect()
        logging.info(f"[{self.job_id}] 검출 프로세스 종료 (exit code {code})")

        if code != 0:
            logging.error(f"[{self.job_id}] 검출 실패: {stderr}")
            raise ProcessExecutionError("Detection failed", details=stderr)

        urls = self.collector.collect(self.job_id)
        logging.info(f"[{self.job_id}] 생성된 이미지 URL: {urls}")
        return urls
