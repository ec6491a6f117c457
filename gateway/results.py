import logging
import os
from pathlib import Path
from urllib.parse import quote

from gateway.errors import ResultExtractionError


class ResultCollector:
    """
    검출이 끝난 작업의 결과 폴더에서 이미지 파일을 찾아 접근 가능한 URL 목록을 만든다.

    Args:
        output_folder (Path): 모든 작업 출력 폴더의 상위 폴더.
        run_name (str): 검출 프로그램이 결과를 쓰는 하위 폴더 이름.
        base_url (str): 정적 서빙 주소의 앞부분 (예: http://localhost:3002).
        extensions (tuple): 이미지로 인정하는 확장자 (소문자).
    """

    def __init__(self, output_folder, run_name, base_url, extensions):
        self.output_folder = Path(output_folder)
        self.run_name = run_name
        self.base_url = base_url.rstrip("/")
        self.extensions = tuple(ext.lower() for ext in extensions)

    def result_folder(self, job_id):
        return self.output_folder / job_id / self.run_name

    def is_image(self, filename):
        return os.path.splitext(filename)[1].lower() in self.extensions

    def url_for(self, job_id, filename):
        # 공백 등은 퍼센트 인코딩해야 브라우저에서 그대로 열린다
        return f"{self.base_url}/output/{job_id}/{self.run_name}/{quote(filename)}"

    def collect(self, job_id):
        """결과 URL 목록 반환 (디렉터리 나열 순서 그대로)"""
        folder = self.result_folder(job_id)
        try:
            files = os.listdir(folder)
        except OSError as e:
            logging.error(f"[{job_id}] 결과 폴더 읽기 실패: {e}")
            raise ResultExtractionError("Failed to read result folder")

        image_files = [name for name in files if self.is_image(name)]
        if not image_files:
            logging.error(f"[{job_id}] 결과 폴더에 이미지가 없습니다: {folder}")
            raise ResultExtractionError("No images generated")

        return [self.url_for(job_id, name) for name in image_files]
