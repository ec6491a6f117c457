# 경로값을 알아오기 위하여
import os
from pathlib import Path

from dotenv import load_dotenv

baseDir = Path(__file__).parent.parent

# .env 파일의 환경 변수를 설정값보다 먼저 읽는다
load_dotenv()


def _env(key, default):
    return os.getenv(key) or default


# BaseConfig 클래스 작성
class BaseConfig:
    HOST = _env("GATEWAY_HOST", "0.0.0.0")
    PORT = int(_env("GATEWAY_PORT", 3002))
    # 결과 이미지 URL 앞부분. 비어 있으면 요청의 host_url 사용
    PUBLIC_URL = _env("GATEWAY_PUBLIC_URL", "http://localhost:3002")
    CORS_ORIGINS = ["http://localhost:3000", "http://127.0.0.1:3000"]

    UPLOAD_FOLDER = baseDir / "uploads"
    OUTPUT_FOLDER = baseDir / "output"

    # 외부 검출 프로그램 설정
    DETECTOR_PYTHON = _env("DETECTOR_PYTHON", "python3")
    DETECTOR_SCRIPT = Path(_env("DETECTOR_SCRIPT", baseDir / "yolov5" / "detect.py"))
    DETECTOR_WEIGHTS = _env("DETECTOR_WEIGHTS", "./yolov5/yolov5s.pt")
    DETECTOR_IMG_SIZE = 640
    DETECTOR_CONF = 0.4

    RESULTS_RUN_NAME = "results"
    WEBCAM_RUN_NAME = "webcam_results"
    WEBCAM_SOURCE = "0"
    IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".bmp")


# 상황에 따른 환경 설정 작업 (BaseConfig 클래스 각 상황별로 상속하여 처리)
# LocalTest 상황
class LocalConfig(BaseConfig):
    DEBUG = True


# Testing 상황
class TestingConfig(BaseConfig):
    TESTING = True
    PUBLIC_URL = "http://localhost:3002"
    UPLOAD_FOLDER = baseDir / "testing" / "uploads"
    OUTPUT_FOLDER = baseDir / "testing" / "output"


# 실제 상황
class DeployConfig(BaseConfig):
    PUBLIC_URL = _env("GATEWAY_PUBLIC_URL", "")


# config 사전 매핑 작업
config = {"testing": TestingConfig, "local": LocalConfig, "deploy": DeployConfig}
