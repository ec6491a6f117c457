import atexit
import logging
import os
from pathlib import Path

from gateway import create_app
from gateway.webcam.session import webcam_session


def main():
    logging.basicConfig(
        level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s"
    )
    app = create_app(os.getenv("FLASK_CONFIG") or "local")  # 환경 변수에서 설정 로드

    for key in ("UPLOAD_FOLDER", "OUTPUT_FOLDER"):
        Path(app.config[key]).mkdir(parents=True, exist_ok=True)

    # 서버 종료 시 웹캠 프로세스도 함께 종료
    atexit.register(webcam_session.shutdown)

    logging.info(f"Server running on http://localhost:{app.config['PORT']}")
    app.run(
        host=app.config["HOST"],
        port=app.config["PORT"],
        debug=app.config.get("DEBUG", False),
        use_reloader=False,  # 리로더가 웹캠 프로세스를 중복 실행하지 않도록
        threaded=True,
    )


if __name__ == "__main__":
    main()
