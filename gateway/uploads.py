import logging
import os
import time
from pathlib import Path

from werkzeug.utils import secure_filename


def save_upload(file, upload_folder, field_name="image"):
    """업로드 파일을 ``<필드명>-<epoch ms><원본 확장자>`` 이름으로 저장하고 경로를 반환한다."""
    upload_folder = Path(upload_folder)
    upload_folder.mkdir(parents=True, exist_ok=True)

    ext = os.path.splitext(secure_filename(file.filename or ""))[1]
    stem = f"{field_name}-{int(time.time() * 1000)}"
    path = upload_folder / f"{stem}{ext}"
    counter = 0
    while True:
        try:
            # 같은 밀리초에 들어온 요청끼리 덮어쓰지 않도록 배타적으로 생성
            with open(path, "xb") as dst:
                file.save(dst)
            break
        except FileExistsError:
            counter += 1
            path = upload_folder / f"{stem}-{counter}{ext}"

    return path.resolve()


def remove_upload(path, context):
    """업로드 파일 삭제. 실패해도 로그만 남긴다."""
    try:
        os.remove(path)
    except OSError as e:
        logging.error(f"[{context}] 업로드 파일 삭제 실패: {e}")
        return False
    return True
