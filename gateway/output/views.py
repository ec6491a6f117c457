from flask import Blueprint, current_app, send_from_directory

output = Blueprint("output", __name__)


# 검출 결과 이미지 정적 서빙 (출력 폴더 구조 그대로)
@output.route("/output/<path:filename>")
def serve_output(filename):
    return send_from_directory(current_app.config["OUTPUT_FOLDER"], filename)
