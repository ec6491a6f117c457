from flask import Blueprint, current_app, jsonify, request

from gateway.detector.forms import DetectForm
from gateway.detector.job import DetectionJob
from gateway.errors import ClientInputError
from gateway.uploads import save_upload

# Blueprint로 detector 앱을 생성한다.
detector = Blueprint("detector", __name__)


def public_base_url():
    return current_app.config.get("PUBLIC_URL") or request.host_url.rstrip("/")


@detector.route("/detect", methods=["POST"])
def detect():
    form = DetectForm()
    if not form.validate_on_submit():
        raise ClientInputError("No image uploaded")

    job = DetectionJob(current_app.config, public_base_url())
    upload_path = save_upload(form.image.data, current_app.config["UPLOAD_FOLDER"])
    current_app.logger.info(f"[{job.job_id}] 업로드 저장: {upload_path}")

    image_urls = job.run(upload_path)
    return jsonify({"status": 200, "image": image_urls})
