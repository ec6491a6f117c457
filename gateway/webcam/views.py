from flask import Blueprint, Response, current_app, jsonify, request

from gateway.errors import ClientInputError
from gateway.webcam.session import STREAM_MIMETYPE, webcam_session

# Blueprint로 webcam 앱을 생성한다.
webcam = Blueprint("webcam", __name__)


# 웹캠 영상을 검출 프로그램으로 처리해 MJPEG 으로 스트리밍
@webcam.route("/webcam")
def webcam_stream():
    action = request.args.get("action")

    if action == "start":
        frames = webcam_session.start(current_app.config)
        return Response(frames, mimetype=STREAM_MIMETYPE)

    if action == "stop":
        webcam_session.stop()
        return jsonify({"message": "Webcam detection stopped."}), 200

    raise ClientInputError("Invalid action. Use ?action=start or ?action=stop")
