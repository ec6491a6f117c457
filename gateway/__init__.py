from flask import Flask, jsonify
from flask_cors import CORS

from gateway.config import config
from gateway.errors import GatewayError

cors = CORS()


def create_app(config_key):
    app = Flask(__name__)
    app.config.from_object(config[config_key])

    # 프론트엔드(localhost:3000)에서의 요청 허용
    cors.init_app(app, origins=app.config["CORS_ORIGINS"])

    from gateway.webcam import views as webcam_views

    app.register_blueprint(webcam_views.webcam)

    from gateway.detector import views as detector_views

    app.register_blueprint(detector_views.detector)

    from gateway.output import views as output_views

    app.register_blueprint(output_views.output)

    @app.errorhandler(GatewayError)
    def handle_gateway_error(e):
        app.logger.error(f"{e.status_code} {e.error}: {e.details or ''}")
        return jsonify(e.to_dict()), e.status_code

    return app
