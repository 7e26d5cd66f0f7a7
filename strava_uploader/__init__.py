import logging
import threading

from flask import Flask, jsonify, render_template
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from .config import Config, mask, missing_keys
from .errors import ConfigMissing
from .extensions import limiter
from .services.store import AttemptStore
from .services.strava import StravaClient

logger = logging.getLogger(__name__)

def create_app(overrides=None):
    app = Flask(__name__, static_folder="static", template_folder="templates")
    app.config.from_object(Config)
    if overrides:
        app.config.update(overrides)

    logging.basicConfig(
        level=app.config.get("LOG_LEVEL", "INFO"),
        format='[%(asctime)s] %(levelname)s in %(module)s: %(message)s',
    )

    # Refuse to start without Strava credentials
    missing = missing_keys(app.config)
    if missing:
        logger.error(f"Missing required environment variables: {', '.join(missing)}")
        raise ConfigMissing(missing)

    logger.info("Loaded ENV values: %s", {
        "CLIENT_ID": app.config["CLIENT_ID"],
        "CLIENT_SECRET": mask(app.config["CLIENT_SECRET"]),
        "REFRESH_TOKEN": mask(app.config["REFRESH_TOKEN"]),
        "ACCESS_TOKEN": mask(app.config.get("ACCESS_TOKEN")),
    })
    if app.config["ACCESS_PIN"] == "1234":
        logger.warning("ACCESS_PIN is not set; using the default PIN")

    # CORS
    CORS(app, origins=app.config.get("CORS_ORIGINS", "*"))

    # Rate limiting
    limiter.init_app(app)

    app.extensions["strava"] = StravaClient.from_config(app.config)
    app.extensions["attempts"] = AttemptStore()
    app.extensions["upload_shutdown"] = threading.Event()

    # Register blueprints
    from .routes.api import api_bp
    app.register_blueprint(api_bp)

    @app.route("/")
    def health():
        return "Strava uploader backend is running!"

    @app.route("/ui")
    def index():
        return render_template("index.html", api_base_url=app.config.get("API_BASE_URL", ""))

    @app.errorhandler(Exception)
    def unhandled(e):
        if isinstance(e, HTTPException):
            return e
        logger.exception("Unhandled error")
        return jsonify({'error': str(e)}), 500

    return app
