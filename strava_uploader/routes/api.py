import logging
import os
import tempfile

from flask import Blueprint, current_app, jsonify, request

from ..errors import RelayError
from ..extensions import limiter
from ..services.guard import verify_pin as check_pin
from ..services.uploads import data_type_for, upload_activity
from ..utils.net import client_address

logger = logging.getLogger(__name__)

api_bp = Blueprint("api", __name__)

def strava_client():
    return current_app.extensions["strava"]

def error_response(err: RelayError):
    return jsonify(err.to_dict()), err.status_code

def pin_limit():
    return current_app.config.get("PIN_RATELIMIT", "10 per minute")

@api_bp.route("/verify-pin", methods=["POST"])
@limiter.limit(pin_limit)
def verify_pin():
    data = request.get_json(silent=True) or {}
    cfg = current_app.config
    store = current_app.extensions["attempts"]
    try:
        check_pin(
            data.get('pin'),
            client_address(),
            secret=cfg["ACCESS_PIN"],
            store=store,
            max_attempts=cfg["MAX_PIN_ATTEMPTS"],
            lockout_seconds=cfg["LOCKOUT_SECONDS"],
        )
        return jsonify({'success': True})
    except RelayError as e:
        return error_response(e)

@api_bp.route("/upload", methods=["POST"])
def upload():
    if 'file' not in request.files:
        return jsonify({'error': 'No file uploaded'}), 400
    file = request.files['file']
    if file.filename == '':
        return jsonify({'error': 'No file selected'}), 400

    cfg = current_app.config
    temp_path = None
    try:
        data_type = data_type_for(file.filename)
        title = (request.form.get('title') or '').strip() or None
        logger.info(f"/upload hit - received file: {file.filename} ({data_type})")

        os.makedirs(cfg["UPLOAD_FOLDER"], exist_ok=True)
        with tempfile.NamedTemporaryFile(
            dir=cfg["UPLOAD_FOLDER"], suffix=f".{data_type}", delete=False
        ) as temp_file:
            file.save(temp_file)
            temp_path = temp_file.name

        result = upload_activity(
            strava_client(),
            temp_path,
            file.filename,
            title=title,
            attempts=cfg["UPLOAD_POLL_ATTEMPTS"],
            interval=cfg["UPLOAD_POLL_INTERVAL"],
            default_name=cfg["DEFAULT_ACTIVITY_NAME"],
            stop_event=current_app.extensions["upload_shutdown"],
            ready_status=cfg["STRAVA_READY_STATUS"],
        )
        return jsonify({'success': True, **result})
    except RelayError as e:
        logger.error(f"Upload failed: {e.to_dict()['error']}")
        return error_response(e)
    except Exception as e:
        logger.exception("Upload failed")
        return jsonify({'error': str(e)}), 500
    finally:
        # upload_activity removes it on its own; this covers failures before the hand-off
        if temp_path and os.path.exists(temp_path):
            os.remove(temp_path)

@api_bp.route("/refresh", methods=["POST"])
def refresh():
    logger.info("Refresh triggered: refreshing Strava token...")
    try:
        token = strava_client().refresh_access_token()
        return jsonify({'success': True, 'newAccessToken': token})
    except RelayError as e:
        logger.error(f"Refresh failed: {e.to_dict()['error']}")
        return error_response(e)
    except Exception as e:
        logger.exception("Refresh failed")
        return jsonify({'error': str(e)}), 500
