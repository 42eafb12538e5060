"""Settings API endpoints"""

from flask import Blueprint, current_app, jsonify, request

settings_bp = Blueprint('settings', __name__, url_prefix='/api/settings')


@settings_bp.route("", methods=["GET"])
def get_settings():
    """Get stored settings (token presence only)"""
    return jsonify(current_app.config["SETTINGS_STORE"].public())


@settings_bp.route("", methods=["PUT"])
def update_settings():
    """Update stored settings"""
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        return jsonify({"error": "JSON object body required"}), 400

    store = current_app.config["SETTINGS_STORE"]
    try:
        store.update(body)
    except ValueError as e:
        return jsonify({"error": str(e)}), 400

    return jsonify(store.public())
