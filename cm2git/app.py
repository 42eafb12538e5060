"""Flask web backend for the activity dashboard"""

from flask import Flask, jsonify

from cm2git.api import activity_bp, settings_bp
from cm2git.config import configure_logging
from cm2git.session import ActivitySession
from cm2git.settings import SettingsStore


def create_app(session: ActivitySession = None, settings: SettingsStore = None) -> Flask:
    """
    Build the Flask app around one activity session

    Args:
        session: Activity session (defaults to a fresh one fetching from GitHub)
        settings: Settings store (defaults to the configured settings file)
    """
    app = Flask(__name__)
    app.config["ACTIVITY_SESSION"] = session or ActivitySession()
    app.config["SETTINGS_STORE"] = settings or SettingsStore()

    app.register_blueprint(activity_bp)
    app.register_blueprint(settings_bp)

    @app.errorhandler(404)
    def not_found(e):
        return jsonify({"error": "Not found"}), 404

    return app


if __name__ == "__main__":
    configure_logging()
    create_app().run(debug=True, port=5000)
