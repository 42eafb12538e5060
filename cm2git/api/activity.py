"""Activity feed API endpoints"""

from flask import Blueprint, current_app, jsonify, request

from cm2git.config import SETTING_OWNER, SETTING_REPO, SETTING_TOKEN, SORT_ORDERS, TYPE_FILTERS
from cm2git.view_model import apply_view

activity_bp = Blueprint('activity', __name__, url_prefix='/api')


def get_session():
    return current_app.config["ACTIVITY_SESSION"]


def get_settings():
    return current_app.config["SETTINGS_STORE"]


@activity_bp.route("/load", methods=["POST"])
def load_activity():
    """Fetch activity for a repository, falling back to stored connection settings"""
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        body = {}
    settings = get_settings()
    stored_owner, stored_repo, stored_token = settings.connection()

    owner = str(body.get("owner") or stored_owner).strip()
    repo = str(body.get("repo") or stored_repo).strip()
    token = str(body.get("token") or stored_token).strip()

    if not owner or not repo or not token:
        return jsonify({"error": "Owner, repo, and token are required"}), 400

    remembered = {}
    if body.get("owner"):
        remembered[SETTING_OWNER] = owner
    if body.get("repo"):
        remembered[SETTING_REPO] = repo
    if body.get("token"):
        remembered[SETTING_TOKEN] = token
    if remembered:
        settings.update(remembered)

    session = get_session()
    session.load(owner, repo, token)

    return jsonify({
        "success": True,
        "count": len(session.activities),
        "loaded_at": session.loaded_at
    })


@activity_bp.route("/activities")
def get_activities():
    """Get the loaded activities, filtered and sorted"""
    session = get_session()
    type_filter = request.args.get("type", session.type_filter)
    sort_order = request.args.get("sort", session.sort_order)

    try:
        activities = apply_view(session.activities, type_filter, sort_order)
    except ValueError as e:
        return jsonify({"error": str(e)}), 400

    return jsonify(activities)


@activity_bp.route("/view", methods=["PUT"])
def update_view():
    """Change the session's default type filter and sort order"""
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        return jsonify({"error": "JSON object body required"}), 400

    session = get_session()
    type_filter = body.get("type", session.type_filter)
    sort_order = body.get("sort", session.sort_order)
    if type_filter not in TYPE_FILTERS:
        return jsonify({"error": f"Unknown type filter: {type_filter}"}), 400
    if sort_order not in SORT_ORDERS:
        return jsonify({"error": f"Unknown sort order: {sort_order}"}), 400

    session.set_filter(type_filter)
    session.set_sort(sort_order)

    return jsonify({"type": session.type_filter, "sort": session.sort_order})


@activity_bp.route("/cache-info")
def cache_info():
    """Get information about the currently loaded activity"""
    session = get_session()
    return jsonify({
        "owner": session.owner,
        "repo": session.repo,
        "loaded_at": session.loaded_at,
        "count": len(session.activities)
    })
