"""
Community Governance Platform
Activity blueprint.

Endpoints:
    GET /api/activity      feed (limit ≤ 100, offset, userId, entityType)
"""

from flask import Blueprint, jsonify, request

from app.services import activity_service

activity_bp = Blueprint("activity", __name__, url_prefix="/api")


@activity_bp.route("/activity", methods=["GET"])
def feed():
    return jsonify(activity_service.list_activity(request.args))
