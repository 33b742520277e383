"""
Community Governance Platform
Architecture blueprint — read-only element tree.

Endpoints:
    GET /api/architecture                  list (type, status=active, parentId, search)
    GET /api/architecture?id=<id>          detail
    GET /api/architecture?code=GOAL-001    detail by code
"""

from flask import Blueprint, jsonify, request

from app.services import architecture_service

architecture_bp = Blueprint("architecture", __name__, url_prefix="/api")


@architecture_bp.route("/architecture", methods=["GET"])
def list_or_get():
    element_id = request.args.get("id")
    if element_id:
        return jsonify(architecture_service.get_element(element_id))
    code = request.args.get("code")
    if code:
        return jsonify(architecture_service.get_element_by_code(code))
    return jsonify(architecture_service.list_elements(request.args))
