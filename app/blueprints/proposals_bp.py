"""
Community Governance Platform
Proposals blueprint.

Endpoints:
    GET     /api/proposals                 list (status, type, limit, offset)
    GET     /api/proposals?id=<id>         detail with discussion comments
    POST    /api/proposals                 create draft       (auth)
    PUT     /api/proposals                 update             (author / admin)
    DELETE  /api/proposals?id=<id>         delete             (author / admin)
"""

from flask import Blueprint, jsonify, request

from app.middleware.session_auth import require_user
from app.services import proposal_service
from app.utils.helpers import json_object

proposals_bp = Blueprint("proposals", __name__, url_prefix="/api")


@proposals_bp.route("/proposals", methods=["GET"])
def list_or_get():
    proposal_id = request.args.get("id")
    if proposal_id:
        return jsonify(proposal_service.get_proposal(proposal_id))
    return jsonify(proposal_service.list_proposals(request.args))


@proposals_bp.route("/proposals", methods=["POST"])
def create():
    user = require_user()
    data = json_object()
    return jsonify(proposal_service.create_proposal(data, user)), 201


@proposals_bp.route("/proposals", methods=["PUT"])
def update():
    user = require_user()
    data = json_object()
    return jsonify(proposal_service.update_proposal(data, user))


@proposals_bp.route("/proposals", methods=["DELETE"])
def delete():
    user = require_user()
    return jsonify(proposal_service.delete_proposal(request.args.get("id"), user))
