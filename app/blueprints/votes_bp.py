"""
Community Governance Platform
Votes blueprint — tallies, casting and retracting votes on proposals.

Endpoints:
    GET     /api/votes?proposalId=<id>     tallies + caller's vote + recent comments
    POST    /api/votes                     {proposalId, voteType, comment?}
    DELETE  /api/votes?proposalId=<id>     retract caller's vote

Any other method answers 405.
"""

from flask import Blueprint, jsonify, request

from app.middleware.session_auth import current_user, require_user
from app.services import vote_service
from app.utils.helpers import json_object

votes_bp = Blueprint("votes", __name__, url_prefix="/api")


@votes_bp.route("/votes", methods=["GET"])
def get_votes():
    return jsonify(vote_service.get_votes(request.args.get("proposalId"), current_user()))


@votes_bp.route("/votes", methods=["POST"])
def cast_vote():
    user = require_user()
    data = json_object()
    return jsonify(vote_service.cast_vote(data, user))


@votes_bp.route("/votes", methods=["DELETE"])
def remove_vote():
    user = require_user()
    return jsonify(vote_service.remove_vote(request.args.get("proposalId"), user))
