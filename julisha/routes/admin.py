from flask import Blueprint, current_app, jsonify

from julisha.decorators import admin_token_required
from julisha.services import VoteStore

bp = Blueprint("admin", __name__)


@bp.route("/recent-votes")
@admin_token_required
def recent_votes():
    """Most recent signatures, without identifiers or hashes."""
    preview = current_app.config["ADMIN_COMMENT_PREVIEW"]
    votes = VoteStore.recent(current_app.config["ADMIN_RECENT_LIMIT"])
    return jsonify(
        success=True,
        votes=[
            {
                "type": vote.verification_type,
                "county": vote.county,
                "comment": vote.truncated_comment(preview),
                "createdAt": vote.created_at.isoformat() + "Z",
            }
            for vote in votes
        ],
    )
