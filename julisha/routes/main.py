from flask import Blueprint, current_app, jsonify
from sqlalchemy import text

from julisha import db
from julisha.errors import StoreUnavailable

bp = Blueprint("main", __name__)


@bp.route("/")
def index():
    return jsonify(success=True, message="Welcome to the Petition API")


@bp.route("/health")
def health():
    """Liveness check including a round trip to the database."""
    try:
        db.session.execute(text("SELECT 1"))
    except Exception:
        current_app.logger.exception("Health check failed")
        raise StoreUnavailable()
    return jsonify(success=True, status="ok")
