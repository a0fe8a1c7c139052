from flask import Blueprint, current_app, jsonify, request

from julisha.decorators import client_address, rate_limited
from julisha.errors import ValidationError
from julisha.services import Hasher, SubmissionService, VerificationCodeService, VoteStore, parse_submission
from julisha.services import sms as sms_service

bp = Blueprint("votes", __name__)


@bp.route("/count")
def count():
    """Total signatures and progress toward the target."""
    total = VoteStore.count()
    target = current_app.config["SIGNATURE_TARGET"]
    percentage = round(total * 100.0 / target, 2) if target else 0
    return jsonify(success=True, count=total, target=target, percentage=percentage)


@bp.route("/counties")
def counties():
    return jsonify(success=True, counties=VoteStore.count_by_county())


@bp.route("/stats")
def stats():
    """Totals split by verification type."""
    return jsonify(success=True, count=VoteStore.count(), byType=VoteStore.count_by_type())


@bp.route("/verify-phone", methods=["POST"])
@rate_limited("verify-phone")
def verify_phone():
    """Issue a 4-digit code for a phone number.

    Delivery is stubbed; with SMS_DEMO_MODE on the code is returned in the
    response so the demo frontend can display it.
    """
    payload = request.get_json(silent=True) or {}
    phone_number = payload.get("phoneNumber") if isinstance(payload, dict) else None
    if not isinstance(phone_number, str) or not phone_number.strip():
        raise ValidationError("Phone number required.")

    phone_hash = Hasher.from_config().phone_hash(phone_number)
    service = VerificationCodeService(ttl=current_app.config["VERIFICATION_CODE_TTL"])
    code, expires_at = service.issue(phone_hash)
    sms_service.send_verification_code(phone_hash, code)

    body = {
        "success": True,
        "message": "Verification code sent.",
        "expiresAt": expires_at.isoformat() + "Z",
    }
    if sms_service.demo_mode():
        body["code"] = code
    return jsonify(body)


@bp.route("/submit", methods=["POST"])
@rate_limited("submit")
def submit():
    """Record a signature."""
    submission = parse_submission(
        request.get_json(silent=True),
        comment_max_length=current_app.config["COMMENT_MAX_LENGTH"],
    )
    result = SubmissionService.from_config().submit(submission, client_address())
    return jsonify(
        success=True,
        message="Thank you for signing the petition!",
        totalVotes=result.total_votes,
        verificationToken=result.verification_token,
    )
