import logging
import secrets
from dataclasses import dataclass

from flask import current_app

from julisha import db
from julisha.errors import DuplicateSignatureError, ValidationError
from julisha.models import Signature, VerificationType
from julisha.services.hashing import Hasher
from julisha.services.rate_limit import RateLimiter
from julisha.services.verification import VerificationCodeService
from julisha.services.votes import VoteStore
from julisha.utils import canonical_county, is_valid_hash

logger = logging.getLogger(__name__)

_CODE_LENGTH = 4


@dataclass
class SubmissionRequest:
    """A validated signature submission."""

    type: str
    identifier: str
    county: str
    comment: str | None = None
    verification_code: str | None = None


@dataclass
class SubmissionResult:
    total_votes: int
    verification_token: str


def _clean(value) -> str:
    if isinstance(value, int) and not isinstance(value, bool):
        value = str(value)
    return value.strip() if isinstance(value, str) else ""


def parse_submission(payload, comment_max_length: int = 500) -> SubmissionRequest:
    """Validate a raw JSON body into a SubmissionRequest.

    Raises ValidationError describing the first problem found.
    """
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object.")

    vtype = _clean(payload.get("type")).lower()
    identifier = _clean(payload.get("identifier")).lower()
    county = _clean(payload.get("county"))

    if not vtype or not identifier or not county:
        raise ValidationError("Missing required fields.")

    if vtype not in VerificationType.CHOICES:
        raise ValidationError("Invalid verification type.")

    if not is_valid_hash(identifier):
        raise ValidationError("Invalid identifier.")

    canonical = canonical_county(county)
    if canonical is None:
        raise ValidationError("Please select a valid county.")

    comment = _clean(payload.get("comment")) or None
    if comment and len(comment) > comment_max_length:
        raise ValidationError(f"Comment must be at most {comment_max_length} characters.")

    code = _clean(payload.get("verificationCode")) or None
    if vtype == VerificationType.PHONE:
        if not code:
            raise ValidationError("Verification code required.")
        if len(code) != _CODE_LENGTH or not code.isdigit():
            raise ValidationError("Please enter the 4-digit verification code.")

    return SubmissionRequest(
        type=vtype,
        identifier=identifier,
        county=canonical,
        comment=comment,
        verification_code=code,
    )


def generate_verification_token() -> str:
    """Cosmetic receipt token shown to the signer, e.g. JUL-7F3A9C2E."""
    return "JUL-" + secrets.token_hex(4).upper()


class SubmissionService:
    """Runs one signature attempt through dedup, code, rate and insert checks.

    All writes happen in a single transaction that is committed only after the
    signature row is flushed; any failure rolls back, so a consumed code is
    restored if the signature is later rejected.
    """

    def __init__(self, hasher: Hasher, rate_limiter: RateLimiter, codes: VerificationCodeService):
        self.hasher = hasher
        self.rate_limiter = rate_limiter
        self.codes = codes

    @classmethod
    def from_config(cls, config=None) -> "SubmissionService":
        config = config if config is not None else current_app.config
        return cls(
            hasher=Hasher.from_config(config),
            rate_limiter=RateLimiter.from_config(config),
            codes=VerificationCodeService(ttl=config["VERIFICATION_CODE_TTL"]),
        )

    def submit(self, request: SubmissionRequest, remote_addr: str) -> SubmissionResult:
        final_hash = self.hasher.server_hash(request.identifier)

        try:
            if VoteStore.exists(final_hash):
                logger.info("Duplicate signature attempt for %s", final_hash[:8])
                raise DuplicateSignatureError()

            if request.type == VerificationType.PHONE:
                self.codes.consume(final_hash, request.verification_code)

            ip_hash = self.hasher.ip_hash(remote_addr)
            self.rate_limiter.check_ip_submissions(ip_hash)

            token = generate_verification_token()
            total = VoteStore.insert(Signature(
                hashed_identifier=final_hash,
                verification_type=request.type,
                county=request.county,
                comment=request.comment,
                ip_hash=ip_hash,
                verification_token=token,
            ))
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

        logger.info("Signature %s accepted (%s, %s); total %d", token, request.type, request.county, total)
        return SubmissionResult(total_votes=total, verification_token=token)
