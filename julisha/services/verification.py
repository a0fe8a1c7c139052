import logging
import secrets
from datetime import datetime, timedelta

from sqlalchemy import update

from julisha import db
from julisha.errors import AlreadySignedError, InvalidOrExpiredCodeError
from julisha.models import VerificationCode
from julisha.services.votes import VoteStore
from julisha.utils import utcnow

logger = logging.getLogger(__name__)


class VerificationCodeService:
    """Issues and consumes one-time phone verification codes.

    Codes are keyed by the final (server-side) phone hash, the same value a
    phone signature is stored under. Issuing a new code does not invalidate
    older ones for the same phone; each stays usable until used or expired.
    """

    def __init__(self, ttl: timedelta = timedelta(minutes=10)):
        self.ttl = ttl

    @staticmethod
    def generate_code() -> str:
        """Uniformly random 4-digit code in 1000-9999."""
        return str(secrets.randbelow(9000) + 1000)

    def issue(self, phone_hash: str) -> tuple[str, datetime]:
        """Create and commit a new code for *phone_hash*."""
        if VoteStore.exists(phone_hash):
            raise AlreadySignedError()

        code = self.generate_code()
        expires_at = utcnow() + self.ttl
        db.session.add(VerificationCode(phone_hash=phone_hash, code=code, expires_at=expires_at))
        db.session.commit()

        logger.info("Issued verification code for %s, expires %s", phone_hash[:8], expires_at.isoformat())
        return code, expires_at

    @staticmethod
    def consume(phone_hash: str, code: str) -> None:
        """
        Mark a matching unused, unexpired code as used.

        Each candidate is claimed with a conditional UPDATE that only matches
        while used is still false, so concurrent attempts on the same code
        cannot both succeed. Runs in the caller's transaction: if the caller
        rolls back, the code becomes usable again.
        """
        now = utcnow()
        candidates = (
            db.session.query(VerificationCode.id)
            .filter(
                VerificationCode.phone_hash == phone_hash,
                VerificationCode.code == code,
                VerificationCode.used.is_(False),
                VerificationCode.expires_at > now,
            )
            .order_by(VerificationCode.expires_at.desc())
            .all()
        )

        for (code_id,) in candidates:
            result = db.session.execute(
                update(VerificationCode)
                .where(VerificationCode.id == code_id, VerificationCode.used.is_(False))
                .values(used=True)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 1:
                return

        logger.warning("Rejected verification code for %s", phone_hash[:8])
        raise InvalidOrExpiredCodeError()
