from julisha import db
from julisha.utils import utcnow


class VerificationCode(db.Model):
    """One outstanding phone-ownership challenge."""

    __tablename__ = "verification_codes"

    id = db.Column(db.Integer, primary_key=True)
    phone_hash = db.Column(db.String(64), nullable=False, index=True)
    code = db.Column(db.String(4), nullable=False)
    used = db.Column(db.Boolean, default=False, nullable=False)
    expires_at = db.Column(db.DateTime, nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    def __repr__(self):
        status = "used" if self.used else "open"
        return f"<VerificationCode {self.id} - {status}>"
