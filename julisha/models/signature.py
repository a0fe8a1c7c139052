from julisha import db
from julisha.utils import utcnow


class VerificationType:
    """Signature verification type constants."""
    ID = "id"
    PHONE = "phone"

    CHOICES = (ID, PHONE)


class Signature(db.Model):
    """Accepted petition signatures. Rows are never updated or deleted."""

    __tablename__ = "signatures"
    __table_args__ = (
        db.Index("ix_signatures_ip_hash_created_at", "ip_hash", "created_at"),
    )

    id = db.Column(db.Integer, primary_key=True)

    # Server-side hash of the client-side hash; the sole dedup key
    hashed_identifier = db.Column(db.String(64), unique=True, nullable=False, index=True)
    verification_type = db.Column(db.String(10), nullable=False)

    county = db.Column(db.String(100), nullable=False, index=True)
    comment = db.Column(db.Text)

    # Only used for rate limiting, never for identity
    ip_hash = db.Column(db.String(64), nullable=False)

    # Cosmetic token shown to the signer
    verification_token = db.Column(db.String(32))

    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    def truncated_comment(self, length: int) -> str:
        if not self.comment:
            return ""
        if len(self.comment) <= length:
            return self.comment
        return self.comment[:length] + "..."

    def __repr__(self):
        return f"<Signature {self.id} - {self.verification_type} {self.county}>"
