from datetime import timedelta

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError

from julisha import db
from julisha.errors import DuplicateSignatureError
from julisha.models import Signature, VerificationType
from julisha.utils import utcnow


class VoteStore:
    """Persistence and aggregate queries for accepted signatures."""

    @staticmethod
    def exists(hashed_identifier: str) -> bool:
        """Point lookup on the unique hashed_identifier index."""
        query = db.session.query(Signature.id).filter_by(hashed_identifier=hashed_identifier)
        return db.session.query(query.exists()).scalar()

    @staticmethod
    def insert(signature: Signature) -> int:
        """
        Add a signature to the current transaction and return the new total.

        The unique constraint on hashed_identifier is the authoritative dedup
        guard; a violation (including one lost to a concurrent insert after a
        passing exists() check) is raised as DuplicateSignatureError after the
        transaction is rolled back. The caller commits.
        """
        db.session.add(signature)
        try:
            db.session.flush()
        except IntegrityError:
            db.session.rollback()
            raise DuplicateSignatureError()
        return VoteStore.count()

    @staticmethod
    def count() -> int:
        return db.session.query(func.count(Signature.id)).scalar() or 0

    @staticmethod
    def count_by_county() -> list[dict]:
        """Signature counts per county, highest first."""
        total = func.count(Signature.id).label("count")
        rows = (
            db.session.query(Signature.county, total)
            .group_by(Signature.county)
            .order_by(total.desc(), Signature.county.asc())
            .all()
        )
        return [{"county": row.county, "count": row.count} for row in rows]

    @staticmethod
    def count_by_type() -> dict:
        rows = (
            db.session.query(Signature.verification_type, func.count(Signature.id))
            .group_by(Signature.verification_type)
            .all()
        )
        counts = {choice: 0 for choice in VerificationType.CHOICES}
        counts.update({vtype: n for vtype, n in rows})
        return counts

    @staticmethod
    def count_since(ip_hash: str, window: timedelta) -> int:
        """Signatures from *ip_hash* created within the trailing *window*."""
        since = utcnow() - window
        return (
            db.session.query(func.count(Signature.id))
            .filter(Signature.ip_hash == ip_hash, Signature.created_at >= since)
            .scalar()
            or 0
        )

    @staticmethod
    def recent(limit: int = 50) -> list[Signature]:
        return (
            Signature.query
            .order_by(Signature.created_at.desc(), Signature.id.desc())
            .limit(limit)
            .all()
        )
