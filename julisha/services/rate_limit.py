"""Anti-abuse throttles.

Two independent layers, both advisory rather than a security boundary (a
determined attacker can rotate addresses):

* a fixed-window limit on submission attempts per client IP, counted in the
  rate_limit_windows table regardless of outcome;
* a rolling-window limit on successful signatures per hashed IP, computed
  from the signatures table itself.

Counters live in the database so limits hold across server processes.
"""

import logging
from datetime import datetime, timedelta

from flask import current_app
from sqlalchemy import update
from sqlalchemy.exc import IntegrityError

from julisha import db
from julisha.errors import RateLimitExceeded
from julisha.models import RateLimitWindow
from julisha.services.votes import VoteStore
from julisha.utils import utcnow

logger = logging.getLogger(__name__)

_EPOCH = datetime(1970, 1, 1)


def window_start(now: datetime, window: timedelta) -> datetime:
    """Start of the fixed window containing *now*."""
    size = int(window.total_seconds())
    elapsed = int((now - _EPOCH).total_seconds())
    return _EPOCH + timedelta(seconds=elapsed - elapsed % size)


class RateLimiter:
    def __init__(
        self,
        window: timedelta = timedelta(minutes=15),
        max_attempts: int = 3,
        ip_window: timedelta = timedelta(hours=24),
        ip_limit: int = 3,
    ):
        self.window = window
        self.max_attempts = max_attempts
        self.ip_window = ip_window
        self.ip_limit = ip_limit

    @classmethod
    def from_config(cls, config=None) -> "RateLimiter":
        config = config if config is not None else current_app.config
        return cls(
            window=config["RATE_LIMIT_WINDOW"],
            max_attempts=config["RATE_LIMIT_MAX_ATTEMPTS"],
            ip_window=config["IP_SIGNATURE_WINDOW"],
            ip_limit=config["IP_SIGNATURE_LIMIT"],
        )

    def hit(self, bucket: str, now: datetime = None) -> int:
        """Increment and commit the counter for *bucket* in the current window.

        Returns the hit count including this one.
        """
        start = window_start(now or utcnow(), self.window)
        increment = (
            update(RateLimitWindow)
            .where(RateLimitWindow.bucket == bucket, RateLimitWindow.window_start == start)
            .values(hits=RateLimitWindow.hits + 1)
            .execution_options(synchronize_session=False)
        )

        if db.session.execute(increment).rowcount == 0:
            db.session.add(RateLimitWindow(bucket=bucket, window_start=start, hits=1))
            try:
                db.session.flush()
            except IntegrityError:
                # Another request created the row first
                db.session.rollback()
                db.session.execute(increment)

        hits = (
            db.session.query(RateLimitWindow.hits)
            .filter_by(bucket=bucket, window_start=start)
            .scalar()
        )
        db.session.commit()
        return hits or 0

    def check_attempt(self, scope: str, ip_hash: str) -> None:
        """Count one attempt and raise once the window allowance is exceeded."""
        hits = self.hit(f"{scope}:{ip_hash}")
        if hits > self.max_attempts:
            logger.warning("Rate limit hit for %s from %s (%d attempts)", scope, ip_hash[:8], hits)
            raise RateLimitExceeded("Too many attempts. Please try again in a few minutes.")

    def check_ip_submissions(self, ip_hash: str) -> None:
        """Raise if *ip_hash* already has the maximum signatures in the rolling window."""
        if VoteStore.count_since(ip_hash, self.ip_window) >= self.ip_limit:
            logger.warning("Signature limit reached for %s", ip_hash[:8])
            raise RateLimitExceeded()
