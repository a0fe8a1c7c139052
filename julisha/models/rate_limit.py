from julisha import db


class RateLimitWindow(db.Model):
    """Attempt counter for one rate-limit bucket in one fixed time window."""

    __tablename__ = "rate_limit_windows"
    __table_args__ = (
        db.UniqueConstraint("bucket", "window_start", name="uq_rate_limit_windows_bucket_window"),
    )

    id = db.Column(db.Integer, primary_key=True)
    bucket = db.Column(db.String(100), nullable=False)
    window_start = db.Column(db.DateTime, nullable=False)
    hits = db.Column(db.Integer, default=0, nullable=False)

    def __repr__(self):
        return f"<RateLimitWindow {self.bucket} @ {self.window_start}: {self.hits}>"
