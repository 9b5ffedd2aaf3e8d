from datetime import datetime
from models.db import db

class LoginAttempt(db.Model):
    """Failed sign-ins for one username from one address."""

    __tablename__ = "login_attempts"
    __table_args__ = (
        db.UniqueConstraint("username", "ip", name="uq_login_attempts_username_ip"),
    )

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(80), nullable=False, index=True)
    ip = db.Column(db.String(64), nullable=False)

    fail_count = db.Column(db.Integer, default=0, nullable=False)
    last_fail_at = db.Column(db.DateTime, nullable=True)
    locked_until = db.Column(db.DateTime, nullable=True)

    def seconds_locked(self, now: datetime) -> int:
        """0 when the pair may try again."""
        if not self.locked_until or self.locked_until <= now:
            return 0
        return max(int((self.locked_until - now).total_seconds()), 1)
