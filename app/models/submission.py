# app/models/submission.py
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, Integer, String

from app.database import Base


class Submission(Base):
    """A submission pulled from an online judge's submission log."""

    __tablename__ = "submission"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(64), ForeignKey("user.username", ondelete="CASCADE"), nullable=False)
    oj_id = Column(Integer, ForeignKey("oj.oj_id"), nullable=False)
    pid = Column(String(64), nullable=False)
    is_accepted = Column(Boolean, nullable=False, default=False)
    create_time = Column(DateTime, nullable=False)

    __table_args__ = (
        # per-user history scans, always ordered by time
        Index("ix_submission_user_time", "username", "create_time"),
    )

    def __repr__(self) -> str:
        return f"<Submission id={self.id} user={self.username} {self.oj_id}/{self.pid} ac={self.is_accepted}>"
