from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from app.database import Base


class OJ(Base):
    """An external online judge (Codeforces, AtCoder, ...)."""

    __tablename__ = "oj"

    oj_id = Column(Integer, primary_key=True)
    oj_name = Column(String(64), unique=True, nullable=False)


class Account(Base):
    """A user's handle on one online judge."""

    __tablename__ = "account"

    username = Column(String(64), ForeignKey("user.username", ondelete="CASCADE"), primary_key=True)
    oj_id = Column(Integer, ForeignKey("oj.oj_id", ondelete="CASCADE"), primary_key=True)
    account = Column(String(128), nullable=False, default="")

    user = relationship("User", back_populates="accounts")
