from sqlalchemy import Column, Date, ForeignKey, Integer, String, UniqueConstraint

from app.database import Base


class Medal:
    NONE = 0
    GOLD = 1
    SILVER = 2
    BRONZE = 3


class Xcpc(Base):
    """An onsite ICPC/CCPC style event that hands out medals."""

    __tablename__ = "xcpc"

    xcpc_id = Column(Integer, primary_key=True, autoincrement=True)
    xcpc_name = Column(String(255), nullable=False)
    xcpc_date = Column(Date, nullable=False)


class Award(Base):
    __tablename__ = "award"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(64), ForeignKey("user.username", ondelete="CASCADE"), nullable=False, index=True)
    xcpc_id = Column(Integer, ForeignKey("xcpc.xcpc_id", ondelete="CASCADE"), nullable=False)
    medal = Column(Integer, nullable=False, default=Medal.NONE)
    award = Column(String(255), nullable=False, default="")  # free text, e.g. "First Prize"

    __table_args__ = (
        UniqueConstraint("username", "xcpc_id", name="uq_award_user_xcpc"),
    )
