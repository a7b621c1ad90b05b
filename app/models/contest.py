from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String

from app.database import Base


class Contest(Base):
    __tablename__ = "contest"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    start_time = Column(DateTime, nullable=False, index=True)
    duration = Column(Integer, nullable=False, default=0)  # seconds


class ContestProblem(Base):
    __tablename__ = "contest_problem"

    contest_id = Column(Integer, ForeignKey("contest.id", ondelete="CASCADE"), primary_key=True)
    # display position within the contest
    idx = Column(Integer, primary_key=True)
    oj_id = Column(Integer, ForeignKey("oj.oj_id"), nullable=False)
    pid = Column(String(64), nullable=False)

    __table_args__ = (
        Index("ix_contest_problem_key", "contest_id", "oj_id", "pid", unique=True),
    )


class ContestGroupRel(Base):
    __tablename__ = "contest_group_rel"

    contest_id = Column(Integer, ForeignKey("contest.id", ondelete="CASCADE"), primary_key=True)
    group_id = Column(Integer, ForeignKey("team_group.group_id", ondelete="CASCADE"), primary_key=True)
