from sqlalchemy import Boolean, Column, ForeignKey, Integer, String

from app.database import Base


class TeamGroup(Base):
    """A set of teams. Grade groups (``is_grade``) are the official cohorts, e.g. 2019."""

    __tablename__ = "team_group"

    group_id = Column(Integer, primary_key=True, autoincrement=True)
    group_name = Column(String(64), nullable=False)
    is_grade = Column(Boolean, nullable=False, default=False)


class TeamGroupRel(Base):
    __tablename__ = "team_group_rel"

    team_id = Column(Integer, ForeignKey("team.id", ondelete="CASCADE"), primary_key=True)
    group_id = Column(Integer, ForeignKey("team_group.group_id", ondelete="CASCADE"), primary_key=True)
