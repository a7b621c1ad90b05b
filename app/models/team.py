from sqlalchemy import Boolean, Column, ForeignKey, Integer, String

from app.database import Base


class Team(Base):
    __tablename__ = "team"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(128), nullable=False)
    is_enable = Column(Boolean, nullable=False, default=True)
    # every user owns exactly one personal team named after their nickname
    is_self = Column(Boolean, nullable=False, default=False)


class TeamUser(Base):
    __tablename__ = "team_user_rel"

    team_id = Column(Integer, ForeignKey("team.id", ondelete="CASCADE"), primary_key=True)
    username = Column(String(64), ForeignKey("user.username", ondelete="CASCADE"), primary_key=True, index=True)
