from sqlalchemy import Boolean, Column, Integer, String
from sqlalchemy.orm import relationship

from app.database import Base


class User(Base):
    __tablename__ = "user"

    username = Column(String(64), primary_key=True)
    password_hash = Column(String(255), nullable=False, default="")
    nickname = Column(String(64), nullable=False, default="")
    cf_rating = Column(Integer, nullable=False, default=0)
    is_enable = Column(Boolean, nullable=False, default=True)
    is_admin = Column(Boolean, nullable=False, default=False)

    # private profile fields, only editable by the user or an admin
    id_card = Column(String(32), nullable=False, default="")
    phone = Column(String(32), nullable=False, default="")
    qq = Column(String(32), nullable=False, default="")
    t_shirt = Column(String(16), nullable=False, default="")

    accounts = relationship("Account", back_populates="user", lazy="selectin")

    def __repr__(self) -> str:
        return f"<User {self.username} enable={self.is_enable} admin={self.is_admin}>"
