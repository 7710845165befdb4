from sqlalchemy import Column, DateTime, Integer, String

from pickem.db.base import Base
from pickem.services.time_utils import utcnow


class User(Base):
    __tablename__ = "users"

    user_id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)

    username = Column(String, unique=True, index=True, nullable=False)
    role = Column(String, nullable=False, default="user")

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
