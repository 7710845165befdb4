from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, UniqueConstraint

from pickem.db.base import Base
from pickem.services.time_utils import utcnow


class Season(Base):
    __tablename__ = "seasons"

    id = Column(Integer, primary_key=True)
    year = Column(Integer, nullable=False, index=True)

    number_of_weeks = Column(Integer, nullable=False)
    is_postseason = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, nullable=False, default=False)

    created_by = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)


class SeasonParticipant(Base):
    __tablename__ = "season_participants"

    id = Column(Integer, primary_key=True)
    season_id = Column(Integer, ForeignKey("seasons.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.user_id"), nullable=False, index=True)
    joined_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    __table_args__ = (UniqueConstraint("season_id", "user_id", name="uq_season_participant"),)
