from sqlalchemy import Column, DateTime, ForeignKey, Integer, UniqueConstraint

from pickem.db.base import Base
from pickem.services.time_utils import utcnow


class WeekResult(Base):
    __tablename__ = "week_results"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.user_id"), nullable=False, index=True)
    week_id = Column(Integer, ForeignKey("weeks.id"), nullable=False, index=True)

    points = Column(Integer, nullable=False, default=0)
    rank = Column(Integer, nullable=True)

    computed_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    __table_args__ = (UniqueConstraint("user_id", "week_id", name="uq_week_result_user_week"),)


class SeasonStanding(Base):
    __tablename__ = "season_standings"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.user_id"), nullable=False, index=True)
    season_id = Column(Integer, ForeignKey("seasons.id"), nullable=False, index=True)
    week_id = Column(Integer, ForeignKey("weeks.id"), nullable=False, index=True)

    # cumulative through this week
    points = Column(Integer, nullable=False, default=0)
    rank = Column(Integer, nullable=True)

    computed_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        UniqueConstraint("user_id", "season_id", "week_id", name="uq_standing_user_season_week"),
    )
