import enum

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint

from pickem.db.base import Base
from pickem.services.time_utils import utcnow


class WeekStatus(str, enum.Enum):
    """Lifecycle of a week, in the only order it may be walked."""

    DRAFT = "draft"
    GAMES_IMPORTED = "games_imported"
    SPREADS_SET = "spreads_set"
    ACTIVE = "active"
    PLAYED = "played"
    PICKS_RESULTS_CALCULATED = "picks_results_calculated"
    SCORED = "scored"
    FINAL = "final"


class Week(Base):
    __tablename__ = "weeks"

    id = Column(Integer, primary_key=True)
    season_id = Column(Integer, ForeignKey("seasons.id"), nullable=False, index=True)
    number = Column(Integer, nullable=False)  # 1, 2, 3...

    # stored as the WeekStatus value
    status = Column(String, nullable=False, default=WeekStatus.DRAFT.value)

    created_by = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)
    activated_at = Column(DateTime(timezone=True), nullable=True)
    closed_at = Column(DateTime(timezone=True), nullable=True)

    __table_args__ = (UniqueConstraint("season_id", "number", name="uq_week_season_number"),)
