from sqlalchemy import (
    BigInteger,
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
)

from pickem.db.base import Base
from pickem.services.time_utils import utcnow

GAME_SCHEDULED = "scheduled"
GAME_FINAL = "final"


class Game(Base):
    __tablename__ = "games"

    id = Column(Integer, primary_key=True)

    week_id = Column(Integer, ForeignKey("weeks.id"), nullable=False, index=True)
    season_id = Column(Integer, ForeignKey("seasons.id"), nullable=False, index=True)

    # provider id, source of truth when re-importing and scoring
    external_game_id = Column(BigInteger, nullable=False)

    kickoff_time = Column(DateTime(timezone=True), nullable=False)

    home_team_id = Column(Integer, ForeignKey("teams.id"), nullable=False)
    away_team_id = Column(Integer, ForeignKey("teams.id"), nullable=False)
    home_team_abbr = Column(String, nullable=False)
    away_team_abbr = Column(String, nullable=False)

    home_score = Column(Integer, nullable=True)
    away_score = Column(Integer, nullable=True)

    # negative = home favored. NULL until the commissioner sets it
    home_spread = Column(Float, nullable=True)

    neutral_site = Column(Boolean, nullable=False, default=False)
    status = Column(String, nullable=False, default=GAME_SCHEDULED)

    created_by = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        Index("ix_game_week_external", "week_id", "external_game_id"),
    )
