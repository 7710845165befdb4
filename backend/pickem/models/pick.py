from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, UniqueConstraint

from pickem.db.base import Base
from pickem.services.time_utils import utcnow


class Pick(Base):
    __tablename__ = "picks"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.user_id"), nullable=False, index=True)
    game_id = Column(Integer, ForeignKey("games.id"), nullable=False, index=True)
    week_id = Column(Integer, ForeignKey("weeks.id"), nullable=False, index=True)

    selected_team_id = Column(Integer, ForeignKey("teams.id"), nullable=True)  # NULL = no pick

    # NULL until calculated; stays NULL for pushes and empty picks
    is_correct = Column(Boolean, nullable=True)
    calculated_at = Column(DateTime(timezone=True), nullable=True)

    # once set, the pick cannot change
    user_locked_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    __table_args__ = (UniqueConstraint("user_id", "game_id", name="uq_pick_user_game"),)
