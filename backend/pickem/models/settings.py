from sqlalchemy import Boolean, Column, DateTime, Integer, String

from pickem.db.base import Base
from pickem.services.time_utils import utcnow


class GlobalSettings(Base):
    __tablename__ = "settings"

    id = Column(Integer, primary_key=True)

    pick_cutoff_minutes = Column(Integer, nullable=False, default=120)  # -1 disables the cutoff
    allow_pick_edits = Column(Boolean, nullable=False, default=True)
    points_per_correct_pick = Column(Integer, nullable=False, default=1)
    competition_timezone = Column(String, nullable=False, default="UTC")
    allow_commissioner_overrides = Column(Boolean, nullable=False, default=False)
    allow_picks_after_kickoff = Column(Boolean, nullable=False, default=False)
    debug_mode = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)
