from sqlalchemy import Boolean, Column, Index, Integer, String

from pickem.db.base import Base


class Team(Base):
    __tablename__ = "teams"

    id = Column(Integer, primary_key=True, index=True)

    abbreviation = Column(String, nullable=False, unique=True)  # e.g. "KC", "PHI"
    name = Column(String, nullable=False)                       # e.g. "Chiefs"
    city = Column(String, nullable=True)                        # e.g. "Kansas City"
    logo_url = Column(String, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)

    __table_args__ = (
        Index("ix_team_abbr_active", "abbreviation", "is_active"),
    )
