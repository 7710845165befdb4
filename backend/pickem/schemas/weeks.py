from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class GameOut(BaseModel):
    id: int
    week_id: int
    external_game_id: int
    kickoff_time: datetime
    home_team_id: int
    away_team_id: int
    home_team_abbr: str
    away_team_abbr: str
    home_score: Optional[int] = None
    away_score: Optional[int] = None
    home_spread: Optional[float] = None
    neutral_site: bool
    status: str

    model_config = {"from_attributes": True}


class WeekOut(BaseModel):
    id: int
    season_id: int
    number: int
    status: str
    activated_at: Optional[datetime] = None
    closed_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class WeekDetailOut(WeekOut):
    games: list[GameOut] = []


class SpreadUpdate(BaseModel):
    game_id: int
    # negative = home favored; must be a multiple of 0.5
    home_spread: Optional[float] = None


class SpreadsRequest(BaseModel):
    spreads: list[SpreadUpdate] = Field(min_length=1)


class AutoImportSpreadsRequest(BaseModel):
    bookmaker: Optional[str] = None


class AutoImportSpreadsOut(BaseModel):
    games_updated: int
    games_total: int
    bookmaker: str
    week_status: str
    unmatched_games: list[str] = []


class AdvanceSeasonOut(BaseModel):
    action: str
    week_id: Optional[int] = None
    status: Optional[str] = None
