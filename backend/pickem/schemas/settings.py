from typing import Optional

from pydantic import BaseModel, Field


class LeagueSettingsOut(BaseModel):
    pick_cutoff_minutes: int
    allow_pick_edits: bool
    points_per_correct_pick: int
    competition_timezone: str
    allow_commissioner_overrides: bool
    allow_picks_after_kickoff: bool
    debug_mode: bool

    model_config = {"from_attributes": True}


class LeagueSettingsUpdate(BaseModel):
    # -1 disables the cutoff
    pick_cutoff_minutes: Optional[int] = Field(default=None, ge=-1)
    allow_pick_edits: Optional[bool] = None
    points_per_correct_pick: Optional[int] = Field(default=None, ge=0)
    competition_timezone: Optional[str] = None
    allow_commissioner_overrides: Optional[bool] = None
    allow_picks_after_kickoff: Optional[bool] = None
    debug_mode: Optional[bool] = None
