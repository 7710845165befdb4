from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class PickIn(BaseModel):
    game_id: int
    selected_team_id: Optional[int] = None  # None clears the pick


class SubmitPicksRequest(BaseModel):
    picks: list[PickIn] = Field(min_length=1)


class PickOut(BaseModel):
    id: int
    game_id: int
    week_id: int
    selected_team_id: Optional[int] = None
    is_correct: Optional[bool] = None
    user_locked_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
