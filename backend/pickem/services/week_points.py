# pickem/services/week_points.py
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.orm import Session

from pickem.crud.crud_results import participant_week_points, rank_week_results, upsert_week_results
from pickem.crud.crud_week import atomic, get_week_with_year, update_week_status
from pickem.models.week import WeekStatus
from pickem.core.errors import InvalidWeekStateError, raise_if_cancelled
from pickem.services.league_settings import LeagueSettings, load_league_settings
from pickem.services.time_utils import utcnow

logger = logging.getLogger(__name__)


@dataclass
class WeekPointsResult:
    users_processed: int


def calculate_week_points(
    db: Session,
    week_id: int,
    *,
    league_settings: Optional[LeagueSettings] = None,
    cancel: Optional[threading.Event] = None,
) -> WeekPointsResult:
    """picks_results_calculated -> scored.

    Every season participant gets a week_results row, including those who
    never picked (0 points). Re-running overwrites points and ranks in place.
    """
    with atomic(db):
        week = get_week_with_year(db, week_id)
        if week.status != WeekStatus.PICKS_RESULTS_CALCULATED.value:
            raise InvalidWeekStateError(week.id, WeekStatus.PICKS_RESULTS_CALCULATED, week.status)

        logger.debug("calculating week points week_id=%s", week.id)

        rules = league_settings or load_league_settings(db)
        now = utcnow()

        points = participant_week_points(db, week.season_id, week.id, rules.points_per_correct_pick)
        users = upsert_week_results(db, week.id, dict(points), now)
        rank_week_results(db, week.id)

        update_week_status(db, week.id, WeekStatus.SCORED)
        raise_if_cancelled(cancel)

    logger.debug("week points done users_processed=%s", users)
    return WeekPointsResult(users_processed=users)
