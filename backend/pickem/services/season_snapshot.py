# pickem/services/season_snapshot.py
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.orm import Session

from pickem.crud.crud_results import (
    get_standing_points,
    get_week_points,
    rank_season_standings,
    upsert_season_standings,
)
from pickem.crud.crud_week import atomic, get_previous_week_id, get_week_with_year, update_week_status
from pickem.models.week import WeekStatus
from pickem.core.errors import InvalidWeekStateError, raise_if_cancelled
from pickem.services.time_utils import utcnow

logger = logging.getLogger(__name__)


@dataclass
class SeasonSnapshotResult:
    users_processed: int


def calculate_season_snapshot(
    db: Session,
    week_id: int,
    *,
    cancel: Optional[threading.Event] = None,
) -> SeasonSnapshotResult:
    """scored -> final. Cumulative standings chained off the previous week's snapshot."""
    with atomic(db):
        week = get_week_with_year(db, week_id)
        if week.status != WeekStatus.SCORED.value:
            raise InvalidWeekStateError(week.id, WeekStatus.SCORED, week.status)

        logger.debug("calculating season snapshot week_id=%s season_id=%s", week.id, week.season_id)

        this_week = get_week_points(db, week.id)

        prev_week_id = get_previous_week_id(db, week.season_id, week.number)
        previous = get_standing_points(db, week.season_id, prev_week_id) if prev_week_id else {}

        # only users with a result this week get a standing row
        cumulative = {uid: previous.get(uid, 0) + pts for uid, pts in this_week.items()}

        now = utcnow()
        users = upsert_season_standings(db, week.season_id, week.id, cumulative, now)
        rank_season_standings(db, week.season_id, week.id)

        update_week_status(db, week.id, WeekStatus.FINAL, closed_at=now)
        raise_if_cancelled(cancel)

    logger.debug("season snapshot done users_processed=%s status=final", users)
    return SeasonSnapshotResult(users_processed=users)
