# pickem/services/import_scores.py
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import List, Optional

from sqlalchemy.orm import Session

from pickem.crud.crud_week import (
    atomic,
    count_games,
    count_games_not_final,
    get_week_with_year,
    update_week_status,
)
from pickem.external.schedule_client import BallDontLieClient, ScheduleSource
from pickem.models.game import GAME_FINAL, Game
from pickem.models.week import WeekStatus
from pickem.core.errors import InvalidWeekStateError, raise_if_cancelled
from pickem.services.time_utils import utcnow

logger = logging.getLogger(__name__)


@dataclass
class ImportScoresResult:
    games_updated: int
    all_games_played: bool
    games_in_db: int
    games_from_api: int
    unmatched_game_ids: List[int] = field(default_factory=list)


def import_scores_for_week(
    db: Session,
    week_id: int,
    *,
    schedule_source: Optional[ScheduleSource] = None,
    cancel: Optional[threading.Event] = None,
) -> ImportScoresResult:
    """active -> played once every game is final; otherwise stays active.

    Safe to call on a timer until the last game finishes.
    """
    with atomic(db):
        week = get_week_with_year(db, week_id)
        if week.status != WeekStatus.ACTIVE.value:
            raise InvalidWeekStateError(week.id, WeekStatus.ACTIVE, week.status)

        logger.debug(
            "fetching scores week_number=%s postseason=%s year=%s",
            week.number, week.is_postseason, week.year,
        )

        raise_if_cancelled(cancel)
        source = schedule_source or BallDontLieClient.from_settings()
        external_games = source.fetch_games(week.year, week.number, week.is_postseason)

        games_in_db = count_games(db, week.id)

        updated = 0
        unmatched: List[int] = []
        missing_scores: List[int] = []
        now = utcnow()

        for eg in external_games:
            # only completed games; live scores are left alone
            if not eg.is_final:
                continue
            # a final without a score stays scheduled; the week keeps waiting
            if eg.home_team_score is None or eg.away_team_score is None:
                missing_scores.append(eg.id)
                continue

            rows = (
                db.query(Game)
                .filter(Game.external_game_id == eg.id, Game.week_id == week.id)
                .update(
                    {
                        "home_score": eg.home_team_score,
                        "away_score": eg.away_team_score,
                        "status": GAME_FINAL,
                        "updated_at": now,
                    },
                    synchronize_session="fetch",
                )
            )
            if rows == 0:
                unmatched.append(eg.id)
            else:
                updated += rows

        all_played = count_games_not_final(db, week.id) == 0
        if all_played:
            update_week_status(db, week.id, WeekStatus.PLAYED)
            logger.debug("all games final, week_id=%s set to played", week.id)

        raise_if_cancelled(cancel)

    if missing_scores:
        logger.warning(
            "external games reported final without scores missing_count=%s game_ids=%s",
            len(missing_scores), missing_scores,
        )

    if unmatched:
        logger.warning(
            "some external games did not match any game in database unmatched_count=%s unmatched_ids=%s",
            len(unmatched), unmatched,
        )

    logger.debug(
        "score import done games_updated=%s games_in_db=%s games_from_api=%s all_games_played=%s",
        updated, games_in_db, len(external_games), all_played,
    )

    return ImportScoresResult(
        games_updated=updated,
        all_games_played=all_played,
        games_in_db=games_in_db,
        games_from_api=len(external_games),
        unmatched_game_ids=unmatched,
    )
