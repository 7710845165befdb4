# pickem/services/import_games.py
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from pickem.crud.crud_week import (
    atomic,
    delete_week_games,
    get_team_id_by_abbreviation,
    get_week_with_year,
    update_week_status,
)
from pickem.external.schedule_client import BallDontLieClient, ExternalGame, ScheduleSource
from pickem.models.game import GAME_SCHEDULED, Game
from pickem.models.week import WeekStatus
from pickem.core.errors import (
    DataAvailabilityError,
    InvalidWeekStateError,
    NoGamesFromSourceError,
    raise_if_cancelled,
)

logger = logging.getLogger(__name__)


@dataclass
class ImportGamesResult:
    games_created: int


@dataclass(frozen=True)
class _ValidatedGame:
    external_id: int
    kickoff_time: datetime
    home_team_id: int
    away_team_id: int
    home_team_abbr: str
    away_team_abbr: str


def _validate(db: Session, external_games: List[ExternalGame]) -> List[_ValidatedGame]:
    # one unmapped abbreviation fails the whole import
    out: List[_ValidatedGame] = []
    for g in external_games:
        if g.date is None:
            raise DataAvailabilityError(f"external game {g.id} has no kickoff time")
        out.append(
            _ValidatedGame(
                external_id=g.id,
                kickoff_time=g.date,
                home_team_id=get_team_id_by_abbreviation(db, g.home_team.abbreviation),
                away_team_id=get_team_id_by_abbreviation(db, g.away_team.abbreviation),
                home_team_abbr=g.home_team.abbreviation,
                away_team_abbr=g.away_team.abbreviation,
            )
        )
    return out


def import_games_for_week(
    db: Session,
    week_id: int,
    acting_user_id: Optional[int],
    *,
    schedule_source: Optional[ScheduleSource] = None,
    cancel: Optional[threading.Event] = None,
) -> ImportGamesResult:
    """draft -> games_imported.

    Replaces every game of the week with the provider's schedule. The replace is
    a plain delete-then-insert on purpose: re-importing a draft week picks up
    reschedules without any diffing. All or nothing.
    """
    with atomic(db):
        week = get_week_with_year(db, week_id)
        logger.debug("beginning game import week_number=%s week_id=%s", week.number, week.id)

        if week.status != WeekStatus.DRAFT.value:
            raise InvalidWeekStateError(week.id, WeekStatus.DRAFT, week.status)

        raise_if_cancelled(cancel)
        source = schedule_source or BallDontLieClient.from_settings()
        external_games = source.fetch_games(week.year, week.number, week.is_postseason)

        if not external_games:
            raise NoGamesFromSourceError(week.year, week.number, week.is_postseason)

        validated = _validate(db, external_games)

        delete_week_games(db, week.id)

        db.add_all([
            Game(
                week_id=week.id,
                season_id=week.season_id,
                external_game_id=g.external_id,
                kickoff_time=g.kickoff_time,
                home_team_id=g.home_team_id,
                away_team_id=g.away_team_id,
                home_team_abbr=g.home_team_abbr,
                away_team_abbr=g.away_team_abbr,
                home_spread=None,
                neutral_site=False,
                status=GAME_SCHEDULED,
                created_by=acting_user_id,
            )
            for g in validated
        ])

        update_week_status(db, week.id, WeekStatus.GAMES_IMPORTED)
        raise_if_cancelled(cancel)

    logger.debug("game import done week_id=%s games_created=%s", week_id, len(validated))
    return ImportGamesResult(games_created=len(validated))
