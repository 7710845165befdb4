# pickem/services/pick_results.py
from __future__ import annotations

import logging
import threading
from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from pickem.crud.crud_week import atomic, get_week_games, get_week_picks, get_week_status, update_week_status
from pickem.models.game import Game
from pickem.models.pick import Pick
from pickem.models.week import WeekStatus
from pickem.core.errors import DataAvailabilityError, InvalidWeekStateError, raise_if_cancelled
from pickem.services.time_utils import utcnow

logger = logging.getLogger(__name__)


@dataclass
class PickResultsResult:
    games_processed: int
    picks_updated: int


def winning_team_by_game(game: Game) -> Optional[int]:
    """Winner against the spread, or None for a push.

    home_score + home_spread is compared with away_score; a -3.5 spread means
    the home team has to win by 4.
    """
    if game.home_score is None or game.away_score is None or game.home_spread is None:
        raise DataAvailabilityError(f"game {game.id} has no final score or spread")

    adjusted_home = float(game.home_score) + float(game.home_spread)
    away = float(game.away_score)

    if adjusted_home > away:
        return game.home_team_id
    if adjusted_home < away:
        return game.away_team_id
    return None


def pick_correctness(selected_team_id: Optional[int], winning_team_id: Optional[int]) -> Optional[bool]:
    # no selection or a push -> NULL
    if selected_team_id is None or winning_team_id is None:
        return None
    return selected_team_id == winning_team_id


def calculate_pick_results(
    db: Session,
    week_id: int,
    *,
    cancel: Optional[threading.Event] = None,
) -> PickResultsResult:
    """played -> picks_results_calculated."""
    with atomic(db):
        status = get_week_status(db, week_id)
        if status != WeekStatus.PLAYED.value:
            raise InvalidWeekStateError(week_id, WeekStatus.PLAYED, status)

        logger.debug("calculating pick results week_id=%s", week_id)

        games = get_week_games(db, week_id)
        picks_by_game: Dict[int, List[Pick]] = defaultdict(list)
        for p in get_week_picks(db, week_id):
            picks_by_game[p.game_id].append(p)

        # one timestamp for the whole run; it marks every pick, NULL results included
        now = utcnow()
        games_processed = 0
        picks_updated = 0

        for game in games:
            winner = winning_team_by_game(game)
            for p in picks_by_game.get(game.id, []):
                p.is_correct = pick_correctness(p.selected_team_id, winner)
                p.calculated_at = now
                picks_updated += 1
            games_processed += 1

        db.flush()
        update_week_status(db, week_id, WeekStatus.PICKS_RESULTS_CALCULATED)
        raise_if_cancelled(cancel)

    logger.debug("pick results done games_processed=%s picks_updated=%s", games_processed, picks_updated)
    return PickResultsResult(games_processed=games_processed, picks_updated=picks_updated)
