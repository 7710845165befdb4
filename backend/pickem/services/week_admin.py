# pickem/services/week_admin.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Iterable, List, Optional, Tuple

from sqlalchemy.orm import Session

from pickem.crud.crud_week import (
    atomic,
    count_games_without_spread,
    get_week_for_update,
    get_week_games,
    get_week_status,
    update_week_status,
)
from pickem.external.odds_client import OddsClient, OddsSource, SpreadQuote
from pickem.models.game import Game
from pickem.models.week import WeekStatus
from pickem.core.errors import (
    GameNotInWeekError,
    InvalidSpreadError,
    InvalidWeekStateError,
    MissingSpreadsError,
    NoGamesInWeekError,
    NoSpreadsMatchedError,
)
from pickem.services.time_utils import as_utc, utcnow

logger = logging.getLogger(__name__)

# spreads can still be edited until the week is activated
SPREAD_EDITABLE = (WeekStatus.GAMES_IMPORTED, WeekStatus.SPREADS_SET)

# absorbs timezone slips and small schedule moves between providers
KICKOFF_TOLERANCE = timedelta(hours=6)


def is_valid_spread(spread: float) -> bool:
    return abs(spread * 2 - round(spread * 2)) < 0.002


def _require_editable(db: Session, week_id: int) -> str:
    status = get_week_status(db, week_id)
    if status not in {s.value for s in SPREAD_EDITABLE}:
        raise InvalidWeekStateError(week_id, SPREAD_EDITABLE, status)
    return status


def set_spreads(db: Session, week_id: int, updates: Iterable[Tuple[int, Optional[float]]]) -> List[Game]:
    """Commissioner sets (game_id, home_spread) pairs; week moves to spreads_set."""
    updates = list(updates)

    # validate everything before touching rows
    for game_id, spread in updates:
        if spread is not None and not is_valid_spread(spread):
            raise InvalidSpreadError(game_id, spread)

    with atomic(db):
        _require_editable(db, week_id)

        now = utcnow()
        for game_id, spread in updates:
            rows = (
                db.query(Game)
                .filter(Game.id == game_id, Game.week_id == week_id)
                .update({"home_spread": spread, "updated_at": now}, synchronize_session="fetch")
            )
            if rows == 0:
                raise GameNotInWeekError(game_id, week_id)

        update_week_status(db, week_id, WeekStatus.SPREADS_SET)

    logger.info("spreads updated week_id=%s games=%s", week_id, len(updates))
    return get_week_games(db, week_id)


def times_are_close(t1: Optional[datetime], t2: Optional[datetime], tolerance: timedelta = KICKOFF_TOLERANCE) -> bool:
    if t1 is None or t2 is None:
        return False
    return abs(as_utc(t1) - as_utc(t2)) <= tolerance


def match_spread(game: Game, quotes: List[SpreadQuote]) -> Optional[SpreadQuote]:
    for q in quotes:
        if q.home_team_abbr != game.home_team_abbr or q.away_team_abbr != game.away_team_abbr:
            continue
        if times_are_close(q.commence_time, game.kickoff_time):
            return q
        logger.warning(
            "teams match but kickoff times too different game_id=%s matchup=%s@%s db_kickoff=%s odds_kickoff=%s",
            game.id, game.away_team_abbr, game.home_team_abbr, game.kickoff_time, q.commence_time,
        )
    return None


@dataclass
class AutoImportSpreadsResult:
    games_updated: int
    games_total: int
    bookmaker: str
    week_status: str
    unmatched_games: List[str] = field(default_factory=list)


def auto_import_spreads(
    db: Session,
    week_id: int,
    bookmaker: str,
    *,
    odds_source: Optional[OddsSource] = None,
) -> AutoImportSpreadsResult:
    with atomic(db):
        _require_editable(db, week_id)

        games = get_week_games(db, week_id)
        if not games:
            raise NoGamesInWeekError(week_id)

        source = odds_source or OddsClient.from_settings()
        quotes = source.fetch_spreads(bookmaker)
        logger.info("fetched spreads from odds API week_id=%s spread_count=%s", week_id, len(quotes))

        matched = 0
        unmatched: List[str] = []
        now = utcnow()

        for game in games:
            q = match_spread(game, quotes)
            if q is None:
                unmatched.append(f"{game.away_team_abbr} @ {game.home_team_abbr} (kickoff: {as_utc(game.kickoff_time):%b %d %H:%M UTC})")
                logger.warning("no spread found for game game_id=%s", game.id)
                continue

            game.home_spread = q.home_spread
            game.updated_at = now
            matched += 1

        if matched == 0:
            raise NoSpreadsMatchedError(week_id)

        db.flush()
        update_week_status(db, week_id, WeekStatus.SPREADS_SET)

    logger.info("imported spreads week_id=%s games_updated=%s games_total=%s", week_id, matched, len(games))
    return AutoImportSpreadsResult(
        games_updated=matched,
        games_total=len(games),
        bookmaker=bookmaker,
        week_status=WeekStatus.SPREADS_SET.value,
        unmatched_games=unmatched,
    )


def activate_week(db: Session, week_id: int) -> None:
    """spreads_set -> active, under a row lock so two callers cannot both activate."""
    logger.info("activate week request week_id=%s", week_id)

    with atomic(db):
        week = get_week_for_update(db, week_id)

        if week.status != WeekStatus.SPREADS_SET.value:
            raise InvalidWeekStateError(week_id, WeekStatus.SPREADS_SET, week.status)

        missing = count_games_without_spread(db, week_id)
        if missing > 0:
            raise MissingSpreadsError(week_id, missing)

        now = utcnow()
        update_week_status(db, week_id, WeekStatus.ACTIVE, activated_at=now)

    logger.info("week activated week_id=%s", week_id)
