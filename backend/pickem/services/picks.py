# pickem/services/picks.py
from __future__ import annotations

from datetime import timedelta
from typing import Iterable, List, Optional, Tuple

from sqlalchemy.orm import Session

from pickem.crud.crud_week import atomic, is_user_season_participant
from pickem.models.game import Game
from pickem.models.pick import Pick
from pickem.core.errors import (
    InvalidPickError,
    NotParticipantError,
    PickLockedError,
    PickWindowClosedError,
)
from pickem.services.league_settings import LeagueSettings, load_league_settings
from pickem.services.time_utils import as_utc, utcnow


def submit_picks(
    db: Session,
    user_id: int,
    week_id: int,
    picks: Iterable[Tuple[int, Optional[int]]],
    *,
    league_settings: Optional[LeagueSettings] = None,
) -> int:
    """Create or change (game_id, selected_team_id) picks for one user.

    The cutoff check runs up front for a clear error. The write itself still
    refuses locked picks and games that have kicked off.
    """
    picks = list(picks)
    if not picks:
        raise InvalidPickError("No picks provided")

    if not is_user_season_participant(db, week_id, user_id):
        raise NotParticipantError("You are not a participant in this season")

    seen = set()
    for game_id, _ in picks:
        if game_id in seen:
            raise InvalidPickError("Duplicate pick for game", game_id=game_id)
        seen.add(game_id)

    rules = league_settings or load_league_settings(db)

    with atomic(db):
        games = {
            g.id: g
            for g in db.query(Game).filter(Game.week_id == week_id).with_for_update(read=True).all()
        }

        now = utcnow()
        for game_id, team_id in picks:
            game = games.get(game_id)
            if game is None:
                raise InvalidPickError("Invalid game", game_id=game_id)

            if rules.cutoff_enabled:
                cutoff = as_utc(game.kickoff_time) - timedelta(minutes=rules.pick_cutoff_minutes)
                if now > cutoff:
                    raise PickWindowClosedError("This game's pick window has closed", game_id=game_id)

            if team_id is not None and team_id not in (game.home_team_id, game.away_team_id):
                raise InvalidPickError("Selected team does not belong to this game", game_id=game_id)

        for game_id, team_id in picks:
            game = games[game_id]
            started = now >= as_utc(game.kickoff_time)
            if started and not rules.allow_picks_after_kickoff:
                raise PickLockedError("Pick is locked or game has started", game_id=game_id)

            existing = db.query(Pick).filter_by(user_id=user_id, game_id=game_id).first()
            if existing is None:
                db.add(Pick(user_id=user_id, game_id=game_id, week_id=week_id, selected_team_id=team_id))
                continue

            if existing.user_locked_at is not None:
                raise PickLockedError("Pick is locked or game has started", game_id=game_id)
            existing.selected_team_id = team_id
            existing.updated_at = now

    return len(picks)


def lock_week_picks(db: Session, user_id: int, week_id: int) -> int:
    """Freeze every pick the user has for the week. Locked picks never change again."""
    if not is_user_season_participant(db, week_id, user_id):
        raise NotParticipantError("You are not a participant in this season")

    with atomic(db):
        mine: List[Pick] = (
            db.query(Pick)
            .filter(Pick.user_id == user_id, Pick.week_id == week_id)
            .with_for_update()
            .all()
        )
        if not mine:
            raise InvalidPickError("No picks to lock")
        if any(p.user_locked_at is not None for p in mine):
            raise PickLockedError("Picks already locked")
        if any(p.selected_team_id is None for p in mine):
            raise InvalidPickError("All picks must be selected before locking")

        now = utcnow()
        for p in mine:
            p.user_locked_at = now

    return len(mine)
