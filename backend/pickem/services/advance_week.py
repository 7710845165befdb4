# pickem/services/advance_week.py
from __future__ import annotations

import enum
import logging
import threading
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from sqlalchemy.orm import Session

from pickem.crud.crud_week import atomic, get_last_week_for_update, get_open_week
from pickem.external.schedule_client import ScheduleSource
from pickem.models.season import Season
from pickem.models.week import Week, WeekStatus
from pickem.core.errors import (
    InvalidWeekStatusError,
    PreviousWeekNotFinalError,
    SeasonCompleteError,
    SeasonNotFoundError,
)
from pickem.services.import_games import import_games_for_week
from pickem.services.import_scores import import_scores_for_week
from pickem.services.league_settings import LeagueSettings
from pickem.services.pick_results import calculate_pick_results
from pickem.services.season_snapshot import calculate_season_snapshot
from pickem.services.week_points import calculate_week_points

logger = logging.getLogger(__name__)


class AdvanceOutcome(str, enum.Enum):
    FINAL = "final"
    MANUAL_ACTION_REQUIRED = "manual_action_required"
    WAITING_FOR_GAMES = "waiting_for_games"


@dataclass
class StageContext:
    db: Session
    acting_user_id: Optional[int]
    schedule_source: Optional[ScheduleSource]
    league_settings: Optional[LeagueSettings]
    cancel: Optional[threading.Event]


# A stage returns None to keep looping, or an outcome to stop.
Stage = Callable[[StageContext, Week], Optional[AdvanceOutcome]]


def _import_games(ctx: StageContext, week: Week) -> Optional[AdvanceOutcome]:
    logger.debug("importing games for week_number=%s", week.number)
    res = import_games_for_week(
        ctx.db, week.id, ctx.acting_user_id,
        schedule_source=ctx.schedule_source, cancel=ctx.cancel,
    )
    logger.debug("imported games, status now games_imported games_created=%s", res.games_created)
    return None


def _wait_for_spreads(ctx: StageContext, week: Week) -> Optional[AdvanceOutcome]:
    logger.debug("waiting for commissioner to set spreads week_number=%s", week.number)
    return AdvanceOutcome.MANUAL_ACTION_REQUIRED


def _wait_for_activation(ctx: StageContext, week: Week) -> Optional[AdvanceOutcome]:
    logger.debug("waiting for commissioner to activate week_number=%s", week.number)
    return AdvanceOutcome.MANUAL_ACTION_REQUIRED


def _import_scores(ctx: StageContext, week: Week) -> Optional[AdvanceOutcome]:
    logger.debug("importing scores for week_number=%s", week.number)
    res = import_scores_for_week(
        ctx.db, week.id, schedule_source=ctx.schedule_source, cancel=ctx.cancel
    )
    logger.debug(
        "score import complete games_updated=%s games_in_db=%s games_from_api=%s unmatched_count=%s all_games_played=%s",
        res.games_updated, res.games_in_db, res.games_from_api,
        len(res.unmatched_game_ids), res.all_games_played,
    )
    if not res.all_games_played:
        return AdvanceOutcome.WAITING_FOR_GAMES
    return None


def _pick_results(ctx: StageContext, week: Week) -> Optional[AdvanceOutcome]:
    logger.debug("calculating pick results for week_number=%s", week.number)
    res = calculate_pick_results(ctx.db, week.id, cancel=ctx.cancel)
    logger.debug("processed games_processed=%s picks_updated=%s", res.games_processed, res.picks_updated)
    return None


def _week_points(ctx: StageContext, week: Week) -> Optional[AdvanceOutcome]:
    logger.debug("calculating week points for week_number=%s", week.number)
    res = calculate_week_points(
        ctx.db, week.id, league_settings=ctx.league_settings, cancel=ctx.cancel
    )
    logger.debug("processed users_processed=%s", res.users_processed)
    return None


def _season_snapshot(ctx: StageContext, week: Week) -> Optional[AdvanceOutcome]:
    logger.debug("calculating season snapshot for week_number=%s", week.number)
    res = calculate_season_snapshot(ctx.db, week.id, cancel=ctx.cancel)
    logger.debug("processed users_processed=%s, week now final", res.users_processed)
    return None


def _done(ctx: StageContext, week: Week) -> Optional[AdvanceOutcome]:
    logger.debug("week is final week_number=%s", week.number)
    return AdvanceOutcome.FINAL


STAGES: Dict[WeekStatus, Stage] = {
    WeekStatus.DRAFT: _import_games,
    WeekStatus.GAMES_IMPORTED: _wait_for_spreads,
    WeekStatus.SPREADS_SET: _wait_for_activation,
    WeekStatus.ACTIVE: _import_scores,
    WeekStatus.PLAYED: _pick_results,
    WeekStatus.PICKS_RESULTS_CALCULATED: _week_points,
    WeekStatus.SCORED: _season_snapshot,
    WeekStatus.FINAL: _done,
}

# every status needs a handler; fail at import time, not mid-season
if set(STAGES) != set(WeekStatus):
    raise RuntimeError("STAGES must cover every WeekStatus")


def _status_of(week: Week) -> WeekStatus:
    try:
        return WeekStatus(week.status)
    except ValueError:
        raise InvalidWeekStatusError(week.status) from None


def advance_week_state(
    db: Session,
    week: Week,
    acting_user_id: Optional[int] = None,
    *,
    schedule_source: Optional[ScheduleSource] = None,
    league_settings: Optional[LeagueSettings] = None,
    cancel: Optional[threading.Event] = None,
) -> AdvanceOutcome:
    """Drive `week` forward until a manual checkpoint, a wait, or final.

    Each automated stage commits on its own; `week` is refreshed from the
    database after every one of them. Nothing is retried here: an exception
    leaves the week at the status of the stage that failed, and calling again
    re-runs that stage.
    """
    ctx = StageContext(
        db=db,
        acting_user_id=acting_user_id,
        schedule_source=schedule_source,
        league_settings=league_settings,
        cancel=cancel,
    )

    while True:
        stage = STAGES.get(_status_of(week))
        if stage is None:
            raise InvalidWeekStatusError(week.status)

        outcome = stage(ctx, week)
        if outcome is not None:
            return outcome

        # reload: the stage wrote the new status in its own transaction
        db.refresh(week)


def create_next_week(db: Session, season_id: int, acting_user_id: Optional[int] = None) -> Week:
    """Create the next draft week, serialised on a row lock of the latest week."""
    with atomic(db):
        season = db.query(Season).filter(Season.id == season_id).one_or_none()
        if season is None:
            raise SeasonNotFoundError(season_id)

        last = get_last_week_for_update(db, season_id)

        next_number = 1
        if last is not None:
            if last.status != WeekStatus.FINAL.value:
                raise PreviousWeekNotFinalError(
                    f"previous week {last.number} of season {season_id} not final (status: {last.status})"
                )
            next_number = last.number + 1

        if next_number > season.number_of_weeks:
            raise SeasonCompleteError(season_id)

        week = Week(
            season_id=season_id,
            number=next_number,
            status=WeekStatus.DRAFT.value,
            created_by=acting_user_id,
        )
        db.add(week)

    db.refresh(week)
    logger.debug("new week created week_number=%s week_id=%s", week.number, week.id)
    return week


ACTION_WEEK_ADVANCED = "week_advanced"
ACTION_MANUAL = "manual_action_required"
ACTION_WAITING = "waiting_for_games"
ACTION_SEASON_COMPLETE = "season_complete"

_ACTION_BY_OUTCOME = {
    AdvanceOutcome.FINAL: ACTION_WEEK_ADVANCED,
    AdvanceOutcome.MANUAL_ACTION_REQUIRED: ACTION_MANUAL,
    AdvanceOutcome.WAITING_FOR_GAMES: ACTION_WAITING,
}


@dataclass
class AdvanceSeasonResult:
    action: str
    week_id: Optional[int] = None
    status: Optional[str] = None


def advance_season(
    db: Session,
    season_id: int,
    acting_user_id: Optional[int] = None,
    *,
    schedule_source: Optional[ScheduleSource] = None,
    league_settings: Optional[LeagueSettings] = None,
    cancel: Optional[threading.Event] = None,
) -> AdvanceSeasonResult:
    """Advance whichever week of the season is still open, creating one if needed."""
    week = get_open_week(db, season_id)

    if week is None:
        logger.info("no open week for season_id=%s, creating next week", season_id)
        try:
            week = create_next_week(db, season_id, acting_user_id)
        except SeasonCompleteError:
            return AdvanceSeasonResult(action=ACTION_SEASON_COMPLETE)

    logger.debug("advancing week_number=%s week_id=%s", week.number, week.id)
    outcome = advance_week_state(
        db, week, acting_user_id,
        schedule_source=schedule_source,
        league_settings=league_settings,
        cancel=cancel,
    )

    # the stages persisted their own status; show what is stored now
    db.refresh(week)
    return AdvanceSeasonResult(
        action=_ACTION_BY_OUTCOME[outcome],
        week_id=week.id,
        status=week.status,
    )
