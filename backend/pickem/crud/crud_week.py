# pickem/crud/crud_week.py
from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from pickem.models.game import GAME_FINAL, Game
from pickem.models.pick import Pick
from pickem.models.season import Season, SeasonParticipant
from pickem.models.teams import Team
from pickem.models.week import Week, WeekStatus
from pickem.core.errors import TeamMappingError, WeekNotFoundError
from pickem.services.time_utils import utcnow


@dataclass(frozen=True)
class WeekWithYear:
    id: int
    season_id: int
    number: int
    status: str
    year: int
    is_postseason: bool


@contextmanager
def atomic(db: Session) -> Iterator[Session]:
    """One commit for everything inside; any exception rolls it all back."""
    try:
        yield db
        db.commit()
    except BaseException:
        db.rollback()
        raise


def get_week_with_year(db: Session, week_id: int) -> WeekWithYear:
    row = (
        db.query(Week.id, Week.season_id, Week.number, Week.status, Season.year, Season.is_postseason)
        .join(Season, Season.id == Week.season_id)
        .filter(Week.id == week_id)
        .one_or_none()
    )
    if row is None:
        raise WeekNotFoundError(week_id)

    return WeekWithYear(
        id=row.id,
        season_id=row.season_id,
        number=row.number,
        status=row.status,
        year=row.year,
        is_postseason=bool(row.is_postseason),
    )


def get_week_status(db: Session, week_id: int) -> str:
    status = db.query(Week.status).filter(Week.id == week_id).scalar()
    if status is None:
        raise WeekNotFoundError(week_id)
    return status


def get_week_for_update(db: Session, week_id: int) -> Week:
    week = db.query(Week).filter(Week.id == week_id).with_for_update().one_or_none()
    if week is None:
        raise WeekNotFoundError(week_id)
    return week


def update_week_status(db: Session, week_id: int, status: WeekStatus, **extra) -> None:
    values = {"status": status.value, "updated_at": utcnow()}
    values.update(extra)
    db.query(Week).filter(Week.id == week_id).update(values, synchronize_session="fetch")


def get_open_week(db: Session, season_id: int) -> Optional[Week]:
    return (
        db.query(Week)
        .filter(Week.season_id == season_id, Week.status != WeekStatus.FINAL.value)
        .order_by(Week.number.asc())
        .first()
    )


def get_last_week_for_update(db: Session, season_id: int) -> Optional[Week]:
    return (
        db.query(Week)
        .filter(Week.season_id == season_id)
        .order_by(Week.number.desc())
        .with_for_update()
        .first()
    )


def get_previous_week_id(db: Session, season_id: int, number: int) -> Optional[int]:
    # by sequence number within the season, never by time
    return (
        db.query(Week.id)
        .filter(Week.season_id == season_id, Week.number < number)
        .order_by(Week.number.desc())
        .limit(1)
        .scalar()
    )


# --- games / picks ---

def get_week_games(db: Session, week_id: int) -> List[Game]:
    return db.query(Game).filter(Game.week_id == week_id).order_by(Game.kickoff_time.asc(), Game.id.asc()).all()


def get_week_picks(db: Session, week_id: int) -> List[Pick]:
    return db.query(Pick).filter(Pick.week_id == week_id).all()


def count_games(db: Session, week_id: int) -> int:
    return db.query(func.count(Game.id)).filter(Game.week_id == week_id).scalar() or 0


def count_games_not_final(db: Session, week_id: int) -> int:
    return (
        db.query(func.count(Game.id))
        .filter(Game.week_id == week_id, Game.status != GAME_FINAL)
        .scalar()
        or 0
    )


def count_games_without_spread(db: Session, week_id: int) -> int:
    return (
        db.query(func.count(Game.id))
        .filter(Game.week_id == week_id, Game.home_spread.is_(None))
        .scalar()
        or 0
    )


def delete_week_games(db: Session, week_id: int) -> int:
    return db.query(Game).filter(Game.week_id == week_id).delete(synchronize_session=False)


def get_team_id_by_abbreviation(db: Session, abbreviation: str) -> int:
    team_id = (
        db.query(Team.id)
        .filter(Team.abbreviation == abbreviation, Team.is_active == True)  # noqa: E712
        .scalar()
    )
    if team_id is None:
        raise TeamMappingError(abbreviation)
    return team_id


def is_user_season_participant(db: Session, week_id: int, user_id: int) -> bool:
    hit = (
        db.query(SeasonParticipant.id)
        .join(Week, Week.season_id == SeasonParticipant.season_id)
        .filter(Week.id == week_id, SeasonParticipant.user_id == user_id)
        .first()
    )
    return hit is not None
