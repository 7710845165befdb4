# pickem/crud/crud_results.py
from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Tuple

from sqlalchemy import case, func, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

from pickem.models.pick import Pick
from pickem.models.results import SeasonStanding, WeekResult
from pickem.models.season import SeasonParticipant


def _insert(db: Session, model):
    # ON CONFLICT ... DO UPDATE exists in both dialects we run on
    if db.get_bind().dialect.name == "postgresql":
        return postgresql.insert(model)
    return sqlite.insert(model)


def participant_week_points(
    db: Session,
    season_id: int,
    week_id: int,
    points_per_correct_pick: int,
) -> List[Tuple[int, int]]:
    """(user_id, points) for every participant of the season; no picks = 0."""
    correct = func.coalesce(func.sum(case((Pick.is_correct == True, 1), else_=0)), 0)  # noqa: E712

    rows = (
        db.query(SeasonParticipant.user_id, correct.label("correct"))
        .outerjoin(
            Pick,
            (Pick.user_id == SeasonParticipant.user_id) & (Pick.week_id == week_id),
        )
        .filter(SeasonParticipant.season_id == season_id)
        .group_by(SeasonParticipant.user_id)
        .order_by(SeasonParticipant.user_id.asc())
        .all()
    )
    return [(int(user_id), int(n) * int(points_per_correct_pick)) for user_id, n in rows]


def upsert_week_results(db: Session, week_id: int, points_by_user: Dict[int, int], now: datetime) -> int:
    for user_id, points in points_by_user.items():
        stmt = _insert(db, WeekResult).values(
            user_id=user_id,
            week_id=week_id,
            points=points,
            computed_at=now,
            created_at=now,
            updated_at=now,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["user_id", "week_id"],
            set_={
                "points": stmt.excluded.points,
                "computed_at": stmt.excluded.computed_at,
                "updated_at": stmt.excluded.updated_at,
            },
        )
        db.execute(stmt)
    return len(points_by_user)


def rank_week_results(db: Session, week_id: int) -> None:
    # RANK(): ties share a rank and the next rank skips (10,10,7 -> 1,1,3)
    ranked = db.execute(
        select(
            WeekResult.id,
            func.rank().over(order_by=WeekResult.points.desc()).label("rnk"),
        ).where(WeekResult.week_id == week_id)
    ).all()

    for row_id, rnk in ranked:
        db.query(WeekResult).filter(WeekResult.id == row_id).update(
            {"rank": int(rnk)}, synchronize_session=False
        )


def get_week_points(db: Session, week_id: int) -> Dict[int, int]:
    rows = db.query(WeekResult.user_id, WeekResult.points).filter(WeekResult.week_id == week_id).all()
    return {int(u): int(p) for u, p in rows}


def get_standing_points(db: Session, season_id: int, week_id: int) -> Dict[int, int]:
    rows = (
        db.query(SeasonStanding.user_id, SeasonStanding.points)
        .filter(SeasonStanding.season_id == season_id, SeasonStanding.week_id == week_id)
        .all()
    )
    return {int(u): int(p) for u, p in rows}


def upsert_season_standings(
    db: Session,
    season_id: int,
    week_id: int,
    points_by_user: Dict[int, int],
    now: datetime,
) -> int:
    for user_id, points in points_by_user.items():
        stmt = _insert(db, SeasonStanding).values(
            user_id=user_id,
            season_id=season_id,
            week_id=week_id,
            points=points,
            computed_at=now,
            created_at=now,
            updated_at=now,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["user_id", "season_id", "week_id"],
            set_={
                "points": stmt.excluded.points,
                "computed_at": stmt.excluded.computed_at,
                "updated_at": stmt.excluded.updated_at,
            },
        )
        db.execute(stmt)
    return len(points_by_user)


def rank_season_standings(db: Session, season_id: int, week_id: int) -> None:
    ranked = db.execute(
        select(
            SeasonStanding.id,
            func.rank().over(order_by=SeasonStanding.points.desc()).label("rnk"),
        ).where(SeasonStanding.season_id == season_id, SeasonStanding.week_id == week_id)
    ).all()

    for row_id, rnk in ranked:
        db.query(SeasonStanding).filter(SeasonStanding.id == row_id).update(
            {"rank": int(rnk)}, synchronize_session=False
        )
