import logging
from dataclasses import asdict

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from pickem.api.errors import http_error
from pickem.core.config import settings
from pickem.core.security import get_db, require_commissioner
from pickem.models.week import Week
from pickem.schemas.weeks import (
    AdvanceSeasonOut,
    AutoImportSpreadsOut,
    AutoImportSpreadsRequest,
    GameOut,
    SpreadsRequest,
    WeekDetailOut,
    WeekOut,
)
from pickem.services.advance_week import advance_season
from pickem.core.errors import PickemError
from pickem.services.week_admin import activate_week, auto_import_spreads, set_spreads

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/commissioner", tags=["commissioner"])


@router.post("/seasons/{season_id}/advance", response_model=AdvanceSeasonOut)
def advance(season_id: int, user=Depends(require_commissioner), db: Session = Depends(get_db)):
    logger.info("advance season request season_id=%s user_id=%s", season_id, user.user_id)
    try:
        res = advance_season(db, season_id, user.user_id)
    except PickemError as e:
        logger.error("advance season failed season_id=%s error=%s", season_id, e)
        raise http_error(e)

    logger.info("advance season done season_id=%s action=%s week_id=%s status=%s",
                season_id, res.action, res.week_id, res.status)
    return AdvanceSeasonOut(action=res.action, week_id=res.week_id, status=res.status)


@router.put("/weeks/{week_id}/spreads", response_model=WeekDetailOut)
def put_spreads(week_id: int, payload: SpreadsRequest, user=Depends(require_commissioner), db: Session = Depends(get_db)):
    try:
        games = set_spreads(db, week_id, [(s.game_id, s.home_spread) for s in payload.spreads])
    except PickemError as e:
        raise http_error(e)

    week = db.query(Week).filter_by(id=week_id).one()
    out = WeekDetailOut.model_validate(week)
    out.games = [GameOut.model_validate(g) for g in games]
    return out


@router.post("/weeks/{week_id}/spreads/auto-import", response_model=AutoImportSpreadsOut)
def auto_import(
    week_id: int,
    payload: AutoImportSpreadsRequest | None = None,
    user=Depends(require_commissioner),
    db: Session = Depends(get_db),
):
    bookmaker = (payload.bookmaker if payload else None) or settings.ODDS_DEFAULT_BOOKMAKER
    try:
        res = auto_import_spreads(db, week_id, bookmaker)
    except PickemError as e:
        raise http_error(e)
    return AutoImportSpreadsOut(**asdict(res))


@router.post("/weeks/{week_id}/activate", response_model=WeekOut)
def activate(week_id: int, user=Depends(require_commissioner), db: Session = Depends(get_db)):
    try:
        activate_week(db, week_id)
    except PickemError as e:
        raise http_error(e)

    logger.info("week activated week_id=%s by=%s", week_id, user.user_id)
    return db.query(Week).filter_by(id=week_id).one()
