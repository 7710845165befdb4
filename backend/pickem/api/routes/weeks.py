from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from pickem.core.security import get_current_user, get_db
from pickem.crud.crud_week import get_open_week, get_week_games
from pickem.models.week import Week
from pickem.schemas.weeks import GameOut, WeekDetailOut, WeekOut

router = APIRouter(prefix="/api/v1", tags=["weeks"])


@router.get("/seasons/{season_id}/weeks", response_model=list[WeekOut])
def list_weeks(season_id: int, user=Depends(get_current_user), db: Session = Depends(get_db)):
    return db.query(Week).filter_by(season_id=season_id).order_by(Week.number.asc()).all()


@router.get("/seasons/{season_id}/current-week", response_model=WeekOut)
def current_week(season_id: int, user=Depends(get_current_user), db: Session = Depends(get_db)):
    week = get_open_week(db, season_id)
    if week is None:
        raise HTTPException(status_code=404, detail="No open week")
    return week


@router.get("/weeks/{week_id}", response_model=WeekDetailOut)
def get_week(week_id: int, user=Depends(get_current_user), db: Session = Depends(get_db)):
    week = db.query(Week).filter_by(id=week_id).first()
    if not week:
        raise HTTPException(status_code=404, detail="Week not found")

    out = WeekDetailOut.model_validate(week)
    out.games = [GameOut.model_validate(g) for g in get_week_games(db, week_id)]
    return out
